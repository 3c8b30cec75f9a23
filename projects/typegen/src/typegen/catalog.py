"""Static knowledge of the platform's built-in collections."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from typegen.types import IdKind, RelationshipKind

M2O = RelationshipKind.MANY_TO_ONE
O2M = RelationshipKind.ONE_TO_MANY

# Default storage kinds of well-known system field names
BOOLEAN_FIELDS = {
    "admin_access",
    "app_access",
    "email_notifications",
    "enabled",
    "hidden",
    "readonly",
    "required",
    "singleton",
    "versioning",
    "archive_app_filter",
    "public_registration",
    "public_registration_verify_email",
    "was_active_before_deprecation",
}
INTEGER_FIELDS = {
    "width",
    "height",
    "duration",
    "filesize",
    "sort",
    "limit",
    "position_x",
    "position_y",
    "refresh_interval",
    "auth_login_attempts",
    "focal_point_x",
    "focal_point_y",
}
TIMESTAMP_FIELDS = {
    "last_access",
    "uploaded_on",
    "modified_on",
    "created_on",
    "date_created",
    "date_updated",
    "timestamp",
}
JSON_FIELDS = {
    "auth_data",
    "theme_light_overrides",
    "theme_dark_overrides",
    "tags",
    "metadata",
    "options",
    "permissions",
    "validation",
    "presets",
    "layout_query",
    "layout_options",
    "data",
    "delta",
    "translations",
    "storage_asset_presets",
    "focal_point",
    "conditions",
}
CSV_FIELDS = {
    "fields",
    "special",
    "actions",
    "collections",
    "one_allowed_collections",
    "ip_access",
}


def field_kind(name: str) -> str:
    """Return the default storage kind of a system field name."""
    if name in BOOLEAN_FIELDS:
        return "boolean"
    if name in INTEGER_FIELDS:
        return "integer"
    if name in TIMESTAMP_FIELDS:
        return "timestamp"
    if name in JSON_FIELDS:
        return "json"
    if name in CSV_FIELDS:
        return "csv"
    return "string"


@dataclass(frozen=True)
class SystemLink:
    """An internal relationship of a system collection."""

    field: str
    target: str
    kind: RelationshipKind = M2O


@dataclass(frozen=True)
class SystemEntity:
    """Canonical shape of one built-in collection."""

    name: str
    type_name: str
    id_kind: IdKind
    fields: tuple[str, ...]
    links: tuple[SystemLink, ...] = ()
    primary_key: str = "id"
    singleton: bool = False


@dataclass(frozen=True)
class SystemCatalog:
    """Lookup table of built-in collections, injected into the pipeline."""

    entities: Mapping[str, SystemEntity]
    prefix: str = "directus_"
    type_prefix: str = "Directus"
    essential: tuple[str, ...] = ()
    special_links: Mapping[str, str] = field(default_factory=dict)

    def is_system(self, name: str) -> bool:
        """Check whether a collection name denotes a built-in collection."""
        return name.startswith(self.prefix)

    def get(self, name: str) -> SystemEntity | None:
        """Return the catalog entry for a collection, if known."""
        return self.entities.get(name)

    def links(self, name: str) -> tuple[SystemLink, ...]:
        """Return the internal relationships of a collection."""
        entry = self.entities.get(name)
        return entry.links if entry else ()

    def id_kind(self, name: str) -> IdKind | None:
        """Return the catalog ID kind of a collection, if known."""
        entry = self.entities.get(name)
        return entry.id_kind if entry else None

    def field_kind(self, name: str, field_name: str) -> str:
        """Return the storage kind of a catalog field."""
        entry = self.entities.get(name)
        if entry is None:
            return field_kind(field_name)
        if field_name == entry.primary_key:
            return _storage_kind(entry.id_kind, text=entry.primary_key != "id")
        for link in entry.links:
            if link.field == field_name:
                if link.kind.to_many:
                    return "alias"
                return _storage_kind(self.id_kind(link.target) or "string")
        return field_kind(field_name)


def _storage_kind(id_kind: IdKind, *, text: bool = False) -> str:
    if id_kind == "number":
        return "integer"
    return "string" if text else "uuid"


def _entity(  # noqa: PLR0913
    name: str,
    type_name: str,
    id_kind: IdKind,
    fields: Iterable[str],
    links: Iterable[tuple[str, str] | tuple[str, str, RelationshipKind]] = (),
    *,
    primary_key: str = "id",
    singleton: bool = False,
) -> tuple[str, SystemEntity]:
    entry = SystemEntity(
        name=name,
        type_name=type_name,
        id_kind=id_kind,
        fields=tuple(fields),
        links=tuple(SystemLink(*link) for link in links),
        primary_key=primary_key,
        singleton=singleton,
    )
    return name, entry


DEFAULT_CATALOG = SystemCatalog(
    entities=dict(
        (
            _entity(
                "directus_users",
                "DirectusUser",
                "string",
                (
                    "id",
                    "first_name",
                    "last_name",
                    "email",
                    "password",
                    "location",
                    "title",
                    "description",
                    "tags",
                    "avatar",
                    "language",
                    "tfa_secret",
                    "status",
                    "role",
                    "token",
                    "last_access",
                    "last_page",
                    "provider",
                    "external_identifier",
                    "auth_data",
                    "email_notifications",
                    "appearance",
                    "theme_dark",
                    "theme_light",
                    "theme_light_overrides",
                    "theme_dark_overrides",
                ),
                (
                    ("role", "directus_roles"),
                    ("avatar", "directus_files"),
                ),
            ),
            _entity(
                "directus_files",
                "DirectusFile",
                "string",
                (
                    "id",
                    "storage",
                    "filename_disk",
                    "filename_download",
                    "title",
                    "type",
                    "folder",
                    "uploaded_by",
                    "uploaded_on",
                    "modified_by",
                    "modified_on",
                    "charset",
                    "filesize",
                    "width",
                    "height",
                    "duration",
                    "embed",
                    "description",
                    "location",
                    "tags",
                    "metadata",
                    "created_on",
                    "focal_point_x",
                    "focal_point_y",
                    "tus_id",
                ),
                (
                    ("folder", "directus_folders"),
                    ("uploaded_by", "directus_users"),
                    ("modified_by", "directus_users"),
                ),
            ),
            _entity(
                "directus_folders",
                "DirectusFolder",
                "string",
                ("id", "name", "parent"),
                (("parent", "directus_folders"),),
            ),
            _entity(
                "directus_roles",
                "DirectusRole",
                "string",
                (
                    "id",
                    "name",
                    "icon",
                    "description",
                    "admin_access",
                    "app_access",
                    "parent",
                    "children",
                    "users",
                ),
                (
                    ("parent", "directus_roles"),
                    ("children", "directus_roles", O2M),
                    ("users", "directus_users", O2M),
                ),
            ),
            _entity(
                "directus_activity",
                "DirectusActivity",
                "number",
                (
                    "id",
                    "action",
                    "user",
                    "timestamp",
                    "ip",
                    "user_agent",
                    "collection",
                    "item",
                    "comment",
                    "origin",
                    "revisions",
                ),
                (
                    ("user", "directus_users"),
                    ("revisions", "directus_revisions", O2M),
                ),
            ),
            _entity(
                "directus_permissions",
                "DirectusPermission",
                "number",
                (
                    "id",
                    "role",
                    "policy",
                    "collection",
                    "action",
                    "permissions",
                    "validation",
                    "presets",
                    "fields",
                    "limit",
                ),
                (
                    ("role", "directus_roles"),
                    ("policy", "directus_policies"),
                ),
            ),
            _entity(
                "directus_fields",
                "DirectusField",
                "number",
                (
                    "id",
                    "collection",
                    "field",
                    "special",
                    "interface",
                    "display",
                    "readonly",
                    "hidden",
                    "sort",
                    "width",
                    "note",
                    "required",
                    "validation_message",
                ),
            ),
            _entity(
                "directus_collections",
                "DirectusCollection",
                "string",
                (
                    "collection",
                    "icon",
                    "note",
                    "display_template",
                    "hidden",
                    "singleton",
                    "archive_field",
                    "archive_app_filter",
                    "archive_value",
                    "unarchive_value",
                    "sort_field",
                    "accountability",
                    "color",
                    "sort",
                    "collapse",
                    "preview_url",
                    "versioning",
                ),
                primary_key="collection",
            ),
            _entity(
                "directus_presets",
                "DirectusPreset",
                "number",
                (
                    "id",
                    "bookmark",
                    "user",
                    "role",
                    "collection",
                    "search",
                    "layout",
                    "layout_query",
                    "layout_options",
                    "refresh_interval",
                    "icon",
                    "color",
                ),
                (
                    ("user", "directus_users"),
                    ("role", "directus_roles"),
                ),
            ),
            _entity(
                "directus_relations",
                "DirectusRelation",
                "number",
                (
                    "id",
                    "many_collection",
                    "many_field",
                    "one_collection",
                    "one_field",
                    "junction_field",
                    "one_collection_field",
                    "one_allowed_collections",
                    "sort_field",
                    "one_deselect_action",
                ),
            ),
            _entity(
                "directus_revisions",
                "DirectusRevision",
                "number",
                (
                    "id",
                    "activity",
                    "collection",
                    "item",
                    "data",
                    "delta",
                    "parent",
                    "version",
                ),
                (
                    ("activity", "directus_activity"),
                    ("parent", "directus_revisions"),
                    ("version", "directus_versions"),
                ),
            ),
            _entity(
                "directus_webhooks",
                "DirectusWebhook",
                "number",
                (
                    "id",
                    "name",
                    "method",
                    "url",
                    "status",
                    "data",
                    "actions",
                    "collections",
                    "was_active_before_deprecation",
                    "migrated_flow",
                ),
                (("migrated_flow", "directus_flows"),),
            ),
            _entity(
                "directus_flows",
                "DirectusFlow",
                "string",
                (
                    "id",
                    "name",
                    "icon",
                    "color",
                    "description",
                    "status",
                    "trigger",
                    "accountability",
                    "options",
                    "operation",
                    "date_created",
                    "user_created",
                    "operations",
                ),
                (
                    ("operation", "directus_operations"),
                    ("user_created", "directus_users"),
                    ("operations", "directus_operations", O2M),
                ),
            ),
            _entity(
                "directus_operations",
                "DirectusOperation",
                "string",
                (
                    "id",
                    "name",
                    "key",
                    "type",
                    "position_x",
                    "position_y",
                    "options",
                    "resolve",
                    "reject",
                    "flow",
                    "date_created",
                    "user_created",
                ),
                (
                    ("flow", "directus_flows"),
                    ("resolve", "directus_operations"),
                    ("reject", "directus_operations"),
                    ("user_created", "directus_users"),
                ),
            ),
            _entity(
                "directus_versions",
                "DirectusVersion",
                "string",
                (
                    "id",
                    "key",
                    "name",
                    "collection",
                    "item",
                    "hash",
                    "date_created",
                    "date_updated",
                    "user_created",
                    "user_updated",
                    "delta",
                ),
                (
                    ("user_created", "directus_users"),
                    ("user_updated", "directus_users"),
                ),
            ),
            _entity(
                "directus_extensions",
                "DirectusExtension",
                "string",
                ("id", "enabled", "folder", "source", "bundle"),
            ),
            _entity(
                "directus_comments",
                "DirectusComment",
                "string",
                (
                    "id",
                    "collection",
                    "item",
                    "comment",
                    "date_created",
                    "date_updated",
                    "user_created",
                    "user_updated",
                ),
                (
                    ("user_created", "directus_users"),
                    ("user_updated", "directus_users"),
                ),
            ),
            _entity(
                "directus_settings",
                "DirectusSettings",
                "number",
                (
                    "id",
                    "project_name",
                    "project_url",
                    "project_color",
                    "project_logo",
                    "public_foreground",
                    "public_background",
                    "public_note",
                    "auth_login_attempts",
                    "auth_password_policy",
                    "storage_asset_transform",
                    "storage_asset_presets",
                    "custom_css",
                    "storage_default_folder",
                    "mapbox_key",
                    "project_descriptor",
                    "default_language",
                    "default_appearance",
                    "default_theme_light",
                    "default_theme_dark",
                    "report_error_url",
                    "report_bug_url",
                    "report_feature_url",
                    "public_registration",
                    "public_registration_verify_email",
                ),
                (
                    ("project_logo", "directus_files"),
                    ("public_foreground", "directus_files"),
                    ("public_background", "directus_files"),
                    ("storage_default_folder", "directus_folders"),
                ),
                singleton=True,
            ),
        ),
    ),
    essential=(
        "directus_users",
        "directus_files",
        "directus_folders",
        "directus_roles",
    ),
    special_links={
        "user-created": "directus_users",
        "user-updated": "directus_users",
        "file": "directus_files",
    },
)
