"""Multi-pass conversion of a schema snapshot into type declarations."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from typegen.catalog import DEFAULT_CATALOG, SystemCatalog
from typegen.classifier import apply_relations
from typegen.context import ResolutionContext
from typegen.junctions import detect_junctions
from typegen.naming import NamingAuthority
from typegen.patterns import DEFAULT_PATTERNS, NamingPatterns
from typegen.resolver import resolve_aliases
from typegen.synthesizer import (
    RELATIONAL_SPECIALS,
    is_presentation_field,
    referenced_targets,
    synthesize_entity,
    synthesize_root,
)
from typegen.types import (
    Entity,
    Field,
    GenerateOptions,
    GenerationResult,
    IdKind,
    Relationship,
    RelationshipKind,
)
from typegen.typescript_export import declarations_to_typescript

if TYPE_CHECKING:
    from typegen.types import Declaration, Snapshot, SnapshotField

logger = getLogger(__name__)

# Primary key storage hints
NUMERIC_ID_KINDS = frozenset({"integer", "bigInteger", "number"})
NUMERIC_ID_TYPES = frozenset({"integer", "int", "bigint", "smallint", "number"})
TEXT_ID_KINDS = frozenset({"uuid", "string"})
TEXT_ID_TYPES = frozenset({"uuid", "char", "varchar", "text", "character varying"})


def to_field(raw: SnapshotField) -> Field:
    """Convert a snapshot field entry to a pipeline field."""
    meta = raw.get("meta") or {}
    schema = raw.get("schema") or {}
    return Field(
        entity=raw["collection"],
        name=raw["field"],
        kind=raw.get("type") or "unknown",
        nullable=schema.get("is_nullable", True),
        special=tuple(meta.get("special") or ()),
        interface=meta.get("interface"),
        note=meta.get("note"),
        primary_key=bool(schema.get("is_primary_key")),
        auto_increment=bool(schema.get("has_auto_increment")),
        data_type=schema.get("data_type"),
        foreign_key_table=schema.get("foreign_key_table"),
        foreign_key_column=schema.get("foreign_key_column"),
    )


def id_kind_of(item: Field) -> IdKind | None:
    """Infer the ID kind stored by a key field."""
    data_type = (item.data_type or "").lower()
    if (
        item.kind in NUMERIC_ID_KINDS
        or data_type in NUMERIC_ID_TYPES
        or item.auto_increment
    ):
        return "number"
    if item.kind in TEXT_ID_KINDS or data_type in TEXT_ID_TYPES:
        return "string"
    return None


class SchemaPipeline:
    """Sequences the passes that turn a snapshot into declarations.

    Each call to `run` owns a fresh resolution context, so one pipeline can be
    reused for several snapshots.
    """

    def __init__(
        self,
        options: GenerateOptions | None = None,
        catalog: SystemCatalog = DEFAULT_CATALOG,
        patterns: NamingPatterns = DEFAULT_PATTERNS,
    ) -> None:
        self.options = options or GenerateOptions()
        self.catalog = catalog
        self.patterns = patterns

    def run(self, snapshot: Snapshot) -> GenerationResult:
        """Generate the TypeScript source and resolution report of a snapshot."""
        context = ResolutionContext(
            catalog=self.catalog,
            patterns=self.patterns,
            options=self.options,
            naming=NamingAuthority(self.catalog, self.patterns),
            relations=list(snapshot.get("relations") or []),
        )

        self.register_collections(context, snapshot)
        self.register_fields(context, snapshot)
        declared = self.register_system_entities(context, snapshot)
        self.collect_aliases(context)
        self.detect_id_kinds(context)

        context.junctions = detect_junctions(
            context.relations,
            (item for fields in context.fields.values() for item in fields),
            self.catalog,
            self.patterns,
        )
        apply_relations(context)

        if self.options.resolve_system_fallback_relations:
            for name in declared:
                self.apply_system_links(context, name)

        resolve_aliases(context)
        self.close_references(context, declared)

        declarations = self.synthesize(context, declared)
        root = synthesize_root(context, declarations)
        source = declarations_to_typescript(
            declarations,
            root,
            use_type_aliases=self.options.use_type_aliases,
        )

        context.report.junctions = sorted(context.junctions)
        context.report.collisions = list(context.naming.collisions)
        return GenerationResult(source=source, report=context.report)

    # Registration passes

    def register_collections(
        self,
        context: ResolutionContext,
        snapshot: Snapshot,
    ) -> None:
        """Create an entity for every collection of the snapshot."""
        for collection in snapshot.get("collections") or []:
            name = collection["collection"]
            meta = collection.get("meta") or {}
            entry = self.catalog.get(name)
            singleton = bool(meta.get("singleton")) or bool(entry and entry.singleton)
            context.add_entity(
                Entity(
                    name=name,
                    type_name=context.naming.register(name, singleton=singleton),
                    singleton=singleton,
                    system=self.catalog.is_system(name),
                    note=meta.get("note"),
                ),
            )
        logger.debug("Registered %d collections", len(context.entities))

    def register_fields(self, context: ResolutionContext, snapshot: Snapshot) -> None:
        """Attach snapshot fields to their entities in declared order."""
        for raw in snapshot.get("fields") or []:
            item = to_field(raw)
            system = self.catalog.is_system(item.entity)
            if system and not self.keep_system_field(item, raw):
                continue
            context.add_field(item)

    def keep_system_field(self, item: Field, raw: SnapshotField) -> bool:
        """Decide whether a snapshot field of a built-in collection is kept."""
        if self.options.include_system_fields:
            return True
        meta = raw.get("meta") or {}
        entry = self.catalog.get(item.entity)
        return (
            not meta.get("system")
            or entry is None
            or item.name not in entry.fields
            or bool(set(item.special) & RELATIONAL_SPECIALS)
        )

    def register_system_entities(
        self,
        context: ResolutionContext,
        snapshot: Snapshot,
    ) -> list[str]:
        """Prepare built-in collections and return every entity to declare."""
        names = list(context.entities)
        names.extend(raw["collection"] for raw in snapshot.get("fields") or [])
        names.extend(self.catalog.essential)
        for relation in context.relations:
            meta = relation.get("meta") or {}
            names.append(relation["collection"])
            if relation["related_collection"]:
                names.append(relation["related_collection"])
            names.extend(meta.get("one_allowed_collections") or ())

        declared: list[str] = []
        for name in dict.fromkeys(names):
            if name in context.entities and not context.entities[name].system:
                declared.append(name)
            elif self.catalog.is_system(name):
                self.prepare_system_entity(context, name)
                declared.append(name)
        return declared

    def prepare_system_entity(self, context: ResolutionContext, name: str) -> None:
        """Merge snapshot, relation and catalog fields of a built-in collection."""
        entry = self.catalog.get(name)
        singleton = bool(entry and entry.singleton)
        if name in context.entities:
            singleton = singleton or context.entities[name].singleton
        entity = context.add_entity(
            Entity(
                name=name,
                type_name=context.naming.register(name, singleton=singleton),
                singleton=singleton,
                system=True,
            ),
        )
        if entry:
            entity.primary_key = entry.primary_key
            entity.id_kind = entry.id_kind

        for relation in context.relations:
            meta = relation.get("meta") or {}
            one_field = meta.get("one_field")
            if relation["related_collection"] == name and one_field:
                if not context.get_field(name, one_field):
                    context.add_field(
                        Field(
                            entity=name,
                            name=one_field,
                            kind="alias",
                            special=("o2m",),
                        ),
                    )
            if relation["collection"] == name and relation["related_collection"]:
                if not context.get_field(name, relation["field"]):
                    context.add_field(
                        Field(
                            entity=name,
                            name=relation["field"],
                            kind=self.catalog.field_kind(name, relation["field"]),
                            special=("m2o",),
                        ),
                    )

        if self.options.include_system_fields and entry:
            for field_name in entry.fields:
                if not context.get_field(name, field_name):
                    context.add_field(
                        Field(
                            entity=name,
                            name=field_name,
                            kind=self.catalog.field_kind(name, field_name),
                            nullable=field_name != entry.primary_key,
                        ),
                    )

    def prepare_undefined_entity(self, context: ResolutionContext, name: str) -> None:
        """Declare a referenced collection the snapshot does not define."""
        if self.catalog.is_system(name):
            self.prepare_system_entity(context, name)
            if self.options.resolve_system_fallback_relations:
                self.apply_system_links(context, name)
            return

        logger.warning("Collection %s is referenced but not defined", name)
        context.report.undefined_targets.append(name)
        context.add_entity(
            Entity(
                name=name,
                type_name=context.naming.register(name),
                id_kind=self.referenced_id_kind(context, name) or "string",
            ),
        )

    def collect_aliases(self, context: ResolutionContext) -> None:
        """Queue the alias fields that need a relationship target.

        Catalog fields of built-in collections are left to the catalog links.
        """
        for name, fields in context.fields.items():
            entry = self.catalog.get(name)
            context.aliases.extend(
                item
                for item in fields
                if item.is_alias
                and not is_presentation_field(item)
                and not (entry and item.name in entry.fields)
            )

    def detect_id_kinds(self, context: ResolutionContext) -> None:
        """Decide the primary key and ID kind of every user collection."""
        for entity in context.entities.values():
            if entity.system:
                continue
            fields = context.fields.get(entity.name, [])
            key = next((item for item in fields if item.primary_key), None)
            if key is None:
                key = next((item for item in fields if item.name == "id"), None)
            if key is not None:
                entity.primary_key = key.name
                if kind := id_kind_of(key):
                    entity.id_kind = kind
                    continue
            entity.id_kind = self.referenced_id_kind(context, entity.name) or "string"

    def referenced_id_kind(
        self,
        context: ResolutionContext,
        name: str,
    ) -> IdKind | None:
        """Infer an ID kind from a foreign key pointing at the collection."""
        for relation in context.relations:
            schema = relation.get("schema") or {}
            if (
                relation["related_collection"] == name
                and schema.get("foreign_key_column") == "id"
            ):
                item = context.get_field(relation["collection"], relation["field"])
                if item and (kind := id_kind_of(item)):
                    return kind
        return None

    # Fallback and closure passes

    def apply_system_links(self, context: ResolutionContext, name: str) -> None:
        """Add catalog and special tag edges the snapshot leaves out."""
        for link in self.catalog.links(name):
            if context.get_field(name, link.field):
                context.add_relationship(
                    Relationship(
                        source=name,
                        field=link.field,
                        target=link.target,
                        kind=link.kind,
                        origin="system",
                    ),
                )

        for item in context.fields.get(name, ()):
            for tag in item.special:
                if target := self.catalog.special_links.get(tag):
                    context.add_relationship(
                        Relationship(
                            source=name,
                            field=item.name,
                            target=target,
                            kind=RelationshipKind.MANY_TO_ONE,
                            origin="special",
                        ),
                    )
                    break

    def close_references(self, context: ResolutionContext, declared: list[str]) -> None:
        """Extend the declared entities until every reference is declared."""
        seen = set(declared)
        pending = list(declared)
        while pending:
            name = pending.pop(0)
            for target in referenced_targets(context, name):
                if target not in context.entities:
                    self.prepare_undefined_entity(context, target)
                owner = context.naming.owner_of(context.type_name(target)) or target
                if owner not in seen:
                    seen.add(owner)
                    declared.append(owner)
                    pending.append(owner)

    def synthesize(
        self,
        context: ResolutionContext,
        declared: list[str],
    ) -> list[Declaration]:
        """Build one declaration per entity, skipping reused type names."""
        declarations: list[Declaration] = []
        for name in declared:
            entity = context.entities[name]
            if context.naming.owner_of(entity.type_name) != name:
                logger.debug("Skipping %s, its type name belongs to another", name)
                continue
            declarations.append(synthesize_entity(context, name))
        return declarations


def generate_typescript(
    snapshot: Snapshot,
    options: GenerateOptions | None = None,
    catalog: SystemCatalog = DEFAULT_CATALOG,
    patterns: NamingPatterns = DEFAULT_PATTERNS,
) -> GenerationResult:
    """Generate type declarations and a resolution report for a snapshot."""
    return SchemaPipeline(options, catalog, patterns).run(snapshot)


def snapshot_to_typescript(
    snapshot: Snapshot,
    options: GenerateOptions | None = None,
) -> str:
    """Generate the TypeScript source for a snapshot."""
    return generate_typescript(snapshot, options).source
