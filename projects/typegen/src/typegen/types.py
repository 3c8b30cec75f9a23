"""Type definitions for schema snapshots and the type generation pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Literal, NotRequired, TypedDict

# Snapshot shapes as exported by the schema snapshot endpoint


class CollectionMeta(TypedDict, total=False):
    """Presentation metadata of a collection."""

    collection: str
    singleton: bool
    hidden: bool
    note: str | None
    icon: str | None
    group: str | None


class SnapshotCollection(TypedDict):
    """A collection entry of a schema snapshot."""

    collection: str
    meta: NotRequired[CollectionMeta | None]
    schema: NotRequired[dict[str, Any] | None]


class FieldMeta(TypedDict, total=False):
    """Presentation metadata of a field."""

    collection: str
    field: str
    special: list[str] | None
    interface: str | None
    note: str | None
    hidden: bool
    readonly: bool
    required: bool
    system: bool


class FieldSchema(TypedDict, total=False):
    """Database column details of a field."""

    name: str
    table: str
    data_type: str
    is_nullable: bool
    is_primary_key: bool
    has_auto_increment: bool
    foreign_key_table: str | None
    foreign_key_column: str | None


class SnapshotField(TypedDict):
    """A field entry of a schema snapshot."""

    collection: str
    field: str
    type: str
    meta: NotRequired[FieldMeta | None]
    schema: NotRequired[FieldSchema | None]


class RelationMeta(TypedDict, total=False):
    """Cardinality metadata of a relation."""

    many_collection: str
    many_field: str
    one_collection: str | None
    one_field: str | None
    one_collection_field: str | None
    one_allowed_collections: list[str] | None
    junction_field: str | None
    sort_field: str | None
    one_deselect_action: str


class SnapshotRelation(TypedDict):
    """A relation entry of a schema snapshot."""

    collection: str
    field: str
    related_collection: str | None
    meta: NotRequired[RelationMeta | None]
    schema: NotRequired[dict[str, Any] | None]


class Snapshot(TypedDict, total=False):
    """Complete schema snapshot."""

    version: int
    directus: str
    vendor: str
    collections: list[SnapshotCollection]
    fields: list[SnapshotField]
    relations: list[SnapshotRelation]


# Pipeline model

type IdKind = Literal["string", "number"]


class RelationshipKind(StrEnum):
    """Cardinality category of a relationship edge."""

    MANY_TO_ONE = "m2o"
    ONE_TO_MANY = "o2m"
    MANY_TO_MANY = "m2m"
    MANY_TO_ANY = "m2a"

    @property
    def to_many(self) -> bool:
        """Whether the edge renders as a list of references."""
        return self is not RelationshipKind.MANY_TO_ONE


@dataclass
class Entity:
    """One collection of the schema."""

    name: str
    type_name: str = ""
    id_kind: IdKind = "string"
    primary_key: str = "id"
    singleton: bool = False
    system: bool = False
    note: str | None = None


@dataclass
class Field:
    """One property of an entity."""

    entity: str
    name: str
    kind: str
    nullable: bool = True
    special: tuple[str, ...] = ()
    interface: str | None = None
    note: str | None = None
    primary_key: bool = False
    auto_increment: bool = False
    data_type: str | None = None
    foreign_key_table: str | None = None
    foreign_key_column: str | None = None

    @property
    def is_alias(self) -> bool:
        """Whether the field has no storage of its own."""
        return self.kind == "alias"


@dataclass(frozen=True)
class Relationship:
    """A directed edge from the field that carries it."""

    source: str
    field: str
    target: str | None
    kind: RelationshipKind
    junction: str | None = None
    allowed: tuple[str, ...] = ()
    origin: str = "relation"


@dataclass(frozen=True)
class Property:
    """One rendered property of a declaration."""

    name: str
    type_text: str
    optional: bool = False
    note: str | None = None


@dataclass(frozen=True)
class Declaration:
    """An entity's synthesized type declaration."""

    name: str
    entity: str
    primary_key: str
    properties: tuple[Property, ...]
    system: bool = False


@dataclass(frozen=True)
class GenerateOptions:
    """Toggles controlling type generation."""

    root_type_name: str = "ApiCollections"
    use_reference_unions: bool = True
    make_fields_required: bool = False
    include_system_fields: bool = True
    export_system_entities: bool = True
    resolve_system_fallback_relations: bool = True
    annotate_with_notes: bool = False
    use_type_aliases: bool = False


# Resolution report


@dataclass(frozen=True)
class ResolvedAlias:
    """An alias field linked to a target by a heuristic strategy."""

    entity: str
    field: str
    target: str
    strategy: str


@dataclass(frozen=True)
class UnresolvedAlias:
    """An alias field no strategy could link."""

    entity: str
    field: str
    kind: RelationshipKind


@dataclass(frozen=True)
class NameCollision:
    """Two raw names that synthesize the same type name."""

    type_name: str
    kept: str
    reused_by: str


@dataclass
class ResolutionReport:
    """Diagnostics gathered during one pipeline run."""

    resolved: list[ResolvedAlias] = field(default_factory=list)
    unresolved: list[UnresolvedAlias] = field(default_factory=list)
    junctions: list[str] = field(default_factory=list)
    collisions: list[NameCollision] = field(default_factory=list)
    undefined_targets: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class GenerationResult:
    """Output of one pipeline run."""

    source: str
    report: ResolutionReport
