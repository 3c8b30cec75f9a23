"""Resolution state owned by a single pipeline run."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from logging import getLogger

from typegen.catalog import SystemCatalog
from typegen.naming import NamingAuthority
from typegen.patterns import NamingPatterns
from typegen.types import (
    Entity,
    Field,
    GenerateOptions,
    IdKind,
    Relationship,
    RelationshipKind,
    ResolutionReport,
    SnapshotRelation,
)

logger = getLogger(__name__)


@dataclass
class ResolutionContext:
    """Entity, field and relationship tables shared by the pipeline stages."""

    catalog: SystemCatalog
    patterns: NamingPatterns
    options: GenerateOptions
    naming: NamingAuthority
    relations: list[SnapshotRelation] = field(default_factory=list)
    entities: dict[str, Entity] = field(default_factory=dict)
    fields: dict[str, list[Field]] = field(default_factory=dict)
    relationships: dict[tuple[str, str], Relationship] = field(default_factory=dict)
    junctions: frozenset[str] = frozenset()
    aliases: list[Field] = field(default_factory=list)
    report: ResolutionReport = field(default_factory=ResolutionReport)

    def add_entity(self, entity: Entity) -> Entity:
        """Register an entity unless it is already known."""
        known = self.entities.setdefault(entity.name, entity)
        self.fields.setdefault(entity.name, [])
        return known

    def add_field(self, item: Field) -> None:
        """Append a field to its entity, ignoring duplicates."""
        entity_fields = self.fields.setdefault(item.entity, [])
        if not any(existing.name == item.name for existing in entity_fields):
            entity_fields.append(item)

    def get_field(self, entity: str, name: str) -> Field | None:
        """Return a field of an entity by name."""
        for item in self.fields.get(entity, ()):
            if item.name == name:
                return item
        return None

    def add_relationship(self, relationship: Relationship) -> bool:
        """Record an edge unless its (entity, field) slot is already taken."""
        key = (relationship.source, relationship.field)
        if key in self.relationships:
            logger.debug(
                "Keeping existing edge for %s.%s, ignoring %s edge",
                relationship.source,
                relationship.field,
                relationship.origin,
            )
            return False
        self.relationships[key] = relationship
        return True

    def relationship_for(self, entity: str, name: str) -> Relationship | None:
        """Return the edge carried by a field, if any."""
        return self.relationships.get((entity, name))

    def edges(self, kind: RelationshipKind | None = None) -> Iterator[Relationship]:
        """Iterate edges in insertion order, optionally filtered by kind."""
        for relationship in self.relationships.values():
            if kind is None or relationship.kind is kind:
                yield relationship

    def is_system(self, name: str) -> bool:
        """Check whether a collection is a built-in one."""
        return self.catalog.is_system(name)

    def id_kind(self, name: str) -> IdKind:
        """Return the ID kind of an entity, defaulting to string."""
        if entity := self.entities.get(name):
            return entity.id_kind
        return self.catalog.id_kind(name) or "string"

    def type_name(self, name: str) -> str:
        """Return the type name of an entity."""
        return self.naming.type_name_for(name)
