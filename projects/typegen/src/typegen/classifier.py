"""Cardinality classification of explicit relation records."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from typegen.types import Relationship, RelationshipKind

if TYPE_CHECKING:
    from collections.abc import Set

    from typegen.context import ResolutionContext
    from typegen.patterns import NamingPatterns
    from typegen.types import SnapshotRelation

logger = getLogger(__name__)


def classify(  # noqa: PLR0911
    relation: SnapshotRelation,
    junctions: Set[str],
    patterns: NamingPatterns,
) -> RelationshipKind:
    """Decide the category of one relation, first matching rule wins."""
    source = relation["collection"]
    name = relation["field"]
    target = relation["related_collection"]
    meta = relation.get("meta") or {}

    # Junction fields always point at a single item of each side
    if source in junctions:
        return RelationshipKind.MANY_TO_ONE

    if meta.get("junction_field"):
        return RelationshipKind.MANY_TO_MANY

    if target is None and name == patterns.polymorphic_item_field:
        return RelationshipKind.MANY_TO_ANY

    if source == target:
        if meta.get("many_field") == name:
            return RelationshipKind.MANY_TO_ONE
        if meta.get("one_field") == name:
            return RelationshipKind.ONE_TO_MANY
        if name in patterns.parent_fields:
            return RelationshipKind.MANY_TO_ONE
        if name in patterns.child_fields:
            return RelationshipKind.ONE_TO_MANY
        if isinstance(meta.get("one_allowed_collections"), list):
            return RelationshipKind.ONE_TO_MANY
        return RelationshipKind.MANY_TO_ONE

    if meta.get("one_collection") == source:
        return RelationshipKind.ONE_TO_MANY

    return RelationshipKind.MANY_TO_ONE


def apply_relations(context: ResolutionContext) -> None:
    """Record an edge for every explicit relation of the snapshot."""
    for relation in context.relations:
        source = relation["collection"]
        name = relation["field"]
        target = relation["related_collection"]
        meta = relation.get("meta") or {}
        kind = classify(relation, context.junctions, context.patterns)

        allowed: tuple[str, ...] = ()
        if target is None:
            allowed = tuple(
                collection
                for collection in meta.get("one_allowed_collections") or ()
                if collection in context.entities
            )
            if kind is not RelationshipKind.MANY_TO_ANY and not allowed:
                logger.debug("Skipping %s.%s without target", source, name)
                continue

        junction = source if meta.get("junction_field") else None
        context.add_relationship(
            Relationship(
                source=source,
                field=name,
                target=target,
                kind=kind,
                junction=junction,
                allowed=allowed,
            ),
        )
