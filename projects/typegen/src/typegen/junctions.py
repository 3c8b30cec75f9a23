"""Detection of collections that only implement an association."""

from __future__ import annotations

from collections import defaultdict
from logging import getLogger
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from typegen.catalog import SystemCatalog
    from typegen.patterns import NamingPatterns
    from typegen.types import Field, SnapshotRelation

logger = getLogger(__name__)

JUNCTION_FOREIGN_KEYS = 2


def foreign_key_targets(
    relations: Iterable[SnapshotRelation],
    fields: Iterable[Field],
) -> dict[str, dict[str, str]]:
    """Map each collection to its foreign key fields and their targets."""
    targets: dict[str, dict[str, str]] = defaultdict(dict)
    for relation in relations:
        if relation["related_collection"]:
            targets[relation["collection"]].setdefault(
                relation["field"],
                relation["related_collection"],
            )
    for item in fields:
        if item.foreign_key_table:
            targets[item.entity].setdefault(item.name, item.foreign_key_table)
    return targets


def detect_junctions(
    relations: Iterable[SnapshotRelation],
    fields: Iterable[Field],
    catalog: SystemCatalog,
    patterns: NamingPatterns,
) -> frozenset[str]:
    """Return every collection that exists only to link two others.

    A collection qualifies when a relation from it carries a junction field
    marker, when its name follows a junction naming convention, or when it
    holds exactly two foreign keys pointing at two other distinct collections.
    """
    relations = list(relations)
    junctions: set[str] = set()

    for relation in relations:
        meta = relation.get("meta") or {}
        if meta.get("junction_field"):
            junctions.add(relation["collection"])

    for relation in relations:
        name = relation["collection"]
        if not catalog.is_system(name) and patterns.is_junction_name(name):
            junctions.add(name)

    for name, keys in foreign_key_targets(relations, fields).items():
        if catalog.is_system(name) or len(keys) != JUNCTION_FOREIGN_KEYS:
            continue
        distinct = set(keys.values())
        if len(distinct) == JUNCTION_FOREIGN_KEYS and name not in distinct:
            junctions.add(name)

    logger.debug("Detected junction collections: %s", ", ".join(sorted(junctions)))
    return frozenset(junctions)
