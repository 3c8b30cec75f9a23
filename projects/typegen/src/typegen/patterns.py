"""Naming conventions used by the relationship heuristics."""

from __future__ import annotations

import re
from dataclasses import dataclass


@dataclass(frozen=True)
class NamingPatterns:
    """Name tables consulted by junction detection, classification and resolution."""

    # Junction tables
    junction_infixes: tuple[str, ...] = (
        "_pivot_",
        "_junction_",
        "_join_",
        "_to_",
    )
    junction_suffixes: tuple[str, ...] = ("_relations", "_links", "_connections")
    junction_suffix_pattern: str = (
        r"_(?:assignments|sponsorships|members|items|participants|permissions"
        r"|connections|relations|mappings|allocations|registrations|enrollments)$"
    )
    junction_pair: str = r"[a-z0-9]+_(?:to|x|and|2)_[a-z0-9_]+"
    junction_plural_pair: str = r"[a-z0-9]+s_[a-z0-9]+s"

    # Many-to-any junction columns
    polymorphic_item_field: str = "item"
    polymorphic_collection_field: str = "collection"

    # Self-referential roles
    parent_fields: tuple[str, ...] = (
        "parent",
        "parent_id",
        "parent_item",
        "parent_record",
    )
    child_fields: tuple[str, ...] = (
        "children",
        "child",
        "replies",
        "responses",
        "subitems",
        "descendants",
    )

    # Fuzzy matching
    normalize_prefixes: tuple[str, ...] = ("directus_", "event_", "events_")
    normalize_suffixes: tuple[str, ...] = ("_items", "_item", "_id")

    def is_junction_name(self, name: str) -> bool:
        """Check a collection name against junction naming conventions."""
        return (
            any(infix in name for infix in self.junction_infixes)
            or name.endswith(self.junction_suffixes)
            or re.search(self.junction_suffix_pattern, name) is not None
            or re.fullmatch(self.junction_pair, name) is not None
            or re.fullmatch(self.junction_plural_pair, name) is not None
        )


DEFAULT_PATTERNS = NamingPatterns()
