"""Conversion between raw collection names and output type names."""

from __future__ import annotations

import re
from logging import getLogger
from typing import TYPE_CHECKING

from inflection import pluralize, singularize

from typegen.types import NameCollision

if TYPE_CHECKING:
    from typegen.catalog import SystemCatalog
    from typegen.patterns import NamingPatterns

logger = getLogger(__name__)


def pascal_case(name: str) -> str:
    """Convert name to PascalCase."""
    words = [word for word in re.split(r"[^0-9A-Za-z]+", name) if word]
    result = "".join(word[0].upper() + word[1:] for word in words)
    if result and result[0].isdigit():
        result = f"_{result}"
    return result


def singular(name: str) -> str:
    """Singularize the last word of a snake_case name."""
    head, sep, tail = name.rpartition("_")
    return f"{head}{sep}{singularize(tail)}" if tail else name


def plural(name: str) -> str:
    """Pluralize the last word of a snake_case name."""
    head, sep, tail = name.rpartition("_")
    return f"{head}{sep}{pluralize(tail)}" if tail else name


class NamingAuthority:
    """Owns the mapping from raw collection names to type names.

    Names are cached at first resolution. When two raw names produce the same
    type name the first registered keeps it and the later one reuses it.
    """

    def __init__(self, catalog: SystemCatalog, patterns: NamingPatterns) -> None:
        self.catalog = catalog
        self.patterns = patterns
        self.singletons: set[str] = set()
        self.collisions: list[NameCollision] = []
        self._cache: dict[str, str] = {}
        self._owners: dict[str, str] = {}

    def register(self, raw_name: str, *, singleton: bool = False) -> str:
        """Register an entity and return its type name."""
        if singleton:
            self.singletons.add(raw_name)
        type_name = self.type_name_for(raw_name)
        owner = self._owners.setdefault(type_name, raw_name)
        if owner != raw_name:
            logger.warning(
                "Collections %s and %s both map to %s, keeping %s",
                owner,
                raw_name,
                type_name,
                owner,
            )
            collision = NameCollision(type_name, kept=owner, reused_by=raw_name)
            if collision not in self.collisions:
                self.collisions.append(collision)
        return type_name

    def owner_of(self, type_name: str) -> str | None:
        """Return the raw name that first claimed a type name."""
        return self._owners.get(type_name)

    def type_name_for(self, raw_name: str) -> str:
        """Return the type name of a collection, computing it once."""
        if raw_name not in self._cache:
            self._cache[raw_name] = self._synthesize(raw_name)
        return self._cache[raw_name]

    def _synthesize(self, raw_name: str) -> str:
        if self.catalog.is_system(raw_name):
            if entry := self.catalog.get(raw_name):
                return entry.type_name
            suffix = raw_name.removeprefix(self.catalog.prefix)
            if raw_name not in self.singletons:
                suffix = singular(suffix)
            return f"{self.catalog.type_prefix}{pascal_case(suffix)}"

        if raw_name in self.singletons:
            return pascal_case(raw_name)
        return pascal_case(singular(raw_name))

    def normalize(self, name: str) -> str:
        """Reduce a name to a comparable stem for fuzzy matching."""
        result = name.lower()
        for prefix in self.patterns.normalize_prefixes:
            result = result.removeprefix(prefix)
        for suffix in self.patterns.normalize_suffixes:
            result = result.removesuffix(suffix)
        return result.removesuffix("s")
