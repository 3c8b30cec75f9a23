"""Heuristic resolution of alias fields without an explicit relation."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from typegen.naming import plural, singular
from typegen.types import Relationship, RelationshipKind, ResolvedAlias, UnresolvedAlias

if TYPE_CHECKING:
    from typegen.context import ResolutionContext
    from typegen.naming import NamingAuthority
    from typegen.types import Field

logger = getLogger(__name__)

# Similarity scoring weights
EXACT_SCORE = 100
CANDIDATE_CONTAINS_SCORE = 50
FIELD_CONTAINS_SCORE = 30
PLURAL_SCORE = 40
COMMON_SUBSTRING_WEIGHT = 5
MIN_COMMON_SUBSTRING = 3
ACCEPT_SCORE = 30


@dataclass(frozen=True)
class AliasQuery:
    """An alias field waiting for a target."""

    field: str
    owner: str
    kind: RelationshipKind


type Strategy = Callable[[AliasQuery, ResolutionContext], str | None]


def by_explicit_relation(query: AliasQuery, context: ResolutionContext) -> str | None:
    """Find a relation naming the field as its one-side field."""
    for relation in context.relations:
        meta = relation.get("meta") or {}
        if (
            meta.get("one_field") == query.field
            and relation["related_collection"] == query.owner
        ):
            return relation["collection"]
    return None


def by_name_pattern(query: AliasQuery, context: ResolutionContext) -> str | None:
    """Match the field name against collection names."""
    candidates = list(context.entities)
    owner = singular(query.owner)
    name = query.field

    for option in (
        name,
        singular(name),
        plural(name),
        f"{owner}_{name}",
        f"{name}_{owner}",
    ):
        if option in context.entities:
            return option

    suffixed = [c for c in candidates if c.endswith(f"_{name}") and c != f"_{name}"]
    if len(suffixed) == 1:
        return suffixed[0]

    prefixed = [c for c in candidates if c.startswith(f"{name}_") and c != f"{name}_"]
    if len(prefixed) == 1:
        return prefixed[0]

    return None


def by_relationship_analysis(
    query: AliasQuery,
    context: ResolutionContext,
) -> str | None:
    """Infer the target from edges already pointing at the owner."""
    if query.kind is RelationshipKind.MANY_TO_ONE:
        inverse = RelationshipKind.ONE_TO_MANY
    else:
        inverse = RelationshipKind.MANY_TO_ONE

    sources: list[str] = []
    for edge in context.edges(inverse):
        if edge.target == query.owner and edge.source not in sources:
            sources.append(edge.source)

    if not sources:
        return None
    if len(sources) == 1:
        return sources[0]

    naming = context.naming
    wanted = naming.normalize(query.field)
    for source in sources:
        stem = naming.normalize(source)
        if wanted and stem and (wanted in stem or stem in wanted):
            return source
    return sources[0]


def longest_common_substring(left: str, right: str) -> int:
    """Return the length of the longest substring shared by both strings."""
    longest = 0
    for start in range(len(left)):
        for end in range(start + longest + 1, len(left) + 1):
            if left[start:end] not in right:
                break
            longest = end - start
    return longest


def similarity_score(
    name: str,
    candidate: str,
    owner: str,
    naming: NamingAuthority,
) -> int:
    """Score how well a collection name matches a field name."""
    if candidate == owner:
        return 0

    wanted = naming.normalize(name)
    stem = naming.normalize(candidate)
    score = 0
    if wanted == stem:
        score += EXACT_SCORE
    if wanted and wanted in stem:
        score += CANDIDATE_CONTAINS_SCORE
    if stem and stem in wanted:
        score += FIELD_CONTAINS_SCORE
    if candidate in (plural(name), singular(name)) and candidate != name:
        score += PLURAL_SCORE

    common = longest_common_substring(wanted, stem)
    if common >= MIN_COMMON_SUBSTRING:
        score += common * COMMON_SUBSTRING_WEIGHT
    return score


def by_similarity(query: AliasQuery, context: ResolutionContext) -> str | None:
    """Pick the best scoring collection above the acceptance threshold."""
    naming = context.naming
    scored = [
        (similarity_score(query.field, candidate, query.owner, naming), candidate)
        for candidate in context.entities
    ]
    # Stable sort keeps collection order among equal scores
    scored.sort(key=lambda item: item[0], reverse=True)
    if scored and scored[0][0] >= ACCEPT_SCORE:
        return scored[0][1]
    return None


STRATEGIES: tuple[tuple[str, Strategy], ...] = (
    ("explicit-relation", by_explicit_relation),
    ("name-pattern", by_name_pattern),
    ("relationship-analysis", by_relationship_analysis),
    ("similarity", by_similarity),
)


def resolve(
    query: AliasQuery,
    context: ResolutionContext,
    strategies: tuple[tuple[str, Strategy], ...] = STRATEGIES,
) -> tuple[str, str] | None:
    """Return the target and the name of the first strategy that found it."""
    for label, strategy in strategies:
        if target := strategy(query, context):
            return target, label
    return None


def alias_kind(item: Field) -> RelationshipKind:
    """Derive the declared category of an alias field from its special tags."""
    for tag in item.special:
        match tag:
            case "m2o":
                return RelationshipKind.MANY_TO_ONE
            case "m2m" | "files":
                return RelationshipKind.MANY_TO_MANY
            case "m2a":
                return RelationshipKind.MANY_TO_ANY
            case "o2m" | "translations":
                return RelationshipKind.ONE_TO_MANY
    return RelationshipKind.ONE_TO_MANY


def resolve_aliases(context: ResolutionContext) -> None:
    """Link every pending alias field, reporting those left unresolved."""
    for item in context.aliases:
        if context.relationship_for(item.entity, item.name):
            continue

        query = AliasQuery(item.name, item.entity, alias_kind(item))
        found = resolve(query, context)
        if found is None:
            logger.warning(
                "Could not resolve alias field %s.%s",
                item.entity,
                item.name,
            )
            context.report.unresolved.append(
                UnresolvedAlias(item.entity, item.name, query.kind),
            )
            continue

        target, label = found
        logger.debug(
            "Resolved %s.%s to %s using %s",
            item.entity,
            item.name,
            target,
            label,
        )
        context.add_relationship(
            Relationship(
                source=item.entity,
                field=item.name,
                target=target,
                kind=query.kind,
                origin=label,
            ),
        )
        context.report.resolved.append(
            ResolvedAlias(item.entity, item.name, target, label),
        )
