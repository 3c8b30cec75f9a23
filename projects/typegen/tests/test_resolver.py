"""Tests for the alias field resolution strategies."""

from collections.abc import Callable, Iterable

import pytest
from builders import relation

from typegen.catalog import DEFAULT_CATALOG
from typegen.context import ResolutionContext
from typegen.naming import NamingAuthority
from typegen.patterns import DEFAULT_PATTERNS
from typegen.resolver import (
    AliasQuery,
    alias_kind,
    by_explicit_relation,
    by_name_pattern,
    by_relationship_analysis,
    by_similarity,
    longest_common_substring,
    resolve,
    resolve_aliases,
    similarity_score,
)
from typegen.types import (
    Entity,
    Field,
    GenerateOptions,
    Relationship,
    RelationshipKind,
    SnapshotRelation,
    UnresolvedAlias,
)

type ContextFactory = Callable[..., ResolutionContext]

O2M = RelationshipKind.ONE_TO_MANY
M2O = RelationshipKind.MANY_TO_ONE


@pytest.fixture(name="make_context")
def fixture_make_context() -> ContextFactory:
    """Provide a factory for contexts holding the given collections."""

    def make(
        names: Iterable[str],
        relations: Iterable[SnapshotRelation] = (),
    ) -> ResolutionContext:
        context = ResolutionContext(
            catalog=DEFAULT_CATALOG,
            patterns=DEFAULT_PATTERNS,
            options=GenerateOptions(),
            naming=NamingAuthority(DEFAULT_CATALOG, DEFAULT_PATTERNS),
            relations=list(relations),
        )
        for name in names:
            context.add_entity(Entity(name, type_name=context.naming.register(name)))
        return context

    return make


def test_explicit_relation(make_context: ContextFactory) -> None:
    """Test resolution through a relation naming the field as its one side."""
    context = make_context(
        ["posts", "comments"],
        [relation("comments", "post", "posts", one_field="replies")],
    )
    query = AliasQuery("replies", "posts", O2M)
    assert by_explicit_relation(query, context) == "comments"
    assert by_explicit_relation(AliasQuery("replies", "pages", O2M), context) is None


@pytest.mark.parametrize(
    ("names", "owner", "name", "expected"),
    [
        (["tags", "posts"], "posts", "tags", "tags"),
        (["category", "posts"], "posts", "categories", "category"),
        (["tags", "posts"], "posts", "tag", "tags"),
        (["tickets", "ticket_prices"], "tickets", "prices", "ticket_prices"),
        (["events", "tickets_event"], "events", "tickets", "tickets_event"),
        (["orders", "product_prices"], "orders", "prices", "product_prices"),
        (["posts", "gallery_images"], "posts", "gallery", "gallery_images"),
    ],
)
def test_name_patterns(  # noqa: PLR0913
    make_context: ContextFactory,
    names: list[str],
    owner: str,
    name: str,
    expected: str,
) -> None:
    """Test each name pattern in isolation."""
    context = make_context(names)
    assert by_name_pattern(AliasQuery(name, owner, O2M), context) == expected


def test_name_patterns_ignore_ambiguous_matches(make_context: ContextFactory) -> None:
    """Test that several suffix matches are treated as no match."""
    context = make_context(["orders", "product_prices", "ticket_prices"])
    assert by_name_pattern(AliasQuery("prices", "orders", O2M), context) is None


def test_relationship_analysis_single_candidate(make_context: ContextFactory) -> None:
    """Test inference from the only many-to-one edge pointing at the owner."""
    context = make_context(["posts", "comments"])
    context.add_relationship(Relationship("comments", "post", "posts", M2O))
    query = AliasQuery("feedback", "posts", O2M)
    assert by_relationship_analysis(query, context) == "comments"


def test_relationship_analysis_prefers_matching_name(
    make_context: ContextFactory,
) -> None:
    """Test that a candidate resembling the field name is preferred."""
    context = make_context(["posts", "comments", "likes"])
    context.add_relationship(Relationship("comments", "post", "posts", M2O))
    context.add_relationship(Relationship("likes", "post", "posts", M2O))
    assert by_relationship_analysis(AliasQuery("likes", "posts", O2M), context) == (
        "likes"
    )
    assert by_relationship_analysis(AliasQuery("stuff", "posts", O2M), context) == (
        "comments"
    )


def test_relationship_analysis_many_to_one_uses_inverse(
    make_context: ContextFactory,
) -> None:
    """Test that many-to-one fields look at one-to-many edges."""
    context = make_context(["authors", "books"])
    context.add_relationship(Relationship("authors", "books", "books", O2M))
    assert by_relationship_analysis(AliasQuery("writer", "books", M2O), context) == (
        "authors"
    )
    assert by_relationship_analysis(AliasQuery("writer", "books", O2M), context) is None


def test_longest_common_substring() -> None:
    """Test the shared substring length."""
    assert longest_common_substring("category", "categories") == len("categor")
    assert longest_common_substring("abc", "xyz") == 0


def test_similarity_score_ignores_owner(make_context: ContextFactory) -> None:
    """Test that a collection never scores against its own fields."""
    context = make_context(["posts"])
    assert similarity_score("posts", "posts", "posts", context.naming) == 0


def test_similarity_threshold(make_context: ContextFactory) -> None:
    """Test that weak matches below the threshold are rejected."""
    context = make_context(["posts", "media_assets"])
    assert by_similarity(AliasQuery("zq", "posts", O2M), context) is None
    assert by_similarity(AliasQuery("asset", "posts", O2M), context) == "media_assets"


def test_exact_name_beats_higher_similarity(make_context: ContextFactory) -> None:
    """Test that an exact name match wins over a better scoring fuzzy match."""
    context = make_context(["posts", "authors", "author"])
    query = AliasQuery("author", "posts", M2O)

    naming = context.naming
    assert similarity_score("author", "authors", "posts", naming) > similarity_score(
        "author",
        "author",
        "posts",
        naming,
    )
    assert by_similarity(query, context) == "authors"
    assert resolve(query, context) == ("author", "name-pattern")


def test_resolve_stops_at_first_strategy(make_context: ContextFactory) -> None:
    """Test that later strategies are not consulted after a match."""
    calls: list[str] = []

    def first(query: AliasQuery, context: ResolutionContext) -> str | None:
        calls.append("first")
        return "tags"

    def second(query: AliasQuery, context: ResolutionContext) -> str | None:
        calls.append("second")
        return "other"

    context = make_context(["posts", "tags"])
    strategies = (("first", first), ("second", second))
    assert resolve(AliasQuery("x", "posts", O2M), context, strategies) == (
        "tags",
        "first",
    )
    assert calls == ["first"]


def test_alias_kind_from_special_tags() -> None:
    """Test the declared category of alias fields."""
    assert alias_kind(Field("posts", "a", "alias", special=("m2o",))) is M2O
    assert alias_kind(Field("posts", "b", "alias", special=("files",))) is (
        RelationshipKind.MANY_TO_MANY
    )
    assert alias_kind(Field("posts", "c", "alias", special=("m2a",))) is (
        RelationshipKind.MANY_TO_ANY
    )
    assert alias_kind(Field("posts", "d", "alias", special=("translations",))) is O2M
    assert alias_kind(Field("posts", "e", "alias")) is O2M


def test_resolve_aliases_records_outcomes(make_context: ContextFactory) -> None:
    """Test that resolved aliases get edges and misses are reported."""
    context = make_context(["posts", "tags"])
    context.aliases = [
        Field("posts", "tags", "alias", special=("m2m",)),
        Field("posts", "qq", "alias", special=("o2m",)),
    ]
    resolve_aliases(context)

    edge = context.relationship_for("posts", "tags")
    assert edge is not None
    assert edge.target == "tags"
    assert edge.kind is RelationshipKind.MANY_TO_MANY
    assert edge.origin == "name-pattern"
    assert context.relationship_for("posts", "qq") is None
    assert context.report.unresolved == [UnresolvedAlias("posts", "qq", O2M)]


def test_resolve_aliases_keeps_existing_edges(make_context: ContextFactory) -> None:
    """Test that an alias with an established edge is not re-resolved."""
    context = make_context(["posts", "tags", "labels"])
    context.add_relationship(Relationship("posts", "tags", "labels", O2M))
    context.aliases = [Field("posts", "tags", "alias", special=("o2m",))]
    resolve_aliases(context)

    edge = context.relationship_for("posts", "tags")
    assert edge is not None
    assert edge.target == "labels"
    assert context.report.resolved == []
