"""Tests for type name synthesis and name normalization."""

import pytest

from typegen.catalog import DEFAULT_CATALOG
from typegen.naming import NamingAuthority, pascal_case, plural, singular
from typegen.patterns import DEFAULT_PATTERNS
from typegen.types import NameCollision


@pytest.fixture(name="naming")
def fixture_naming() -> NamingAuthority:
    """Provide a naming authority using the default tables."""
    return NamingAuthority(DEFAULT_CATALOG, DEFAULT_PATTERNS)


def test_pascal_case() -> None:
    """Test PascalCase conversion of snake_case and odd separators."""
    assert pascal_case("blog_posts") == "BlogPosts"
    assert pascal_case("landing-page") == "LandingPage"
    assert pascal_case("faq__items") == "FaqItems"
    assert pascal_case("2024_events") == "_2024Events"


def test_singular_handles_irregular_plurals() -> None:
    """Test that singularization does not truncate irregular plurals."""
    assert singular("cases") == "case"
    assert singular("addresses") == "address"
    assert singular("wolves") == "wolf"
    assert singular("categories") == "category"
    assert singular("blog_posts") == "blog_post"


def test_plural_of_last_word() -> None:
    """Test that only the last word of a name is pluralized."""
    assert plural("tag") == "tags"
    assert plural("blog_category") == "blog_categories"


def test_type_names_for_plural_collections(naming: NamingAuthority) -> None:
    """Test type names of regular and singleton collections."""
    names = {
        "cases": naming.register("cases"),
        "addresses": naming.register("addresses"),
        "wolves": naming.register("wolves"),
        "settings": naming.register("settings", singleton=True),
    }
    assert names == {
        "cases": "Case",
        "addresses": "Address",
        "wolves": "Wolf",
        "settings": "Settings",
    }


def test_system_names_use_catalog(naming: NamingAuthority) -> None:
    """Test that built-in collections take their canonical names."""
    assert naming.type_name_for("directus_users") == "DirectusUser"
    assert naming.type_name_for("directus_settings") == "DirectusSettings"


def test_unknown_system_names_fall_back(naming: NamingAuthority) -> None:
    """Test the prefix fallback for built-in collections missing from the catalog."""
    assert naming.type_name_for("directus_policies") == "DirectusPolicy"
    naming.register("directus_app_settings", singleton=True)
    assert naming.type_name_for("directus_app_settings") == "DirectusAppSettings"


def test_type_name_is_cached(naming: NamingAuthority) -> None:
    """Test that later singleton registration does not change a cached name."""
    first = naming.type_name_for("events")
    naming.singletons.add("events")
    assert naming.type_name_for("events") == first == "Event"


def test_first_registered_name_wins(naming: NamingAuthority) -> None:
    """Test that a colliding collection reuses the first registered name."""
    assert naming.register("article") == "Article"
    assert naming.register("articles") == "Article"
    assert naming.owner_of("Article") == "article"
    assert naming.collisions == [
        NameCollision("Article", kept="article", reused_by="articles"),
    ]


def test_registering_twice_is_not_a_collision(naming: NamingAuthority) -> None:
    """Test that registration is idempotent."""
    naming.register("tags")
    naming.register("tags")
    assert naming.collisions == []


def test_normalize(naming: NamingAuthority) -> None:
    """Test the stems used for fuzzy matching."""
    assert naming.normalize("directus_users") == "user"
    assert naming.normalize("event_tickets") == "ticket"
    assert naming.normalize("category_id") == "category"
    assert naming.normalize("Gallery_Items") == "gallery"
