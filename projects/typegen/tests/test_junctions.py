"""Tests for junction collection detection."""

from builders import relation

from typegen.catalog import DEFAULT_CATALOG
from typegen.junctions import detect_junctions, foreign_key_targets
from typegen.patterns import DEFAULT_PATTERNS
from typegen.types import Field


def test_junction_field_marker() -> None:
    """Test detection from an explicit junction field marker."""
    relations = [relation("tagging", "tag", "tags", junction_field="post")]
    junctions = detect_junctions(relations, [], DEFAULT_CATALOG, DEFAULT_PATTERNS)
    assert junctions == frozenset({"tagging"})


def test_junction_naming_conventions() -> None:
    """Test detection from collection naming conventions."""
    relations = [
        relation("articles_tags", "article_id", "articles"),
        relation("user_to_group", "user", "users"),
        relation("post_links", "post", "posts"),
        relation("course_x_student", "course", "courses"),
        relation("comments", "post", "posts"),
    ]
    junctions = detect_junctions(relations, [], DEFAULT_CATALOG, DEFAULT_PATTERNS)
    assert junctions == frozenset(
        {"articles_tags", "user_to_group", "post_links", "course_x_student"},
    )


def test_structural_detection() -> None:
    """Test detection of two foreign keys to two other collections."""
    relations = [
        relation("enrollment", "student", "students"),
        relation("enrollment", "course", "courses"),
    ]
    junctions = detect_junctions(relations, [], DEFAULT_CATALOG, DEFAULT_PATTERNS)
    assert junctions == frozenset({"enrollment"})


def test_structural_detection_uses_schema_foreign_keys() -> None:
    """Test that foreign keys declared only in the field schema count."""
    fields = [
        Field("membership", "member", "uuid", foreign_key_table="people"),
        Field("membership", "team", "uuid", foreign_key_table="teams"),
    ]
    junctions = detect_junctions([], fields, DEFAULT_CATALOG, DEFAULT_PATTERNS)
    assert junctions == frozenset({"membership"})


def test_structural_detection_rejects_self_and_shared_targets() -> None:
    """Test that self references and repeated targets do not qualify."""
    relations = [
        relation("category", "parent", "category"),
        relation("category", "owner", "users"),
        relation("transfer", "sender", "accounts"),
        relation("transfer", "receiver", "accounts"),
        relation("order", "customer", "customers"),
        relation("order", "product", "products"),
        relation("order", "coupon", "coupons"),
    ]
    junctions = detect_junctions(relations, [], DEFAULT_CATALOG, DEFAULT_PATTERNS)
    assert junctions == frozenset()


def test_system_collections_are_not_junctions() -> None:
    """Test that built-in collections are exempt from naming and structure rules."""
    relations = [
        relation("directus_permissions", "role", "directus_roles"),
        relation("directus_permissions", "policy", "directus_policies"),
    ]
    junctions = detect_junctions(relations, [], DEFAULT_CATALOG, DEFAULT_PATTERNS)
    assert junctions == frozenset()


def test_foreign_key_targets_prefers_relations() -> None:
    """Test that explicit relations define the target of a foreign key."""
    relations = [relation("posts", "author", "authors")]
    fields = [Field("posts", "author", "uuid", foreign_key_table="people")]
    assert foreign_key_targets(relations, fields) == {"posts": {"author": "authors"}}


def test_junction_role_suffixes() -> None:
    """Test detection from membership and assignment style suffixes."""
    relations = [
        relation("team_members", "team", "teams"),
        relation("project_assignments", "project", "projects"),
        relation("course_enrollments", "course", "courses"),
        relation("menu_items", "menu", "menus"),
        relation("team_member", "team", "teams"),
    ]
    junctions = detect_junctions(relations, [], DEFAULT_CATALOG, DEFAULT_PATTERNS)
    assert junctions == frozenset(
        {"team_members", "project_assignments", "course_enrollments", "menu_items"},
    )
