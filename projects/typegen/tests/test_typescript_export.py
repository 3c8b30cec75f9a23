"""Tests for TypeScript rendering."""

from typegen.types import Declaration, Property
from typegen.typescript_export import (
    HEADER,
    declarations_to_typescript,
    render_declaration,
    render_note,
)

POST = Declaration(
    name="Post",
    entity="posts",
    primary_key="id",
    properties=(
        Property("id", "string"),
        Property("title", "string", optional=True, note="Shown in lists"),
    ),
)
USER = Declaration(
    name="DirectusUser",
    entity="directus_users",
    primary_key="id",
    properties=(Property("id", "string"),),
    system=True,
)
ROOT = Declaration(
    name="Schema",
    entity="",
    primary_key="",
    properties=(
        Property("posts", "Post[]"),
        Property("directus_users", "DirectusUser[]"),
    ),
)


def test_render_interface() -> None:
    """Test interface rendering with banner and note."""
    assert render_declaration(POST) == (
        "/** Collection: posts (primary key: id) */\n"
        "export interface Post {\n"
        "  id: string;\n"
        "  /** Shown in lists */\n"
        "  title?: string;\n"
        "}"
    )


def test_render_type_alias() -> None:
    """Test type alias rendering without a banner."""
    assert render_declaration(USER, use_type_aliases=True, banner=False) == (
        "export type DirectusUser = {\n  id: string;\n};"
    )


def test_render_note_escapes_comment_end() -> None:
    """Test that notes cannot close the comment early."""
    assert render_note("Ends */ early\nand wraps") == "  /** Ends *\\/ early and wraps */"


def test_declarations_order() -> None:
    """Test that user declarations precede system ones and the root is last."""
    source = declarations_to_typescript([USER, POST], ROOT)
    assert source.startswith(HEADER)
    assert source.endswith("}\n")
    assert (
        source.index("interface Post ")
        < source.index("interface DirectusUser ")
        < source.index("interface Schema ")
    )
    assert "Collection: \n" not in source
