"""TypeScript code generation working directly from declarations."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from typegen.types import Declaration, Property

HEADER = (
    "/**\n"
    " * Type declarations generated from a Directus schema snapshot.\n"
    " * Do not edit by hand, regenerate instead.\n"
    " */"
)
INDENT = "  "


def render_note(note: str, indent: str = INDENT) -> str:
    """Render a documentation comment."""
    text = " ".join(note.split()).replace("*/", "*\\/")
    return f"{indent}/** {text} */"


def render_property(prop: Property) -> list[str]:
    """Render one property, preceded by its note if it has one."""
    lines = [render_note(prop.note)] if prop.note else []
    marker = "?" if prop.optional else ""
    lines.append(f"{INDENT}{prop.name}{marker}: {prop.type_text};")
    return lines


def render_declaration(
    declaration: Declaration,
    *,
    use_type_aliases: bool = False,
    banner: bool = True,
) -> str:
    """Render a declaration as an interface or a type alias."""
    lines: list[str] = []
    if banner:
        lines.append(
            f"/** Collection: {declaration.entity} "
            f"(primary key: {declaration.primary_key}) */",
        )

    if use_type_aliases:
        lines.append(f"export type {declaration.name} = {{")
    else:
        lines.append(f"export interface {declaration.name} {{")

    for prop in declaration.properties:
        lines.extend(render_property(prop))

    lines.append("};" if use_type_aliases else "}")
    return "\n".join(lines)


def declarations_to_typescript(
    declarations: Iterable[Declaration],
    root: Declaration,
    *,
    use_type_aliases: bool = False,
) -> str:
    """Assemble the output file: user collections, system collections, root."""
    declarations = list(declarations)
    ordered = [d for d in declarations if not d.system] + [
        d for d in declarations if d.system
    ]

    blocks = [HEADER]
    blocks.extend(
        render_declaration(declaration, use_type_aliases=use_type_aliases)
        for declaration in ordered
    )
    blocks.append(
        render_declaration(root, use_type_aliases=use_type_aliases, banner=False),
    )
    return "\n\n".join(blocks) + "\n"
