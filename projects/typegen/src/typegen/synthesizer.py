"""Property typing and declaration assembly."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from typegen.types import Declaration, Property

if TYPE_CHECKING:
    from collections.abc import Iterable

    from typegen.context import ResolutionContext
    from typegen.types import Field, Relationship

# Storage kinds grouped by the scalar they render as
STRING_KINDS = frozenset(
    {"string", "text", "uuid", "hash", "char", "character", "varchar", "enum"},
)
NUMBER_KINDS = frozenset(
    {"integer", "bigInteger", "float", "decimal", "double", "number", "real"},
)
BOOLEAN_KINDS = frozenset({"boolean"})
DATETIME_KINDS = frozenset({"timestamp", "dateTime", "datetime", "date", "time"})
JSON_KINDS = frozenset({"json"})
CSV_KINDS = frozenset({"csv"})

DATETIME_SPECIALS = frozenset(
    {"date-created", "date-updated", "timestamp", "cast-timestamp", "cast-datetime"},
)
JSON_SPECIALS = frozenset({"json", "cast-json"})
CSV_SPECIALS = frozenset({"csv", "cast-csv"})
RELATIONAL_SPECIALS = frozenset({"o2m", "m2o", "m2m", "m2a", "files", "translations"})

DATETIME_LITERAL = "'datetime'"
JSON_LITERAL = "'json'"
CSV_LITERAL = "'csv'"
OPAQUE_TYPE = "unknown"

IDENTIFIER = re.compile(r"[A-Za-z_$][A-Za-z0-9_$]*")


def property_name(name: str) -> str:
    """Quote a property name that is not a valid identifier."""
    if IDENTIFIER.fullmatch(name):
        return name
    escaped = name.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def is_presentation_field(item: Field) -> bool:
    """Check whether a field only exists to arrange the editing form."""
    interface = item.interface or ""
    if interface.startswith(("presentation-", "group-")):
        return True
    special = set(item.special)
    return "no-data" in special and not special & RELATIONAL_SPECIALS


def special_literal(item: Field) -> str | None:
    """Return the literal type of date-like, JSON or CSV fields."""
    special = set(item.special)
    if special & DATETIME_SPECIALS or item.kind in DATETIME_KINDS:
        return DATETIME_LITERAL
    if special & JSON_SPECIALS or item.kind in JSON_KINDS:
        return JSON_LITERAL
    if special & CSV_SPECIALS or item.kind in CSV_KINDS:
        return CSV_LITERAL
    return None


def scalar_type(kind: str) -> str:
    """Map a storage kind to a scalar type."""
    if kind in STRING_KINDS:
        return "string"
    if kind in NUMBER_KINDS:
        return "number"
    if kind in BOOLEAN_KINDS:
        return "boolean"
    return OPAQUE_TYPE


def _unique(values: Iterable[str]) -> list[str]:
    return list(dict.fromkeys(values))


def reference_type(
    relationship: Relationship,
    context: ResolutionContext,
) -> str | None:
    """Render the type of a field carrying a relationship edge."""
    unions = context.options.use_reference_unions

    if relationship.target is None:
        if not relationship.allowed:
            return None
        names = _unique(context.type_name(name) for name in relationship.allowed)
        if unions:
            names = _unique(context.id_kind(n) for n in relationship.allowed) + names
        return " | ".join(names)

    name = context.type_name(relationship.target)
    id_kind = context.id_kind(relationship.target)
    if relationship.kind.to_many:
        return f"{id_kind}[] | {name}[]" if unions else f"{name}[]"
    return f"{id_kind} | {name}" if unions else name


def field_type(item: Field, context: ResolutionContext) -> str | None:
    """Type a field, returning None when it must be left out."""
    if is_presentation_field(item):
        return None
    if relationship := context.relationship_for(item.entity, item.name):
        rendered = reference_type(relationship, context)
        if rendered is not None:
            return rendered
    if item.is_alias:
        return None
    return special_literal(item) or scalar_type(item.kind)


def referenced_targets(context: ResolutionContext, entity: str) -> list[str]:
    """Return the entities referenced by the rendered fields of an entity."""
    targets: list[str] = []
    for item in context.fields.get(entity, ()):
        relationship = context.relationship_for(entity, item.name)
        if relationship is None or is_presentation_field(item):
            continue
        if relationship.target is not None:
            targets.append(relationship.target)
        else:
            targets.extend(relationship.allowed)
    return _unique(targets)


def _ordered_fields(context: ResolutionContext, entity: str) -> list[Field]:
    primary_key = context.entities[entity].primary_key
    fields = context.fields.get(entity, [])
    return [item for item in fields if item.name == primary_key] + [
        item for item in fields if item.name != primary_key
    ]


def synthesize_entity(context: ResolutionContext, entity: str) -> Declaration:
    """Build the declaration of one entity, primary key first."""
    record = context.entities[entity]
    options = context.options
    properties: list[Property] = []

    for item in _ordered_fields(context, entity):
        rendered = field_type(item, context)
        if rendered is None:
            continue
        is_key = item.name == record.primary_key
        if is_key and context.relationship_for(entity, item.name) is None:
            rendered = record.id_kind
        optional = item.nullable and not is_key and not options.make_fields_required
        note = item.note if options.annotate_with_notes else None
        properties.append(
            Property(property_name(item.name), rendered, optional=optional, note=note),
        )

    fields = context.fields.get(entity, ())
    if not any(item.name == record.primary_key for item in fields):
        key = Property(property_name(record.primary_key), record.id_kind)
        properties.insert(0, key)

    return Declaration(
        name=record.type_name,
        entity=entity,
        primary_key=record.primary_key,
        properties=tuple(properties),
        system=record.system,
    )


def synthesize_root(
    context: ResolutionContext,
    declarations: Iterable[Declaration],
) -> Declaration:
    """Build the aggregate declaration listing every exported entity."""
    properties: list[Property] = []
    for declaration in declarations:
        if declaration.system and not context.options.export_system_entities:
            continue
        record = context.entities[declaration.entity]
        type_text = declaration.name if record.singleton else f"{declaration.name}[]"
        properties.append(Property(property_name(declaration.entity), type_text))

    return Declaration(
        name=context.options.root_type_name,
        entity="",
        primary_key="",
        properties=tuple(properties),
    )
