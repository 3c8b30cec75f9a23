"""TypeScript type generation from Directus schema snapshots."""

from typegen.catalog import DEFAULT_CATALOG, SystemCatalog, SystemEntity, SystemLink
from typegen.patterns import DEFAULT_PATTERNS, NamingPatterns
from typegen.pipeline import SchemaPipeline, generate_typescript, snapshot_to_typescript
from typegen.reporting import report_to_json, report_to_markdown
from typegen.types import (
    GenerateOptions,
    GenerationResult,
    RelationshipKind,
    ResolutionReport,
    Snapshot,
)

__all__ = [
    "DEFAULT_CATALOG",
    "DEFAULT_PATTERNS",
    "GenerateOptions",
    "GenerationResult",
    "NamingPatterns",
    "RelationshipKind",
    "ResolutionReport",
    "SchemaPipeline",
    "Snapshot",
    "SystemCatalog",
    "SystemEntity",
    "SystemLink",
    "generate_typescript",
    "report_to_json",
    "report_to_markdown",
    "snapshot_to_typescript",
]
