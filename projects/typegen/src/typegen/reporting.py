"""Report generation utilities for resolution results."""

from __future__ import annotations

import json
from collections import defaultdict
from dataclasses import asdict
from pathlib import Path
from typing import TYPE_CHECKING

from jinja2 import Environment, FileSystemLoader, select_autoescape

if TYPE_CHECKING:
    from typegen.types import ResolutionReport

TEMPLATE_DIR = Path(__file__).parent / "templates"

# Jinja2 environment for markdown template rendering
_JINJA_ENV = Environment(
    loader=FileSystemLoader(TEMPLATE_DIR),
    autoescape=select_autoescape(),
    trim_blocks=True,
    lstrip_blocks=True,
)


def json_default(obj: object) -> object:
    """Convert non-serializable objects for JSON encoding."""
    if isinstance(obj, (set, frozenset)):
        return sorted(obj) if obj else []
    msg = f"Object of type {type(obj)} is not JSON serializable"
    raise TypeError(msg)


def report_to_json(report: ResolutionReport) -> str:
    """Convert a ResolutionReport to a JSON string."""
    return json.dumps(asdict(report), indent=2, default=json_default)


def report_to_markdown(report: ResolutionReport, title: str = "schema") -> str:
    """Convert a ResolutionReport to a Markdown string.

    Args:
        report: Diagnostics of one pipeline run
        title: Name of the schema the report describes

    Returns:
        Markdown string representation

    """
    template = _JINJA_ENV.get_template("report.md")

    resolved_by_strategy = defaultdict(list)
    for item in report.resolved:
        resolved_by_strategy[item.strategy].append(item)

    return template.render(
        title=title,
        resolved_by_strategy=dict(resolved_by_strategy),
        resolved_count=len(report.resolved),
        unresolved=report.unresolved,
        junctions=report.junctions,
        collisions=report.collisions,
        undefined_targets=report.undefined_targets,
    )
