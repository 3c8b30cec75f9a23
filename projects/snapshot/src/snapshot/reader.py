"""Reading schema snapshots from disk."""

from __future__ import annotations

import json
from logging import getLogger
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from pathlib import Path

    from typegen.types import Snapshot

logger = getLogger(__name__)

SECTIONS = ("collections", "fields", "relations")


def normalize_snapshot(payload: Any) -> Snapshot:  # noqa: ANN401
    """Unwrap an API response and default missing sections to empty lists."""
    if not isinstance(payload, dict):
        msg = f"Snapshot must be a JSON object, got {type(payload).__name__}"
        raise ValueError(msg)  # noqa: TRY004

    data = payload.get("data", payload)
    if not isinstance(data, dict):
        msg = "Snapshot 'data' member must be a JSON object"
        raise ValueError(msg)  # noqa: TRY004

    snapshot: dict[str, Any] = dict(data)
    for section in SECTIONS:
        value = snapshot.get(section)
        if value is None:
            logger.warning("Snapshot has no %s, treating as empty", section)
            snapshot[section] = []
        elif not isinstance(value, list):
            msg = f"Snapshot section '{section}' must be a list"
            raise ValueError(msg)
    return snapshot  # type: ignore[return-value]


def read_snapshot_file(path: Path) -> Snapshot:
    """Load a snapshot exported to a JSON file."""
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as err:
        msg = f"Invalid JSON in snapshot file {path}: {err}"
        raise ValueError(msg) from err
    return normalize_snapshot(payload)
