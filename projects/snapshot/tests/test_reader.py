"""Tests for reading snapshot files."""

import json
from pathlib import Path

import pytest

from snapshot.reader import normalize_snapshot, read_snapshot_file

BARE = {
    "version": 1,
    "directus": "11.0.0",
    "collections": [{"collection": "posts", "meta": None, "schema": None}],
    "fields": [],
    "relations": [],
}


def test_bare_snapshot() -> None:
    """Test that a CLI export is accepted as is."""
    assert normalize_snapshot(BARE) == BARE


def test_wrapped_snapshot() -> None:
    """Test that an API response is unwrapped."""
    assert normalize_snapshot({"data": BARE}) == BARE


def test_missing_sections_become_empty() -> None:
    """Test that absent or null sections default to empty lists."""
    snapshot = normalize_snapshot({"collections": [], "relations": None})
    assert snapshot["fields"] == []
    assert snapshot["relations"] == []


@pytest.mark.parametrize(
    "payload",
    [[], {"data": "nope"}, {"collections": {"posts": {}}}],
)
def test_malformed_snapshot(payload: object) -> None:
    """Test that malformed payloads are rejected."""
    with pytest.raises(ValueError, match="Snapshot"):
        normalize_snapshot(payload)


def test_read_snapshot_file(tmp_path: Path) -> None:
    """Test reading a snapshot from disk."""
    path = tmp_path / "snapshot.json"
    path.write_text(json.dumps({"data": BARE}), encoding="utf-8")
    assert read_snapshot_file(path) == BARE


def test_read_invalid_json(tmp_path: Path) -> None:
    """Test that invalid JSON is reported as a ValueError."""
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(ValueError, match="Invalid JSON"):
        read_snapshot_file(path)
