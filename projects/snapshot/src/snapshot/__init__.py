"""Reading and fetching Directus schema snapshots."""

from snapshot.download import authenticate, download_snapshot, fetch_snapshot
from snapshot.reader import normalize_snapshot, read_snapshot_file

__all__ = [
    "authenticate",
    "download_snapshot",
    "fetch_snapshot",
    "normalize_snapshot",
    "read_snapshot_file",
]
