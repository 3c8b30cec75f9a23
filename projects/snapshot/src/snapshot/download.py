"""Module for fetching schema snapshots from a running Directus instance."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from requests import get, post

from snapshot.reader import normalize_snapshot

if TYPE_CHECKING:
    from typegen.types import Snapshot

logger = getLogger(__name__)

TIMEOUT = 30
USER_AGENT = "directus-typeforge"


def _endpoint(host: str, path: str) -> str:
    return f"{host.rstrip('/')}/{path.lstrip('/')}"


def authenticate(host: str, email: str, password: str) -> str:
    """Log in with email and password and return an access token."""
    response = post(
        _endpoint(host, "auth/login"),
        json={"email": email, "password": password},
        headers={"User-Agent": USER_AGENT},
        timeout=TIMEOUT,
    )
    response.raise_for_status()

    try:
        token = response.json()["data"]["access_token"]
    except (KeyError, TypeError, ValueError) as err:
        msg = f"Login response from {host} has no access token"
        raise ValueError(msg) from err

    logger.info("Authenticated against %s as %s", host, email)
    return token


def fetch_snapshot(host: str, token: str) -> Snapshot:
    """Download the current schema snapshot."""
    url = _endpoint(host, "schema/snapshot")
    logger.info("Fetching schema snapshot from %s", url)
    response = get(
        url,
        headers={"Authorization": f"Bearer {token}", "User-Agent": USER_AGENT},
        timeout=TIMEOUT,
    )
    response.raise_for_status()

    try:
        payload = response.json()
    except ValueError as err:
        msg = f"Schema snapshot from {url} is not valid JSON"
        raise ValueError(msg) from err
    return normalize_snapshot(payload)


def download_snapshot(
    host: str,
    *,
    token: str | None = None,
    email: str | None = None,
    password: str | None = None,
) -> Snapshot:
    """Fetch a snapshot using a static token or email and password."""
    if not token:
        if not (email and password):
            msg = "Either a token or an email and password are required"
            raise ValueError(msg)
        token = authenticate(host, email, password)
    return fetch_snapshot(host, token)
