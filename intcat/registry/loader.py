"""Registry loader — read the integrations document from a file or URL.

The document is a JSON array of entry objects. Any failure to obtain or parse
it is fatal for the page: callers show a "Catalog unavailable" fallback
instead of a partially rendered listing.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import httpx

from intcat.errors import CatalogUnavailableError, EntryNotFoundError
from intcat.registry.models import IntegrationEntry

logger = logging.getLogger(__name__)


def is_remote(source: str | Path) -> bool:
    return str(source).startswith(("http://", "https://"))


def load_raw_catalog(
    source: str | Path,
    client: httpx.Client | None = None,
) -> list[dict[str, Any]]:
    """Return the registry document as a list of plain dicts."""
    text = _fetch_remote(str(source), client) if is_remote(source) else _read_local(Path(source))

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise CatalogUnavailableError(f"Failed to parse catalog {source}: {e}") from e

    if not isinstance(data, list):
        raise CatalogUnavailableError(f"Catalog {source} must contain a top-level array")

    logger.debug("Loaded %d catalog entries from %s", len(data), source)
    return data


def load_catalog(
    source: str | Path,
    client: httpx.Client | None = None,
) -> list[IntegrationEntry]:
    """Load and wrap every object of the registry document as an IntegrationEntry."""
    return [IntegrationEntry.from_dict(item) for item in load_raw_catalog(source, client) if isinstance(item, dict)]


def save_raw_catalog(path: str | Path, data: list[dict[str, Any]]) -> None:
    with open(path, "w", encoding="utf-8") as f:
        f.write(json.dumps(data, indent=2) + "\n")


def find_entry(entries: list[IntegrationEntry], entry_id: str) -> IntegrationEntry:
    """Return the entry with ``entry_id`` or raise EntryNotFoundError."""
    if not entry_id:
        raise EntryNotFoundError("Missing integration id.")
    for entry in entries:
        if entry.id == entry_id:
            return entry
    raise EntryNotFoundError(f"Integration '{entry_id}' not found.")


def _read_local(path: Path) -> str:
    try:
        with open(path, encoding="utf-8") as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise CatalogUnavailableError(f"Failed to load catalog: {e}") from e


def _fetch_remote(url: str, client: httpx.Client | None) -> str:
    owns_client = client is None
    http = client or httpx.Client(timeout=15.0, follow_redirects=True)
    try:
        response = http.get(url, headers={"Cache-Control": "no-store"})
    except httpx.HTTPError as e:
        raise CatalogUnavailableError(f"Failed to load catalog: {e}") from e
    finally:
        if owns_client:
            http.close()

    if response.status_code != 200:
        raise CatalogUnavailableError(f"Failed to load catalog: {response.status_code}")
    return response.text
