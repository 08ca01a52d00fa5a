"""Catalog session — the rendering driver that owns the mutable query state.

A session is built once per page load from the entry collection and the URL
query. From then on user interaction mutates the state through
:meth:`CatalogSession.update` and every change is written back to the URL;
the URL is never re-read mid-session.

    session = CatalogSession(entries, "target=aws&sort=recent", now=now)
    session.visible()           # ordered entries for the listing
    session.update(q="netbox")  # returns the new canonical query string
"""

from __future__ import annotations

import logging
from datetime import date, datetime

from intcat.catalog.pipeline import visible_entries
from intcat.catalog.state import (
    CatalogQueryState,
    QueryParams,
    normalize_inactive,
    normalize_query,
    normalize_sort,
    normalize_status,
    normalize_target,
    parse_catalog_state,
    resolve_target,
    state_to_query_string,
    target_counts,
)
from intcat.registry.loader import find_entry
from intcat.registry.models import IntegrationEntry

logger = logging.getLogger(__name__)

_NORMALIZERS = {
    "q": normalize_query,
    "target": normalize_target,
    "status": normalize_status,
    "sort": normalize_sort,
    "inactive": normalize_inactive,
}


class CatalogSession:
    """Owns one CatalogQueryState and keeps its URL form in sync."""

    def __init__(
        self,
        entries: list[IntegrationEntry],
        params: QueryParams | None = None,
        now: datetime | date | None = None,
    ):
        self.entries = list(entries)
        self.now = now
        self.state: CatalogQueryState = parse_catalog_state(params)
        self.state.target = resolve_target(self.state.target, self.entries)
        self.query_string = state_to_query_string(self.state)

    def visible(self) -> list[IntegrationEntry]:
        return visible_entries(self.entries, self.state, self.now)

    def update(self, **changes: object) -> str:
        """Apply user changes to the state and return the re-serialized query string.

        Values are normalized the same way URL parameters are, so an invalid
        status or sort falls back to its default instead of raising.
        """
        for name, value in changes.items():
            normalizer = _NORMALIZERS.get(name)
            if normalizer is None:
                raise TypeError(f"Unknown catalog state field: {name}")
            setattr(self.state, name, normalizer(value))

        if "target" in changes:
            self.state.target = resolve_target(self.state.target, self.entries)

        self.query_string = state_to_query_string(self.state)
        logger.debug("Catalog state -> ?%s", self.query_string)
        return self.query_string

    def reset(self) -> str:
        self.state = CatalogQueryState()
        self.query_string = ""
        return self.query_string

    @property
    def url(self) -> str:
        return f"?{self.query_string}" if self.query_string else ""

    def target_counts(self) -> list[tuple[str, int]]:
        return target_counts(self.entries)

    def detail(self, entry_id: str) -> IntegrationEntry:
        return find_entry(self.entries, entry_id)
