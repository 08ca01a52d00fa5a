"""Catalog query state — the filter+sort selection shared by list and detail views.

The state travels in the URL as ``q``, ``target``, ``status``, ``sort`` and
``inactive``. Parsing never fails: absent or invalid values fall back to the
defaults. Serializing emits only the values that differ from the defaults, so
the canonical URL of the default state has no query string at all.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Union
from urllib.parse import parse_qs, urlencode

if TYPE_CHECKING:
    from intcat.registry.models import IntegrationEntry

ALL = "all"

QueryParams = Union[str, Mapping[str, object]]


class StatusFilter(str, Enum):
    ALL = "all"
    FRESH = "fresh"
    AGING = "aging"
    STALE = "stale"
    INACTIVE = "inactive"


class SortOrder(str, Enum):
    TRUST = "trust"
    RECENT = "recent"
    NAME = "name"


_TRUE_VALUES = {"1", "true"}


@dataclass
class CatalogQueryState:
    """The user's current filter/sort selection. Defaults are the canonical state."""

    q: str = ""
    target: str = ALL
    status: StatusFilter = StatusFilter.ALL
    sort: SortOrder = SortOrder.TRUST
    inactive: bool = False

    def __post_init__(self) -> None:
        self.status = normalize_status(self.status)
        self.sort = normalize_sort(self.sort)

    @property
    def is_default(self) -> bool:
        return self == CatalogQueryState()


def _first(params: Mapping[str, object], key: str) -> str:
    value = params.get(key)
    if isinstance(value, (list, tuple)):
        value = value[0] if value else None
    if value is None:
        return ""
    return str(value)


def _as_mapping(params: QueryParams | None) -> Mapping[str, object]:
    if params is None:
        return {}
    if isinstance(params, str):
        return parse_qs(params.lstrip("?"), keep_blank_values=True)
    return params


def normalize_query(value: object) -> str:
    return "" if value is None else str(value).strip()


def normalize_target(value: object) -> str:
    return normalize_query(value) or ALL


def normalize_status(value: object) -> StatusFilter:
    if isinstance(value, StatusFilter):
        return value
    try:
        return StatusFilter(normalize_query(value))
    except ValueError:
        return StatusFilter.ALL


def normalize_sort(value: object) -> SortOrder:
    if isinstance(value, SortOrder):
        return value
    try:
        return SortOrder(normalize_query(value))
    except ValueError:
        return SortOrder.TRUST


def normalize_inactive(value: object) -> bool:
    if isinstance(value, bool):
        return value
    return normalize_query(value) in _TRUE_VALUES


def parse_catalog_state(params: QueryParams | None) -> CatalogQueryState:
    """Build a state from URL parameters (query string or mapping).

    Unknown keys are ignored; for repeated keys the first value wins.
    """
    mapping = _as_mapping(params)
    return CatalogQueryState(
        q=normalize_query(_first(mapping, "q")),
        target=normalize_target(_first(mapping, "target")),
        status=normalize_status(_first(mapping, "status")),
        sort=normalize_sort(_first(mapping, "sort")),
        inactive=normalize_inactive(_first(mapping, "inactive")),
    )


def state_to_search_params(state: CatalogQueryState) -> dict[str, str]:
    """Emit only the parameters that differ from the default state, in URL order."""
    params: dict[str, str] = {}
    if state.q:
        params["q"] = state.q
    if state.target and state.target != ALL:
        params["target"] = state.target
    if state.status != StatusFilter.ALL:
        params["status"] = state.status.value
    if state.sort != SortOrder.TRUST:
        params["sort"] = state.sort.value
    if state.inactive:
        params["inactive"] = "1"
    return params


def state_to_query_string(state: CatalogQueryState) -> str:
    """URL-encoded form of :func:`state_to_search_params` (no leading ``?``)."""
    return urlencode(state_to_search_params(state))


def known_targets(entries: Iterable[IntegrationEntry]) -> set[str]:
    return {target for entry in entries for target in entry.integration_targets}


def target_counts(entries: Iterable[IntegrationEntry]) -> list[tuple[str, int]]:
    """Targets with their entry counts, most common first, then by name."""
    counts: dict[str, int] = {}
    for entry in entries:
        for target in entry.integration_targets:
            counts[target] = counts.get(target, 0) + 1
    return sorted(counts.items(), key=lambda item: (-item[1], item[0]))


def resolve_target(target: str, entries: Iterable[IntegrationEntry]) -> str:
    """Return ``target`` if some entry carries it, else ``"all"``."""
    if target == ALL or target in known_targets(entries):
        return target
    return ALL
