"""Catalog core — readiness scoring and the query-state model.

The core provides:
- Dates: calendar-date parsing and day-granularity ages against an explicit ``now``
- Readiness: fresh/aging/stale/unknown classification of verification age
- Inactivity: the "dormant" predicate over commit and verification ages
- Trust ranking: the default sort order combining inactivity and readiness
- Query state: parse/serialize the filter+sort state to URL parameters
- Pipeline: target, status, inactive-visibility and free-text filters plus sorting

Every function is pure over its explicit arguments; entries are never mutated.
"""

from intcat.catalog.dates import days_since, parse_date
from intcat.catalog.pipeline import compare_entries, search_text, sort_entries, visible_entries
from intcat.catalog.readiness import (
    FRESH_DAYS,
    INACTIVE_DAYS,
    STALE_DAYS,
    Readiness,
    ReadinessLabel,
    inactive_for,
    readiness_for,
    trust_rank_for,
)
from intcat.catalog.state import (
    CatalogQueryState,
    SortOrder,
    StatusFilter,
    parse_catalog_state,
    state_to_query_string,
    state_to_search_params,
)

__all__ = [
    "FRESH_DAYS",
    "INACTIVE_DAYS",
    "STALE_DAYS",
    "CatalogQueryState",
    "Readiness",
    "ReadinessLabel",
    "SortOrder",
    "StatusFilter",
    "compare_entries",
    "days_since",
    "inactive_for",
    "parse_catalog_state",
    "parse_date",
    "readiness_for",
    "search_text",
    "sort_entries",
    "state_to_query_string",
    "state_to_search_params",
    "trust_rank_for",
    "visible_entries",
]
