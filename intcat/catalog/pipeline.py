"""Filter and sort pipeline from the full entry collection to the visible subset.

Four independent predicates (target, inactive visibility, status, free text)
select the entries; the comparator chosen by ``state.sort`` orders them last.
The whole pass is a linear scan plus one sort so it can run on every keystroke.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from datetime import date, datetime

from intcat.catalog.dates import days_since
from intcat.catalog.readiness import inactive_for, readiness_for, trust_rank_for
from intcat.catalog.state import ALL, CatalogQueryState, SortOrder, StatusFilter
from intcat.registry.models import IntegrationEntry

Now = datetime | date | None
SortKey = Callable[[IntegrationEntry], tuple]


def search_text(entry: IntegrationEntry, now: Now = None) -> str:
    """The lowercase haystack that free-text queries are matched against."""
    parts = [
        entry.id,
        entry.name,
        entry.summary,
        entry.category,
        entry.maturity,
        entry.support_tier,
        entry.last_verified_date,
        entry.last_repo_commit_date,
        entry.verified_by,
        entry.maintainer_source or "",
        readiness_for(entry, now).label.value,
        "inactive" if inactive_for(entry, now) else "",
        *entry.integration_targets,
    ]
    return " ".join(str(part) for part in parts).lower()


def matches_target(entry: IntegrationEntry, target: str) -> bool:
    return target == ALL or target in entry.integration_targets


def matches_visibility(entry: IntegrationEntry, state: CatalogQueryState, now: Now = None) -> bool:
    """Dormant entries stay hidden unless the toggle or the inactive status surfaces them."""
    if state.inactive or state.status == StatusFilter.INACTIVE:
        return True
    return not inactive_for(entry, now)


def matches_status(entry: IntegrationEntry, status: StatusFilter, now: Now = None) -> bool:
    if status == StatusFilter.ALL:
        return True
    if status == StatusFilter.INACTIVE:
        return inactive_for(entry, now)
    return readiness_for(entry, now).label.value == status.value


def matches_query(entry: IntegrationEntry, query: str, now: Now = None) -> bool:
    needle = query.strip().lower()
    if not needle:
        return True
    return needle in search_text(entry, now)


def _name_key(entry: IntegrationEntry) -> tuple:
    return (entry.name,)


def _recent_key(now: Now) -> SortKey:
    def key(entry: IntegrationEntry) -> tuple:
        age = days_since(entry.last_repo_commit_date, now)
        # Unknown commit age sorts after every known age.
        return (age is None, age if age is not None else 0, entry.name)

    return key


def _trust_key(now: Now) -> SortKey:
    def key(entry: IntegrationEntry) -> tuple:
        # Within a tier verification ages are either all known or all unknown.
        age = days_since(entry.last_verified_date, now)
        return (trust_rank_for(entry, now), age if age is not None else 0, entry.name)

    return key


def sort_key_for(sort: SortOrder, now: Now = None) -> SortKey:
    if sort == SortOrder.NAME:
        return _name_key
    if sort == SortOrder.RECENT:
        return _recent_key(now)
    return _trust_key(now)


def compare_entries(a: IntegrationEntry, b: IntegrationEntry, sort: SortOrder, now: Now = None) -> int:
    """Three-way comparison under ``sort``: negative when ``a`` goes first."""
    key = sort_key_for(sort, now)
    left, right = key(a), key(b)
    return (left > right) - (left < right)


def sort_entries(entries: Iterable[IntegrationEntry], sort: SortOrder, now: Now = None) -> list[IntegrationEntry]:
    return sorted(entries, key=sort_key_for(sort, now))


def visible_entries(
    entries: Iterable[IntegrationEntry],
    state: CatalogQueryState,
    now: Now = None,
) -> list[IntegrationEntry]:
    """Apply the target, visibility, status and text filters, then sort."""
    kept = [
        entry
        for entry in entries
        if matches_target(entry, state.target)
        and matches_visibility(entry, state, now)
        and matches_status(entry, state.status, now)
        and matches_query(entry, state.q, now)
    ]
    return sort_entries(kept, state.sort, now)
