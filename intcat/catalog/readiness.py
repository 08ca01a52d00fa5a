"""Readiness, inactivity and trust ranking for catalog entries.

Readiness buckets the age of ``last_verified_date``:

    unknown  -> no parsable verification date
    fresh    -> age <= FRESH_DAYS (future dates included)
    aging    -> FRESH_DAYS < age <= STALE_DAYS
    stale    -> age > STALE_DAYS

An entry is inactive only when both its last commit and its last verification
are strictly older than INACTIVE_DAYS. An unknown date never makes an entry
inactive, even though the same unknown verification date is its own readiness
bucket.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import TYPE_CHECKING

from intcat.catalog.dates import days_since

if TYPE_CHECKING:
    from intcat.registry.models import IntegrationEntry

FRESH_DAYS = 30
STALE_DAYS = 90
INACTIVE_DAYS = 180

INACTIVE_TIER = 4


class ReadinessLabel(str, Enum):
    FRESH = "fresh"
    AGING = "aging"
    STALE = "stale"
    UNKNOWN = "unknown"


_TIERS = {
    ReadinessLabel.FRESH: 0,
    ReadinessLabel.AGING: 1,
    ReadinessLabel.STALE: 2,
    ReadinessLabel.UNKNOWN: 3,
}


@dataclass(frozen=True)
class Readiness:
    """Derived readiness of one entry; recomputed on every render."""

    label: ReadinessLabel
    age_days: int | None = None

    @property
    def css_class(self) -> str:
        return f"readiness-{self.label.value}"


def classify_age(age_days: int | None) -> ReadinessLabel:
    if age_days is None:
        return ReadinessLabel.UNKNOWN
    if age_days <= FRESH_DAYS:
        return ReadinessLabel.FRESH
    if age_days <= STALE_DAYS:
        return ReadinessLabel.AGING
    return ReadinessLabel.STALE


def readiness_for(entry: IntegrationEntry, now: datetime | date | None = None) -> Readiness:
    """Classify an entry by the age of its last verification."""
    age_days = days_since(entry.last_verified_date, now)
    return Readiness(label=classify_age(age_days), age_days=age_days)


def inactive_for(entry: IntegrationEntry, now: datetime | date | None = None) -> bool:
    """True iff both the repo commit and the verification are older than INACTIVE_DAYS."""
    repo_age = days_since(entry.last_repo_commit_date, now)
    verify_age = days_since(entry.last_verified_date, now)
    if repo_age is None or verify_age is None:
        return False
    return repo_age > INACTIVE_DAYS and verify_age > INACTIVE_DAYS


def trust_rank_for(entry: IntegrationEntry, now: datetime | date | None = None) -> int:
    """Sort tier for the trust order: 0 is the most trusted, 4 is inactive."""
    if inactive_for(entry, now):
        return INACTIVE_TIER
    return _TIERS[readiness_for(entry, now).label]
