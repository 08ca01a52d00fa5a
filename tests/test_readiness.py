"""Tests for readiness, inactivity and trust ranking."""

from datetime import datetime, timedelta, timezone

from intcat.catalog.readiness import (
    INACTIVE_TIER,
    ReadinessLabel,
    inactive_for,
    readiness_for,
    trust_rank_for,
)
from intcat.registry.models import IntegrationEntry

FIXED_NOW = datetime(2026, 2, 26, 12, 0, tzinfo=timezone.utc)


def _days_ago(days: int) -> str:
    return (FIXED_NOW - timedelta(days=days)).date().isoformat()


def _entry(verified=None, commit=None, name="Example") -> IntegrationEntry:
    return IntegrationEntry(
        id=name.lower(),
        name=name,
        last_verified_date=_days_ago(verified) if isinstance(verified, int) else (verified or ""),
        last_repo_commit_date=_days_ago(commit) if isinstance(commit, int) else (commit or ""),
    )


def test_readiness_boundaries():
    assert readiness_for(_entry(verified=0), FIXED_NOW).label == ReadinessLabel.FRESH
    assert readiness_for(_entry(verified=30), FIXED_NOW).label == ReadinessLabel.FRESH
    assert readiness_for(_entry(verified=31), FIXED_NOW).label == ReadinessLabel.AGING
    assert readiness_for(_entry(verified=90), FIXED_NOW).label == ReadinessLabel.AGING
    assert readiness_for(_entry(verified=91), FIXED_NOW).label == ReadinessLabel.STALE


def test_readiness_reports_age():
    readiness = readiness_for(_entry(verified=45), FIXED_NOW)
    assert readiness.age_days == 45
    assert readiness.css_class == "readiness-aging"


def test_readiness_unknown_without_valid_date():
    readiness = readiness_for(_entry(verified="not-a-date"), FIXED_NOW)
    assert readiness.label == ReadinessLabel.UNKNOWN
    assert readiness.age_days is None
    assert readiness_for(_entry(), FIXED_NOW).label == ReadinessLabel.UNKNOWN


def test_future_verification_is_fresh():
    readiness = readiness_for(_entry(verified=-5), FIXED_NOW)
    assert readiness.label == ReadinessLabel.FRESH
    assert readiness.age_days == -5


def test_inactive_requires_both_ages_over_threshold():
    assert inactive_for(_entry(verified=181, commit=181), FIXED_NOW) is True
    assert inactive_for(_entry(verified=30, commit=181), FIXED_NOW) is False
    assert inactive_for(_entry(verified=181, commit=180), FIXED_NOW) is False
    assert inactive_for(_entry(verified=180, commit=181), FIXED_NOW) is False


def test_inactive_is_false_when_a_date_is_unknown():
    assert inactive_for(_entry(verified=400, commit="garbage"), FIXED_NOW) is False
    assert inactive_for(_entry(verified=None, commit=400), FIXED_NOW) is False


def test_trust_rank_tiers():
    assert trust_rank_for(_entry(verified=1, commit=1), FIXED_NOW) == 0
    assert trust_rank_for(_entry(verified=60, commit=1), FIXED_NOW) == 1
    assert trust_rank_for(_entry(verified=120, commit=1), FIXED_NOW) == 2
    assert trust_rank_for(_entry(verified=None, commit=1), FIXED_NOW) == 3
    assert trust_rank_for(_entry(verified=200, commit=200), FIXED_NOW) == INACTIVE_TIER


def test_stale_but_recently_committed_is_not_inactive():
    entry = _entry(verified=200, commit=10)
    assert readiness_for(entry, FIXED_NOW).label == ReadinessLabel.STALE
    assert trust_rank_for(entry, FIXED_NOW) == 2
