"""Tests for calendar-date parsing and day ages."""

from datetime import date, datetime, timedelta, timezone

from intcat.catalog.dates import days_since, parse_date, utc_today

FIXED_NOW = datetime(2026, 2, 26, 12, 0, tzinfo=timezone.utc)


def test_parse_date_is_midnight_utc():
    parsed = parse_date("2026-02-26")
    assert parsed == datetime(2026, 2, 26, tzinfo=timezone.utc)


def test_parse_date_rejects_garbage():
    assert parse_date("nope") is None
    assert parse_date("") is None
    assert parse_date(None) is None
    assert parse_date(20260226) is None
    assert parse_date("2026-02-30") is None
    assert parse_date("2026-2-3") is None
    assert parse_date("2026-02-26T10:00:00Z") is None
    assert parse_date("2026-02-26\n") is None


def test_days_since_computes_whole_day_age():
    assert days_since("2026-02-26", FIXED_NOW) == 0
    assert days_since("2026-02-25", FIXED_NOW) == 1
    assert days_since("2025-02-26", FIXED_NOW) == 365
    assert days_since("nope", FIXED_NOW) is None


def test_days_since_ignores_time_of_day():
    late = datetime(2026, 2, 26, 23, 59, 59, tzinfo=timezone.utc)
    early = datetime(2026, 2, 26, 0, 0, 1, tzinfo=timezone.utc)
    assert days_since("2026-02-20", late) == days_since("2026-02-20", early) == 6


def test_days_since_future_date_is_negative():
    assert days_since("2026-03-01", FIXED_NOW) == -3


def test_days_since_uses_utc_date_of_aware_now():
    # 2026-02-26 22:00 at UTC-5 is already 2026-02-27 in UTC.
    evening = datetime(2026, 2, 26, 22, 0, tzinfo=timezone(timedelta(hours=-5)))
    assert days_since("2026-02-26", evening) == 1


def test_days_since_accepts_naive_datetime_and_date():
    assert days_since("2026-02-20", datetime(2026, 2, 26, 12, 0)) == 6
    assert days_since("2026-02-20", date(2026, 2, 26)) == 6


def test_days_since_matches_exact_difference_across_a_year():
    start = date(2025, 1, 1)
    for offset in range(0, 400, 37):
        day = start + timedelta(days=offset)
        assert days_since(day.isoformat(), FIXED_NOW) == (date(2026, 2, 26) - day).days


def test_utc_today_defaults_to_current_date():
    assert utc_today() == datetime.now(timezone.utc).date()
