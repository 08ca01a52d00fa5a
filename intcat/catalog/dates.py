"""Calendar-date helpers for day-granularity ages relative to an explicit ``now``."""

from __future__ import annotations

import re
from datetime import date, datetime, timezone

_DATE_RE = re.compile(r"\d{4}-\d{2}-\d{2}")


def parse_date(value: object) -> datetime | None:
    """Interpret ``YYYY-MM-DD`` as midnight UTC of that calendar date.

    Returns None for anything that is not a real calendar date in that form.
    """
    if not isinstance(value, str) or not _DATE_RE.fullmatch(value):
        return None
    try:
        parsed = date.fromisoformat(value)
    except ValueError:
        return None
    return datetime(parsed.year, parsed.month, parsed.day, tzinfo=timezone.utc)


def utc_today(now: datetime | date | None = None) -> date:
    """Return the UTC calendar date of ``now`` (default: the current instant).

    Naive datetimes are taken to already be UTC.
    """
    if now is None:
        return datetime.now(timezone.utc).date()
    if isinstance(now, datetime):
        if now.tzinfo is not None:
            now = now.astimezone(timezone.utc)
        return now.date()
    return now


def days_since(value: object, now: datetime | date | None = None) -> int | None:
    """Whole UTC days between the date in ``value`` and the date of ``now``.

    Future dates give negative ages; unparsable values give None.
    """
    parsed = parse_date(value)
    if parsed is None:
        return None
    return (utc_today(now) - parsed.date()).days
