"""Registry validator — check the integrations document before it is published.

Every entry is checked for required fields, identifier and handle formats,
https links, allowed enum values and well-formed dates. Entries whose last
verification is older than STALE_DAYS pass validation but are reported as
stale warnings, oldest first.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any
from urllib.parse import urlparse

from intcat.catalog.dates import days_since, parse_date
from intcat.catalog.readiness import STALE_DAYS

REQUIRED_FIELDS = (
    "id",
    "name",
    "summary",
    "repo_url",
    "docs_url",
    "category",
    "integration_targets",
    "maturity",
    "support_tier",
    "maintainers",
    "verified_by",
    "issue_url",
    "license",
    "last_release_date",
    "last_repo_commit_date",
    "last_verified_date",
    "compatibility",
    "security_notes",
)
VALID_CATEGORIES = ("source-of-truth", "automation", "cloud-sync", "reporting", "other")
VALID_MATURITY = ("incubating", "active", "deprecated")
VALID_SUPPORT_TIERS = ("best_effort",)
MAX_SUMMARY_LENGTH = 200

ID_RE = re.compile(r"[a-z0-9-]+")
HANDLE_RE = re.compile(r"@[A-Za-z0-9_.-]+(/[A-Za-z0-9_.-]+)?")
UPSTREAM_REPO_RE = re.compile(r"[A-Za-z0-9_.-]+/[A-Za-z0-9_.-]+")
DATE_FORMAT_RE = re.compile(r"\d{4}-\d{2}-\d{2}")


@dataclass
class StaleEntry:
    id: str
    age_days: int


@dataclass
class RegistryValidationResult:
    """Errors block publication; stale entries are warnings only."""

    entry_count: int = 0
    errors: list[str] = field(default_factory=list)
    stale: list[StaleEntry] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return not self.errors

    def summary(self) -> str:
        status = "PASS" if self.passed else "FAIL"
        return f"[{status}] {self.entry_count} entries, {len(self.errors)} error(s), {len(self.stale)} stale"


def validate_registry(data: Any, now: datetime | date | None = None) -> RegistryValidationResult:
    """Validate a parsed registry document (the top-level JSON value)."""
    result = RegistryValidationResult()

    if not isinstance(data, list):
        result.errors.append("Registry must contain a top-level array")
        return result

    result.entry_count = len(data)
    ids: set[str] = set()
    for index, entry in enumerate(data):
        prefix = f"entry[{index}] "
        if not isinstance(entry, dict):
            result.errors.append(f"{prefix}must be an object")
            continue
        _validate_entry(entry, prefix, ids, result, now)

    result.stale.sort(key=lambda s: s.age_days, reverse=True)
    return result


def _validate_entry(
    entry: dict,
    prefix: str,
    ids: set[str],
    result: RegistryValidationResult,
    now: datetime | date | None,
) -> None:
    errors = result.errors

    for key in REQUIRED_FIELDS:
        if key not in entry:
            errors.append(f"{prefix}missing required field '{key}'")

    entry_id = entry.get("id")
    if not isinstance(entry_id, str) or not ID_RE.fullmatch(entry_id):
        errors.append(f"{prefix}id must match {ID_RE.pattern}")
    elif entry_id in ids:
        errors.append(f"{prefix}id '{entry_id}' is duplicated")
    else:
        ids.add(entry_id)

    if not _non_empty_string(entry.get("name")):
        errors.append(f"{prefix}name must be a non-empty string")

    summary = entry.get("summary")
    if not _non_empty_string(summary) or len(summary) > MAX_SUMMARY_LENGTH:
        errors.append(f"{prefix}summary must be 1-{MAX_SUMMARY_LENGTH} characters")

    for key in ("repo_url", "docs_url", "issue_url"):
        _check_https_url(key, entry.get(key), prefix, errors)

    if entry.get("category") not in VALID_CATEGORIES:
        errors.append(f"{prefix}category must be one of: {', '.join(VALID_CATEGORIES)}")

    targets = entry.get("integration_targets")
    if not isinstance(targets, list) or not targets:
        errors.append(f"{prefix}integration_targets must be a non-empty array")

    if entry.get("maturity") not in VALID_MATURITY:
        errors.append(f"{prefix}maturity must be one of: {', '.join(VALID_MATURITY)}")

    if entry.get("support_tier") not in VALID_SUPPORT_TIERS:
        errors.append(f"{prefix}support_tier must be one of: {', '.join(VALID_SUPPORT_TIERS)}")

    maintainers = entry.get("maintainers")
    if not isinstance(maintainers, list) or not maintainers:
        errors.append(f"{prefix}maintainers must be a non-empty array")
    else:
        for maintainer in maintainers:
            if not isinstance(maintainer, str) or not HANDLE_RE.fullmatch(maintainer):
                errors.append(f"{prefix}maintainer '{maintainer}' is invalid")

    verified_by = entry.get("verified_by")
    if not isinstance(verified_by, str) or not HANDLE_RE.fullmatch(verified_by):
        errors.append(f"{prefix}verified_by must match {HANDLE_RE.pattern}")

    if not _non_empty_string(entry.get("license")):
        errors.append(f"{prefix}license must be a non-empty string")

    _check_date("last_release_date", entry.get("last_release_date"), prefix, errors, now)
    _check_date("last_repo_commit_date", entry.get("last_repo_commit_date"), prefix, errors, now, disallow_future=True)
    if _check_date("last_verified_date", entry.get("last_verified_date"), prefix, errors, now, disallow_future=True):
        age = days_since(entry["last_verified_date"], now)
        if age is not None and age > STALE_DAYS:
            result.stale.append(StaleEntry(id=str(entry_id), age_days=age))

    _check_compatibility(entry.get("compatibility"), prefix, errors)

    if not _non_empty_string(entry.get("security_notes")):
        errors.append(f"{prefix}security_notes must be a non-empty string")

    if entry.get("deprecation"):
        _check_deprecation(entry["deprecation"], prefix, errors, now)

    if entry.get("fork"):
        _check_fork(entry["fork"], prefix, errors)


def _non_empty_string(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def _check_https_url(label: str, value: Any, prefix: str, errors: list[str]) -> None:
    parsed = urlparse(value) if isinstance(value, str) else None
    if parsed is None or not parsed.scheme or not parsed.netloc:
        errors.append(f"{prefix}{label} must be a valid URL")
    elif parsed.scheme != "https":
        errors.append(f"{prefix}{label} must use https")


def _check_date(
    label: str,
    value: Any,
    prefix: str,
    errors: list[str],
    now: datetime | date | None,
    disallow_future: bool = False,
) -> bool:
    """Record date errors for ``label``; return True when the date is usable."""
    if not isinstance(value, str) or not DATE_FORMAT_RE.fullmatch(value):
        errors.append(f"{prefix}{label} must match YYYY-MM-DD")
        return False

    if parse_date(value) is None:
        errors.append(f"{prefix}{label} must be a valid date")
        return False

    if disallow_future and days_since(value, now) < 0:
        errors.append(f"{prefix}{label} cannot be in the future")

    return True


def _check_compatibility(compat: Any, prefix: str, errors: list[str]) -> None:
    if not isinstance(compat, dict):
        errors.append(f"{prefix}compatibility must be an object")
        return
    if not compat.get("forward_min_version"):
        errors.append(f"{prefix}compatibility.forward_min_version is required")
    envs = compat.get("tested_environments")
    if not isinstance(envs, list) or not envs:
        errors.append(f"{prefix}compatibility.tested_environments must be a non-empty array")


def _check_deprecation(deprecation: Any, prefix: str, errors: list[str], now: datetime | date | None) -> None:
    if not isinstance(deprecation, dict):
        errors.append(f"{prefix}deprecation must be an object if present")
        return
    if not deprecation.get("status"):
        errors.append(f"{prefix}deprecation.status is required when deprecation is present")
    if not deprecation.get("date"):
        errors.append(f"{prefix}deprecation.date is required when deprecation is present")
    else:
        _check_date("deprecation.date", deprecation["date"], prefix, errors, now)
    if not deprecation.get("replacement"):
        errors.append(f"{prefix}deprecation.replacement is required when deprecation is present")


def _check_fork(fork: Any, prefix: str, errors: list[str]) -> None:
    if not isinstance(fork, dict):
        errors.append(f"{prefix}fork must be an object if present")
        return
    upstream = fork.get("upstream_repo")
    if not isinstance(upstream, str) or not UPSTREAM_REPO_RE.fullmatch(upstream):
        errors.append(f"{prefix}fork.upstream_repo must match {UPSTREAM_REPO_RE.pattern}")
    for key in ("upstream_branch", "fork_branch", "note"):
        if not _non_empty_string(fork.get(key)):
            errors.append(f"{prefix}fork.{key} must be a non-empty string")
