"""Metadata refresher — rewrite activity dates and maintainers from GitHub.

For every registry entry the refresher looks up the repository's default
branch, its latest commit, its latest release and the commits of the last
``window_days``. Recent committers who are members of the owning GitHub org
become the entry's maintainers; when none qualify the existing list is kept
and the entry stays (or becomes) manually maintained.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from intcat.registry.loader import load_raw_catalog, save_raw_catalog
from intcat.registry.models import MAINTAINER_SOURCE_DERIVED, MAINTAINER_SOURCE_MANUAL
from intcat.sync.github import GitHubClient, RepoSlug, ensure_github_success, parse_repo_slug
from intcat.sync.schema import CommitPayload, ReleasePayload, RepositoryPayload

logger = logging.getLogger(__name__)

WINDOW_DAYS = 365
MAX_MAINTAINERS = 5
PAGE_SIZE = 100

TRACKED_FIELDS = (
    "last_repo_commit_date",
    "last_release_date",
    "maintainers",
    "maintainer_source",
    "maintainer_last_derived_date",
)


@dataclass
class RefreshReport:
    """Outcome of one refresh run."""

    checked: list[str] = field(default_factory=list)
    changed: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    dry_run: bool = False

    def summary(self) -> str:
        if self.dry_run:
            return f"Dry run complete: {len(self.changed)} entries would change."
        return f"Metadata refresh complete: {len(self.changed)} entries changed."


def to_date_only(value: Any) -> str | None:
    """Normalize an ISO timestamp to ``YYYY-MM-DD`` (UTC); None if unparsable."""
    if not value or not isinstance(value, str):
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc)
    return parsed.date().isoformat()


def derive_recent_maintainers(
    commits: Iterable[CommitPayload],
    is_org_member: Callable[[str], bool],
    max_maintainers: int = MAX_MAINTAINERS,
) -> list[str]:
    """Most frequent commit authors who are org members, as ``@login`` handles.

    Authors are ordered by commit count (descending) then login. Commits
    without a linked GitHub account are ignored.
    """
    counts: dict[str, int] = {}
    for commit in commits:
        login = commit.author_login
        if not login:
            continue
        counts[login] = counts.get(login, 0) + 1

    maintainers: list[str] = []
    for login, _ in sorted(counts.items(), key=lambda item: (-item[1], item[0])):
        if not is_org_member(login):
            continue
        maintainers.append(f"@{login}")
        if len(maintainers) >= max_maintainers:
            break
    return maintainers


class MetadataRefresher:
    """Fetches repository activity for registry entries from the GitHub API."""

    def __init__(
        self,
        client: GitHubClient,
        org: str,
        window_days: int = WINDOW_DAYS,
        max_maintainers: int = MAX_MAINTAINERS,
        now: datetime | None = None,
    ):
        self.client = client
        self.org = org
        self.window_days = window_days
        self.max_maintainers = max_maintainers
        self.now = now or datetime.now(timezone.utc)
        self._member_cache: dict[str, bool] = {}

    @property
    def since(self) -> str:
        threshold = self.now - timedelta(days=self.window_days)
        return threshold.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")

    @property
    def today(self) -> str:
        return self.now.astimezone(timezone.utc).date().isoformat()

    # ── GitHub lookups ───────────────────────────────────────────────

    def is_org_member(self, login: str) -> bool:
        if login in self._member_cache:
            return self._member_cache[login]

        result = self.client.get(f"/orgs/{self.org}/members/{login}")
        if result.status == 204:
            member = True
        elif result.status == 404:
            member = False
        else:
            ensure_github_success(result.status, f"Check org membership for {login}", result.data)
            member = False

        self._member_cache[login] = member
        return member

    def fetch_default_branch(self, slug: RepoSlug) -> str:
        result = self.client.get(f"/repos/{slug}")
        ensure_github_success(result.status, f"Fetch repository metadata for {slug}", result.data)
        repo = _parse(RepositoryPayload, result.data)
        if repo is None or not repo.default_branch:
            raise ValueError(f"Repository {slug} is missing default_branch")
        return repo.default_branch

    def fetch_latest_commit_date(self, slug: RepoSlug, branch: str) -> str | None:
        result = self.client.get(f"/repos/{slug}/commits", params={"sha": branch, "per_page": "1"})
        ensure_github_success(result.status, f"Fetch latest commit for {slug}", result.data)
        commits = _parse_commits(result.data)
        return to_date_only(commits[0].date) if commits else None

    def fetch_latest_release_date(self, slug: RepoSlug) -> str | None:
        result = self.client.get(f"/repos/{slug}/releases/latest")
        if result.status == 404:
            return None
        ensure_github_success(result.status, f"Fetch latest release for {slug}", result.data)
        release = _parse(ReleasePayload, result.data)
        if release is None:
            return None
        return to_date_only(release.published_at or release.created_at)

    def fetch_recent_commits(self, slug: RepoSlug, branch: str) -> list[CommitPayload]:
        commits: list[CommitPayload] = []
        page = 1
        while True:
            params = {"sha": branch, "since": self.since, "per_page": str(PAGE_SIZE), "page": str(page)}
            result = self.client.get(f"/repos/{slug}/commits", params=params)
            ensure_github_success(result.status, f"Fetch commits for {slug}", result.data)

            page_items = result.data if isinstance(result.data, list) else []
            commits.extend(_parse_commits(page_items))
            if len(page_items) < PAGE_SIZE:
                return commits
            page += 1

    # ── Entry updates ────────────────────────────────────────────────

    def refresh_entry(self, entry: dict[str, Any], report: RefreshReport | None = None) -> bool:
        """Update ``entry`` in place; return True when any tracked field changed."""
        before = _snapshot(entry)
        slug = parse_repo_slug(entry.get("repo_url", ""))
        branch = self.fetch_default_branch(slug)

        latest_commit = self.fetch_latest_commit_date(slug, branch)
        latest_release = self.fetch_latest_release_date(slug)
        recent = self.fetch_recent_commits(slug, branch)
        maintainers = derive_recent_maintainers(recent, self.is_org_member, self.max_maintainers)

        if latest_commit:
            entry["last_repo_commit_date"] = latest_commit
        if latest_release:
            entry["last_release_date"] = latest_release

        if maintainers:
            if list(entry.get("maintainers") or []) != maintainers:
                entry["maintainers"] = maintainers
            entry["maintainer_source"] = MAINTAINER_SOURCE_DERIVED
            entry["maintainer_last_derived_date"] = self.today
        else:
            if not entry.get("maintainer_source"):
                entry["maintainer_source"] = MAINTAINER_SOURCE_MANUAL
            if entry["maintainer_source"] == MAINTAINER_SOURCE_MANUAL:
                entry.pop("maintainer_last_derived_date", None)
            message = (
                f"{entry.get('id')}: no qualifying org contributors in the last 12 months; "
                "keeping existing maintainers"
            )
            logger.warning(message)
            if report is not None:
                report.warnings.append(message)

        return _snapshot(entry) != before

    def refresh_all(self, catalog: list[dict[str, Any]], dry_run: bool = False) -> RefreshReport:
        report = RefreshReport(dry_run=dry_run)
        for entry in catalog:
            entry_id = str(entry.get("id", ""))
            report.checked.append(entry_id)
            if self.refresh_entry(entry, report):
                report.changed.append(entry_id)
                logger.info("UPDATED %s", entry_id)
            else:
                logger.info("OK %s", entry_id)
        return report


def refresh_catalog(
    catalog_path: str | Path,
    client: GitHubClient,
    org: str,
    dry_run: bool = False,
    window_days: int = WINDOW_DAYS,
    max_maintainers: int = MAX_MAINTAINERS,
    now: datetime | None = None,
) -> RefreshReport:
    """Refresh every entry of the registry file, writing it back unless ``dry_run``."""
    catalog = load_raw_catalog(catalog_path)
    refresher = MetadataRefresher(
        client,
        org=org,
        window_days=window_days,
        max_maintainers=max_maintainers,
        now=now,
    )
    report = refresher.refresh_all(catalog, dry_run=dry_run)
    if not dry_run:
        save_raw_catalog(catalog_path, catalog)
    logger.info(report.summary())
    return report


def _snapshot(entry: dict[str, Any]) -> str:
    return json.dumps({key: entry.get(key) for key in TRACKED_FIELDS}, sort_keys=True)


def _parse(model, data: Any):
    try:
        return model.model_validate(data)
    except ValidationError:
        return None


def _parse_commits(data: Any) -> list[CommitPayload]:
    if not isinstance(data, list):
        return []
    commits = []
    for item in data:
        commit = _parse(CommitPayload, item)
        if commit is not None:
            commits.append(commit)
    return commits
