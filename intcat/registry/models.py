"""Data models for registry entries and their nested descriptors."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any

MAINTAINER_SOURCE_MANUAL = "manual"
MAINTAINER_SOURCE_DERIVED = "derived_recent_contributors"


@dataclass
class Compatibility:
    """Which platform versions and environments the integration was tested with."""

    forward_min_version: str = ""
    tested_environments: list[str] = field(default_factory=list)


@dataclass
class Deprecation:
    status: str = ""
    date: str = ""
    replacement: str = ""


@dataclass
class ForkInfo:
    """Marks a listing as a fork of an upstream repository."""

    upstream_repo: str = ""  # owner/repo
    upstream_branch: str = ""
    fork_branch: str = ""
    note: str = ""

    @property
    def upstream_url(self) -> str:
        return f"https://github.com/{self.upstream_repo}"


@dataclass
class IntegrationEntry:
    """A single cataloged integration, read-only input to the catalog core."""

    # Identity
    id: str
    name: str
    summary: str = ""

    # Classification
    category: str = ""
    maturity: str = ""
    support_tier: str = ""
    integration_targets: list[str] = field(default_factory=list)

    # Ownership
    owner_team: str = ""
    maintainers: list[str] = field(default_factory=list)
    maintainer_source: str = ""
    maintainer_last_derived_date: str = ""
    verified_by: str = ""

    # Activity (YYYY-MM-DD)
    last_repo_commit_date: str = ""
    last_release_date: str = ""
    last_verified_date: str = ""

    # Links
    repo_url: str = ""
    docs_url: str = ""
    issue_url: str = ""

    license: str = ""
    security_notes: str = ""
    compatibility: Compatibility = field(default_factory=Compatibility)
    deprecation: Deprecation | None = None
    fork: ForkInfo | None = None

    # The document object this entry was read from, unknown keys included.
    raw: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @property
    def is_fork(self) -> bool:
        return self.fork is not None

    @property
    def is_derived_maintainers(self) -> bool:
        return self.maintainer_source == MAINTAINER_SOURCE_DERIVED

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> IntegrationEntry:
        compat = data.get("compatibility")
        if not isinstance(compat, dict):
            compat = {}
        deprecation = data.get("deprecation")
        fork = data.get("fork")
        return cls(
            id=_text(data.get("id")),
            name=_text(data.get("name")),
            summary=_text(data.get("summary")),
            category=_text(data.get("category")),
            maturity=_text(data.get("maturity")),
            support_tier=_text(data.get("support_tier")),
            integration_targets=_strings(data.get("integration_targets")),
            owner_team=_text(data.get("owner_team")),
            maintainers=_strings(data.get("maintainers")),
            maintainer_source=_text(data.get("maintainer_source")),
            maintainer_last_derived_date=_text(data.get("maintainer_last_derived_date")),
            verified_by=_text(data.get("verified_by")),
            last_repo_commit_date=_text(data.get("last_repo_commit_date")),
            last_release_date=_text(data.get("last_release_date")),
            last_verified_date=_text(data.get("last_verified_date")),
            repo_url=_text(data.get("repo_url")),
            docs_url=_text(data.get("docs_url")),
            issue_url=_text(data.get("issue_url")),
            license=_text(data.get("license")),
            security_notes=_text(data.get("security_notes")),
            compatibility=Compatibility(
                forward_min_version=_text(compat.get("forward_min_version")),
                tested_environments=_strings(compat.get("tested_environments")),
            ),
            deprecation=Deprecation(
                status=_text(deprecation.get("status")),
                date=_text(deprecation.get("date")),
                replacement=_text(deprecation.get("replacement")),
            )
            if isinstance(deprecation, dict)
            else None,
            fork=ForkInfo(
                upstream_repo=_text(fork.get("upstream_repo")),
                upstream_branch=_text(fork.get("upstream_branch")),
                fork_branch=_text(fork.get("fork_branch")),
                note=_text(fork.get("note")),
            )
            if isinstance(fork, dict)
            else None,
            raw=dict(data),
        )

    def to_dict(self) -> dict[str, Any]:
        """The document object this entry was read from, or one built from its fields."""
        if self.raw:
            return dict(self.raw)
        data = asdict(self)
        data.pop("raw")
        return {key: value for key, value in data.items() if value not in (None, "")}


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def _strings(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [str(v) for v in value]
