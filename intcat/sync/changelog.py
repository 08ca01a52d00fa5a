"""Changelog — diff successive registry snapshots into an ordered change feed.

The baseline snapshot is the registry file as committed in ``HEAD~1``; the
current snapshot is the working copy. Changes are listed in current-document
order (added, deprecated, updated) followed by removed listings.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from git import GitCommandError, InvalidGitRepositoryError, NoSuchPathError, Repo

from intcat.registry.loader import load_raw_catalog

logger = logging.getLogger(__name__)

MAX_CHANGED_FIELDS = 8


class ChangeType:
    ADDED = "added"
    UPDATED = "updated"
    DEPRECATED = "deprecated"
    REMOVED = "removed"


@dataclass
class ChangeRecord:
    type: str
    id: str
    name: str
    details: list[str] = field(default_factory=list)


@dataclass
class ChangelogFeed:
    generated_at: str
    baseline_commit: str | None = None
    current_commit: str | None = None
    changes: list[ChangeRecord] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def diff_fields(previous: dict[str, Any], current: dict[str, Any]) -> list[str]:
    """Names of the fields whose JSON values differ, in first-seen order."""
    changed = []
    for name in dict.fromkeys([*previous, *current]):
        left = json.dumps(previous.get(name), sort_keys=True)
        right = json.dumps(current.get(name), sort_keys=True)
        if left != right:
            changed.append(name)
    return changed


def diff_snapshots(previous: list[dict[str, Any]], current: list[dict[str, Any]]) -> list[ChangeRecord]:
    previous_by_id = {entry.get("id"): entry for entry in previous}
    current_ids = {entry.get("id") for entry in current}
    changes: list[ChangeRecord] = []

    for entry in current:
        entry_id, name = str(entry.get("id", "")), str(entry.get("name", ""))
        prev = previous_by_id.get(entry.get("id"))
        if prev is None:
            changes.append(ChangeRecord(ChangeType.ADDED, entry_id, name, ["new listing"]))
            continue

        changed = diff_fields(prev, entry)
        if not changed:
            continue

        if entry.get("maturity") == "deprecated" and prev.get("maturity") != "deprecated":
            changes.append(ChangeRecord(ChangeType.DEPRECATED, entry_id, name, ["maturity -> deprecated"]))
            continue

        changes.append(ChangeRecord(ChangeType.UPDATED, entry_id, name, changed[:MAX_CHANGED_FIELDS]))

    for entry in previous:
        if entry.get("id") not in current_ids:
            changes.append(
                ChangeRecord(ChangeType.REMOVED, str(entry.get("id", "")), str(entry.get("name", "")), ["listing removed"])
            )

    return changes


def load_snapshot_from_git(repo: Repo, ref: str, relpath: str) -> list[dict[str, Any]]:
    """The registry as committed at ``ref``; an empty list if it cannot be read."""
    try:
        data = json.loads(repo.git.show(f"{ref}:{relpath}"))
    except (GitCommandError, ValueError):
        logger.debug("No baseline snapshot at %s:%s", ref, relpath)
        return []
    return data if isinstance(data, list) else []


def short_hash(repo: Repo, ref: str) -> str | None:
    try:
        return repo.git.rev_parse(ref, short=True)
    except GitCommandError:
        return None


def build_changelog(
    repo_root: str | Path,
    catalog_relpath: str = "catalog/integrations.json",
    baseline_ref: str = "HEAD~1",
    now: datetime | None = None,
) -> ChangelogFeed:
    """Diff the working-copy registry against ``baseline_ref``."""
    root = Path(repo_root)
    current = load_raw_catalog(root / catalog_relpath)
    generated_at = (now or datetime.now(timezone.utc)).isoformat()

    try:
        repo = Repo(root)
    except (InvalidGitRepositoryError, NoSuchPathError):
        logger.warning("%s is not a git repository; diffing against an empty baseline", root)
        return ChangelogFeed(generated_at=generated_at, changes=diff_snapshots([], current))

    previous = load_snapshot_from_git(repo, baseline_ref, Path(catalog_relpath).as_posix())
    return ChangelogFeed(
        generated_at=generated_at,
        baseline_commit=short_hash(repo, baseline_ref),
        current_commit=short_hash(repo, "HEAD"),
        changes=diff_snapshots(previous, current),
    )


def write_changelog(feed: ChangelogFeed, output_path: str | Path) -> Path:
    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(feed.to_dict(), f, indent=2)
    logger.info("Generated changelog feed with %d changes", len(feed.changes))
    return path
