"""Tests for the GitHub metadata refresher."""

import json
import tempfile
from datetime import datetime, timezone
from pathlib import Path

import httpx
import pytest

from intcat.errors import GitHubAPIError
from intcat.sync.github import GitHubClient, ensure_github_success, parse_repo_slug
from intcat.sync.refresh import (
    MetadataRefresher,
    RefreshReport,
    derive_recent_maintainers,
    refresh_catalog,
    to_date_only,
)
from intcat.sync.schema import CommitPayload

FIXED_NOW = datetime(2026, 2, 26, 12, 0, tzinfo=timezone.utc)
MEMBERS = {"alice", "bob"}


def _commit(login, date="2026-02-20T10:00:00Z") -> dict:
    return {
        "sha": "abc",
        "author": {"login": login} if login else None,
        "commit": {"committer": {"date": date}, "author": {"date": "2020-01-01T00:00:00Z"}},
    }


def _github(commits=None, release_status=200, members=MEMBERS):
    """Return a GitHubClient whose transport fakes the endpoints the refresher uses."""
    commits = [_commit("alice"), _commit("alice"), _commit("bob"), _commit("outsider")] if commits is None else commits
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        path = request.url.path
        calls.append(path)
        assert request.headers["Authorization"] == "Bearer test-token"
        if path == "/repos/forwardnetworks/netbox-sync":
            return httpx.Response(200, json={"full_name": "forwardnetworks/netbox-sync", "default_branch": "main"})
        if path == "/repos/forwardnetworks/netbox-sync/commits":
            if request.url.params.get("per_page") == "1":
                return httpx.Response(200, json=[_commit("alice", "2026-02-25T23:30:00-05:00")])
            return httpx.Response(200, json=commits)
        if path == "/repos/forwardnetworks/netbox-sync/releases/latest":
            if release_status != 200:
                return httpx.Response(release_status, json={"message": "Not Found"})
            return httpx.Response(200, json={"tag_name": "v1.2.0", "published_at": "2026-02-10T08:00:00Z"})
        if path.startswith("/orgs/forwardnetworks/members/"):
            login = path.rsplit("/", 1)[-1]
            return httpx.Response(204 if login in members else 404)
        return httpx.Response(500, json={"message": "unexpected"})

    transport = httpx.Client(base_url="https://api.github.com", transport=httpx.MockTransport(handler))
    return GitHubClient("test-token", client=transport), calls


def _entry(**overrides) -> dict:
    data = {
        "id": "netbox-sync",
        "repo_url": "https://github.com/forwardnetworks/netbox-sync",
        "maintainers": ["@old"],
        "maintainer_source": "manual",
        "last_repo_commit_date": "2025-12-01",
        "last_release_date": "2025-11-01",
    }
    data.update(overrides)
    return data


def test_parse_repo_slug():
    slug = parse_repo_slug("https://github.com/forwardnetworks/netbox-sync.git")
    assert slug.owner == "forwardnetworks"
    assert slug.repo == "netbox-sync"
    assert str(slug) == "forwardnetworks/netbox-sync"


def test_parse_repo_slug_rejects_other_hosts():
    with pytest.raises(ValueError, match="Unsupported repo host"):
        parse_repo_slug("https://gitlab.com/a/b")
    with pytest.raises(ValueError, match="Invalid GitHub repo URL"):
        parse_repo_slug("https://github.com/only-owner")


def test_to_date_only():
    assert to_date_only("2026-02-10T08:00:00Z") == "2026-02-10"
    assert to_date_only("2026-02-25T23:30:00-05:00") == "2026-02-26"
    assert to_date_only("garbage") is None
    assert to_date_only(None) is None


def test_ensure_github_success():
    ensure_github_success(204, "noop")
    with pytest.raises(GitHubAPIError, match="Fetch thing failed with status 403: rate limited") as exc:
        ensure_github_success(403, "Fetch thing", {"message": "rate limited"})
    assert exc.value.status == 403


def test_derive_recent_maintainers_orders_by_count_and_filters_members():
    commits = [CommitPayload.model_validate(c) for c in (
        _commit("bob"), _commit("alice"), _commit("alice"), _commit("outsider"), _commit(None)
    )]
    assert derive_recent_maintainers(commits, lambda login: login in MEMBERS) == ["@alice", "@bob"]
    assert derive_recent_maintainers(commits, lambda login: True, max_maintainers=1) == ["@alice"]


def test_commit_date_prefers_committer():
    commit = CommitPayload.model_validate(_commit("alice", "2026-02-01T00:00:00Z"))
    assert commit.date == "2026-02-01T00:00:00Z"
    assert CommitPayload.model_validate({"sha": "x"}).date is None


def test_refresh_entry_updates_activity_and_maintainers():
    client, _ = _github()
    refresher = MetadataRefresher(client, org="forwardnetworks", now=FIXED_NOW)
    entry = _entry()

    assert refresher.refresh_entry(entry)
    assert entry["last_repo_commit_date"] == "2026-02-26"
    assert entry["last_release_date"] == "2026-02-10"
    assert entry["maintainers"] == ["@alice", "@bob"]
    assert entry["maintainer_source"] == "derived_recent_contributors"
    assert entry["maintainer_last_derived_date"] == "2026-02-26"


def test_refresh_entry_without_release_keeps_existing_date():
    client, _ = _github(release_status=404)
    refresher = MetadataRefresher(client, org="forwardnetworks", now=FIXED_NOW)
    entry = _entry()
    refresher.refresh_entry(entry)
    assert entry["last_release_date"] == "2025-11-01"


def test_refresh_entry_without_org_contributors_keeps_manual_list():
    client, _ = _github(commits=[_commit("outsider")])
    refresher = MetadataRefresher(client, org="forwardnetworks", now=FIXED_NOW)
    report = RefreshReport()
    entry = _entry(maintainer_source="", maintainer_last_derived_date="2025-01-01")

    refresher.refresh_entry(entry, report)
    assert entry["maintainers"] == ["@old"]
    assert entry["maintainer_source"] == "manual"
    assert "maintainer_last_derived_date" not in entry
    assert report.warnings == [
        "netbox-sync: no qualifying org contributors in the last 12 months; keeping existing maintainers"
    ]


def test_org_membership_is_cached():
    client, calls = _github()
    refresher = MetadataRefresher(client, org="forwardnetworks", now=FIXED_NOW)
    assert refresher.is_org_member("alice")
    assert refresher.is_org_member("alice")
    assert not refresher.is_org_member("outsider")
    assert calls.count("/orgs/forwardnetworks/members/alice") == 1


def test_recent_commits_paginate():
    full_page = [_commit("alice")] * 100
    pages = {"1": full_page, "2": [_commit("bob")]}

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=pages[request.url.params["page"]])

    http = httpx.Client(base_url="https://api.github.com", transport=httpx.MockTransport(handler))
    refresher = MetadataRefresher(GitHubClient("t", client=http), org="forwardnetworks", now=FIXED_NOW)
    commits = refresher.fetch_recent_commits(parse_repo_slug("https://github.com/a/b"), "main")
    assert len(commits) == 101
    assert refresher.since == "2025-02-26T12:00:00Z"


def test_refresh_catalog_writes_unless_dry_run():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "integrations.json"
        path.write_text(json.dumps([_entry()]))

        client, _ = _github()
        report = refresh_catalog(path, client, org="forwardnetworks", dry_run=True, now=FIXED_NOW)
        assert report.changed == ["netbox-sync"]
        assert "would change" in report.summary()
        assert json.loads(path.read_text())[0]["maintainers"] == ["@old"]

        report = refresh_catalog(path, client, org="forwardnetworks", now=FIXED_NOW)
        assert json.loads(path.read_text())[0]["maintainers"] == ["@alice", "@bob"]
        assert report.summary() == "Metadata refresh complete: 1 entries changed."


def test_repository_error_is_raised():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, json={"message": "Not Found"})

    http = httpx.Client(base_url="https://api.github.com", transport=httpx.MockTransport(handler))
    refresher = MetadataRefresher(GitHubClient("t", client=http), org="forwardnetworks", now=FIXED_NOW)
    with pytest.raises(GitHubAPIError, match="status 404: Not Found"):
        refresher.refresh_entry(_entry())
