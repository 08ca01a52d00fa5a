"""Submission template contributors copy into the registry."""

from __future__ import annotations

import json
from typing import Any


def submission_template(include_fork: bool = False) -> dict[str, Any]:
    """Return a fresh template entry; ``include_fork`` adds the optional fork block."""
    template: dict[str, Any] = {
        "id": "example-integration",
        "name": "Example Integration",
        "summary": "One-line operational summary under 200 characters.",
        "repo_url": "https://github.com/forwardnetworks/example-integration",
        "docs_url": "https://github.com/forwardnetworks/example-integration",
        "category": "automation",
        "integration_targets": ["forward", "aws"],
        "maturity": "incubating",
        "support_tier": "best_effort",
        "maintainers": ["@your-github-handle"],
        "maintainer_source": "manual",
        "verified_by": "@your-github-handle",
        "issue_url": "https://github.com/forwardnetworks/example-integration/issues",
        "license": "Apache-2.0",
        "last_release_date": "2026-02-26",
        "last_repo_commit_date": "2026-02-26",
        "last_verified_date": "2026-02-26",
        "compatibility": {
            "forward_min_version": "24.1",
            "tested_environments": ["aws"],
        },
        "security_notes": "Document secret handling, access boundaries, and cert expectations.",
    }
    if include_fork:
        template["fork"] = {
            "upstream_repo": "upstream-org/upstream-repo",
            "upstream_branch": "main",
            "fork_branch": "forward-enterprise",
            "note": "Forked integration. Maintainers listed here are fork-specific contributors.",
        }
    return template


def submission_template_json(include_fork: bool = False) -> str:
    return json.dumps(submission_template(include_fork), indent=2)
