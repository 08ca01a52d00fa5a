"""Collaborators that keep the static registry snapshot current.

This package provides:
- Metadata refresh: commit/release dates and maintainers from the GitHub API
- Changelog: ordered change feed between successive registry snapshots
- Link checks: liveness of every repo, docs and issue URL
"""
