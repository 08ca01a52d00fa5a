"""Thin GitHub REST client used by the metadata refresher."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any
from urllib.parse import urlparse

import httpx

from intcat.errors import GitHubAPIError

logger = logging.getLogger(__name__)

API_ROOT = "https://api.github.com"
API_VERSION = "2022-11-28"
USER_AGENT = "forward-integrations-catalog-refresh"


@dataclass
class RepoSlug:
    owner: str
    repo: str

    def __str__(self) -> str:
        return f"{self.owner}/{self.repo}"


@dataclass
class GitHubResponse:
    status: int
    data: Any = None


def parse_repo_slug(repo_url: str) -> RepoSlug:
    """Split a github.com repository URL into owner and repo.

    Raises:
        ValueError: If the URL is not a github.com repository URL.
    """
    parsed = urlparse(repo_url)
    if parsed.hostname != "github.com":
        raise ValueError(f"Unsupported repo host for {repo_url}")

    parts = parsed.path.strip("/").split("/")
    if len(parts) < 2 or not parts[0] or not parts[1]:
        raise ValueError(f"Invalid GitHub repo URL: {repo_url}")

    repo = parts[1]
    if repo.lower().endswith(".git"):
        repo = repo[:-4]
    return RepoSlug(owner=parts[0], repo=repo)


def ensure_github_success(status: int, context: str, payload: Any = None) -> None:
    """Raise GitHubAPIError with the API's message unless ``status`` is 2xx."""
    if 200 <= status < 300:
        return
    message = ""
    if isinstance(payload, dict) and isinstance(payload.get("message"), str):
        message = f": {payload['message']}"
    raise GitHubAPIError(f"{context} failed with status {status}{message}", status=status)


class GitHubClient:
    """Authenticated GET requests against the GitHub REST API."""

    def __init__(
        self,
        token: str,
        client: httpx.Client | None = None,
        timeout: float = 30.0,
    ):
        self._owns_client = client is None
        self._client = client or httpx.Client(base_url=API_ROOT, timeout=timeout, follow_redirects=True)
        self._headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": API_VERSION,
            "Authorization": f"Bearer {token}",
            "User-Agent": USER_AGENT,
        }

    def __enter__(self) -> "GitHubClient":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def get(self, path: str, params: dict[str, str] | None = None) -> GitHubResponse:
        """GET ``path``; JSON bodies are decoded, other bodies kept as a short message."""
        response = self._client.get(path, params=params, headers=self._headers)
        logger.debug("GET %s -> %s", path, response.status_code)

        if response.status_code == 204 or not response.content:
            return GitHubResponse(status=response.status_code)

        try:
            data = response.json()
        except ValueError:
            data = {"message": response.text[:200]}
        return GitHubResponse(status=response.status_code, data=data)
