"""Link checker for the repo, docs and issue URL of every entry."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

import httpx

from intcat.registry.models import IntegrationEntry

logger = logging.getLogger(__name__)

LINK_FIELDS = ("repo_url", "docs_url", "issue_url")
RETRY_WITH_GET = {403, 405}


@dataclass
class LinkResult:
    entry_id: str
    field: str
    url: str
    ok: bool
    status: str  # HTTP status code, "timeout" or the transport error

    def describe(self) -> str:
        return f"{self.entry_id} {self.field} {self.url} -> {self.status}"


@dataclass
class LinkReport:
    results: list[LinkResult] = field(default_factory=list)

    @property
    def failures(self) -> list[LinkResult]:
        return [r for r in self.results if not r.ok]

    @property
    def passed(self) -> bool:
        return not self.failures


def check_url(client: httpx.Client, url: str) -> tuple[bool, str]:
    """HEAD the URL (GET when HEAD is refused); status < 400 counts as alive."""
    try:
        response = client.head(url, follow_redirects=True)
        if response.status_code in RETRY_WITH_GET:
            response = client.get(url, follow_redirects=True)
    except httpx.TimeoutException:
        return False, "timeout"
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        return False, str(e) or type(e).__name__
    return response.status_code < 400, str(response.status_code)


def check_links(
    entries: Iterable[IntegrationEntry],
    client: httpx.Client | None = None,
    timeout: float = 15.0,
) -> LinkReport:
    report = LinkReport()
    owns_client = client is None
    http = client or httpx.Client(timeout=timeout)
    try:
        for entry in entries:
            for name in LINK_FIELDS:
                url = getattr(entry, name)
                ok, status = check_url(http, url)
                result = LinkResult(entry_id=entry.id, field=name, url=url, ok=ok, status=status)
                report.results.append(result)
                if ok:
                    logger.info("OK %s %s -> %s", entry.id, name, status)
                else:
                    logger.warning("FAILED %s", result.describe())
    finally:
        if owns_client:
            http.close()
    return report
