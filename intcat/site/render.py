"""HTML rendering for the catalog listing, detail pages and fallbacks.

Every value interpolated into markup passes through :func:`escape_html`.
Readiness, inactivity and relative ages come from the catalog core with the
same ``now`` the listing was filtered with.
"""

from __future__ import annotations

import html
from datetime import date, datetime
from urllib.parse import quote

from intcat.catalog.dates import days_since
from intcat.catalog.readiness import inactive_for, readiness_for
from intcat.catalog.state import ALL, CatalogQueryState, target_counts
from intcat.registry.models import IntegrationEntry

Now = datetime | date | None

SUPPORT_NOTICE = "Support model: Best-effort and self-supported. No Forward field-team SLA."
MAX_ANIMATION_DELAY_MS = 420


def escape_html(value: object) -> str:
    return html.escape(str(value), quote=True)


def title_case(value: str) -> str:
    """``best_effort`` -> ``Best Effort``."""
    return " ".join(chunk[:1].upper() + chunk[1:] for chunk in value.split("_"))


def handle_to_github_url(handle: str | None) -> str:
    normalized = (handle or "").removeprefix("@")
    return f"https://github.com/{normalized}"


def linked_handle(handle: str) -> str:
    return (
        f'<a class="meta-link" href="{escape_html(handle_to_github_url(handle))}" '
        f'target="_blank" rel="noopener noreferrer">{escape_html(handle)}</a>'
    )


def to_relative_label(value: str, now: Now = None) -> str:
    age = days_since(value, now)
    if age is None:
        return "unknown"
    if age == 0:
        return "today"
    if age == 1:
        return "1 day ago"
    return f"{age} days ago"


def maintainer_source_label(entry: IntegrationEntry) -> str:
    if entry.is_derived_maintainers:
        if entry.maintainer_last_derived_date:
            return (
                "Derived from recent org contributors (12m), "
                f"refreshed {entry.maintainer_last_derived_date}"
            )
        return "Derived from recent org contributors (12m)"
    return "Manual maintainer list"


def detail_href(entry: IntegrationEntry) -> str:
    return f"./integration/{quote(entry.id, safe='')}.html"


def _badges(values: list[str]) -> str:
    return " ".join(f'<span class="badge">{escape_html(v)}</span>' for v in values)


def _status_badges(entry: IntegrationEntry, now: Now) -> str:
    readiness = readiness_for(entry, now)
    parts = [f'<span class="readiness-badge {readiness.css_class}">{escape_html(readiness.label.value)}</span>']
    if entry.is_fork:
        parts.append('<span class="readiness-badge readiness-fork">fork</span>')
    if inactive_for(entry, now):
        parts.append('<span class="readiness-badge readiness-unknown">inactive 6m+</span>')
    return "\n".join(parts)


def _maintainers(entry: IntegrationEntry) -> str:
    return ", ".join(linked_handle(m) for m in entry.maintainers)


def render_card(entry: IntegrationEntry, index: int = 0, now: Now = None) -> str:
    """One listing card."""
    readiness = readiness_for(entry, now)
    verified_text = (
        "Catalog verified: unknown"
        if readiness.age_days is None
        else f"Catalog verified: {readiness.age_days}d ago"
    )
    repo_days = days_since(entry.last_repo_commit_date, now)
    repo_text = (
        "Last repo activity: unknown"
        if repo_days is None
        else f"Last repo activity: {entry.last_repo_commit_date} ({repo_days}d ago)"
    )
    fork_meta = ""
    if entry.fork is not None:
        fork_meta = (
            f'<p class="meta">Fork source: <a class="meta-link" href="{escape_html(entry.fork.upstream_url)}" '
            f'target="_blank" rel="noopener noreferrer">{escape_html(entry.fork.upstream_repo)}</a></p>'
        )
    delay = min(index * 60, MAX_ANIMATION_DELAY_MS)

    lines = [
        f'<article class="card" style="animation-delay:{delay}ms">',
        f"  <h3>{escape_html(entry.name)}</h3>",
        f"  <p>{escape_html(entry.summary)}</p>",
        f'  <p class="meta">{escape_html(entry.category)} | {escape_html(entry.maturity)} | '
        f"{escape_html(title_case(entry.support_tier))}</p>",
        f'  <div class="badges">{_badges(entry.integration_targets)}</div>',
        '  <div class="readiness-row">',
        _status_badges(entry, now),
        f'    <span class="readiness-text">{escape_html(verified_text)}</span>',
        f'    <span class="readiness-text">{escape_html(repo_text)}</span>',
        "  </div>",
        fork_meta,
        f'  <p class="meta">Owner: {escape_html(entry.owner_team)} | Verified by: {linked_handle(entry.verified_by)}</p>',
        f'  <p class="meta">Maintainers: {_maintainers(entry)}</p>',
        '  <div class="actions">',
        f'    <a class="btn" href="{escape_html(detail_href(entry))}">Details</a>',
        f'    <a class="btn" href="{escape_html(entry.repo_url)}" target="_blank" rel="noopener noreferrer">Repository</a>',
        f'    <a class="card-link" href="{escape_html(entry.issue_url)}" target="_blank" rel="noopener noreferrer">Issues</a>',
        "  </div>",
        "</article>",
    ]
    return "\n".join(line for line in lines if line)


def catalog_metrics(entries: list[IntegrationEntry]) -> dict[str, int]:
    return {
        "total": len(entries),
        "active": sum(1 for e in entries if e.maturity == "active"),
        "targets": len({t for e in entries for t in e.integration_targets}),
    }


def render_target_filters(entries: list[IntegrationEntry], selected: str = ALL) -> str:
    """Filter chips: ``all`` first, then targets by count."""
    chips = [(ALL, len(entries))] + target_counts(entries)
    return "\n".join(
        f'<button class="chip{" active" if target == selected else ""}" data-target="{escape_html(target)}" '
        f'type="button">{escape_html(target)} ({count})</button>'
        for target, count in chips
    )


def _page(title: str, body: str, root: str = "./") -> str:
    return "\n".join(
        [
            "<!doctype html>",
            '<html lang="en">',
            "<head>",
            '  <meta charset="utf-8">',
            f"  <title>{escape_html(title)}</title>",
            f'  <link rel="stylesheet" href="{root}styles.css">',
            "</head>",
            "<body>",
            body,
            "</body>",
            "</html>",
            "",
        ]
    )


def render_index(
    all_entries: list[IntegrationEntry],
    visible: list[IntegrationEntry],
    state: CatalogQueryState | None = None,
    now: Now = None,
    title: str = "Integrations Catalog",
) -> str:
    """The listing page: metrics, target chips, result count and cards."""
    state = state or CatalogQueryState()
    metrics = catalog_metrics(all_entries)
    cards = "\n".join(render_card(entry, i, now) for i, entry in enumerate(visible))
    body = "\n".join(
        [
            f"<h1>{escape_html(title)}</h1>",
            '<section class="metrics">',
            f'  <p><span id="metric-total">{metrics["total"]}</span> integrations</p>',
            f'  <p><span id="metric-active">{metrics["active"]}</span> active</p>',
            f'  <p><span id="metric-targets">{metrics["targets"]}</span> targets</p>',
            "</section>",
            f'<div id="target-filters">{render_target_filters(all_entries, state.target)}</div>',
            f'<p id="result-count">{len(visible)} shown</p>',
            f'<section id="cards">{cards}</section>',
        ]
    )
    return _page(title, body)


def render_detail(entry: IntegrationEntry, now: Now = None) -> str:
    """The detail page of one entry."""
    readiness = readiness_for(entry, now)
    readiness_text = (
        "Unknown verification age"
        if readiness.age_days is None
        else f"{readiness.age_days} days since verification"
    )
    fork_panel = ""
    if entry.fork is not None:
        fork = entry.fork
        fork_panel = (
            f'<div class="notice">Fork source: <a class="meta-link" href="{escape_html(fork.upstream_url)}" '
            f'target="_blank" rel="noopener noreferrer">{escape_html(fork.upstream_repo)}</a> '
            f"({escape_html(fork.upstream_branch)} -&gt; {escape_html(fork.fork_branch)}). {escape_html(fork.note)}</div>"
        )

    items = [
        ("Category", escape_html(entry.category)),
        ("Maturity", escape_html(entry.maturity)),
        ("Support", escape_html(title_case(entry.support_tier))),
        ("Owner Team", escape_html(entry.owner_team)),
        ("Verified By", linked_handle(entry.verified_by)),
        ("Forward Minimum Version", escape_html(entry.compatibility.forward_min_version)),
        ("Tested Environments", ", ".join(escape_html(e) for e in entry.compatibility.tested_environments)),
        ("License", escape_html(entry.license)),
        ("Last Release Date", escape_html(entry.last_release_date)),
        ("Maintainers", _maintainers(entry)),
        ("Maintainer Source", escape_html(maintainer_source_label(entry))),
    ]
    grid = "\n".join(
        f'  <div class="detail-item"><p>{label}</p><p>{value}</p></div>' for label, value in items
    )

    body = "\n".join(
        [
            f'<h1 id="name">{escape_html(entry.name)}</h1>',
            '<section id="details">',
            f"<p>{escape_html(entry.summary)}</p>",
            f'<div class="notice">{escape_html(SUPPORT_NOTICE)}</div>',
            '<div class="readiness-row detail-readiness">',
            _status_badges(entry, now),
            f'  <span class="readiness-text">{escape_html(readiness_text)}</span>',
            f'  <span class="readiness-text">Last verified: {escape_html(entry.last_verified_date)}</span>',
            "</div>",
            fork_panel,
            f'<div class="detail-grid">\n{grid}\n</div>',
            "<p><strong>Target Systems</strong></p>",
            f'<div class="badges">{_badges(entry.integration_targets)}</div>',
            "<p><strong>Security Notes</strong></p>",
            f"<p>{escape_html(entry.security_notes)}</p>",
            '<div class="actions">',
            f'  <a class="btn" href="{escape_html(entry.repo_url)}" target="_blank" rel="noopener noreferrer">Repository</a>',
            f'  <a class="btn" href="{escape_html(entry.docs_url)}" target="_blank" rel="noopener noreferrer">Documentation</a>',
            f'  <a class="btn" href="{escape_html(entry.issue_url)}" target="_blank" rel="noopener noreferrer">Open Issue</a>',
            "</div>",
            "</section>",
        ]
    )
    return _page(entry.name, body, root="../")


def render_unavailable(message: str) -> str:
    """Fallback page shown instead of a partially rendered catalog."""
    body = (
        '<section id="cards"><article class="card"><h3>Catalog unavailable</h3>'
        f"<p>{escape_html(message)}</p></article></section>"
    )
    return _page("Catalog unavailable", body)
