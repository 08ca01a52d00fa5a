"""intcat CLI — browse, validate and publish the integrations catalog."""

import logging
import sys

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from intcat import __version__
from intcat.config import load_settings
from intcat.errors import IntcatError
from intcat.utils.logging import configure_logging

console = Console()

_READINESS_STYLES = {
    "fresh": "green",
    "aging": "yellow",
    "stale": "red",
    "unknown": "dim",
}


def _fail(message: str) -> None:
    console.print(f"[red]{message}[/]")
    sys.exit(1)


@click.group()
@click.version_option(version=__version__)
@click.option("--config", "config_path", default=None, help="Path to an intcat.yaml settings file")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx: click.Context, config_path: str | None, verbose: bool):
    """intcat: integrations catalog.

    Browse the registry with readiness and inactivity signals, validate it,
    refresh its GitHub metadata and build the static catalog site.
    """
    configure_logging(level=logging.DEBUG if verbose else logging.WARNING)
    try:
        ctx.obj = load_settings(config_path)
    except IntcatError as e:
        _fail(str(e))


# ── List ─────────────────────────────────────────────────────────────


@main.command(name="list")
@click.argument("query", default="")
@click.option("--q", "text", default=None, help="Free-text search")
@click.option("--target", default=None, help="Only entries integrating with this target")
@click.option("--status", default=None, help="all, fresh, aging, stale or inactive")
@click.option("--sort", default=None, help="trust, recent or name")
@click.option("--inactive/--no-inactive", default=None, help="Show dormant listings")
@click.option("--catalog", "-c", default=None, help="Registry file or URL")
@click.pass_obj
def list_entries(settings, query, text, target, status, sort, inactive, catalog):
    """List catalog entries for a URL-style QUERY (e.g. 'target=aws&sort=recent').

    Options are applied on top of QUERY the same way selector changes are
    applied in the browser; the canonical query string is printed last.
    """
    from intcat.catalog.readiness import inactive_for, readiness_for
    from intcat.catalog.session import CatalogSession
    from intcat.registry.loader import load_catalog

    try:
        entries = load_catalog(catalog or settings.catalog_path)
    except IntcatError as e:
        console.print(Panel(str(e), title="Catalog unavailable", style="red"))
        sys.exit(1)

    session = CatalogSession(entries, query)
    changes = {
        name: value
        for name, value in (
            ("q", text),
            ("target", target),
            ("status", status),
            ("sort", sort),
            ("inactive", inactive),
        )
        if value is not None
    }
    if changes:
        session.update(**changes)

    visible = session.visible()
    table = Table(title=f"Integrations ({len(visible)} shown of {len(entries)})")
    table.add_column("Name", style="cyan")
    table.add_column("Readiness")
    table.add_column("Verified", justify="right")
    table.add_column("Last commit")
    table.add_column("Targets")

    for entry in visible:
        readiness = readiness_for(entry, session.now)
        label = readiness.label.value
        if inactive_for(entry, session.now):
            label += " / inactive"
        age = "unknown" if readiness.age_days is None else f"{readiness.age_days}d ago"
        style = _READINESS_STYLES[readiness.label.value]
        table.add_row(
            entry.name,
            f"[{style}]{label}[/]",
            age,
            entry.last_repo_commit_date or "unknown",
            ", ".join(entry.integration_targets),
        )

    console.print(table)
    console.print(f"[dim]URL:[/] {session.url or '(default)'}")


# ── Show ─────────────────────────────────────────────────────────────


@main.command()
@click.argument("entry_id")
@click.option("--catalog", "-c", default=None, help="Registry file or URL")
@click.pass_obj
def show(settings, entry_id: str, catalog: str | None):
    """Show the detail view of one integration."""
    from intcat.catalog.readiness import inactive_for, readiness_for
    from intcat.registry.loader import find_entry, load_catalog
    from intcat.site.render import maintainer_source_label, title_case, to_relative_label

    try:
        entry = find_entry(load_catalog(catalog or settings.catalog_path), entry_id)
    except IntcatError as e:
        console.print(Panel(str(e), title="Unable to load integration", style="red"))
        sys.exit(1)

    readiness = readiness_for(entry)
    badges = [f"[{_READINESS_STYLES[readiness.label.value]}]{readiness.label.value}[/]"]
    if entry.is_fork:
        badges.append("[magenta]fork[/]")
    if inactive_for(entry):
        badges.append("[dim]inactive 6m+[/]")

    table = Table(show_header=False, box=None)
    table.add_column("Field", style="bold")
    table.add_column("Value")
    table.add_row("Readiness", " ".join(badges))
    table.add_row("Last verified", f"{entry.last_verified_date} ({to_relative_label(entry.last_verified_date)})")
    table.add_row("Last commit", f"{entry.last_repo_commit_date} ({to_relative_label(entry.last_repo_commit_date)})")
    table.add_row("Last release", entry.last_release_date or "unknown")
    table.add_row("Category", entry.category)
    table.add_row("Maturity", entry.maturity)
    table.add_row("Support", title_case(entry.support_tier))
    table.add_row("Targets", ", ".join(entry.integration_targets))
    table.add_row("Verified by", entry.verified_by)
    table.add_row("Maintainers", ", ".join(entry.maintainers))
    table.add_row("Maintainer source", maintainer_source_label(entry))
    if entry.fork is not None:
        table.add_row("Fork source", f"{entry.fork.upstream_repo} ({entry.fork.upstream_branch} -> {entry.fork.fork_branch})")
    table.add_row("Repository", entry.repo_url)
    table.add_row("Documentation", entry.docs_url)

    console.print(Panel(entry.summary, title=entry.name))
    console.print(table)


# ── Validate ─────────────────────────────────────────────────────────


@main.command()
@click.option("--catalog", "-c", default=None, help="Registry file")
@click.pass_obj
def validate(settings, catalog: str | None):
    """Validate the registry document."""
    import json

    from intcat.registry.validator import validate_registry

    path = catalog or settings.catalog_path
    try:
        with open(path) as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        _fail(f"Failed to parse: {e}")

    result = validate_registry(data)
    if not result.passed:
        console.print("[red]Registry validation failed:[/]")
        for error in result.errors:
            console.print(f"  [red]x[/] {error}")
        sys.exit(1)

    console.print(f"  [green]v[/] Registry validation passed: {result.entry_count} entries")

    if result.stale:
        console.print("\n[yellow]Stale verification warning (>90 days):[/]")
        for stale in result.stale:
            console.print(f"  [yellow]![/] {stale.id}: {stale.age_days} days")


# ── Refresh ──────────────────────────────────────────────────────────


@main.command()
@click.option("--dry-run", is_flag=True, help="Report changes without writing the registry")
@click.pass_obj
def refresh(settings, dry_run: bool):
    """Refresh commit, release and maintainer metadata from GitHub."""
    from intcat.config import resolve_github_token
    from intcat.sync.github import GitHubClient
    from intcat.sync.refresh import refresh_catalog

    console.print(f"\n[bold blue]intcat[/] Refreshing metadata: {settings.catalog_path}\n")

    try:
        token = resolve_github_token()
        with GitHubClient(token, timeout=settings.request_timeout) as client:
            report = refresh_catalog(
                settings.catalog_path,
                client,
                org=settings.github_org,
                dry_run=dry_run,
                window_days=settings.maintainer_window_days,
                max_maintainers=settings.max_maintainers,
            )
    except (IntcatError, ValueError) as e:
        _fail(str(e))

    for entry_id in report.checked:
        status = "[yellow]UPDATED[/]" if entry_id in report.changed else "[green]OK[/]"
        console.print(f"  {status} {entry_id}")
    for warning in report.warnings:
        console.print(f"  [yellow]![/] {warning}")

    console.print(f"\n{report.summary()}")


# ── Changelog ────────────────────────────────────────────────────────


@main.command()
@click.option("--output", "-o", default=None, help="Output path (default: <dist>/catalog/changelog.json)")
@click.option("--baseline", default="HEAD~1", help="Git ref of the baseline snapshot")
@click.pass_obj
def changelog(settings, output: str | None, baseline: str):
    """Diff the registry against the previous commit into a change feed."""
    from pathlib import Path

    from intcat.sync.changelog import build_changelog, write_changelog

    try:
        feed = build_changelog(".", settings.catalog_path, baseline_ref=baseline)
    except IntcatError as e:
        _fail(str(e))

    path = write_changelog(feed, output or Path(settings.dist_dir) / "catalog" / "changelog.json")

    for change in feed.changes:
        console.print(f"  [cyan]{change.type}[/] {change.name} ({change.id}): {', '.join(change.details)}")
    console.print(f"\nGenerated changelog feed with {len(feed.changes)} changes: {path}")


# ── Links ────────────────────────────────────────────────────────────


@main.command(name="check-links")
@click.pass_obj
def check_links_command(settings):
    """Check that every repo, docs and issue URL resolves."""
    from intcat.registry.loader import load_catalog
    from intcat.sync.links import check_links

    try:
        entries = load_catalog(settings.catalog_path)
    except IntcatError as e:
        _fail(str(e))

    report = check_links(entries, timeout=settings.link_timeout)
    for result in report.results:
        if result.ok:
            console.print(f"  [green]OK[/] {result.entry_id} {result.field} -> {result.status}")

    if not report.passed:
        console.print("\n[red]Link checks failed:[/]")
        for failure in report.failures:
            console.print(f"  [red]x[/] {failure.describe()}")
        sys.exit(1)

    console.print(f"\nLink checks passed: {len(report.results)} URLs")


# ── Build ────────────────────────────────────────────────────────────


@main.command()
@click.pass_obj
def build(settings):
    """Build the static catalog site into the dist directory."""
    from intcat.site.builder import build_site

    try:
        result = build_site(
            ".",
            catalog_relpath=settings.catalog_path,
            site_dir=settings.site_dir,
            dist_dir=settings.dist_dir,
        )
    except IntcatError as e:
        _fail(str(e))

    console.print(
        f"[green]Built site artifact at[/] {result.dist_dir} "
        f"({result.pages} pages, {result.changes} changelog entries)"
    )


# ── Template ─────────────────────────────────────────────────────────


@main.command()
@click.option("--fork", is_flag=True, help="Include the optional fork block")
def template(fork: bool):
    """Print the JSON template for a new registry entry."""
    from intcat.registry.template import submission_template_json

    click.echo(submission_template_json(include_fork=fork))


if __name__ == "__main__":
    main()
