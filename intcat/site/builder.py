"""Static build — assemble the publishable ``dist/`` directory.

Layout of the output::

    dist/
      index.html                  listing in the default query state, or the
                                  "Catalog unavailable" page when loading fails
      integration/<id>.html       one detail page per entry
      catalog/<registry>.json     the registry document, as committed
      catalog/changelog.json      change feed against the previous commit
      ...                         static assets copied from the site dir
"""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

from intcat.catalog.session import CatalogSession
from intcat.errors import CatalogUnavailableError
from intcat.registry.loader import load_catalog
from intcat.site.render import render_detail, render_index, render_unavailable
from intcat.sync.changelog import build_changelog, write_changelog

logger = logging.getLogger(__name__)


@dataclass
class BuildResult:
    dist_dir: Path
    pages: int
    changes: int


def build_site(
    root: str | Path,
    catalog_relpath: str = "catalog/integrations.json",
    site_dir: str = "site",
    dist_dir: str = "dist",
    now: datetime | None = None,
) -> BuildResult:
    """Rebuild ``dist_dir`` from scratch under ``root``."""
    root = Path(root)
    now = now or datetime.now(timezone.utc)
    dist = root / dist_dir
    catalog_path = root / catalog_relpath

    if dist.exists():
        shutil.rmtree(dist)
    dist.mkdir(parents=True)

    static = root / site_dir
    if static.is_dir():
        shutil.copytree(static, dist, dirs_exist_ok=True)

    try:
        entries = load_catalog(catalog_path)
    except CatalogUnavailableError as e:
        (dist / "index.html").write_text(render_unavailable(str(e)), encoding="utf-8")
        raise

    (dist / "catalog").mkdir(exist_ok=True)
    shutil.copy2(catalog_path, dist / "catalog" / catalog_path.name)

    session = CatalogSession(entries, now=now)
    (dist / "index.html").write_text(render_index(entries, session.visible(), session.state, now), encoding="utf-8")

    detail_dir = dist / "integration"
    detail_dir.mkdir()
    for entry in entries:
        (detail_dir / f"{entry.id}.html").write_text(render_detail(entry, now), encoding="utf-8")

    feed = build_changelog(root, catalog_relpath, now=now)
    write_changelog(feed, dist / "catalog" / "changelog.json")

    logger.info("Built site artifact at %s", dist)
    return BuildResult(dist_dir=dist, pages=len(entries) + 1, changes=len(feed.changes))
