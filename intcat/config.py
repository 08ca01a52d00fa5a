"""Configuration for paths, the GitHub org and network limits.

Settings are read from an optional YAML file and then overridden by
``INTCAT_*`` environment variables::

    catalog_path: catalog/integrations.json
    github_org: forwardnetworks
    maintainer_window_days: 365
"""

from __future__ import annotations

import logging
import os
import subprocess
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

import yaml

from intcat.errors import ConfigurationError, MissingConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "intcat.yaml"
ENV_PREFIX = "INTCAT_"


@dataclass
class CatalogSettings:
    """Resolved configuration for the CLI and the sync/site collaborators."""

    catalog_path: str = "catalog/integrations.json"
    site_dir: str = "site"
    dist_dir: str = "dist"
    github_org: str = "forwardnetworks"
    maintainer_window_days: int = 365
    max_maintainers: int = 5
    request_timeout: float = 30.0
    link_timeout: float = 15.0


def load_settings(path: str | Path | None = None, environ: dict[str, str] | None = None) -> CatalogSettings:
    """Load settings from ``path`` (or ``intcat.yaml`` when present) plus the environment.

    An explicit ``path`` that does not exist is an error; the default file is optional.
    """
    env = os.environ if environ is None else environ
    values: dict[str, Any] = {}

    config_path = Path(path) if path else Path(DEFAULT_CONFIG_FILE)
    if config_path.exists():
        values.update(_read_yaml(config_path))
    elif path:
        raise ConfigurationError(f"Config file not found: {config_path}")

    for f in fields(CatalogSettings):
        env_value = env.get(ENV_PREFIX + f.name.upper())
        if env_value is not None and env_value.strip():
            values[f.name] = env_value.strip()

    return _build(values)


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"{path} must contain a mapping of settings")
    logger.debug("Loaded settings from %s", path)
    return data


def _build(values: dict[str, Any]) -> CatalogSettings:
    known = {f.name: f for f in fields(CatalogSettings)}
    unknown = sorted(set(values) - set(known))
    if unknown:
        raise ConfigurationError(f"Unknown setting(s): {', '.join(unknown)}")

    coerced: dict[str, Any] = {}
    for name, value in values.items():
        default = getattr(CatalogSettings, name)
        try:
            if isinstance(default, int):
                coerced[name] = int(value)
            elif isinstance(default, float):
                coerced[name] = float(value)
            else:
                coerced[name] = str(value)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid value for {name}: {value!r}") from e

        if isinstance(default, (int, float)) and coerced[name] <= 0:
            raise ConfigurationError(f"{name} must be positive, got {value!r}")

    return CatalogSettings(**coerced)


def resolve_github_token(environ: dict[str, str] | None = None) -> str:
    """Return ``GITHUB_TOKEN`` or the token of the ``gh`` CLI session."""
    env = os.environ if environ is None else environ
    token = env.get("GITHUB_TOKEN", "").strip()
    if token:
        return token

    try:
        result = subprocess.run(
            ["gh", "auth", "token"],
            capture_output=True,
            text=True,
            check=False,
        )
    except OSError:
        result = None

    if result is not None and result.returncode == 0 and result.stdout.strip():
        return result.stdout.strip()

    raise MissingConfigurationError(
        "Missing GitHub token. Set GITHUB_TOKEN or authenticate with `gh auth login`."
    )
