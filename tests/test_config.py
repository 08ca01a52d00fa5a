"""Tests for settings loading."""

import tempfile
from pathlib import Path

import pytest

from intcat.config import CatalogSettings, load_settings, resolve_github_token
from intcat.errors import ConfigurationError, MissingConfigurationError


def _write(tmpdir: str, text: str) -> Path:
    path = Path(tmpdir) / "intcat.yaml"
    path.write_text(text)
    return path


def test_defaults_without_file(monkeypatch):
    with tempfile.TemporaryDirectory() as tmpdir:
        monkeypatch.chdir(tmpdir)
        settings = load_settings(environ={})
    assert settings == CatalogSettings()


def test_yaml_then_environment():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = _write(tmpdir, "github_org: example\nmax_maintainers: 3\nlink_timeout: 5\n")
        settings = load_settings(path, environ={"INTCAT_MAX_MAINTAINERS": "7", "INTCAT_DIST_DIR": " "})
    assert settings.github_org == "example"
    assert settings.max_maintainers == 7
    assert settings.link_timeout == 5.0
    assert settings.dist_dir == "dist"


def test_explicit_missing_file():
    with pytest.raises(ConfigurationError, match="Config file not found"):
        load_settings("/nonexistent/intcat.yaml", environ={})


def test_invalid_settings():
    with tempfile.TemporaryDirectory() as tmpdir:
        with pytest.raises(ConfigurationError, match="Unknown setting"):
            load_settings(_write(tmpdir, "colour: blue\n"), environ={})
        with pytest.raises(ConfigurationError, match="Invalid value for max_maintainers"):
            load_settings(_write(tmpdir, "max_maintainers: many\n"), environ={})
        with pytest.raises(ConfigurationError, match="must be positive"):
            load_settings(_write(tmpdir, "request_timeout: 0\n"), environ={})
        with pytest.raises(ConfigurationError, match="mapping"):
            load_settings(_write(tmpdir, "- a\n- b\n"), environ={})


def test_github_token_from_environment():
    assert resolve_github_token({"GITHUB_TOKEN": " abc "}) == "abc"


def test_github_token_missing(monkeypatch):
    monkeypatch.setenv("PATH", "/nonexistent")
    with pytest.raises(MissingConfigurationError, match="GITHUB_TOKEN"):
        resolve_github_token({})
