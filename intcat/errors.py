"""Error types raised outside the catalog core.

The core itself is total; these cover loading, configuration and remote APIs.
"""

from __future__ import annotations


class IntcatError(RuntimeError):
    """Base class for errors surfaced to the CLI."""


class CatalogUnavailableError(IntcatError):
    """Raised when the registry document cannot be fetched or parsed."""


class EntryNotFoundError(IntcatError, KeyError):
    """Raised when a detail view asks for an id the catalog does not contain."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else ""


class ConfigurationError(IntcatError):
    """Raised when configuration values are invalid."""


class MissingConfigurationError(ConfigurationError):
    """Raised when required configuration values are absent or blank."""


class GitHubAPIError(IntcatError):
    """Raised when the GitHub REST API answers with a non-success status."""

    def __init__(self, message: str, status: int | None = None):
        super().__init__(message)
        self.status = status
