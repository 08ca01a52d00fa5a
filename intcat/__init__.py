"""intcat: integrations catalog with readiness scoring and a URL query-state model."""

__version__ = "0.1.0"
