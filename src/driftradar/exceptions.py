"""Custom exceptions for Drift Radar.

The scoring core never raises; these cover the collaborators around it.
"""


class DriftRadarError(Exception):
    """Base exception for all Drift Radar errors."""


class ConfigError(DriftRadarError):
    """Configuration-related errors."""


class ContextError(DriftRadarError):
    """The run context (repository, pull request) could not be resolved."""


class GitHubError(DriftRadarError):
    """GitHub API calls failed (fetching files, history, or comments)."""


class CacheError(DriftRadarError):
    """Baseline persistence errors."""
