"""
Exception hierarchy for the news collector.

Only FatalSetupError (and its ConfigError subclass) is allowed to stop a run.
The per-source and per-entry errors are raised and caught inside the
component that recovers from them, so they show up in logs and in missing
posts rather than as a failed process.
"""

from __future__ import annotations


class NewsCollectorError(Exception):
    """Base class for all news collector errors."""


class FatalSetupError(NewsCollectorError):
    """Storage or site directory cannot be created, or the run cannot start."""


class ConfigError(FatalSetupError):
    """Configuration file is unreadable or malformed."""


class SourceFetchError(NewsCollectorError):
    """Transport failure or non-success status for one source."""

    def __init__(self, url: str, reason: str, status_code: int | None = None):
        super().__init__(f"Error while fetching {url}: {reason}")
        self.url = url
        self.reason = reason
        self.status_code = status_code


class SourceParseError(NewsCollectorError):
    """Cached document is not a valid feed."""


class EntryValidationError(NewsCollectorError):
    """Entry is missing a required field."""

    def __init__(self, field: str, title: str | None = None):
        super().__init__(f"Missing {field} field")
        self.field = field
        self.title = title


class FilterCompileError(NewsCollectorError):
    """Filter pattern is not a valid regular expression."""
