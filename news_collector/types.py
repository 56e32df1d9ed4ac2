"""
Core data types for the News Collector.

This module defines the records that flow through the pipeline:
- Entry: One raw item decoded from a cached feed document
- Post: A validated entry, annotated with the source it came from
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class Entry:
    """Represents one item of a parsed feed before validation.

    Any field may be missing; the extractor decides what to keep.

    Attributes:
        title: The item headline, if present
        summary: The item summary/description, if present
        links: All link hrefs of the item, in document order
        published_at: Publication timestamp in UTC, if present
    """
    title: str | None = None
    summary: str | None = None
    links: list[str] = field(default_factory=list)
    published_at: datetime | None = None


@dataclass(frozen=True)
class Post:
    """A validated, normalized entry ready for aggregation and rendering.

    Attributes:
        title: The item headline
        url: The first link of the item
        published_at: Publication timestamp in UTC
        source_title: Display title of the configured feed
        source_id: Storage key of the configured feed
        source_order: Position of the feed in the configuration
        entry_order: Position of the item inside its feed document
    """
    title: str
    url: str
    published_at: datetime
    source_title: str
    source_id: str
    source_order: int = 0
    entry_order: int = 0

    @property
    def published(self) -> str:
        return self.published_at.strftime("%Y-%m-%d %H:%M:%S")
