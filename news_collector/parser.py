"""
Feed document parsing.

This module turns a cached RSS/Atom document into Entry records using
feedparser. feedparser is lenient: documents with minor problems are still
parsed (and logged as warnings), while content that is not recognizable as
a feed at all raises SourceParseError.
"""

from __future__ import annotations

from calendar import timegm
from datetime import datetime, timezone
import io
import logging

import feedparser

from .errors import SourceParseError
from .types import Entry

logger = logging.getLogger(__name__)


def parse_document(raw: bytes) -> list[Entry]:
    """Parse a raw feed document into entries, in document order.

    Args:
        raw: The document bytes as downloaded

    Returns:
        A list of Entry objects; fields missing from an item are left empty

    Raises:
        SourceParseError: If the bytes are not a recognizable feed
    """
    parsed = feedparser.parse(io.BytesIO(raw))

    # version is empty when feedparser could not identify RSS, Atom or CDF
    if not parsed.get("version"):
        reason = parsed.get("bozo_exception") or "unknown feed format"
        raise SourceParseError(f"Document is not a valid feed: {reason}")

    if parsed.bozo:
        logger.warning(f"Feed parsing warning: {parsed.bozo_exception}")

    return [_to_entry(item) for item in parsed.entries]


def _to_entry(item) -> Entry:
    """Convert one feedparser entry into an Entry."""
    links = [link["href"] for link in item.get("links", []) if link.get("href")]
    if not links and item.get("link"):
        links = [item["link"]]

    return Entry(
        title=item.get("title"),
        summary=item.get("summary"),
        links=links,
        published_at=_published_at(item),
    )


def _published_at(item) -> datetime | None:
    """Return the item's publication time as an aware UTC datetime.

    feedparser normalizes parsed dates to a UTC struct_time.
    """
    parsed = item.get("published_parsed")
    if not parsed:
        return None
    try:
        return datetime.fromtimestamp(timegm(parsed), tz=timezone.utc)
    except (OverflowError, ValueError, TypeError):
        return None
