from __future__ import annotations

from datetime import datetime, timezone
from email.utils import format_datetime
import logging
from xml.sax.saxutils import escape

import pytest

from news_collector.config import FeedConfig
from news_collector.logging_utils import LOGGER_NAME


def utc(*args: int) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


def make_rss(items: list[dict], title: str = "Example feed") -> bytes:
    """Build an RSS 2.0 document; keys left out of an item are omitted."""
    parts = [
        '<?xml version="1.0" encoding="utf-8"?>',
        '<rss version="2.0"><channel>',
        f"<title>{escape(title)}</title>",
        "<link>https://example.com/</link>",
        "<description>Example</description>",
    ]
    for item in items:
        parts.append("<item>")
        if "title" in item:
            parts.append(f"<title>{escape(item['title'])}</title>")
        if "link" in item:
            parts.append(f"<link>{escape(item['link'])}</link>")
        if "description" in item:
            parts.append(f"<description>{escape(item['description'])}</description>")
        if "published" in item:
            parts.append(f"<pubDate>{format_datetime(item['published'])}</pubDate>")
        parts.append("</item>")
    parts.append("</channel></rss>")
    return "\n".join(parts).encode("utf-8")


def make_feed(name: str, filter: str = "") -> FeedConfig:
    return FeedConfig(
        site=f"https://{name}.example.com/",
        url=f"https://{name}.example.com/feed.xml",
        title=name.capitalize(),
        filter=filter,
    )


@pytest.fixture(autouse=True)
def reset_logger():
    """setup_logging detaches the package logger from root; undo it for caplog."""
    yield
    logger = logging.getLogger(LOGGER_NAME)
    for handler in logger.handlers:
        handler.close()
    logger.handlers = []
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
