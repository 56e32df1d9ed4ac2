"""
Post extraction for one configured feed.

Reads the cached document of a feed, parses it, and keeps only the entries
that have a title, a publication time and at least one link. An optional
per-feed regex filter and a per-feed result cap are applied afterwards.
Problems with a single entry drop that entry; problems with the document
drop the whole feed for this run. Nothing here raises to the caller.
"""

from __future__ import annotations

import logging
import re

from .config import FeedConfig
from .errors import EntryValidationError, FilterCompileError, SourceParseError
from .logging_utils import get_logger, log_event
from .parser import parse_document
from .storage import DocumentStore
from .types import Entry, Post


def compile_filter(pattern: str) -> re.Pattern[str] | None:
    """Compile a feed filter once, case-insensitive.

    Returns:
        The compiled pattern, or None when pattern is empty

    Raises:
        FilterCompileError: If pattern is not a valid regex
    """
    if not pattern:
        return None
    try:
        return re.compile(pattern, re.IGNORECASE)
    except re.error as exc:
        raise FilterCompileError(f"filter '{pattern}' is not a valid regex: {exc}") from exc


def validate_entry(
    entry: Entry,
    feed: FeedConfig,
    source_order: int = 0,
    entry_order: int = 0,
) -> Post:
    """Turn an Entry into a Post.

    The first link of the entry is used as the post URL. An empty or blank
    title counts as present; only an absent title drops the entry.

    Raises:
        EntryValidationError: If published time, link or title is missing
    """
    if entry.published_at is None:
        raise EntryValidationError("published", entry.title)
    if not entry.links:
        raise EntryValidationError("link", entry.title)
    if entry.title is None:
        raise EntryValidationError("title")

    return Post(
        title=entry.title,
        url=entry.links[0],
        published_at=entry.published_at,
        source_title=feed.title,
        source_id=feed.feed_id,
        source_order=source_order,
        entry_order=entry_order,
    )


def matches_filter(pattern: re.Pattern[str], entry: Entry) -> bool:
    """Return True if the pattern is found in the title or the summary."""
    return bool(pattern.search(entry.title or "") or pattern.search(entry.summary or ""))


def extract(
    feed: FeedConfig,
    store: DocumentStore,
    per_feed_limit: int | None = None,
    source_order: int = 0,
    logger: logging.Logger | None = None,
) -> list[Post]:
    """Extract the posts of one feed from its cached document.

    Args:
        feed: The configured feed
        store: Where the downloaded document was stored
        per_feed_limit: Keep at most this many posts, in document order
        source_order: Position of the feed in the configuration
        logger: Logger for events

    Returns:
        The feed's posts in document order; empty if the document is
        missing or not a valid feed
    """
    logger = logger or get_logger()
    log_event(
        logger,
        f"Feed title='{feed.title}' site='{feed.site}' url='{feed.url}'",
        event="extract_start",
        feed_id=feed.feed_id,
    )

    try:
        raw = store.get(feed.feed_id)
    except OSError as exc:
        log_event(
            logger,
            f"Document for '{feed.url}' could not be read: {exc}",
            level=logging.ERROR,
            event="document_invalid",
            feed_id=feed.feed_id,
        )
        return []
    if raw is None:
        log_event(
            logger,
            f"Document for '{feed.url}' ({feed.feed_id}) does not exist",
            level=logging.WARNING,
            event="document_missing",
            feed_id=feed.feed_id,
        )
        return []

    try:
        entries = parse_document(raw)
    except SourceParseError as exc:
        log_event(
            logger,
            f"Parsing feed '{feed.url}' error {exc}",
            level=logging.ERROR,
            event="document_invalid",
            feed_id=feed.feed_id,
        )
        return []

    try:
        pattern = compile_filter(feed.filter)
    except FilterCompileError as exc:
        log_event(
            logger,
            f"{exc}; filtering disabled for '{feed.title}'",
            level=logging.ERROR,
            event="filter_invalid",
            feed_id=feed.feed_id,
        )
        pattern = None

    posts: list[Post] = []
    for index, entry in enumerate(entries):
        try:
            post = validate_entry(entry, feed, source_order, index)
        except EntryValidationError as exc:
            log_event(
                logger,
                f"{exc} in entry '{exc.title or ''}' of '{feed.title}'",
                level=logging.ERROR,
                event="entry_dropped",
                feed_id=feed.feed_id,
                field=exc.field,
            )
            continue

        if pattern is not None:
            if not matches_filter(pattern, entry):
                log_event(
                    logger,
                    f"Skipping entry {post.title} as it did not match filter '{feed.filter}'",
                    event="filter_skip",
                    feed_id=feed.feed_id,
                )
                continue
            log_event(
                logger,
                f"Including entry {post.title} as it matched filter '{feed.filter}'",
                event="filter_match",
                feed_id=feed.feed_id,
            )

        posts.append(post)
        if per_feed_limit is not None and len(posts) >= per_feed_limit:
            break

    log_event(
        logger,
        f"Collected {len(posts)} posts from '{feed.title}'",
        event="extract_done",
        feed_id=feed.feed_id,
        count=len(posts),
    )
    return posts
