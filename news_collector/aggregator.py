"""
Merging of per-feed posts into one time-ordered list.
"""

from __future__ import annotations

import logging
from typing import Iterable, Sequence

from .config import FeedConfig
from .extractor import extract
from .logging_utils import get_logger, log_event
from .storage import DocumentStore
from .types import Post


def sort_key(post: Post) -> tuple[float, int, int]:
    """Newest first; ties go to the earlier feed, then the earlier entry."""
    return (-post.published_at.timestamp(), post.source_order, post.entry_order)


def sort_posts(posts: Iterable[Post]) -> list[Post]:
    return sorted(posts, key=sort_key)


def aggregate(
    feeds: Sequence[FeedConfig],
    store: DocumentStore,
    per_feed_limit: int | None = None,
    logger: logging.Logger | None = None,
) -> list[Post]:
    """Extract every feed in configuration order and merge the results.

    No deduplication is done: the same story published by two feeds shows up
    twice.

    Args:
        feeds: Configured feeds
        store: Where downloaded documents were stored
        per_feed_limit: Per-feed cap applied before merging
        logger: Logger for events

    Returns:
        All posts sorted by publication time, newest first
    """
    logger = logger or get_logger()
    log_event(logger, "Start reading feeds", event="aggregate_start", total=len(feeds))

    posts: list[Post] = []
    for source_order, feed in enumerate(feeds):
        posts.extend(extract(feed, store, per_feed_limit, source_order, logger))

    ordered = sort_posts(posts)
    for post in ordered:
        logger.debug(post.title)

    log_event(
        logger,
        f"Aggregated {len(ordered)} posts from {len(feeds)} feeds",
        event="aggregate_done",
        count=len(ordered),
    )
    return ordered
