"""
Feed downloading.

This module downloads every configured feed once, in configuration order,
and stores the raw response body in a DocumentStore under the feed's
storage key. A failing feed is logged and skipped; it never stops the
batch. The HTTP layer sits behind the Transport interface so tests and
other policies can replace it.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
import logging
from typing import Sequence

import httpx

from .config import FeedConfig, FetchConfig
from .errors import SourceFetchError
from .logging_utils import get_logger, log_event
from .storage import DocumentStore


@dataclass
class FetchResult:
    """Result of an HTTP fetch operation.

    Either content will be populated (response received) or error will be
    populated (transport failure), but never both. status_code is None for
    network-level failures.

    Attributes:
        url: The URL that was fetched
        status_code: HTTP status code, or None if request failed before getting response
        content: The raw response body, or None on error
        error: Error message if fetch failed, None otherwise
    """
    url: str
    status_code: int | None
    content: bytes | None
    error: str | None

    def raise_for_outcome(self) -> bytes:
        """Return the body of a successful fetch.

        Raises:
            SourceFetchError: On transport failure or a status other than 200
        """
        if self.error is not None or self.content is None:
            raise SourceFetchError(self.url, self.error or "empty response")
        if self.status_code != 200:
            raise SourceFetchError(
                self.url, f"status was {self.status_code}", status_code=self.status_code
            )
        return self.content


class Transport(ABC):
    """Performs a single fetch of one address."""

    @abstractmethod
    def fetch(self, url: str) -> FetchResult:
        raise NotImplementedError


class HttpxTransport(Transport):
    """Single GET per call through one shared httpx.Client, no retries.

    Args:
        cfg: Fetch settings (user agent, timeout, proxy handling)
        transport: Optional httpx transport, e.g. httpx.MockTransport in tests
    """

    def __init__(self, cfg: FetchConfig, transport: httpx.BaseTransport | None = None):
        kwargs = {}
        if cfg.timeout_seconds is not None:
            kwargs["timeout"] = cfg.timeout_seconds
        self._client = httpx.Client(
            headers={"User-Agent": cfg.user_agent},
            follow_redirects=True,
            trust_env=cfg.trust_env,
            transport=transport,
            **kwargs,
        )

    def fetch(self, url: str) -> FetchResult:
        try:
            resp = self._client.get(url)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            return FetchResult(url=url, status_code=None, content=None, error=f"{type(exc).__name__}: {exc}")
        return FetchResult(url=url, status_code=resp.status_code, content=resp.content, error=None)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> HttpxTransport:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def fetch_all(
    feeds: Sequence[FeedConfig],
    store: DocumentStore,
    transport: Transport,
    limit: int | None = None,
    logger: logging.Logger | None = None,
) -> int:
    """Download every feed and store its raw document.

    Feeds are processed one at a time in configuration order. Each successful
    download overwrites the previously stored document for that feed.

    Args:
        feeds: Configured feeds
        store: Where downloaded documents are written
        transport: Performs the HTTP request
        limit: Stop after this many successful downloads (None or 0 = no limit)
        logger: Logger for events

    Returns:
        Number of feeds downloaded successfully

    Raises:
        FatalSetupError: If the store cannot be prepared
    """
    logger = logger or get_logger()
    log_event(logger, "Start downloading feeds", event="fetch_start", total=len(feeds))

    store.prepare()

    count = 0
    for feed in feeds:
        log_event(
            logger,
            f"{feed.title} {feed.site} {feed.url}",
            level=logging.DEBUG,
            event="fetch_attempt",
            url=feed.url,
            feed_id=feed.feed_id,
        )
        try:
            content = transport.fetch(feed.url).raise_for_outcome()
        except SourceFetchError as exc:
            log_event(
                logger,
                str(exc),
                level=logging.ERROR,
                event="fetch_failed",
                url=feed.url,
                status_code=exc.status_code,
                reason=exc.reason,
            )
            continue

        try:
            store.put(feed.feed_id, content)
        except OSError as exc:
            log_event(
                logger,
                f"Could not save feed '{feed.feed_id}': {exc}",
                level=logging.ERROR,
                event="fetch_failed",
                url=feed.url,
                reason=f"write error: {exc}",
            )
            continue
        log_event(
            logger,
            f"Saved feed as '{feed.feed_id}'",
            event="fetch_saved",
            url=feed.url,
            feed_id=feed.feed_id,
            size=len(content),
        )

        count += 1
        if limit and limit > 0 and count >= limit:
            log_event(logger, f"Download limit of {limit} reached", event="fetch_limit_reached", count=count)
            break

    log_event(logger, f"Downloaded: {count} feeds out of {len(feeds)}", event="fetch_done", count=count, total=len(feeds))
    return count
