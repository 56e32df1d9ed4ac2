"""
Run orchestration for the News Collector.

This module coordinates one run:
1. Set up logging
2. Optionally download all feeds into the cache directory
3. Optionally read the cached feeds, merge them and render the page

Downloading and rendering are independent; a run that only renders uses
whatever documents earlier downloads left in the cache.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from rich.console import Console

from . import __version__
from .aggregator import aggregate
from .config import AppConfig
from .fetcher import HttpxTransport, Transport, fetch_all
from .logging_utils import log_event, setup_logging
from .renderer import render_html
from .storage import DocumentStore, FileDocumentStore


@dataclass
class RunSummary:
    """What a run did.

    Attributes:
        downloaded: Number of feeds downloaded, or None if downloading was off
        posts: Number of rendered posts, or None if rendering was off
        output_path: Path of the generated page, if any
    """
    downloaded: int | None = None
    posts: int | None = None
    output_path: Path | None = None


def run_pipeline(
    cfg: AppConfig,
    download: bool = False,
    limit: int = 0,
    web: bool = False,
    console: Console | None = None,
    store: DocumentStore | None = None,
    transport: Transport | None = None,
) -> RunSummary:
    """Run the download and/or render stages.

    Args:
        cfg: Application configuration
        download: Whether to download the feeds
        limit: Stop downloading after this many successes (0 = no limit)
        web: Whether to render the page
        console: Rich console for the summary line (creates default if None)
        store: Document store (defaults to the configured feeds directory)
        transport: HTTP transport (defaults to httpx)

    Returns:
        RunSummary describing the run

    Raises:
        FatalSetupError: If a required directory cannot be created
    """
    site_dir = Path(cfg.paths.site_dir)
    logger = setup_logging(cfg.logging, site_dir if cfg.logging.file else None)
    log_event(logger, f"Starting the News collector version {__version__}", event="run_start")

    if store is None:
        store = FileDocumentStore(Path(cfg.paths.feeds_dir))
    summary = RunSummary()

    if download:
        if transport is None:
            with HttpxTransport(cfg.fetch) as http:
                summary.downloaded = fetch_all(cfg.feeds, store, http, limit, logger)
        else:
            summary.downloaded = fetch_all(cfg.feeds, store, transport, limit, logger)

    if web:
        log_event(logger, "Start generating web page", event="render_start")
        posts = aggregate(cfg.feeds, store, cfg.per_feed_limit, logger)
        summary.posts = len(posts)
        summary.output_path = render_html(posts, cfg, site_dir)
        log_event(
            logger,
            f"Page written to {summary.output_path}",
            event="render_done",
            path=str(summary.output_path),
            count=len(posts),
        )

    _render_run_summary(summary, len(cfg.feeds), console or Console())
    log_event(logger, "Ending the News collector", event="run_end")
    return summary


def _render_run_summary(summary: RunSummary, total: int, console: Console) -> None:
    if summary.downloaded is not None:
        console.print(f"[bold]Download summary[/bold]: feeds={total}, downloaded={summary.downloaded}")
    if summary.output_path is not None:
        console.print(f"[bold]Page[/bold]: posts={summary.posts}, output={summary.output_path}")
