"""
News Collector - aggregate many RSS/Atom feeds into one static page.

This package downloads the configured feeds into a local cache directory,
parses the cached documents into posts, merges them into a single
reverse-chronological list and renders that list as an HTML page.

Main entry point is the CLI via the `news-collector` command.

Example:
    $ news-collector --config feeds.yaml --download --web
"""

__all__ = ["__version__", "Post", "aggregate", "extract", "fetch_all", "resolve"]
__version__ = "0.1.0"

from .aggregator import aggregate
from .extractor import extract
from .fetcher import fetch_all
from .identity import resolve
from .types import Post
