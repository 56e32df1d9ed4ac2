"""
Configuration management using YAML files and dataclasses.

This module defines all configuration dataclasses and provides loading
from YAML files with defaults. Configuration sections:
- FeedConfig: One configured feed (site, url, title, optional filter)
- FetchConfig: HTTP fetching settings
- PathsConfig: Cache and site directories
- LoggingConfig: Logging behavior
- AppConfig: Root configuration container
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any

import yaml

from . import __version__
from .errors import ConfigError
from .identity import resolve


@dataclass
class FeedConfig:
    """Configuration for one feed.

    Attributes:
        site: Home page of the site publishing the feed
        url: The feed URL that is downloaded
        title: Display title shown next to each post
        filter: Optional regex; when set only matching entries are kept
        feed_id: Storage key derived from url (never read from YAML)
    """

    site: str
    url: str
    title: str
    filter: str = ""
    feed_id: str = field(default="", init=False)

    def __post_init__(self) -> None:
        for name in ("site", "url", "title", "filter"):
            if not isinstance(getattr(self, name), str):
                raise ConfigError(f"feed field '{name}' must be a string")
        self.feed_id = resolve(self.url)


@dataclass
class FetchConfig:
    """Configuration for HTTP fetching.

    Attributes:
        user_agent: HTTP User-Agent header string
        timeout_seconds: Request timeout; None keeps the httpx default
        trust_env: Whether to respect system proxy settings
    """

    user_agent: str = f"News Collector {__version__}"
    timeout_seconds: float | None = None
    trust_env: bool = True


@dataclass
class PathsConfig:
    """Directories used by a run.

    Attributes:
        feeds_dir: Cache directory holding one downloaded document per feed
        site_dir: Output directory for the rendered page
    """

    feeds_dir: str = "feeds"
    site_dir: str = "_site"


@dataclass
class LoggingConfig:
    """Configuration for logging behavior.

    Attributes:
        level: Logging level ("DEBUG", "INFO", "WARNING", "ERROR")
        console: Whether to log to console
        file: Whether to log to file
        format: Log file format ("jsonl" or "plain")
        filename: Name of the log file, written into the site directory
    """

    level: str = "INFO"
    console: bool = True
    file: bool = False
    format: str = "jsonl"
    filename: str = "run.jsonl"


@dataclass
class AppConfig:
    """Root configuration container."""

    title: str
    description: str
    feeds: list[FeedConfig] = field(default_factory=list)
    per_feed_limit: int | None = None
    config_url: str | None = None
    fetch: FetchConfig = field(default_factory=FetchConfig)
    paths: PathsConfig = field(default_factory=PathsConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


_SECTIONS = {
    "fetch": FetchConfig,
    "paths": PathsConfig,
    "logging": LoggingConfig,
}


def load_config(path: str) -> AppConfig:
    """Load configuration from a YAML file.

    Raises:
        ConfigError: If the file cannot be read or does not describe a valid config
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            text = f.read()
    except OSError as exc:
        raise ConfigError(f"Config file '{path}' could not be read {exc}") from exc

    try:
        raw = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Could not read YAML config file '{path}': {exc}") from exc

    try:
        return parse_config(raw)
    except ConfigError as exc:
        raise ConfigError(f"Could not read YAML config file '{path}': {exc}") from exc


def parse_config(raw: Any) -> AppConfig:
    """Build an AppConfig from already decoded YAML data."""
    if not isinstance(raw, dict):
        raise ConfigError("top level must be a mapping")

    data = dict(raw)
    feeds_raw = data.pop("feeds", None)
    if not isinstance(feeds_raw, list):
        raise ConfigError("'feeds' must be a list")
    feeds = [_build(FeedConfig, item, f"feeds[{index}]") for index, item in enumerate(feeds_raw)]

    sections = {}
    for key, cls in _SECTIONS.items():
        sections[key] = _build(cls, data.pop(key, None) or {}, key)

    cfg = _build(AppConfig, data, "config")
    cfg.feeds = feeds
    cfg.fetch = sections["fetch"]
    cfg.paths = sections["paths"]
    cfg.logging = sections["logging"]

    limit = cfg.per_feed_limit
    if limit is not None and (isinstance(limit, bool) or not isinstance(limit, int) or limit < 1):
        raise ConfigError(f"'per_feed_limit' must be a positive integer, got {limit!r}")
    for key in ("title", "description"):
        if not isinstance(getattr(cfg, key), str):
            raise ConfigError(f"'{key}' must be a string")
    return cfg


def _build(cls, values: Any, where: str):
    """Instantiate a config dataclass, rejecting unknown and missing keys."""
    if not isinstance(values, dict):
        raise ConfigError(f"'{where}' must be a mapping")
    allowed = {f.name for f in fields(cls) if f.init}
    unknown = sorted(set(values) - allowed)
    if unknown:
        raise ConfigError(f"unknown field(s) in '{where}': {', '.join(unknown)}")
    try:
        return cls(**values)
    except TypeError as exc:
        raise ConfigError(f"invalid '{where}': {exc}") from exc
