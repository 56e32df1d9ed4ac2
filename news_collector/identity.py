"""
Stable storage keys for configured feeds.

A feed's cache file name is derived from its URL only, so re-running with an
unchanged URL always reads and writes the same cached document.
"""

from __future__ import annotations

import hashlib

MAX_PREFIX_BYTES = 200


def resolve(address: str) -> str:
    """Map a feed URL to a flat, file-system safe storage key.

    The scheme separator and every path separator are replaced with "-" to
    keep the name readable; other characters pass through unchanged. A short
    SHA256 digest of the full URL is appended so that two URLs that flatten
    to the same text still get different keys.

    Args:
        address: The fetch URL of the feed

    Returns:
        The storage key, usable as a single file name

    Example:
        >>> resolve("https://example.com/feed.xml")
        'https-example.com-feed.xml-...'
    """
    flat = address.replace("://", "-").replace("/", "-")
    # file names are limited in bytes, not characters
    prefix = flat.encode("utf-8")[:MAX_PREFIX_BYTES].decode("utf-8", errors="ignore")
    digest = hashlib.sha256(address.encode("utf-8")).hexdigest()[:12]
    return f"{prefix}-{digest}"
