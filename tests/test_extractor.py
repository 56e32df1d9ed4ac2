"""Tests for per-feed post extraction."""

import logging

import pytest

from conftest import make_feed, make_rss, utc
from news_collector.errors import FilterCompileError
from news_collector.extractor import compile_filter, extract, validate_entry
from news_collector.logging_utils import LOGGER_NAME
from news_collector.storage import MemoryDocumentStore
from news_collector.types import Entry


def _store_for(feed, items) -> MemoryDocumentStore:
    return MemoryDocumentStore({feed.feed_id: make_rss(items)})


def _item(title: str, day: int, **extra) -> dict:
    item = {"title": title, "link": f"https://example.com/{title}", "published": utc(2024, 1, day, 12)}
    item.update(extra)
    return item


def _events(caplog, event: str) -> list[logging.LogRecord]:
    return [record for record in caplog.records if getattr(record, "event", None) == event]


def test_extract_builds_posts_annotated_with_feed():
    feed = make_feed("alpha")
    store = _store_for(feed, [_item("one", 1), _item("two", 2)])

    posts = extract(feed, store, source_order=3)

    assert [post.title for post in posts] == ["one", "two"]
    assert posts[0].url == "https://example.com/one"
    assert posts[0].published_at == utc(2024, 1, 1, 12)
    assert posts[0].source_title == "Alpha"
    assert posts[0].source_id == feed.feed_id
    assert [(post.source_order, post.entry_order) for post in posts] == [(3, 0), (3, 1)]


def test_extract_missing_document_yields_nothing_with_warning(caplog):
    feed = make_feed("alpha")

    posts = extract(feed, MemoryDocumentStore())

    assert posts == []
    (record,) = _events(caplog, "document_missing")
    assert record.levelno == logging.WARNING


def test_extract_invalid_document_yields_nothing(caplog):
    feed = make_feed("alpha")
    store = MemoryDocumentStore({feed.feed_id: b"<html><body>Not a feed</body></html>"})

    assert extract(feed, store) == []
    assert len(_events(caplog, "document_invalid")) == 1


def test_extract_drops_incomplete_entries_and_continues(caplog):
    feed = make_feed("alpha")
    items = [
        {"title": "no date", "link": "https://example.com/no-date"},
        _item("kept-1", 1),
        {"title": "no link", "published": utc(2024, 1, 2)},
        {"link": "https://example.com/no-title", "published": utc(2024, 1, 3)},
        _item("kept-2", 4),
    ]

    posts = extract(feed, _store_for(feed, items))

    assert [post.title for post in posts] == ["kept-1", "kept-2"]
    dropped = _events(caplog, "entry_dropped")
    assert [record.field for record in dropped] == ["published", "link", "title"]


def test_extract_uses_first_link():
    feed = make_feed("alpha")
    atom = b"""<?xml version="1.0" encoding="utf-8"?>
<feed xmlns="http://www.w3.org/2005/Atom">
  <title>Atom</title><id>urn:x</id><updated>2024-01-01T00:00:00Z</updated>
  <entry>
    <title>Two links</title><id>urn:x:1</id>
    <link rel="alternate" href="https://example.com/first"/>
    <link rel="alternate" type="text/plain" href="https://example.com/second"/>
    <published>2024-01-01T00:00:00Z</published>
  </entry>
</feed>"""
    store = MemoryDocumentStore({feed.feed_id: atom})

    (post,) = extract(feed, store)

    assert post.url == "https://example.com/first"


def test_filter_is_prefix_match_on_title_case_insensitive():
    feed = make_feed("alpha", filter="^foo")
    store = _store_for(feed, [_item("foobar", 1), _item("barfoo", 2), _item("FOOBAZ", 3)])

    posts = extract(feed, store)

    assert [post.title for post in posts] == ["foobar", "FOOBAZ"]


def test_filter_matches_summary(caplog):
    caplog.set_level(logging.INFO, logger=LOGGER_NAME)
    feed = make_feed("alpha", filter="python")
    items = [
        _item("release notes", 1, description="New Python version"),
        _item("weather", 2, description="Rain"),
        _item("no summary", 3),
    ]

    posts = extract(feed, _store_for(feed, items))

    assert [post.title for post in posts] == ["release notes"]
    assert len(_events(caplog, "filter_match")) == 1
    assert len(_events(caplog, "filter_skip")) == 2


def test_invalid_filter_disables_filtering_once(caplog):
    feed = make_feed("alpha", filter="([unclosed")
    store = _store_for(feed, [_item("one", 1), _item("two", 2), _item("three", 3)])

    posts = extract(feed, store)

    assert [post.title for post in posts] == ["one", "two", "three"]
    assert len(_events(caplog, "filter_invalid")) == 1


def test_compile_filter():
    assert compile_filter("") is None
    assert compile_filter("abc").search("xABCx")
    with pytest.raises(FilterCompileError):
        compile_filter("(")


def test_per_feed_limit_keeps_document_order_not_newest():
    feed = make_feed("alpha")
    items = [_item("a", 1), _item("b", 2), _item("c", 5), _item("d", 4), _item("e", 3)]

    posts = extract(feed, _store_for(feed, items), per_feed_limit=2)

    assert [post.title for post in posts] == ["a", "b"]


def test_per_feed_limit_counts_only_surviving_entries():
    feed = make_feed("alpha", filter="keep")
    items = [
        {"title": "keep broken", "link": "https://example.com/x"},
        _item("skip-1", 1),
        _item("keep-1", 2),
        _item("skip-2", 3),
        _item("keep-2", 4),
        _item("keep-3", 5),
    ]

    posts = extract(feed, _store_for(feed, items), per_feed_limit=2)

    assert [post.title for post in posts] == ["keep-1", "keep-2"]


def test_blank_title_is_kept():
    feed = make_feed("alpha")
    entry = Entry(title="   ", links=["https://example.com/blank"], published_at=utc(2024, 1, 1))

    post = validate_entry(entry, feed)

    assert post.title == "   "
    assert post.url == "https://example.com/blank"


def test_unreadable_document_yields_nothing(caplog):
    feed = make_feed("alpha")

    class UnreadableStore(MemoryDocumentStore):
        def get(self, source_id: str) -> bytes | None:
            raise OSError(36, "File name too long")

    assert extract(feed, UnreadableStore()) == []
    assert len(_events(caplog, "document_invalid")) == 1
