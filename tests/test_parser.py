import logging
from datetime import datetime, timedelta, timezone

import pytest

from garss.errors import FeedFormatError
from garss.models.feed import Channel
from garss.services.parser import parse_atom, parse_date, parse_feed

CHANNEL = Channel(url="https://feed.example/rss", author="Alice", group="Tech")

RSS = b"""<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0" xmlns:atom="http://www.w3.org/2005/Atom">
  <channel>
    <title>Alice's blog</title>
    <atom:link href="https://feed.example/rss" rel="self"/>
    <item>
      <title>Market sentiment flips</title>
      <atom:link href="https://feed.example/not-this-one"/>
      <link>https://feed.example/posts/1</link>
      <pubDate>Mon, 20 May 2024 15:20:00 +0000</pubDate>
      <author>someone@feed.example</author>
    </item>
    <item>
      <link>https://feed.example/posts/2</link>
      <pubDate>Tue, 03 Jun 2025 09:39:21 EST</pubDate>
    </item>
    <item>
      <title>Broken date</title>
      <link>https://feed.example/posts/3</link>
      <pubDate>sometime last week</pubDate>
    </item>
    <item>
      <title>No date at all</title>
      <link>https://feed.example/posts/4</link>
    </item>
    <item>
      <title>No link</title>
      <pubDate>Mon, 20 May 2024 15:20:00 +0000</pubDate>
    </item>
  </channel>
</rss>
"""

ATOM = b"""<?xml version="1.0" encoding="utf-8"?>
<feed xmlns="http://www.w3.org/2005/Atom">
  <title>Example Feed</title>
  <updated>2025-01-02T00:00:00Z</updated>
  <entry>
    <title>Published entry</title>
    <link href="https://atom.example/1"/>
    <link rel="enclosure" href="https://atom.example/1.mp3"/>
    <published>2024-12-31T23:30:00-02:00</published>
    <updated>2025-01-02T00:00:00Z</updated>
  </entry>
  <entry>
    <title type="html">Only &lt;b&gt;updated&lt;/b&gt;</title>
    <link href="https://atom.example/2"/>
    <updated>2023-06-01T12:00:00+00:00</updated>
  </entry>
  <entry>
    <title>Undated</title>
    <link href="https://atom.example/3"/>
  </entry>
</feed>
"""


def test_rss_items_are_normalized_and_bad_items_skipped(caplog) -> None:
    with caplog.at_level(logging.WARNING):
        entries = parse_feed(RSS, CHANNEL)

    assert [entry.url for entry in entries] == [
        "https://feed.example/posts/1",
        "https://feed.example/posts/2",
    ]
    first, second = entries
    assert first.title == "Market sentiment flips"
    assert first.author == "Alice"
    assert first.group == "Tech"
    assert first.published == datetime(2024, 5, 20, 15, 20, tzinfo=timezone.utc)
    assert second.title == ""
    assert second.published == datetime(2025, 6, 3, 14, 39, 21, tzinfo=timezone.utc)
    assert second.published.utcoffset() == timedelta(0)
    assert "error on parsing date `sometime last week`" in caplog.text
    assert "without pubDate" in caplog.text
    assert "without link" in caplog.text


def test_atom_falls_back_to_updated_and_normalizes_to_utc() -> None:
    entries = parse_feed(ATOM, CHANNEL)

    assert [entry.url for entry in entries] == [
        "https://atom.example/1",
        "https://atom.example/2",
    ]
    first, second = entries
    # 23:30-02:00 on New Year's Eve is already 2025 in UTC
    assert first.published == datetime(2025, 1, 1, 1, 30, tzinfo=timezone.utc)
    assert first.published.utcoffset() == timedelta(0)
    assert second.title == "Only <b>updated</b>"
    assert second.published == datetime(2023, 6, 1, 12, tzinfo=timezone.utc)
    assert all(entry.author == "Alice" for entry in entries)


def test_atom_attempt_rejects_rss() -> None:
    with pytest.raises(FeedFormatError):
        parse_atom(RSS, CHANNEL)


def test_unknown_payload_yields_nothing_and_logs(caplog) -> None:
    html = b"<html><head><title>Not a feed</title></head><body>hi</body></html>"
    with caplog.at_level(logging.ERROR):
        assert parse_feed(html, CHANNEL) == []
        assert parse_feed(b"", CHANNEL) == []
        assert parse_feed(b"definitely not xml", CHANNEL) == []

    assert caplog.text.count("parse error at https://feed.example/rss") == 3


def test_parse_date_is_lenient() -> None:
    assert parse_date("2024-05-20") == datetime(2024, 5, 20, tzinfo=timezone.utc)
    assert parse_date("20 May 2024 10:00 GMT") == datetime(
        2024, 5, 20, 10, tzinfo=timezone.utc
    )
    assert parse_date("not a date") is None
    assert parse_date(None) is None
