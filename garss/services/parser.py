from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any

from bs4 import BeautifulSoup, Tag
from bs4.builder import ParserRejectedMarkup
from dateutil import parser as date_parser
from dateutil import tz
from pydantic import ValidationError

from ..errors import FeedFormatError
from ..models.feed import Channel, Entry

logger = logging.getLogger(__name__)

# dateutil only knows UTC/GMT/Z by name; RFC 822 also allows these.
_TZINFOS = {
    "UT": tz.UTC,
    "EST": tz.tzoffset("EST", -5 * 3600),
    "EDT": tz.tzoffset("EDT", -4 * 3600),
    "CST": tz.tzoffset("CST", -6 * 3600),
    "CDT": tz.tzoffset("CDT", -5 * 3600),
    "MST": tz.tzoffset("MST", -7 * 3600),
    "MDT": tz.tzoffset("MDT", -6 * 3600),
    "PST": tz.tzoffset("PST", -8 * 3600),
    "PDT": tz.tzoffset("PDT", -7 * 3600),
}

ParseAttempt = Callable[[bytes, Channel], list[Entry]]


def parse_feed(content: bytes, channel: Channel) -> list[Entry]:
    """Normalize a feed payload, trying RSS first and Atom second.

    Never raises: a payload no attempt understands yields no entries.
    """
    for name, attempt in PARSE_ATTEMPTS:
        try:
            entries = attempt(content, channel)
        except FeedFormatError as exc:
            logger.debug("%s: not %s (%s)", channel.url, name, exc)
            continue
        logger.debug("%s: %d entries parsed as %s", channel.url, len(entries), name)
        return entries
    logger.error("parse error at %s", channel.url)
    return []


def parse_rss(content: bytes, channel: Channel) -> list[Entry]:
    root = _load_root(content)
    if root.name != "rss":
        raise FeedFormatError(f"root element is <{root.name}>, expected <rss>")
    rss_channel = _child(root, "channel")
    if rss_channel is None:
        raise FeedFormatError("<rss> has no <channel>")

    entries: list[Entry] = []
    for item in rss_channel.find_all("item", recursive=False):
        entry = _build_entry(
            channel,
            title=_text(_child(item, "title")),
            raw_date=_text(_child(item, "pubDate")),
            url=_text(_child(item, "link")),
            date_field="pubDate",
        )
        if entry is not None:
            entries.append(entry)
    return entries


def parse_atom(content: bytes, channel: Channel) -> list[Entry]:
    root = _load_root(content)
    if root.name != "feed":
        raise FeedFormatError(f"root element is <{root.name}>, expected <feed>")

    entries: list[Entry] = []
    for item in root.find_all("entry", recursive=False):
        raw_date = _text(_child(item, "published")) or _text(_child(item, "updated"))
        link = _child(item, "link")
        entry = _build_entry(
            channel,
            title=_text(_child(item, "title")),
            raw_date=raw_date,
            url=(link.get("href") or "").strip() if link is not None else "",
            date_field="published/updated",
        )
        if entry is not None:
            entries.append(entry)
    return entries


PARSE_ATTEMPTS: tuple[tuple[str, ParseAttempt], ...] = (
    ("rss", parse_rss),
    ("atom", parse_atom),
)


def parse_date(value: str | None) -> datetime | None:
    if not value:
        return None
    try:
        parsed = date_parser.parse(value, tzinfos=_TZINFOS)
    except (ValueError, TypeError, OverflowError):
        return None
    if parsed.tzinfo is None or parsed.utcoffset() is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def _build_entry(
    channel: Channel, *, title: str, raw_date: str, url: str, date_field: str
) -> Entry | None:
    if not raw_date:
        logger.warning("item without %s skipped, at parsing %s", date_field, channel.url)
        return None
    published = parse_date(raw_date)
    if published is None:
        logger.warning(
            "error on parsing date `%s`, at parsing %s", raw_date, channel.url
        )
        return None
    if not url:
        logger.warning("item without link skipped, at parsing %s", channel.url)
        return None
    try:
        return Entry(
            title=title,
            author=channel.author,
            published=published,
            url=url,
            group=channel.group,
        )
    except ValidationError as exc:
        logger.warning("invalid item skipped, at parsing %s: %s", channel.url, exc)
        return None


def _load_root(content: bytes) -> Any:
    if not content or not content.strip():
        raise FeedFormatError("empty payload")
    try:
        soup = BeautifulSoup(content, "xml")
    except ParserRejectedMarkup as exc:
        raise FeedFormatError(str(exc)) from exc
    root = next((node for node in soup.contents if isinstance(node, Tag)), None)
    if root is None:
        raise FeedFormatError("payload is not an XML document")
    return root


def _child(element: Any, name: str) -> Any | None:
    """First direct child called ``name`` outside any namespace prefix."""
    for child in element.find_all(name, recursive=False):
        if not child.prefix:
            return child
    return None


def _text(element: Any | None) -> str:
    if element is None:
        return ""
    return element.get_text(strip=True)
