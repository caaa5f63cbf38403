from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from bs4 import BeautifulSoup

from ..errors import ConfigurationError
from ..models.feed import Channel
from .digest import ALL_FILENAME

logger = logging.getLogger(__name__)

FEED_TYPE = "rss"


def load_channels(path: str | Path) -> list[Channel]:
    """Read an OPML subscription list from ``path``."""
    try:
        document = Path(path).read_bytes()
    except OSError as exc:
        raise ConfigurationError(f"cannot read subscription list {path}: {exc}") from exc
    return parse_outline(document)


def parse_outline(document: str | bytes) -> list[Channel]:
    """Flatten an OPML document into channels.

    Top-level outlines carrying a ``type`` are feeds without a group. Untyped
    top-level outlines are groups named after their ``text``; every child of
    a group must be a feed.
    """
    soup = BeautifulSoup(document, "xml")
    body = soup.find("body")
    if body is None:
        raise ConfigurationError("subscription list has no <body> element")

    channels: list[Channel] = []
    for outline in body.find_all("outline", recursive=False):
        if outline.get("type") is not None:
            channels.append(_build_channel(outline, group=""))
            continue

        group = outline.get("text") or ""
        logger.info("group = %s", group)
        _check_group(group)
        for child in outline.find_all("outline", recursive=False):
            channels.append(_build_channel(child, group=group))
    return channels


def _check_group(group: str) -> None:
    # group labels become digest file names
    if group.lower() == ALL_FILENAME:
        raise ConfigurationError(
            f"group name `{ALL_FILENAME}` is reserved for the digest of every entry"
        )
    if "/" in group or "\\" in group:
        raise ConfigurationError(f"group name {group!r} must not contain a path separator")


def _build_channel(outline: Any, group: str) -> Channel:
    outline_type = outline.get("type")
    if outline_type != FEED_TYPE:
        raise ConfigurationError(
            f"outline {outline.get('text')!r} should have type `{FEED_TYPE}`, "
            f"got {outline_type!r}"
        )
    url = outline.get("xmlUrl")
    author = outline.get("title")
    if not url:
        raise ConfigurationError(f"outline {author!r} is missing xmlUrl")
    if author is None:
        raise ConfigurationError(f"outline {url!r} is missing title")
    return Channel(url=url, author=author, group=group)
