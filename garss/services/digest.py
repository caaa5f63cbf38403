from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime, timezone

from ..models.feed import Entry

ALL_BUCKET = ""
RECENT_BUCKET = "this-year"
ALL_FILENAME = "all"


def aggregate(batches: Iterable[list[Entry]]) -> list[Entry]:
    """Merge per-channel entries, most recent first.

    Entries with equal timestamps keep their channel order.
    """
    merged = [entry for batch in batches for entry in batch]
    return sorted(merged, key=lambda entry: entry.published, reverse=True)


def recency_cutoff(now: datetime) -> datetime:
    """Same instant one calendar year earlier; Feb 29 falls back to Feb 28."""
    try:
        return now.replace(year=now.year - 1)
    except ValueError:
        return now.replace(year=now.year - 1, day=28)


def partition(
    entries: list[Entry], now: datetime | None = None
) -> dict[str, list[Entry]]:
    """Split sorted entries into the ``""``, per-group and ``this-year`` buckets.

    An entry lands in every bucket it qualifies for and buckets keep the input
    order.
    """
    now = now or datetime.now(timezone.utc)
    cutoff = recency_cutoff(now)

    buckets: dict[str, list[Entry]] = {}
    for entry in entries:
        keys = [ALL_BUCKET]
        if entry.group:
            keys.append(entry.group)
        if entry.published >= cutoff:
            keys.append(RECENT_BUCKET)
        for key in keys:
            bucket = buckets.setdefault(key, [])
            if bucket and bucket[-1] is entry:
                # a group literally named like a built-in bucket
                continue
            bucket.append(entry)
    return buckets


def render(entries: list[Entry]) -> str:
    """Render entries (newest first) as a Markdown digest split by year.

    Years and dates are read in UTC so headings follow the sort order.
    """
    if not entries:
        return ""

    blocks: list[str] = []
    previous_year: int | None = None
    for entry in entries:
        year = _utc(entry).year
        if year != previous_year:
            blocks.append(f"# {year}")
            previous_year = year
        blocks.append(_format_entry(entry))
    return "\n\n".join(blocks)


def bucket_filename(key: str) -> str:
    return f"{key or ALL_FILENAME}.md"


def _utc(entry: Entry) -> datetime:
    return entry.published.astimezone(timezone.utc)


def _format_entry(entry: Entry) -> str:
    return (
        f"{_utc(entry).strftime('%Y-%m-%d')} "
        f"@{entry.author} [{entry.title}]({entry.url})"
    )
