from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

import httpx

from .config import Settings, get_settings
from .errors import OutputError
from .http_client import shutdown_http_client
from .models.feed import Channel, Entry
from .services import (
    FeedFetcher,
    FetchState,
    aggregate,
    bucket_filename,
    load_channels,
    parse_feed,
    partition,
    render,
)

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class DigestPipeline:
    settings: Settings | None = None
    client: httpx.AsyncClient | None = None

    def __post_init__(self) -> None:
        if self.settings is None:
            self.settings = get_settings()

    async def collect(self, channels: list[Channel]) -> list[Entry]:
        """Fetch and parse every channel, newest entries first."""
        fetcher = FeedFetcher(settings=self.settings, client=self.client)
        outcomes = await fetcher.fetch_all(channels)

        batches: list[list[Entry]] = []
        for outcome in outcomes:
            if outcome.state is not FetchState.SUCCESS:
                continue
            batches.append(parse_feed(outcome.content, outcome.channel))
        return aggregate(batches)

    async def build(
        self, channels: list[Channel], now: datetime | None = None
    ) -> dict[str, str]:
        """Render one digest per non-empty bucket."""
        entries = await self.collect(channels)
        buckets = partition(entries, now=now)
        return {key: render(items) for key, items in buckets.items() if items}

    async def run(
        self,
        opml_path: str | Path,
        output_dir: str | Path,
        now: datetime | None = None,
    ) -> list[Path]:
        channels = load_channels(opml_path)
        try:
            digests = await self.build(channels, now=now)
        finally:
            if self.client is None:
                await shutdown_http_client()
        return write_digests(digests, output_dir)


def write_digests(digests: dict[str, str], output_dir: str | Path) -> list[Path]:
    """Overwrite ``<bucket>.md`` in ``output_dir`` for every digest."""
    output_dir = Path(output_dir)
    written: list[Path] = []
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
        for key, text in digests.items():
            path = output_dir / bucket_filename(key)
            path.write_text(text, encoding="utf-8")
            written.append(path)
    except OSError as exc:
        raise OutputError(f"cannot write digests to {output_dir}: {exc}") from exc
    logger.info("wrote %d digests to %s", len(written), output_dir)
    return written
