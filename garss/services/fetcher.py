from __future__ import annotations

import asyncio
import enum
import logging
from dataclasses import dataclass, replace

import httpx

from ..config import Settings, get_settings
from ..errors import FetchError
from ..http_client import get_http_client
from ..models.feed import Channel

logger = logging.getLogger(__name__)

MAX_ATTEMPTS = 2


class FetchState(enum.Enum):
    PENDING = "pending"
    RETRY_PENDING = "retry_pending"
    SUCCESS = "success"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class FetchOutcome:
    """Where one channel stands in ``PENDING -> (SUCCESS | RETRY_PENDING) -> (SUCCESS | FAILED)``."""

    channel: Channel
    state: FetchState = FetchState.PENDING
    content: bytes | None = None
    error: FetchError | None = None
    attempts: int = 0

    @property
    def done(self) -> bool:
        return self.state in (FetchState.SUCCESS, FetchState.FAILED)

    def succeeded(self, content: bytes) -> FetchOutcome:
        return replace(
            self,
            state=FetchState.SUCCESS,
            content=content,
            error=None,
            attempts=self.attempts + 1,
        )

    def attempt_failed(self, cause: BaseException | str) -> FetchOutcome:
        attempts = self.attempts + 1
        state = FetchState.RETRY_PENDING if attempts < MAX_ATTEMPTS else FetchState.FAILED
        return replace(
            self,
            state=state,
            error=FetchError(self.channel.url, cause),
            attempts=attempts,
        )


@dataclass(slots=True)
class FeedFetcher:
    settings: Settings | None = None
    client: httpx.AsyncClient | None = None

    def __post_init__(self) -> None:
        if self.settings is None:
            self.settings = get_settings()

    async def fetch_all(self, channels: list[Channel]) -> list[FetchOutcome]:
        """Fetch every channel concurrently and wait for all of them."""
        client = self.client or await get_http_client(self.settings)
        tasks = [self._fetch_channel(client, channel) for channel in channels]
        results = await asyncio.gather(*tasks, return_exceptions=True)

        outcomes: list[FetchOutcome] = []
        for channel, result in zip(channels, results, strict=True):
            if isinstance(result, FetchOutcome):
                outcomes.append(result)
                continue
            if not isinstance(result, Exception):
                raise result
            outcome = FetchOutcome(
                channel=channel,
                state=FetchState.FAILED,
                error=FetchError(channel.url, result),
                attempts=MAX_ATTEMPTS,
            )
            logger.error("error on fetching %s: %r", channel.url, result)
            outcomes.append(outcome)
        return outcomes

    async def _fetch_channel(
        self, client: httpx.AsyncClient, channel: Channel
    ) -> FetchOutcome:
        outcome = FetchOutcome(channel=channel)
        logger.info("fetching %s", channel.url)
        while not outcome.done:
            if outcome.state is FetchState.RETRY_PENDING:
                logger.warning("retry %s", channel.url)
            try:
                content = await self._request(client, channel.url)
            except (httpx.HTTPError, httpx.InvalidURL) as exc:
                outcome = outcome.attempt_failed(exc)
                continue
            outcome = outcome.succeeded(content)

        if outcome.state is FetchState.SUCCESS:
            logger.info("finish %s", channel.url)
        else:
            logger.error("error on fetching %s: %r", channel.url, outcome.error.cause)
        return outcome

    async def _request(self, client: httpx.AsyncClient, url: str) -> bytes:
        response = await client.get(url)
        response.raise_for_status()
        return response.content
