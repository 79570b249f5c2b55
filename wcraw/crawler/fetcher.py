"""
Fetcher module: GET requests with timeout and retry/backoff.
"""
from __future__ import annotations

import asyncio
import random
from typing import Optional, Protocol, Sequence

from aiohttp import ClientError, ClientSession, ClientTimeout, InvalidURL

from wcraw.config import CrawlerConfig
from wcraw.crawler.models import FetchResult
from wcraw.errors import FetchFailure
from wcraw.logger import logger

__all__ = ["Fetcher", "HttpFetcher", "RETRY_STATUS"]

RETRY_STATUS: Sequence[int] = tuple(range(500, 600)) + (429,)


class Fetcher(Protocol):
    """Fetch capability used by the orchestrator."""

    async def fetch(self, url: str) -> FetchResult:
        """Return the response for *url* or raise :class:`FetchFailure`."""
        ...


class _RetryableStatus(ClientError):
    def __init__(self, status: int, reason: str) -> None:
        super().__init__(f"retryable status {status}")
        self.status = status
        self.reason = reason


class HttpFetcher:
    """aiohttp-backed fetcher; every non-2xx final response is a failure."""

    def __init__(self, session: ClientSession, config: CrawlerConfig) -> None:
        self.session = session
        self.config = config
        self._timeout = ClientTimeout(total=config.timeout)

    @classmethod
    def open_session(cls, config: CrawlerConfig) -> ClientSession:
        return ClientSession(
            timeout=ClientTimeout(total=config.timeout),
            headers={"User-Agent": config.user_agent},
            raise_for_status=False,
        )

    async def fetch(self, url: str) -> FetchResult:
        attempts = 0
        while True:
            try:
                return await self._get(url)
            except asyncio.TimeoutError as exc:
                # no retry on timeout
                raise FetchFailure(url, f"timed out after {self.config.timeout:g} s") from exc
            except InvalidURL as exc:
                raise FetchFailure(url, f"invalid URL: {exc}") from exc
            except _RetryableStatus as exc:
                last_status: Optional[int] = exc.status
                failure = FetchFailure(url, exc.reason or str(exc), exc.status)
            except ClientError as exc:
                last_status = None
                failure = FetchFailure(url, str(exc) or type(exc).__name__)
            attempts += 1
            if attempts > self.config.retry_times:
                logger.debug("Giving up on %s after %d attempt(s)", url, attempts)
                raise failure
            backoff = min(60, 2**attempts + random.random())
            logger.debug(
                "Retry %d/%d for %s (status %s) after %.2f s",
                attempts, self.config.retry_times, url, last_status, backoff,
            )
            await asyncio.sleep(backoff)

    async def _get(self, url: str) -> FetchResult:
        async with self.session.get(url, timeout=self._timeout, allow_redirects=True) as resp:
            reason = resp.reason or ""
            if resp.status in RETRY_STATUS:
                raise _RetryableStatus(resp.status, reason)
            if not 200 <= resp.status < 300:
                raise FetchFailure(url, reason or "non-success status", resp.status)
            body = await resp.text(errors="replace")
            return FetchResult(
                url=url,
                status=resp.status,
                reason=reason,
                final_url=str(resp.url),
                body=body or None,
            )
