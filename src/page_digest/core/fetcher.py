from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

import aiohttp

from page_digest.core.config import FetchSettings
from page_digest.core.errors import HTTPStatusError, TransportError
from page_digest.core.ratelimit import Deadline, TokenBucket

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FetchResult:
    url: str
    final_url: str
    status: int
    content_type: str
    charset: str | None
    body: bytes

    @property
    def ok(self) -> bool:
        return self.status < 400


class RateLimitedFetcher:
    """HTTP GET client gated by a token bucket.

    Each fetcher owns its own bucket. If no session is passed in, one is
    created on first use with the configured overall timeout and closed by
    :meth:`aclose` (or by leaving the ``async with`` block).
    """

    def __init__(
        self,
        rate: float = 1.0,
        burst: int = 3,
        *,
        session: aiohttp.ClientSession | None = None,
        settings: FetchSettings | None = None,
    ) -> None:
        self._settings = settings or FetchSettings()
        self._bucket = TokenBucket(rate, burst)
        self._session = session
        self._owns_session = session is None

    @property
    def bucket(self) -> TokenBucket:
        return self._bucket

    async def __aenter__(self) -> "RateLimitedFetcher":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_session and self._session is not None:
            await self._session.close()
            self._session = None

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None:
            timeout = aiohttp.ClientTimeout(total=self._settings.timeout_seconds)
            self._session = aiohttp.ClientSession(timeout=timeout)
            self._owns_session = True
        return self._session

    def _request_timeout(self, deadline: Deadline | None) -> aiohttp.ClientTimeout:
        total = float(self._settings.timeout_seconds)
        if deadline is not None:
            # total=0 disables the aiohttp timeout entirely.
            total = min(total, max(deadline.remaining(), 0.001))
        return aiohttp.ClientTimeout(total=total)

    async def get(self, url: str, *, deadline: Deadline | None = None) -> FetchResult:
        await self._bucket.acquire(deadline)

        headers = {
            "User-Agent": self._settings.user_agent,
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
        }
        session = self._get_session()
        try:
            async with session.get(
                url,
                headers=headers,
                timeout=self._request_timeout(deadline),
                allow_redirects=True,
            ) as resp:
                body = await resp.read()
                result = FetchResult(
                    url=url,
                    final_url=str(resp.url),
                    status=int(resp.status),
                    content_type=resp.content_type or "",
                    charset=resp.charset,
                    body=body,
                )
        except asyncio.TimeoutError as e:
            raise TransportError("request timed out", url=url) from e
        except aiohttp.ClientError as e:
            raise TransportError(f"request failed: {e}", url=url) from e

        logger.debug("GET %s -> %s (%d bytes)", url, result.status, len(result.body))
        if self._settings.raise_for_status and not result.ok:
            raise HTTPStatusError(result.status, url=url)
        return result
