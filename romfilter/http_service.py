"""Shared aiohttp service: one session, per-host pacing, retries, FetchError mapping."""

from __future__ import annotations

import asyncio
import time
from pathlib import Path
from typing import Awaitable, Callable, Optional, TypeVar

import aiohttp

from romfilter import logger
from romfilter.__version__ import __version__
from romfilter.config import ListingConfig
from romfilter.errors import FetchError
from romfilter.rate_limits import WAIT_LOG_THRESHOLD_SECONDS, enforce_min_interval, host_key
from romfilter.resilience import RETRYABLE_HTTP_STATUSES, run_with_retries

DEFAULT_USER_AGENT = f"romfilter/{__version__}"
_T = TypeVar("_T")


class HttpService:
    """Plain GET access to a file index host."""

    def __init__(
        self,
        listing: ListingConfig,
        max_concurrency: int = 2,
        session_factory: Optional[Callable[..., aiohttp.ClientSession]] = None,
    ):
        self.timeout = listing.timeout
        self._max_attempts = max(1, int(listing.max_retries))
        self._min_interval_seconds = max(0.0, float(listing.min_interval_seconds))
        self._semaphore = asyncio.Semaphore(max_concurrency)
        self._session_factory = session_factory or aiohttp.ClientSession
        self._session: aiohttp.ClientSession | None = None
        self._session_lock = asyncio.Lock()

    async def fetch_text(self, url: str) -> str:
        """GET a page body."""
        status, body, elapsed_ms = await self._request_with_retries(
            url,
            lambda response: response.text(errors="replace"),
        )
        logger.get_logger().http_response(status, body, elapsed_ms)
        return body

    async def download_to(self, url: str, dest: Path, chunk_size: int = 64 * 1024) -> Optional[str]:
        """Stream a file to ``dest``.

        Returns None when the file was written, or the body text when the
        server answered with a text document instead of a file.
        """

        async def _write(response: aiohttp.ClientResponse) -> Optional[str]:
            content_type = response.headers.get("Content-Type", "")
            if "text" in content_type:
                return await response.text(errors="replace")
            partial = dest.with_name(dest.name + ".part")
            try:
                with open(partial, "wb") as fh:
                    async for chunk in response.content.iter_chunked(chunk_size):
                        fh.write(chunk)
                partial.replace(dest)
            finally:
                partial.unlink(missing_ok=True)
            return None

        _status, text, _elapsed_ms = await self._request_with_retries(url, _write)
        return text

    async def _request_with_retries(
        self,
        url: str,
        parser: Callable[[aiohttp.ClientResponse], Awaitable[_T]],
    ) -> tuple[int, _T, float]:
        host = host_key(url)
        logger.get_logger().http_request("GET", url)
        request_start = time.time()

        async def _attempt() -> tuple[int, _T]:
            await self._enforce_interval(url)
            session = await self._ensure_session()
            async with session.get(url) as response:
                if response.status >= 400:
                    text = await response.text(errors="replace")
                    raise aiohttp.ClientResponseError(
                        request_info=response.request_info,
                        history=response.history,
                        status=response.status,
                        message=text[:200] or response.reason or "",
                        headers=response.headers,
                    )
                return response.status, await parser(response)

        def _on_retry(attempt: int, max_attempts: int, delay: int, _exc: Exception) -> None:
            logger.get_logger().http_retry(host, attempt, max_attempts, delay)

        async with self._semaphore:
            try:
                status, data = await run_with_retries(
                    _attempt,
                    max_attempts=self._max_attempts,
                    on_retry=_on_retry,
                )
            except aiohttp.ClientResponseError as exc:
                if exc.status in RETRYABLE_HTTP_STATUSES:
                    logger.get_logger().http_failed(host, self._max_attempts)
                raise FetchError(url, exc.message or "request rejected", status=exc.status) from exc
            except (asyncio.TimeoutError, aiohttp.ClientError) as exc:
                logger.get_logger().http_failed(host, self._max_attempts)
                raise FetchError(url, str(exc) or type(exc).__name__) from exc

        elapsed_ms = (time.time() - request_start) * 1000
        return status, data, elapsed_ms

    async def _enforce_interval(self, url: str) -> None:
        wait = await enforce_min_interval(url, min_interval_seconds=self._min_interval_seconds)
        log = logger.get_logger()
        host = host_key(url)
        log.http_wait_debug(host, wait)
        if wait > WAIT_LOG_THRESHOLD_SECONDS:
            log.http_wait(host, wait)

    async def _ensure_session(self) -> aiohttp.ClientSession:
        session = self._session
        if session is not None and not session.closed:
            return session

        async with self._session_lock:
            session = self._session
            if session is None or session.closed:
                # No total cap: file downloads can take minutes
                timeout = aiohttp.ClientTimeout(total=None, sock_connect=self.timeout, sock_read=self.timeout)
                self._session = self._session_factory(
                    headers={"User-Agent": DEFAULT_USER_AGENT},
                    timeout=timeout,
                )
            return self._session

    async def close(self) -> None:
        """Close any open connections."""
        async with self._session_lock:
            session = self._session
            self._session = None
        if session is not None and not session.closed:
            await session.close()
