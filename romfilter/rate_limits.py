"""Request pacing settings and shared per-host limiter state."""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from urllib.parse import urlparse

# File indexes are volunteer-run mirrors: keep at least this much spacing per host.
DEFAULT_MIN_INTERVAL_SECONDS = 1.0
WAIT_LOG_THRESHOLD_SECONDS = 0.75


@dataclass
class _HostBucket:
    lock: asyncio.Lock
    last_request_started: float = 0.0


_host_buckets: dict[str, _HostBucket] = {}
_host_buckets_lock = asyncio.Lock()


def host_key(url: str) -> str:
    parsed = urlparse(url)
    return (parsed.netloc or url.rstrip("/")).lower()


async def _get_or_create_bucket(url: str) -> _HostBucket:
    key = host_key(url)
    bucket = _host_buckets.get(key)
    if bucket is not None:
        return bucket

    async with _host_buckets_lock:
        bucket = _host_buckets.get(key)
        if bucket is None:
            bucket = _HostBucket(lock=asyncio.Lock())
            _host_buckets[key] = bucket
        return bucket


async def enforce_min_interval(
    url: str,
    min_interval_seconds: float = DEFAULT_MIN_INTERVAL_SECONDS,
) -> float:
    """
    Enforce shared per-host spacing between request starts.

    Returns the wait time applied (seconds).
    """
    bucket = await _get_or_create_bucket(url)
    async with bucket.lock:
        now = time.monotonic()
        effective_min_interval = max(0.0, float(min_interval_seconds))
        wait = 0.0
        if bucket.last_request_started:
            wait = max(effective_min_interval - (now - bucket.last_request_started), 0.0)
        if wait > 0:
            await asyncio.sleep(wait)
            now = time.monotonic()
        bucket.last_request_started = now
        return wait


def _reset_rate_limits_for_tests() -> None:
    """Test helper to clear shared limiter state."""
    _host_buckets.clear()
