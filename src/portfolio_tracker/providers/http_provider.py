"""Shared plumbing for providers reached over HTTP with httpx."""

import asyncio
import logging
import math
import time
from typing import Any, Awaitable, Callable, Optional

import httpx

from portfolio_tracker.core.exceptions import (
    NotConfiguredError,
    RateLimitedError,
    UnreachableError,
    UpstreamError,
)

logger = logging.getLogger(__name__)


def safe_float(value: Any, default: float = 0.0) -> float:
    """Parse a number from a provider payload; non-finite and junk become default."""
    try:
        if value is None:
            return default
        if isinstance(value, str):
            value = value.strip().rstrip("%")
        result = float(value)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(result):
        return default
    return result


class HttpQuoteProvider:
    """
    Base class for HTTP JSON quote providers.

    Enforces a minimum spacing between requests of one provider instance and
    retries once after a backoff when the upstream answers 429.
    """

    name = "HTTP"

    def __init__(
        self,
        client: httpx.AsyncClient,
        api_key: Optional[str] = None,
        *,
        min_interval_seconds: float = 0.1,
        backoff_seconds: float = 1.0,
        timeout_seconds: float = 10.0,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self._client = client
        self._api_key = (api_key or "").strip()
        self._min_interval = min_interval_seconds
        self._backoff = backoff_seconds
        self._timeout = timeout_seconds
        self._clock = clock
        self._sleep = sleep
        self._lock = asyncio.Lock()
        self._last_request_at: Optional[float] = None

    def is_configured(self) -> bool:
        return bool(self._api_key)

    def _require_key(self) -> str:
        if not self._api_key:
            raise NotConfiguredError(self.name)
        return self._api_key

    async def _throttle(self) -> None:
        async with self._lock:
            if self._last_request_at is not None:
                wait = self._min_interval - (self._clock() - self._last_request_at)
                if wait > 0:
                    await self._sleep(wait)
            self._last_request_at = self._clock()

    async def _get_json(
        self,
        url: str,
        params: Optional[dict[str, Any]] = None,
        *,
        symbol: Optional[str] = None,
        method: str = "GET",
    ) -> Any:
        """Issue one request (plus at most one 429 retry) and decode JSON."""
        for attempt in range(2):
            await self._throttle()
            try:
                resp = await self._client.request(method, url, params=params, timeout=self._timeout)
            except httpx.TimeoutException as e:
                raise UnreachableError(self.name, f"timeout ({e.__class__.__name__})", symbol=symbol) from e
            except httpx.HTTPError as e:
                raise UnreachableError(self.name, f"network error ({e.__class__.__name__})", symbol=symbol) from e

            if resp.status_code == 429:
                if attempt == 0:
                    logger.info("%s rate limited, retrying in %.1fs", self.name, self._backoff)
                    await self._sleep(self._backoff)
                    continue
                raise RateLimitedError(self.name, symbol=symbol)

            if not resp.is_success:
                raise UpstreamError(
                    self.name,
                    f"HTTP {resp.status_code}",
                    status_code=resp.status_code,
                    symbol=symbol,
                )

            try:
                return resp.json()
            except ValueError as e:
                raise UpstreamError(self.name, "invalid JSON payload", symbol=symbol) from e

        raise RateLimitedError(self.name, symbol=symbol)
