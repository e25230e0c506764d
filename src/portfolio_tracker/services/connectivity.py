"""Network reachability probe."""

import logging
from typing import Protocol

import httpx

logger = logging.getLogger(__name__)

DEFAULT_PROBE_URL = "https://finnhub.io/api/v1/"
DEFAULT_PROBE_TIMEOUT_SECONDS = 3.0


class Connectivity(Protocol):
    async def is_online(self) -> bool:
        ...


class ConnectivityProber:
    """
    Decides online/offline with one HEAD request to a known endpoint.

    Any 2xx/3xx answer, or 401 (reached the server without a key), counts as
    online. Results are never cached.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        url: str = DEFAULT_PROBE_URL,
        timeout_seconds: float = DEFAULT_PROBE_TIMEOUT_SECONDS,
    ):
        self._client = client
        self._url = url
        self._timeout = timeout_seconds

    async def is_online(self) -> bool:
        try:
            resp = await self._client.head(self._url, timeout=self._timeout)
        except httpx.HTTPError as e:
            logger.info("Offline mode detected: %s", e.__class__.__name__)
            return False
        online = 200 <= resp.status_code < 400 or resp.status_code == 401
        if not online:
            logger.info("Offline mode detected: probe answered HTTP %d", resp.status_code)
        return online


class StaticConnectivity:
    """Fixed answer, for forcing online or offline mode."""

    def __init__(self, online: bool = True):
        self.online = online
        self.calls = 0

    async def is_online(self) -> bool:
        self.calls += 1
        return self.online
