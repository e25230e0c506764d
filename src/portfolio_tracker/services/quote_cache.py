"""In-memory TTL cache of resolved quotes."""

import time
from typing import Callable, Optional

from portfolio_tracker.domain.views import CacheEntry, Quote

DEFAULT_TTL_SECONDS = 300.0


class QuoteCache:
    """
    Quotes keyed by uppercased symbol.

    Entries older than the TTL are misses for get() but remain reachable via
    get_stale() until overwritten or cleared.
    """

    def __init__(self, ttl_seconds: float = DEFAULT_TTL_SECONDS, clock: Callable[[], float] = time.time):
        self._ttl = ttl_seconds
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    def get(self, symbol: str) -> Optional[Quote]:
        """Return the cached quote if it is younger than the TTL."""
        entry = self._entries.get(symbol.upper())
        if entry is None or self._is_expired(entry):
            return None
        return entry.quote

    def get_stale(self, symbol: str) -> Optional[Quote]:
        """Return the cached quote regardless of age."""
        entry = self._entries.get(symbol.upper())
        return entry.quote if entry else None

    def entry(self, symbol: str) -> Optional[CacheEntry]:
        return self._entries.get(symbol.upper())

    def put(self, symbol: str, quote: Quote) -> None:
        self._entries[symbol.upper()] = CacheEntry(
            quote=quote,
            fetched_at_epoch_ms=int(self._clock() * 1000),
        )

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def _is_expired(self, entry: CacheEntry) -> bool:
        age_ms = self._clock() * 1000 - entry.fetched_at_epoch_ms
        return age_ms >= self._ttl * 1000
