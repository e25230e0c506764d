"""Quote resolver: cache, connectivity, provider fallback and offline data."""

import asyncio
import logging
from collections import OrderedDict
from dataclasses import replace
from typing import Iterable, Optional, Sequence

from portfolio_tracker.core.exceptions import (
    InvalidSymbolError,
    NotConfiguredError,
    ProviderError,
    SymbolNotFoundError,
    ValidationError,
)
from portfolio_tracker.domain.models.enums import FailureKind
from portfolio_tracker.domain.symbols import (
    currency_from_suffix,
    exchange_from_suffix,
    is_valid_isin,
    normalize_symbol,
)
from portfolio_tracker.domain.views import (
    UNAVAILABLE_PROVIDER,
    ProviderAttempt,
    ProviderStatus,
    Quote,
    SearchResult,
    SymbolValidation,
)
from portfolio_tracker.providers.finnhub_provider import dedupe_by_symbol
from portfolio_tracker.providers.market_data_provider import QuoteProvider
from portfolio_tracker.providers.offline_provider import OfflineQuoteSource
from portfolio_tracker.services.connectivity import Connectivity
from portfolio_tracker.services.quote_cache import QuoteCache

logger = logging.getLogger(__name__)

OFFLINE_MODE_NOTE = "Network unavailable; showing simulated offline data"
STALE_NOTE = "All providers failed; showing last known price"
OFFLINE_FALLBACK_NOTE = "All providers failed; showing simulated offline data"
UNAVAILABLE_NOTE = "No data available for this symbol"

# Attempt logs kept for diagnostics, oldest symbol evicted first
MAX_ATTEMPT_LOGS = 256


class QuoteResolver:
    """
    Resolves a symbol to exactly one Quote.

    Order of preference: fresh cache, providers in their fixed priority order,
    stale cache, offline table, and finally an explicit unavailable quote.
    When the network is down only the offline table is consulted.

    Never raises for a valid symbol; InvalidSymbolError is raised up front
    for malformed input.
    """

    def __init__(
        self,
        providers: Sequence[QuoteProvider],
        cache: QuoteCache,
        connectivity: Connectivity,
        offline_source: OfflineQuoteSource,
    ):
        self._providers = tuple(providers)
        self._cache = cache
        self._connectivity = connectivity
        self._offline = offline_source
        self._attempts: OrderedDict[str, list[ProviderAttempt]] = OrderedDict()

    @property
    def providers(self) -> tuple[QuoteProvider, ...]:
        return self._providers

    # =========================================================================
    # Quotes
    # =========================================================================

    async def resolve(self, symbol: str, *, online: Optional[bool] = None) -> Quote:
        """
        Resolve one symbol.

        Pass online to reuse a connectivity answer (batch resolution probes
        once); otherwise the prober is consulted on a cache miss.
        """
        symbol = normalize_symbol(symbol)

        cached = self._cache.get(symbol)
        if cached is not None:
            self._record_attempts(symbol, [])
            return replace(cached)

        if online is None:
            online = await self._connectivity.is_online()

        if not online:
            self._record_attempts(symbol, [])
            logger.debug("Offline: serving %s from offline table", symbol)
            return self._offline_or_unavailable(symbol, OFFLINE_MODE_NOTE)

        quote = await self._try_providers(symbol)
        if quote is not None:
            self._cache.put(symbol, replace(quote))
            return quote

        stale = self._cache.get_stale(symbol)
        if stale is not None:
            logger.info("All providers failed for %s, using stale cache", symbol)
            return _with_note(stale, STALE_NOTE)

        logger.info("All providers failed for %s, using offline data", symbol)
        return self._offline_or_unavailable(symbol, OFFLINE_FALLBACK_NOTE)

    async def resolve_many(self, symbols: Iterable[str]) -> dict[str, Quote]:
        """
        Resolve several symbols concurrently, probing connectivity once.

        Keys are the normalized symbols; duplicates are resolved once.
        """
        unique: list[str] = []
        for raw in symbols:
            symbol = normalize_symbol(raw)
            if symbol not in unique:
                unique.append(symbol)
        if not unique:
            return {}

        online: Optional[bool] = None
        if any(self._cache.get(s) is None for s in unique):
            online = await self._connectivity.is_online()

        quotes = await asyncio.gather(*(self.resolve(s, online=online) for s in unique))
        return dict(zip(unique, quotes))

    def last_attempts(self, symbol: str) -> list[ProviderAttempt]:
        """Provider attempts of the latest resolution of symbol (empty on cache hit or offline)."""
        return list(self._attempts.get(symbol.strip().upper(), []))

    def _record_attempts(self, symbol: str, attempts: list[ProviderAttempt]) -> None:
        self._attempts[symbol] = attempts
        self._attempts.move_to_end(symbol)
        while len(self._attempts) > MAX_ATTEMPT_LOGS:
            self._attempts.popitem(last=False)

    async def validate_symbol(self, symbol: str) -> SymbolValidation:
        """
        Check that a symbol resolves to a priced security.

        Malformed input and symbols nobody can price come back as invalid
        with the reason in error; this never raises.
        """
        try:
            symbol = normalize_symbol(symbol)
        except InvalidSymbolError as e:
            return SymbolValidation(symbol=(symbol or "").strip().upper(), valid=False, error=e.message)

        quote = await self.resolve(symbol)
        if not quote.has_price:
            return SymbolValidation(symbol=symbol, valid=False, error=quote.error_note or "Symbol not found")
        return SymbolValidation(
            symbol=symbol,
            valid=True,
            name=quote.display_name,
            exchange=quote.exchange_name or None,
            price=quote.price,
        )

    async def _try_providers(self, symbol: str) -> Optional[Quote]:
        attempts: list[ProviderAttempt] = []
        self._record_attempts(symbol, attempts)

        for provider in self._providers:
            try:
                quote = await provider.fetch_quote(symbol)
                if not quote.has_price:
                    raise SymbolNotFoundError(provider.name, symbol, reason="no price")
            except NotConfiguredError as e:
                logger.debug("%s skipped for %s: %s", provider.name, symbol, e.message)
                attempts.append(ProviderAttempt(provider.name, e.kind, e.message))
                continue
            except ProviderError as e:
                logger.warning("%s failed for %s: %s", provider.name, symbol, e.message)
                attempts.append(ProviderAttempt(provider.name, e.kind, e.message))
                continue
            except Exception as e:
                logger.exception("Unexpected error from %s for %s", provider.name, symbol)
                attempts.append(ProviderAttempt(provider.name, FailureKind.UPSTREAM_ERROR, str(e)))
                continue

            attempts.append(ProviderAttempt(provider.name))
            quote.symbol = symbol
            quote.provider = quote.provider or provider.name
            quote.error_note = None
            return quote

        return None

    def _offline_or_unavailable(self, symbol: str, note: str) -> Quote:
        quote = self._offline.get_offline(symbol)
        if quote is not None:
            quote.error_note = note
            return quote
        return unavailable_quote(symbol)

    # =========================================================================
    # Search
    # =========================================================================

    async def search(self, query: str) -> list[SearchResult]:
        """
        Search configured providers in priority order; first non-empty answer wins.

        Offline-table matches are always unioned in. Results are not cached.
        """
        query = (query or "").strip()
        if not query:
            raise ValidationError("Search query must not be empty")

        online_results: list[SearchResult] = []
        if await self._connectivity.is_online():
            online_results = await self._search_providers(query)

        return dedupe_by_symbol(online_results + self._offline.search_offline(query))

    async def _search_providers(self, query: str) -> list[SearchResult]:
        for provider in self._providers:
            if not provider.is_configured():
                continue
            try:
                results = await provider.search(query)
            except ProviderError as e:
                logger.warning("%s search failed for %r: %s", provider.name, query, e.message)
                continue
            except Exception:
                logger.exception("Unexpected search error from %s for %r", provider.name, query)
                continue
            if results:
                return results
        return []

    async def lookup_isin(self, code: str) -> Optional[SearchResult]:
        """Find the security for an ISIN; None when nothing matches."""
        code = (code or "").strip().upper()
        if not is_valid_isin(code):
            raise ValidationError(f"Invalid ISIN: {code}")
        results = await self.search(code)
        return results[0] if results else None

    # =========================================================================
    # Status
    # =========================================================================

    async def status(self) -> ProviderStatus:
        return ProviderStatus(
            configured_providers=[p.name for p in self._providers if p.is_configured()],
            online=await self._connectivity.is_online(),
        )


def unavailable_quote(symbol: str) -> Quote:
    """Explicit no-data quote: zero price with an error note."""
    return Quote(
        symbol=symbol,
        display_name=symbol,
        price=0.0,
        currency=currency_from_suffix(symbol),
        exchange_name=exchange_from_suffix(symbol),
        provider=UNAVAILABLE_PROVIDER,
        error_note=UNAVAILABLE_NOTE,
    )


def _with_note(quote: Quote, note: str) -> Quote:
    # Copy so the cached entry keeps its clean state
    return replace(quote, error_note=note)
