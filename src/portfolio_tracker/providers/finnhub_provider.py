"""Finnhub quote provider (primary)."""

import asyncio
import logging
from typing import Any, Optional

import httpx

from portfolio_tracker.core.exceptions import ProviderError, SymbolNotFoundError, UpstreamError
from portfolio_tracker.core.timezone import now_eastern
from portfolio_tracker.domain.models.enums import AssetType
from portfolio_tracker.domain.symbols import classify, currency_from_suffix, exchange_from_suffix
from portfolio_tracker.domain.views import Quote, SearchResult
from portfolio_tracker.providers.http_provider import HttpQuoteProvider, safe_float

logger = logging.getLogger(__name__)

FINNHUB_BASE_URL = "https://finnhub.io/api/v1"

MAX_SEARCH_RESULTS = 15
MAX_CRYPTO_RESULTS = 5


def dedupe_by_symbol(results: list[SearchResult]) -> list[SearchResult]:
    """Drop repeated symbols, keeping the first occurrence."""
    seen: set[str] = set()
    unique: list[SearchResult] = []
    for item in results:
        key = item.symbol.upper()
        if key in seen:
            continue
        seen.add(key)
        unique.append(item)
    return unique


class FinnhubProvider(HttpQuoteProvider):
    """
    Quotes from Finnhub's /quote endpoint, enriched with /stock/profile2.

    Search combines the securities lookup with Binance crypto symbols.
    """

    name = "Finnhub"

    def __init__(self, client: httpx.AsyncClient, api_key: Optional[str] = None, *, base_url: str = FINNHUB_BASE_URL, **kwargs):
        super().__init__(client, api_key, **kwargs)
        self._base_url = base_url.rstrip("/")

    async def fetch_quote(self, symbol: str) -> Quote:
        token = self._require_key()
        raw = await self._get_json(
            f"{self._base_url}/quote",
            {"symbol": symbol, "token": token},
            symbol=symbol,
        )
        if not isinstance(raw, dict):
            raise UpstreamError(self.name, "unexpected quote payload", symbol=symbol)

        # Finnhub answers unknown symbols with an all-zero quote
        price = safe_float(raw.get("c"))
        if price <= 0:
            raise SymbolNotFoundError(self.name, symbol)

        profile = await self._fetch_profile(symbol, token)
        market_cap = safe_float(profile.get("marketCapitalization"), default=0.0)

        return Quote(
            symbol=symbol,
            display_name=profile.get("name") or symbol,
            price=price,
            change_absolute=safe_float(raw.get("d")),
            change_percent=safe_float(raw.get("dp")),
            day_low=safe_float(raw.get("l")),
            day_high=safe_float(raw.get("h")),
            open_price=safe_float(raw.get("o")),
            previous_close=safe_float(raw.get("pc")),
            currency=profile.get("currency") or currency_from_suffix(symbol),
            exchange_name=profile.get("exchange") or exchange_from_suffix(symbol),
            market_cap=market_cap or None,
            provider=self.name,
            as_of=now_eastern(),
        )

    async def _fetch_profile(self, symbol: str, token: str) -> dict[str, Any]:
        """Company profile is optional enrichment; failures are ignored."""
        try:
            profile = await self._get_json(
                f"{self._base_url}/stock/profile2",
                {"symbol": symbol, "token": token},
                symbol=symbol,
            )
        except ProviderError as e:
            logger.debug("Finnhub profile unavailable for %s: %s", symbol, e.message)
            return {}
        return profile if isinstance(profile, dict) else {}

    async def search(self, query: str) -> list[SearchResult]:
        token = self._require_key()
        query = query.strip()
        if not query:
            return []

        outcomes = await asyncio.gather(
            self._search_securities(query, token),
            self._search_crypto(query, token),
            return_exceptions=True,
        )

        results: list[SearchResult] = []
        errors: list[ProviderError] = []
        for outcome in outcomes:
            if isinstance(outcome, ProviderError):
                errors.append(outcome)
            elif isinstance(outcome, BaseException):
                raise outcome
            else:
                results.extend(outcome)

        if len(errors) == len(outcomes):
            raise errors[0]
        return dedupe_by_symbol(results)[:MAX_SEARCH_RESULTS]

    async def _search_securities(self, query: str, token: str) -> list[SearchResult]:
        raw = await self._get_json(f"{self._base_url}/search", {"q": query, "token": token})
        items = raw.get("result") if isinstance(raw, dict) else None
        results = []
        for item in items or []:
            symbol = item.get("displaySymbol") or item.get("symbol")
            description = item.get("description")
            if not symbol or not description:
                continue
            results.append(
                SearchResult(
                    symbol=symbol,
                    name=description,
                    currency=currency_from_suffix(symbol),
                    exchange_label=exchange_from_suffix(symbol),
                    asset_type=classify(symbol, f"{description} {item.get('type') or ''}"),
                )
            )
        return results

    async def _search_crypto(self, query: str, token: str) -> list[SearchResult]:
        raw = await self._get_json(f"{self._base_url}/crypto/symbol", {"exchange": "binance", "token": token})
        if not isinstance(raw, list):
            return []
        needle = query.lower()
        results = []
        for item in raw:
            symbol = item.get("symbol") or ""
            description = item.get("description") or ""
            if needle not in symbol.lower() and needle not in description.lower():
                continue
            results.append(
                SearchResult(
                    symbol=symbol,
                    name=description or symbol,
                    currency="USD",
                    exchange_label="Binance",
                    asset_type=AssetType.CRYPTO,
                )
            )
            if len(results) >= MAX_CRYPTO_RESULTS:
                break
        return results
