"""Alpha Vantage quote provider (secondary)."""

import logging
from typing import Any, Optional

import httpx

from portfolio_tracker.core.exceptions import RateLimitedError, SymbolNotFoundError, UpstreamError
from portfolio_tracker.core.timezone import now_eastern
from portfolio_tracker.domain.symbols import (
    classify,
    currency_from_suffix,
    exchange_from_suffix,
    symbol_variants,
)
from portfolio_tracker.domain.views import Quote, SearchResult
from portfolio_tracker.providers.http_provider import HttpQuoteProvider, safe_float

logger = logging.getLogger(__name__)

ALPHA_VANTAGE_BASE_URL = "https://www.alphavantage.co/query"


class AlphaVantageProvider(HttpQuoteProvider):
    """
    Quotes from Alpha Vantage GLOBAL_QUOTE.

    Alpha Vantage spells European listings differently (VOD.LON rather than
    VOD.L), so suffixed symbols are retried with each spelling from the
    suffix table until one yields a price.
    """

    name = "Alpha Vantage"

    def __init__(
        self,
        client: httpx.AsyncClient,
        api_key: Optional[str] = None,
        *,
        base_url: str = ALPHA_VANTAGE_BASE_URL,
        **kwargs,
    ):
        super().__init__(client, api_key, **kwargs)
        self._base_url = base_url

    async def fetch_quote(self, symbol: str) -> Quote:
        apikey = self._require_key()
        last_error: Optional[SymbolNotFoundError] = None
        for variant in symbol_variants(symbol):
            try:
                quote = await self._fetch_variant(variant, apikey)
            except SymbolNotFoundError as e:
                last_error = e
                continue
            if variant != symbol:
                logger.debug("Alpha Vantage resolved %s as %s", symbol, variant)
            quote.symbol = symbol
            return quote
        raise last_error or SymbolNotFoundError(self.name, symbol)

    async def _fetch_variant(self, variant: str, apikey: str) -> Quote:
        raw = await self._get_json(
            self._base_url,
            {"function": "GLOBAL_QUOTE", "symbol": variant, "apikey": apikey},
            symbol=variant,
        )
        self._check_throttled(raw, variant)

        data = raw.get("Global Quote") if isinstance(raw, dict) else None
        if not data:
            raise SymbolNotFoundError(self.name, variant)
        price = safe_float(data.get("05. price"))
        if price <= 0:
            raise SymbolNotFoundError(self.name, variant, reason="zero price")

        return Quote(
            symbol=variant,
            display_name=variant,
            price=price,
            change_absolute=safe_float(data.get("09. change")),
            change_percent=safe_float(data.get("10. change percent")),
            day_low=safe_float(data.get("04. low")),
            day_high=safe_float(data.get("03. high")),
            open_price=safe_float(data.get("02. open")),
            previous_close=safe_float(data.get("08. previous close")),
            currency=currency_from_suffix(variant),
            exchange_name=exchange_from_suffix(variant),
            provider=self.name,
            as_of=now_eastern(),
        )

    async def search(self, query: str) -> list[SearchResult]:
        apikey = self._require_key()
        query = query.strip()
        if not query:
            return []
        raw = await self._get_json(
            self._base_url,
            {"function": "SYMBOL_SEARCH", "keywords": query, "apikey": apikey},
        )
        self._check_throttled(raw, None)
        if not isinstance(raw, dict):
            raise UpstreamError(self.name, "unexpected search payload")

        results = []
        for match in raw.get("bestMatches") or []:
            symbol = match.get("1. symbol")
            name = match.get("2. name")
            if not symbol or not name:
                continue
            results.append(
                SearchResult(
                    symbol=symbol,
                    name=name,
                    currency=match.get("8. currency") or currency_from_suffix(symbol),
                    exchange_label=match.get("4. region") or exchange_from_suffix(symbol),
                    asset_type=classify(symbol, f"{name} {match.get('3. type') or ''}"),
                )
            )
        return results

    def _check_throttled(self, raw: Any, symbol: Optional[str]) -> None:
        # Throttling comes back as HTTP 200 with a "Note" or "Information" message
        if isinstance(raw, dict) and ("Note" in raw or "Information" in raw):
            raise RateLimitedError(self.name, symbol=symbol)
