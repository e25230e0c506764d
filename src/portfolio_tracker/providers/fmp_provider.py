"""Financial Modeling Prep quote provider (last fallback)."""

import logging
from typing import Any, Optional

import httpx

from portfolio_tracker.core.exceptions import RateLimitedError, SymbolNotFoundError, UpstreamError
from portfolio_tracker.core.timezone import now_eastern
from portfolio_tracker.domain.symbols import classify, currency_from_suffix, exchange_from_suffix
from portfolio_tracker.domain.views import Quote, SearchResult
from portfolio_tracker.providers.http_provider import HttpQuoteProvider, safe_float

logger = logging.getLogger(__name__)

FMP_BASE_URL = "https://financialmodelingprep.com/api/v3"

MAX_SEARCH_RESULTS = 10


class FmpProvider(HttpQuoteProvider):
    """
    Quotes from FMP's /quote/{symbol} endpoint and matches from /search.

    FMP wraps both answers in a JSON list and reports problems as an
    "Error Message" object with a 200 status.
    """

    name = "Financial Modeling Prep"

    def __init__(self, client: httpx.AsyncClient, api_key: Optional[str] = None, *, base_url: str = FMP_BASE_URL, **kwargs):
        super().__init__(client, api_key, **kwargs)
        self._base_url = base_url.rstrip("/")

    async def fetch_quote(self, symbol: str) -> Quote:
        apikey = self._require_key()
        raw = await self._get_json(f"{self._base_url}/quote/{symbol}", {"apikey": apikey}, symbol=symbol)
        self._raise_for_error(raw, symbol)
        if not isinstance(raw, list):
            raise UpstreamError(self.name, "unexpected quote payload", symbol=symbol)
        if not raw:
            raise SymbolNotFoundError(self.name, symbol)

        item = raw[0]
        price = safe_float(item.get("price"))
        if price <= 0:
            raise SymbolNotFoundError(self.name, symbol)

        market_cap = safe_float(item.get("marketCap"))
        return Quote(
            symbol=symbol,
            display_name=item.get("name") or symbol,
            price=price,
            change_absolute=safe_float(item.get("change")),
            change_percent=safe_float(item.get("changesPercentage")),
            day_low=safe_float(item.get("dayLow")),
            day_high=safe_float(item.get("dayHigh")),
            open_price=safe_float(item.get("open")),
            previous_close=safe_float(item.get("previousClose")),
            currency=currency_from_suffix(symbol),
            exchange_name=item.get("exchange") or exchange_from_suffix(symbol),
            market_cap=market_cap or None,
            provider=self.name,
            as_of=now_eastern(),
        )

    async def search(self, query: str) -> list[SearchResult]:
        apikey = self._require_key()
        query = query.strip()
        if not query:
            return []

        raw = await self._get_json(
            f"{self._base_url}/search",
            {"query": query, "limit": MAX_SEARCH_RESULTS, "apikey": apikey},
        )
        self._raise_for_error(raw)
        if not isinstance(raw, list):
            return []

        results = []
        for item in raw:
            symbol = item.get("symbol")
            name = item.get("name")
            if not symbol or not name:
                continue
            results.append(
                SearchResult(
                    symbol=symbol,
                    name=name,
                    currency=item.get("currency") or currency_from_suffix(symbol),
                    exchange_label=item.get("exchangeShortName") or item.get("stockExchange") or exchange_from_suffix(symbol),
                    asset_type=classify(symbol, name),
                )
            )
        return results[:MAX_SEARCH_RESULTS]

    def _raise_for_error(self, raw: Any, symbol: Optional[str] = None) -> None:
        if isinstance(raw, dict):
            message = raw.get("Error Message") or raw.get("error")
            if message:
                logger.debug("FMP error payload: %s", message)
                if "limit" in str(message).lower():
                    raise RateLimitedError(self.name, symbol=symbol)
                raise UpstreamError(self.name, str(message), symbol=symbol)
