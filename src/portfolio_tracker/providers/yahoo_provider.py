"""
Yahoo Finance quote provider (tertiary) via yfinance.

No credential is needed, so this provider is always configured. yfinance is
blocking; calls run in a worker thread.
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any

from portfolio_tracker.core.exceptions import (
    ProviderError,
    RateLimitedError,
    SymbolNotFoundError,
    UnreachableError,
    UpstreamError,
)
from portfolio_tracker.core.timezone import now_eastern, to_eastern
from portfolio_tracker.domain.symbols import classify, currency_from_suffix, exchange_from_suffix
from portfolio_tracker.domain.views import Quote, SearchResult
from portfolio_tracker.providers.http_provider import safe_float

logger = logging.getLogger(__name__)

MAX_SEARCH_RESULTS = 10


# Lazy import so tests can patch before import
def _get_yf():
    import yfinance as yf
    return yf


def _load_info(symbol: str) -> dict[str, Any]:
    info = _get_yf().Ticker(symbol).info
    return info if isinstance(info, dict) else {}


def _load_search(query: str) -> list[dict[str, Any]]:
    search = _get_yf().Search(query, max_results=MAX_SEARCH_RESULTS, news_count=0)
    quotes = getattr(search, "quotes", None)
    return quotes if isinstance(quotes, list) else []


def _market_time(info: dict[str, Any]) -> datetime:
    """Exchange timestamp of the last trade, or now when yfinance omits it."""
    ts = info.get("regularMarketTime")
    if isinstance(ts, (int, float)) and ts > 0:
        return to_eastern(datetime.fromtimestamp(ts, tz=timezone.utc))
    return now_eastern()


class YahooFinanceProvider:
    """Quotes and search from Yahoo Finance."""

    name = "Yahoo Finance"

    def is_configured(self) -> bool:
        return True

    async def fetch_quote(self, symbol: str) -> Quote:
        try:
            info = await asyncio.to_thread(_load_info, symbol)
        except Exception as e:
            raise self._translate(e, symbol) from e

        price = safe_float(info.get("currentPrice")) or safe_float(info.get("regularMarketPrice"))
        if price <= 0:
            raise SymbolNotFoundError(self.name, symbol)

        prev_close = safe_float(info.get("previousClose")) or safe_float(info.get("regularMarketPreviousClose"))
        change = info.get("regularMarketChange")
        change_pct = info.get("regularMarketChangePercent")
        if change is None and prev_close > 0:
            change = price - prev_close
        if change_pct is None and prev_close > 0:
            change_pct = (price - prev_close) / prev_close * 100.0

        name = (info.get("longName") or info.get("shortName") or "").strip() or symbol
        market_cap = safe_float(info.get("marketCap"))

        return Quote(
            symbol=symbol,
            display_name=name,
            price=price,
            change_absolute=round(safe_float(change), 4),
            change_percent=round(safe_float(change_pct), 4),
            day_low=safe_float(info.get("regularMarketDayLow") or info.get("dayLow")),
            day_high=safe_float(info.get("regularMarketDayHigh") or info.get("dayHigh")),
            open_price=safe_float(info.get("regularMarketOpen") or info.get("open")),
            previous_close=prev_close,
            currency=info.get("currency") or currency_from_suffix(symbol),
            exchange_name=info.get("fullExchangeName") or info.get("exchange") or exchange_from_suffix(symbol),
            market_cap=market_cap or None,
            provider=self.name,
            as_of=_market_time(info),
        )

    async def search(self, query: str) -> list[SearchResult]:
        query = query.strip()
        if not query:
            return []
        try:
            quotes = await asyncio.to_thread(_load_search, query)
        except Exception as e:
            raise self._translate(e, None) from e

        results = []
        for item in quotes:
            symbol = item.get("symbol")
            if not symbol:
                continue
            name = item.get("longname") or item.get("shortname") or symbol
            results.append(
                SearchResult(
                    symbol=symbol,
                    name=name,
                    currency=item.get("currency") or currency_from_suffix(symbol),
                    exchange_label=item.get("exchDisp") or item.get("exchange") or exchange_from_suffix(symbol),
                    asset_type=classify(symbol, f"{name} {item.get('typeDisp') or ''}", item.get("exchange")),
                )
            )
        return results

    def _translate(self, error: Exception, symbol) -> ProviderError:
        """Map a yfinance/transport exception onto the provider failure taxonomy."""
        if isinstance(error, ProviderError):
            return error
        logger.debug("yfinance error for %s: %r", symbol or "search", error)
        from yfinance.exceptions import YFRateLimitError

        if isinstance(error, YFRateLimitError):
            return RateLimitedError(self.name, symbol=symbol)
        kind = type(error).__name__
        if "Timeout" in kind or "Connection" in kind:
            return UnreachableError(self.name, f"network error ({kind})", symbol=symbol)
        return UpstreamError(self.name, f"{kind}: {error}", symbol=symbol)
