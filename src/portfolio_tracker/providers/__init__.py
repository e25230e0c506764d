"""Quote providers module."""

from portfolio_tracker.providers.market_data_provider import QuoteProvider
from portfolio_tracker.providers.http_provider import HttpQuoteProvider
from portfolio_tracker.providers.finnhub_provider import FinnhubProvider
from portfolio_tracker.providers.alpha_vantage_provider import AlphaVantageProvider
from portfolio_tracker.providers.yahoo_provider import YahooFinanceProvider
from portfolio_tracker.providers.fmp_provider import FmpProvider
from portfolio_tracker.providers.offline_provider import OfflineQuoteSource

__all__ = [
    "QuoteProvider",
    "HttpQuoteProvider",
    "FinnhubProvider",
    "AlphaVantageProvider",
    "YahooFinanceProvider",
    "FmpProvider",
    "OfflineQuoteSource",
]
