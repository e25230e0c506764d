"""Service layer - quote resolution and portfolio orchestration."""

from portfolio_tracker.services.quote_cache import QuoteCache
from portfolio_tracker.services.connectivity import ConnectivityProber, StaticConnectivity
from portfolio_tracker.services.quote_resolver import QuoteResolver
from portfolio_tracker.services.refresh_scheduler import RefreshScheduler
from portfolio_tracker.services.portfolio_service import (
    PortfolioService,
    InvestmentCreate,
    InvestmentUpdate,
)

__all__ = [
    "QuoteCache",
    "ConnectivityProber",
    "StaticConnectivity",
    "QuoteResolver",
    "RefreshScheduler",
    "PortfolioService",
    "InvestmentCreate",
    "InvestmentUpdate",
]
