"""View models for service outputs."""

from portfolio_tracker.domain.views.quote import (
    Quote,
    SearchResult,
    CacheEntry,
    ProviderAttempt,
    ProviderStatus,
    SymbolValidation,
    OFFLINE_PROVIDER,
    UNAVAILABLE_PROVIDER,
)
from portfolio_tracker.domain.views.portfolio import PortfolioSummary, RefreshReport

__all__ = [
    "Quote",
    "SearchResult",
    "CacheEntry",
    "ProviderAttempt",
    "ProviderStatus",
    "SymbolValidation",
    "OFFLINE_PROVIDER",
    "UNAVAILABLE_PROVIDER",
    "PortfolioSummary",
    "RefreshReport",
]
