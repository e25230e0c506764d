"""Quote provider protocol."""

from typing import Protocol

from portfolio_tracker.domain.views import Quote, SearchResult


class QuoteProvider(Protocol):
    """
    Protocol for external market data providers (adapters).

    Implementations translate one upstream API into normalized Quote and
    SearchResult values. Failures are raised as ProviderError subclasses;
    a provider never returns a quote without a positive price.
    """

    name: str

    def is_configured(self) -> bool:
        """Return False when the provider's credential is missing."""
        ...

    async def fetch_quote(self, symbol: str) -> Quote:
        """
        Fetch a quote for a normalized uppercase symbol.

        Raises NotConfiguredError, SymbolNotFoundError, RateLimitedError,
        UnreachableError or UpstreamError.
        """
        ...

    async def search(self, query: str) -> list[SearchResult]:
        """Search securities by free text; raises like fetch_quote."""
        ...
