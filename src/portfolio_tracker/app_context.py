"""Application context: explicit wiring of every service.

One AppContext owns the shared HTTP client, the providers, the quote cache
and the portfolio store. The FastAPI app keeps its context on app.state;
tests build their own with fakes injected.
"""

import time
from typing import Callable, Optional, Sequence

import httpx

from portfolio_tracker.config.settings import Settings, get_settings
from portfolio_tracker.providers import (
    AlphaVantageProvider,
    FinnhubProvider,
    FmpProvider,
    OfflineQuoteSource,
    QuoteProvider,
    YahooFinanceProvider,
)
from portfolio_tracker.repositories.memory import InMemoryPortfolioRepository
from portfolio_tracker.services import (
    ConnectivityProber,
    PortfolioService,
    QuoteCache,
    QuoteResolver,
    RefreshScheduler,
)
from portfolio_tracker.services.connectivity import Connectivity


class AppContext:
    """
    Holds the service graph for one running application.

    Services are created on first access. Pass providers, connectivity or
    clock to replace the real ones.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        *,
        client: Optional[httpx.AsyncClient] = None,
        providers: Optional[Sequence[QuoteProvider]] = None,
        connectivity: Optional[Connectivity] = None,
        offline_source: Optional[OfflineQuoteSource] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.settings = settings or get_settings()
        self._client = client
        self._owns_client = client is None
        self._providers = list(providers) if providers is not None else None
        self._connectivity = connectivity
        self._offline_source = offline_source
        self._clock = clock

        self._cache: Optional[QuoteCache] = None
        self._resolver: Optional[QuoteResolver] = None
        self._repo: Optional[InMemoryPortfolioRepository] = None
        self._portfolio: Optional[PortfolioService] = None
        self._scheduler: Optional[RefreshScheduler] = None

    @property
    def client(self) -> httpx.AsyncClient:
        """Shared HTTP client for every provider and the prober."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.settings.provider_timeout_seconds,
                follow_redirects=True,
            )
        return self._client

    @property
    def providers(self) -> list[QuoteProvider]:
        """Providers in priority order: Finnhub, Alpha Vantage, Yahoo Finance, FMP."""
        if self._providers is None:
            s = self.settings
            http_kwargs = dict(
                min_interval_seconds=s.provider_min_interval_seconds,
                backoff_seconds=s.rate_limit_backoff_seconds,
                timeout_seconds=s.provider_timeout_seconds,
            )
            self._providers = [
                FinnhubProvider(self.client, s.finnhub_api_key, **http_kwargs),
                AlphaVantageProvider(self.client, s.alpha_vantage_api_key, **http_kwargs),
                YahooFinanceProvider(),
                FmpProvider(self.client, s.fmp_api_key, **http_kwargs),
            ]
        return self._providers

    @property
    def connectivity(self) -> Connectivity:
        if self._connectivity is None:
            self._connectivity = ConnectivityProber(
                self.client,
                url=self.settings.connectivity_probe_url,
                timeout_seconds=self.settings.connectivity_timeout_seconds,
            )
        return self._connectivity

    @property
    def offline_source(self) -> OfflineQuoteSource:
        if self._offline_source is None:
            self._offline_source = OfflineQuoteSource(seed=self.settings.offline_seed)
        return self._offline_source

    @property
    def cache(self) -> QuoteCache:
        if self._cache is None:
            self._cache = QuoteCache(ttl_seconds=self.settings.quote_cache_ttl_seconds, clock=self._clock)
        return self._cache

    @property
    def resolver(self) -> QuoteResolver:
        if self._resolver is None:
            self._resolver = QuoteResolver(
                providers=self.providers,
                cache=self.cache,
                connectivity=self.connectivity,
                offline_source=self.offline_source,
            )
        return self._resolver

    @property
    def repo(self) -> InMemoryPortfolioRepository:
        if self._repo is None:
            self._repo = InMemoryPortfolioRepository()
        return self._repo

    @property
    def portfolio(self) -> PortfolioService:
        if self._portfolio is None:
            self._portfolio = PortfolioService(
                repo=self.repo,
                resolver=self.resolver,
                admin_password=self.settings.admin_password,
                viewer_password=self.settings.viewer_password,
            )
        return self._portfolio

    @property
    def scheduler(self) -> RefreshScheduler:
        """Background price refresh; started by the app lifespan when enabled."""
        if self._scheduler is None:
            self._scheduler = RefreshScheduler(
                job=self.portfolio.refresh_prices,
                interval_seconds=self.settings.refresh_interval_seconds,
            )
        return self._scheduler

    async def aclose(self) -> None:
        """Stop background work and release the HTTP client."""
        if self._scheduler is not None:
            await self._scheduler.stop()
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None
