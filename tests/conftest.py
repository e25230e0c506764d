"""
Pytest configuration and fixtures for portfolio tracker tests.

This module provides:
- Fake quote providers that record every call
- A controllable clock for cache expiry
- Resolver, portfolio service and app context fixtures
- FastAPI test client with injected fakes
"""

import asyncio
from datetime import date, datetime
from typing import Callable, Optional

import pytest
from fastapi.testclient import TestClient

from portfolio_tracker.app_context import AppContext
from portfolio_tracker.config.settings import Settings, reset_settings
from portfolio_tracker.core.exceptions import NotConfiguredError, ProviderError, SymbolNotFoundError
from portfolio_tracker.core.timezone import EASTERN_TZ
from portfolio_tracker.domain.models import AssetType, UserRole
from portfolio_tracker.domain.views import Quote, SearchResult
from portfolio_tracker.main import create_app
from portfolio_tracker.providers import OfflineQuoteSource
from portfolio_tracker.repositories.memory import InMemoryPortfolioRepository
from portfolio_tracker.services import (
    InvestmentCreate,
    PortfolioService,
    QuoteCache,
    QuoteResolver,
    StaticConnectivity,
)


# =============================================================================
# TIME HELPERS
# =============================================================================


def eastern_datetime(
    year: int,
    month: int,
    day: int,
    hour: int = 10,
    minute: int = 0,
    second: int = 0,
) -> datetime:
    """Create a localized datetime in US/Eastern timezone."""
    return EASTERN_TZ.localize(datetime(year, month, day, hour, minute, second))


class FakeClock:
    """Manually advanced clock returning epoch seconds."""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


# =============================================================================
# QUOTE PROVIDER FAKES
# =============================================================================


def make_quote(symbol: str, price: float, provider: str = "Fake", **kwargs) -> Quote:
    """Build a quote with sensible defaults."""
    return Quote(
        symbol=symbol,
        display_name=kwargs.pop("display_name", f"{symbol} Inc."),
        price=price,
        provider=provider,
        as_of=eastern_datetime(2024, 6, 15, 16, 0, 0),
        **kwargs,
    )


class FakeProvider:
    """
    Deterministic quote provider for testing.

    Answers from a fixed table; symbols listed in errors raise the given
    ProviderError instead. Every call is appended to call_log (shared across
    providers when the same list is passed).
    """

    def __init__(
        self,
        name: str,
        prices: Optional[dict[str, float]] = None,
        errors: Optional[dict[str, ProviderError]] = None,
        configured: bool = True,
        search_results: Optional[list[SearchResult]] = None,
        search_error: Optional[ProviderError] = None,
        call_log: Optional[list] = None,
    ):
        self.name = name
        self._prices = prices or {}
        self._errors = errors or {}
        self._configured = configured
        self._search_results = search_results or []
        self._search_error = search_error
        self.call_log = call_log if call_log is not None else []

    def is_configured(self) -> bool:
        return self._configured

    async def fetch_quote(self, symbol: str) -> Quote:
        self.call_log.append((self.name, "quote", symbol))
        if not self._configured:
            raise NotConfiguredError(self.name)
        if symbol in self._errors:
            raise self._errors[symbol]
        if symbol not in self._prices:
            raise SymbolNotFoundError(self.name, symbol)
        return make_quote(symbol, self._prices[symbol], provider=self.name)

    async def search(self, query: str) -> list[SearchResult]:
        self.call_log.append((self.name, "search", query))
        if not self._configured:
            raise NotConfiguredError(self.name)
        if self._search_error is not None:
            raise self._search_error
        return list(self._search_results)


class GatedProvider(FakeProvider):
    """FakeProvider whose quotes are held back until gate is set."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.gate = asyncio.Event()
        self.waiting = 0

    async def fetch_quote(self, symbol: str) -> Quote:
        self.waiting += 1
        await self.gate.wait()
        return await super().fetch_quote(symbol)


async def spin_until(predicate: Callable[[], bool], tries: int = 200) -> None:
    """Yield to the event loop until predicate holds."""
    for _ in range(tries):
        if predicate():
            return
        await asyncio.sleep(0)
    raise AssertionError("condition never became true")


def search_result(symbol: str, name: str = "", asset_type: AssetType = AssetType.STOCK) -> SearchResult:
    return SearchResult(
        symbol=symbol,
        name=name or symbol,
        currency="USD",
        exchange_label="NASDAQ",
        asset_type=asset_type,
    )


@pytest.fixture
def call_log() -> list:
    return []


@pytest.fixture
def offline_source() -> OfflineQuoteSource:
    """Offline source with a fixed seed."""
    return OfflineQuoteSource(seed=42)


@pytest.fixture
def cache(clock) -> QuoteCache:
    return QuoteCache(ttl_seconds=300, clock=clock)


@pytest.fixture
def online() -> StaticConnectivity:
    return StaticConnectivity(online=True)


@pytest.fixture
def make_resolver(cache, online, offline_source) -> Callable[..., QuoteResolver]:
    """Factory for a resolver around the given providers."""

    def _make(*providers, connectivity=None) -> QuoteResolver:
        return QuoteResolver(
            providers=list(providers),
            cache=cache,
            connectivity=connectivity or online,
            offline_source=offline_source,
        )

    return _make


# =============================================================================
# PORTFOLIO FIXTURES
# =============================================================================


@pytest.fixture
def repo() -> InMemoryPortfolioRepository:
    return InMemoryPortfolioRepository()


@pytest.fixture
def default_providers(call_log) -> list[FakeProvider]:
    """Primary answers AAPL/MSFT; secondary only answers VOD.L."""
    return [
        FakeProvider("Primary", prices={"AAPL": 190.0, "MSFT": 410.0}, call_log=call_log),
        FakeProvider("Secondary", prices={"VOD.L": 0.72}, call_log=call_log),
    ]


@pytest.fixture
def portfolio_service(repo, make_resolver, default_providers) -> PortfolioService:
    return PortfolioService(
        repo=repo,
        resolver=make_resolver(*default_providers),
        admin_password="admin-secret",
        viewer_password="viewer-secret",
    )


@pytest.fixture
def investment_factory(portfolio_service) -> Callable[..., object]:
    """Factory for adding holdings as admin."""

    def _create(
        symbol: str = "AAPL",
        quantity: float = 10,
        avg_price: float = 150.0,
        name: Optional[str] = None,
        current_price: Optional[float] = None,
        owner_share_split: float = 25.0,
    ):
        return portfolio_service.add_investment(
            UserRole.ADMIN,
            InvestmentCreate(
                symbol=symbol,
                name=name or f"{symbol} Inc.",
                quantity=quantity,
                avg_price=avg_price,
                current_price=current_price,
                purchase_date=date(2024, 1, 15),
                owner_share_split=owner_share_split,
            ),
        )

    return _create


REFRESH_SYMBOLS = ["AAPL", "MSFT", "GOOGL", "AMZN", "META", "NVDA", "TSLA", "ASML.AS", "ENI.MI", "VOD.L"]


@pytest.fixture
def gated_provider() -> GatedProvider:
    """Answers every REFRESH_SYMBOLS ticker once its gate is set."""
    prices = {symbol: 100.0 + i for i, symbol in enumerate(REFRESH_SYMBOLS)}
    return GatedProvider("Gated", prices=prices)


@pytest.fixture
def gated_portfolio_service(repo, make_resolver, gated_provider) -> PortfolioService:
    """Shares repo with portfolio_service but resolves through gated_provider."""
    return PortfolioService(
        repo=repo,
        resolver=make_resolver(gated_provider),
        admin_password="admin-secret",
        viewer_password="viewer-secret",
    )


# =============================================================================
# API TEST CLIENT FIXTURE
# =============================================================================


ADMIN_PASSWORD = "admin-secret"
VIEWER_PASSWORD = "viewer-secret"


@pytest.fixture
def test_settings() -> Settings:
    reset_settings()
    return Settings(
        _env_file=None,
        admin_password=ADMIN_PASSWORD,
        viewer_password=VIEWER_PASSWORD,
        refresh_enabled=False,
        offline_seed=42,
    )


@pytest.fixture
def app_context(test_settings, default_providers, online, clock) -> AppContext:
    """Context with fake providers and forced-online connectivity."""
    return AppContext(
        test_settings,
        providers=default_providers,
        connectivity=online,
        clock=clock,
    )


@pytest.fixture
def client(app_context) -> TestClient:
    """Provide FastAPI test client around the fake context."""
    app = create_app(app_context)
    with TestClient(app) as c:
        yield c


@pytest.fixture
def admin_headers() -> dict[str, str]:
    return {"X-Portfolio-Password": ADMIN_PASSWORD}


@pytest.fixture
def viewer_headers() -> dict[str, str]:
    return {"X-Portfolio-Password": VIEWER_PASSWORD}
