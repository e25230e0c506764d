"""
Unit tests for PortfolioService.

Tests cover:
- Role checks on every mutation
- Adding, editing, selling and deleting holdings
- Manual price updates and the transaction log
- Refresh applying only live quotes, and keeping changes made while it waits
- Summary with the owner split
"""

import asyncio

import pytest

from portfolio_tracker.core.exceptions import (
    InsufficientQuantityError,
    InvalidSymbolError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from portfolio_tracker.domain.models import AssetType, TransactionType, UserRole
from portfolio_tracker.services import InvestmentCreate, InvestmentUpdate
from tests.conftest import spin_until


# =============================================================================
# AUTH
# =============================================================================


class TestAuthenticate:
    def test_known_passwords(self, portfolio_service):
        assert portfolio_service.authenticate("admin-secret") == UserRole.ADMIN
        assert portfolio_service.authenticate("viewer-secret") == UserRole.VIEWER

    @pytest.mark.parametrize("password", [None, "", "guess"])
    def test_unknown_password(self, portfolio_service, password):
        assert portfolio_service.authenticate(password) is None


# =============================================================================
# MUTATIONS
# =============================================================================


class TestAddInvestment:
    def test_add_normalizes_and_classifies(self, portfolio_service):
        """
        GIVEN a lowercase ETF symbol without a category
        WHEN the admin adds it
        THEN the symbol is uppercased, the category inferred, and a buy logged
        """
        inv = portfolio_service.add_investment(
            UserRole.ADMIN,
            InvestmentCreate(symbol="vwce.de", name="Vanguard FTSE All-World", quantity=4, avg_price=100.0),
        )

        assert inv.symbol == "VWCE.DE"
        assert inv.category == AssetType.ETF
        assert inv.current_price == 100.0
        assert inv.owner_share_split == 25.0

        txs = portfolio_service.list_transactions()
        assert len(txs) == 1
        assert txs[0].type == TransactionType.BUY
        assert txs[0].total == 400.0
        assert txs[0].user == UserRole.ADMIN

    def test_viewer_cannot_add(self, portfolio_service):
        with pytest.raises(PermissionDeniedError):
            portfolio_service.add_investment(
                UserRole.VIEWER,
                InvestmentCreate(symbol="AAPL", name="Apple", quantity=1, avg_price=1.0),
            )
        assert portfolio_service.list_investments() == []

    @pytest.mark.parametrize(
        "quantity,avg_price,split",
        [(0, 10.0, 25.0), (-1, 10.0, 25.0), (1, 0.0, 25.0), (1, 10.0, 101.0)],
    )
    def test_rejects_bad_amounts(self, portfolio_service, quantity, avg_price, split):
        with pytest.raises(ValidationError):
            portfolio_service.add_investment(
                UserRole.ADMIN,
                InvestmentCreate(symbol="AAPL", name="Apple", quantity=quantity, avg_price=avg_price, owner_share_split=split),
            )

    def test_rejects_malformed_symbol(self, portfolio_service):
        with pytest.raises(InvalidSymbolError):
            portfolio_service.add_investment(
                UserRole.ADMIN,
                InvestmentCreate(symbol="bad symbol", name="x", quantity=1, avg_price=1.0),
            )


class TestEditAndDelete:
    def test_edit_changes_only_given_fields(self, portfolio_service, investment_factory):
        inv = investment_factory(quantity=10, avg_price=150.0)

        updated = portfolio_service.edit_investment(
            UserRole.ADMIN, inv.id, InvestmentUpdate(quantity=12, owner_share_split=50.0)
        )

        assert updated.quantity == 12
        assert updated.owner_share_split == 50.0
        assert updated.avg_price == 150.0
        assert updated.name == inv.name

    def test_edit_missing_investment(self, portfolio_service):
        with pytest.raises(NotFoundError):
            portfolio_service.edit_investment(UserRole.ADMIN, "nope", InvestmentUpdate(quantity=1))

    def test_viewer_cannot_edit_or_delete(self, portfolio_service, investment_factory):
        inv = investment_factory()

        with pytest.raises(PermissionDeniedError):
            portfolio_service.edit_investment(UserRole.VIEWER, inv.id, InvestmentUpdate(quantity=1))
        with pytest.raises(PermissionDeniedError):
            portfolio_service.delete_investment(UserRole.VIEWER, inv.id)

    def test_delete(self, portfolio_service, investment_factory):
        inv = investment_factory()

        portfolio_service.delete_investment(UserRole.ADMIN, inv.id)

        assert portfolio_service.list_investments() == []
        with pytest.raises(NotFoundError):
            portfolio_service.get_investment(inv.id)


class TestSell:
    def test_partial_sale_reduces_quantity(self, portfolio_service, investment_factory):
        """
        GIVEN 10 units
        WHEN the admin sells 4 at 200
        THEN 6 remain and a sell of 800 is logged
        """
        inv = investment_factory(quantity=10)

        remaining = portfolio_service.sell(UserRole.ADMIN, inv.id, 4, price=200.0)

        assert remaining.quantity == 6
        sell_tx = portfolio_service.list_transactions()[0]
        assert sell_tx.type == TransactionType.SELL
        assert sell_tx.quantity == 4
        assert sell_tx.total == 800.0

    def test_selling_everything_removes_holding(self, portfolio_service, investment_factory):
        inv = investment_factory(quantity=0.3)

        assert portfolio_service.sell(UserRole.ADMIN, inv.id, 0.3) is None
        assert portfolio_service.list_investments() == []

    def test_sale_defaults_to_current_price(self, portfolio_service, investment_factory):
        inv = investment_factory(quantity=2, current_price=175.0)

        portfolio_service.sell(UserRole.ADMIN, inv.id, 1)

        assert portfolio_service.list_transactions()[0].price == 175.0

    def test_cannot_oversell(self, portfolio_service, investment_factory):
        inv = investment_factory(quantity=2)

        with pytest.raises(InsufficientQuantityError):
            portfolio_service.sell(UserRole.ADMIN, inv.id, 3)

    def test_viewer_cannot_sell(self, portfolio_service, investment_factory):
        inv = investment_factory()

        with pytest.raises(PermissionDeniedError):
            portfolio_service.sell(UserRole.VIEWER, inv.id, 1)


class TestUpdatePrice:
    def test_manual_price_update_logged(self, portfolio_service, investment_factory):
        inv = investment_factory()

        updated = portfolio_service.update_price(UserRole.ADMIN, inv.id, 199.99)

        assert updated.current_price == 199.99
        tx = portfolio_service.list_transactions()[0]
        assert tx.type == TransactionType.PRICE_UPDATE
        assert tx.quantity is None
        assert tx.total is None

    def test_non_positive_price_rejected(self, portfolio_service, investment_factory):
        inv = investment_factory()

        with pytest.raises(ValidationError):
            portfolio_service.update_price(UserRole.ADMIN, inv.id, 0)


# =============================================================================
# REFRESH
# =============================================================================


class TestRefreshPrices:
    @pytest.mark.asyncio
    async def test_applies_only_live_quotes(self, portfolio_service, investment_factory):
        """
        GIVEN holdings in AAPL (live), NVDA (offline only) and XXXXX (unknown)
        WHEN prices are refreshed
        THEN only AAPL is updated and the others are reported as skipped
        """
        aapl = investment_factory("AAPL", current_price=150.0)
        nvda = investment_factory("NVDA", current_price=800.0)
        investment_factory("XXXXX", current_price=5.0)

        report = await portfolio_service.refresh_prices(UserRole.ADMIN)

        assert report.updated == ["AAPL"]
        assert set(report.skipped) == {"NVDA", "XXXXX"}
        assert portfolio_service.get_investment(aapl.id).current_price == 190.0
        assert portfolio_service.get_investment(nvda.id).current_price == 800.0

    @pytest.mark.asyncio
    async def test_viewer_cannot_refresh(self, portfolio_service):
        with pytest.raises(PermissionDeniedError):
            await portfolio_service.refresh_prices(UserRole.VIEWER)

    @pytest.mark.asyncio
    async def test_empty_portfolio(self, portfolio_service, online):
        report = await portfolio_service.refresh_prices()

        assert report.updated == []
        assert online.calls == 0

    @pytest.mark.asyncio
    async def test_sell_during_refresh_is_kept(
        self, portfolio_service, gated_portfolio_service, gated_provider, investment_factory
    ):
        """
        GIVEN a refresh waiting on its quotes
        WHEN part of the holding is sold and renamed meanwhile
        THEN the refresh only changes the price
        """
        aapl = investment_factory("AAPL", quantity=10, current_price=150.0)

        refresh = asyncio.create_task(gated_portfolio_service.refresh_prices())
        await spin_until(lambda: gated_provider.waiting == 1)
        portfolio_service.sell(UserRole.ADMIN, aapl.id, 4)
        portfolio_service.edit_investment(UserRole.ADMIN, aapl.id, InvestmentUpdate(name="Apple"))
        gated_provider.gate.set()
        report = await refresh

        stored = portfolio_service.get_investment(aapl.id)
        assert report.updated == ["AAPL"]
        assert stored.quantity == 6
        assert stored.name == "Apple"
        assert stored.current_price == 100.0

    @pytest.mark.asyncio
    async def test_holding_closed_during_refresh_is_skipped(
        self, portfolio_service, gated_portfolio_service, gated_provider, investment_factory
    ):
        """
        GIVEN a refresh waiting on quotes for AAPL and MSFT
        WHEN all of AAPL is sold meanwhile
        THEN AAPL is skipped, MSFT is still updated and nothing raises
        """
        aapl = investment_factory("AAPL", quantity=10, current_price=150.0)
        msft = investment_factory("MSFT", quantity=2, current_price=300.0)

        refresh = asyncio.create_task(gated_portfolio_service.refresh_prices())
        await spin_until(lambda: gated_provider.waiting == 2)
        assert portfolio_service.sell(UserRole.ADMIN, aapl.id, 10) is None
        gated_provider.gate.set()
        report = await refresh

        assert report.updated == ["MSFT"]
        assert report.skipped == {"AAPL": "holding closed during refresh"}
        assert portfolio_service.get_investment(msft.id).current_price == 101.0
        assert [inv.symbol for inv in portfolio_service.list_investments()] == ["MSFT"]


# =============================================================================
# SUMMARY
# =============================================================================


class TestSummary:
    def test_owner_split_applied_per_investment(self, portfolio_service, investment_factory):
        """
        GIVEN two holdings with different viewer shares
        WHEN summarized
        THEN each value is split by its own percentage
        """
        investment_factory("AAPL", quantity=10, avg_price=100.0, current_price=120.0, owner_share_split=25.0)
        investment_factory("MSFT", quantity=1, avg_price=400.0, current_price=300.0, owner_share_split=50.0)

        summary = portfolio_service.summary()

        assert summary.total_value == 1500.0
        assert summary.total_cost == 1400.0
        assert summary.total_gain_loss == 100.0
        assert summary.gain_loss_percentage == pytest.approx(7.14)
        assert summary.viewer_share == 450.0
        assert summary.admin_share == 1050.0

    def test_empty_summary(self, portfolio_service):
        summary = portfolio_service.summary()

        assert summary.total_value == 0
        assert summary.gain_loss_percentage == 0
