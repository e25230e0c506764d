"""Portfolio service - holdings, transactions and price refresh."""

import logging
import uuid
from dataclasses import dataclass, replace
from datetime import date
from typing import Optional

from portfolio_tracker.core.exceptions import (
    InsufficientQuantityError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from portfolio_tracker.core.timezone import now_eastern
from portfolio_tracker.domain.models import (
    AssetType,
    Investment,
    Transaction,
    TransactionType,
    UserRole,
)
from portfolio_tracker.domain.symbols import classify, normalize_symbol
from portfolio_tracker.domain.views import PortfolioSummary, RefreshReport
from portfolio_tracker.repositories.protocols import PortfolioRepository
from portfolio_tracker.services.quote_resolver import QuoteResolver

logger = logging.getLogger(__name__)


@dataclass
class InvestmentCreate:
    """Input for adding a holding."""

    symbol: str
    name: str
    quantity: float
    avg_price: float
    category: Optional[AssetType] = None
    current_price: Optional[float] = None
    purchase_date: Optional[date] = None
    owner_share_split: float = 25.0


@dataclass
class InvestmentUpdate:
    """Input for editing a holding (all fields optional)."""

    name: Optional[str] = None
    category: Optional[AssetType] = None
    quantity: Optional[float] = None
    avg_price: Optional[float] = None
    current_price: Optional[float] = None
    purchase_date: Optional[date] = None
    owner_share_split: Optional[float] = None


class PortfolioService:
    """
    Record keeping for the shared portfolio.

    Mutations require the admin role and append to the transaction log.
    """

    def __init__(
        self,
        repo: PortfolioRepository,
        resolver: QuoteResolver,
        admin_password: str = "admin",
        viewer_password: str = "viewer",
    ):
        self._repo = repo
        self._resolver = resolver
        self._passwords = {
            UserRole.ADMIN: admin_password,
            UserRole.VIEWER: viewer_password,
        }

    # =========================================================================
    # Auth
    # =========================================================================

    def authenticate(self, password: Optional[str]) -> Optional[UserRole]:
        """Map a shared password to its role, None when unknown."""
        if not password:
            return None
        for role, secret in self._passwords.items():
            if secret and password == secret:
                return role
        return None

    def _require_admin(self, role: UserRole, action: str) -> None:
        if role != UserRole.ADMIN:
            raise PermissionDeniedError(action)

    # =========================================================================
    # Queries
    # =========================================================================

    def list_investments(self) -> list[Investment]:
        return self._repo.list_investments()

    def get_investment(self, investment_id: str) -> Investment:
        investment = self._repo.get_investment(investment_id)
        if investment is None:
            raise NotFoundError("Investment", investment_id)
        return investment

    def list_transactions(self) -> list[Transaction]:
        return self._repo.list_transactions()

    def summary(self) -> PortfolioSummary:
        """Totals across holdings; each value is split by its owner_share_split."""
        total_value = 0.0
        total_cost = 0.0
        viewer_share = 0.0
        for inv in self._repo.list_investments():
            value = inv.market_value
            total_value += value
            total_cost += inv.cost_basis
            viewer_share += value * inv.owner_share_split / 100.0

        gain_loss = total_value - total_cost
        pct = (gain_loss / total_cost * 100.0) if total_cost > 0 else 0.0
        return PortfolioSummary(
            total_value=round(total_value, 2),
            total_cost=round(total_cost, 2),
            total_gain_loss=round(gain_loss, 2),
            gain_loss_percentage=round(pct, 2),
            admin_share=round(total_value - viewer_share, 2),
            viewer_share=round(viewer_share, 2),
        )

    # =========================================================================
    # Mutations (admin only)
    # =========================================================================

    def add_investment(self, role: UserRole, data: InvestmentCreate) -> Investment:
        self._require_admin(role, "add investments")
        symbol = normalize_symbol(data.symbol)
        self._validate_amounts(data.quantity, data.avg_price, data.owner_share_split)
        if data.quantity <= 0:
            raise ValidationError("Quantity must be positive")

        now = now_eastern()
        investment = Investment(
            id=str(uuid.uuid4()),
            symbol=symbol,
            name=data.name.strip() or symbol,
            category=data.category or classify(symbol, data.name),
            quantity=data.quantity,
            avg_price=data.avg_price,
            current_price=data.current_price or data.avg_price,
            purchase_date=data.purchase_date or now.date(),
            owner_share_split=data.owner_share_split,
            created_at=now,
            updated_at=now,
        )
        created = self._repo.add_investment(investment)
        self._log(role, TransactionType.BUY, created, created.avg_price, created.quantity)
        logger.info("Added %s x%s", created.symbol, created.quantity)
        return created

    def edit_investment(self, role: UserRole, investment_id: str, data: InvestmentUpdate) -> Investment:
        self._require_admin(role, "edit investments")
        existing = self.get_investment(investment_id)

        changes = {k: v for k, v in vars(data).items() if v is not None}
        updated = replace(existing, **changes, updated_at=now_eastern())
        self._validate_amounts(updated.quantity, updated.avg_price, updated.owner_share_split)
        if updated.current_price <= 0:
            raise ValidationError("Current price must be positive")
        return self._repo.update_investment(updated)

    def delete_investment(self, role: UserRole, investment_id: str) -> None:
        self._require_admin(role, "delete investments")
        self.get_investment(investment_id)
        self._repo.delete_investment(investment_id)

    def sell(self, role: UserRole, investment_id: str, quantity: float, price: Optional[float] = None) -> Optional[Investment]:
        """
        Sell part or all of a holding at price (defaults to the current price).

        Returns the remaining holding, or None when the position was closed.
        """
        self._require_admin(role, "sell investments")
        investment = self.get_investment(investment_id)
        if quantity <= 0:
            raise ValidationError("Quantity must be positive")
        if quantity > investment.quantity:
            raise InsufficientQuantityError(investment.symbol, quantity, investment.quantity)
        sale_price = price if price is not None else investment.current_price
        if sale_price <= 0:
            raise ValidationError("Price must be positive")

        self._log(role, TransactionType.SELL, investment, sale_price, quantity)
        remaining = investment.quantity - quantity
        if remaining <= 1e-9:
            self._repo.delete_investment(investment_id)
            return None
        return self._repo.update_investment(
            replace(investment, quantity=remaining, updated_at=now_eastern())
        )

    def update_price(self, role: UserRole, investment_id: str, price: float) -> Investment:
        """Manually set the current price of a holding."""
        self._require_admin(role, "update prices")
        if price <= 0:
            raise ValidationError("Price must be positive")
        investment = self.get_investment(investment_id)
        updated = self._repo.update_investment(
            replace(investment, current_price=price, updated_at=now_eastern())
        )
        self._log(role, TransactionType.PRICE_UPDATE, updated, price)
        return updated

    async def refresh_prices(self, role: UserRole = UserRole.ADMIN) -> RefreshReport:
        """
        Resolve every held symbol and apply live quotes.

        Offline, stale and unavailable quotes are reported as skipped and
        never overwrite a stored price. Holdings are re-read after the quotes
        arrive, so edits and sells made meanwhile are kept and holdings
        closed meanwhile are left alone.
        """
        self._require_admin(role, "refresh prices")
        investments = self._repo.list_investments()
        if not investments:
            return RefreshReport(updated=[], skipped={})

        quotes = await self._resolver.resolve_many(inv.symbol for inv in investments)
        updated: list[str] = []
        skipped: dict[str, str] = {}
        now = now_eastern()
        for inv in investments:
            quote = quotes.get(inv.symbol)
            if quote is None or not quote.is_live:
                skipped[inv.symbol] = (quote.error_note if quote else None) or "no quote"
                continue
            current = self._repo.get_investment(inv.id)
            if current is None:
                skipped[inv.symbol] = "holding closed during refresh"
                continue
            self._repo.update_investment(replace(current, current_price=quote.price, updated_at=now))
            updated.append(inv.symbol)

        logger.info("Price refresh: %d updated, %d skipped", len(updated), len(skipped))
        return RefreshReport(updated=updated, skipped=skipped)

    # =========================================================================
    # Helpers
    # =========================================================================

    @staticmethod
    def _validate_amounts(quantity: float, avg_price: float, split: float) -> None:
        if quantity < 0:
            raise ValidationError("Quantity cannot be negative")
        if avg_price <= 0:
            raise ValidationError("Average price must be positive")
        if not 0 <= split <= 100:
            raise ValidationError("Owner share split must be between 0 and 100")

    def _log(
        self,
        role: UserRole,
        tx_type: TransactionType,
        investment: Investment,
        price: float,
        quantity: Optional[float] = None,
    ) -> Transaction:
        tx = Transaction(
            id=str(uuid.uuid4()),
            type=tx_type,
            asset_symbol=investment.symbol,
            asset_name=investment.name,
            price=price,
            user=role,
            timestamp=now_eastern(),
            quantity=quantity,
            total=round(quantity * price, 2) if quantity is not None else None,
        )
        return self._repo.append_transaction(tx)
