"""Investment and Transaction domain models."""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from portfolio_tracker.domain.models.enums import AssetType, TransactionType, UserRole


@dataclass
class Investment:
    """
    A holding shared by the two users.

    owner_share_split is the percentage (0-100) of the position owned by the
    viewer; the admin owns the remainder.
    """

    id: str
    symbol: str
    name: str
    category: AssetType
    quantity: float
    avg_price: float
    current_price: float
    purchase_date: date
    owner_share_split: float = 25.0
    created_at: Optional[datetime] = field(default=None)
    updated_at: Optional[datetime] = field(default=None)

    def __post_init__(self) -> None:
        if isinstance(self.category, str):
            self.category = AssetType(self.category)

    @property
    def market_value(self) -> float:
        """Current value of the whole position."""
        return self.quantity * self.current_price

    @property
    def cost_basis(self) -> float:
        """Amount paid for the whole position."""
        return self.quantity * self.avg_price


@dataclass(frozen=True)
class Transaction:
    """
    Append-only log entry.

    BUY/SELL carry quantity and total; PRICE_UPDATE carries only the new price.
    """

    id: str
    type: TransactionType
    asset_symbol: str
    asset_name: str
    price: float
    user: UserRole
    timestamp: datetime
    quantity: Optional[float] = None
    total: Optional[float] = None
