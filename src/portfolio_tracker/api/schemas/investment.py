"""Pydantic schemas for investment and transaction endpoints."""

from datetime import date, datetime
from typing import Optional

from pydantic import Field

from portfolio_tracker.api.schemas.base import CamelModel
from portfolio_tracker.domain.models.enums import AssetType, TransactionType, UserRole


class InvestmentCreateRequest(CamelModel):
    """Request schema for adding an investment."""

    symbol: str = Field(..., min_length=1, max_length=20)
    name: str = Field(..., min_length=1, max_length=255)
    quantity: float = Field(..., gt=0)
    avg_price: float = Field(..., gt=0)
    category: Optional[AssetType] = None
    current_price: Optional[float] = Field(default=None, gt=0)
    purchase_date: Optional[date] = None
    owner_share_split: float = Field(default=25.0, ge=0, le=100)


class InvestmentUpdateRequest(CamelModel):
    """Request schema for editing an investment (partial)."""

    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    category: Optional[AssetType] = None
    quantity: Optional[float] = Field(default=None, ge=0)
    avg_price: Optional[float] = Field(default=None, gt=0)
    current_price: Optional[float] = Field(default=None, gt=0)
    purchase_date: Optional[date] = None
    owner_share_split: Optional[float] = Field(default=None, ge=0, le=100)


class SellRequest(CamelModel):
    """Request schema for selling part or all of a holding."""

    quantity: float = Field(..., gt=0)
    price: Optional[float] = Field(default=None, gt=0)


class PriceUpdateRequest(CamelModel):
    """Request schema for a manual price update."""

    price: float = Field(..., gt=0)


class InvestmentResponse(CamelModel):
    """Response schema for a single investment."""

    id: str
    symbol: str
    name: str
    category: AssetType
    quantity: float
    avg_price: float
    current_price: float
    purchase_date: date
    owner_share_split: float
    market_value: float
    cost_basis: float
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class SellResponse(CamelModel):
    """Remaining holding after a sale; null when the position was closed."""

    investment: Optional[InvestmentResponse] = None
    closed: bool


class TransactionResponse(CamelModel):
    """Response schema for a transaction log entry."""

    id: str
    type: TransactionType
    asset_symbol: str
    asset_name: str
    quantity: Optional[float] = None
    price: float
    total: Optional[float] = None
    user: UserRole
    timestamp: datetime


class PortfolioSummaryResponse(CamelModel):
    """Response schema for portfolio totals."""

    total_value: float
    total_cost: float
    total_gain_loss: float
    gain_loss_percentage: float
    admin_share: float
    viewer_share: float


class RefreshReportResponse(CamelModel):
    """Response schema for a price refresh."""

    updated: list[str]
    skipped: dict[str, str]
