"""Pydantic schemas for quote endpoints."""

from datetime import datetime
from typing import Optional

from portfolio_tracker.api.schemas.base import CamelModel
from portfolio_tracker.domain.models.enums import AssetType


class QuoteResponse(CamelModel):
    """Response schema for a resolved quote."""

    symbol: str
    display_name: str
    price: float
    change_absolute: float
    change_percent: float
    day_low: float
    day_high: float
    open_price: float
    previous_close: float
    currency: str
    exchange_name: str
    market_cap: Optional[float] = None
    provider: str
    error_note: Optional[str] = None
    as_of: Optional[datetime] = None


class SearchResultResponse(CamelModel):
    """Response schema for one search match."""

    symbol: str
    name: str
    currency: str
    exchange_label: str
    asset_type: AssetType


class ProviderStatusResponse(CamelModel):
    """Response schema for provider status."""

    configured_providers: list[str]
    online: bool


class SymbolValidationResponse(CamelModel):
    """Response schema for a symbol check."""

    symbol: str
    valid: bool
    name: Optional[str] = None
    exchange: Optional[str] = None
    price: Optional[float] = None
    error: Optional[str] = None
