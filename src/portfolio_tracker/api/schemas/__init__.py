"""Pydantic schemas for API request/response."""

from portfolio_tracker.api.schemas.auth import LoginRequest, LoginResponse
from portfolio_tracker.api.schemas.quote import (
    QuoteResponse,
    SearchResultResponse,
    ProviderStatusResponse,
    SymbolValidationResponse,
)
from portfolio_tracker.api.schemas.investment import (
    InvestmentCreateRequest,
    InvestmentUpdateRequest,
    SellRequest,
    PriceUpdateRequest,
    InvestmentResponse,
    SellResponse,
    TransactionResponse,
    PortfolioSummaryResponse,
    RefreshReportResponse,
)

__all__ = [
    "LoginRequest",
    "LoginResponse",
    "QuoteResponse",
    "SearchResultResponse",
    "ProviderStatusResponse",
    "SymbolValidationResponse",
    "InvestmentCreateRequest",
    "InvestmentUpdateRequest",
    "SellRequest",
    "PriceUpdateRequest",
    "InvestmentResponse",
    "SellResponse",
    "TransactionResponse",
    "PortfolioSummaryResponse",
    "RefreshReportResponse",
]
