"""Investment endpoints. Reads need any role; mutations need admin."""

from fastapi import APIRouter, Depends

from portfolio_tracker.api.deps import get_current_role, get_portfolio_service
from portfolio_tracker.api.schemas import (
    InvestmentCreateRequest,
    InvestmentResponse,
    InvestmentUpdateRequest,
    PortfolioSummaryResponse,
    PriceUpdateRequest,
    RefreshReportResponse,
    SellRequest,
    SellResponse,
)
from portfolio_tracker.domain.models import UserRole
from portfolio_tracker.services import InvestmentCreate, InvestmentUpdate, PortfolioService

router = APIRouter(prefix="/investments", tags=["investments"])


@router.get("", response_model=list[InvestmentResponse])
def list_investments(
    role: UserRole = Depends(get_current_role),
    service: PortfolioService = Depends(get_portfolio_service),
):
    """List all holdings."""
    return [InvestmentResponse.model_validate(inv) for inv in service.list_investments()]


@router.get("/summary", response_model=PortfolioSummaryResponse)
def portfolio_summary(
    role: UserRole = Depends(get_current_role),
    service: PortfolioService = Depends(get_portfolio_service),
):
    """Totals with the admin/viewer split."""
    return PortfolioSummaryResponse.model_validate(service.summary())


@router.post("", response_model=InvestmentResponse, status_code=201)
def add_investment(
    data: InvestmentCreateRequest,
    role: UserRole = Depends(get_current_role),
    service: PortfolioService = Depends(get_portfolio_service),
):
    """Add a holding (logs a buy)."""
    investment = service.add_investment(role, InvestmentCreate(**data.model_dump()))
    return InvestmentResponse.model_validate(investment)


@router.post("/refresh", response_model=RefreshReportResponse)
async def refresh_prices(
    role: UserRole = Depends(get_current_role),
    service: PortfolioService = Depends(get_portfolio_service),
):
    """Resolve every held symbol and apply live prices."""
    report = await service.refresh_prices(role)
    return RefreshReportResponse.model_validate(report)


@router.get("/{investment_id}", response_model=InvestmentResponse)
def get_investment(
    investment_id: str,
    role: UserRole = Depends(get_current_role),
    service: PortfolioService = Depends(get_portfolio_service),
):
    """Get one holding."""
    return InvestmentResponse.model_validate(service.get_investment(investment_id))


@router.patch("/{investment_id}", response_model=InvestmentResponse)
def edit_investment(
    investment_id: str,
    data: InvestmentUpdateRequest,
    role: UserRole = Depends(get_current_role),
    service: PortfolioService = Depends(get_portfolio_service),
):
    """Edit fields of a holding."""
    update = InvestmentUpdate(**data.model_dump(exclude_unset=True))
    return InvestmentResponse.model_validate(service.edit_investment(role, investment_id, update))


@router.delete("/{investment_id}", status_code=204)
def delete_investment(
    investment_id: str,
    role: UserRole = Depends(get_current_role),
    service: PortfolioService = Depends(get_portfolio_service),
):
    """Remove a holding without logging a sale."""
    service.delete_investment(role, investment_id)


@router.post("/{investment_id}/sell", response_model=SellResponse)
def sell_investment(
    investment_id: str,
    data: SellRequest,
    role: UserRole = Depends(get_current_role),
    service: PortfolioService = Depends(get_portfolio_service),
):
    """Sell part or all of a holding."""
    remaining = service.sell(role, investment_id, data.quantity, data.price)
    if remaining is None:
        return SellResponse(investment=None, closed=True)
    return SellResponse(investment=InvestmentResponse.model_validate(remaining), closed=False)


@router.post("/{investment_id}/price", response_model=InvestmentResponse)
def update_price(
    investment_id: str,
    data: PriceUpdateRequest,
    role: UserRole = Depends(get_current_role),
    service: PortfolioService = Depends(get_portfolio_service),
):
    """Set the current price manually."""
    return InvestmentResponse.model_validate(service.update_price(role, investment_id, data.price))
