"""Transaction log endpoint."""

from fastapi import APIRouter, Depends

from portfolio_tracker.api.deps import get_current_role, get_portfolio_service
from portfolio_tracker.api.schemas import TransactionResponse
from portfolio_tracker.domain.models import UserRole
from portfolio_tracker.services import PortfolioService

router = APIRouter(prefix="/transactions", tags=["transactions"])


@router.get("", response_model=list[TransactionResponse])
def list_transactions(
    role: UserRole = Depends(get_current_role),
    service: PortfolioService = Depends(get_portfolio_service),
):
    """List the transaction log, newest first."""
    return [TransactionResponse.model_validate(tx) for tx in service.list_transactions()]
