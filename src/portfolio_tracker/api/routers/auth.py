"""Login endpoint: maps a shared password to a role."""

from fastapi import APIRouter, Depends, HTTPException

from portfolio_tracker.api.deps import get_portfolio_service
from portfolio_tracker.api.schemas import LoginRequest, LoginResponse
from portfolio_tracker.services import PortfolioService

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=LoginResponse)
def login(data: LoginRequest, service: PortfolioService = Depends(get_portfolio_service)):
    """Return the role for a password; 401 when it matches neither role."""
    role = service.authenticate(data.password)
    if role is None:
        raise HTTPException(status_code=401, detail="Invalid password")
    return LoginResponse(role=role)
