"""Dependency injection for FastAPI."""

from typing import Optional

from fastapi import Depends, Header, HTTPException, Request

from portfolio_tracker.app_context import AppContext
from portfolio_tracker.domain.models import UserRole
from portfolio_tracker.services import PortfolioService, QuoteResolver

PASSWORD_HEADER = "X-Portfolio-Password"


def get_context(request: Request) -> AppContext:
    """Provide the AppContext the app was created with."""
    return request.app.state.context


def get_resolver(context: AppContext = Depends(get_context)) -> QuoteResolver:
    """Provide QuoteResolver instance."""
    return context.resolver


def get_portfolio_service(context: AppContext = Depends(get_context)) -> PortfolioService:
    """Provide PortfolioService instance."""
    return context.portfolio


def get_current_role(
    password: Optional[str] = Header(default=None, alias=PASSWORD_HEADER),
    service: PortfolioService = Depends(get_portfolio_service),
) -> UserRole:
    """Resolve the caller's role from the shared password header."""
    role = service.authenticate(password)
    if role is None:
        raise HTTPException(status_code=401, detail="Missing or unknown password")
    return role
