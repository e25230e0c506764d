"""API routers package."""

from portfolio_tracker.api.routers.auth import router as auth_router
from portfolio_tracker.api.routers.quotes import router as quotes_router
from portfolio_tracker.api.routers.investments import router as investments_router
from portfolio_tracker.api.routers.transactions import router as transactions_router

__all__ = [
    "auth_router",
    "quotes_router",
    "investments_router",
    "transactions_router",
]
