"""Repository protocol definitions (interfaces)."""

from portfolio_tracker.repositories.protocols.portfolio_repo import PortfolioRepository

__all__ = [
    "PortfolioRepository",
]
