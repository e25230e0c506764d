"""In-memory repository implementations."""

from portfolio_tracker.repositories.memory.portfolio_repo import InMemoryPortfolioRepository

__all__ = [
    "InMemoryPortfolioRepository",
]
