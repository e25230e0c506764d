"""Domain models package."""

from portfolio_tracker.domain.models.enums import AssetType, TransactionType, UserRole, FailureKind
from portfolio_tracker.domain.models.investment import Investment, Transaction

__all__ = [
    "AssetType",
    "TransactionType",
    "UserRole",
    "FailureKind",
    "Investment",
    "Transaction",
]
