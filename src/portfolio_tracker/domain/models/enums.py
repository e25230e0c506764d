"""Enumerations for domain models."""

from enum import Enum


class AssetType(str, Enum):
    """Security categories recognised by the classifier."""

    STOCK = "stock"
    ETF = "etf"
    CRYPTO = "crypto"
    BOND = "bond"


class TransactionType(str, Enum):
    """Types of portfolio log entries."""

    BUY = "buy"
    SELL = "sell"
    PRICE_UPDATE = "price_update"


class UserRole(str, Enum):
    """The two users sharing the portfolio."""

    ADMIN = "admin"
    VIEWER = "viewer"


class FailureKind(str, Enum):
    """Why a quote provider could not answer."""

    NOT_CONFIGURED = "NOT_CONFIGURED"
    NOT_FOUND = "NOT_FOUND"
    RATE_LIMITED = "RATE_LIMITED"
    UNREACHABLE = "UNREACHABLE"
    UPSTREAM_ERROR = "UPSTREAM_ERROR"
