"""Core utilities and shared functionality."""

from portfolio_tracker.core.timezone import (
    now_eastern,
    to_eastern,
    EASTERN_TZ,
)
from portfolio_tracker.core.exceptions import (
    AppError,
    ValidationError,
    InvalidSymbolError,
    NotFoundError,
    PermissionDeniedError,
    InsufficientQuantityError,
    ProviderError,
    NotConfiguredError,
    SymbolNotFoundError,
    RateLimitedError,
    UnreachableError,
    UpstreamError,
)

__all__ = [
    "now_eastern",
    "to_eastern",
    "EASTERN_TZ",
    "AppError",
    "ValidationError",
    "InvalidSymbolError",
    "NotFoundError",
    "PermissionDeniedError",
    "InsufficientQuantityError",
    "ProviderError",
    "NotConfiguredError",
    "SymbolNotFoundError",
    "RateLimitedError",
    "UnreachableError",
    "UpstreamError",
]
