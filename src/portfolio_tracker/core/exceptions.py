"""Application-level exceptions."""

from typing import Optional

from portfolio_tracker.domain.models.enums import FailureKind


class AppError(Exception):
    """Base exception for application errors."""

    def __init__(self, message: str, code: str = "APP_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)


class ValidationError(AppError):
    """Raised when input validation fails."""

    def __init__(self, message: str):
        super().__init__(message, code="VALIDATION_ERROR")


class InvalidSymbolError(ValidationError):
    """Raised for a malformed ticker symbol, before any network attempt."""

    def __init__(self, symbol: str):
        super().__init__(f"Invalid symbol: {symbol!r}")
        self.code = "INVALID_SYMBOL"
        self.symbol = symbol


class NotFoundError(AppError):
    """Raised when a requested resource is not found."""

    def __init__(self, resource: str, identifier: str):
        super().__init__(f"{resource} not found: {identifier}", code="NOT_FOUND")


class PermissionDeniedError(AppError):
    """Raised when the viewer role attempts an admin-only operation."""

    def __init__(self, action: str):
        super().__init__(f"Admin role required to {action}", code="PERMISSION_DENIED")


class InsufficientQuantityError(AppError):
    """Raised when attempting to sell more units than owned."""

    def __init__(self, symbol: str, requested: float, available: float):
        super().__init__(
            f"Insufficient quantity of {symbol}: requested {requested}, available {available}",
            code="INSUFFICIENT_QUANTITY",
        )


# =============================================================================
# PROVIDER FAILURES
# =============================================================================


class ProviderError(AppError):
    """Base class for a single quote provider's failure."""

    kind: FailureKind = FailureKind.UPSTREAM_ERROR

    def __init__(self, provider: str, message: str, symbol: Optional[str] = None):
        super().__init__(f"{provider}: {message}", code=self.kind.value)
        self.provider = provider
        self.symbol = symbol


class NotConfiguredError(ProviderError):
    """Provider has no credential; the resolver skips it."""

    kind = FailureKind.NOT_CONFIGURED

    def __init__(self, provider: str):
        super().__init__(provider, "no API credential configured")


class SymbolNotFoundError(ProviderError):
    """Provider has no usable data for the symbol."""

    kind = FailureKind.NOT_FOUND

    def __init__(self, provider: str, symbol: str, reason: str = "no data"):
        super().__init__(provider, f"{reason} for {symbol}", symbol=symbol)


class RateLimitedError(ProviderError):
    """Provider kept rejecting requests after the backoff retry."""

    kind = FailureKind.RATE_LIMITED

    def __init__(self, provider: str, symbol: Optional[str] = None):
        super().__init__(provider, "rate limited", symbol=symbol)


class UnreachableError(ProviderError):
    """Network error or timeout talking to the provider."""

    kind = FailureKind.UNREACHABLE


class UpstreamError(ProviderError):
    """Provider answered with a non-2xx status or an unusable payload."""

    kind = FailureKind.UPSTREAM_ERROR

    def __init__(self, provider: str, message: str, status_code: Optional[int] = None, symbol: Optional[str] = None):
        super().__init__(provider, message, symbol=symbol)
        self.status_code = status_code
