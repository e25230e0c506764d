"""View models for quote resolution outputs."""

import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from portfolio_tracker.domain.models.enums import AssetType, FailureKind

OFFLINE_PROVIDER = "Offline"
UNAVAILABLE_PROVIDER = "Unavailable"


@dataclass
class Quote:
    """
    Normalized price and metadata for one symbol at one point in time.

    A quote whose price is not positive carries no price at all; callers must
    check has_price (or is_live) before using it.
    """

    symbol: str
    display_name: str
    price: float
    change_absolute: float = 0.0
    change_percent: float = 0.0
    day_low: float = 0.0
    day_high: float = 0.0
    open_price: float = 0.0
    previous_close: float = 0.0
    currency: str = "USD"
    exchange_name: str = ""
    market_cap: Optional[float] = None
    provider: str = ""
    error_note: Optional[str] = None
    as_of: Optional[datetime] = None

    @property
    def has_price(self) -> bool:
        return math.isfinite(self.price) and self.price > 0

    @property
    def is_live(self) -> bool:
        """True for a positive price from a provider, without caveats."""
        return self.has_price and self.error_note is None


@dataclass
class SearchResult:
    """One match from a symbol search."""

    symbol: str
    name: str
    currency: str
    exchange_label: str
    asset_type: AssetType


@dataclass
class CacheEntry:
    """A resolved quote and when it was fetched."""

    quote: Quote
    fetched_at_epoch_ms: int


@dataclass
class ProviderAttempt:
    """Outcome of one adapter attempt during a resolution."""

    provider: str
    failure: Optional[FailureKind] = None
    detail: str = ""

    @property
    def succeeded(self) -> bool:
        return self.failure is None


@dataclass
class ProviderStatus:
    """Which providers can be used and whether the network is reachable."""

    configured_providers: list[str] = field(default_factory=list)
    online: bool = False


@dataclass
class SymbolValidation:
    """Whether a symbol resolves to a priced security, with what was found."""

    symbol: str
    valid: bool
    name: Optional[str] = None
    exchange: Optional[str] = None
    price: Optional[float] = None
    error: Optional[str] = None
