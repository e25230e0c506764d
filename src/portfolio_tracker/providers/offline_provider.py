"""Offline quote source used when the network or every provider is unavailable."""

import random
from dataclasses import dataclass
from typing import Optional

from portfolio_tracker.core.timezone import now_eastern
from portfolio_tracker.domain.symbols import classify, exchange_from_suffix
from portfolio_tracker.domain.views import OFFLINE_PROVIDER, Quote, SearchResult

MAX_SEARCH_RESULTS = 10

# Perturbation applied on every read: +/- 2%
MAX_DRIFT = 0.02


@dataclass(frozen=True)
class _Baseline:
    name: str
    price: float
    currency: str = "USD"


# Baseline prices for common symbols
_OFFLINE_QUOTES: dict[str, _Baseline] = {
    # US equities
    "AAPL": _Baseline("Apple Inc.", 185.64),
    "MSFT": _Baseline("Microsoft Corporation", 378.85),
    "GOOGL": _Baseline("Alphabet Inc.", 138.21),
    "TSLA": _Baseline("Tesla Inc.", 248.42),
    "AMZN": _Baseline("Amazon.com Inc.", 151.94),
    "META": _Baseline("Meta Platforms Inc.", 484.20),
    "NVDA": _Baseline("NVIDIA Corporation", 875.30),
    # European listings
    "ASML.AS": _Baseline("ASML Holding N.V.", 685.40, "EUR"),
    "SAP.DE": _Baseline("SAP SE", 178.95, "EUR"),
    "NESN.SW": _Baseline("Nestlé S.A.", 108.74, "CHF"),
    # Italian listings
    "ENI.MI": _Baseline("Eni S.p.A.", 14.25, "EUR"),
    "ENEL.MI": _Baseline("Enel S.p.A.", 6.84, "EUR"),
    "ISP.MI": _Baseline("Intesa Sanpaolo S.p.A.", 3.45, "EUR"),
    "UCG.MI": _Baseline("UniCredit S.p.A.", 35.82, "EUR"),
    "TIT.MI": _Baseline("Telecom Italia S.p.A.", 0.29, "EUR"),
    # Crypto
    "BTC": _Baseline("Bitcoin", 58429.50),
    "ETH": _Baseline("Ethereum", 3142.85),
    "BTC-EUR": _Baseline("Bitcoin EUR", 53890.00, "EUR"),
    "ETH-EUR": _Baseline("Ethereum EUR", 2898.40, "EUR"),
    # ETFs
    "SPY": _Baseline("SPDR S&P 500 ETF Trust", 512.43),
    "QQQ": _Baseline("Invesco QQQ Trust", 423.76),
    "VTI": _Baseline("Vanguard Total Stock Market ETF", 245.89),
    "VOO": _Baseline("Vanguard S&P 500 ETF", 471.20),
    "IWDA.L": _Baseline("iShares Core MSCI World UCITS ETF", 88.15),
    "SWDA.L": _Baseline("iShares Core MSCI World UCITS ETF GBP", 7450.00, "GBP"),
    "VWCE.DE": _Baseline("Vanguard FTSE All-World UCITS ETF", 112.36, "EUR"),
    # Italian government bonds
    "IT0005083057": _Baseline("BTP 3.25% 2046", 94.80, "EUR"),
    "IT0005438004": _Baseline("BTP 1.50% 2045", 68.35, "EUR"),
}


class OfflineQuoteSource:
    """
    Synthetic quotes from a fixed table for offline operation.

    Every read perturbs the baseline price within +/-2% so repeated reads move
    like a live market. Pass a seed for reproducible sequences.
    """

    def __init__(self, seed: Optional[int] = None):
        self._rng = random.Random(seed)

    def symbols(self) -> list[str]:
        return list(_OFFLINE_QUOTES)

    def get_offline(self, symbol: str) -> Optional[Quote]:
        """Return a perturbed quote for a known symbol, None otherwise."""
        key = symbol.strip().upper()
        baseline = _OFFLINE_QUOTES.get(key)
        if baseline is None:
            return None

        drift = (self._rng.random() - 0.5) * 2 * MAX_DRIFT
        price = round(baseline.price * (1 + drift), 2)
        # Sub-cent baselines must never round down to an absent price
        if price <= 0:
            price = baseline.price
        change = round(price - baseline.price, 2)
        change_pct = round((price - baseline.price) / baseline.price * 100, 2)

        return Quote(
            symbol=key,
            display_name=baseline.name,
            price=price,
            change_absolute=change,
            change_percent=change_pct,
            day_low=min(price, baseline.price),
            day_high=max(price, baseline.price),
            open_price=baseline.price,
            previous_close=baseline.price,
            currency=baseline.currency,
            exchange_name=exchange_from_suffix(key),
            provider=OFFLINE_PROVIDER,
            as_of=now_eastern(),
        )

    def search_offline(self, query: str) -> list[SearchResult]:
        """Case-insensitive substring match over symbol and name."""
        needle = query.strip().upper()
        if not needle:
            return []
        results = []
        for symbol, baseline in _OFFLINE_QUOTES.items():
            if needle in symbol or needle in baseline.name.upper():
                results.append(
                    SearchResult(
                        symbol=symbol,
                        name=baseline.name,
                        currency=baseline.currency,
                        exchange_label=exchange_from_suffix(symbol),
                        asset_type=classify(symbol, baseline.name),
                    )
                )
            if len(results) >= MAX_SEARCH_RESULTS:
                break
        return results
