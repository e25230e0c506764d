"""
Ticker symbol rules: normalization, exchange suffixes and asset classification.

SUFFIX_TABLE is the single source for suffix -> currency/exchange mapping and
for the alternate spellings adapters retry with. Everything here is pure.
"""

import re
from dataclasses import dataclass
from typing import Optional

from portfolio_tracker.core.exceptions import InvalidSymbolError
from portfolio_tracker.domain.models.enums import AssetType

DEFAULT_CURRENCY = "USD"
DEFAULT_EXCHANGE = "NASDAQ"

_SYMBOL_RE = re.compile(r"^[A-Z0-9^][A-Z0-9.\-=^:]{0,19}$")
_ISIN_RE = re.compile(r"^[A-Z]{2}[A-Z0-9]{9}[0-9]$")


@dataclass(frozen=True)
class ExchangeSuffix:
    """One row of the suffix table."""

    suffix: str
    currency: str
    exchange: str
    asset_type_hint: Optional[AssetType] = None
    # Alternate spellings of the suffix, tried in order after the original
    variants: tuple[str, ...] = ()


SUFFIX_TABLE: tuple[ExchangeSuffix, ...] = (
    ExchangeSuffix(".L", "GBP", "London Stock Exchange", variants=("", ".LON", ":LN")),
    ExchangeSuffix(".LON", "GBP", "London Stock Exchange", variants=(".L", "", ":LN")),
    ExchangeSuffix(".PA", "EUR", "Euronext Paris", variants=("", ".PAR", ":FP")),
    ExchangeSuffix(".PAR", "EUR", "Euronext Paris", variants=(".PA", "")),
    ExchangeSuffix(".MI", "EUR", "Borsa Italiana", variants=("", ".MIL", ":IM")),
    ExchangeSuffix(".MIL", "EUR", "Borsa Italiana", variants=(".MI", "")),
    ExchangeSuffix(".DE", "EUR", "XETRA", variants=("", ".ETR", ".DEX", ":GR")),
    ExchangeSuffix(".ETR", "EUR", "XETRA", variants=(".DE", "")),
    ExchangeSuffix(".AS", "EUR", "Euronext Amsterdam", variants=("", ".AMS", ":NA")),
    ExchangeSuffix(".AMS", "EUR", "Euronext Amsterdam", variants=(".AS", "")),
    ExchangeSuffix(".SW", "CHF", "SIX Swiss Exchange", variants=("", ".SWX", ":SW")),
)

_ETF_WORDS = re.compile(r"\b(ETFS?|FUNDS?|INDEX|VANGUARD|ISHARES|SPDR|UCITS)\b")
_KNOWN_ETF_SYMBOLS = frozenset({"SPY", "QQQ", "VTI", "VOO", "IVV"})
_EUROPEAN_ETF_PREFIXES = ("VWCE", "IWDA", "SWDA", "CSPX", "VUSA", "EUNL", "XDWD", "VWRL")
_BOND_MARKETS = frozenset({"MTS", "MOT", "EUROTLX", "BOND"})


def normalize_symbol(raw: str) -> str:
    """Uppercase and validate a ticker; raises InvalidSymbolError when malformed."""
    if not isinstance(raw, str):
        raise InvalidSymbolError(repr(raw))
    symbol = raw.strip().upper()
    if not _SYMBOL_RE.match(symbol):
        raise InvalidSymbolError(raw)
    return symbol


def lookup_suffix(symbol: str) -> Optional[ExchangeSuffix]:
    """Return the suffix table row matching the symbol, if any."""
    upper = symbol.upper()
    for row in SUFFIX_TABLE:
        if upper.endswith(row.suffix) and len(upper) > len(row.suffix):
            return row
    return None


def split_suffix(symbol: str) -> tuple[str, str]:
    """Split into (base, suffix); suffix is empty for unmapped symbols."""
    upper = symbol.upper()
    row = lookup_suffix(upper)
    if row is None:
        return upper, ""
    return upper[: -len(row.suffix)], row.suffix


def currency_from_suffix(symbol: str) -> str:
    row = lookup_suffix(symbol)
    return row.currency if row else DEFAULT_CURRENCY


def exchange_from_suffix(symbol: str) -> str:
    row = lookup_suffix(symbol)
    return row.exchange if row else DEFAULT_EXCHANGE


def symbol_variants(symbol: str) -> list[str]:
    """
    Spellings to try for a suffixed symbol, the original first.

    Unsuffixed symbols only yield themselves.
    """
    upper = symbol.upper()
    row = lookup_suffix(upper)
    if row is None:
        return [upper]
    base = upper[: -len(row.suffix)]
    variants = [upper]
    for alt in row.variants:
        candidate = base + alt
        if candidate not in variants:
            variants.append(candidate)
    return variants


def looks_like_isin(code: str) -> bool:
    """Two letters, nine alphanumerics and a check digit."""
    return bool(_ISIN_RE.match((code or "").strip().upper()))


def is_valid_isin(code: str) -> bool:
    """ISIN shape plus the Luhn check digit."""
    code = (code or "").strip().upper()
    if not looks_like_isin(code):
        return False
    digits = "".join(str(int(ch, 36)) for ch in code)
    total = 0
    for i, ch in enumerate(reversed(digits)):
        n = int(ch)
        if i % 2 == 1:
            n *= 2
            if n > 9:
                n -= 9
        total += n
    return total % 10 == 0


def classify(symbol: str, description: str = "", exchange: Optional[str] = None) -> AssetType:
    """
    Categorize a security from its ticker, name and (optional) exchange.

    First match wins: ETF, crypto, bond, stock.
    """
    upper = (symbol or "").upper()
    desc = (description or "").upper()
    base, _ = split_suffix(upper)

    if (
        _ETF_WORDS.search(desc)
        or _ETF_WORDS.search(upper)
        or base in _KNOWN_ETF_SYMBOLS
        or base.startswith(_EUROPEAN_ETF_PREFIXES)
    ):
        return AssetType.ETF

    if "BTC" in upper or "ETH" in upper or upper.endswith("USDT") or "-USD" in upper or "-EUR" in upper:
        return AssetType.CRYPTO

    if looks_like_isin(base) or (exchange or "").strip().upper() in _BOND_MARKETS:
        return AssetType.BOND

    row = lookup_suffix(upper)
    if row is not None and row.asset_type_hint is not None:
        return row.asset_type_hint
    return AssetType.STOCK
