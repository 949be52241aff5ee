"""Market data value objects returned by quote providers."""

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class MarketQuote:
    """Latest price for a symbol as reported by one provider."""

    symbol: str
    price: Decimal
    currency_code: str
    provider: str


__all__ = ["MarketQuote"]
