"""Domain exceptions for valuation, holdings and market data."""


class CurrencyMismatchError(ValueError):
    """Raised when Money of different currencies is combined."""


class InvalidQuantityError(ValueError):
    """Raised when a lot operation receives a non-positive quantity."""


class InsufficientQuantityError(ValueError):
    """Raised when a sale exceeds the quantity held in the selected lot."""

    def __init__(self, lot_id: str, requested, available) -> None:
        super().__init__(
            f"Cannot sell {requested} from lot {lot_id}: "
            f"only {available} available"
        )
        self.lot_id = lot_id
        self.requested = requested
        self.available = available


class LotNotFoundError(LookupError):
    """Raised when a sale references an unknown holding lot."""


class ConcurrentModificationError(RuntimeError):
    """Raised when a compare-and-set write loses against another writer."""


class QuoteProviderError(RuntimeError):
    """Raised when an upstream quote provider cannot deliver prices."""

    def __init__(self, provider: str, message: str) -> None:
        super().__init__(f"{provider}: {message}")
        self.provider = provider


class ExchangeRateSourceError(RuntimeError):
    """Raised when the exchange rate source returns an unusable payload."""


__all__ = [
    "CurrencyMismatchError",
    "InvalidQuantityError",
    "InsufficientQuantityError",
    "LotNotFoundError",
    "ConcurrentModificationError",
    "QuoteProviderError",
    "ExchangeRateSourceError",
]
