"""Money and exchange-rate value objects."""

from dataclasses import dataclass, field
from decimal import Decimal
from types import MappingProxyType
from typing import Mapping

from networth_engine.domain.errors import CurrencyMismatchError
from networth_engine.utils.decimal_utils import coerce_decimal


@dataclass(frozen=True)
class Money:
    """Exact decimal amount tagged with an ISO currency code.

    Attributes:
        amount: Decimal amount, never a float.
        currency_code: Upper-cased ISO 4217 code.
    """

    amount: Decimal
    currency_code: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "amount", coerce_decimal(self.amount))
        object.__setattr__(
            self,
            "currency_code",
            (self.currency_code or "").strip().upper(),
        )

    @classmethod
    def zero(cls, currency_code: str) -> "Money":
        return cls(Decimal("0"), currency_code)

    def __add__(self, other: "Money") -> "Money":
        self._check_currency(other)
        return Money(self.amount + other.amount, self.currency_code)

    def __sub__(self, other: "Money") -> "Money":
        self._check_currency(other)
        return Money(self.amount - other.amount, self.currency_code)

    def __neg__(self) -> "Money":
        return Money(-self.amount, self.currency_code)

    def times(self, factor: Decimal) -> "Money":
        """Return the amount multiplied by a decimal factor."""
        return Money(self.amount * coerce_decimal(factor), self.currency_code)

    def is_zero(self) -> bool:
        return self.amount == 0

    def _check_currency(self, other: "Money") -> None:
        if not isinstance(other, Money):
            raise TypeError(f"Expected Money, got {type(other).__name__}")
        if other.currency_code != self.currency_code:
            raise CurrencyMismatchError(
                f"Cannot combine {self.currency_code} with {other.currency_code}"
            )


@dataclass(frozen=True)
class ExchangeRateTable:
    """Rates expressing one unit of a foreign currency in the base currency.

    The base currency is implicitly 1 and never needs an entry.
    """

    base_currency: str
    rates: Mapping[str, Decimal] = field(default_factory=dict)

    def __post_init__(self) -> None:
        base = (self.base_currency or "").strip().upper()
        normalized = {
            code.strip().upper(): coerce_decimal(rate)
            for code, rate in dict(self.rates or {}).items()
            if code and code.strip()
        }
        object.__setattr__(self, "base_currency", base)
        object.__setattr__(self, "rates", MappingProxyType(normalized))


__all__ = ["Money", "ExchangeRateTable"]
