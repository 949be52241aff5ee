"""Currency conversion around a single base currency."""

import json
from decimal import Decimal
from typing import Mapping

from networth_engine.domain.models import ExchangeRateTable, Money
from networth_engine.domain.services.normalization import normalize_currency_code
from networth_engine.utils.decimal_utils import coerce_decimal


class CurrencyConverter:
    """Convert amounts between foreign currencies and the base currency.

    Rates express one unit of a foreign currency in the base currency. A
    currency without a rate converts as identity instead of failing; callers
    that need to surface this use ``is_missing_rate``.
    """

    def __init__(self, table: ExchangeRateTable) -> None:
        self._table = table

    @classmethod
    def from_table(cls, table: ExchangeRateTable) -> "CurrencyConverter":
        return cls(table)

    @classmethod
    def from_settings(cls, settings) -> "CurrencyConverter":
        """Build a converter from a settings provider.

        Args:
            settings: Object exposing ``base_currency_code`` and ``rates``.
        """
        return cls(
            ExchangeRateTable(
                base_currency=settings.base_currency_code,
                rates=settings.rates,
            )
        )

    @property
    def base_currency(self) -> str:
        return self._table.base_currency

    @property
    def rates(self) -> Mapping[str, Decimal]:
        return self._table.rates

    def has_rate(self, currency: str | None) -> bool:
        code = normalize_currency_code(currency)
        if code is None or code == self.base_currency:
            return True
        return code in self._table.rates

    def is_missing_rate(self, currency: str | None) -> bool:
        """Return True when converting ``currency`` would fall back to identity."""
        return not self.has_rate(currency)

    def convert_to_base(self, amount, source_currency: str | None) -> Money:
        """Convert an amount expressed in ``source_currency`` to the base.

        Args:
            amount: Decimal amount in the source currency.
            source_currency: ISO code; blank means already in base.

        Returns:
            Money: Amount in the base currency.
        """
        value = coerce_decimal(amount)
        code = normalize_currency_code(source_currency)
        if code is None or code == self.base_currency:
            return Money(value, self.base_currency)
        rate = self._table.rates.get(code)
        if rate is None:
            return Money(value, self.base_currency)
        return Money(value * rate, self.base_currency)

    def convert_from_base(self, amount, target_currency: str) -> Money:
        """Convert a base-currency amount into ``target_currency``.

        A missing or zero rate returns the amount unchanged.
        """
        value = coerce_decimal(amount)
        code = normalize_currency_code(target_currency) or self.base_currency
        if code == self.base_currency:
            return Money(value, code)
        rate = self._table.rates.get(code)
        if rate is None or rate == 0:
            return Money(value, code)
        return Money(value / rate, code)

    def convert(
        self,
        amount,
        source_currency: str | None,
        target_currency: str,
    ) -> Money:
        """Convert between two currencies pivoting through the base."""
        base_amount = self.convert_to_base(amount, source_currency)
        return self.convert_from_base(base_amount.amount, target_currency)

    def money_to_base(self, money: Money) -> Money:
        return self.convert_to_base(money.amount, money.currency_code)


def rebase_rates(
    rates: Mapping[str, Decimal],
    old_base: str,
    new_base: str,
) -> dict[str, Decimal]:
    """Re-express a rate table after the base currency changes.

    Args:
        rates: Rates relative to ``old_base``.
        old_base: Previous base currency.
        new_base: Incoming base currency.

    Returns:
        dict[str, Decimal]: Rates relative to ``new_base``. Empty when the
        table has no usable rate for ``new_base``.
    """
    old_code = normalize_currency_code(old_base)
    new_code = normalize_currency_code(new_base)
    normalized = {
        normalize_currency_code(code): coerce_decimal(rate)
        for code, rate in rates.items()
        if normalize_currency_code(code)
    }
    factor = normalized.pop(new_code, None)
    if old_code == new_code:
        return normalized
    if factor is None or factor == 0:
        return {}
    rebased = {code: rate / factor for code, rate in normalized.items()}
    rebased[old_code] = Decimal("1") / factor
    return rebased


def encode_rates(rates: Mapping[str, Decimal]) -> str:
    """Serialize rates as JSON with decimal strings."""
    payload = {
        normalize_currency_code(code): format(coerce_decimal(rate), "f")
        for code, rate in rates.items()
        if normalize_currency_code(code)
    }
    return json.dumps(payload, sort_keys=True)


def decode_rates(stored: str | None) -> dict[str, Decimal]:
    """Parse rates stored by ``encode_rates``; unreadable text yields ``{}``."""
    if not stored:
        return {}
    try:
        raw = json.loads(stored, parse_float=Decimal)
    except json.JSONDecodeError:
        return {}
    if not isinstance(raw, dict):
        return {}
    rates: dict[str, Decimal] = {}
    for code, value in raw.items():
        normalized = normalize_currency_code(code)
        if normalized is None:
            continue
        try:
            rates[normalized] = coerce_decimal(value)
        except ValueError:
            continue
    return rates


__all__ = [
    "CurrencyConverter",
    "rebase_rates",
    "encode_rates",
    "decode_rates",
]
