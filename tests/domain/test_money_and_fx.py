"""Tests for Money and the currency converter."""

from decimal import Decimal
from types import SimpleNamespace

import pytest

from networth_engine.domain.errors import CurrencyMismatchError
from networth_engine.domain.models import ExchangeRateTable, Money
from networth_engine.domain.services.fx import (
    CurrencyConverter,
    decode_rates,
    encode_rates,
    rebase_rates,
)


def _converter(base="USD", **rates) -> CurrencyConverter:
    return CurrencyConverter.from_table(
        ExchangeRateTable(
            base_currency=base,
            rates={code: Decimal(value) for code, value in rates.items()},
        )
    )


def test_money_coerces_floats_through_str() -> None:
    """Float amounts should not leak binary representation errors."""
    money = Money(0.1, "usd")

    assert money.amount == Decimal("0.1")
    assert money.currency_code == "USD"


def test_money_rejects_mixed_currency_arithmetic() -> None:
    """Adding different currencies should raise."""
    with pytest.raises(CurrencyMismatchError):
        Money(Decimal("1"), "USD") + Money(Decimal("1"), "EUR")


def test_money_arithmetic_in_same_currency() -> None:
    total = Money(Decimal("10.50"), "EUR") - Money(Decimal("0.50"), "EUR")

    assert total == Money(Decimal("10.00"), "EUR")
    assert (-total).amount == Decimal("-10.00")
    assert total.times(Decimal("3")).amount == Decimal("30.00")


def test_convert_identity_for_base_blank_and_missing() -> None:
    """Base, blank and unknown currencies should convert as identity."""
    converter = _converter(EUR="1.10")

    assert converter.convert_to_base(Decimal("5"), "usd").amount == Decimal("5")
    assert converter.convert_to_base(Decimal("5"), "").amount == Decimal("5")
    assert converter.convert_to_base(Decimal("5"), None).amount == Decimal("5")
    assert converter.convert_to_base(Decimal("5"), "JPY").amount == Decimal("5")
    assert converter.is_missing_rate("JPY") is True
    assert converter.is_missing_rate("eur") is False
    assert converter.has_rate("USD") is True


def test_convert_to_base_multiplies_by_rate() -> None:
    converter = _converter(EUR="1.10")

    result = converter.convert_to_base(Decimal("100"), "EUR")

    assert result == Money(Decimal("110.00"), "USD")


def test_round_trip_through_base_returns_original_amount() -> None:
    """convert_from_base(convert_to_base(x)) should give back x."""
    converter = _converter(EUR="1.25")

    to_base = converter.convert_to_base(Decimal("80"), "EUR")
    back = converter.convert_from_base(to_base.amount, "EUR")

    assert back == Money(Decimal("80"), "EUR")


def test_convert_from_base_with_zero_rate_is_identity() -> None:
    """A zero rate should never divide."""
    converter = _converter(ZZZ="0")

    assert converter.convert_from_base(Decimal("12"), "ZZZ").amount == Decimal("12")


def test_convert_pivots_through_base() -> None:
    converter = _converter(EUR="1.20", GBP="1.50")

    result = converter.convert(Decimal("100"), "GBP", "EUR")

    assert result == Money(Decimal("125"), "EUR")


def test_from_settings_reads_base_and_rates() -> None:
    settings = SimpleNamespace(
        base_currency_code="eur",
        rates={"usd": Decimal("0.9")},
    )

    converter = CurrencyConverter.from_settings(settings)

    assert converter.base_currency == "EUR"
    assert converter.rates == {"USD": Decimal("0.9")}


def test_rate_table_is_immutable_copy() -> None:
    source = {"EUR": Decimal("1.1")}
    table = ExchangeRateTable(base_currency="USD", rates=source)
    source["EUR"] = Decimal("9")

    assert table.rates["EUR"] == Decimal("1.1")
    with pytest.raises(TypeError):
        table.rates["GBP"] = Decimal("1.3")


def test_rebase_keeps_conversions_consistent() -> None:
    """After rebasing, converting between two currencies gives the same result."""
    rates = {"EUR": Decimal("1.25"), "GBP": Decimal("1.50")}
    before = _converter("USD", **{k: str(v) for k, v in rates.items()})

    rebased = rebase_rates(rates, "USD", "EUR")
    after = CurrencyConverter.from_table(
        ExchangeRateTable(base_currency="EUR", rates=rebased)
    )

    assert "EUR" not in rebased
    assert rebased["USD"] == Decimal("0.8")
    assert rebased["GBP"] == Decimal("1.2")
    assert after.convert(Decimal("10"), "GBP", "USD") == before.convert(
        Decimal("10"),
        "GBP",
        "USD",
    )


def test_rebase_without_factor_empties_table() -> None:
    """Switching to a base without a rate should not keep stale rates."""
    assert rebase_rates({"EUR": Decimal("1.1")}, "USD", "CHF") == {}


def test_rebase_to_same_base_keeps_rates() -> None:
    rates = {"EUR": Decimal("1.1")}

    assert rebase_rates(rates, "usd", "USD") == rates


def test_encode_and_decode_rates() -> None:
    encoded = encode_rates({"eur": Decimal("1.10"), "GBP": Decimal("1.5")})

    assert encoded == '{"EUR": "1.10", "GBP": "1.5"}'
    assert decode_rates(encoded) == {
        "EUR": Decimal("1.10"),
        "GBP": Decimal("1.5"),
    }


@pytest.mark.parametrize("stored", [None, "", "not json", "[1, 2]"])
def test_decode_rates_invalid_payload_yields_empty(stored) -> None:
    assert decode_rates(stored) == {}
