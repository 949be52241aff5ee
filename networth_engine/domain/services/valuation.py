"""Lot valuation and single-lot sale rules."""

from datetime import datetime
from decimal import Decimal
from typing import Iterable
import uuid

from networth_engine.domain.errors import (
    CurrencyMismatchError,
    InsufficientQuantityError,
    InvalidQuantityError,
    LotNotFoundError,
)
from networth_engine.domain.models import (
    HoldingLot,
    HoldingSale,
    HoldingValuation,
    InvestmentAccount,
    InvestmentAccountValuation,
    LotSaleOutcome,
    ManualInvestmentDetails,
    Money,
)
from networth_engine.domain.services.fx import CurrencyConverter
from networth_engine.domain.services.normalization import normalize_currency_code
from networth_engine.utils.decimal_utils import coerce_decimal

_HUNDRED = Decimal("100")


def percent_of(gain: Decimal, base: Decimal) -> Decimal | None:
    """Return ``gain / base * 100`` or None when the base is zero."""
    if base == 0:
        return None
    return (gain / base) * _HUNDRED


def in_currency(
    money: Money,
    currency_code: str,
    converter: CurrencyConverter | None = None,
) -> Money:
    """Return ``money`` expressed in ``currency_code``.

    Raises:
        CurrencyMismatchError: If the currencies differ and no converter is
            given.
    """
    if money.currency_code == currency_code:
        return money
    if converter is None:
        raise CurrencyMismatchError(
            f"Cannot express {money.currency_code} in {currency_code} "
            "without a currency converter"
        )
    return converter.convert(money.amount, money.currency_code, currency_code)


def valuate_lot(
    lot: HoldingLot,
    latest_price: Money | None = None,
    converter: CurrencyConverter | None = None,
) -> HoldingValuation:
    """Value a lot against the latest known price of its asset.

    Without a price the lot is valued at cost, so the gain is zero. A price
    quoted in another currency is first converted into the cost currency.

    Args:
        lot: Holding lot to value.
        latest_price: Latest price snapshot price, if any.
        converter: Converter used when the price and cost currencies differ.

    Returns:
        HoldingValuation: Cost basis, market value, gain and percent change,
        all in the cost currency.

    Raises:
        CurrencyMismatchError: If the price currency differs from the cost
            currency and no converter is given.
    """
    cost_basis = lot.cost_per_unit.times(lot.quantity)
    price = None
    if latest_price is None:
        market_value = cost_basis
    else:
        price = in_currency(latest_price, cost_basis.currency_code, converter)
        market_value = price.times(lot.quantity)
    gain = market_value - cost_basis
    return HoldingValuation(
        lot_id=lot.identifier,
        quantity=lot.quantity,
        cost_basis=cost_basis,
        market_value=market_value,
        unrealized_gain=gain,
        percent_change=percent_of(gain.amount, cost_basis.amount),
        latest_price=price,
    )


def sell_from_lot(
    lot: HoldingLot,
    quantity,
    sale_price: Money,
    sold_at: datetime,
    wallet_name: str | None = None,
) -> LotSaleOutcome:
    """Sell part or all of a lot.

    Args:
        lot: Lot selected by the caller.
        quantity: Quantity to sell; must be positive and at most the lot
            quantity.
        sale_price: Price per unit.
        sold_at: Sale timestamp.
        wallet_name: Optional wallet credited with the proceeds.

    Returns:
        LotSaleOutcome: Sale record and the remaining lot, None when the
        sale exhausted it.

    Raises:
        InvalidQuantityError: If the quantity is not positive.
        InsufficientQuantityError: If the quantity exceeds the lot.
    """
    sold = coerce_decimal(quantity)
    if sold <= 0:
        raise InvalidQuantityError(f"Sale quantity must be positive: {sold}")
    if sold > lot.quantity:
        raise InsufficientQuantityError(lot.identifier, sold, lot.quantity)

    sale = HoldingSale(
        identifier=str(uuid.uuid4()),
        lot_id=lot.identifier,
        quantity=sold,
        price=sale_price,
        proceeds=sale_price.times(sold),
        sold_at=sold_at,
        wallet_name=wallet_name,
    )
    remaining = lot.quantity - sold
    if remaining == 0:
        return LotSaleOutcome(sale=sale, remaining_lot=None)
    return LotSaleOutcome(
        sale=sale,
        remaining_lot=HoldingLot(
            identifier=lot.identifier,
            account_id=lot.account_id,
            asset=lot.asset,
            quantity=remaining,
            cost_per_unit=lot.cost_per_unit,
            acquired_date=lot.acquired_date,
        ),
    )


class LotBook:
    """Lots indexed by identifier; sales always name the lot explicitly."""

    def __init__(self, lots: Iterable[HoldingLot] = ()) -> None:
        self._lots: dict[str, HoldingLot] = {}
        for lot in lots:
            self.add(lot)

    def add(self, lot: HoldingLot) -> None:
        if lot.quantity <= 0:
            raise InvalidQuantityError(
                f"Lot {lot.identifier} must hold a positive quantity"
            )
        self._lots[lot.identifier] = lot

    def get(self, lot_id: str) -> HoldingLot:
        try:
            return self._lots[lot_id]
        except KeyError as exc:
            raise LotNotFoundError(f"Unknown holding lot: {lot_id}") from exc

    def lots(self) -> list[HoldingLot]:
        return sorted(
            self._lots.values(),
            key=lambda lot: (lot.acquired_date, lot.identifier),
        )

    def sell(
        self,
        lot_id: str,
        quantity,
        sale_price: Money,
        sold_at: datetime,
        wallet_name: str | None = None,
    ) -> LotSaleOutcome:
        """Sell from the named lot and update the book in place."""
        outcome = sell_from_lot(
            self.get(lot_id),
            quantity,
            sale_price,
            sold_at,
            wallet_name=wallet_name,
        )
        if outcome.remaining_lot is None:
            del self._lots[lot_id]
        else:
            self._lots[lot_id] = outcome.remaining_lot
        return outcome

    def __len__(self) -> int:
        return len(self._lots)

    def __contains__(self, lot_id: object) -> bool:
        return lot_id in self._lots


def summarize_account(
    account: InvestmentAccount,
    valuations: list[HoldingValuation],
    converter: CurrencyConverter | None = None,
) -> InvestmentAccountValuation:
    """Aggregate lot valuations of one account in the account currency.

    Raises:
        CurrencyMismatchError: If a lot is held in another currency and no
            converter is given.
    """
    currency = normalize_currency_code(account.currency_code) or (
        valuations[0].cost_basis.currency_code if valuations else ""
    )
    total_cost = Money.zero(currency)
    market_value = Money.zero(currency)
    for valuation in valuations:
        total_cost += in_currency(valuation.cost_basis, currency, converter)
        market_value += in_currency(valuation.market_value, currency, converter)
    gain = market_value - total_cost
    return InvestmentAccountValuation(
        account=account,
        holdings=valuations,
        total_cost=total_cost.amount,
        market_value=market_value.amount,
        unrealized_gain=gain.amount,
        gain_percent=percent_of(gain.amount, total_cost.amount),
    )


def manual_investment_market_value(
    details: ManualInvestmentDetails,
) -> Money | None:
    """Return quantity x market price x contract multiplier, if priced."""
    if details.market_price is None:
        return None
    multiplier = details.contract_multiplier or Decimal("1")
    return details.market_price.times(details.quantity * multiplier)


__all__ = [
    "percent_of",
    "in_currency",
    "valuate_lot",
    "sell_from_lot",
    "LotBook",
    "summarize_account",
    "manual_investment_market_value",
]
