"""Domain services for net worth aggregates."""

from collections.abc import Iterable, Mapping
from decimal import Decimal
from logging import Logger

from networth_engine.domain.models import (
    HoldingLot,
    ManualAsset,
    ManualLiability,
    Money,
    NetWorthTotals,
    PriceSnapshot,
    Wallet,
)
from networth_engine.domain.policies import (
    is_crypto_asset_type,
    is_receivable_kind,
)
from networth_engine.domain.services.fx import CurrencyConverter
from networth_engine.domain.services.validation import validate_balance_sign


class _Conversions:
    """Convert amounts to base while tracking fail-open currencies."""

    def __init__(self, converter: CurrencyConverter, logger: Logger) -> None:
        self._converter = converter
        self._logger = logger
        self.missing: set[str] = set()

    def to_base(self, money: Money) -> Decimal:
        code = money.currency_code
        if self._converter.is_missing_rate(code) and code not in self.missing:
            self.missing.add(code)
            self._logger.warning(
                f"Missing FX rate for {code} to "
                f"{self._converter.base_currency}; converting as identity"
            )
        return self._converter.money_to_base(money).amount


def compute_net_worth_totals(
    wallets: Iterable[Wallet],
    manual_assets: Iterable[ManualAsset],
    liabilities: Iterable[ManualLiability],
    holdings: Iterable[HoldingLot],
    latest_prices: Mapping[str, PriceSnapshot],
    *,
    converter: CurrencyConverter,
    logger: Logger,
    skipped_rows: int = 0,
) -> NetWorthTotals:
    """Compute net worth totals in the converter's base currency.

    An entity that cannot be converted is skipped with a warning instead of
    aborting the whole computation.

    Args:
        wallets: Wallets; only those included in net worth count.
        manual_assets: Manually valued assets.
        liabilities: Manually tracked liabilities.
        holdings: Holding lots with their asset reference.
        latest_prices: Latest price snapshot per investment asset id.
        converter: Converter resolved once for the whole computation.
        logger: Logger used for warnings.
        skipped_rows: Entities already left out because they failed to
            load; added to ``skipped_entities``.

    Returns:
        NetWorthTotals: Bucketed totals in the base currency.
    """
    conversions = _Conversions(converter, logger)
    zero = Decimal("0")
    skipped = skipped_rows

    wallet_assets = zero
    for wallet in wallets:
        if not wallet.include_in_net_worth:
            continue
        try:
            wallet_assets += conversions.to_base(wallet.current_balance)
        except (ArithmeticError, ValueError) as exc:
            skipped += 1
            logger.warning(f"Skipping wallet {wallet.identifier}: {exc}")

    manual_total = zero
    core_assets = zero
    tangible_assets = zero
    volatile_assets = zero
    receivables = zero
    for asset in manual_assets:
        try:
            value = conversions.to_base(asset.value)
        except (ArithmeticError, ValueError) as exc:
            skipped += 1
            logger.warning(f"Skipping manual asset {asset.identifier}: {exc}")
            continue
        validate_balance_sign("manual asset", asset.identifier, value, logger)
        manual_total += value
        if asset.include_in_core:
            core_assets += value
        if asset.include_in_tangible:
            tangible_assets += value
        if asset.volatility:
            volatile_assets += value
        if is_receivable_kind(asset.kind):
            receivables += value

    total_liabilities = zero
    for liability in liabilities:
        try:
            balance = conversions.to_base(liability.balance)
        except (ArithmeticError, ValueError) as exc:
            skipped += 1
            logger.warning(
                f"Skipping liability {liability.identifier}: {exc}"
            )
            continue
        validate_balance_sign(
            "liability",
            liability.identifier,
            balance,
            logger,
        )
        total_liabilities += balance

    stock_investments = zero
    crypto_investments = zero
    unpriced = 0
    for lot in holdings:
        snapshot = latest_prices.get(lot.asset.identifier)
        if snapshot is None:
            unpriced += 1
            continue
        try:
            value = conversions.to_base(snapshot.price.times(lot.quantity))
        except (ArithmeticError, ValueError) as exc:
            skipped += 1
            logger.warning(f"Skipping holding lot {lot.identifier}: {exc}")
            continue
        if is_crypto_asset_type(lot.asset.asset_type):
            crypto_investments += value
        else:
            stock_investments += value
    if unpriced:
        logger.info(f"Left {unpriced} holding lots without a price out of totals")

    total_assets = (
        wallet_assets + manual_total + stock_investments + crypto_investments
    )
    return NetWorthTotals(
        total_assets=total_assets,
        total_liabilities=total_liabilities,
        net_worth=total_assets - total_liabilities,
        core_net_worth=core_assets - total_liabilities,
        tangible_net_worth=tangible_assets - total_liabilities,
        volatile_assets=volatile_assets,
        wallet_assets=wallet_assets,
        manual_assets=manual_total,
        receivables=receivables,
        stock_investments=stock_investments,
        crypto_investments=crypto_investments,
        currency_code=converter.base_currency,
        missing_rates=tuple(sorted(conversions.missing)),
        skipped_entities=skipped,
    )


__all__ = ["compute_net_worth_totals"]
