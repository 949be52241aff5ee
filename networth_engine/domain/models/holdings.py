"""Domain models for wallets, manual entries and investment holdings."""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal

from networth_engine.domain.models.money import Money


@dataclass(frozen=True)
class Wallet:
    """Cash wallet whose current balance counts toward net worth."""

    identifier: str
    name: str
    current_balance: Money
    include_in_net_worth: bool = True
    archived: bool = False

    @property
    def currency_code(self) -> str:
        return self.current_balance.currency_code


@dataclass(frozen=True)
class ManualInvestmentDetails:
    """Position data carried by a manual asset of the investment kind."""

    quantity: Decimal
    cost_per_unit: Decimal
    market_price: Money | None = None
    market_price_updated_at: datetime | None = None
    contract_multiplier: Decimal | None = None
    funding_wallet_id: str | None = None
    coin_id: str | None = None
    symbol: str | None = None


@dataclass(frozen=True)
class ManualAsset:
    """Manually valued asset with net worth classification flags.

    Attributes:
        kind: Free-form type tag (tangible, receivable, investment, ...).
        include_in_core: Counts toward core net worth.
        include_in_tangible: Counts toward tangible net worth.
        volatility: Counts toward volatile assets.
    """

    identifier: str
    name: str
    kind: str
    value: Money
    include_in_core: bool = True
    include_in_tangible: bool = True
    volatility: bool = False
    investment: ManualInvestmentDetails | None = None


@dataclass(frozen=True)
class ManualLiability:
    """Manually tracked debt, stored as a positive balance."""

    identifier: str
    name: str
    kind: str
    balance: Money


@dataclass(frozen=True)
class InvestmentAsset:
    """Tradable instrument shared by holding lots."""

    identifier: str
    symbol: str
    name: str
    asset_type: str
    currency_code: str


@dataclass(frozen=True)
class PriceSnapshot:
    """Immutable price observation for an investment asset.

    Attributes:
        snapshot_id: Insertion sequence, used to break timestamp ties.
        provider: Quote source that produced the price.
    """

    asset_id: str
    price: Money
    provider: str
    timestamp: datetime
    snapshot_id: int | None = None


@dataclass(frozen=True)
class InvestmentAccount:
    """Brokerage or exchange account holding lots."""

    identifier: str
    name: str
    account_type: str
    currency_code: str
    institution: str | None = None
    include_in_net_worth: bool = True


@dataclass(frozen=True)
class HoldingLot:
    """Quantity of an asset bought together at one cost per unit."""

    identifier: str
    account_id: str
    asset: InvestmentAsset
    quantity: Decimal
    cost_per_unit: Money
    acquired_date: date


@dataclass(frozen=True)
class HoldingSale:
    """Record of a quantity sold out of a single lot."""

    identifier: str
    lot_id: str
    quantity: Decimal
    price: Money
    proceeds: Money
    sold_at: datetime
    wallet_name: str | None = None


@dataclass(frozen=True)
class HoldingValuation:
    """Market valuation of a single lot.

    Attributes:
        percent_change: Gain over cost in percent; None when the cost basis
            is zero.
        latest_price: Price used for the market value, None when the lot is
            valued at cost.
    """

    lot_id: str
    quantity: Decimal
    cost_basis: Money
    market_value: Money
    unrealized_gain: Money
    percent_change: Decimal | None
    latest_price: Money | None = None

    @property
    def is_priced(self) -> bool:
        return self.latest_price is not None


@dataclass(frozen=True)
class InvestmentAccountValuation:
    """Aggregated valuation of every lot held in an account."""

    account: InvestmentAccount
    holdings: list[HoldingValuation]
    total_cost: Decimal
    market_value: Decimal
    unrealized_gain: Decimal
    gain_percent: Decimal | None


@dataclass(frozen=True)
class LotSaleOutcome:
    """Result of selling from one lot.

    Attributes:
        remaining_lot: Decremented lot, or None when the sale exhausted it.
    """

    sale: HoldingSale
    remaining_lot: HoldingLot | None

    @property
    def lot_removed(self) -> bool:
        return self.remaining_lot is None


__all__ = [
    "Wallet",
    "ManualInvestmentDetails",
    "ManualAsset",
    "ManualLiability",
    "InvestmentAsset",
    "PriceSnapshot",
    "InvestmentAccount",
    "HoldingLot",
    "HoldingSale",
    "HoldingValuation",
    "InvestmentAccountValuation",
    "LotSaleOutcome",
]
