"""Domain models for net worth aggregates."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum

from networth_engine.domain.models.periods import PeriodKey


@dataclass(frozen=True)
class NetWorthTotals:
    """Net worth figures expressed in the base currency.

    Bucket sums are not exclusive: one manual asset may count toward core,
    tangible and volatile figures at the same time.

    Attributes:
        total_assets: Wallets + manual assets + investments.
        total_liabilities: Sum of manual liabilities.
        net_worth: Assets minus liabilities.
        core_net_worth: Core-flagged manual assets minus liabilities.
        tangible_net_worth: Tangible-flagged manual assets minus liabilities.
        volatile_assets: Manual assets flagged as volatile.
        wallet_assets: Wallets included in net worth.
        manual_assets: All manual assets.
        receivables: Manual assets whose kind denotes a receivable.
        stock_investments: Priced lots of non-crypto assets.
        crypto_investments: Priced lots of crypto assets.
        currency_code: Base currency used for the computation.
        missing_rates: Currencies converted as identity for lack of a rate.
        skipped_entities: Entities left out because they failed to convert.
    """

    total_assets: Decimal
    total_liabilities: Decimal
    net_worth: Decimal
    core_net_worth: Decimal
    tangible_net_worth: Decimal
    volatile_assets: Decimal
    wallet_assets: Decimal
    manual_assets: Decimal
    receivables: Decimal
    stock_investments: Decimal
    crypto_investments: Decimal
    currency_code: str
    missing_rates: tuple[str, ...] = ()
    skipped_entities: int = 0

    @property
    def total_investments(self) -> Decimal:
        return self.stock_investments + self.crypto_investments


@dataclass(frozen=True)
class NetWorthSnapshot:
    """Persisted copy of the totals for one calendar month."""

    identifier: str
    timestamp: datetime
    period_key: PeriodKey
    currency_code: str
    total_assets: Decimal
    total_liabilities: Decimal
    net_worth: Decimal
    core_net_worth: Decimal
    tangible_net_worth: Decimal
    volatile_assets: Decimal
    wallet_assets: Decimal
    manual_assets: Decimal
    receivables: Decimal
    stock_investments: Decimal
    crypto_investments: Decimal
    notes: str | None = None
    snapshot_id: int | None = None

    @classmethod
    def from_totals(
        cls,
        identifier: str,
        timestamp: datetime,
        period_key: PeriodKey,
        totals: NetWorthTotals,
        notes: str | None = None,
    ) -> "NetWorthSnapshot":
        return cls(
            identifier=identifier,
            timestamp=timestamp,
            period_key=period_key,
            currency_code=totals.currency_code,
            total_assets=totals.total_assets,
            total_liabilities=totals.total_liabilities,
            net_worth=totals.net_worth,
            core_net_worth=totals.core_net_worth,
            tangible_net_worth=totals.tangible_net_worth,
            volatile_assets=totals.volatile_assets,
            wallet_assets=totals.wallet_assets,
            manual_assets=totals.manual_assets,
            receivables=totals.receivables,
            stock_investments=totals.stock_investments,
            crypto_investments=totals.crypto_investments,
            notes=notes,
        )


class NetWorthMetric(str, Enum):
    """Series that can be charted from snapshot history."""

    TOTAL = "total"
    CORE = "core"
    TANGIBLE = "tangible"
    VOLATILE = "volatile"

    def value_for(self, snapshot: NetWorthSnapshot) -> Decimal:
        if self is NetWorthMetric.TOTAL:
            return snapshot.total_assets - snapshot.total_liabilities
        if self is NetWorthMetric.CORE:
            return snapshot.core_net_worth
        if self is NetWorthMetric.TANGIBLE:
            return snapshot.tangible_net_worth
        return snapshot.volatile_assets


class NetWorthRange(str, Enum):
    """History windows counted in months back from now."""

    THREE_MONTHS = "3M"
    SIX_MONTHS = "6M"
    ONE_YEAR = "1Y"
    ALL = "ALL"

    @property
    def months_back(self) -> int | None:
        return {
            NetWorthRange.THREE_MONTHS: 3,
            NetWorthRange.SIX_MONTHS: 6,
            NetWorthRange.ONE_YEAR: 12,
        }.get(self)


@dataclass(frozen=True)
class NetWorthPoint:
    """One charted value of a metric."""

    timestamp: datetime
    value: Decimal


__all__ = [
    "NetWorthTotals",
    "NetWorthSnapshot",
    "NetWorthMetric",
    "NetWorthRange",
    "NetWorthPoint",
]
