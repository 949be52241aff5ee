"""Application use cases package."""

from .ensure_net_worth_snapshot import EnsureNetWorthSnapshotUseCase
from .evaluate_budget_alerts import BudgetAlertRun, EvaluateBudgetAlertsUseCase
from .get_investment_accounts import GetInvestmentAccountsUseCase
from .get_net_worth_totals import GetNetWorthTotalsUseCase
from .net_worth_history import (
    GetNetWorthHistoryUseCase,
    UpdateSnapshotNotesUseCase,
)
from .refresh_prices import PriceRefreshResult, RefreshPricesUseCase
from .sell_holding import SellHoldingUseCase
from .sync_exchange_rates import SyncExchangeRatesUseCase

__all__ = [
    "EnsureNetWorthSnapshotUseCase",
    "BudgetAlertRun",
    "EvaluateBudgetAlertsUseCase",
    "GetInvestmentAccountsUseCase",
    "GetNetWorthTotalsUseCase",
    "GetNetWorthHistoryUseCase",
    "UpdateSnapshotNotesUseCase",
    "PriceRefreshResult",
    "RefreshPricesUseCase",
    "SellHoldingUseCase",
    "SyncExchangeRatesUseCase",
]
