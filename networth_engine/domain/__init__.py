"""Domain package for valuation rules and core models."""

from .constants import BUDGET_ALERT_THRESHOLDS, PRICE_REFRESH_MAX_AGE
from .models import (
    BudgetAlert,
    ExchangeRateTable,
    HoldingLot,
    HoldingValuation,
    MonthlyBudget,
    Money,
    NetWorthSnapshot,
    NetWorthTotals,
    PeriodKey,
    PriceSnapshot,
)
from .policies import is_crypto_asset_type, is_receivable_kind
from .services import (
    CurrencyConverter,
    compute_net_worth_totals,
    evaluate_budget,
    valuate_lot,
)

__all__ = [
    "BUDGET_ALERT_THRESHOLDS",
    "PRICE_REFRESH_MAX_AGE",
    "BudgetAlert",
    "ExchangeRateTable",
    "HoldingLot",
    "HoldingValuation",
    "MonthlyBudget",
    "Money",
    "NetWorthSnapshot",
    "NetWorthTotals",
    "PeriodKey",
    "PriceSnapshot",
    "is_crypto_asset_type",
    "is_receivable_kind",
    "CurrencyConverter",
    "compute_net_worth_totals",
    "evaluate_budget",
    "valuate_lot",
]
