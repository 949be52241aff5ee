"""Domain models package."""

from .budgets import BudgetAlert, BudgetEvaluation, ExpenseRow, MonthlyBudget
from .finance import (
    NetWorthMetric,
    NetWorthPoint,
    NetWorthRange,
    NetWorthSnapshot,
    NetWorthTotals,
)
from .holdings import (
    HoldingLot,
    HoldingSale,
    HoldingValuation,
    InvestmentAccount,
    InvestmentAccountValuation,
    InvestmentAsset,
    LotSaleOutcome,
    ManualAsset,
    ManualInvestmentDetails,
    ManualLiability,
    PriceSnapshot,
    Wallet,
)
from .market import MarketQuote
from .money import ExchangeRateTable, Money
from .periods import PeriodKey, PeriodMarker

__all__ = [
    "BudgetAlert",
    "BudgetEvaluation",
    "ExpenseRow",
    "MonthlyBudget",
    "NetWorthMetric",
    "NetWorthPoint",
    "NetWorthRange",
    "NetWorthSnapshot",
    "NetWorthTotals",
    "HoldingLot",
    "HoldingSale",
    "HoldingValuation",
    "InvestmentAccount",
    "InvestmentAccountValuation",
    "InvestmentAsset",
    "LotSaleOutcome",
    "ManualAsset",
    "ManualInvestmentDetails",
    "ManualLiability",
    "PriceSnapshot",
    "Wallet",
    "MarketQuote",
    "ExchangeRateTable",
    "Money",
    "PeriodKey",
    "PeriodMarker",
]
