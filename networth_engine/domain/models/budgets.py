"""Domain models for monthly budgets and threshold alerts."""

from dataclasses import dataclass, replace
from datetime import datetime
from decimal import Decimal

from networth_engine.domain.models.money import Money
from networth_engine.domain.models.periods import PeriodKey


@dataclass(frozen=True)
class MonthlyBudget:
    """Spending limit for one category in one calendar month.

    The ``alert_sent_*`` flags only move from False to True within the row's
    period; the next month is a new row with fresh flags.
    """

    identifier: str
    category_id: str
    category_name: str
    month: int
    year: int
    limit: Money
    alert_sent_50: bool = False
    alert_sent_80: bool = False
    alert_sent_100: bool = False

    @property
    def period_key(self) -> PeriodKey:
        return PeriodKey(self.year, self.month)

    def is_alert_sent(self, threshold: int) -> bool:
        return bool(getattr(self, _flag_name(threshold)))

    def with_alert_sent(self, threshold: int) -> "MonthlyBudget":
        return replace(self, **{_flag_name(threshold): True})


@dataclass(frozen=True)
class BudgetAlert:
    """Event emitted the first time a budget crosses a threshold."""

    identifier: str
    budget_id: str
    category_name: str
    threshold: int
    spent_amount: Money
    limit_amount: Money
    created_at: datetime

    @property
    def message(self) -> str:
        return f"{self.category_name} budget hit {self.threshold}%"


@dataclass(frozen=True)
class BudgetEvaluation:
    """Alerts fired by one evaluation pass and the resulting budget state."""

    budget: MonthlyBudget
    ratio: Decimal
    alerts: list[BudgetAlert]


@dataclass(frozen=True)
class ExpenseRow:
    """Expense transaction counted toward a budget."""

    amount: Money
    occurred_at: datetime


def _flag_name(threshold: int) -> str:
    if threshold not in (50, 80, 100):
        raise ValueError(f"Unsupported budget threshold: {threshold}")
    return f"alert_sent_{threshold}"


__all__ = ["MonthlyBudget", "BudgetAlert", "BudgetEvaluation", "ExpenseRow"]
