"""Port for monthly budgets and their spending."""

from typing import Protocol

from networth_engine.domain.models import ExpenseRow, MonthlyBudget


class BudgetRepositoryPort(Protocol):
    """Port exposing budget rows, expenses and alert flags."""

    def fetch_budgets(self, month: int, year: int) -> list[MonthlyBudget]:
        """Return the budget rows of a calendar month."""

    def fetch_expenses(
        self,
        category_id: str,
        month: int,
        year: int,
    ) -> list[ExpenseRow]:
        """Return expense transactions of a category within a month."""

    def record_threshold_sent(
        self,
        budget: MonthlyBudget,
        threshold: int,
    ) -> bool:
        """Mark a threshold as sent for the budget's period.

        Returns:
            bool: True when this call set the flag, False when it was
            already set by an earlier or concurrent evaluation.
        """


__all__ = ["BudgetRepositoryPort"]
