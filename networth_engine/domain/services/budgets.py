"""Budget threshold evaluation."""

from datetime import datetime
from decimal import Decimal
import uuid

from networth_engine.domain.constants import BUDGET_ALERT_THRESHOLDS
from networth_engine.domain.errors import CurrencyMismatchError
from networth_engine.domain.models import (
    BudgetAlert,
    BudgetEvaluation,
    MonthlyBudget,
    Money,
)


def spending_ratio(spent: Decimal, limit: Decimal) -> Decimal:
    """Return spent / limit, or zero for a zero limit."""
    if limit == 0:
        return Decimal("0")
    return spent / limit


def evaluate_budget(
    budget: MonthlyBudget,
    spent: Money,
    now: datetime,
) -> BudgetEvaluation:
    """Fire alerts for every threshold newly crossed by ``spent``.

    Thresholds are checked in ascending order. A single large expense that
    jumps past several thresholds fires one alert per threshold and marks
    all of them as sent, so none fires later in the same period.

    Args:
        budget: Budget row with its current sent flags.
        spent: Amount spent in the budget's limit currency.
        now: Timestamp stamped on the alerts.

    Returns:
        BudgetEvaluation: Newly fired alerts and the updated budget state.

    Raises:
        CurrencyMismatchError: If ``spent`` is not in the limit currency.
    """
    if spent.currency_code != budget.limit.currency_code:
        raise CurrencyMismatchError(
            f"Spent amount in {spent.currency_code} does not match "
            f"budget limit in {budget.limit.currency_code}"
        )
    ratio = spending_ratio(spent.amount, budget.limit.amount)
    alerts: list[BudgetAlert] = []
    updated = budget
    for threshold in BUDGET_ALERT_THRESHOLDS:
        if ratio < Decimal(threshold) / Decimal("100"):
            break
        if updated.is_alert_sent(threshold):
            continue
        updated = updated.with_alert_sent(threshold)
        alerts.append(
            BudgetAlert(
                identifier=str(uuid.uuid4()),
                budget_id=budget.identifier,
                category_name=budget.category_name,
                threshold=threshold,
                spent_amount=spent,
                limit_amount=budget.limit,
                created_at=now,
            )
        )
    return BudgetEvaluation(budget=updated, ratio=ratio, alerts=alerts)


__all__ = ["spending_ratio", "evaluate_budget"]
