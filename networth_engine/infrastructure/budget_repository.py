"""SQLAlchemy repository for monthly budgets and expense transactions."""

from datetime import datetime, timezone

from sqlalchemy import text
from sqlalchemy.exc import IntegrityError

from networth_engine.application.ports.budgets import BudgetRepositoryPort
from networth_engine.application.ports.database import DatabaseEnginePort
from networth_engine.domain.constants import BUDGET_SCOPE_PREFIX
from networth_engine.domain.models import (
    ExpenseRow,
    Money,
    MonthlyBudget,
    PeriodKey,
    PeriodMarker,
)
from networth_engine.infrastructure.logging.logger import get_app_logger
from networth_engine.infrastructure.period_markers import insert_marker
from networth_engine.infrastructure.sql_values import (
    amount_to_text,
    flag,
    text_to_timestamp,
    timestamp_to_text,
)


EXPENSE_DIRECTION = "expense"

SELECT_BUDGETS_SQL = text(
    """
    SELECT id, category_id, category_name, month, year, limit_amount,
           currency_code, alert_sent_50, alert_sent_80, alert_sent_100
    FROM monthly_budgets
    WHERE month = :month AND year = :year
    ORDER BY category_name
    """
)

SELECT_EXPENSES_SQL = text(
    """
    SELECT amount, currency_code, occurred_at
    FROM transactions
    WHERE category_id = :category_id
      AND direction = :direction
      AND occurred_at >= :start
      AND occurred_at < :end
    ORDER BY occurred_at
    """
)

INSERT_BUDGET_SQL = text(
    """
    INSERT INTO monthly_budgets (
        id, category_id, category_name, month, year, limit_amount,
        currency_code, alert_sent_50, alert_sent_80, alert_sent_100
    )
    VALUES (
        :id, :category_id, :category_name, :month, :year, :limit_amount,
        :currency_code, :alert_sent_50, :alert_sent_80, :alert_sent_100
    )
    """
)

INSERT_TRANSACTION_SQL = text(
    """
    INSERT INTO transactions (
        id, category_id, amount, currency_code, direction, occurred_at
    )
    VALUES (
        :id, :category_id, :amount, :currency_code, :direction, :occurred_at
    )
    """
)

FLAG_UPDATES_SQL = {
    50: text("UPDATE monthly_budgets SET alert_sent_50 = 1 WHERE id = :id"),
    80: text("UPDATE monthly_budgets SET alert_sent_80 = 1 WHERE id = :id"),
    100: text("UPDATE monthly_budgets SET alert_sent_100 = 1 WHERE id = :id"),
}


def month_bounds(month: int, year: int) -> tuple[datetime, datetime]:
    """Return the UTC start of a month and of the following month."""
    start_key = PeriodKey(year, month)
    end_key = start_key.shift(1)
    return (
        datetime(start_key.year, start_key.month, 1, tzinfo=timezone.utc),
        datetime(end_key.year, end_key.month, 1, tzinfo=timezone.utc),
    )


class SqlAlchemyBudgetRepository(BudgetRepositoryPort):
    """Budgets, their expenses and their threshold flags."""

    def __init__(self, db_port: DatabaseEnginePort, logger=None) -> None:
        self._db_port = db_port
        self._logger = logger or get_app_logger()

    def fetch_budgets(self, month: int, year: int) -> list[MonthlyBudget]:
        engine = self._db_port.get_ledger_engine()
        with engine.connect() as conn:
            rows = conn.execute(
                SELECT_BUDGETS_SQL,
                {"month": month, "year": year},
            ).all()
        return [
            MonthlyBudget(
                identifier=row.id,
                category_id=row.category_id,
                category_name=row.category_name,
                month=int(row.month),
                year=int(row.year),
                limit=Money(row.limit_amount, row.currency_code),
                alert_sent_50=flag(row.alert_sent_50),
                alert_sent_80=flag(row.alert_sent_80),
                alert_sent_100=flag(row.alert_sent_100),
            )
            for row in rows
        ]

    def fetch_expenses(
        self,
        category_id: str,
        month: int,
        year: int,
    ) -> list[ExpenseRow]:
        """Return expenses with ``start <= occurred_at < next month``."""
        start, end = month_bounds(month, year)
        engine = self._db_port.get_ledger_engine()
        with engine.connect() as conn:
            rows = conn.execute(
                SELECT_EXPENSES_SQL,
                {
                    "category_id": category_id,
                    "direction": EXPENSE_DIRECTION,
                    "start": timestamp_to_text(start),
                    "end": timestamp_to_text(end),
                },
            ).all()
        return [
            ExpenseRow(
                amount=Money(row.amount, row.currency_code),
                occurred_at=text_to_timestamp(row.occurred_at),
            )
            for row in rows
        ]

    def record_threshold_sent(
        self,
        budget: MonthlyBudget,
        threshold: int,
    ) -> bool:
        """Claim the threshold marker and set the flag column together.

        Returns:
            bool: True when this call claimed the threshold.

        Raises:
            ValueError: If ``threshold`` is not 50, 80 or 100.
        """
        update = FLAG_UPDATES_SQL.get(threshold)
        if update is None:
            raise ValueError(f"Unsupported budget threshold: {threshold}")
        marker = PeriodMarker(
            scope=f"{BUDGET_SCOPE_PREFIX}{budget.identifier}",
            period_key=budget.period_key,
            tag=str(threshold),
        )
        engine = self._db_port.get_ledger_engine()
        try:
            with engine.begin() as conn:
                insert_marker(conn, marker)
                conn.execute(update, {"id": budget.identifier})
        except IntegrityError:
            return False
        return True

    def add_budget(self, budget: MonthlyBudget) -> None:
        """Insert a budget row; flags start as given, normally all False."""
        engine = self._db_port.get_ledger_engine()
        with engine.begin() as conn:
            conn.execute(
                INSERT_BUDGET_SQL,
                {
                    "id": budget.identifier,
                    "category_id": budget.category_id,
                    "category_name": budget.category_name,
                    "month": budget.month,
                    "year": budget.year,
                    "limit_amount": amount_to_text(budget.limit.amount),
                    "currency_code": budget.limit.currency_code,
                    "alert_sent_50": int(budget.alert_sent_50),
                    "alert_sent_80": int(budget.alert_sent_80),
                    "alert_sent_100": int(budget.alert_sent_100),
                },
            )

    def add_transaction(
        self,
        identifier: str,
        category_id: str | None,
        amount: Money,
        occurred_at: datetime,
        direction: str = EXPENSE_DIRECTION,
    ) -> None:
        engine = self._db_port.get_ledger_engine()
        with engine.begin() as conn:
            conn.execute(
                INSERT_TRANSACTION_SQL,
                {
                    "id": identifier,
                    "category_id": category_id,
                    "amount": amount_to_text(amount.amount),
                    "currency_code": amount.currency_code,
                    "direction": direction,
                    "occurred_at": timestamp_to_text(occurred_at),
                },
            )


__all__ = [
    "SqlAlchemyBudgetRepository",
    "month_bounds",
    "EXPENSE_DIRECTION",
]
