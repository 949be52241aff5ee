"""Use case evaluating monthly budgets and dispatching threshold alerts."""

from dataclasses import dataclass, field
from datetime import datetime, timezone, tzinfo
from decimal import Decimal

from networth_engine.application.ports.budgets import BudgetRepositoryPort
from networth_engine.application.ports.external import (
    NotificationSinkPort,
    SettingsProviderPort,
)
from networth_engine.domain.models import (
    BudgetAlert,
    Money,
    MonthlyBudget,
    PeriodKey,
)
from networth_engine.domain.services.budgets import evaluate_budget
from networth_engine.domain.services.fx import CurrencyConverter
from networth_engine.infrastructure.logging.logger import get_app_logger


@dataclass(frozen=True)
class BudgetAlertRun:
    """Outcome of evaluating the budgets of one month.

    Attributes:
        evaluated: Number of budget rows evaluated.
        alerts: Alerts whose threshold flag this run claimed.
        dispatched: Alerts handed to the notification sink.
    """

    evaluated: int = 0
    alerts: list[BudgetAlert] = field(default_factory=list)
    dispatched: int = 0


class EvaluateBudgetAlertsUseCase:
    """Fire each budget threshold at most once per month."""

    def __init__(
        self,
        budget_repository: BudgetRepositoryPort,
        settings_provider: SettingsProviderPort,
        notification_sink: NotificationSinkPort,
        logger=None,
        tz: tzinfo | None = None,
    ) -> None:
        """Initialize the use case.

        Args:
            budget_repository: Port providing budgets, expenses and flags.
            settings_provider: Port providing rates and the notification
                switch.
            notification_sink: Destination for claimed alerts.
            logger: Optional logger compatible with logging.Logger-like API.
            tz: Timezone whose calendar defines the current month.
        """
        self._budget_repository = budget_repository
        self._settings_provider = settings_provider
        self._notification_sink = notification_sink
        self._logger = logger or get_app_logger()
        self._tz = tz

    def execute(
        self,
        month: int | None = None,
        year: int | None = None,
        now: datetime | None = None,
    ) -> BudgetAlertRun:
        """Evaluate every budget of a month.

        A flag is claimed in storage before its alert is dispatched, so a
        concurrent evaluation of the same budget never sends it twice.
        Flags are recorded even when notifications are disabled.

        Args:
            month: Budget month, defaults to the month of ``now`` in the
                configured timezone.
            year: Budget year, defaults to the year of ``now`` in the
                configured timezone.
            now: Optional current time, mainly for tests.

        Returns:
            BudgetAlertRun: Claimed alerts and dispatch count.
        """
        now = now or datetime.now(timezone.utc)
        current = PeriodKey.from_datetime(now, self._tz)
        month = month or current.month
        year = year or current.year
        converter = CurrencyConverter.from_settings(self._settings_provider)

        budgets = self._budget_repository.fetch_budgets(month, year)
        claimed: list[BudgetAlert] = []
        for budget in budgets:
            spent = self._spent(budget, converter)
            evaluation = evaluate_budget(budget, spent, now)
            for alert in evaluation.alerts:
                if not self._budget_repository.record_threshold_sent(
                    budget,
                    alert.threshold,
                ):
                    self._logger.info(
                        f"Budget {budget.identifier} threshold "
                        f"{alert.threshold} already claimed"
                    )
                    continue
                claimed.append(alert)

        dispatched = 0
        if self._settings_provider.notifications_enabled:
            for alert in claimed:
                dispatched += self._dispatch(alert)
        elif claimed:
            self._logger.info(
                f"Notifications disabled; {len(claimed)} alerts recorded only"
            )

        self._logger.info(
            f"Budgets evaluated for {year:04d}-{month:02d}: "
            f"{len(budgets)} rows, {len(claimed)} alerts"
        )
        return BudgetAlertRun(
            evaluated=len(budgets),
            alerts=claimed,
            dispatched=dispatched,
        )

    def _spent(
        self,
        budget: MonthlyBudget,
        converter: CurrencyConverter,
    ) -> Money:
        currency = budget.limit.currency_code
        rows = self._budget_repository.fetch_expenses(
            budget.category_id,
            budget.month,
            budget.year,
        )
        total = sum(
            (
                converter.convert(
                    row.amount.amount,
                    row.amount.currency_code,
                    currency,
                ).amount
                for row in rows
            ),
            Decimal("0"),
        )
        return Money(total, currency)

    def _dispatch(self, alert: BudgetAlert) -> int:
        try:
            self._notification_sink.notify(alert)
        except Exception as exc:
            self._logger.warning(
                f"Failed to deliver budget alert {alert.identifier}: {exc}"
            )
            return 0
        return 1


__all__ = ["BudgetAlertRun", "EvaluateBudgetAlertsUseCase"]
