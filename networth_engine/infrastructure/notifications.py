"""Notification sinks for budget alerts."""

from networth_engine.application.ports.external import NotificationSinkPort
from networth_engine.domain.models import BudgetAlert
from networth_engine.infrastructure.logging.logger import get_usage_logger


ALERT_TITLE = "Budget Alert"


class LoggingNotificationSink(NotificationSinkPort):
    """Write budget alerts to the usage log."""

    def __init__(self, logger=None) -> None:
        self._logger = logger or get_usage_logger()

    def notify(self, alert: BudgetAlert) -> None:
        self._logger.info(
            f"{ALERT_TITLE}: {alert.message} "
            f"({alert.spent_amount.amount} of {alert.limit_amount.amount} "
            f"{alert.limit_amount.currency_code})"
        )


__all__ = [
    "ALERT_TITLE",
    "LoggingNotificationSink",
]
