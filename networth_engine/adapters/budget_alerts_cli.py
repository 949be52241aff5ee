"""CLI adapter evaluating budget thresholds for a month."""

import os

from networth_engine.domain.models import PeriodKey
from networth_engine.infrastructure.container import (
    build_budget_alerts_use_case,
    build_database_adapter,
)
from networth_engine.infrastructure.logging.logger import get_app_logger


def _parse_period(value: str | None, logger) -> PeriodKey | None:
    """Parse a YYYY-MM string into a period key.

    Args:
        value: Month string in YYYY-MM format.
        logger: Logger used for warnings.

    Returns:
        PeriodKey | None: Parsed period or None when missing or invalid.
    """
    if not value:
        return None
    try:
        return PeriodKey.parse(value)
    except ValueError:
        logger.warning(f"Invalid month '{value}'. Expected format YYYY-MM.")
        return None


def main() -> None:
    """Evaluate the budgets of ``BUDGET_MONTH`` or the current month."""
    logger = get_app_logger()
    period = _parse_period(os.getenv("BUDGET_MONTH"), logger)
    use_case = build_budget_alerts_use_case(build_database_adapter())

    if period is None:
        run = use_case.execute()
    else:
        run = use_case.execute(month=period.month, year=period.year)

    print(
        f"Evaluated {run.evaluated} budgets: {len(run.alerts)} new alerts, "
        f"{run.dispatched} dispatched."
    )
    for alert in run.alerts:
        print(f"- {alert.message}")


if __name__ == "__main__":  # pragma: no cover
    main()
