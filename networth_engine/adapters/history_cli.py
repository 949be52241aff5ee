"""CLI adapter printing the net worth history for a range and metric."""

import os

from networth_engine.domain.models import NetWorthMetric, NetWorthRange
from networth_engine.infrastructure.container import (
    build_database_adapter,
    build_history_use_case,
)
from networth_engine.infrastructure.logging.logger import get_app_logger


def main() -> None:
    """Print ``NET_WORTH_METRIC`` over ``NET_WORTH_RANGE``."""
    logger = get_app_logger()
    raw_range = os.getenv("NET_WORTH_RANGE", NetWorthRange.ALL.value).upper()
    raw_metric = os.getenv("NET_WORTH_METRIC", NetWorthMetric.TOTAL.value).lower()
    try:
        history_range = NetWorthRange(raw_range)
        metric = NetWorthMetric(raw_metric)
    except ValueError as exc:
        logger.warning(f"Invalid history option: {exc}")
        return

    points = build_history_use_case(build_database_adapter()).execute(
        history_range,
        metric,
    )

    print(f"Net worth history ({history_range.value}, {metric.value}):")
    for point in points:
        print(f"{point.timestamp.date().isoformat()}: {point.value}")


if __name__ == "__main__":  # pragma: no cover
    main()
