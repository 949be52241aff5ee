"""CLI adapter capturing the monthly net worth snapshot when it is due."""

from networth_engine.infrastructure.container import (
    build_database_adapter,
    build_snapshot_use_case,
)
from networth_engine.infrastructure.logging.logger import get_app_logger


def main() -> None:
    """Run the snapshot use case once."""
    logger = get_app_logger()
    use_case = build_snapshot_use_case(build_database_adapter())

    snapshot = use_case.execute()

    if snapshot is None:
        logger.info("No snapshot captured.")
        print("Net worth snapshot already captured for this month.")
        return
    print(
        f"Captured net worth snapshot {snapshot.period_key}: "
        f"net_worth={snapshot.net_worth} {snapshot.currency_code}, "
        f"assets={snapshot.total_assets}, "
        f"liabilities={snapshot.total_liabilities}."
    )


if __name__ == "__main__":  # pragma: no cover
    main()
