"""CLI adapter refreshing the stored exchange rates."""

from networth_engine.domain.errors import ExchangeRateSourceError
from networth_engine.infrastructure.container import (
    build_database_adapter,
    build_sync_rates_use_case,
)
from networth_engine.infrastructure.logging.logger import get_app_logger


def main() -> None:
    """Fetch official rates for the base currency and store them."""
    logger = get_app_logger()
    use_case = build_sync_rates_use_case(build_database_adapter())
    try:
        table = use_case.execute()
    except ExchangeRateSourceError as exc:
        logger.error(str(exc))
        print(f"Exchange rate sync failed: {exc}")
        return
    print(
        f"Stored {len(table.rates)} exchange rates against "
        f"{table.base_currency}."
    )


if __name__ == "__main__":  # pragma: no cover
    main()
