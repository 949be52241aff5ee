"""CLI adapter creating the ledger schema and seeding settings.

This adapter is meant for local operations: it connects through the
configured ledger database, checks the connection, creates missing tables
and stores the environment settings that are not stored yet.
"""

from networth_engine.infrastructure.container import (
    build_database_adapter,
    build_settings_provider,
)
from networth_engine.infrastructure.logging.logger import get_app_logger
from networth_engine.infrastructure.schema import prepare_ledger_schema


def main() -> None:
    """Prepare the ledger database."""
    logger = get_app_logger()
    adapter = build_database_adapter()
    engine = adapter.get_ledger_engine()
    logger.info(f"Ledger DB: {engine.url}")

    with engine.connect() as conn:
        conn.exec_driver_sql("SELECT 1")

    statements = prepare_ledger_schema(engine, logger=logger)
    settings = build_settings_provider(adapter)
    settings.seed_defaults()

    print(
        f"Ledger schema ready ({statements} statements); "
        f"base currency {settings.base_currency_code}."
    )


if __name__ == "__main__":  # pragma: no cover
    main()
