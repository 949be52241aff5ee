"""Composition root for wiring infrastructure adapters."""

from networth_engine.application.ports.database import DatabaseEnginePort
from networth_engine.application.use_cases.ensure_net_worth_snapshot import (
    EnsureNetWorthSnapshotUseCase,
)
from networth_engine.application.use_cases.evaluate_budget_alerts import (
    EvaluateBudgetAlertsUseCase,
)
from networth_engine.application.use_cases.get_investment_accounts import (
    GetInvestmentAccountsUseCase,
)
from networth_engine.application.use_cases.get_net_worth_totals import (
    GetNetWorthTotalsUseCase,
)
from networth_engine.application.use_cases.net_worth_history import (
    GetNetWorthHistoryUseCase,
)
from networth_engine.application.use_cases.refresh_prices import (
    RefreshPricesUseCase,
)
from networth_engine.application.use_cases.sell_holding import (
    SellHoldingUseCase,
)
from networth_engine.application.use_cases.sync_exchange_rates import (
    SyncExchangeRatesUseCase,
)
from networth_engine.infrastructure.budget_repository import (
    SqlAlchemyBudgetRepository,
)
from networth_engine.infrastructure.db import SqlAlchemyDatabaseEngineAdapter
from networth_engine.infrastructure.exchange_rate_client import (
    ExchangeRateApiClient,
)
from networth_engine.infrastructure.ledger_repository import (
    SqlAlchemyLedgerRepository,
)
from networth_engine.infrastructure.logging.logger import get_app_logger
from networth_engine.infrastructure.notifications import (
    LoggingNotificationSink,
)
from networth_engine.infrastructure.price_snapshot_repository import (
    SqlAlchemyPriceSnapshotStore,
)
from networth_engine.infrastructure.quote_clients import (
    AlphaVantageQuoteProvider,
    CoinGeckoQuoteProvider,
)
from networth_engine.infrastructure.settings import (
    LedgerSettings,
    SqlAlchemySettingsRepository,
)
from networth_engine.infrastructure.snapshot_repository import (
    SqlAlchemyNetWorthSnapshotRepository,
)


def build_database_adapter() -> DatabaseEnginePort:
    """Return the database adapter instance."""
    return SqlAlchemyDatabaseEngineAdapter()


def build_settings_provider(
    db_port: DatabaseEnginePort | None = None,
    settings: LedgerSettings | None = None,
) -> SqlAlchemySettingsRepository:
    """Return the settings repository seeded from the environment."""
    resolved_db = db_port or build_database_adapter()
    return SqlAlchemySettingsRepository(
        resolved_db,
        defaults=settings or LedgerSettings.from_env(),
        logger=get_app_logger(),
    )


def build_totals_use_case(
    db_port: DatabaseEnginePort | None = None,
    settings: LedgerSettings | None = None,
) -> GetNetWorthTotalsUseCase:
    """Return the net worth totals use case."""
    resolved_db = db_port or build_database_adapter()
    return GetNetWorthTotalsUseCase(
        SqlAlchemyLedgerRepository(resolved_db),
        SqlAlchemyPriceSnapshotStore(resolved_db),
        build_settings_provider(resolved_db, settings),
    )


def build_snapshot_use_case(
    db_port: DatabaseEnginePort | None = None,
    settings: LedgerSettings | None = None,
) -> EnsureNetWorthSnapshotUseCase:
    """Return the monthly snapshot use case."""
    resolved_db = db_port or build_database_adapter()
    resolved_settings = settings or LedgerSettings.from_env()
    return EnsureNetWorthSnapshotUseCase(
        SqlAlchemyNetWorthSnapshotRepository(resolved_db),
        build_totals_use_case(resolved_db, resolved_settings),
        tz=resolved_settings.zone(),
    )


def build_history_use_case(
    db_port: DatabaseEnginePort | None = None,
    settings: LedgerSettings | None = None,
) -> GetNetWorthHistoryUseCase:
    """Return the snapshot history use case."""
    resolved_db = db_port or build_database_adapter()
    resolved_settings = settings or LedgerSettings.from_env()
    return GetNetWorthHistoryUseCase(
        SqlAlchemyNetWorthSnapshotRepository(resolved_db),
        tz=resolved_settings.zone(),
    )


def build_refresh_prices_use_case(
    db_port: DatabaseEnginePort | None = None,
    settings: LedgerSettings | None = None,
) -> RefreshPricesUseCase:
    """Return the price refresh use case.

    The equity provider is only wired when an AlphaVantage key is set.
    """
    resolved_db = db_port or build_database_adapter()
    resolved_settings = settings or LedgerSettings.from_env()
    logger = get_app_logger()
    stock_provider = None
    if resolved_settings.alphavantage_api_key:
        stock_provider = AlphaVantageQuoteProvider(
            resolved_settings.alphavantage_api_key,
            logger=logger,
        )
    else:
        logger.warning("ALPHAVANTAGE_API_KEY not set; equity prices skipped")
    return RefreshPricesUseCase(
        SqlAlchemyLedgerRepository(resolved_db),
        SqlAlchemyPriceSnapshotStore(resolved_db),
        stock_provider=stock_provider,
        crypto_provider=CoinGeckoQuoteProvider(logger=logger),
        logger=logger,
    )


def build_budget_alerts_use_case(
    db_port: DatabaseEnginePort | None = None,
    settings: LedgerSettings | None = None,
) -> EvaluateBudgetAlertsUseCase:
    """Return the budget alert use case."""
    resolved_db = db_port or build_database_adapter()
    resolved_settings = settings or LedgerSettings.from_env()
    return EvaluateBudgetAlertsUseCase(
        SqlAlchemyBudgetRepository(resolved_db),
        build_settings_provider(resolved_db, resolved_settings),
        LoggingNotificationSink(),
        tz=resolved_settings.zone(),
    )


def build_sell_holding_use_case(
    db_port: DatabaseEnginePort | None = None,
) -> SellHoldingUseCase:
    """Return the lot sale use case."""
    resolved_db = db_port or build_database_adapter()
    return SellHoldingUseCase(SqlAlchemyLedgerRepository(resolved_db))


def build_investment_accounts_use_case(
    db_port: DatabaseEnginePort | None = None,
) -> GetInvestmentAccountsUseCase:
    """Return the investment account valuation use case."""
    resolved_db = db_port or build_database_adapter()
    return GetInvestmentAccountsUseCase(
        SqlAlchemyLedgerRepository(resolved_db),
        SqlAlchemyPriceSnapshotStore(resolved_db),
        build_settings_provider(resolved_db),
    )


def build_sync_rates_use_case(
    db_port: DatabaseEnginePort | None = None,
    settings: LedgerSettings | None = None,
) -> SyncExchangeRatesUseCase:
    """Return the exchange rate sync use case."""
    resolved_db = db_port or build_database_adapter()
    resolved_settings = settings or LedgerSettings.from_env()
    if not resolved_settings.exchangerate_api_key:
        raise RuntimeError("Missing environment variable: EXCHANGERATE_API_KEY")
    return SyncExchangeRatesUseCase(
        ExchangeRateApiClient(resolved_settings.exchangerate_api_key),
        build_settings_provider(resolved_db, resolved_settings),
    )


__all__ = [
    "build_database_adapter",
    "build_settings_provider",
    "build_totals_use_case",
    "build_snapshot_use_case",
    "build_history_use_case",
    "build_refresh_prices_use_case",
    "build_budget_alerts_use_case",
    "build_sell_holding_use_case",
    "build_investment_accounts_use_case",
    "build_sync_rates_use_case",
]
