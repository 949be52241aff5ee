"""DDL for the ledger database.

Uniqueness that guards idempotent writes lives here: one net worth snapshot
per period key, one budget row per category and month, and one period
marker per (scope, period, tag).
"""

from sqlalchemy.engine import Engine

from networth_engine.infrastructure.logging.logger import get_app_logger


def _sequence_column(dialect_name: str) -> str:
    if dialect_name == "postgresql":
        return "id SERIAL PRIMARY KEY"
    return "id INTEGER PRIMARY KEY AUTOINCREMENT"


def ledger_schema_statements(dialect_name: str = "sqlite") -> list[str]:
    """Return CREATE statements for every ledger table.

    Args:
        dialect_name: SQLAlchemy dialect name, used for sequence columns.

    Returns:
        list[str]: Idempotent DDL statements in dependency order.
    """
    sequence = _sequence_column(dialect_name)
    return [
        """
        CREATE TABLE IF NOT EXISTS app_settings (
            key TEXT PRIMARY KEY,
            value TEXT
        )
        """,
        """
        CREATE TABLE IF NOT EXISTS wallets (
            id TEXT PRIMARY KEY,
            name TEXT NOT NULL,
            currency_code TEXT NOT NULL,
            current_balance TEXT NOT NULL,
            include_in_net_worth INTEGER NOT NULL DEFAULT 1,
            archived INTEGER NOT NULL DEFAULT 0
        )
        """,
        """
        CREATE TABLE IF NOT EXISTS manual_assets (
            id TEXT PRIMARY KEY,
            name TEXT NOT NULL,
            kind TEXT NOT NULL,
            value TEXT NOT NULL,
            currency_code TEXT NOT NULL,
            include_in_core INTEGER NOT NULL DEFAULT 1,
            include_in_tangible INTEGER NOT NULL DEFAULT 1,
            volatility INTEGER NOT NULL DEFAULT 0,
            quantity TEXT,
            cost_per_unit TEXT,
            market_price TEXT,
            market_price_currency TEXT,
            market_price_updated_at TEXT,
            contract_multiplier TEXT,
            funding_wallet_id TEXT,
            coin_id TEXT,
            symbol TEXT
        )
        """,
        """
        CREATE TABLE IF NOT EXISTS manual_liabilities (
            id TEXT PRIMARY KEY,
            name TEXT NOT NULL,
            kind TEXT NOT NULL,
            balance TEXT NOT NULL,
            currency_code TEXT NOT NULL
        )
        """,
        """
        CREATE TABLE IF NOT EXISTS investment_accounts (
            id TEXT PRIMARY KEY,
            name TEXT NOT NULL,
            institution TEXT,
            account_type TEXT NOT NULL,
            currency_code TEXT NOT NULL,
            include_in_net_worth INTEGER NOT NULL DEFAULT 1
        )
        """,
        """
        CREATE TABLE IF NOT EXISTS investment_assets (
            id TEXT PRIMARY KEY,
            symbol TEXT NOT NULL,
            name TEXT NOT NULL,
            asset_type TEXT NOT NULL,
            currency_code TEXT NOT NULL
        )
        """,
        """
        CREATE TABLE IF NOT EXISTS holding_lots (
            id TEXT PRIMARY KEY,
            account_id TEXT NOT NULL REFERENCES investment_accounts (id),
            asset_id TEXT NOT NULL REFERENCES investment_assets (id),
            quantity TEXT NOT NULL,
            cost_per_unit TEXT NOT NULL,
            cost_currency TEXT NOT NULL,
            acquired_date TEXT NOT NULL
        )
        """,
        """
        CREATE TABLE IF NOT EXISTS holding_sales (
            id TEXT PRIMARY KEY,
            lot_id TEXT NOT NULL,
            quantity TEXT NOT NULL,
            price TEXT NOT NULL,
            price_currency TEXT NOT NULL,
            proceeds TEXT NOT NULL,
            sold_at TEXT NOT NULL,
            wallet_name TEXT
        )
        """,
        f"""
        CREATE TABLE IF NOT EXISTS price_snapshots (
            {sequence},
            asset_id TEXT NOT NULL,
            price TEXT NOT NULL,
            currency_code TEXT NOT NULL,
            provider TEXT NOT NULL,
            recorded_at TEXT NOT NULL
        )
        """,
        """
        CREATE INDEX IF NOT EXISTS ix_price_snapshots_asset_recorded
        ON price_snapshots (asset_id, recorded_at)
        """,
        f"""
        CREATE TABLE IF NOT EXISTS net_worth_snapshots (
            {sequence},
            identifier TEXT NOT NULL UNIQUE,
            captured_at TEXT NOT NULL,
            period_key TEXT NOT NULL UNIQUE,
            currency_code TEXT NOT NULL,
            total_assets TEXT NOT NULL,
            total_liabilities TEXT NOT NULL,
            net_worth TEXT NOT NULL,
            core_net_worth TEXT NOT NULL,
            tangible_net_worth TEXT NOT NULL,
            volatile_assets TEXT NOT NULL,
            wallet_assets TEXT NOT NULL,
            manual_assets TEXT NOT NULL,
            receivables TEXT NOT NULL,
            stock_investments TEXT NOT NULL,
            crypto_investments TEXT NOT NULL,
            notes TEXT
        )
        """,
        """
        CREATE TABLE IF NOT EXISTS monthly_budgets (
            id TEXT PRIMARY KEY,
            category_id TEXT NOT NULL,
            category_name TEXT NOT NULL,
            month INTEGER NOT NULL,
            year INTEGER NOT NULL,
            limit_amount TEXT NOT NULL,
            currency_code TEXT NOT NULL,
            alert_sent_50 INTEGER NOT NULL DEFAULT 0,
            alert_sent_80 INTEGER NOT NULL DEFAULT 0,
            alert_sent_100 INTEGER NOT NULL DEFAULT 0,
            UNIQUE (category_id, month, year)
        )
        """,
        """
        CREATE TABLE IF NOT EXISTS transactions (
            id TEXT PRIMARY KEY,
            category_id TEXT,
            amount TEXT NOT NULL,
            currency_code TEXT NOT NULL,
            direction TEXT NOT NULL,
            occurred_at TEXT NOT NULL
        )
        """,
        """
        CREATE TABLE IF NOT EXISTS period_markers (
            scope TEXT NOT NULL,
            period_key TEXT NOT NULL,
            tag TEXT NOT NULL,
            claimed_at TEXT NOT NULL,
            UNIQUE (scope, period_key, tag)
        )
        """,
    ]


def prepare_ledger_schema(engine: Engine, logger=None) -> int:
    """Create missing ledger tables.

    Args:
        engine: Engine connected to the ledger database.
        logger: Optional logger compatible with logging.Logger-like API.

    Returns:
        int: Number of statements executed.
    """
    logger = logger or get_app_logger()
    statements = ledger_schema_statements(engine.dialect.name)
    with engine.begin() as conn:
        for statement in statements:
            conn.exec_driver_sql(statement)
    logger.info(f"Ledger schema prepared ({len(statements)} statements)")
    return len(statements)


__all__ = ["ledger_schema_statements", "prepare_ledger_schema"]
