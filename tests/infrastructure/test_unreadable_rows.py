"""Corrupt ledger rows are skipped while totals still render."""

from datetime import date, datetime, timezone
from decimal import Decimal
from types import SimpleNamespace
from unittest.mock import MagicMock

from sqlalchemy import create_engine, text

from networth_engine.application.use_cases.get_net_worth_totals import (
    GetNetWorthTotalsUseCase,
)
from networth_engine.domain.models import (
    HoldingLot,
    InvestmentAccount,
    InvestmentAsset,
    Money,
    PriceSnapshot,
    Wallet,
)
from networth_engine.infrastructure.db import StaticEngineAdapter
from networth_engine.infrastructure.ledger_repository import (
    SqlAlchemyLedgerRepository,
)
from networth_engine.infrastructure.price_snapshot_repository import (
    SqlAlchemyPriceSnapshotStore,
)
from networth_engine.infrastructure.schema import prepare_ledger_schema

PRICED_AT = datetime(2024, 5, 1, 9, tzinfo=timezone.utc)


def _db_port(tmp_path) -> StaticEngineAdapter:
    engine = create_engine(f"sqlite:///{tmp_path / 'ledger.db'}")
    prepare_ledger_schema(engine, logger=MagicMock())
    return StaticEngineAdapter(engine)


def _raw(db_port, sql: str, params: dict) -> None:
    with db_port.get_ledger_engine().begin() as conn:
        conn.execute(text(sql), params)


def _seed(db_port) -> None:
    ledger = SqlAlchemyLedgerRepository(db_port, logger=MagicMock())
    prices = SqlAlchemyPriceSnapshotStore(db_port, logger=MagicMock())
    asset = InvestmentAsset("a-vti", "VTI", "Total Market", "etf", "USD")
    ledger.add_wallet(Wallet("ok", "Checking", Money(Decimal("10"), "USD")))
    ledger.add_investment_account(
        InvestmentAccount("acct", "Brokerage", "taxable", "USD")
    )
    ledger.add_investment_asset(asset)
    ledger.add_holding_lot(
        HoldingLot(
            "lot-1",
            "acct",
            asset,
            Decimal("10"),
            Money(Decimal("15"), "USD"),
            date(2024, 1, 2),
        )
    )
    prices.record_snapshot(
        PriceSnapshot("a-vti", Money(Decimal("20"), "USD"), "test", PRICED_AT)
    )

    _raw(
        db_port,
        "INSERT INTO wallets (id, name, currency_code, current_balance) "
        "VALUES ('bad', 'Broken', 'USD', 'n/a')",
        {},
    )
    _raw(
        db_port,
        "INSERT INTO manual_liabilities (id, name, kind, balance, currency_code) "
        "VALUES ('l-bad', 'Loan', 'loan', 'twelve', 'USD')",
        {},
    )
    _raw(
        db_port,
        "INSERT INTO price_snapshots "
        "(asset_id, price, currency_code, provider, recorded_at) "
        "VALUES ('a-vti', 'NaN', 'USD', 'test', :recorded_at)",
        {"recorded_at": "2024-05-02T09:00:00.000000+00:00"},
    )


def test_repositories_skip_unreadable_rows(tmp_path) -> None:
    db_port = _db_port(tmp_path)
    _seed(db_port)
    logger = MagicMock()
    skipped = []

    wallets = SqlAlchemyLedgerRepository(db_port, logger=logger).fetch_wallets(
        on_skip=skipped.append
    )
    latest = SqlAlchemyPriceSnapshotStore(
        db_port,
        logger=logger,
    ).fetch_latest_snapshots(on_skip=skipped.append)

    assert [wallet.identifier for wallet in wallets] == ["ok"]
    assert latest["a-vti"].price.amount == Decimal("20")
    assert skipped[0] == "bad"
    assert len(skipped) == 2
    assert logger.warning.call_count == 2


def test_totals_render_with_corrupt_rows(tmp_path) -> None:
    db_port = _db_port(tmp_path)
    _seed(db_port)
    logger = MagicMock()

    totals = GetNetWorthTotalsUseCase(
        SqlAlchemyLedgerRepository(db_port, logger=logger),
        SqlAlchemyPriceSnapshotStore(db_port, logger=logger),
        SimpleNamespace(base_currency_code="USD", rates={}),
        logger=logger,
    ).execute()

    assert totals.wallet_assets == Decimal("10")
    assert totals.stock_investments == Decimal("200")
    assert totals.total_liabilities == Decimal("0")
    assert totals.net_worth == Decimal("210")
    assert totals.skipped_entities == 3
