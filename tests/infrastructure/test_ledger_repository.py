"""Tests for the SQLAlchemy ledger repository on SQLite."""

from datetime import date, datetime, timezone
from decimal import Decimal
from unittest.mock import MagicMock

import pytest
from sqlalchemy import create_engine

from networth_engine.domain.errors import (
    ConcurrentModificationError,
    InvalidQuantityError,
)
from networth_engine.domain.models import (
    HoldingLot,
    InvestmentAccount,
    InvestmentAsset,
    ManualAsset,
    ManualInvestmentDetails,
    ManualLiability,
    Money,
    Wallet,
)
from networth_engine.domain.services.valuation import sell_from_lot
from networth_engine.infrastructure.db import StaticEngineAdapter
from networth_engine.infrastructure.ledger_repository import (
    SqlAlchemyLedgerRepository,
)
from networth_engine.infrastructure.schema import prepare_ledger_schema

SOLD_AT = datetime(2024, 4, 2, 15, tzinfo=timezone.utc)


def _repository(tmp_path) -> SqlAlchemyLedgerRepository:
    engine = create_engine(f"sqlite:///{tmp_path / 'ledger.db'}")
    prepare_ledger_schema(engine, logger=MagicMock())
    return SqlAlchemyLedgerRepository(
        StaticEngineAdapter(engine),
        logger=MagicMock(),
    )


def _seed_lot(repo, quantity="10") -> HoldingLot:
    asset = InvestmentAsset("a-vti", " vti ", "Total Market", "etf", "usd")
    repo.add_investment_account(
        InvestmentAccount("acct-1", "Brokerage", "taxable", "usd", "Broker")
    )
    repo.add_investment_asset(asset)
    lot = HoldingLot(
        "lot-1",
        "acct-1",
        asset,
        Decimal(quantity),
        Money(Decimal("200.50"), "USD"),
        date(2023, 6, 1),
    )
    repo.add_holding_lot(lot)
    return repo.fetch_lot("lot-1")


def test_wallets_and_manual_entries_round_trip(tmp_path) -> None:
    repo = _repository(tmp_path)
    repo.add_wallet(Wallet("w2", "Savings", Money(Decimal("1500.25"), "EUR")))
    repo.add_wallet(
        Wallet(
            "w1",
            "Old cash",
            Money(Decimal("3"), "USD"),
            include_in_net_worth=False,
            archived=True,
        )
    )
    repo.add_manual_asset(
        ManualAsset("m1", "Car", "tangible", Money(Decimal("9000"), "USD"))
    )
    repo.add_manual_liability(
        ManualLiability("l1", "Mortgage", "loan", Money(Decimal("120000"), "USD"))
    )

    wallets = repo.fetch_wallets()
    assets = repo.fetch_manual_assets()
    liabilities = repo.fetch_manual_liabilities()

    assert [w.name for w in wallets] == ["Old cash", "Savings"]
    assert wallets[0].include_in_net_worth is False
    assert wallets[0].archived is True
    assert wallets[1].current_balance == Money(Decimal("1500.25"), "EUR")
    assert assets[0].value == Money(Decimal("9000"), "USD")
    assert assets[0].investment is None
    assert liabilities[0].balance.amount == Decimal("120000")


def test_manual_investment_uses_market_price(tmp_path) -> None:
    repo = _repository(tmp_path)
    repo.add_manual_asset(
        ManualAsset(
            "m2",
            "Gold futures",
            "investment",
            Money(Decimal("1000"), "USD"),
            volatility=True,
            investment=ManualInvestmentDetails(
                quantity=Decimal("2"),
                cost_per_unit=Decimal("400"),
                market_price=Money(Decimal("450"), "USD"),
                market_price_updated_at=SOLD_AT,
                contract_multiplier=Decimal("10"),
                symbol="gc",
            ),
        )
    )

    asset = repo.fetch_manual_assets()[0]

    assert asset.value == Money(Decimal("9000"), "USD")
    assert asset.investment.symbol == "GC"
    assert asset.investment.market_price_updated_at == SOLD_AT
    assert asset.volatility is True


def test_investment_entities_are_normalized(tmp_path) -> None:
    repo = _repository(tmp_path)
    lot = _seed_lot(repo)

    assert repo.fetch_investment_assets()[0].symbol == "VTI"
    account = repo.fetch_investment_accounts()[0]
    assert account.currency_code == "USD"
    assert account.institution == "Broker"
    assert lot.quantity == Decimal("10")
    assert lot.cost_per_unit == Money(Decimal("200.50"), "USD")
    assert lot.asset.currency_code == "USD"
    assert repo.fetch_holding_lots() == [lot]
    assert repo.fetch_lot("missing") is None


def test_add_lot_rejects_non_positive_quantity(tmp_path) -> None:
    repo = _repository(tmp_path)
    asset = InvestmentAsset("a1", "VTI", "VTI", "etf", "USD")

    with pytest.raises(InvalidQuantityError):
        repo.add_holding_lot(
            HoldingLot(
                "lot-0",
                "acct-1",
                asset,
                Decimal("0"),
                Money(Decimal("1"), "USD"),
                date(2024, 1, 1),
            )
        )


def test_partial_sale_reduces_lot_and_records_sale(tmp_path) -> None:
    repo = _repository(tmp_path)
    lot = _seed_lot(repo)
    outcome = sell_from_lot(
        lot,
        Decimal("3.5"),
        Money(Decimal("250"), "USD"),
        SOLD_AT,
        wallet_name="Cash",
    )

    repo.apply_sale(lot.quantity, outcome)

    assert repo.fetch_lot("lot-1").quantity == Decimal("6.5")
    sales = repo.fetch_sales("lot-1")
    assert len(sales) == 1
    assert sales[0]["quantity"] == Decimal("3.5")
    assert sales[0]["proceeds"] == Money(Decimal("875"), "USD")
    assert sales[0]["sold_at"] == SOLD_AT
    assert sales[0]["wallet_name"] == "Cash"


def test_full_sale_deletes_lot(tmp_path) -> None:
    repo = _repository(tmp_path)
    lot = _seed_lot(repo, quantity="2")
    outcome = sell_from_lot(lot, "2", Money(Decimal("1"), "USD"), SOLD_AT)

    repo.apply_sale(lot.quantity, outcome)

    assert repo.fetch_lot("lot-1") is None
    assert len(repo.fetch_sales("lot-1")) == 1


def test_stale_sale_raises_and_writes_nothing(tmp_path) -> None:
    """Two sales computed from the same lot state: only the first applies."""
    repo = _repository(tmp_path)
    lot = _seed_lot(repo)
    first = sell_from_lot(lot, "4", Money(Decimal("1"), "USD"), SOLD_AT)
    second = sell_from_lot(lot, "5", Money(Decimal("1"), "USD"), SOLD_AT)

    repo.apply_sale(lot.quantity, first)
    with pytest.raises(ConcurrentModificationError):
        repo.apply_sale(lot.quantity, second)

    assert repo.fetch_lot("lot-1").quantity == Decimal("6")
    assert len(repo.fetch_sales("lot-1")) == 1
