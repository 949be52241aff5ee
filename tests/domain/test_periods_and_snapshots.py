"""Tests for period keys, snapshot cadence, history and price selection."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from zoneinfo import ZoneInfo

import pytest

from networth_engine.domain.models import (
    Money,
    NetWorthMetric,
    NetWorthRange,
    NetWorthSnapshot,
    NetWorthTotals,
    PeriodKey,
    PriceSnapshot,
)
from networth_engine.domain.policies import (
    is_crypto_asset_type,
    is_manual_investment_kind,
    is_receivable_kind,
)
from networth_engine.domain.services.prices import (
    is_price_refresh_due,
    select_latest_snapshot,
)
from networth_engine.domain.services.snapshots import (
    filter_history,
    is_snapshot_due,
    metric_series,
)


def _utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


def _snapshot(timestamp: datetime, net: str = "100") -> NetWorthSnapshot:
    value = Decimal(net)
    totals = NetWorthTotals(
        total_assets=value + 10,
        total_liabilities=Decimal("10"),
        net_worth=value,
        core_net_worth=value - 1,
        tangible_net_worth=value - 2,
        volatile_assets=Decimal("3"),
        wallet_assets=value,
        manual_assets=Decimal("10"),
        receivables=Decimal("0"),
        stock_investments=Decimal("0"),
        crypto_investments=Decimal("0"),
        currency_code="USD",
    )
    return NetWorthSnapshot.from_totals(
        identifier=f"snap-{timestamp.isoformat()}",
        timestamp=timestamp,
        period_key=PeriodKey.from_datetime(timestamp),
        totals=totals,
    )


def test_period_key_text_parse_and_order() -> None:
    key = PeriodKey.parse("2024-03")

    assert str(key) == "2024-03"
    assert key.shift(-3) == PeriodKey(2023, 12)
    assert key.shift(10) == PeriodKey(2025, 1)
    assert PeriodKey(2023, 12) < key
    with pytest.raises(ValueError):
        PeriodKey(2024, 13)


def test_period_key_uses_timezone_calendar() -> None:
    moment = _utc(2024, 1, 31, 23, 30)

    assert PeriodKey.from_datetime(moment) == PeriodKey(2024, 1)
    assert PeriodKey.from_datetime(moment, ZoneInfo("Europe/Paris")) == PeriodKey(
        2024,
        2,
    )


def test_snapshot_due_only_in_a_later_month() -> None:
    assert is_snapshot_due(None, _utc(2024, 1, 1)) is True
    assert is_snapshot_due(_utc(2024, 1, 1), _utc(2024, 1, 31)) is False
    assert is_snapshot_due(_utc(2024, 1, 31), _utc(2024, 2, 1)) is True
    assert is_snapshot_due(_utc(2024, 3, 5), _utc(2024, 2, 1)) is False


def test_filter_history_by_range() -> None:
    now = _utc(2024, 6, 15)
    snapshots = [
        _snapshot(_utc(2024, 6, 1)),
        _snapshot(_utc(2023, 1, 1)),
        _snapshot(_utc(2024, 3, 1)),
        _snapshot(_utc(2024, 2, 1)),
    ]

    three_months = filter_history(snapshots, NetWorthRange.THREE_MONTHS, now)
    everything = filter_history(snapshots, NetWorthRange.ALL, now)

    assert [s.period_key for s in three_months] == [
        PeriodKey(2024, 3),
        PeriodKey(2024, 6),
    ]
    assert len(everything) == 4
    assert everything[0].period_key == PeriodKey(2023, 1)


def test_metric_series_values() -> None:
    snapshot = _snapshot(_utc(2024, 1, 1), net="100")

    assert metric_series([snapshot], NetWorthMetric.TOTAL)[0].value == Decimal("100")
    assert metric_series([snapshot], NetWorthMetric.CORE)[0].value == Decimal("99")
    assert metric_series([snapshot], NetWorthMetric.TANGIBLE)[0].value == Decimal(
        "98"
    )
    assert metric_series([snapshot], NetWorthMetric.VOLATILE)[0].value == Decimal(
        "3"
    )


def _price(timestamp: datetime, price: str, snapshot_id=None) -> PriceSnapshot:
    return PriceSnapshot(
        asset_id="asset",
        price=Money(Decimal(price), "USD"),
        provider="test",
        timestamp=timestamp,
        snapshot_id=snapshot_id,
    )


def test_select_latest_snapshot_breaks_ties_by_id_then_position() -> None:
    moment = _utc(2024, 1, 1, 12)
    older = _price(moment - timedelta(hours=1), "1", 9)
    low_id = _price(moment, "2", 1)
    high_id = _price(moment, "3", 2)

    assert select_latest_snapshot([high_id, older, low_id]) is high_id
    first = _price(moment, "4")
    second = _price(moment, "5")
    assert select_latest_snapshot([first, second]) is second
    assert select_latest_snapshot([]) is None


def test_price_refresh_gate_uses_one_hour() -> None:
    now = _utc(2024, 1, 1, 12)

    assert is_price_refresh_due(None, now) is True
    assert is_price_refresh_due(_price(now - timedelta(minutes=59), "1"), now) is False
    assert is_price_refresh_due(_price(now - timedelta(hours=1), "1"), now) is False
    assert is_price_refresh_due(_price(now - timedelta(minutes=61), "1"), now) is True


def test_classification_is_case_insensitive_substring() -> None:
    assert is_receivable_kind("Accounts Receivable")
    assert is_receivable_kind("receivables")
    assert not is_receivable_kind("tangible")
    assert not is_receivable_kind(None)
    assert is_crypto_asset_type("CryptoCurrency")
    assert not is_crypto_asset_type("etf")
    assert is_manual_investment_kind("Investment")
    assert is_manual_investment_kind("other", coin_id="bitcoin")
    assert not is_manual_investment_kind("tangible")
