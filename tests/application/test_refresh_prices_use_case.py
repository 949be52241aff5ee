"""Tests for the RefreshPricesUseCase."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal
import threading
from unittest.mock import MagicMock

from sqlalchemy.exc import OperationalError

from networth_engine.application.use_cases.refresh_prices import (
    RefreshPricesUseCase,
)
from networth_engine.domain.errors import QuoteProviderError
from networth_engine.domain.models import (
    InvestmentAsset,
    MarketQuote,
    Money,
    PriceSnapshot,
)

NOW = datetime(2024, 4, 1, 12, tzinfo=timezone.utc)


def _assets() -> list[InvestmentAsset]:
    return [
        InvestmentAsset("a-vti", "VTI", "Total Market", "etf", "USD"),
        InvestmentAsset("a-aapl", "aapl", "Apple", "stock", "USD"),
        InvestmentAsset("a-btc", "BITCOIN", "Bitcoin", "crypto", "USD"),
    ]


def _ledger(assets=None) -> MagicMock:
    ledger = MagicMock()
    ledger.fetch_investment_assets.return_value = assets or _assets()
    return ledger


def _store(latest=None) -> MagicMock:
    store = MagicMock()
    store.fetch_latest_snapshots.return_value = latest or {}
    store.record_snapshot.side_effect = lambda snapshot: snapshot
    return store


def _provider(name: str, quotes=None, error=None) -> MagicMock:
    provider = MagicMock()
    provider.name = name
    if error is not None:
        provider.fetch_quotes.side_effect = error
    else:
        provider.fetch_quotes.return_value = quotes or []
    return provider


def _quote(symbol: str, price: str, provider: str) -> MarketQuote:
    return MarketQuote(symbol, Decimal(price), "USD", provider)


def test_refresh_groups_assets_by_provider_and_records_snapshots() -> None:
    stock = _provider(
        "AlphaVantage",
        [_quote("VTI", "250", "AlphaVantage"), _quote("AAPL", "190", "AlphaVantage")],
    )
    crypto = _provider("CoinGecko", [_quote("BITCOIN", "65000", "CoinGecko")])
    store = _store()

    result = RefreshPricesUseCase(
        _ledger(),
        store,
        stock_provider=stock,
        crypto_provider=crypto,
        logger=MagicMock(),
    ).execute(now=NOW)

    stock.fetch_quotes.assert_called_once_with(["AAPL", "VTI"])
    crypto.fetch_quotes.assert_called_once_with(["BITCOIN"])
    recorded = {s.asset_id: s for s in result.recorded}
    assert set(recorded) == {"a-vti", "a-aapl", "a-btc"}
    assert recorded["a-btc"].price == Money(Decimal("65000"), "USD")
    assert recorded["a-btc"].provider == "CoinGecko"
    assert recorded["a-vti"].timestamp == NOW
    assert result.failed_providers == []
    assert result.cancelled is False


def test_fresh_prices_are_not_refreshed() -> None:
    latest = {
        asset.identifier: PriceSnapshot(
            asset.identifier,
            Money(Decimal("1"), "USD"),
            "test",
            NOW - timedelta(minutes=30),
            1,
        )
        for asset in _assets()
    }
    stock = _provider("AlphaVantage")

    result = RefreshPricesUseCase(
        _ledger(),
        _store(latest),
        stock_provider=stock,
        logger=MagicMock(),
    ).execute(now=NOW)

    assert result.fresh_assets == 3
    assert result.recorded == []
    stock.fetch_quotes.assert_not_called()


def test_force_refreshes_fresh_prices() -> None:
    latest = {
        "a-vti": PriceSnapshot(
            "a-vti",
            Money(Decimal("1"), "USD"),
            "test",
            NOW - timedelta(minutes=5),
        )
    }
    stock = _provider("AlphaVantage", [_quote("VTI", "2", "AlphaVantage")])

    result = RefreshPricesUseCase(
        _ledger([_assets()[0]]),
        _store(latest),
        stock_provider=stock,
        logger=MagicMock(),
    ).execute(now=NOW, force=True)

    assert len(result.recorded) == 1
    assert result.fresh_assets == 0


def test_provider_failure_does_not_block_other_provider() -> None:
    stock = _provider(
        "AlphaVantage",
        error=QuoteProviderError("AlphaVantage", "HTTP 503"),
    )
    crypto = _provider("CoinGecko", [_quote("bitcoin", "65000", "CoinGecko")])
    logger = MagicMock()

    result = RefreshPricesUseCase(
        _ledger(),
        _store(),
        stock_provider=stock,
        crypto_provider=crypto,
        logger=logger,
    ).execute(now=NOW)

    assert result.failed_providers == ["AlphaVantage"]
    assert [s.asset_id for s in result.recorded] == ["a-btc"]
    logger.warning.assert_called()


def test_unmatched_symbols_are_reported() -> None:
    stock = _provider("AlphaVantage", [_quote("VTI", "250", "AlphaVantage")])

    result = RefreshPricesUseCase(
        _ledger(_assets()[:2]),
        _store(),
        stock_provider=stock,
        logger=MagicMock(),
    ).execute(now=NOW)

    assert result.unmatched_symbols == ["aapl"]
    assert len(result.recorded) == 1


def test_cancelled_cycle_writes_nothing() -> None:
    cancel = threading.Event()
    store = _store()

    def _fetch_and_cancel(symbols):
        cancel.set()
        return [_quote(symbol, "1", "AlphaVantage") for symbol in symbols]

    stock = _provider("AlphaVantage")
    stock.fetch_quotes.side_effect = _fetch_and_cancel
    crypto = _provider("CoinGecko")

    result = RefreshPricesUseCase(
        _ledger(),
        store,
        stock_provider=stock,
        crypto_provider=crypto,
        logger=MagicMock(),
    ).execute(now=NOW, cancel_event=cancel)

    assert result.cancelled is True
    assert result.recorded == []
    crypto.fetch_quotes.assert_not_called()
    store.record_snapshot.assert_not_called()


def test_missing_provider_is_logged_and_skipped() -> None:
    logger = MagicMock()

    result = RefreshPricesUseCase(
        _ledger(),
        _store(),
        logger=logger,
    ).execute(now=NOW)

    assert result.recorded == []
    assert logger.warning.call_count == 2


def test_failed_write_does_not_block_other_assets() -> None:
    stock = _provider(
        "AlphaVantage",
        [_quote("VTI", "250", "AlphaVantage"), _quote("AAPL", "190", "AlphaVantage")],
    )
    crypto = _provider("CoinGecko", [_quote("BITCOIN", "65000", "CoinGecko")])
    store = _store()

    def _record(snapshot):
        if snapshot.asset_id == "a-vti":
            raise OperationalError("INSERT", {}, Exception("database is locked"))
        return snapshot

    store.record_snapshot.side_effect = _record
    logger = MagicMock()

    result = RefreshPricesUseCase(
        _ledger(),
        store,
        stock_provider=stock,
        crypto_provider=crypto,
        logger=logger,
    ).execute(now=NOW)

    assert store.record_snapshot.call_count == 3
    assert [s.asset_id for s in result.recorded] == ["a-aapl", "a-btc"]
    assert result.failed_assets == ["a-vti"]
    logger.error.assert_called_once()
