"""Tests for the composition root and the logging notification sink."""

from datetime import datetime, timezone
from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from networth_engine.application.use_cases import (
    EnsureNetWorthSnapshotUseCase,
    EvaluateBudgetAlertsUseCase,
    RefreshPricesUseCase,
)
from networth_engine.domain.models import BudgetAlert, Money
from networth_engine.infrastructure import container
from networth_engine.infrastructure.notifications import (
    ALERT_TITLE,
    LoggingNotificationSink,
)
from networth_engine.infrastructure.settings import LedgerSettings


def test_logging_sink_writes_alert_message() -> None:
    logger = MagicMock()
    alert = BudgetAlert(
        identifier="alert-1",
        budget_id="b1",
        category_name="Food",
        threshold=80,
        spent_amount=Money(Decimal("82"), "USD"),
        limit_amount=Money(Decimal("100"), "USD"),
        created_at=datetime(2024, 5, 2, tzinfo=timezone.utc),
    )

    LoggingNotificationSink(logger=logger).notify(alert)

    message = logger.info.call_args.args[0]
    assert message.startswith(f"{ALERT_TITLE}: Food budget hit 80%")
    assert "82 of 100 USD" in message


def test_snapshot_builder_uses_configured_timezone() -> None:
    db_port = MagicMock()
    settings = LedgerSettings(timezone="Europe/Paris")

    use_case = container.build_snapshot_use_case(db_port, settings)

    assert isinstance(use_case, EnsureNetWorthSnapshotUseCase)
    assert use_case._tz.key == "Europe/Paris"


def test_refresh_builder_skips_equities_without_key() -> None:
    use_case = container.build_refresh_prices_use_case(
        MagicMock(),
        LedgerSettings(alphavantage_api_key=None),
    )

    assert isinstance(use_case, RefreshPricesUseCase)
    assert use_case._stock_provider is None
    assert use_case._crypto_provider.name == "CoinGecko"


def test_refresh_builder_wires_equity_provider_with_key() -> None:
    use_case = container.build_refresh_prices_use_case(
        MagicMock(),
        LedgerSettings(alphavantage_api_key="demo"),
    )

    assert use_case._stock_provider.name == "AlphaVantage"


def test_budget_builder_uses_configured_timezone() -> None:
    use_case = container.build_budget_alerts_use_case(
        MagicMock(),
        LedgerSettings(timezone="Europe/Paris"),
    )

    assert isinstance(use_case, EvaluateBudgetAlertsUseCase)
    assert use_case._tz.key == "Europe/Paris"


def test_sync_rates_builder_requires_key() -> None:
    with pytest.raises(RuntimeError):
        container.build_sync_rates_use_case(MagicMock(), LedgerSettings())
