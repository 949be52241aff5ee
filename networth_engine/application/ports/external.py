"""Ports for settings, market data and notifications."""

from decimal import Decimal
from typing import Mapping, Protocol

from networth_engine.domain.models import (
    BudgetAlert,
    ExchangeRateTable,
    MarketQuote,
)


class SettingsProviderPort(Protocol):
    """Port exposing the active base currency and rate table."""

    @property
    def base_currency_code(self) -> str:
        """Return the base currency code."""

    @property
    def rates(self) -> Mapping[str, Decimal]:
        """Return foreign-to-base rates."""

    @property
    def notifications_enabled(self) -> bool:
        """Return whether alerts should reach the notification sink."""

    def update_rates(self, table: ExchangeRateTable) -> None:
        """Persist a new rate table."""

    def update_base_currency(self, currency_code: str) -> None:
        """Switch the base currency, rebasing the stored rates."""


class QuoteProviderPort(Protocol):
    """Port exposing latest quotes from one upstream provider."""

    name: str

    def fetch_quotes(self, symbols: list[str]) -> list[MarketQuote]:
        """Return quotes for the symbols it could price.

        Raises:
            QuoteProviderError: If the provider fails as a whole.
        """


class ExchangeRateSourcePort(Protocol):
    """Port exposing official exchange rates."""

    def fetch_latest_rates(self, base_currency: str) -> ExchangeRateTable:
        """Return rates expressing each currency in ``base_currency``."""


class NotificationSinkPort(Protocol):
    """Fire-and-forget destination for budget alerts."""

    def notify(self, alert: BudgetAlert) -> None:
        """Deliver an alert."""


__all__ = [
    "SettingsProviderPort",
    "QuoteProviderPort",
    "ExchangeRateSourcePort",
    "NotificationSinkPort",
]
