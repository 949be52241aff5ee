"""Use case replacing the stored rate table with official rates."""

from networth_engine.application.ports.external import (
    ExchangeRateSourcePort,
    SettingsProviderPort,
)
from networth_engine.domain.models import ExchangeRateTable
from networth_engine.infrastructure.logging.logger import get_app_logger


class SyncExchangeRatesUseCase:
    """Fetch rates for the current base currency and persist them."""

    def __init__(
        self,
        rate_source: ExchangeRateSourcePort,
        settings_provider: SettingsProviderPort,
        logger=None,
    ) -> None:
        self._rate_source = rate_source
        self._settings_provider = settings_provider
        self._logger = logger or get_app_logger()

    def execute(self) -> ExchangeRateTable:
        """Return the stored table.

        Raises:
            ExchangeRateSourceError: If the source payload is unusable; the
                stored table is left untouched.
        """
        base = self._settings_provider.base_currency_code
        table = self._rate_source.fetch_latest_rates(base)
        self._settings_provider.update_rates(table)
        self._logger.info(
            f"Exchange rates synced: {len(table.rates)} currencies "
            f"against {table.base_currency}"
        )
        return table


__all__ = ["SyncExchangeRatesUseCase"]
