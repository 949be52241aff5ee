"""Use case to compute net worth totals across every holding."""

from networth_engine.application.ports.external import SettingsProviderPort
from networth_engine.application.ports.ledger_repository import (
    LedgerReadModelPort,
)
from networth_engine.application.ports.price_snapshots import (
    PriceSnapshotStorePort,
)
from networth_engine.domain.models import NetWorthTotals
from networth_engine.domain.services.finance import compute_net_worth_totals
from networth_engine.domain.services.fx import CurrencyConverter
from networth_engine.infrastructure.logging.logger import get_app_logger


class GetNetWorthTotalsUseCase:
    """Compute net worth totals in the configured base currency."""

    def __init__(
        self,
        ledger_port: LedgerReadModelPort,
        price_store: PriceSnapshotStorePort,
        settings_provider: SettingsProviderPort,
        logger=None,
    ) -> None:
        """Initialize the use case.

        Args:
            ledger_port: Port providing wallets, manual entries and lots.
            price_store: Port providing the latest price per asset.
            settings_provider: Port providing base currency and rates.
            logger: Optional logger compatible with logging.Logger-like API.
        """
        self._ledger_port = ledger_port
        self._price_store = price_store
        self._settings_provider = settings_provider
        self._logger = logger or get_app_logger()

    def execute(self) -> NetWorthTotals:
        """Return the net worth totals.

        The converter is resolved once, so a concurrent rate update never
        mixes two rate tables within the same computation.

        Returns:
            NetWorthTotals: Totals expressed in the base currency.
        """
        converter = CurrencyConverter.from_settings(self._settings_provider)

        unreadable: list = []
        wallets = self._ledger_port.fetch_wallets(on_skip=unreadable.append)
        manual_assets = self._ledger_port.fetch_manual_assets(
            on_skip=unreadable.append
        )
        liabilities = self._ledger_port.fetch_manual_liabilities(
            on_skip=unreadable.append
        )
        holdings = self._ledger_port.fetch_holding_lots(
            on_skip=unreadable.append
        )
        latest_prices = self._price_store.fetch_latest_snapshots(
            on_skip=unreadable.append
        )

        totals = compute_net_worth_totals(
            wallets,
            manual_assets,
            liabilities,
            holdings,
            latest_prices,
            converter=converter,
            logger=self._logger,
            skipped_rows=len(unreadable),
        )

        self._logger.info(
            f"Net worth computed: assets={totals.total_assets}, "
            f"liabilities={totals.total_liabilities}, "
            f"net_worth={totals.net_worth} {totals.currency_code}"
        )
        if totals.skipped_entities:
            self._logger.warning(
                f"Left {totals.skipped_entities} unreadable entities out of "
                "net worth"
            )
        if totals.missing_rates:
            self._logger.warning(
                "Net worth includes unconverted currencies: "
                f"{', '.join(totals.missing_rates)}"
            )
        return totals


__all__ = ["GetNetWorthTotalsUseCase"]
