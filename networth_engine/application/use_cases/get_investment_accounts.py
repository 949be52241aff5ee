"""Use case valuing every investment account and its lots."""

from networth_engine.application.ports.external import SettingsProviderPort
from networth_engine.application.ports.ledger_repository import (
    LedgerReadModelPort,
)
from networth_engine.application.ports.price_snapshots import (
    PriceSnapshotStorePort,
)
from networth_engine.domain.models import InvestmentAccountValuation
from networth_engine.domain.services.fx import CurrencyConverter
from networth_engine.domain.services.valuation import (
    LotBook,
    summarize_account,
    valuate_lot,
)
from networth_engine.infrastructure.logging.logger import get_app_logger


class GetInvestmentAccountsUseCase:
    """Value each account's lots against the latest prices."""

    def __init__(
        self,
        ledger_port: LedgerReadModelPort,
        price_store: PriceSnapshotStorePort,
        settings_provider: SettingsProviderPort,
        logger=None,
    ) -> None:
        """Initialize the use case.

        Args:
            ledger_port: Port providing accounts and lots.
            price_store: Port providing the latest price per asset.
            settings_provider: Port providing base currency and rates.
            logger: Optional logger compatible with logging.Logger-like API.
        """
        self._ledger_port = ledger_port
        self._price_store = price_store
        self._settings_provider = settings_provider
        self._logger = logger or get_app_logger()

    def execute(self) -> list[InvestmentAccountValuation]:
        """Return one valuation per account, in account name order.

        Lots without a price snapshot are valued at cost. Prices quoted in
        another currency are converted into the lot cost currency, and lot
        amounts into the account currency, before anything is summed.
        """
        converter = CurrencyConverter.from_settings(self._settings_provider)
        accounts = self._ledger_port.fetch_investment_accounts()
        book = LotBook(self._ledger_port.fetch_holding_lots())
        latest = self._price_store.fetch_latest_snapshots()
        account_currency = {
            account.identifier: (account.currency_code or "").upper()
            for account in accounts
        }

        by_account: dict[str, list] = {}
        unpriced = 0
        missing: set[str] = set()
        for lot in book.lots():
            snapshot = latest.get(lot.asset.identifier)
            if snapshot is None:
                unpriced += 1
            price = snapshot.price if snapshot else None
            cost_currency = lot.cost_per_unit.currency_code
            for code in (
                price.currency_code if price else cost_currency,
                account_currency.get(lot.account_id) or cost_currency,
            ):
                if code != cost_currency and (
                    converter.is_missing_rate(code)
                    or converter.is_missing_rate(cost_currency)
                ):
                    missing.add(code)
            by_account.setdefault(lot.account_id, []).append(
                valuate_lot(lot, price, converter)
            )

        if unpriced:
            self._logger.info(f"{unpriced} lots valued at cost without a price")
        if missing:
            self._logger.warning(
                "Investment valuation converted without a rate: "
                f"{', '.join(sorted(missing))}"
            )

        return [
            summarize_account(
                account,
                by_account.get(account.identifier, []),
                converter,
            )
            for account in sorted(accounts, key=lambda a: a.name.lower())
        ]


__all__ = ["GetInvestmentAccountsUseCase"]
