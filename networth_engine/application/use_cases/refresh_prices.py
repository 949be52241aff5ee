"""Use case refreshing stale investment prices from quote providers."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
import threading

from networth_engine.application.ports.external import QuoteProviderPort
from networth_engine.application.ports.ledger_repository import (
    LedgerReadModelPort,
)
from networth_engine.application.ports.price_snapshots import (
    PriceSnapshotStorePort,
)
from networth_engine.domain.constants import PRICE_REFRESH_MAX_AGE
from networth_engine.domain.errors import QuoteProviderError
from networth_engine.domain.models import (
    InvestmentAsset,
    MarketQuote,
    Money,
    PriceSnapshot,
)
from networth_engine.domain.policies import is_crypto_asset_type
from networth_engine.domain.services.normalization import normalize_symbol
from networth_engine.domain.services.prices import is_price_refresh_due
from networth_engine.infrastructure.logging.logger import get_app_logger


@dataclass(frozen=True)
class PriceRefreshResult:
    """Outcome of one refresh cycle.

    Attributes:
        recorded: Snapshots appended during the cycle.
        fresh_assets: Assets skipped because their price was recent enough.
        failed_providers: Providers whose fetch raised.
        unmatched_symbols: Requested symbols no provider returned.
        failed_assets: Asset ids whose snapshot could not be written.
        cancelled: True when the cycle stopped before writing.
    """

    recorded: list[PriceSnapshot] = field(default_factory=list)
    fresh_assets: int = 0
    failed_providers: list[str] = field(default_factory=list)
    unmatched_symbols: list[str] = field(default_factory=list)
    failed_assets: list[str] = field(default_factory=list)
    cancelled: bool = False


@dataclass(frozen=True)
class _FetchedBatch:
    assets: list[InvestmentAsset]
    quotes: list[MarketQuote]


class RefreshPricesUseCase:
    """Fetch quotes for stale assets and append them to the price history.

    Every quote is fetched before anything is written, so no database
    work overlaps with network calls. Crypto assets go to the crypto
    provider and every other asset type to the stock provider.
    """

    def __init__(
        self,
        ledger_port: LedgerReadModelPort,
        price_store: PriceSnapshotStorePort,
        stock_provider: QuoteProviderPort | None = None,
        crypto_provider: QuoteProviderPort | None = None,
        logger=None,
        max_age: timedelta = PRICE_REFRESH_MAX_AGE,
    ) -> None:
        """Initialize the use case.

        Args:
            ledger_port: Port providing the investment assets.
            price_store: Port storing price snapshots.
            stock_provider: Provider for equities and ETFs.
            crypto_provider: Provider for crypto assets.
            logger: Optional logger compatible with logging.Logger-like API.
            max_age: Age after which a price is refreshed.
        """
        self._ledger_port = ledger_port
        self._price_store = price_store
        self._stock_provider = stock_provider
        self._crypto_provider = crypto_provider
        self._logger = logger or get_app_logger()
        self._max_age = max_age

    def execute(
        self,
        now: datetime | None = None,
        cancel_event: threading.Event | None = None,
        force: bool = False,
    ) -> PriceRefreshResult:
        """Run one refresh cycle.

        Args:
            now: Optional current time, mainly for tests.
            cancel_event: Event checked between providers and before writes.
            force: Refresh every asset regardless of price age.

        Returns:
            PriceRefreshResult: Summary of the cycle.
        """
        now = now or datetime.now(timezone.utc)
        assets = self._ledger_port.fetch_investment_assets()
        latest = self._price_store.fetch_latest_snapshots()

        stale = [
            asset
            for asset in assets
            if force
            or is_price_refresh_due(
                latest.get(asset.identifier),
                now,
                self._max_age,
            )
        ]
        fresh_assets = len(assets) - len(stale)
        if not stale:
            self._logger.info("All prices are fresh; nothing to refresh")
            return PriceRefreshResult(fresh_assets=fresh_assets)

        crypto_assets = [a for a in stale if is_crypto_asset_type(a.asset_type)]
        stock_assets = [
            a for a in stale if not is_crypto_asset_type(a.asset_type)
        ]

        batches: list[_FetchedBatch] = []
        failed: list[str] = []
        for provider, group in (
            (self._stock_provider, stock_assets),
            (self._crypto_provider, crypto_assets),
        ):
            if not group:
                continue
            if _is_cancelled(cancel_event):
                return self._cancelled(fresh_assets, failed)
            if provider is None:
                self._logger.warning(
                    f"No quote provider configured for {len(group)} assets"
                )
                continue
            symbols = sorted(
                {normalize_symbol(a.symbol) for a in group} - {None}
            )
            try:
                quotes = provider.fetch_quotes(symbols)
            except QuoteProviderError as exc:
                failed.append(provider.name)
                self._logger.warning(f"Quote provider failed: {exc}")
                continue
            self._logger.info(
                f"{provider.name} returned {len(quotes)} of "
                f"{len(symbols)} quotes"
            )
            batches.append(_FetchedBatch(assets=group, quotes=quotes))

        if _is_cancelled(cancel_event):
            return self._cancelled(fresh_assets, failed)

        recorded: list[PriceSnapshot] = []
        unmatched: list[str] = []
        failed_assets: list[str] = []
        for batch in batches:
            by_symbol = {
                normalize_symbol(quote.symbol): quote for quote in batch.quotes
            }
            for asset in batch.assets:
                quote = by_symbol.get(normalize_symbol(asset.symbol))
                if quote is None:
                    unmatched.append(asset.symbol)
                    continue
                snapshot = PriceSnapshot(
                    asset_id=asset.identifier,
                    price=Money(quote.price, quote.currency_code),
                    provider=quote.provider,
                    timestamp=now,
                )
                try:
                    recorded.append(self._price_store.record_snapshot(snapshot))
                except Exception as exc:
                    failed_assets.append(asset.identifier)
                    self._logger.error(
                        f"Failed to record price for {asset.identifier}: {exc}"
                    )

        if unmatched:
            self._logger.warning(
                f"No quote returned for: {', '.join(sorted(unmatched))}"
            )
        self._logger.info(
            f"Price refresh recorded {len(recorded)} snapshots, "
            f"{fresh_assets} assets already fresh"
        )
        return PriceRefreshResult(
            recorded=recorded,
            fresh_assets=fresh_assets,
            failed_providers=failed,
            unmatched_symbols=sorted(unmatched),
            failed_assets=failed_assets,
        )

    def _cancelled(
        self,
        fresh_assets: int,
        failed: list[str],
    ) -> PriceRefreshResult:
        self._logger.info("Price refresh cancelled before writing")
        return PriceRefreshResult(
            fresh_assets=fresh_assets,
            failed_providers=failed,
            cancelled=True,
        )


def _is_cancelled(cancel_event: threading.Event | None) -> bool:
    return cancel_event is not None and cancel_event.is_set()


__all__ = ["PriceRefreshResult", "RefreshPricesUseCase"]
