"""Use case selling a quantity out of an explicitly selected lot."""

from datetime import datetime, timezone

from networth_engine.application.ports.ledger_repository import (
    HoldingLotRepositoryPort,
)
from networth_engine.domain.errors import LotNotFoundError
from networth_engine.domain.models import LotSaleOutcome, Money
from networth_engine.domain.services.valuation import sell_from_lot
from networth_engine.infrastructure.logging.logger import get_app_logger


class SellHoldingUseCase:
    """Sell from one lot and persist the sale."""

    def __init__(
        self,
        lot_repository: HoldingLotRepositoryPort,
        logger=None,
    ) -> None:
        self._lot_repository = lot_repository
        self._logger = logger or get_app_logger()

    def execute(
        self,
        lot_id: str,
        quantity,
        sale_price: Money,
        sold_at: datetime | None = None,
        wallet_name: str | None = None,
    ) -> LotSaleOutcome:
        """Sell ``quantity`` units of lot ``lot_id`` at ``sale_price``.

        Args:
            lot_id: Lot chosen by the caller.
            quantity: Units to sell.
            sale_price: Price per unit.
            sold_at: Sale time, defaults to now.
            wallet_name: Optional wallet credited with the proceeds.

        Returns:
            LotSaleOutcome: Sale record and remaining lot.

        Raises:
            LotNotFoundError: If the lot does not exist.
            InvalidQuantityError: If the quantity is not positive.
            InsufficientQuantityError: If the lot holds less than requested.
            ConcurrentModificationError: If the lot changed while selling.
        """
        lot = self._lot_repository.fetch_lot(lot_id)
        if lot is None:
            raise LotNotFoundError(f"Unknown holding lot: {lot_id}")

        outcome = sell_from_lot(
            lot,
            quantity,
            sale_price,
            sold_at or datetime.now(timezone.utc),
            wallet_name=wallet_name,
        )
        self._lot_repository.apply_sale(lot.quantity, outcome)

        action = "closed" if outcome.lot_removed else "reduced"
        self._logger.info(
            f"Sold {outcome.sale.quantity} {lot.asset.symbol} from lot "
            f"{lot_id} ({action}); proceeds {outcome.sale.proceeds.amount} "
            f"{outcome.sale.proceeds.currency_code}"
        )
        return outcome


__all__ = ["SellHoldingUseCase"]
