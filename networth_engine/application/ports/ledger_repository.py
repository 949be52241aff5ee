"""Ports for reading ledger entities and writing holding lots."""

from collections.abc import Callable
from typing import Protocol

from networth_engine.domain.models import (
    HoldingLot,
    InvestmentAccount,
    InvestmentAsset,
    LotSaleOutcome,
    ManualAsset,
    ManualLiability,
    Wallet,
)


class LedgerReadModelPort(Protocol):
    """Port exposing read access to the entities counted in net worth."""

    def fetch_wallets(
        self,
        on_skip: Callable[[str], None] | None = None,
    ) -> list[Wallet]:
        """Return all wallets.

        Rows that cannot be read are left out and reported to ``on_skip``.
        """

    def fetch_manual_assets(
        self,
        on_skip: Callable[[str], None] | None = None,
    ) -> list[ManualAsset]:
        """Return all manual assets."""

    def fetch_manual_liabilities(
        self,
        on_skip: Callable[[str], None] | None = None,
    ) -> list[ManualLiability]:
        """Return all manual liabilities."""

    def fetch_holding_lots(
        self,
        on_skip: Callable[[str], None] | None = None,
    ) -> list[HoldingLot]:
        """Return every holding lot with its asset reference."""

    def fetch_investment_assets(self) -> list[InvestmentAsset]:
        """Return every investment asset."""

    def fetch_investment_accounts(self) -> list[InvestmentAccount]:
        """Return every investment account."""


class HoldingLotRepositoryPort(Protocol):
    """Port exposing lot lookups and sale persistence."""

    def fetch_lot(self, lot_id: str) -> HoldingLot | None:
        """Return a lot by identifier, None when absent."""

    def apply_sale(
        self,
        expected_quantity,
        outcome: LotSaleOutcome,
    ) -> None:
        """Persist a sale if the lot still holds ``expected_quantity``.

        Raises:
            ConcurrentModificationError: If the lot changed meanwhile.
        """


__all__ = ["LedgerReadModelPort", "HoldingLotRepositoryPort"]
