"""Application ports package."""

from .budgets import BudgetRepositoryPort
from .database import DatabaseEnginePort
from .external import (
    ExchangeRateSourcePort,
    NotificationSinkPort,
    QuoteProviderPort,
    SettingsProviderPort,
)
from .ledger_repository import HoldingLotRepositoryPort, LedgerReadModelPort
from .price_snapshots import PriceSnapshotStorePort
from .snapshots import NetWorthSnapshotRepositoryPort

__all__ = [
    "BudgetRepositoryPort",
    "DatabaseEnginePort",
    "ExchangeRateSourcePort",
    "NotificationSinkPort",
    "QuoteProviderPort",
    "SettingsProviderPort",
    "HoldingLotRepositoryPort",
    "LedgerReadModelPort",
    "PriceSnapshotStorePort",
    "NetWorthSnapshotRepositoryPort",
]
