"""Port for the append-only price snapshot store."""

from collections.abc import Callable
from datetime import datetime
from typing import Protocol

from networth_engine.domain.models import PriceSnapshot


class PriceSnapshotStorePort(Protocol):
    """Port exposing price history per investment asset."""

    def record_snapshot(self, snapshot: PriceSnapshot) -> PriceSnapshot:
        """Append a snapshot and return it with its assigned id."""

    def fetch_latest_snapshot(self, asset_id: str) -> PriceSnapshot | None:
        """Return the latest snapshot of an asset."""

    def fetch_latest_snapshots(
        self,
        on_skip: Callable[[int], None] | None = None,
    ) -> dict[str, PriceSnapshot]:
        """Return the latest snapshot for every asset with a price.

        Rows that cannot be read are left out and reported to ``on_skip``.
        """

    def fetch_history(
        self,
        asset_id: str,
        since: datetime | None = None,
    ) -> list[PriceSnapshot]:
        """Return snapshots of an asset, oldest first."""


__all__ = ["PriceSnapshotStorePort"]
