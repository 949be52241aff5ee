"""Port for persisted net worth snapshots."""

from datetime import datetime
from typing import Protocol

from networth_engine.domain.models import NetWorthSnapshot


class NetWorthSnapshotRepositoryPort(Protocol):
    """Port exposing net worth snapshot storage."""

    def fetch_latest_snapshot(self) -> NetWorthSnapshot | None:
        """Return the most recent snapshot."""

    def insert_snapshot(
        self,
        snapshot: NetWorthSnapshot,
    ) -> NetWorthSnapshot | None:
        """Insert a snapshot unless its period is already captured.

        Returns:
            NetWorthSnapshot | None: Stored snapshot, None when another
            writer already captured the period.
        """

    def fetch_snapshots(
        self,
        since: datetime | None = None,
    ) -> list[NetWorthSnapshot]:
        """Return snapshots oldest first."""

    def update_notes(self, snapshot_id: int, notes: str | None) -> bool:
        """Replace the notes of a snapshot; False when it does not exist."""


__all__ = ["NetWorthSnapshotRepositoryPort"]
