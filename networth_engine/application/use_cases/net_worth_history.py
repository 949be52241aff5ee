"""Use cases reading and annotating net worth snapshot history."""

from datetime import datetime, timezone, tzinfo

from networth_engine.application.ports.snapshots import (
    NetWorthSnapshotRepositoryPort,
)
from networth_engine.domain.models import (
    NetWorthMetric,
    NetWorthPoint,
    NetWorthRange,
)
from networth_engine.domain.services.snapshots import (
    filter_history,
    metric_series,
)
from networth_engine.infrastructure.logging.logger import get_app_logger


class GetNetWorthHistoryUseCase:
    """Return one metric of the snapshot history within a range."""

    def __init__(
        self,
        snapshot_repository: NetWorthSnapshotRepositoryPort,
        logger=None,
        tz: tzinfo | None = None,
    ) -> None:
        self._snapshot_repository = snapshot_repository
        self._logger = logger or get_app_logger()
        self._tz = tz

    def execute(
        self,
        history_range: NetWorthRange = NetWorthRange.ALL,
        metric: NetWorthMetric = NetWorthMetric.TOTAL,
        now: datetime | None = None,
    ) -> list[NetWorthPoint]:
        """Return the metric series, oldest first.

        Args:
            history_range: Window counted in months back from ``now``.
            metric: Snapshot figure to extract.
            now: Optional current time, mainly for tests.

        Returns:
            list[NetWorthPoint]: One point per snapshot in the window.
        """
        now = now or datetime.now(timezone.utc)
        snapshots = self._snapshot_repository.fetch_snapshots()
        kept = filter_history(snapshots, history_range, now, self._tz)
        self._logger.info(
            f"Net worth history {history_range.value}/{metric.value}: "
            f"{len(kept)} of {len(snapshots)} snapshots"
        )
        return metric_series(kept, metric)


class UpdateSnapshotNotesUseCase:
    """Edit the notes of a stored snapshot, its only mutable field."""

    def __init__(
        self,
        snapshot_repository: NetWorthSnapshotRepositoryPort,
        logger=None,
    ) -> None:
        self._snapshot_repository = snapshot_repository
        self._logger = logger or get_app_logger()

    def execute(self, snapshot_id: int, notes: str | None) -> bool:
        cleaned = notes.strip() if notes else None
        updated = self._snapshot_repository.update_notes(
            snapshot_id,
            cleaned or None,
        )
        if not updated:
            self._logger.warning(f"Snapshot {snapshot_id} not found")
        return updated


__all__ = ["GetNetWorthHistoryUseCase", "UpdateSnapshotNotesUseCase"]
