"""Use case capturing at most one net worth snapshot per calendar month."""

from datetime import datetime, timezone, tzinfo
import uuid

from networth_engine.application.ports.snapshots import (
    NetWorthSnapshotRepositoryPort,
)
from networth_engine.application.use_cases.get_net_worth_totals import (
    GetNetWorthTotalsUseCase,
)
from networth_engine.domain.models import NetWorthSnapshot, PeriodKey
from networth_engine.domain.services.snapshots import is_snapshot_due
from networth_engine.infrastructure.logging.logger import get_app_logger


class EnsureNetWorthSnapshotUseCase:
    """Persist a snapshot when the current month has none yet."""

    def __init__(
        self,
        snapshot_repository: NetWorthSnapshotRepositoryPort,
        totals_use_case: GetNetWorthTotalsUseCase,
        logger=None,
        tz: tzinfo | None = None,
    ) -> None:
        """Initialize the use case.

        Args:
            snapshot_repository: Port storing net worth snapshots.
            totals_use_case: Use case computing the current totals.
            logger: Optional logger compatible with logging.Logger-like API.
            tz: Timezone whose calendar defines month boundaries.
        """
        self._snapshot_repository = snapshot_repository
        self._totals_use_case = totals_use_case
        self._logger = logger or get_app_logger()
        self._tz = tz

    def execute(self, now: datetime | None = None) -> NetWorthSnapshot | None:
        """Capture the snapshot of the current month if it is due.

        Args:
            now: Optional current time, mainly for tests.

        Returns:
            NetWorthSnapshot | None: Stored snapshot, None when nothing was
            due or another writer captured the month first.
        """
        now = now or datetime.now(timezone.utc)
        latest = self._snapshot_repository.fetch_latest_snapshot()
        last_timestamp = latest.timestamp if latest else None
        if not is_snapshot_due(last_timestamp, now, self._tz):
            self._logger.info(
                f"Net worth snapshot not due; latest is {latest.period_key}"
            )
            return None

        totals = self._totals_use_case.execute()
        period_key = PeriodKey.from_datetime(now, self._tz)
        snapshot = NetWorthSnapshot.from_totals(
            identifier=str(uuid.uuid4()),
            timestamp=now,
            period_key=period_key,
            totals=totals,
        )
        stored = self._snapshot_repository.insert_snapshot(snapshot)
        if stored is None:
            self._logger.info(
                f"Net worth snapshot for {period_key} already captured"
            )
            return None

        self._logger.info(
            f"Net worth snapshot captured for {period_key}: "
            f"{stored.net_worth} {stored.currency_code}"
        )
        return stored


__all__ = ["EnsureNetWorthSnapshotUseCase"]
