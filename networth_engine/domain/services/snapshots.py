"""Snapshot cadence and history filtering."""

from datetime import datetime, tzinfo
from typing import Iterable

from networth_engine.domain.models import (
    NetWorthMetric,
    NetWorthPoint,
    NetWorthRange,
    NetWorthSnapshot,
    PeriodKey,
)


def is_snapshot_due(
    last_timestamp: datetime | None,
    now: datetime,
    tz: tzinfo | None = None,
) -> bool:
    """Return True when no snapshot exists for the calendar month of ``now``.

    A clock that moved back into an already captured month never makes a
    snapshot due.

    Args:
        last_timestamp: Timestamp of the most recent snapshot, if any.
        now: Current time.
        tz: Timezone whose calendar defines the month boundaries.
    """
    if last_timestamp is None:
        return True
    return PeriodKey.from_datetime(now, tz) > PeriodKey.from_datetime(
        last_timestamp,
        tz,
    )


def filter_history(
    snapshots: Iterable[NetWorthSnapshot],
    history_range: NetWorthRange,
    now: datetime,
    tz: tzinfo | None = None,
) -> list[NetWorthSnapshot]:
    """Keep snapshots captured within the range, oldest first."""
    ordered = sorted(snapshots, key=lambda item: item.timestamp)
    months_back = history_range.months_back
    if months_back is None:
        return ordered
    start = PeriodKey.from_datetime(now, tz).shift(-months_back)
    return [
        snapshot
        for snapshot in ordered
        if PeriodKey.from_datetime(snapshot.timestamp, tz) >= start
    ]


def metric_series(
    snapshots: Iterable[NetWorthSnapshot],
    metric: NetWorthMetric,
) -> list[NetWorthPoint]:
    return [
        NetWorthPoint(timestamp=snapshot.timestamp, value=metric.value_for(snapshot))
        for snapshot in snapshots
    ]


__all__ = ["is_snapshot_due", "filter_history", "metric_series"]
