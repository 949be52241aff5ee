"""Price history selection and refresh gating."""

from datetime import datetime, timedelta
from typing import Iterable

from networth_engine.domain.constants import PRICE_REFRESH_MAX_AGE
from networth_engine.domain.models import PriceSnapshot


def select_latest_snapshot(
    snapshots: Iterable[PriceSnapshot],
) -> PriceSnapshot | None:
    """Return the snapshot with the greatest timestamp.

    Equal timestamps resolve to the highest ``snapshot_id``; when ids are
    equal or missing, the later snapshot in iteration order wins.

    Args:
        snapshots: Price history of a single asset.

    Returns:
        PriceSnapshot | None: Latest snapshot, None for an empty history.
    """
    latest: PriceSnapshot | None = None
    for snapshot in snapshots:
        if latest is None or _sort_key(snapshot) >= _sort_key(latest):
            latest = snapshot
    return latest


def is_price_refresh_due(
    latest: PriceSnapshot | None,
    now: datetime,
    max_age: timedelta = PRICE_REFRESH_MAX_AGE,
) -> bool:
    """Return True when an asset has no price or its price is too old.

    Only gates refresh cycles; valuation keeps using the latest snapshot
    however old it is.
    """
    if latest is None:
        return True
    return now - latest.timestamp > max_age


def _sort_key(snapshot: PriceSnapshot) -> tuple[datetime, int]:
    return (snapshot.timestamp, snapshot.snapshot_id or 0)


__all__ = ["select_latest_snapshot", "is_price_refresh_due"]
