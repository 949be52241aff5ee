"""SQLAlchemy store for the append-only price history."""

from datetime import datetime
import threading

from sqlalchemy import text

from networth_engine.application.ports.database import DatabaseEnginePort
from networth_engine.application.ports.price_snapshots import (
    PriceSnapshotStorePort,
)
from networth_engine.domain.models import Money, PriceSnapshot
from networth_engine.domain.services.prices import select_latest_snapshot
from networth_engine.infrastructure.logging.logger import get_app_logger
from networth_engine.infrastructure.sql_values import (
    amount_to_text,
    text_to_timestamp,
    timestamp_to_text,
)


INSERT_PRICE_SNAPSHOT_SQL = text(
    """
    INSERT INTO price_snapshots (
        asset_id, price, currency_code, provider, recorded_at
    )
    VALUES (:asset_id, :price, :currency_code, :provider, :recorded_at)
    RETURNING id
    """
)

SELECT_LATEST_PRICE_SQL = text(
    """
    SELECT id, asset_id, price, currency_code, provider, recorded_at
    FROM price_snapshots
    WHERE asset_id = :asset_id
    ORDER BY recorded_at DESC, id DESC
    LIMIT 1
    """
)

SELECT_ALL_PRICES_SQL = text(
    """
    SELECT id, asset_id, price, currency_code, provider, recorded_at
    FROM price_snapshots
    ORDER BY asset_id, recorded_at, id
    """
)

SELECT_PRICE_HISTORY_SQL = text(
    """
    SELECT id, asset_id, price, currency_code, provider, recorded_at
    FROM price_snapshots
    WHERE asset_id = :asset_id AND recorded_at >= :since
    ORDER BY recorded_at, id
    """
)

_WRITE_LOCK = threading.Lock()


class SqlAlchemyPriceSnapshotStore(PriceSnapshotStorePort):
    """Price snapshots stored insert-only in the ledger database.

    Snapshots are never updated or deleted, and quotes from different
    providers are kept side by side.
    """

    def __init__(self, db_port: DatabaseEnginePort, logger=None) -> None:
        self._db_port = db_port
        self._logger = logger or get_app_logger()

    def record_snapshot(self, snapshot: PriceSnapshot) -> PriceSnapshot:
        """Append a snapshot.

        Args:
            snapshot: Snapshot without an id.

        Returns:
            PriceSnapshot: The stored snapshot with its sequence id.
        """
        engine = self._db_port.get_ledger_engine()
        with _WRITE_LOCK:
            with engine.begin() as conn:
                snapshot_id = conn.execute(
                    INSERT_PRICE_SNAPSHOT_SQL,
                    {
                        "asset_id": snapshot.asset_id,
                        "price": amount_to_text(snapshot.price.amount),
                        "currency_code": snapshot.price.currency_code,
                        "provider": snapshot.provider,
                        "recorded_at": timestamp_to_text(snapshot.timestamp),
                    },
                ).scalar_one()
        return PriceSnapshot(
            asset_id=snapshot.asset_id,
            price=snapshot.price,
            provider=snapshot.provider,
            timestamp=snapshot.timestamp,
            snapshot_id=snapshot_id,
        )

    def fetch_latest_snapshot(self, asset_id: str) -> PriceSnapshot | None:
        engine = self._db_port.get_ledger_engine()
        with engine.connect() as conn:
            row = conn.execute(
                SELECT_LATEST_PRICE_SQL,
                {"asset_id": asset_id},
            ).first()
        return self._from_row(row) if row is not None else None

    def fetch_latest_snapshots(self, on_skip=None) -> dict[str, PriceSnapshot]:
        """Return the latest snapshot of every asset with a price.

        A row that cannot be read is skipped, so an older readable snapshot
        of the same asset may be returned instead.

        Args:
            on_skip: Optional callable receiving the id of each skipped row.
        """
        engine = self._db_port.get_ledger_engine()
        with engine.connect() as conn:
            rows = conn.execute(SELECT_ALL_PRICES_SQL).all()

        history: dict[str, list[PriceSnapshot]] = {}
        for snapshot in self._read_rows(rows, on_skip):
            history.setdefault(snapshot.asset_id, []).append(snapshot)
        return {
            asset_id: select_latest_snapshot(snapshots)
            for asset_id, snapshots in history.items()
        }

    def fetch_history(
        self,
        asset_id: str,
        since: datetime | None = None,
    ) -> list[PriceSnapshot]:
        engine = self._db_port.get_ledger_engine()
        with engine.connect() as conn:
            rows = conn.execute(
                SELECT_PRICE_HISTORY_SQL,
                {
                    "asset_id": asset_id,
                    "since": timestamp_to_text(since) if since else "",
                },
            ).all()
        return self._read_rows(rows)

    def _read_rows(self, rows, on_skip=None) -> list[PriceSnapshot]:
        snapshots = []
        for row in rows:
            try:
                snapshots.append(self._from_row(row))
            except (ArithmeticError, TypeError, ValueError) as exc:
                self._logger.warning(
                    f"Skipping unreadable price snapshot {row.id} "
                    f"of {row.asset_id}: {exc}"
                )
                if on_skip is not None:
                    on_skip(row.id)
        return snapshots

    @staticmethod
    def _from_row(row) -> PriceSnapshot:
        return PriceSnapshot(
            asset_id=row.asset_id,
            price=Money(row.price, row.currency_code),
            provider=row.provider,
            timestamp=text_to_timestamp(row.recorded_at),
            snapshot_id=row.id,
        )


__all__ = ["SqlAlchemyPriceSnapshotStore"]
