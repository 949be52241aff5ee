"""SQLAlchemy repository for monthly net worth snapshots."""

from datetime import datetime

from sqlalchemy import text
from sqlalchemy.exc import IntegrityError

from networth_engine.application.ports.database import DatabaseEnginePort
from networth_engine.application.ports.snapshots import (
    NetWorthSnapshotRepositoryPort,
)
from networth_engine.domain.constants import (
    NET_WORTH_SNAPSHOT_SCOPE,
    NET_WORTH_SNAPSHOT_TAG,
)
from networth_engine.domain.models import (
    NetWorthSnapshot,
    PeriodKey,
    PeriodMarker,
)
from networth_engine.infrastructure.logging.logger import get_app_logger
from networth_engine.infrastructure.period_markers import insert_marker
from networth_engine.infrastructure.sql_values import (
    amount_to_text,
    text_to_amount,
    text_to_timestamp,
    timestamp_to_text,
)


AMOUNT_FIELDS = (
    "total_assets",
    "total_liabilities",
    "net_worth",
    "core_net_worth",
    "tangible_net_worth",
    "volatile_assets",
    "wallet_assets",
    "manual_assets",
    "receivables",
    "stock_investments",
    "crypto_investments",
)

_SNAPSHOT_COLUMNS = (
    "id, identifier, captured_at, period_key, currency_code, "
    + ", ".join(AMOUNT_FIELDS)
    + ", notes"
)

INSERT_SNAPSHOT_SQL = text(
    "INSERT INTO net_worth_snapshots ("
    "identifier, captured_at, period_key, currency_code, "
    + ", ".join(AMOUNT_FIELDS)
    + ", notes) VALUES ("
    ":identifier, :captured_at, :period_key, :currency_code, "
    + ", ".join(f":{name}" for name in AMOUNT_FIELDS)
    + ", :notes) RETURNING id"
)

SELECT_LATEST_SNAPSHOT_SQL = text(
    f"SELECT {_SNAPSHOT_COLUMNS} FROM net_worth_snapshots "
    "ORDER BY captured_at DESC, id DESC LIMIT 1"
)

SELECT_SNAPSHOTS_SQL = text(
    f"SELECT {_SNAPSHOT_COLUMNS} FROM net_worth_snapshots "
    "WHERE captured_at >= :since ORDER BY captured_at, id"
)

UPDATE_NOTES_SQL = text(
    """
    UPDATE net_worth_snapshots
    SET notes = :notes
    WHERE id = :id
    """
)


class SqlAlchemyNetWorthSnapshotRepository(NetWorthSnapshotRepositoryPort):
    """Net worth snapshots keyed by their calendar month."""

    def __init__(self, db_port: DatabaseEnginePort, logger=None) -> None:
        self._db_port = db_port
        self._logger = logger or get_app_logger()

    def fetch_latest_snapshot(self) -> NetWorthSnapshot | None:
        engine = self._db_port.get_ledger_engine()
        with engine.connect() as conn:
            row = conn.execute(SELECT_LATEST_SNAPSHOT_SQL).first()
        return self._from_row(row) if row is not None else None

    def insert_snapshot(
        self,
        snapshot: NetWorthSnapshot,
    ) -> NetWorthSnapshot | None:
        """Claim the snapshot period and insert the row in one transaction.

        Both the period marker and the ``period_key`` column are unique, so
        of two concurrent writers for the same month only one commits.

        Args:
            snapshot: Snapshot to store.

        Returns:
            NetWorthSnapshot | None: Stored snapshot with its id, None when
            the period was already captured.
        """
        marker = PeriodMarker(
            scope=NET_WORTH_SNAPSHOT_SCOPE,
            period_key=snapshot.period_key,
            tag=NET_WORTH_SNAPSHOT_TAG,
        )
        params = {
            "identifier": snapshot.identifier,
            "captured_at": timestamp_to_text(snapshot.timestamp),
            "period_key": str(snapshot.period_key),
            "currency_code": snapshot.currency_code,
            "notes": snapshot.notes,
        }
        for name in AMOUNT_FIELDS:
            params[name] = amount_to_text(getattr(snapshot, name))

        engine = self._db_port.get_ledger_engine()
        try:
            with engine.begin() as conn:
                insert_marker(conn, marker)
                snapshot_id = conn.execute(
                    INSERT_SNAPSHOT_SQL,
                    params,
                ).scalar_one()
        except IntegrityError:
            self._logger.info(
                f"Snapshot for {snapshot.period_key} lost to another writer"
            )
            return None

        return self._with_id(snapshot, snapshot_id)

    def fetch_snapshots(
        self,
        since: datetime | None = None,
    ) -> list[NetWorthSnapshot]:
        engine = self._db_port.get_ledger_engine()
        with engine.connect() as conn:
            rows = conn.execute(
                SELECT_SNAPSHOTS_SQL,
                {"since": timestamp_to_text(since) if since else ""},
            ).all()
        return [self._from_row(row) for row in rows]

    def update_notes(self, snapshot_id: int, notes: str | None) -> bool:
        engine = self._db_port.get_ledger_engine()
        with engine.begin() as conn:
            result = conn.execute(
                UPDATE_NOTES_SQL,
                {"id": snapshot_id, "notes": notes},
            )
        return result.rowcount == 1

    @staticmethod
    def _with_id(snapshot: NetWorthSnapshot, snapshot_id: int) -> NetWorthSnapshot:
        values = {name: getattr(snapshot, name) for name in AMOUNT_FIELDS}
        return NetWorthSnapshot(
            identifier=snapshot.identifier,
            timestamp=snapshot.timestamp,
            period_key=snapshot.period_key,
            currency_code=snapshot.currency_code,
            notes=snapshot.notes,
            snapshot_id=snapshot_id,
            **values,
        )

    @staticmethod
    def _from_row(row) -> NetWorthSnapshot:
        values = {
            name: text_to_amount(getattr(row, name)) for name in AMOUNT_FIELDS
        }
        return NetWorthSnapshot(
            identifier=row.identifier,
            timestamp=text_to_timestamp(row.captured_at),
            period_key=PeriodKey.parse(row.period_key),
            currency_code=row.currency_code,
            notes=row.notes,
            snapshot_id=row.id,
            **values,
        )


__all__ = ["SqlAlchemyNetWorthSnapshotRepository", "AMOUNT_FIELDS"]
