"""SQLAlchemy store for monotonic period markers."""

from datetime import datetime, timezone

from sqlalchemy import text
from sqlalchemy.engine import Connection
from sqlalchemy.exc import IntegrityError

from networth_engine.application.ports.database import DatabaseEnginePort
from networth_engine.domain.models import PeriodKey, PeriodMarker
from networth_engine.infrastructure.logging.logger import get_app_logger
from networth_engine.infrastructure.sql_values import timestamp_to_text


INSERT_MARKER_SQL = text(
    """
    INSERT INTO period_markers (scope, period_key, tag, claimed_at)
    VALUES (:scope, :period_key, :tag, :claimed_at)
    """
)

SELECT_MARKERS_SQL = text(
    """
    SELECT scope, period_key, tag
    FROM period_markers
    WHERE scope = :scope
    ORDER BY period_key, tag
    """
)

SELECT_MARKER_SQL = text(
    """
    SELECT 1
    FROM period_markers
    WHERE scope = :scope AND period_key = :period_key AND tag = :tag
    """
)


def insert_marker(conn: Connection, marker: PeriodMarker) -> None:
    """Insert a marker inside the caller's transaction.

    Raises:
        IntegrityError: If the marker was already claimed.
    """
    conn.execute(
        INSERT_MARKER_SQL,
        {
            "scope": marker.scope,
            "period_key": str(marker.period_key),
            "tag": marker.tag,
            "claimed_at": timestamp_to_text(datetime.now(timezone.utc)),
        },
    )


class SqlAlchemyPeriodMarkerStore:
    """Claim-once markers; a claimed marker is never released."""

    def __init__(self, db_port: DatabaseEnginePort, logger=None) -> None:
        self._db_port = db_port
        self._logger = logger or get_app_logger()

    def claim(self, marker: PeriodMarker) -> bool:
        """Claim a marker in its own transaction.

        Returns:
            bool: True when this call claimed it, False when it already was.
        """
        engine = self._db_port.get_ledger_engine()
        try:
            with engine.begin() as conn:
                insert_marker(conn, marker)
        except IntegrityError:
            self._logger.info(
                f"Marker {marker.scope}/{marker.period_key}/{marker.tag} "
                "already claimed"
            )
            return False
        return True

    def is_claimed(self, marker: PeriodMarker) -> bool:
        engine = self._db_port.get_ledger_engine()
        with engine.connect() as conn:
            row = conn.execute(
                SELECT_MARKER_SQL,
                {
                    "scope": marker.scope,
                    "period_key": str(marker.period_key),
                    "tag": marker.tag,
                },
            ).first()
        return row is not None

    def fetch_markers(self, scope: str) -> list[PeriodMarker]:
        engine = self._db_port.get_ledger_engine()
        with engine.connect() as conn:
            rows = conn.execute(SELECT_MARKERS_SQL, {"scope": scope}).all()
        return [
            PeriodMarker(
                scope=row.scope,
                period_key=PeriodKey.parse(row.period_key),
                tag=row.tag,
            )
            for row in rows
        ]


__all__ = [
    "insert_marker",
    "SqlAlchemyPeriodMarkerStore",
    "INSERT_MARKER_SQL",
]
