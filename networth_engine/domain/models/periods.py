"""Calendar periods and monotonic period markers."""

from dataclasses import dataclass
from datetime import datetime, tzinfo
from functools import total_ordering


@total_ordering
@dataclass(frozen=True)
class PeriodKey:
    """Calendar month used to key idempotent events."""

    year: int
    month: int

    def __post_init__(self) -> None:
        if not 1 <= self.month <= 12:
            raise ValueError(f"Month out of range: {self.month}")

    @classmethod
    def from_datetime(
        cls,
        moment: datetime,
        tz: tzinfo | None = None,
    ) -> "PeriodKey":
        """Return the calendar month of a moment, seen from ``tz``."""
        if tz is not None and moment.tzinfo is not None:
            moment = moment.astimezone(tz)
        return cls(moment.year, moment.month)

    @classmethod
    def parse(cls, raw: str) -> "PeriodKey":
        year, month = raw.strip().split("-", 1)
        return cls(int(year), int(month))

    def shift(self, months: int) -> "PeriodKey":
        index = self.year * 12 + (self.month - 1) + months
        return PeriodKey(index // 12, index % 12 + 1)

    def __lt__(self, other: "PeriodKey") -> bool:
        if not isinstance(other, PeriodKey):
            return NotImplemented
        return (self.year, self.month) < (other.year, other.month)

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"


@dataclass(frozen=True)
class PeriodMarker:
    """Persisted tag recording that an event happened in a period.

    Markers only ever get added; a new period starts with no markers.

    Attributes:
        scope: Owner of the marker, e.g. ``net_worth_snapshot`` or
            ``budget:<id>``.
        tag: Event name within the scope, e.g. ``captured`` or ``80``.
    """

    scope: str
    period_key: PeriodKey
    tag: str


__all__ = ["PeriodKey", "PeriodMarker"]
