"""Conversions between domain values and their stored text form.

Amounts are stored as decimal text and timestamps as ISO-8601 UTC text so
that lexical order matches chronological order.
"""

from datetime import date, datetime, timezone
from decimal import Decimal

from networth_engine.utils.decimal_utils import coerce_decimal, decimal_to_text


def timestamp_to_text(value: datetime) -> str:
    """Return ``value`` as ISO-8601 text in UTC; naive values are UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="microseconds")


def text_to_timestamp(raw) -> datetime:
    if isinstance(raw, datetime):
        moment = raw
    else:
        moment = datetime.fromisoformat(str(raw))
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment


def optional_timestamp(raw) -> datetime | None:
    if raw is None or raw == "":
        return None
    return text_to_timestamp(raw)


def date_to_text(value: date) -> str:
    return value.isoformat()


def text_to_date(raw) -> date:
    if isinstance(raw, datetime):
        return raw.date()
    if isinstance(raw, date):
        return raw
    return date.fromisoformat(str(raw)[:10])


def amount_to_text(value) -> str:
    return decimal_to_text(coerce_decimal(value))


def text_to_amount(raw) -> Decimal:
    return coerce_decimal(raw)


def flag(raw) -> bool:
    return bool(int(raw)) if raw is not None else False


__all__ = [
    "timestamp_to_text",
    "text_to_timestamp",
    "optional_timestamp",
    "date_to_text",
    "text_to_date",
    "amount_to_text",
    "text_to_amount",
    "flag",
]
