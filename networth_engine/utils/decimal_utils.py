"""Helpers for Decimal normalization."""

from decimal import Decimal, InvalidOperation


def coerce_decimal(value) -> Decimal:
    """Normalize numeric values to Decimal.

    Floats go through ``str`` so the binary representation never leaks into
    stored amounts.

    Args:
        value: Raw numeric value from SQL, JSON payloads or adapters.

    Returns:
        Decimal: Normalized numeric value.

    Raises:
        ValueError: If the value cannot be read as a finite decimal.
    """
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value).strip())
        except InvalidOperation as exc:
            raise ValueError(f"Not a decimal value: {value!r}") from exc
    if not result.is_finite():
        raise ValueError(f"Not a finite decimal value: {value!r}")
    return result


def optional_decimal(value) -> Decimal | None:
    """Return None for missing values, otherwise a coerced Decimal."""
    if value is None or value == "":
        return None
    return coerce_decimal(value)


def decimal_to_text(value: Decimal | None) -> str | None:
    """Serialize a Decimal for TEXT storage without exponent noise."""
    if value is None:
        return None
    return format(value, "f")


__all__ = ["coerce_decimal", "optional_decimal", "decimal_to_text"]
