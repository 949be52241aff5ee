"""Domain normalization helpers."""


def normalize_currency_code(code: str | None) -> str | None:
    """Normalize ISO currency codes.

    Args:
        code: Raw currency code from a repository or provider.

    Returns:
        str | None: Upper-cased code, or None when blank.
    """
    if not code:
        return None
    cleaned = code.strip()
    return cleaned.upper() if cleaned else None


def normalize_symbol(symbol: str | None) -> str | None:
    """Normalize ticker or coin symbols.

    Args:
        symbol: Raw symbol value.

    Returns:
        str | None: Upper-cased symbol, or None when blank.
    """
    if not symbol:
        return None
    cleaned = symbol.strip()
    return cleaned.upper() if cleaned else None


__all__ = ["normalize_currency_code", "normalize_symbol"]
