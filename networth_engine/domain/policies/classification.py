"""Classification rules for net worth buckets.

These are loose substring matches: any kind containing
``receiv`` is a receivable and any asset type containing ``crypto`` goes to
the crypto bucket. Everything else, ETFs and funds included, is treated as
stock.
"""

from networth_engine.domain.constants import (
    CRYPTO_ASSET_TYPE_MARKER,
    MANUAL_INVESTMENT_KIND_MARKER,
    RECEIVABLE_KIND_MARKER,
)


def is_receivable_kind(kind: str | None) -> bool:
    """Return True when a manual asset kind denotes a receivable.

    Args:
        kind: Free-form kind tag of the manual asset.

    Returns:
        bool: True when the lower-cased kind contains ``receiv``.
    """
    if not kind:
        return False
    return RECEIVABLE_KIND_MARKER in kind.lower()


def is_crypto_asset_type(asset_type: str | None) -> bool:
    """Return True when an investment asset belongs to the crypto bucket.

    Args:
        asset_type: Asset type of the investment asset.

    Returns:
        bool: True when the lower-cased type contains ``crypto``.
    """
    if not asset_type:
        return False
    return CRYPTO_ASSET_TYPE_MARKER in asset_type.lower()


def is_manual_investment_kind(kind: str | None, coin_id: str | None = None) -> bool:
    """Return True when a manual asset tracks a market position."""
    if coin_id:
        return True
    if not kind:
        return False
    return MANUAL_INVESTMENT_KIND_MARKER in kind.lower()


__all__ = [
    "is_receivable_kind",
    "is_crypto_asset_type",
    "is_manual_investment_kind",
]
