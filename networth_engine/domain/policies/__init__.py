"""Domain policies package."""

from .classification import (
    is_crypto_asset_type,
    is_manual_investment_kind,
    is_receivable_kind,
)

__all__ = [
    "is_crypto_asset_type",
    "is_manual_investment_kind",
    "is_receivable_kind",
]
