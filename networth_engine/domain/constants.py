"""Domain constants for valuation and budgeting."""

from datetime import timedelta

DEFAULT_BASE_CURRENCY = "USD"

BUDGET_ALERT_THRESHOLDS = (50, 80, 100)

PRICE_REFRESH_MAX_AGE = timedelta(hours=1)

RECEIVABLE_KIND_MARKER = "receiv"
CRYPTO_ASSET_TYPE_MARKER = "crypto"
MANUAL_INVESTMENT_KIND_MARKER = "investment"

NET_WORTH_SNAPSHOT_SCOPE = "net_worth_snapshot"
NET_WORTH_SNAPSHOT_TAG = "captured"
BUDGET_SCOPE_PREFIX = "budget:"


__all__ = [
    "DEFAULT_BASE_CURRENCY",
    "BUDGET_ALERT_THRESHOLDS",
    "PRICE_REFRESH_MAX_AGE",
    "RECEIVABLE_KIND_MARKER",
    "CRYPTO_ASSET_TYPE_MARKER",
    "MANUAL_INVESTMENT_KIND_MARKER",
    "NET_WORTH_SNAPSHOT_SCOPE",
    "NET_WORTH_SNAPSHOT_TAG",
    "BUDGET_SCOPE_PREFIX",
]
