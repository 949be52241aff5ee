"""Domain services package."""

from .budgets import evaluate_budget, spending_ratio
from .finance import compute_net_worth_totals
from .fx import CurrencyConverter, decode_rates, encode_rates, rebase_rates
from .normalization import normalize_currency_code, normalize_symbol
from .prices import is_price_refresh_due, select_latest_snapshot
from .snapshots import filter_history, is_snapshot_due, metric_series
from .validation import validate_balance_sign
from .valuation import (
    LotBook,
    manual_investment_market_value,
    percent_of,
    sell_from_lot,
    summarize_account,
    valuate_lot,
)

__all__ = [
    "evaluate_budget",
    "spending_ratio",
    "compute_net_worth_totals",
    "CurrencyConverter",
    "decode_rates",
    "encode_rates",
    "rebase_rates",
    "normalize_currency_code",
    "normalize_symbol",
    "is_price_refresh_due",
    "select_latest_snapshot",
    "filter_history",
    "is_snapshot_due",
    "metric_series",
    "validate_balance_sign",
    "LotBook",
    "manual_investment_market_value",
    "percent_of",
    "sell_from_lot",
    "summarize_account",
    "valuate_lot",
]
