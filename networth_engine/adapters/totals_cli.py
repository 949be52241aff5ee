"""CLI adapter printing the current net worth totals."""

from networth_engine.infrastructure.container import (
    build_database_adapter,
    build_investment_accounts_use_case,
    build_totals_use_case,
)


def main() -> None:
    """Print net worth totals and per-account investment valuations."""
    db_adapter = build_database_adapter()
    totals = build_totals_use_case(db_adapter).execute()
    accounts = build_investment_accounts_use_case(db_adapter).execute()

    currency = totals.currency_code
    print(f"Net worth ({currency}): {totals.net_worth}")
    print(
        f"assets={totals.total_assets}, "
        f"liabilities={totals.total_liabilities}, "
        f"core={totals.core_net_worth}, "
        f"tangible={totals.tangible_net_worth}, "
        f"volatile={totals.volatile_assets}"
    )
    print(
        f"wallets={totals.wallet_assets}, manual={totals.manual_assets}, "
        f"receivables={totals.receivables}, "
        f"stocks={totals.stock_investments}, "
        f"crypto={totals.crypto_investments}"
    )
    if totals.missing_rates:
        print(f"Missing rates: {', '.join(totals.missing_rates)}")
    for account in accounts:
        gain_percent = (
            "n/a" if account.gain_percent is None else f"{account.gain_percent:.2f}%"
        )
        print(
            f"{account.account.name}: cost={account.total_cost}, "
            f"market={account.market_value}, gain={account.unrealized_gain} "
            f"({gain_percent})"
        )


if __name__ == "__main__":  # pragma: no cover
    main()
