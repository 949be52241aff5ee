"""CLI adapter refreshing stale investment prices."""

import os

from networth_engine.infrastructure.container import (
    build_database_adapter,
    build_refresh_prices_use_case,
)


def main() -> None:
    """Run one price refresh cycle.

    Set ``PRICE_REFRESH_FORCE=1`` to refresh prices that are still fresh.
    """
    force = os.getenv("PRICE_REFRESH_FORCE", "").strip().lower() in {
        "1",
        "true",
        "yes",
    }
    use_case = build_refresh_prices_use_case(build_database_adapter())

    result = use_case.execute(force=force)

    print(
        f"Recorded {len(result.recorded)} price snapshots "
        f"({result.fresh_assets} already fresh)."
    )
    if result.failed_providers:
        print(f"Failed providers: {', '.join(result.failed_providers)}")
    if result.unmatched_symbols:
        print(f"No quote for: {', '.join(result.unmatched_symbols)}")
    if result.failed_assets:
        print(f"Failed to store: {', '.join(result.failed_assets)}")


if __name__ == "__main__":  # pragma: no cover
    main()
