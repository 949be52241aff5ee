"""Domain validation helpers."""

from decimal import Decimal
from logging import Logger


def validate_balance_sign(
    entity_kind: str,
    identifier: str,
    amount: Decimal,
    logger: Logger,
) -> None:
    """Warn when a stored amount violates the sign convention.

    Manual assets, liabilities and lot quantities are stored as positive
    values; liabilities are subtracted by the aggregator.

    Args:
        entity_kind: Label of the entity (asset, liability, lot).
        identifier: Identifier of the entity for the log message.
        amount: Stored amount.
        logger: Logger used for warnings.
    """
    if amount < 0:
        logger.warning(
            f"Negative {entity_kind} amount for {identifier}: {amount}"
        )


__all__ = ["validate_balance_sign"]
