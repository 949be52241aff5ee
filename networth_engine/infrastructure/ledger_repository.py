"""SQLAlchemy repository for wallets, manual entries and holding lots."""

from sqlalchemy import text

from networth_engine.application.ports.database import DatabaseEnginePort
from networth_engine.application.ports.ledger_repository import (
    HoldingLotRepositoryPort,
    LedgerReadModelPort,
)
from networth_engine.domain.errors import (
    ConcurrentModificationError,
    InvalidQuantityError,
)
from networth_engine.domain.models import (
    HoldingLot,
    InvestmentAccount,
    InvestmentAsset,
    LotSaleOutcome,
    ManualAsset,
    ManualInvestmentDetails,
    ManualLiability,
    Money,
    Wallet,
)
from networth_engine.domain.policies import is_manual_investment_kind
from networth_engine.domain.services.normalization import (
    normalize_currency_code,
    normalize_symbol,
)
from networth_engine.domain.services.valuation import (
    manual_investment_market_value,
)
from networth_engine.infrastructure.logging.logger import get_app_logger
from networth_engine.infrastructure.sql_values import (
    amount_to_text,
    date_to_text,
    flag,
    optional_timestamp,
    text_to_amount,
    text_to_date,
    timestamp_to_text,
)
from networth_engine.utils.decimal_utils import decimal_to_text, optional_decimal


SELECT_WALLETS_SQL = text(
    """
    SELECT id, name, currency_code, current_balance,
           include_in_net_worth, archived
    FROM wallets
    ORDER BY name
    """
)

SELECT_MANUAL_ASSETS_SQL = text(
    """
    SELECT id, name, kind, value, currency_code, include_in_core,
           include_in_tangible, volatility, quantity, cost_per_unit,
           market_price, market_price_currency, market_price_updated_at,
           contract_multiplier, funding_wallet_id, coin_id, symbol
    FROM manual_assets
    ORDER BY name
    """
)

SELECT_MANUAL_LIABILITIES_SQL = text(
    """
    SELECT id, name, kind, balance, currency_code
    FROM manual_liabilities
    ORDER BY name
    """
)

SELECT_INVESTMENT_ACCOUNTS_SQL = text(
    """
    SELECT id, name, institution, account_type, currency_code,
           include_in_net_worth
    FROM investment_accounts
    ORDER BY name
    """
)

SELECT_INVESTMENT_ASSETS_SQL = text(
    """
    SELECT id, symbol, name, asset_type, currency_code
    FROM investment_assets
    ORDER BY symbol
    """
)

_LOT_COLUMNS = """
    SELECT l.id, l.account_id, l.quantity, l.cost_per_unit, l.cost_currency,
           l.acquired_date, a.id AS asset_id, a.symbol, a.name AS asset_name,
           a.asset_type, a.currency_code AS asset_currency
    FROM holding_lots AS l
    JOIN investment_assets AS a ON a.id = l.asset_id
"""

SELECT_HOLDING_LOTS_SQL = text(
    _LOT_COLUMNS + " ORDER BY l.acquired_date, l.id"
)

SELECT_HOLDING_LOT_SQL = text(_LOT_COLUMNS + " WHERE l.id = :id")

UPDATE_LOT_QUANTITY_SQL = text(
    """
    UPDATE holding_lots
    SET quantity = :quantity
    WHERE id = :id AND quantity = :expected
    """
)

DELETE_LOT_SQL = text(
    """
    DELETE FROM holding_lots
    WHERE id = :id AND quantity = :expected
    """
)

INSERT_SALE_SQL = text(
    """
    INSERT INTO holding_sales (
        id, lot_id, quantity, price, price_currency, proceeds, sold_at,
        wallet_name
    )
    VALUES (
        :id, :lot_id, :quantity, :price, :price_currency, :proceeds,
        :sold_at, :wallet_name
    )
    """
)

SELECT_SALES_SQL = text(
    """
    SELECT id, lot_id, quantity, price, price_currency, proceeds, sold_at,
           wallet_name
    FROM holding_sales
    WHERE lot_id = :lot_id
    ORDER BY sold_at
    """
)

INSERT_WALLET_SQL = text(
    """
    INSERT INTO wallets (
        id, name, currency_code, current_balance, include_in_net_worth,
        archived
    )
    VALUES (
        :id, :name, :currency_code, :current_balance, :include_in_net_worth,
        :archived
    )
    """
)

INSERT_MANUAL_ASSET_SQL = text(
    """
    INSERT INTO manual_assets (
        id, name, kind, value, currency_code, include_in_core,
        include_in_tangible, volatility, quantity, cost_per_unit,
        market_price, market_price_currency, market_price_updated_at,
        contract_multiplier, funding_wallet_id, coin_id, symbol
    )
    VALUES (
        :id, :name, :kind, :value, :currency_code, :include_in_core,
        :include_in_tangible, :volatility, :quantity, :cost_per_unit,
        :market_price, :market_price_currency, :market_price_updated_at,
        :contract_multiplier, :funding_wallet_id, :coin_id, :symbol
    )
    """
)

INSERT_MANUAL_LIABILITY_SQL = text(
    """
    INSERT INTO manual_liabilities (id, name, kind, balance, currency_code)
    VALUES (:id, :name, :kind, :balance, :currency_code)
    """
)

INSERT_INVESTMENT_ACCOUNT_SQL = text(
    """
    INSERT INTO investment_accounts (
        id, name, institution, account_type, currency_code,
        include_in_net_worth
    )
    VALUES (
        :id, :name, :institution, :account_type, :currency_code,
        :include_in_net_worth
    )
    """
)

INSERT_INVESTMENT_ASSET_SQL = text(
    """
    INSERT INTO investment_assets (id, symbol, name, asset_type, currency_code)
    VALUES (:id, :symbol, :name, :asset_type, :currency_code)
    """
)

INSERT_HOLDING_LOT_SQL = text(
    """
    INSERT INTO holding_lots (
        id, account_id, asset_id, quantity, cost_per_unit, cost_currency,
        acquired_date
    )
    VALUES (
        :id, :account_id, :asset_id, :quantity, :cost_per_unit,
        :cost_currency, :acquired_date
    )
    """
)


class SqlAlchemyLedgerRepository(LedgerReadModelPort, HoldingLotRepositoryPort):
    """Ledger entities stored in the ledger database."""

    def __init__(self, db_port: DatabaseEnginePort, logger=None) -> None:
        """Initialize the repository.

        Args:
            db_port: Port providing access to the ledger engine.
            logger: Optional logger compatible with logging.Logger-like API.
        """
        self._db_port = db_port
        self._logger = logger or get_app_logger()

    def fetch_wallets(self, on_skip=None) -> list[Wallet]:
        rows = self._fetch_all(SELECT_WALLETS_SQL)
        return self._map_rows(rows, self._wallet_from_row, "wallet", on_skip)

    def fetch_manual_assets(self, on_skip=None) -> list[ManualAsset]:
        """Return manual assets.

        Investment-kind assets with a market price are valued at
        quantity x price x contract multiplier instead of the stored value.
        """
        rows = self._fetch_all(SELECT_MANUAL_ASSETS_SQL)
        return self._map_rows(
            rows,
            self._manual_asset_from_row,
            "manual asset",
            on_skip,
        )

    def fetch_manual_liabilities(self, on_skip=None) -> list[ManualLiability]:
        rows = self._fetch_all(SELECT_MANUAL_LIABILITIES_SQL)
        return self._map_rows(
            rows,
            self._liability_from_row,
            "liability",
            on_skip,
        )

    def fetch_investment_accounts(self) -> list[InvestmentAccount]:
        rows = self._fetch_all(SELECT_INVESTMENT_ACCOUNTS_SQL)
        return [
            InvestmentAccount(
                identifier=row.id,
                name=row.name,
                account_type=row.account_type,
                currency_code=row.currency_code,
                institution=row.institution,
                include_in_net_worth=flag(row.include_in_net_worth),
            )
            for row in rows
        ]

    def fetch_investment_assets(self) -> list[InvestmentAsset]:
        rows = self._fetch_all(SELECT_INVESTMENT_ASSETS_SQL)
        return [
            InvestmentAsset(
                identifier=row.id,
                symbol=row.symbol,
                name=row.name,
                asset_type=row.asset_type,
                currency_code=row.currency_code,
            )
            for row in rows
        ]

    def fetch_holding_lots(self, on_skip=None) -> list[HoldingLot]:
        rows = self._fetch_all(SELECT_HOLDING_LOTS_SQL)
        return self._map_rows(rows, self._lot_from_row, "holding lot", on_skip)

    def fetch_lot(self, lot_id: str) -> HoldingLot | None:
        engine = self._db_port.get_ledger_engine()
        with engine.connect() as conn:
            row = conn.execute(SELECT_HOLDING_LOT_SQL, {"id": lot_id}).first()
        if row is None:
            return None
        return self._lot_from_row(row)

    def apply_sale(self, expected_quantity, outcome: LotSaleOutcome) -> None:
        """Persist a sale with a compare-and-set on the lot quantity.

        Args:
            expected_quantity: Lot quantity the sale was computed from.
            outcome: Sale record and remaining lot.

        Raises:
            ConcurrentModificationError: If the lot no longer holds
                ``expected_quantity``; nothing is written.
        """
        sale = outcome.sale
        expected = amount_to_text(expected_quantity)
        engine = self._db_port.get_ledger_engine()
        with engine.begin() as conn:
            if outcome.remaining_lot is None:
                result = conn.execute(
                    DELETE_LOT_SQL,
                    {"id": sale.lot_id, "expected": expected},
                )
            else:
                result = conn.execute(
                    UPDATE_LOT_QUANTITY_SQL,
                    {
                        "id": sale.lot_id,
                        "expected": expected,
                        "quantity": amount_to_text(
                            outcome.remaining_lot.quantity
                        ),
                    },
                )
            if result.rowcount != 1:
                raise ConcurrentModificationError(
                    f"Lot {sale.lot_id} changed while selling"
                )
            conn.execute(
                INSERT_SALE_SQL,
                {
                    "id": sale.identifier,
                    "lot_id": sale.lot_id,
                    "quantity": amount_to_text(sale.quantity),
                    "price": amount_to_text(sale.price.amount),
                    "price_currency": sale.price.currency_code,
                    "proceeds": amount_to_text(sale.proceeds.amount),
                    "sold_at": timestamp_to_text(sale.sold_at),
                    "wallet_name": sale.wallet_name,
                },
            )

    def fetch_sales(self, lot_id: str) -> list[dict]:
        """Return recorded sales of a lot as plain dictionaries."""
        engine = self._db_port.get_ledger_engine()
        with engine.connect() as conn:
            rows = conn.execute(SELECT_SALES_SQL, {"lot_id": lot_id}).all()
        return [
            {
                "id": row.id,
                "lot_id": row.lot_id,
                "quantity": text_to_amount(row.quantity),
                "price": Money(row.price, row.price_currency),
                "proceeds": Money(row.proceeds, row.price_currency),
                "sold_at": optional_timestamp(row.sold_at),
                "wallet_name": row.wallet_name,
            }
            for row in rows
        ]

    def add_wallet(self, wallet: Wallet) -> None:
        self._execute(
            INSERT_WALLET_SQL,
            {
                "id": wallet.identifier,
                "name": wallet.name,
                "currency_code": wallet.currency_code,
                "current_balance": amount_to_text(wallet.current_balance.amount),
                "include_in_net_worth": int(wallet.include_in_net_worth),
                "archived": int(wallet.archived),
            },
        )

    def add_manual_asset(self, asset: ManualAsset) -> None:
        details = asset.investment
        market_price = details.market_price if details else None
        self._execute(
            INSERT_MANUAL_ASSET_SQL,
            {
                "id": asset.identifier,
                "name": asset.name,
                "kind": asset.kind,
                "value": amount_to_text(asset.value.amount),
                "currency_code": asset.value.currency_code,
                "include_in_core": int(asset.include_in_core),
                "include_in_tangible": int(asset.include_in_tangible),
                "volatility": int(asset.volatility),
                "quantity": decimal_to_text(details.quantity) if details else None,
                "cost_per_unit": (
                    decimal_to_text(details.cost_per_unit) if details else None
                ),
                "market_price": (
                    decimal_to_text(market_price.amount) if market_price else None
                ),
                "market_price_currency": (
                    market_price.currency_code if market_price else None
                ),
                "market_price_updated_at": (
                    timestamp_to_text(details.market_price_updated_at)
                    if details and details.market_price_updated_at
                    else None
                ),
                "contract_multiplier": (
                    decimal_to_text(details.contract_multiplier)
                    if details
                    else None
                ),
                "funding_wallet_id": details.funding_wallet_id if details else None,
                "coin_id": details.coin_id if details else None,
                "symbol": normalize_symbol(details.symbol) if details else None,
            },
        )

    def add_manual_liability(self, liability: ManualLiability) -> None:
        self._execute(
            INSERT_MANUAL_LIABILITY_SQL,
            {
                "id": liability.identifier,
                "name": liability.name,
                "kind": liability.kind,
                "balance": amount_to_text(liability.balance.amount),
                "currency_code": liability.balance.currency_code,
            },
        )

    def add_investment_account(self, account: InvestmentAccount) -> None:
        self._execute(
            INSERT_INVESTMENT_ACCOUNT_SQL,
            {
                "id": account.identifier,
                "name": account.name,
                "institution": account.institution,
                "account_type": account.account_type,
                "currency_code": normalize_currency_code(account.currency_code),
                "include_in_net_worth": int(account.include_in_net_worth),
            },
        )

    def add_investment_asset(self, asset: InvestmentAsset) -> None:
        self._execute(
            INSERT_INVESTMENT_ASSET_SQL,
            {
                "id": asset.identifier,
                "symbol": normalize_symbol(asset.symbol),
                "name": asset.name,
                "asset_type": asset.asset_type,
                "currency_code": normalize_currency_code(asset.currency_code),
            },
        )

    def add_holding_lot(self, lot: HoldingLot) -> None:
        """Insert a lot.

        Raises:
            InvalidQuantityError: If the lot quantity is not positive.
        """
        if lot.quantity <= 0:
            raise InvalidQuantityError(
                f"Lot {lot.identifier} must hold a positive quantity"
            )
        self._execute(
            INSERT_HOLDING_LOT_SQL,
            {
                "id": lot.identifier,
                "account_id": lot.account_id,
                "asset_id": lot.asset.identifier,
                "quantity": amount_to_text(lot.quantity),
                "cost_per_unit": amount_to_text(lot.cost_per_unit.amount),
                "cost_currency": lot.cost_per_unit.currency_code,
                "acquired_date": date_to_text(lot.acquired_date),
            },
        )

    def _fetch_all(self, query) -> list:
        engine = self._db_port.get_ledger_engine()
        with engine.connect() as conn:
            return conn.execute(query).all()

    def _execute(self, query, params: dict) -> None:
        engine = self._db_port.get_ledger_engine()
        with engine.begin() as conn:
            conn.execute(query, params)

    def _map_rows(self, rows, build, entity: str, on_skip=None) -> list:
        """Build domain objects row by row, skipping unreadable rows.

        Args:
            rows: Rows returned by a SELECT.
            build: Callable turning one row into a domain object.
            entity: Entity label used in the warning.
            on_skip: Optional callable receiving the id of each skipped row.
        """
        items = []
        for row in rows:
            try:
                items.append(build(row))
            except (ArithmeticError, TypeError, ValueError) as exc:
                self._logger.warning(
                    f"Skipping unreadable {entity} {row.id}: {exc}"
                )
                if on_skip is not None:
                    on_skip(row.id)
        return items

    @staticmethod
    def _wallet_from_row(row) -> Wallet:
        return Wallet(
            identifier=row.id,
            name=row.name,
            current_balance=Money(row.current_balance, row.currency_code),
            include_in_net_worth=flag(row.include_in_net_worth),
            archived=flag(row.archived),
        )

    @staticmethod
    def _liability_from_row(row) -> ManualLiability:
        return ManualLiability(
            identifier=row.id,
            name=row.name,
            kind=row.kind,
            balance=Money(row.balance, row.currency_code),
        )

    def _manual_asset_from_row(self, row) -> ManualAsset:
        details = None
        value = Money(row.value, row.currency_code)
        if is_manual_investment_kind(row.kind, row.coin_id) and row.quantity:
            market_price = None
            if row.market_price:
                market_price = Money(
                    row.market_price,
                    row.market_price_currency or row.currency_code,
                )
            details = ManualInvestmentDetails(
                quantity=text_to_amount(row.quantity),
                cost_per_unit=text_to_amount(row.cost_per_unit),
                market_price=market_price,
                market_price_updated_at=optional_timestamp(
                    row.market_price_updated_at
                ),
                contract_multiplier=optional_decimal(row.contract_multiplier),
                funding_wallet_id=row.funding_wallet_id,
                coin_id=row.coin_id,
                symbol=row.symbol,
            )
            market_value = manual_investment_market_value(details)
            if market_value is not None:
                value = market_value
        return ManualAsset(
            identifier=row.id,
            name=row.name,
            kind=row.kind,
            value=value,
            include_in_core=flag(row.include_in_core),
            include_in_tangible=flag(row.include_in_tangible),
            volatility=flag(row.volatility),
            investment=details,
        )

    @staticmethod
    def _lot_from_row(row) -> HoldingLot:
        return HoldingLot(
            identifier=row.id,
            account_id=row.account_id,
            asset=InvestmentAsset(
                identifier=row.asset_id,
                symbol=row.symbol,
                name=row.asset_name,
                asset_type=row.asset_type,
                currency_code=row.asset_currency,
            ),
            quantity=text_to_amount(row.quantity),
            cost_per_unit=Money(row.cost_per_unit, row.cost_currency),
            acquired_date=text_to_date(row.acquired_date),
        )


__all__ = ["SqlAlchemyLedgerRepository"]
