"""Settings helpers for infrastructure adapters."""

from dataclasses import dataclass, field
from decimal import Decimal
import os
from types import MappingProxyType
from typing import Mapping, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import dotenv
from sqlalchemy import text

from networth_engine.application.ports.database import DatabaseEnginePort
from networth_engine.application.ports.external import SettingsProviderPort
from networth_engine.domain.constants import DEFAULT_BASE_CURRENCY
from networth_engine.domain.models import ExchangeRateTable
from networth_engine.domain.services.fx import (
    decode_rates,
    encode_rates,
    rebase_rates,
)
from networth_engine.domain.services.normalization import (
    normalize_currency_code,
)
from networth_engine.infrastructure.logging.logger import get_app_logger


BASE_CURRENCY_KEY = "base_currency_code"
RATES_KEY = "exchange_rates"
NOTIFICATIONS_KEY = "notifications_enabled"

_TRUE_VALUES = {"1", "true", "yes", "on"}

SELECT_SETTINGS_SQL = text("SELECT key, value FROM app_settings")

UPSERT_SETTING_SQL = text(
    """
    INSERT INTO app_settings (key, value)
    VALUES (:key, :value)
    ON CONFLICT (key) DO UPDATE SET value = excluded.value
    """
)

INSERT_SETTING_IF_MISSING_SQL = text(
    """
    INSERT INTO app_settings (key, value)
    VALUES (:key, :value)
    ON CONFLICT (key) DO NOTHING
    """
)


def _parse_bool(raw: Optional[str], default: bool) -> bool:
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in _TRUE_VALUES


@dataclass(frozen=True)
class LedgerSettings:
    """Settings sourced from the environment.

    Attributes:
        base_currency_code: Currency every total is expressed in.
        rates: Foreign-to-base rates seeded into storage.
        notifications_enabled: Whether budget alerts reach the sink.
        timezone: IANA name whose calendar defines month boundaries.
        db_url: Ledger database URL, if configured.
        alphavantage_api_key: Key for the equity quote provider.
        exchangerate_api_key: Key for the exchange rate source.
    """

    base_currency_code: str = DEFAULT_BASE_CURRENCY
    rates: Mapping[str, Decimal] = field(default_factory=dict)
    notifications_enabled: bool = True
    timezone: str = "UTC"
    db_url: Optional[str] = None
    alphavantage_api_key: Optional[str] = None
    exchangerate_api_key: Optional[str] = None

    @classmethod
    def from_env(cls) -> "LedgerSettings":
        """Build settings from environment variables.

        Returns:
            LedgerSettings: Settings sourced from environment variables.
        """
        dotenv.load_dotenv()
        base = (
            normalize_currency_code(os.getenv("LEDGER_BASE_CURRENCY"))
            or DEFAULT_BASE_CURRENCY
        )
        raw_rates = os.getenv("LEDGER_EXCHANGE_RATES")
        rates = decode_rates(raw_rates)
        if raw_rates and not rates:
            get_app_logger().warning(
                "LEDGER_EXCHANGE_RATES is not a JSON object of rates; ignored"
            )
        return cls(
            base_currency_code=base,
            rates=MappingProxyType(rates),
            notifications_enabled=_parse_bool(
                os.getenv("LEDGER_NOTIFICATIONS_ENABLED"),
                True,
            ),
            timezone=(os.getenv("LEDGER_TIMEZONE") or "UTC").strip(),
            db_url=os.getenv("LEDGER_DB_URL") or None,
            alphavantage_api_key=os.getenv("ALPHAVANTAGE_API_KEY") or None,
            exchangerate_api_key=os.getenv("EXCHANGERATE_API_KEY") or None,
        )

    def zone(self, logger=None) -> ZoneInfo:
        """Return the configured timezone, UTC when the name is unknown."""
        try:
            return ZoneInfo(self.timezone)
        except (ZoneInfoNotFoundError, ValueError):
            (logger or get_app_logger()).warning(
                f"Unknown timezone {self.timezone!r}; using UTC"
            )
            return ZoneInfo("UTC")


class SqlAlchemySettingsRepository(SettingsProviderPort):
    """Runtime settings stored in the ``app_settings`` table.

    Keys absent from storage fall back to the environment defaults.
    """

    def __init__(
        self,
        db_port: DatabaseEnginePort,
        defaults: LedgerSettings | None = None,
        logger=None,
    ) -> None:
        self._db_port = db_port
        self._defaults = defaults or LedgerSettings()
        self._logger = logger or get_app_logger()

    @property
    def base_currency_code(self) -> str:
        stored = normalize_currency_code(self._load().get(BASE_CURRENCY_KEY))
        return stored or self._defaults.base_currency_code

    @property
    def rates(self) -> Mapping[str, Decimal]:
        stored = self._load().get(RATES_KEY)
        if stored is None:
            return MappingProxyType(dict(self._defaults.rates))
        return MappingProxyType(decode_rates(stored))

    @property
    def notifications_enabled(self) -> bool:
        return _parse_bool(
            self._load().get(NOTIFICATIONS_KEY),
            self._defaults.notifications_enabled,
        )

    def rate_table(self) -> ExchangeRateTable:
        """Return base currency and rates read in a single query."""
        stored = self._load()
        base = (
            normalize_currency_code(stored.get(BASE_CURRENCY_KEY))
            or self._defaults.base_currency_code
        )
        raw_rates = stored.get(RATES_KEY)
        rates = (
            decode_rates(raw_rates)
            if raw_rates is not None
            else dict(self._defaults.rates)
        )
        return ExchangeRateTable(base_currency=base, rates=rates)

    def seed_defaults(self) -> None:
        """Store the environment defaults for keys not stored yet."""
        engine = self._db_port.get_ledger_engine()
        with engine.begin() as conn:
            for key, value in self._default_values().items():
                conn.execute(
                    INSERT_SETTING_IF_MISSING_SQL,
                    {"key": key, "value": value},
                )

    def update_rates(self, table: ExchangeRateTable) -> None:
        """Persist a rate table together with its base currency."""
        self._store(
            {
                BASE_CURRENCY_KEY: table.base_currency,
                RATES_KEY: encode_rates(table.rates),
            }
        )
        self._logger.info(
            f"Stored {len(table.rates)} exchange rates against "
            f"{table.base_currency}"
        )

    def update_base_currency(self, currency_code: str) -> None:
        """Switch the base currency and rebase the stored rates.

        Without a rate for the new base the table is cleared, so conversions
        fail open instead of silently using rates against the old base.
        """
        new_base = normalize_currency_code(currency_code)
        if new_base is None:
            raise ValueError("Base currency code must not be blank")
        current = self.rate_table()
        rebased = rebase_rates(current.rates, current.base_currency, new_base)
        if current.rates and not rebased and new_base != current.base_currency:
            self._logger.warning(
                f"No rate for {new_base} against {current.base_currency}; "
                "exchange rates cleared"
            )
        self.update_rates(ExchangeRateTable(base_currency=new_base, rates=rebased))

    def set_notifications_enabled(self, enabled: bool) -> None:
        self._store({NOTIFICATIONS_KEY: "true" if enabled else "false"})

    def _default_values(self) -> dict[str, str]:
        return {
            BASE_CURRENCY_KEY: self._defaults.base_currency_code,
            RATES_KEY: encode_rates(self._defaults.rates),
            NOTIFICATIONS_KEY: (
                "true" if self._defaults.notifications_enabled else "false"
            ),
        }

    def _load(self) -> dict[str, str]:
        engine = self._db_port.get_ledger_engine()
        with engine.connect() as conn:
            rows = conn.execute(SELECT_SETTINGS_SQL).all()
        return {row.key: row.value for row in rows}

    def _store(self, values: dict[str, str]) -> None:
        engine = self._db_port.get_ledger_engine()
        with engine.begin() as conn:
            for key, value in values.items():
                conn.execute(UPSERT_SETTING_SQL, {"key": key, "value": value})


__all__ = [
    "LedgerSettings",
    "SqlAlchemySettingsRepository",
    "BASE_CURRENCY_KEY",
    "RATES_KEY",
    "NOTIFICATIONS_KEY",
]
