"""HTTP client for official exchange rates."""

from decimal import Decimal, InvalidOperation

import requests
from requests.exceptions import RequestException

from networth_engine.application.ports.external import ExchangeRateSourcePort
from networth_engine.domain.errors import ExchangeRateSourceError
from networth_engine.domain.models import ExchangeRateTable
from networth_engine.domain.services.normalization import normalize_currency_code
from networth_engine.infrastructure.logging.logger import get_app_logger


EXCHANGERATE_API_URL = "https://v6.exchangerate-api.com/v6/{api_key}/latest/{base}"


class ExchangeRateApiClient(ExchangeRateSourcePort):
    """Rates from the exchangerate-api v6 ``latest`` endpoint.

    The API returns units of each currency per one unit of the base; the
    client inverts them so each rate values one unit of a foreign currency
    in the base.
    """

    def __init__(self, api_key: str, timeout: int = 30, logger=None) -> None:
        if not api_key:
            raise RuntimeError("Missing environment variable: EXCHANGERATE_API_KEY")
        self._api_key = api_key
        self._timeout = timeout
        self._logger = logger or get_app_logger()

    def fetch_latest_rates(self, base_currency: str) -> ExchangeRateTable:
        """Return foreign-to-base rates for ``base_currency``.

        Raises:
            ExchangeRateSourceError: On transport errors, an error result or
                a payload without usable rates.
        """
        base = normalize_currency_code(base_currency)
        if base is None:
            raise ExchangeRateSourceError("Base currency must not be blank")
        url = EXCHANGERATE_API_URL.format(api_key=self._api_key, base=base)
        try:
            response = requests.get(url, timeout=self._timeout)
            response.raise_for_status()
            payload = response.json()
        except RequestException as exc:
            raise ExchangeRateSourceError(f"Rate request failed: {exc}") from exc
        except ValueError as exc:
            raise ExchangeRateSourceError(f"Invalid rate payload: {exc}") from exc

        if not isinstance(payload, dict) or payload.get("result") != "success":
            error_type = (
                payload.get("error-type") if isinstance(payload, dict) else None
            )
            raise ExchangeRateSourceError(
                f"Rate source error: {error_type or 'unknown'}"
            )

        returned_base = normalize_currency_code(payload.get("base_code")) or base
        raw_rates = payload.get("conversion_rates")
        if not isinstance(raw_rates, dict):
            raise ExchangeRateSourceError("Rate payload has no conversion_rates")

        rates: dict[str, Decimal] = {}
        for code, raw in raw_rates.items():
            currency = normalize_currency_code(code)
            if currency is None or currency == returned_base:
                continue
            try:
                per_base = Decimal(str(raw))
            except InvalidOperation:
                self._logger.warning(f"Skipping unreadable rate for {currency}")
                continue
            if not per_base.is_finite() or per_base <= 0:
                continue
            rates[currency] = Decimal("1") / per_base

        if not rates:
            raise ExchangeRateSourceError("Rate payload has no usable rates")

        self._logger.info(
            f"Fetched {len(rates)} rates against {returned_base} "
            f"(updated {payload.get('time_last_update_utc', 'unknown')})"
        )
        return ExchangeRateTable(base_currency=returned_base, rates=rates)


__all__ = ["ExchangeRateApiClient", "EXCHANGERATE_API_URL"]
