"""HTTP quote providers for equities and crypto assets."""

import time
from decimal import Decimal, InvalidOperation

import requests
from requests.exceptions import RequestException

from networth_engine.application.ports.external import QuoteProviderPort
from networth_engine.domain.errors import QuoteProviderError
from networth_engine.domain.models import MarketQuote
from networth_engine.domain.services.normalization import normalize_symbol
from networth_engine.infrastructure.logging.logger import get_app_logger


ALPHAVANTAGE_URL = "https://www.alphavantage.co/query"
COINGECKO_URL = "https://api.coingecko.com/api/v3/simple/price"
DEFAULT_TIMEOUT = 30


def _to_decimal(raw) -> Decimal | None:
    if raw is None:
        return None
    try:
        value = Decimal(str(raw).strip())
    except InvalidOperation:
        return None
    return value if value.is_finite() else None


class AlphaVantageQuoteProvider(QuoteProviderPort):
    """Latest equity and ETF prices from the GLOBAL_QUOTE endpoint.

    The endpoint takes one symbol per request; requests are spaced by
    ``pause_seconds`` to stay under the free-tier rate limit.
    """

    name = "AlphaVantage"

    def __init__(
        self,
        api_key: str,
        timeout: int = DEFAULT_TIMEOUT,
        pause_seconds: float = 0.4,
        logger=None,
    ) -> None:
        if not api_key:
            raise RuntimeError("Missing environment variable: ALPHAVANTAGE_API_KEY")
        self._api_key = api_key
        self._timeout = timeout
        self._pause_seconds = pause_seconds
        self._logger = logger or get_app_logger()

    def fetch_quotes(self, symbols: list[str]) -> list[MarketQuote]:
        """Return a quote for every symbol the API could price.

        Symbols without a usable ``Global Quote`` are skipped with a warning,
        and so are symbols whose request failed while others succeeded.

        Raises:
            QuoteProviderError: When every request failed.
        """
        quotes: list[MarketQuote] = []
        last_error: QuoteProviderError | None = None
        failures = 0
        for index, symbol in enumerate(symbols):
            if index and self._pause_seconds:
                time.sleep(self._pause_seconds)
            try:
                payload = self._get(symbol)
            except QuoteProviderError as exc:
                failures += 1
                last_error = exc
                self._logger.warning(f"{self.name} request for {symbol} failed")
                continue
            quote = self._parse(symbol, payload)
            if quote is None:
                self._logger.warning(f"{self.name} returned no price for {symbol}")
                continue
            quotes.append(quote)
        if last_error is not None and failures == len(symbols):
            raise last_error
        return quotes

    def _get(self, symbol: str) -> dict:
        params = {
            "function": "GLOBAL_QUOTE",
            "symbol": symbol,
            "apikey": self._api_key,
        }
        try:
            response = requests.get(
                ALPHAVANTAGE_URL,
                params=params,
                timeout=self._timeout,
            )
            response.raise_for_status()
            return response.json()
        except RequestException as exc:
            raise QuoteProviderError(self.name, str(exc)) from exc
        except ValueError as exc:
            raise QuoteProviderError(self.name, f"invalid JSON: {exc}") from exc

    def _parse(self, symbol: str, payload) -> MarketQuote | None:
        if not isinstance(payload, dict):
            return None
        quote = payload.get("Global Quote")
        if not isinstance(quote, dict):
            return None
        price = _to_decimal(quote.get("05. price"))
        if price is None:
            return None
        return MarketQuote(
            symbol=normalize_symbol(quote.get("01. symbol")) or normalize_symbol(symbol),
            price=price,
            currency_code=(quote.get("08. currency") or "USD").upper(),
            provider=self.name,
        )


class CoinGeckoQuoteProvider(QuoteProviderPort):
    """Latest crypto prices from the public simple/price endpoint.

    Symbols are sent as lower-cased coin ids in a single request.
    """

    name = "CoinGecko"

    def __init__(
        self,
        vs_currency: str = "usd",
        timeout: int = DEFAULT_TIMEOUT,
        logger=None,
    ) -> None:
        self._vs_currency = vs_currency.lower()
        self._timeout = timeout
        self._logger = logger or get_app_logger()

    def fetch_quotes(self, symbols: list[str]) -> list[MarketQuote]:
        """Return quotes keyed by upper-cased coin id.

        Raises:
            QuoteProviderError: On transport, HTTP or payload errors.
        """
        ids = sorted({symbol.strip().lower() for symbol in symbols if symbol})
        if not ids:
            return []
        params = {"ids": ",".join(ids), "vs_currencies": self._vs_currency}
        try:
            response = requests.get(
                COINGECKO_URL,
                params=params,
                timeout=self._timeout,
            )
            response.raise_for_status()
            payload = response.json()
        except RequestException as exc:
            raise QuoteProviderError(self.name, str(exc)) from exc
        except ValueError as exc:
            raise QuoteProviderError(self.name, f"invalid JSON: {exc}") from exc

        if not isinstance(payload, dict):
            raise QuoteProviderError(self.name, "unexpected payload shape")

        quotes: list[MarketQuote] = []
        for coin_id, prices in payload.items():
            if not isinstance(prices, dict):
                continue
            price = _to_decimal(prices.get(self._vs_currency))
            if price is None:
                continue
            quotes.append(
                MarketQuote(
                    symbol=normalize_symbol(coin_id),
                    price=price,
                    currency_code=self._vs_currency.upper(),
                    provider=self.name,
                )
            )
        return quotes


__all__ = [
    "AlphaVantageQuoteProvider",
    "CoinGeckoQuoteProvider",
    "ALPHAVANTAGE_URL",
    "COINGECKO_URL",
]
