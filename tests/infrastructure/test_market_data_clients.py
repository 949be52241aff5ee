"""Tests for the quote providers and the exchange rate client."""

from decimal import Decimal
from unittest.mock import MagicMock

import pytest
import requests

from networth_engine.domain.errors import (
    ExchangeRateSourceError,
    QuoteProviderError,
)
from networth_engine.infrastructure import exchange_rate_client, quote_clients
from networth_engine.infrastructure.exchange_rate_client import (
    ExchangeRateApiClient,
)
from networth_engine.infrastructure.quote_clients import (
    AlphaVantageQuoteProvider,
    CoinGeckoQuoteProvider,
)


def _response(payload) -> MagicMock:
    response = MagicMock()
    response.json.return_value = payload
    response.raise_for_status.return_value = None
    return response


def test_alphavantage_parses_global_quote(monkeypatch) -> None:
    calls = []

    def fake_get(url, params, timeout):
        calls.append(params)
        if params["symbol"] == "VTI":
            return _response(
                {"Global Quote": {"01. symbol": "VTI", "05. price": "251.3400"}}
            )
        return _response({"Note": "rate limited"})

    monkeypatch.setattr(quote_clients.requests, "get", fake_get)
    logger = MagicMock()
    provider = AlphaVantageQuoteProvider("key", pause_seconds=0, logger=logger)

    quotes = provider.fetch_quotes(["VTI", "AAPL"])

    assert [(q.symbol, q.price, q.currency_code) for q in quotes] == [
        ("VTI", Decimal("251.3400"), "USD")
    ]
    assert quotes[0].provider == "AlphaVantage"
    assert calls[0] == {"function": "GLOBAL_QUOTE", "symbol": "VTI", "apikey": "key"}
    logger.warning.assert_called_once()


def test_alphavantage_transport_error_raises_provider_error(monkeypatch) -> None:
    def fake_get(url, params, timeout):
        raise requests.ConnectionError("down")

    monkeypatch.setattr(quote_clients.requests, "get", fake_get)
    provider = AlphaVantageQuoteProvider("key", pause_seconds=0, logger=MagicMock())

    with pytest.raises(QuoteProviderError) as excinfo:
        provider.fetch_quotes(["VTI"])
    assert excinfo.value.provider == "AlphaVantage"


def test_alphavantage_keeps_quotes_when_one_symbol_fails(monkeypatch) -> None:
    def fake_get(url, params, timeout):
        if params["symbol"] == "AAPL":
            raise requests.Timeout("slow")
        return _response({"Global Quote": {"05. price": "10"}})

    monkeypatch.setattr(quote_clients.requests, "get", fake_get)
    logger = MagicMock()
    provider = AlphaVantageQuoteProvider("key", pause_seconds=0, logger=logger)

    quotes = provider.fetch_quotes(["AAPL", "VTI"])

    assert [q.symbol for q in quotes] == ["VTI"]
    logger.warning.assert_called_once()


def test_alphavantage_requires_api_key() -> None:
    with pytest.raises(RuntimeError):
        AlphaVantageQuoteProvider("", logger=MagicMock())


def test_coingecko_requests_ids_in_one_call(monkeypatch) -> None:
    fake_get = MagicMock(
        return_value=_response(
            {"bitcoin": {"usd": 65000.5}, "ethereum": {"eur": 3000}}
        )
    )
    monkeypatch.setattr(quote_clients.requests, "get", fake_get)
    provider = CoinGeckoQuoteProvider(logger=MagicMock())

    quotes = provider.fetch_quotes(["ETHEREUM", "bitcoin", " Bitcoin "])

    fake_get.assert_called_once()
    assert fake_get.call_args.kwargs["params"] == {
        "ids": "bitcoin,ethereum",
        "vs_currencies": "usd",
    }
    assert [(q.symbol, q.price, q.currency_code) for q in quotes] == [
        ("BITCOIN", Decimal("65000.5"), "USD")
    ]


def test_coingecko_skips_request_for_no_symbols(monkeypatch) -> None:
    fake_get = MagicMock()
    monkeypatch.setattr(quote_clients.requests, "get", fake_get)

    assert CoinGeckoQuoteProvider(logger=MagicMock()).fetch_quotes([]) == []
    fake_get.assert_not_called()


def test_coingecko_http_error_raises_provider_error(monkeypatch) -> None:
    response = _response({})
    response.raise_for_status.side_effect = requests.HTTPError("429")
    monkeypatch.setattr(
        quote_clients.requests,
        "get",
        MagicMock(return_value=response),
    )

    with pytest.raises(QuoteProviderError):
        CoinGeckoQuoteProvider(logger=MagicMock()).fetch_quotes(["bitcoin"])


def test_rate_client_inverts_conversion_rates(monkeypatch) -> None:
    fake_get = MagicMock(
        return_value=_response(
            {
                "result": "success",
                "base_code": "USD",
                "conversion_rates": {
                    "USD": 1,
                    "EUR": 0.5,
                    "JPY": "150",
                    "BAD": 0,
                },
            }
        )
    )
    monkeypatch.setattr(exchange_rate_client.requests, "get", fake_get)

    table = ExchangeRateApiClient("secret", logger=MagicMock()).fetch_latest_rates(
        "usd"
    )

    assert fake_get.call_args.args[0].endswith("/secret/latest/USD")
    assert table.base_currency == "USD"
    assert table.rates["EUR"] == Decimal("2")
    assert table.rates["JPY"] == Decimal("1") / Decimal("150")
    assert "USD" not in table.rates
    assert "BAD" not in table.rates


def test_rate_client_reports_error_result(monkeypatch) -> None:
    monkeypatch.setattr(
        exchange_rate_client.requests,
        "get",
        MagicMock(
            return_value=_response({"result": "error", "error-type": "invalid-key"})
        ),
    )

    with pytest.raises(ExchangeRateSourceError, match="invalid-key"):
        ExchangeRateApiClient("secret", logger=MagicMock()).fetch_latest_rates(
            "USD"
        )


def test_rate_client_rejects_payload_without_rates(monkeypatch) -> None:
    monkeypatch.setattr(
        exchange_rate_client.requests,
        "get",
        MagicMock(
            return_value=_response(
                {"result": "success", "conversion_rates": {"USD": 1}}
            )
        ),
    )

    with pytest.raises(ExchangeRateSourceError):
        ExchangeRateApiClient("secret", logger=MagicMock()).fetch_latest_rates(
            "USD"
        )
