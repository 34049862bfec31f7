import pytest
from unittest.mock import Mock
from decimal import Decimal

from apps.conversion.domain.errors import ProviderDataUnavailable
from apps.conversion.domain.models import ConversionRequest
from apps.conversion.infrastructure.providers.exchangerate_host import (
    ExchangeRateHostConvertProvider,
    ExchangeRateHostProvider,
)


@pytest.fixture(autouse=True)
def configured(settings):
    settings.EXCHANGERATE_HOST_URL = "https://api.exchangerate.host"
    settings.EXCHANGERATE_HOST_KEY = "host-key"


@pytest.fixture
def mock_requests_get(mocker):
    return mocker.patch("requests.get")


@pytest.fixture
def request_eur():
    return ConversionRequest.from_primitives(100, "EUR", "2023-06-15")


def json_response(payload):
    response = Mock()
    response.json.return_value = payload
    response.raise_for_status.return_value = None
    return response


class TestQuotesProvider:
    """Tests for the {"quotes": {"EURUSD": ...}} shape."""

    def test_fetch_historical_success(self, mock_requests_get, request_eur):
        mock_requests_get.return_value = json_response({
            "success": True,
            "historical": True,
            "date": "2023-06-15",
            "source": "EUR",
            "quotes": {"EURUSD": 1.0923456789},
        })

        converted = ExchangeRateHostProvider().fetch_historical(request_eur)

        assert converted == Decimal("109.23456789")
        url = mock_requests_get.call_args[0][0]
        params = mock_requests_get.call_args[1]["params"]
        assert url == "https://api.exchangerate.host/historical"
        assert params == {
            "date": "2023-06-15",
            "source": "EUR",
            "currencies": "USD",
            "access_key": "host-key",
        }

    def test_fetch_latest_uses_live_endpoint(self, mock_requests_get, request_eur, settings):
        settings.EXCHANGERATE_HOST_KEY = ""
        mock_requests_get.return_value = json_response({"success": True, "quotes": {"EURUSD": 1.1}})

        assert ExchangeRateHostProvider().fetch_latest(request_eur) == Decimal("110.0")
        assert mock_requests_get.call_args[0][0] == "https://api.exchangerate.host/live"
        assert "access_key" not in mock_requests_get.call_args[1]["params"]

    def test_success_false(self, mock_requests_get, request_eur):
        """
        Test that {"success": false} is a provider-local failure even with HTTP 200.
        """
        mock_requests_get.return_value = json_response({
            "success": False,
            "error": {"code": 202, "info": "You have provided one or more invalid Currency Codes."},
        })

        outcome = ExchangeRateHostProvider().attempt(request_eur)

        assert not outcome.succeeded
        assert outcome.failure.reason == "exchangerate_host reported an error (202)"

    def test_missing_pair_quote(self, mock_requests_get, request_eur):
        mock_requests_get.return_value = json_response({"success": True, "quotes": {"EURGBP": 0.86}})

        with pytest.raises(ProviderDataUnavailable):
            ExchangeRateHostProvider().fetch_historical(request_eur)

    def test_list_rates_strips_source_prefix(self, mock_requests_get):
        mock_requests_get.return_value = json_response({
            "success": True,
            "source": "USD",
            "quotes": {"USDEUR": 0.92, "USDJPY": 148.5},
        })

        rates = ExchangeRateHostProvider().list_rates()

        assert rates == {"USD": Decimal("1"), "EUR": Decimal("0.92"), "JPY": Decimal("148.5")}


class TestConvertProvider:
    """Tests for the pre-converted {"result": ...} shape."""

    def test_result_is_returned_as_converted_amount(self, mock_requests_get, request_eur):
        """
        Test that "result" is the converted amount and is not multiplied again.
        """
        mock_requests_get.return_value = json_response({
            "success": True,
            "query": {"from": "EUR", "to": "USD", "amount": 100},
            "info": {"quote": 1.0923456789},
            "result": 109.23456789,
        })

        converted = ExchangeRateHostConvertProvider().fetch_historical(request_eur)

        assert converted == Decimal("109.23456789")
        params = mock_requests_get.call_args[1]["params"]
        assert mock_requests_get.call_args[0][0] == "https://api.exchangerate.host/convert"
        assert params["from"] == "EUR"
        assert params["to"] == "USD"
        assert params["amount"] == "100"
        assert params["date"] == "2023-06-15"

    def test_latest_has_no_date(self, mock_requests_get, request_eur):
        mock_requests_get.return_value = json_response({"success": True, "result": 110.5})

        assert ExchangeRateHostConvertProvider().fetch_latest(request_eur) == Decimal("110.5")
        assert "date" not in mock_requests_get.call_args[1]["params"]

    def test_missing_result(self, mock_requests_get, request_eur):
        mock_requests_get.return_value = json_response({"success": True, "result": None})

        with pytest.raises(ProviderDataUnavailable):
            ExchangeRateHostConvertProvider().fetch_historical(request_eur)
