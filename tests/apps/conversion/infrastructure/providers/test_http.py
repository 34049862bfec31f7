import pytest
import requests
from unittest.mock import Mock
from decimal import Decimal

from apps.conversion.domain.errors import ProviderDataUnavailable, ProviderTransportFailure
from apps.conversion.infrastructure.providers.http import get_json, positive_decimal, section_value


@pytest.fixture
def mock_requests_get(mocker):
    return mocker.patch("requests.get")


def test_get_json_success(mock_requests_get, settings):
    """
    Test that the decoded body is returned and the configured timeout is applied.
    """
    settings.RATE_PROVIDER_TIMEOUT = 3
    response = Mock()
    response.json.return_value = {"rates": {"USD": 1.1}}
    response.raise_for_status.return_value = None
    mock_requests_get.return_value = response

    data = get_json("https://example.test/latest", params={"from": "EUR"}, provider_name="example")

    assert data == {"rates": {"USD": 1.1}}
    kwargs = mock_requests_get.call_args[1]
    assert kwargs["timeout"] == 3
    assert kwargs["params"] == {"from": "EUR"}
    assert kwargs["headers"] == {"Accept": "application/json"}


@pytest.mark.parametrize("exception, expected", [
    (requests.exceptions.Timeout(), "example did not respond in time"),
    (requests.exceptions.ConnectionError(), "Unable to connect to example"),
    (requests.exceptions.TooManyRedirects(), "Unable to connect to example"),
])
def test_get_json_transport_errors(mock_requests_get, exception, expected):
    mock_requests_get.side_effect = exception

    with pytest.raises(ProviderTransportFailure) as exc_info:
        get_json("https://example.test", provider_name="example")

    assert str(exc_info.value) == expected


def test_get_json_http_status(mock_requests_get):
    response = Mock()
    response.raise_for_status.side_effect = requests.exceptions.HTTPError(response=Mock(status_code=500))
    mock_requests_get.return_value = response

    with pytest.raises(ProviderTransportFailure) as exc_info:
        get_json("https://example.test", provider_name="example")

    assert str(exc_info.value) == "example answered with HTTP status 500"


def test_get_json_undecodable_body(mock_requests_get):
    response = Mock()
    response.raise_for_status.return_value = None
    response.json.side_effect = ValueError("Expecting value")
    mock_requests_get.return_value = response

    with pytest.raises(ProviderTransportFailure) as exc_info:
        get_json("https://example.test", provider_name="example")

    assert "unreadable" in str(exc_info.value)


def test_get_json_non_object_body(mock_requests_get):
    response = Mock()
    response.raise_for_status.return_value = None
    response.json.return_value = ["not", "an", "object"]
    mock_requests_get.return_value = response

    with pytest.raises(ProviderDataUnavailable):
        get_json("https://example.test", provider_name="example")


@pytest.mark.parametrize("value", [None, True, "abc", 0, -1.5, "NaN", "Infinity"])
def test_positive_decimal_rejects(value):
    with pytest.raises(ProviderDataUnavailable):
        positive_decimal(value, "example")


@pytest.mark.parametrize("value, expected", [
    (1.0923456789, Decimal("1.0923456789")),
    ("0.5", Decimal("0.5")),
    (148, Decimal("148")),
])
def test_positive_decimal_accepts(value, expected):
    assert positive_decimal(value, "example") == expected


def test_section_value():
    assert section_value({"rates": {"USD": 1.1}}, "rates", "USD") == 1.1
    assert section_value({"rates": {"EUR": 0.9}}, "rates", "USD") is None
    assert section_value({"rates": [1, 2]}, "rates", "USD") is None
    assert section_value({}, "rates", "USD") is None
