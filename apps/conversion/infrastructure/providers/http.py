"""
Shared HTTP plumbing for provider adapters.
Turns every requests/JSON problem into a ProviderError so adapters only deal with payload shapes.
"""

import logging
from decimal import Decimal, InvalidOperation

import requests
from django.conf import settings

from apps.conversion.domain.errors import ProviderDataUnavailable, ProviderTransportFailure


logger = logging.getLogger(__name__)


def get_json(url: str, params: dict | None = None, provider_name: str = "provider") -> dict:
    """
    GET a URL and decode its JSON body.

    Args:
        url: Endpoint URL
        params: Query parameters
        provider_name: Used in log lines and error messages

    Returns:
        Decoded JSON object

    Raises:
        ProviderTransportFailure: timeout, connection error, non-2xx status or undecodable body
    """
    logger.debug("%s: GET %s", provider_name, url)
    try:
        response = requests.get(
            url,
            params=params,
            headers={"Accept": "application/json"},
            timeout=settings.RATE_PROVIDER_TIMEOUT,
        )
        response.raise_for_status()

    except requests.exceptions.Timeout:
        raise ProviderTransportFailure(f"{provider_name} did not respond in time")
    except requests.exceptions.HTTPError as e:
        status_code = e.response.status_code if e.response is not None else "unknown"
        raise ProviderTransportFailure(f"{provider_name} answered with HTTP status {status_code}")
    except requests.exceptions.RequestException:
        raise ProviderTransportFailure(f"Unable to connect to {provider_name}")

    try:
        data = response.json()
    except ValueError:
        raise ProviderTransportFailure(f"{provider_name} returned an unreadable response")

    if not isinstance(data, dict):
        raise ProviderDataUnavailable(f"{provider_name} returned an unexpected response")
    return data


def positive_decimal(value, provider_name: str, what: str = "USD rate") -> Decimal:
    """Coerce a payload number to a positive Decimal or raise ProviderDataUnavailable."""
    if value is None or isinstance(value, bool):
        raise ProviderDataUnavailable(f"{provider_name} has no {what} for this request")
    try:
        number = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ProviderDataUnavailable(f"{provider_name} returned an invalid {what}")
    if not number.is_finite() or number <= 0:
        raise ProviderDataUnavailable(f"{provider_name} returned an invalid {what}")
    return number


def section_value(data: dict, section: str, key: str):
    """Return data[section][key], or None when the section is missing or not an object."""
    container = data.get(section)
    if not isinstance(container, dict):
        return None
    return container.get(key)
