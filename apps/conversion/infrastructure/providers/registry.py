"""
Provider Registry - Maps configured provider names to adapter classes.
This is the glue between settings.RATE_PROVIDER_ORDER and the actual implementations.
"""

import logging

from django.conf import settings

from apps.conversion.domain.interfaces import BaseRateProvider
from apps.conversion.infrastructure.providers.exchange_rate import ExchangeRateApiProvider
from apps.conversion.infrastructure.providers.exchangerate_host import (
    ExchangeRateHostConvertProvider,
    ExchangeRateHostProvider,
)
from apps.conversion.infrastructure.providers.frankfurter import FrankfurterProvider


logger = logging.getLogger(__name__)


# Registry: Maps provider name to the corresponding adapter class
PROVIDER_REGISTRY: dict[str, type[BaseRateProvider]] = {
    provider_class.name: provider_class
    for provider_class in (
        ExchangeRateApiProvider,
        FrankfurterProvider,
        ExchangeRateHostProvider,
        ExchangeRateHostConvertProvider,
    )
}


def get_provider_instance(provider_name: str) -> BaseRateProvider | None:
    """
    Get an instance of a provider by its name.

    Args:
        provider_name: A key of PROVIDER_REGISTRY

    Returns:
        Instance of the provider adapter, or None if not found
    """
    provider_class = PROVIDER_REGISTRY.get(provider_name)

    if provider_class is None:
        logger.warning("Provider '%s' not found in registry", provider_name)
        return None

    return provider_class()


def get_active_providers_ordered() -> list[BaseRateProvider]:
    """
    Instantiate the providers listed in settings.RATE_PROVIDER_ORDER, keeping that order.
    Unknown names are skipped.
    """
    provider_instances = []
    for provider_name in settings.RATE_PROVIDER_ORDER:
        instance = get_provider_instance(provider_name)
        if instance is not None:
            provider_instances.append(instance)

    return provider_instances


def get_currency_list_provider() -> BaseRateProvider | None:
    return get_provider_instance(settings.CURRENCY_LIST_PROVIDER)
