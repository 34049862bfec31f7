"""
Domain services - Core business logic.
Implements the fallback chain over exchange rate providers.
"""

import asyncio
import logging
from datetime import date
from decimal import Decimal
from typing import Callable, Sequence

from apps.conversion.domain.errors import CurrencyListUnavailable, ProviderError, ResolutionFailed
from apps.conversion.domain.interfaces import BaseRateProvider
from apps.conversion.domain.models import ConversionRequest, ConversionResult, ProviderFailure
from apps.conversion.infrastructure.providers.registry import (
    get_active_providers_ordered,
    get_currency_list_provider,
)


logger = logging.getLogger(__name__)


class RateResolver:
    """
    Resolves a historical USD rate by trying providers in a fixed order.

    Fallback strategy:
    1. Validate the request (no network call for malformed input)
    2. If the date is in the future, providers only use their latest rate
    3. Try each provider in order; the first converted amount wins
    4. Raise ResolutionFailed with the last failure if all providers fail

    The resolver keeps no state between calls, so one instance can serve
    concurrent requests.
    """

    def __init__(
        self,
        providers: Sequence[BaseRateProvider] | None = None,
        currency_list_provider: BaseRateProvider | None = None,
        today: Callable[[], date] = date.today,
    ):
        if providers is None:
            providers = get_active_providers_ordered()
        self._providers = tuple(providers)
        self._currency_list_provider = currency_list_provider
        self._today = today

    @property
    def providers(self) -> tuple[BaseRateProvider, ...]:
        return self._providers

    def convert(self, amount, source_currency: str, valuation_date) -> Decimal:
        """
        Convert an amount to USD at the rate of the given date.

        Args:
            amount: Positive number or numeric string
            source_currency: Currency code (e.g. "EUR")
            valuation_date: ISO "YYYY-MM-DD" string or date

        Returns:
            Converted USD amount, not rounded

        Raises:
            InvalidRequest: malformed input
            ResolutionFailed: every provider failed

        Example:
            >>> resolver.convert(100, "EUR", "2023-06-15")
            Decimal('109.23456789')
        """
        return self.convert_with_details(amount, source_currency, valuation_date).converted_amount_usd

    def convert_with_details(self, amount, source_currency: str, valuation_date) -> ConversionResult:
        request = ConversionRequest.from_primitives(amount, source_currency, valuation_date)
        return self.resolve(request)

    def resolve(self, request: ConversionRequest) -> ConversionResult:
        use_latest_only = request.is_future(self._today())
        if use_latest_only:
            logger.info("%s is in the future, using latest rates only", request.valuation_date)

        failures: list[ProviderFailure] = []

        for provider in self._providers:
            logger.info("Trying %s for %s on %s", provider.name, request.source_currency, request.valuation_date)

            outcome = provider.attempt(request, use_latest_only=use_latest_only)

            if outcome.succeeded:
                logger.info("%s converted %s %s to %s USD", provider.name, request.amount, request.source_currency, outcome.converted_amount)
                return ConversionResult(
                    original_amount=request.amount,
                    source_currency=request.source_currency,
                    converted_amount_usd=outcome.converted_amount,
                    valuation_date=request.valuation_date,
                    provider_name=outcome.provider_name,
                )

            failures.append(outcome.failure)

        logger.error("All providers failed for %s on %s", request.source_currency, request.valuation_date)
        raise ResolutionFailed(self._failure_message(request, failures), failures)

    async def aconvert(self, amount, source_currency: str, valuation_date) -> Decimal:
        """Run `convert` in a worker thread so the event loop stays responsive."""
        return await asyncio.to_thread(self.convert, amount, source_currency, valuation_date)

    async def aresolve(self, request: ConversionRequest) -> ConversionResult:
        return await asyncio.to_thread(self.resolve, request)

    async def aconvert_with_details(self, amount, source_currency: str, valuation_date) -> ConversionResult:
        return await asyncio.to_thread(self.convert_with_details, amount, source_currency, valuation_date)

    def list_available_currencies(self) -> dict[str, Decimal]:
        """
        Latest rates of every currency relative to one USD, from a single provider.

        Raises:
            CurrencyListUnavailable: provider missing, failing or returning a malformed payload
        """
        provider = self._currency_list_provider
        if provider is None:
            provider = get_currency_list_provider()
        if provider is None:
            raise CurrencyListUnavailable("Currency listing is not configured.")

        try:
            return provider.list_rates()
        except ProviderError as e:
            logger.warning("Currency listing from %s failed: %s", provider.name, e)
            raise CurrencyListUnavailable("Failed to fetch available currencies.") from e

    @staticmethod
    def _failure_message(request: ConversionRequest, failures: list[ProviderFailure]) -> str:
        subject = f"Unable to get a USD exchange rate for {request.source_currency} on {request.valuation_date.isoformat()}"
        if not failures:
            return f"{subject}: no exchange rate providers are configured."

        last = failures[-1]
        return (
            f"{subject}: all {len(failures)} exchange rate providers failed. "
            f"Last error: {last.reason}."
        )
