import logging
from abc import ABC, abstractmethod
from decimal import Decimal

from apps.conversion.domain.errors import ProviderDataUnavailable, ProviderError
from apps.conversion.domain.models import ConversionRequest, ProviderOutcome


logger = logging.getLogger(__name__)


class BaseRateProvider(ABC):
    """
    Uniform strategy contract for one exchange rate provider.

    Subclasses implement `fetch_historical` and `fetch_latest`, each returning
    the request amount converted to USD or raising a `ProviderError`.
    `attempt` wraps both into a `ProviderOutcome` so no provider error ever
    reaches the resolver as an exception.
    """

    name: str = ""

    # Retry the latest-rate endpoint when the historical one fails for a past date
    falls_back_to_latest: bool = False

    @abstractmethod
    def fetch_historical(self, request: ConversionRequest) -> Decimal:
        pass

    @abstractmethod
    def fetch_latest(self, request: ConversionRequest) -> Decimal:
        pass

    def list_rates(self) -> dict[str, Decimal]:
        """Latest rates of every currency relative to one USD."""
        raise ProviderDataUnavailable(f"{self.name} does not publish a currency listing")

    def attempt(self, request: ConversionRequest, use_latest_only: bool = False) -> ProviderOutcome:
        """
        Try to convert the request amount to USD.

        Args:
            request: Validated conversion request
            use_latest_only: Skip the historical endpoint (future dates)

        Returns:
            Successful outcome with the converted amount, or a failed outcome with the reason
        """
        if use_latest_only:
            return self._run(self.fetch_latest, request)

        outcome = self._run(self.fetch_historical, request)
        if outcome.succeeded or not self.falls_back_to_latest:
            return outcome

        logger.info("%s: historical rate unavailable, trying latest rate", self.name)
        return self._run(self.fetch_latest, request)

    def _run(self, fetch, request: ConversionRequest) -> ProviderOutcome:
        try:
            converted = fetch(request)
        except ProviderError as e:
            logger.warning("%s failed for %s on %s: %s", self.name, request.source_currency, request.valuation_date, e)
            return ProviderOutcome.failed(self.name, str(e))

        # Only a positive finite Decimal counts as a conversion
        if not isinstance(converted, Decimal) or not converted.is_finite() or converted <= 0:
            logger.warning("%s returned an invalid converted amount: %r", self.name, converted)
            return ProviderOutcome.failed(self.name, f"{self.name} returned an invalid converted amount")
        return ProviderOutcome.success(self.name, converted)
