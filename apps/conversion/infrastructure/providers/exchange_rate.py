from decimal import Decimal

from django.conf import settings

from apps.conversion.domain.errors import ProviderDataUnavailable
from apps.conversion.domain.interfaces import BaseRateProvider
from apps.conversion.domain.models import ConversionRequest, TARGET_CURRENCY
from apps.conversion.infrastructure.providers.http import get_json, positive_decimal, section_value


class ExchangeRateApiProvider(BaseRateProvider):
    """
    ExchangeRate-API v6 provider.
    Uses /history for past dates and /latest for today, future dates, or when history is unavailable.
    """

    name = "exchange_rate_api"
    falls_back_to_latest = True

    def fetch_historical(self, request: ConversionRequest) -> Decimal:
        # Format: https://v6.exchangerate-api.com/v6/YOUR-API-KEY/history/EUR/YEAR/MONTH/DAY
        d = request.valuation_date
        data = self._get(f"history/{request.source_currency}/{d.year}/{d.month}/{d.day}")
        return request.scale(self._usd_rate(data))

    def fetch_latest(self, request: ConversionRequest) -> Decimal:
        # Format: https://v6.exchangerate-api.com/v6/YOUR-API-KEY/latest/EUR
        data = self._get(f"latest/{request.source_currency}")
        return request.scale(self._usd_rate(data))

    def list_rates(self) -> dict[str, Decimal]:
        data = self._get(f"latest/{TARGET_CURRENCY}")
        rates = data.get("conversion_rates")
        if not isinstance(rates, dict) or not rates:
            raise ProviderDataUnavailable(f"{self.name} returned no currency listing")
        return {code: positive_decimal(value, self.name, f"{code} rate") for code, value in rates.items()}

    def _get(self, path: str) -> dict:
        if not settings.EXCHANGERATE_API_URL or not settings.EXCHANGERATE_API_KEY:
            raise ProviderDataUnavailable(f"{self.name} is not configured")

        url = f"{settings.EXCHANGERATE_API_URL}/{settings.EXCHANGERATE_API_KEY}/{path}"
        data = get_json(url, provider_name=self.name)

        # Response format: {"result": "success", "conversion_rates": {"USD": 1.09, ...}}
        if data.get("result") == "error":
            error_type = data.get("error-type", "unknown-error")
            raise ProviderDataUnavailable(f"{self.name} reported an error ({error_type})")
        return data

    def _usd_rate(self, data: dict) -> Decimal:
        return positive_decimal(section_value(data, "conversion_rates", TARGET_CURRENCY), self.name)
