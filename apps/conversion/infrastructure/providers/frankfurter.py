from decimal import Decimal

from django.conf import settings

from apps.conversion.domain.errors import ProviderDataUnavailable
from apps.conversion.domain.interfaces import BaseRateProvider
from apps.conversion.domain.models import ConversionRequest, TARGET_CURRENCY
from apps.conversion.infrastructure.providers.http import get_json, positive_decimal, section_value


class FrankfurterProvider(BaseRateProvider):
    """
    Frankfurter API provider (ECB reference rates, no API key).
    Dates without a publication (weekends, holidays) resolve to the closest earlier business day.
    """

    name = "frankfurter"

    def fetch_historical(self, request: ConversionRequest) -> Decimal:
        # Format: https://api.frankfurter.app/2023-06-15?from=EUR&to=USD
        data = self._get(request.valuation_date.isoformat(), request.source_currency, TARGET_CURRENCY)
        return request.scale(self._usd_rate(data))

    def fetch_latest(self, request: ConversionRequest) -> Decimal:
        data = self._get("latest", request.source_currency, TARGET_CURRENCY)
        return request.scale(self._usd_rate(data))

    def list_rates(self) -> dict[str, Decimal]:
        data = get_json(f"{settings.FRANKFURTER_URL}/latest", params={"from": TARGET_CURRENCY}, provider_name=self.name)
        rates = data.get("rates")
        if not isinstance(rates, dict) or not rates:
            raise ProviderDataUnavailable(f"{self.name} returned no currency listing")

        listing = {TARGET_CURRENCY: Decimal("1")}
        for code, value in rates.items():
            listing[code] = positive_decimal(value, self.name, f"{code} rate")
        return listing

    def _get(self, path: str, base: str, symbol: str) -> dict:
        if base == symbol:
            # Frankfurter rejects identical from/to; the rate is trivially 1
            return {"rates": {symbol: 1}}
        return get_json(
            f"{settings.FRANKFURTER_URL}/{path}",
            params={"from": base, "to": symbol},
            provider_name=self.name,
        )

    def _usd_rate(self, data: dict) -> Decimal:
        # Response format: {"amount": 1.0, "base": "EUR", "date": "2023-06-15", "rates": {"USD": 1.0844}}
        return positive_decimal(section_value(data, "rates", TARGET_CURRENCY), self.name)
