"""
exchangerate.host providers.

Two strategies share the same service but read different response shapes:
- ExchangeRateHostProvider reads per-pair quotes from /historical and /live.
- ExchangeRateHostConvertProvider asks /convert for the already converted amount.
"""

from decimal import Decimal

from django.conf import settings

from apps.conversion.domain.errors import ProviderDataUnavailable
from apps.conversion.domain.interfaces import BaseRateProvider
from apps.conversion.domain.models import ConversionRequest, TARGET_CURRENCY
from apps.conversion.infrastructure.providers.http import get_json, positive_decimal, section_value


class _ExchangeRateHostBase(BaseRateProvider):

    def _get(self, endpoint: str, params: dict) -> dict:
        query = dict(params)
        if settings.EXCHANGERATE_HOST_KEY:
            query["access_key"] = settings.EXCHANGERATE_HOST_KEY

        data = get_json(f"{settings.EXCHANGERATE_HOST_URL}/{endpoint}", params=query, provider_name=self.name)

        # Error format: {"success": false, "error": {"code": 106, "info": "..."}}
        if data.get("success") is False:
            code = section_value(data, "error", "code") or section_value(data, "error", "type") or "unknown"
            raise ProviderDataUnavailable(f"{self.name} reported an error ({code})")
        return data


class ExchangeRateHostProvider(_ExchangeRateHostBase):

    name = "exchangerate_host"

    def fetch_historical(self, request: ConversionRequest) -> Decimal:
        # Format: https://api.exchangerate.host/historical?date=2023-06-15&source=EUR&currencies=USD
        data = self._get("historical", {
            "date": request.valuation_date.isoformat(),
            "source": request.source_currency,
            "currencies": TARGET_CURRENCY,
        })
        return request.scale(self._usd_rate(data, request.source_currency))

    def fetch_latest(self, request: ConversionRequest) -> Decimal:
        data = self._get("live", {
            "source": request.source_currency,
            "currencies": TARGET_CURRENCY,
        })
        return request.scale(self._usd_rate(data, request.source_currency))

    def list_rates(self) -> dict[str, Decimal]:
        data = self._get("live", {"source": TARGET_CURRENCY})
        quotes = data.get("quotes")
        if not isinstance(quotes, dict) or not quotes:
            raise ProviderDataUnavailable(f"{self.name} returned no currency listing")

        # Quotes are keyed by pair, e.g. "USDEUR"; strip the source prefix
        listing = {TARGET_CURRENCY: Decimal("1")}
        for pair, value in quotes.items():
            code = pair[len(TARGET_CURRENCY):] if pair.startswith(TARGET_CURRENCY) else pair
            if code:
                listing[code] = positive_decimal(value, self.name, f"{code} rate")
        return listing

    def _usd_rate(self, data: dict, source_currency: str) -> Decimal:
        # Response format: {"success": true, "source": "EUR", "quotes": {"EURUSD": 1.0844}}
        return positive_decimal(section_value(data, "quotes", f"{source_currency}{TARGET_CURRENCY}"), self.name)


class ExchangeRateHostConvertProvider(_ExchangeRateHostBase):

    name = "exchangerate_host_convert"

    def fetch_historical(self, request: ConversionRequest) -> Decimal:
        # Format: https://api.exchangerate.host/convert?from=EUR&to=USD&amount=100&date=2023-06-15
        return self._convert(request, date=request.valuation_date.isoformat())

    def fetch_latest(self, request: ConversionRequest) -> Decimal:
        return self._convert(request)

    def _convert(self, request: ConversionRequest, **extra) -> Decimal:
        data = self._get("convert", {
            "from": request.source_currency,
            "to": TARGET_CURRENCY,
            "amount": str(request.amount),
            **extra,
        })
        # Response format: {"success": true, "query": {...}, "info": {"quote": 1.0844}, "result": 108.44}
        # "result" is the converted amount, not a rate
        return positive_decimal(data.get("result"), self.name, "converted amount")
