"""
ViewSet for the conversion API v1.
Thin HTTP surface over RateResolver; every error is returned as {"error": "<message>"}.
"""

from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema

from apps.conversion.api.v1.serializers import ConversionQuerySerializer, ConversionResultSerializer
from apps.conversion.domain.errors import CurrencyListUnavailable, InvalidRequest, ResolutionFailed
from apps.conversion.domain.models import TARGET_CURRENCY
from apps.conversion.domain.services import RateResolver


def get_resolver() -> RateResolver:
    return RateResolver()


@extend_schema(tags=['Conversion'])
class ConversionViewSet(viewsets.ViewSet):

    @extend_schema(
        parameters=[
            OpenApiParameter("amount", OpenApiTypes.DECIMAL, required=True, description="Amount to convert"),
            OpenApiParameter("currency", OpenApiTypes.STR, required=True, description="Source currency code (e.g. EUR)"),
            OpenApiParameter("date", OpenApiTypes.DATE, required=True, description="Date of the rate (YYYY-MM-DD)"),
        ],
        description="Convert an amount to USD at the exchange rate of the given date"
    )
    @action(detail=False, methods=['get'], url_path='convert')
    def convert(self, request):
        query = ConversionQuerySerializer(data=request.query_params)
        if not query.is_valid():
            field, messages = next(iter(query.errors.items()))
            return Response(
                {"error": f"{field}: {messages[0]}", "details": query.errors},
                status=status.HTTP_400_BAD_REQUEST
            )

        params = query.validated_data
        try:
            result = get_resolver().convert_with_details(params["amount"], params["currency"], params["date"])
        except InvalidRequest as e:
            return Response({"error": e.message}, status=status.HTTP_400_BAD_REQUEST)
        except ResolutionFailed as e:
            return Response({"error": e.message}, status=status.HTTP_502_BAD_GATEWAY)

        return Response(ConversionResultSerializer(result).data)

    @extend_schema(description="Latest rates of every available currency relative to one USD")
    @action(detail=False, methods=['get'], url_path='currencies')
    def currencies(self, request):
        try:
            rates = get_resolver().list_available_currencies()
        except CurrencyListUnavailable as e:
            return Response({"error": e.message}, status=status.HTTP_503_SERVICE_UNAVAILABLE)

        return Response({
            "base": TARGET_CURRENCY,
            "rates": {code: str(rate) for code, rate in sorted(rates.items())},
        })
