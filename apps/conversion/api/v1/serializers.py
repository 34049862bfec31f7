"""
Serializers for the conversion API.
Validate query parameters before they reach the resolver.
"""

from decimal import Decimal

from rest_framework import serializers

from apps.conversion.domain.models import MIN_SUPPORTED_DATE


class ConversionQuerySerializer(serializers.Serializer):
    amount = serializers.DecimalField(max_digits=20, decimal_places=8)
    currency = serializers.CharField(min_length=3, max_length=3)
    date = serializers.DateField(input_formats=["%Y-%m-%d"])

    def validate_amount(self, value: Decimal) -> Decimal:
        if value <= 0:
            raise serializers.ValidationError("Amount must be positive.")
        return value

    def validate_currency(self, value: str) -> str:
        value = value.strip().upper()
        if not (value.isascii() and value.isalpha()):
            raise serializers.ValidationError("Currency code must be 3 letters.")
        return value

    def validate_date(self, value):
        if value < MIN_SUPPORTED_DATE:
            raise serializers.ValidationError(
                f"Exchange rates are only available from {MIN_SUPPORTED_DATE.isoformat()} onwards."
            )
        return value


class ConversionResultSerializer(serializers.Serializer):
    original_amount = serializers.SerializerMethodField()
    from_currency = serializers.CharField(source="source_currency")
    converted_amount = serializers.SerializerMethodField()
    date = serializers.DateField(source="valuation_date")
    exchange_rate = serializers.SerializerMethodField()
    provider = serializers.CharField(source="provider_name")

    def get_original_amount(self, obj) -> str:
        return str(obj.original_amount)

    def get_converted_amount(self, obj) -> str:
        return str(obj.converted_amount_usd)

    def get_exchange_rate(self, obj) -> str:
        return str(obj.implied_rate)
