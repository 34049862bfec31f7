"""
Pure domain entities (POPOs).
No dependency on Django or the network.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from apps.conversion.domain.errors import InvalidRequest


TARGET_CURRENCY = "USD"
MIN_SUPPORTED_DATE = date(1999, 1, 1)
RATE_QUANTUM = Decimal("0.0000001")


def to_decimal(value) -> Decimal:
    """Convert a number or numeric string to Decimal, going through str() to avoid float artifacts."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise InvalidOperation(f"{value!r} is not a number")
    return Decimal(str(value).strip())


@dataclass(frozen=True)
class ConversionRequest:

    amount: Decimal
    source_currency: str
    valuation_date: date

    def __post_init__(self):
        if not self.amount.is_finite() or self.amount <= 0:
            raise InvalidRequest("Please enter an amount greater than zero.")
        code = self.source_currency
        if len(code) != 3 or not (code.isascii() and code.isalpha()):
            raise InvalidRequest(
                f"Currency code must be exactly 3 letters, got '{self.source_currency}'."
            )
        if self.valuation_date < MIN_SUPPORTED_DATE:
            raise InvalidRequest(
                f"Exchange rates are only available from {MIN_SUPPORTED_DATE.isoformat()} onwards."
            )

    @classmethod
    def from_primitives(cls, amount, source_currency, valuation_date) -> "ConversionRequest":
        """
        Build a request from raw form values.

        Args:
            amount: Positive number or numeric string
            source_currency: Currency code, any case (e.g. "eur")
            valuation_date: date instance or ISO "YYYY-MM-DD" string

        Raises:
            InvalidRequest: if any value is malformed
        """
        try:
            amount_value = to_decimal(amount)
        except (InvalidOperation, ValueError, TypeError):
            raise InvalidRequest("Please enter a valid amount.")

        currency = (source_currency or "").strip().upper()
        if not currency:
            raise InvalidRequest("Please select a currency.")

        if isinstance(valuation_date, date):
            parsed_date = valuation_date
        else:
            if not valuation_date:
                raise InvalidRequest("Please select a date.")
            try:
                parsed_date = date.fromisoformat(str(valuation_date).strip())
            except ValueError:
                raise InvalidRequest("Invalid date format. Use YYYY-MM-DD.")

        return cls(amount=amount_value, source_currency=currency, valuation_date=parsed_date)

    def is_future(self, today: date) -> bool:
        return self.valuation_date > today

    def scale(self, rate: Decimal) -> Decimal:
        return self.amount * rate


@dataclass(frozen=True)
class ConversionResult:

    original_amount: Decimal
    source_currency: str
    converted_amount_usd: Decimal
    valuation_date: date
    provider_name: str

    def __post_init__(self):
        if self.converted_amount_usd <= 0:
            raise ValueError(f"converted_amount_usd must be positive, got {self.converted_amount_usd}")

    @property
    def implied_rate(self) -> Decimal:
        return (self.converted_amount_usd / self.original_amount).quantize(
            RATE_QUANTUM, rounding=ROUND_HALF_UP
        )


@dataclass(frozen=True)
class ProviderFailure:

    provider_name: str
    reason: str


@dataclass(frozen=True)
class ProviderOutcome:
    """Result of one provider attempt: either a converted USD amount or a failure."""

    provider_name: str
    converted_amount: Decimal | None = None
    failure: ProviderFailure | None = None

    @property
    def succeeded(self) -> bool:
        return self.converted_amount is not None

    @classmethod
    def success(cls, provider_name: str, converted_amount: Decimal) -> "ProviderOutcome":
        return cls(provider_name=provider_name, converted_amount=converted_amount)

    @classmethod
    def failed(cls, provider_name: str, reason: str) -> "ProviderOutcome":
        return cls(provider_name=provider_name, failure=ProviderFailure(provider_name, reason))
