"""
Domain errors for USD conversion.

`ConversionError` subclasses are the only exceptions that leave the
resolver; their messages are safe to show to an end user.
`ProviderError` subclasses are local to a single provider attempt and are
turned into a failed outcome before the resolver ever sees them.
"""


class ConversionError(Exception):
    """Base exception for errors surfaced to callers."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidRequest(ConversionError):
    """Raised when amount, currency or date is malformed (before any network call)."""


class ResolutionFailed(ConversionError):
    """Raised when every configured provider failed to produce a rate."""

    def __init__(self, message: str, failures=()):
        super().__init__(message)
        self.failures = tuple(failures)

    @property
    def last_failure(self):
        return self.failures[-1] if self.failures else None


class CurrencyListUnavailable(ConversionError):
    """Raised when the currency listing provider errors or returns a malformed payload."""


class ProviderError(Exception):
    """Base exception for a single failed provider attempt."""


class ProviderTransportFailure(ProviderError):
    """Provider unreachable, timed out, or answered with a non-success status."""


class ProviderDataUnavailable(ProviderError):
    """Provider answered but had no usable USD figure for the request."""
