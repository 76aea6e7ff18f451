"""Custom exceptions for the storefront."""
from __future__ import annotations


class StorefrontException(Exception):
    """Base exception for all storefront errors."""

    def __init__(self, message: str, *args: object) -> None:
        super().__init__(message, *args)
        self.message = message


class ValidationException(StorefrontException):
    """Input validation errors."""

    pass


class ConfigurationException(StorefrontException):
    """Configuration errors."""

    pass


class PaymentVerificationException(StorefrontException):
    """Payment provider could not confirm a transaction."""

    def __init__(self, reference: str, message: str | None = None) -> None:
        super().__init__(message or f"Payment {reference} could not be verified")
        self.reference = reference


class VerificationNetworkError(PaymentVerificationException):
    """Transport or decoding failure while asking for a verdict."""

    pass
