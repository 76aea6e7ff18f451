"""Checkout flow between the cart and the hosted payment widget."""

from storefront.checkout.bridge import (
    CheckoutBridge,
    CheckoutOutcome,
    CustomerForm,
    WidgetConfig,
    generate_reference,
)
from storefront.checkout.verification import HttpVerificationClient

__all__ = [
    "CheckoutBridge",
    "CheckoutOutcome",
    "CustomerForm",
    "HttpVerificationClient",
    "WidgetConfig",
    "generate_reference",
]
