"""Checkout bridge: cart + customer form -> payment widget -> verification.

The widget, the verifier and the user-facing notices are collaborators
passed in at construction, so the same flow drives the browser page (via
the HTTP routes) and the tests.
"""
from __future__ import annotations

import logging
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol

from storefront.cart.store import CartStore
from storefront.core.config import Settings
from storefront.core.constants import (
    MSG_EMAIL_REQUIRED,
    MSG_NETWORK_ERROR,
    MSG_NOT_VERIFIED,
    MSG_WIDGET_CLOSED,
    REFERENCE_PREFIX,
)
from storefront.core.exceptions import VerificationNetworkError
from storefront.core.order_math import grand_total, to_minor_units
from storefront.core.sanitize import sanitize_email, sanitize_phone, sanitize_text
from storefront.integrations.paystack import VerificationResult

logger = logging.getLogger(__name__)


class CheckoutOutcome(Enum):
    COMPLETED = "completed"
    FAILED = "failed"
    NETWORK_ERROR = "network_error"
    CANCELLED = "cancelled"


@dataclass
class CustomerForm:
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CustomerForm:
        return cls(
            first_name=sanitize_text(data.get("first_name")),
            last_name=sanitize_text(data.get("last_name")),
            email=sanitize_email(data.get("email")),
            phone=sanitize_phone(data.get("phone")),
        )

    @property
    def customer_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


@dataclass
class WidgetConfig:
    """Fields the hosted widget recognizes; amount is in minor units."""

    key: str
    email: str
    amount: int
    currency: str
    ref: str
    metadata: dict[str, Any] = field(default_factory=dict)
    callback: Callable[[str], Awaitable[CheckoutOutcome]] | None = None
    on_close: Callable[[], CheckoutOutcome] | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serializable part of the config (handlers stay server-side)."""
        return {
            "key": self.key,
            "email": self.email,
            "amount": self.amount,
            "currency": self.currency,
            "ref": self.ref,
            "metadata": self.metadata,
        }


class PaymentWidget(Protocol):
    def open(self, config: WidgetConfig) -> None: ...


class Verifier(Protocol):
    async def verify(self, reference: str) -> VerificationResult: ...


class Notifier(Protocol):
    def alert(self, message: str) -> None: ...


class Navigator(Protocol):
    def go(self, url: str) -> None: ...


def generate_reference(now: float | None = None) -> str:
    """Time-based unique reference, e.g. ``ORDER-1700000000000``."""
    millis = int((time.time() if now is None else now) * 1000)
    return f"{REFERENCE_PREFIX}{millis}"


class CheckoutBridge:
    """Runs one checkout attempt at a time against the cart store."""

    def __init__(
        self,
        store: CartStore,
        settings: Settings,
        widget: PaymentWidget,
        verifier: Verifier,
        notifier: Notifier,
        navigator: Navigator,
        reference_factory: Callable[[], str] = generate_reference,
    ):
        self._store = store
        self._settings = settings
        self._widget = widget
        self._verifier = verifier
        self._notifier = notifier
        self._navigator = navigator
        self._reference_factory = reference_factory

    def total(self) -> float:
        return grand_total(self._store.items(), self._settings.delivery_fee)

    def start(self, form: CustomerForm) -> WidgetConfig | None:
        items = self._store.items()
        if not items:
            return None
        if not form.email:
            self._notifier.alert(MSG_EMAIL_REQUIRED)
            return None

        config = WidgetConfig(
            key=self._settings.paystack.public_key,
            email=form.email,
            amount=to_minor_units(self.total()),
            currency=self._settings.paystack.currency,
            ref=self._reference_factory(),
            metadata={
                "cart": [item.to_dict() for item in items],
                "customer_name": form.customer_name,
                "phone": form.phone,
            },
            callback=self.complete,
            on_close=self.close,
        )
        logger.info("Opening payment widget ref=%s amount=%s", config.ref, config.amount)
        self._widget.open(config)
        return config

    async def complete(self, reference: str) -> CheckoutOutcome:
        """Provider reported completion: confirm it server-side, once."""
        try:
            result = await self._verifier.verify(reference)
        except VerificationNetworkError:
            self._notifier.alert(MSG_NETWORK_ERROR)
            return CheckoutOutcome.NETWORK_ERROR

        if not result.ok:
            logger.warning("Payment %s not confirmed: %s", reference, result.status.value)
            self._notifier.alert(MSG_NOT_VERIFIED)
            return CheckoutOutcome.FAILED

        self._store.clear()
        self._navigator.go(self._settings.confirmation_url)
        return CheckoutOutcome.COMPLETED

    def close(self) -> CheckoutOutcome:
        self._notifier.alert(MSG_WIDGET_CLOSED)
        return CheckoutOutcome.CANCELLED
