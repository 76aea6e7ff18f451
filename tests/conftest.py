"""Shared pytest fixtures for cart, checkout and API tests."""
from __future__ import annotations

from dataclasses import dataclass, field

import pytest

from storefront.cart.store import CartStore
from storefront.core.config import PaystackConfig, Settings
from storefront.integrations.paystack import VerificationResult, VerificationStatus
from storefront.integrations.storage import MemoryStorage


def make_settings(**overrides) -> Settings:
    paystack = overrides.pop(
        "paystack",
        PaystackConfig(
            public_key="pk_test_public",
            secret_key="sk_test_secret",
            base_url="https://api.paystack.test",
            currency="NGN",
        ),
    )
    values = {
        "paystack": paystack,
        "currency_symbol": "₦",
        "delivery_fee": 500.0,
        "default_optional_fee": 500.0,
        "cart_storage_key": "simple_cart_v1",
        "redis_url": None,
        "verify_url": "http://testserver/verify-payment",
        "confirmation_url": "/thank-you",
        "environment": "test",
        "port": 8000,
    }
    values.update(overrides)
    return Settings(**values)


@dataclass
class FakeVerifier:
    """Verifier double returning a preset verdict and recording references."""

    result: VerificationResult = field(
        default_factory=lambda: VerificationResult(VerificationStatus.SUCCESS)
    )
    error: Exception | None = None
    references: list[str] = field(default_factory=list)

    async def verify(self, reference: str) -> VerificationResult:
        self.references.append(reference)
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture()
def settings() -> Settings:
    return make_settings()


@pytest.fixture()
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture()
def store(storage: MemoryStorage) -> CartStore:
    return CartStore(storage)


@pytest.fixture()
def verifier() -> FakeVerifier:
    return FakeVerifier()
