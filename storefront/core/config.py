"""Environment-driven configuration objects for the storefront."""
from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from storefront.core.constants import (
    CART_STORAGE_KEY,
    CONFIRMATION_URL,
    DEFAULT_CURRENCY,
    DEFAULT_CURRENCY_SYMBOL,
    DEFAULT_OPTIONAL_DELIVERY_FEE,
    DELIVERY_FEE,
    PAYSTACK_BASE_URL,
)
from storefront.core.exceptions import ConfigurationException


def _str_to_bool(value: str | None) -> bool:
    if value is None:
        return False
    return value.strip().lower() in {"true", "1", "yes", "y"}


def _get_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return float(default)
    try:
        value = float(raw)
    except ValueError as e:
        raise ConfigurationException(f"{name} must be a number, got {raw!r}") from e
    if value < 0:
        raise ConfigurationException(f"{name} cannot be negative")
    return value


@dataclass(slots=True)
class PaystackConfig:
    public_key: str
    secret_key: str
    base_url: str
    currency: str

    @property
    def verification_enabled(self) -> bool:
        return bool(self.secret_key)


@dataclass(slots=True)
class Settings:
    paystack: PaystackConfig
    currency_symbol: str
    delivery_fee: float
    default_optional_fee: float
    cart_storage_key: str
    redis_url: str | None
    verify_url: str
    confirmation_url: str
    environment: str
    port: int

    @property
    def is_dev(self) -> bool:
        return self.environment in ("development", "dev", "local", "test")


def load_settings() -> Settings:
    """Load environment variables once and expose typed settings.

    Payment keys are read from the environment (or a local ``.env``) only;
    an empty secret key disables verification instead of failing startup so
    the storefront pages stay browsable.
    """
    load_dotenv()

    port = int(os.getenv("PORT", "8000"))
    paystack = PaystackConfig(
        public_key=os.getenv("PAYSTACK_PUBLIC_KEY", "").strip(),
        secret_key=os.getenv("PAYSTACK_SECRET_KEY", "").strip(),
        base_url=os.getenv("PAYSTACK_BASE_URL", PAYSTACK_BASE_URL).rstrip("/"),
        currency=os.getenv("CURRENCY", DEFAULT_CURRENCY).strip().upper() or DEFAULT_CURRENCY,
    )

    return Settings(
        paystack=paystack,
        currency_symbol=os.getenv("CURRENCY_SYMBOL", DEFAULT_CURRENCY_SYMBOL),
        delivery_fee=_get_float("DELIVERY_FEE", DELIVERY_FEE),
        default_optional_fee=_get_float("OPTIONAL_DELIVERY_FEE", DEFAULT_OPTIONAL_DELIVERY_FEE),
        cart_storage_key=os.getenv("CART_STORAGE_KEY", CART_STORAGE_KEY),
        redis_url=os.getenv("REDIS_URL") or None,
        verify_url=os.getenv("VERIFY_URL", f"http://localhost:{port}/verify-payment"),
        confirmation_url=os.getenv("CONFIRMATION_URL", CONFIRMATION_URL),
        environment=os.getenv("ENVIRONMENT", "production").strip().lower(),
        port=port,
    )


def debug_enabled() -> bool:
    return _str_to_bool(os.getenv("DEBUG"))
