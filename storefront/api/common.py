"""Shared dependencies and schemas for the HTTP routes."""
from __future__ import annotations

import logging
from typing import Any
from uuid import uuid4

from fastapi import Request, Response
from pydantic import BaseModel, Field

from storefront.cart.store import CartStore
from storefront.core.config import Settings
from storefront.core.constants import CART_COOKIE_MAX_AGE, CART_COOKIE_NAME
from storefront.integrations.storage import KeyValueStorage, NamespacedStorage
from storefront.views.render import DeliveryConfig
from storefront.views.surfaces import SURFACES, DeliveryPolicy
from storefront.views.sync import ViewSynchronizer

logger = logging.getLogger(__name__)


# =============================================================================
# Schemas
# =============================================================================


class LineItemIn(BaseModel):
    id: str
    name: str = ""
    price: float


class CartActionIn(BaseModel):
    surface: str = "page"
    action: str
    index: int | None = None
    value: Any = None
    selected: list[int] = Field(default_factory=list)
    apply_delivery: bool | None = None
    delivery_fee: float | None = None


class RowOut(BaseModel):
    index: int
    id: str
    name: str
    qty: int
    unit_price: float
    line_total: float
    unit_price_text: str
    line_total_text: str
    selected: bool = False


class SurfaceOut(BaseModel):
    surface: str
    rows: list[RowOut]
    subtotal: float
    delivery_fee: float
    total: float
    subtotal_text: str
    delivery_text: str
    total_text: str
    badge_count: int
    delivery_enabled: bool
    is_empty: bool


class CartResponse(BaseModel):
    items: list[dict[str, Any]]
    count: int
    surfaces: dict[str, SurfaceOut]


class CheckoutStartIn(BaseModel):
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone: str = ""


class CheckoutCompleteIn(BaseModel):
    reference: str


class CheckoutResponse(BaseModel):
    widget: dict[str, Any] | None = None
    notices: list[str] = Field(default_factory=list)
    redirect: str | None = None
    outcome: str | None = None


class VerifyResponse(BaseModel):
    status: str
    message: str | None = None


# =============================================================================
# Dependencies
# =============================================================================


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_client_id(request: Request, response: Response) -> str:
    """Cookie-scoped client id; plays the part of a browser's own storage."""
    client_id = request.cookies.get(CART_COOKIE_NAME)
    if not client_id:
        client_id = uuid4().hex
    remember_client(response, client_id)
    return client_id


def remember_client(response: Response, client_id: str) -> None:
    response.set_cookie(
        key=CART_COOKIE_NAME,
        value=client_id,
        httponly=True,
        samesite="lax",
        max_age=CART_COOKIE_MAX_AGE,
    )


def open_store(request: Request, client_id: str) -> CartStore:
    backend: KeyValueStorage = request.app.state.storage
    settings: Settings = request.app.state.settings
    return CartStore(NamespacedStorage(backend, client_id), settings.cart_storage_key)


def delivery_for(
    settings: Settings, surface: str, enabled: Any = None, fee: Any = None
) -> DeliveryConfig:
    descriptor = SURFACES[surface]
    if descriptor.delivery_policy is DeliveryPolicy.FIXED:
        return DeliveryConfig(enabled=True, fee=settings.delivery_fee)
    try:
        fee_value = settings.default_optional_fee if fee in (None, "") else max(0.0, float(fee))
    except (TypeError, ValueError):
        fee_value = settings.default_optional_fee
    return DeliveryConfig(enabled=bool(enabled), fee=fee_value)


def open_synchronizer(
    store: CartStore, settings: Settings, deliveries: dict[str, DeliveryConfig] | None = None
) -> ViewSynchronizer:
    """Synchronizer with every surface registered, as on a fully loaded page."""
    sync = ViewSynchronizer(store, symbol=settings.currency_symbol)
    deliveries = deliveries or {}
    for name in SURFACES:
        sync.register(name, deliveries.get(name) or delivery_for(settings, name))
    return sync


def surfaces_out(sync: ViewSynchronizer) -> dict[str, SurfaceOut]:
    return {name: SurfaceOut(**view.to_dict()) for name, view in sync.views().items()}
