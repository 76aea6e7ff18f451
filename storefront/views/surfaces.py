"""Surface descriptors: element ids and delivery policy per cart rendering."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class DeliveryPolicy(Enum):
    """How a surface decides which delivery fee goes into its total."""

    FIXED = "fixed"  # always charged (checkout)
    OPTIONAL = "optional"  # user toggle + editable amount (modal, page)


@dataclass(frozen=True)
class SurfaceIds:
    items: str
    subtotal: str
    total: str
    delivery: str | None = None
    select_all: str | None = None
    remove_selected: str | None = None
    clear: str | None = None
    delivery_toggle: str | None = None
    delivery_fee: str | None = None
    submit: str | None = None


@dataclass(frozen=True)
class SurfaceDescriptor:
    name: str
    ids: SurfaceIds
    delivery_policy: DeliveryPolicy
    empty_message: str
    editable: bool = True


BADGE_ID = "cart-count"

MODAL = SurfaceDescriptor(
    name="modal",
    ids=SurfaceIds(
        items="cart-items-modal",
        subtotal="modal-subtotal",
        total="modal-grandtotal",
        select_all="select-all",
        remove_selected="remove-selected",
        clear="clear-cart",
        delivery_toggle="apply-delivery-modal",
        delivery_fee="delivery-fee-modal",
    ),
    delivery_policy=DeliveryPolicy.OPTIONAL,
    empty_message="Your cart is empty.",
)

PAGE = SurfaceDescriptor(
    name="page",
    ids=SurfaceIds(
        items="cart-items-page",
        subtotal="page-subtotal",
        total="page-grandtotal",
        select_all="select-all-page",
        remove_selected="remove-selected-page",
        clear="clear-cart-page",
        delivery_toggle="apply-delivery-page",
        delivery_fee="delivery-fee-page",
        submit="checkout-btn",
    ),
    delivery_policy=DeliveryPolicy.OPTIONAL,
    empty_message="Your cart is empty. Go back to shopping.",
)

CHECKOUT = SurfaceDescriptor(
    name="checkout",
    ids=SurfaceIds(
        items="checkout-items",
        subtotal="checkout-subtotal",
        total="checkout-total",
        delivery="checkout-delivery",
        submit="place-order-btn",
    ),
    delivery_policy=DeliveryPolicy.FIXED,
    empty_message="Your cart is empty.",
    editable=False,
)

SURFACES: dict[str, SurfaceDescriptor] = {s.name: s for s in (MODAL, PAGE, CHECKOUT)}
