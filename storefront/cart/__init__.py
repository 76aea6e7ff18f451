"""Cart state: line items and the store that owns them."""

from storefront.cart.models import LineItem
from storefront.cart.store import CartStore

__all__ = ["CartStore", "LineItem"]
