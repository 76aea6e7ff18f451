"""Line item model persisted in the cart record."""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

from storefront.core.exceptions import ValidationException


@dataclass
class LineItem:
    """Single product entry in the cart."""

    id: str
    name: str
    price: float
    qty: int = 1

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "price": self.price,
            "qty": int(self.qty),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> LineItem:
        if not isinstance(data, dict):
            raise ValidationException(f"Line item must be an object, got {type(data).__name__}")
        return cls(
            id=normalize_id(data.get("id")),
            name=str(data.get("name") or ""),
            price=normalize_price(data.get("price")),
            qty=clamp_quantity(data.get("qty", 0) or 0),
        )


def normalize_id(value: Any) -> str:
    item_id = "" if value is None else str(value).strip()
    if not item_id:
        raise ValidationException("Line item id is required")
    return item_id


def normalize_price(value: Any) -> float:
    try:
        price = float(value)
    except (TypeError, ValueError, OverflowError) as e:
        raise ValidationException(f"Invalid price: {value!r}") from e
    if not math.isfinite(price):
        raise ValidationException(f"Invalid price: {value!r}")
    if price < 0:
        raise ValidationException("Price cannot be negative")
    return price


def clamp_quantity(value: Any) -> int:
    """Floor ``value`` to an int and clamp it at zero.

    Example:
        >>> clamp_quantity(2.7), clamp_quantity(-5)
        (2, 0)
    """
    try:
        qty = float(value)
    except (TypeError, ValueError, OverflowError) as e:
        raise ValidationException(f"Invalid quantity: {value!r}") from e
    if not math.isfinite(qty):
        raise ValidationException(f"Invalid quantity: {value!r}")
    return max(0, math.floor(qty))
