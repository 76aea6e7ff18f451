"""Shared helpers for cart totals, quantities and money display."""
from __future__ import annotations

from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from storefront.core.constants import DEFAULT_CURRENCY_SYMBOL, MINOR_UNITS_PER_MAJOR


def _field(item: Any, name: str) -> Any:
    if isinstance(item, dict):
        return item.get(name)
    return getattr(item, name, None)


def line_total(item: Any) -> float:
    return float(_field(item, "price") or 0) * int(_field(item, "qty") or 0)


def subtotal(items: Iterable[Any]) -> float:
    """Sum of price x qty. No rounding until the value is displayed."""
    total = 0.0
    for item in items:
        total += line_total(item)
    return total


def grand_total(items: Iterable[Any], delivery_fee: float | None = None) -> float:
    return subtotal(items) + float(delivery_fee or 0)


def item_count(items: Iterable[Any]) -> int:
    return sum(int(_field(item, "qty") or 0) for item in items)


def to_minor_units(amount: float) -> int:
    """Convert a major-unit amount to the provider's integer minor units (kobo)."""
    value = Decimal(str(amount)) * MINOR_UNITS_PER_MAJOR
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def format_currency(amount: float, symbol: str = DEFAULT_CURRENCY_SYMBOL) -> str:
    """Format for display: ``symbol`` prefix, grouped thousands, two decimals.

    Example:
        >>> format_currency(1234567.5)
        '₦1,234,567.50'
    """
    return f"{symbol}{float(amount):,.2f}"
