"""Pure rendering from cart state to surface view-models."""
from __future__ import annotations

from collections.abc import Collection, Sequence
from dataclasses import asdict, dataclass, field
from typing import Any

from storefront.cart.models import LineItem
from storefront.core.constants import DEFAULT_CURRENCY_SYMBOL
from storefront.core.order_math import format_currency, grand_total, item_count, line_total, subtotal
from storefront.views.surfaces import SurfaceDescriptor


@dataclass
class DeliveryConfig:
    """Delivery setting of one surface; ``fee`` only counts when enabled."""

    enabled: bool = False
    fee: float = 0.0

    def resolve(self) -> float:
        if not self.enabled:
            return 0.0
        return max(0.0, float(self.fee or 0))


@dataclass
class RowView:
    index: int
    id: str
    name: str
    qty: int
    unit_price: float
    line_total: float
    unit_price_text: str
    line_total_text: str
    selected: bool = False


@dataclass
class SurfaceView:
    surface: str
    rows: list[RowView]
    subtotal: float
    delivery_fee: float
    total: float
    subtotal_text: str
    delivery_text: str
    total_text: str
    badge_count: int
    delivery_enabled: bool
    delivery_fee_input: float
    editable: bool
    empty_message: str
    ids: dict[str, str | None] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not self.rows

    @property
    def all_selected(self) -> bool:
        return bool(self.rows) and all(row.selected for row in self.rows)

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["is_empty"] = self.is_empty
        return data


def render_surface(
    items: Sequence[LineItem],
    surface: SurfaceDescriptor,
    delivery: DeliveryConfig,
    selected: Collection[int] = (),
    symbol: str = DEFAULT_CURRENCY_SYMBOL,
) -> SurfaceView:
    """Build the full view of one surface. Rows are never reused between calls."""
    rows = [
        RowView(
            index=idx,
            id=item.id,
            name=item.name,
            qty=item.qty,
            unit_price=item.price,
            line_total=line_total(item),
            unit_price_text=format_currency(item.price, symbol),
            line_total_text=format_currency(line_total(item), symbol),
            selected=idx in selected,
        )
        for idx, item in enumerate(items)
    ]
    fee = delivery.resolve()
    sub = subtotal(items)
    total = grand_total(items, fee)
    return SurfaceView(
        surface=surface.name,
        rows=rows,
        subtotal=sub,
        delivery_fee=fee,
        total=total,
        subtotal_text=format_currency(sub, symbol),
        delivery_text=format_currency(fee, symbol),
        total_text=format_currency(total, symbol),
        badge_count=item_count(items),
        delivery_enabled=delivery.enabled,
        delivery_fee_input=float(delivery.fee or 0),
        editable=surface.editable,
        empty_message=surface.empty_message,
        ids=asdict(surface.ids),
    )
