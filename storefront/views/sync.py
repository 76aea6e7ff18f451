"""Keeps every registered surface in step with the cart store.

Instead of re-attaching handlers to freshly rendered rows, each surface has
one dispatcher: controls carry an action name and a row index, and
``dispatch`` routes them to the store.
"""
from __future__ import annotations

import logging
from collections.abc import Collection, Iterable
from typing import Any

from storefront.cart.models import LineItem
from storefront.cart.store import CartStore
from storefront.core.constants import DEFAULT_CURRENCY_SYMBOL
from storefront.core.exceptions import ValidationException
from storefront.views.render import DeliveryConfig, SurfaceView, render_surface
from storefront.views.surfaces import SURFACES, SurfaceDescriptor

logger = logging.getLogger(__name__)

ACTIONS = (
    "increase",
    "decrease",
    "set_qty",
    "remove",
    "select_all",
    "remove_selected",
    "clear",
    "update_delivery",
)


class ViewSynchronizer:
    """Full re-render of all registered surfaces on every cart change."""

    def __init__(self, store: CartStore, symbol: str = DEFAULT_CURRENCY_SYMBOL):
        self._store = store
        self._symbol = symbol
        self._surfaces: dict[str, SurfaceDescriptor] = {}
        self._delivery: dict[str, DeliveryConfig] = {}
        self._views: dict[str, SurfaceView] = {}
        self._stale = True
        self._unsubscribe = store.subscribe(self._on_change)

    @property
    def stale(self) -> bool:
        return self._stale

    def register(
        self, surface: SurfaceDescriptor | str, delivery: DeliveryConfig | None = None
    ) -> SurfaceView:
        if isinstance(surface, str):
            surface = self._lookup(surface)
        self._surfaces[surface.name] = surface
        self._delivery[surface.name] = delivery or DeliveryConfig()
        view = self._render(surface.name, self._store.items())
        return view

    def close(self) -> None:
        self._unsubscribe()

    def view(self, name: str) -> SurfaceView:
        if name not in self._surfaces:
            raise ValidationException(f"Surface {name!r} is not registered")
        if self._stale or name not in self._views:
            self.refresh_all()
        return self._views[name]

    def views(self) -> dict[str, SurfaceView]:
        if self._stale:
            self.refresh_all()
        return dict(self._views)

    def badge_count(self) -> int:
        return self._store.count()

    def refresh_all(self) -> None:
        items = self._store.items()
        for name in self._surfaces:
            self._render(name, items)
        self._stale = False

    def set_delivery(self, name: str, enabled: bool, fee: Any = None) -> SurfaceView:
        """Re-render only ``name``; delivery settings never touch the cart."""
        surface = self._surfaces.get(name) or self._lookup(name)
        current = self._delivery.get(surface.name, DeliveryConfig())
        self._delivery[surface.name] = DeliveryConfig(
            enabled=bool(enabled), fee=_parse_fee(fee, default=current.fee)
        )
        return self._render(surface.name, self._store.items())

    def select_all(self, name: str, checked: bool = True) -> SurfaceView:
        items = self._store.items()
        selected = range(len(items)) if checked else ()
        return self._render(name, items, selected)

    def remove_selected(self, name: str, selected: Iterable[Any]) -> SurfaceView:
        positions = _parse_positions(selected)
        if positions:
            self._store.remove_many(positions)
        return self.view(name)

    def dispatch(
        self,
        surface: str,
        action: str,
        index: Any = None,
        value: Any = None,
        selected: Collection[Any] = (),
        delivery_enabled: Any = None,
        delivery_fee: Any = None,
    ) -> SurfaceView:
        """Single entry point for every control of ``surface``.

        Batch actions read ``selected`` as it is at the moment of the call;
        selection is not carried over to the re-rendered rows.
        """
        if surface not in self._surfaces:
            raise ValidationException(f"Surface {surface!r} is not registered")
        if action not in ACTIONS:
            raise ValidationException(f"Unknown cart action: {action!r}")
        if not self._surfaces[surface].editable:
            raise ValidationException(f"Surface {surface!r} is read-only")

        if action == "select_all":
            return self.select_all(surface, checked=_truthy(value, default=True))
        if action == "remove_selected":
            return self.remove_selected(surface, selected)
        if action == "clear":
            self._store.clear()
            return self.view(surface)
        if action == "update_delivery":
            return self.set_delivery(
                surface, _truthy(delivery_enabled, default=False), fee=delivery_fee
            )

        item = self._row(index)
        if item is None:
            return self.view(surface)
        position = _parse_index(index)
        if action == "increase":
            self._store.set_qty(item.id, item.qty + 1)
        elif action == "decrease":
            self._store.set_qty(item.id, max(1, item.qty - 1))
        elif action == "set_qty":
            self._store.set_qty(item.id, 1 if value in (None, "") else value)
        elif action == "remove":
            self._store.remove_at(position)
        return self.view(surface)

    # ---------------------------------------------------------------- helpers

    def _lookup(self, name: str) -> SurfaceDescriptor:
        try:
            return SURFACES[name]
        except KeyError:
            raise ValidationException(f"Unknown surface: {name!r}") from None

    def _row(self, index: Any) -> LineItem | None:
        position = _parse_index(index)
        items = self._store.items()
        if position is None or not 0 <= position < len(items):
            return None
        return items[position]

    def _render(
        self, name: str, items: list[LineItem], selected: Collection[int] = ()
    ) -> SurfaceView:
        view = render_surface(
            items, self._surfaces[name], self._delivery[name], selected, symbol=self._symbol
        )
        self._views[name] = view
        return view

    def _on_change(self, items: list[LineItem]) -> None:
        self._stale = True
        for name in self._surfaces:
            self._render(name, items)
        self._stale = False
        logger.debug("Re-rendered %d surfaces (%d items)", len(self._surfaces), len(items))

    def __enter__(self) -> ViewSynchronizer:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def _parse_index(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _parse_positions(values: Iterable[Any]) -> list[int]:
    positions = []
    for value in values:
        position = _parse_index(value)
        if position is not None:
            positions.append(position)
    return positions


def _parse_fee(value: Any, default: float = 0.0) -> float:
    if value is None or value == "":
        return float(default or 0)
    try:
        return max(0.0, float(value))
    except (TypeError, ValueError):
        return 0.0


def _truthy(value: Any, default: bool) -> bool:
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in {"1", "true", "yes", "on"}
