"""Cart store: the single owner of the line-item list.

Every mutation writes the whole cart back to storage and only then notifies
subscribers, so storage and memory never disagree when a view re-renders.
"""
from __future__ import annotations

import json
import logging
from collections.abc import Callable, Iterable
from typing import Any

from storefront.cart.models import LineItem, clamp_quantity, normalize_id, normalize_price
from storefront.core.constants import CART_STORAGE_KEY
from storefront.core.exceptions import ValidationException
from storefront.core.order_math import item_count
from storefront.core.sanitize import sanitize_text
from storefront.integrations.storage import KeyValueStorage

logger = logging.getLogger(__name__)

Listener = Callable[[list[LineItem]], None]


class CartStore:
    """Cart persisted as one JSON array under a fixed storage key."""

    def __init__(self, storage: KeyValueStorage, key: str = CART_STORAGE_KEY):
        self._storage = storage
        self._key = key
        self._listeners: list[Listener] = []
        self._items: list[LineItem] = self.load()

    @property
    def key(self) -> str:
        return self._key

    def load(self) -> list[LineItem]:
        """Read the persisted cart; a corrupt record is dropped, never raised."""
        raw = self._storage.get_item(self._key)
        if not raw:
            return []
        try:
            data = json.loads(raw)
            if not isinstance(data, list):
                raise ValidationException("Cart record is not a list")
            items = [LineItem.from_dict(entry) for entry in data]
        except (ValueError, TypeError, ValidationException) as e:
            logger.warning("Invalid cart data under %s; clearing: %s", self._key, e)
            self._storage.remove_item(self._key)
            return []
        return [item for item in items if item.qty > 0]

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # ------------------------------------------------------------------ reads

    def items(self) -> list[LineItem]:
        """Snapshot of the cart; callers cannot mutate the owned list."""
        return [LineItem(item.id, item.name, item.price, item.qty) for item in self._items]

    def find(self, item_id: str) -> LineItem | None:
        for item in self._items:
            if item.id == item_id:
                return LineItem(item.id, item.name, item.price, item.qty)
        return None

    def count(self) -> int:
        return item_count(self._items)

    def is_empty(self) -> bool:
        return not self._items

    def __len__(self) -> int:
        return len(self._items)

    # -------------------------------------------------------------- mutations

    def add(self, item: dict[str, Any] | LineItem) -> LineItem:
        if isinstance(item, LineItem):
            item_id, name, price = item.id, item.name, item.price
        else:
            item_id, name, price = item.get("id"), item.get("name"), item.get("price")
        item_id = normalize_id(item_id)
        price = normalize_price(price)

        idx = self._index_of(item_id)
        if idx == -1:
            line = LineItem(id=item_id, name=sanitize_text(name), price=price, qty=1)
            self._items.append(line)
        else:
            line = self._items[idx]
            line.qty += 1
        self._commit()
        return LineItem(line.id, line.name, line.price, line.qty)

    def set_qty(self, item_id: str, qty: Any) -> None:
        idx = self._index_of(item_id)
        if idx == -1:
            return
        value = clamp_quantity(qty)
        if value == 0:
            del self._items[idx]
        else:
            self._items[idx].qty = value
        self._commit()

    def remove_at(self, position: int) -> None:
        if not self._in_range(position):
            return
        del self._items[position]
        self._commit()

    def remove_many(self, positions: Iterable[int]) -> None:
        targets = sorted({p for p in positions if self._in_range(p)}, reverse=True)
        if not targets:
            return
        # highest first so earlier deletions do not shift later targets
        for position in targets:
            del self._items[position]
        self._commit()

    def clear(self) -> None:
        self._items = []
        self._commit()

    # ---------------------------------------------------------------- helpers

    def _index_of(self, item_id: str) -> int:
        for idx, item in enumerate(self._items):
            if item.id == item_id:
                return idx
        return -1

    def _in_range(self, position: Any) -> bool:
        return isinstance(position, int) and not isinstance(position, bool) and (
            0 <= position < len(self._items)
        )

    def _commit(self) -> None:
        if self._items:
            serialized = json.dumps([item.to_dict() for item in self._items], ensure_ascii=False)
            self._storage.set_item(self._key, serialized)
        else:
            # an empty cart and a missing record load the same way
            self._storage.remove_item(self._key)
        snapshot = self.items()
        for listener in list(self._listeners):
            listener(snapshot)
