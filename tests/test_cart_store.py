from __future__ import annotations

import json
import random

import pytest

from storefront.cart.models import LineItem
from storefront.cart.store import CartStore
from storefront.core.constants import CART_STORAGE_KEY
from storefront.core.exceptions import ValidationException
from storefront.integrations.storage import MemoryStorage


def _persisted(storage: MemoryStorage) -> list[dict]:
    return json.loads(storage.get_item(CART_STORAGE_KEY) or "[]")


def _fill(store: CartStore, *ids: str) -> None:
    for idx, item_id in enumerate(ids):
        store.add({"id": item_id, "name": item_id.upper(), "price": 100 * (idx + 1)})


def test_add_unseen_id_appends_with_qty_one(store: CartStore) -> None:
    store.add({"id": "a", "name": "Apple", "price": 1000})
    items = store.items()
    assert [(i.id, i.qty) for i in items] == [("a", 1)]


def test_add_seen_id_increments_without_duplicating(store: CartStore) -> None:
    store.add({"id": "a", "name": "Apple", "price": 1000})
    store.add({"id": "b", "name": "Bread", "price": 500})
    store.add({"id": "a", "name": "Apple", "price": 1000})
    assert [(i.id, i.qty) for i in store.items()] == [("a", 2), ("b", 1)]


def test_add_accepts_line_item(store: CartStore) -> None:
    store.add(LineItem(id="x", name="Box", price=10.5, qty=7))
    assert store.find("x") == LineItem(id="x", name="Box", price=10.5, qty=1)


@pytest.mark.parametrize("qty", [0, -5])
def test_set_qty_to_zero_or_negative_removes(store: CartStore, qty: int) -> None:
    _fill(store, "a", "b")
    store.set_qty("a", qty)
    assert [i.id for i in store.items()] == ["b"]


def test_set_qty_floors_fractions(store: CartStore, storage: MemoryStorage) -> None:
    _fill(store, "a")
    store.set_qty("a", 2.7)
    assert store.find("a").qty == 2
    assert _persisted(storage)[0]["qty"] == 2


def test_set_qty_unknown_id_is_noop(store: CartStore, storage: MemoryStorage) -> None:
    store.set_qty("missing", 3)
    assert storage.get_item(CART_STORAGE_KEY) is None


def test_set_qty_rejects_non_numeric(store: CartStore) -> None:
    _fill(store, "a")
    with pytest.raises(ValidationException):
        store.set_qty("a", "lots")
    assert store.find("a").qty == 1


def test_remove_many_deletes_highest_index_first(store: CartStore) -> None:
    _fill(store, "a", "b", "c")
    store.remove_many([0, 2])
    assert [i.id for i in store.items()] == ["b"]


def test_remove_many_notifies_once_and_ignores_bad_positions(store: CartStore) -> None:
    _fill(store, "a", "b", "c")
    calls: list[int] = []
    store.subscribe(lambda items: calls.append(len(items)))
    store.remove_many([2, 2, 9, -1, 0])
    assert calls == [1]
    assert [i.id for i in store.items()] == ["b"]


def test_remove_at_out_of_bounds_is_silent(store: CartStore, storage: MemoryStorage) -> None:
    calls: list[int] = []
    store.subscribe(lambda items: calls.append(len(items)))
    store.remove_at(0)
    store.remove_at(-1)
    assert calls == []
    assert storage.get_item(CART_STORAGE_KEY) is None


def test_remove_at_removes_by_position(store: CartStore) -> None:
    _fill(store, "a", "b", "c")
    store.remove_at(1)
    assert [i.id for i in store.items()] == ["a", "c"]


def test_clear_removes_the_record(store: CartStore, storage: MemoryStorage) -> None:
    _fill(store, "a", "b")
    store.clear()
    assert store.is_empty()
    assert storage.get_item(CART_STORAGE_KEY) is None
    assert len(storage) == 0
    assert CartStore(storage).items() == []


def test_removing_last_item_removes_the_record(store: CartStore, storage: MemoryStorage) -> None:
    _fill(store, "a")
    store.set_qty("a", 0)
    assert storage.get_item(CART_STORAGE_KEY) is None


def test_corrupt_record_loads_empty_and_is_cleared(storage: MemoryStorage) -> None:
    storage.set_item(CART_STORAGE_KEY, "{not json")
    store = CartStore(storage)
    assert store.items() == []
    assert storage.get_item(CART_STORAGE_KEY) is None
    assert store.load() == []


@pytest.mark.parametrize(
    "raw",
    [
        '{"id": "a"}',
        '[{"id": "", "price": 1, "qty": 1}]',
        '[{"id": "a", "price": "x", "qty": 1}]',
        '[{"id": "a", "name": "A", "price": 1, "qty": Infinity}]',
        '[{"id": "a", "name": "A", "price": 1, "qty": 1e400}]',
        '[{"id": "a", "name": "A", "price": 1, "qty": NaN}]',
        '[{"id": "a", "name": "A", "price": 1, "qty": "many"}]',
        '[{"id": "a", "name": "A", "price": 1, "qty": 1' + "0" * 400 + "}]",
        '[{"id": "a", "name": "A", "price": Infinity, "qty": 1}]',
    ],
)
def test_malformed_record_shapes_are_discarded(storage: MemoryStorage, raw: str) -> None:
    storage.set_item(CART_STORAGE_KEY, raw)
    assert CartStore(storage).items() == []
    assert storage.get_item(CART_STORAGE_KEY) is None


def test_load_drops_zero_quantity_rows(storage: MemoryStorage) -> None:
    storage.set_item(
        CART_STORAGE_KEY,
        json.dumps([{"id": "a", "name": "A", "price": 1, "qty": 0}, {"id": "b", "name": "B", "price": 2, "qty": 3}]),
    )
    assert [(i.id, i.qty) for i in CartStore(storage).items()] == [("b", 3)]


def test_new_store_rehydrates_from_storage(store: CartStore, storage: MemoryStorage) -> None:
    _fill(store, "a", "b")
    store.set_qty("b", 4)
    again = CartStore(storage)
    assert again.items() == store.items()


def test_listeners_see_persisted_state(store: CartStore, storage: MemoryStorage) -> None:
    seen: list[bool] = []

    def listener(items: list[LineItem]) -> None:
        seen.append(_persisted(storage) == [i.to_dict() for i in items])

    store.subscribe(listener)
    _fill(store, "a", "b")
    store.set_qty("a", 3)
    store.clear()
    assert seen == [True, True, True, True]


def test_unsubscribe_stops_notifications(store: CartStore) -> None:
    calls: list[int] = []
    unsubscribe = store.subscribe(lambda items: calls.append(len(items)))
    _fill(store, "a")
    unsubscribe()
    _fill(store, "b")
    assert calls == [1]


def test_snapshots_cannot_mutate_store(store: CartStore) -> None:
    _fill(store, "a")
    snapshot = store.items()
    snapshot[0].qty = 99
    snapshot.clear()
    assert store.find("a").qty == 1


@pytest.mark.parametrize(
    "item",
    [
        {"id": "", "name": "Nameless", "price": 1},
        {"id": "a", "name": "Negative", "price": -1},
        {"id": "a", "name": "Text", "price": "free"},
    ],
)
def test_add_rejects_invalid_items(store: CartStore, storage: MemoryStorage, item: dict) -> None:
    with pytest.raises(ValidationException):
        store.add(item)
    assert storage.get_item(CART_STORAGE_KEY) is None


def test_random_sequences_keep_storage_and_memory_equal(storage: MemoryStorage) -> None:
    rng = random.Random(1234)
    store = CartStore(storage)
    ids = ["a", "b", "c", "d"]
    for _ in range(300):
        op = rng.choice(["add", "set_qty", "remove_at", "remove_many", "clear"])
        if op == "add":
            item_id = rng.choice(ids)
            store.add({"id": item_id, "name": item_id, "price": rng.randint(0, 5000)})
        elif op == "set_qty":
            store.set_qty(rng.choice(ids), rng.uniform(-2, 6))
        elif op == "remove_at":
            store.remove_at(rng.randint(-1, 5))
        elif op == "remove_many":
            store.remove_many(rng.sample(range(6), rng.randint(0, 3)))
        elif rng.random() < 0.1:
            store.clear()
        persisted = _persisted(storage)
        assert persisted == [i.to_dict() for i in store.items()]
        assert all(row["qty"] > 0 for row in persisted)
