from __future__ import annotations

import pytest

from storefront.cart.store import CartStore
from storefront.core.exceptions import ValidationException
from storefront.views import CHECKOUT, MODAL, PAGE, DeliveryConfig, ViewSynchronizer, render_surface
from storefront.views.html import render_surface_html


def _fill(store: CartStore) -> None:
    store.add({"id": "a", "name": "Apple", "price": 1000})
    store.add({"id": "b", "name": "Bread", "price": 2500})
    store.add({"id": "c", "name": "Corn", "price": 300})


@pytest.fixture()
def sync(store: CartStore):
    synchronizer = ViewSynchronizer(store)
    synchronizer.register(MODAL)
    synchronizer.register(PAGE, DeliveryConfig(enabled=True, fee=500))
    yield synchronizer
    synchronizer.close()


def test_every_mutation_rerenders_all_surfaces(store: CartStore, sync: ViewSynchronizer) -> None:
    store.add({"id": "a", "name": "Apple", "price": 1000})
    assert len(sync.view("modal").rows) == 1
    assert len(sync.view("page").rows) == 1
    assert sync.view("modal").badge_count == 1
    assert not sync.stale

    store.add({"id": "a", "name": "Apple", "price": 1000})
    assert sync.view("modal").rows[0].qty == 2
    assert sync.view("page").rows[0].qty == 2


def test_delivery_is_per_surface(store: CartStore, sync: ViewSynchronizer) -> None:
    _fill(store)
    assert sync.view("modal").total == 3800
    assert sync.view("page").total == 4300
    assert sync.view("page").total_text == "₦4,300.00"


def test_set_delivery_only_rerenders_that_surface(store: CartStore, sync: ViewSynchronizer) -> None:
    _fill(store)
    view = sync.set_delivery("modal", True, "250")
    assert view.total == 4050
    assert sync.view("page").total == 4300
    assert store.count() == 3


def test_select_all_marks_rows_and_mutation_drops_selection(
    store: CartStore, sync: ViewSynchronizer
) -> None:
    _fill(store)
    view = sync.dispatch("modal", "select_all")
    assert view.all_selected

    sync.dispatch("modal", "increase", index=0)
    assert not any(row.selected for row in sync.view("modal").rows)


def test_remove_selected_reads_selection_at_invocation(
    store: CartStore, sync: ViewSynchronizer
) -> None:
    _fill(store)
    view = sync.dispatch("page", "remove_selected", selected=["0", "2"])
    assert [row.id for row in view.rows] == ["b"]
    assert [row.id for row in sync.view("modal").rows] == ["b"]


def test_remove_selected_with_nothing_selected_is_noop(
    store: CartStore, sync: ViewSynchronizer
) -> None:
    _fill(store)
    calls: list[int] = []
    store.subscribe(lambda items: calls.append(len(items)))
    sync.dispatch("page", "remove_selected", selected=[])
    assert calls == []


def test_decrease_stops_at_one(store: CartStore, sync: ViewSynchronizer) -> None:
    _fill(store)
    sync.dispatch("modal", "decrease", index=0)
    assert store.find("a").qty == 1


def test_set_qty_empty_value_means_one(store: CartStore, sync: ViewSynchronizer) -> None:
    _fill(store)
    sync.dispatch("page", "set_qty", index=1, value="5")
    assert store.find("b").qty == 5
    sync.dispatch("page", "set_qty", index=1, value="")
    assert store.find("b").qty == 1


def test_remove_and_clear_actions(store: CartStore, sync: ViewSynchronizer) -> None:
    _fill(store)
    sync.dispatch("modal", "remove", index="1")
    assert [i.id for i in store.items()] == ["a", "c"]
    view = sync.dispatch("page", "clear")
    assert view.is_empty
    assert sync.view("modal").is_empty


def test_stale_index_is_ignored(store: CartStore, sync: ViewSynchronizer) -> None:
    _fill(store)
    sync.dispatch("modal", "increase", index=7)
    sync.dispatch("modal", "remove", index="nope")
    assert store.count() == 3


def test_update_delivery_action(store: CartStore, sync: ViewSynchronizer) -> None:
    _fill(store)
    view = sync.dispatch("modal", "update_delivery", delivery_enabled="on", delivery_fee="100")
    assert view.delivery_fee == 100
    view = sync.dispatch("modal", "update_delivery", delivery_enabled=None, delivery_fee="100")
    assert view.delivery_fee == 0


def test_unknown_action_and_surface_are_rejected(sync: ViewSynchronizer) -> None:
    with pytest.raises(ValidationException):
        sync.dispatch("modal", "explode")
    with pytest.raises(ValidationException):
        sync.dispatch("sidebar", "clear")


def test_checkout_surface_is_read_only(store: CartStore, sync: ViewSynchronizer) -> None:
    _fill(store)
    sync.register(CHECKOUT, DeliveryConfig(enabled=True, fee=500))
    with pytest.raises(ValidationException):
        sync.dispatch("checkout", "clear")
    assert store.count() == 3


def test_two_items_with_delivery_end_to_end(store: CartStore) -> None:
    store.add({"id": "a", "name": "Sofa", "price": 1234567.5})
    store.add({"id": "b", "name": "Lamp", "price": 1000})

    view = render_surface(store.items(), PAGE, DeliveryConfig(enabled=True, fee=500))

    assert view.total == sum(row.line_total for row in view.rows) + 500
    assert view.total_text == "₦1,236,067.50"
    assert [row.line_total_text for row in view.rows] == ["₦1,234,567.50", "₦1,000.00"]


def test_disabled_delivery_contributes_nothing(store: CartStore) -> None:
    store.add({"id": "a", "name": "Sofa", "price": 100})
    view = render_surface(store.items(), MODAL, DeliveryConfig(enabled=False, fee=500))
    assert view.delivery_fee == 0
    assert view.total == 100


def test_html_adapter_escapes_names_and_carries_actions(store: CartStore) -> None:
    store.add({"id": "a", "name": "Bag <b>", "price": 100})
    html = render_surface_html(render_surface(store.items(), PAGE, DeliveryConfig()))
    assert "Bag &lt;b&gt;" in html
    assert 'id="cart-items-page"' in html
    assert 'value="increase:0"' in html
    assert 'data-action="remove"' in html


def test_html_adapter_empty_message(store: CartStore) -> None:
    html = render_surface_html(render_surface([], MODAL, DeliveryConfig()))
    assert "Your cart is empty." in html
