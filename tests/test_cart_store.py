from decimal import Decimal

import pytest

from tikerama.services.cart_store import CART_STORAGE_KEY, CartStore


@pytest.fixture
def cart(session_store):
    return CartStore(session_store)


def test_add_item_inserts_line_from_event_and_ticket_type(cart, event, standard):
    cart.add_item(event, standard, 2)

    item = cart.get_item_by_ticket_type("tkt-std")
    assert item.event_id == "evt-001"
    assert item.event_title == "Festival des Musiques Urbaines"
    assert item.event_date == "2026-04-15"
    assert item.unit_price == Decimal("5000")
    assert item.quantity == 2
    assert cart.total == Decimal("10000")


def test_adding_quantity_beyond_max_per_order_clamps(cart, event, vip):
    cart.add_item(event, vip, 10)

    assert cart.get_item_by_ticket_type("tkt-vip").quantity == 2
    assert cart.total == Decimal("100000")


def test_adding_existing_ticket_type_merges_and_clamps(cart, event, vip):
    cart.add_item(event, vip, 1)
    cart.add_item(event, vip, 1)
    cart.add_item(event, vip, 1)

    assert len(cart.items) == 1
    assert cart.items[0].quantity == 2


def test_add_item_rejects_non_positive_quantity(cart, event, vip):
    with pytest.raises(ValueError):
        cart.add_item(event, vip, 0)
    assert cart.items == []


def test_total_recomputed_after_removal(cart, event, vip, standard):
    cart.add_item(event, vip, 1)
    cart.add_item(event, standard, 3)
    assert cart.total == Decimal("65000")

    cart.remove_item("tkt-vip")

    assert cart.total == Decimal("15000")
    assert [i.ticket_type_id for i in cart.items] == ["tkt-std"]


def test_update_quantity_below_one_removes_line(cart, event, standard):
    cart.add_item(event, standard, 3)

    cart.update_quantity("tkt-std", 0)

    assert cart.items == []
    assert cart.total == Decimal("0")


def test_update_quantity_is_clamped_to_ticket_limit(cart, event, standard):
    cart.add_item(event, standard, 1)

    cart.update_quantity("tkt-std", 4)
    assert cart.get_item_by_ticket_type("tkt-std").quantity == 4

    cart.update_quantity("tkt-std", 9)
    assert cart.get_item_by_ticket_type("tkt-std").quantity == 5
    assert cart.total == Decimal("25000")


def test_update_quantity_of_unknown_line_is_a_no_op(cart, event, standard):
    cart.add_item(event, standard, 1)

    cart.update_quantity("nope", 3)

    assert cart.get_item_count() == 1


def test_every_mutation_is_persisted_and_rehydrated(session_store, event, vip, standard):
    cart = CartStore(session_store)
    cart.add_item(event, vip, 1)
    cart.add_item(event, standard, 2)

    saved = session_store.get_json(CART_STORAGE_KEY)
    assert saved["currency"] == "XOF"
    assert saved["items"][0]["ticketTypeId"] == "tkt-vip"
    assert Decimal(saved["total"]) == Decimal("60000")

    reloaded = CartStore(session_store)
    assert reloaded.get_item_count() == 3
    assert reloaded.total == Decimal("60000")


def test_clear_cart_persists_empty_cart(session_store, event, vip):
    cart = CartStore(session_store)
    cart.add_item(event, vip, 1)

    cart.clear_cart()

    assert CartStore(session_store).items == []


def test_corrupted_storage_starts_an_empty_cart(session_store):
    session_store.set_item(CART_STORAGE_KEY, "{not json")

    cart = CartStore(session_store)

    assert cart.items == []
    assert cart.total == Decimal("0")


def test_snapshot_reports_item_count(cart, event, vip, standard):
    cart.add_item(event, vip, 2)
    cart.add_item(event, standard, 1)

    out = cart.snapshot()

    assert out.item_count == 3
    assert out.total == Decimal("105000")
    assert len(out.items) == 2
