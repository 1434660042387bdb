from decimal import Decimal

import pytest

from fooddelivery.core.errors import EmptyCart, ItemUnavailable, NotACustomer, Unauthorized
from fooddelivery.core.orders.models import OrderStatus, PaymentMethod


def test_checkout_scenario_total(platform, actor):
    cart = platform.carts.for_session("alice")
    cart.add("burger", qty=1)
    cart.add("coke", qty=2)
    order = platform.engine.checkout(cart, actor("alice"), note="  no onions ")

    assert order.total == Decimal("9.99")
    assert order.status == OrderStatus.PLACED
    assert order.note == "no onions"
    assert order.payment_method == PaymentMethod.CASH_ON_DELIVERY
    assert cart.is_empty()
    assert platform.orders.get(order.id) is order


def test_checkout_snapshots_prices_and_profile(platform, actor, place_order):
    order = place_order(lines=(("burger", 1, "Large"),))
    platform.catalog.update_item("burger", price="99.00", name="Renamed")
    platform.users.update_profile("alice", address="New street", phone="0999")

    item = order.items[0]
    assert (item.name, item.unit_price, item.variation_delta) == ("Classic Burger", Decimal("6.99"), Decimal("1.00"))
    assert order.recalc_total() == Decimal("7.99")
    assert (order.address, order.phone) == ("12 Le Loi", "0901")


def test_empty_cart_fails_and_leaves_cart_unchanged(platform, actor):
    cart = platform.carts.for_session("alice")
    with pytest.raises(EmptyCart):
        platform.engine.checkout(cart, actor("alice"))
    assert cart.is_empty()
    assert platform.orders.all() == []


def test_only_customers_can_checkout(platform, actor):
    cart = platform.carts.for_session("pizzahub")
    cart.add("coke")
    with pytest.raises(NotACustomer) as exc:
        platform.engine.checkout(cart, actor("pizzahub"))
    assert isinstance(exc.value, Unauthorized)
    assert cart.entries() == [("coke", "", 1)]


def test_online_payment_is_recorded(platform, actor):
    cart = platform.carts.for_session("bob")
    cart.add("fries", qty=3)
    order = platform.engine.checkout(cart, actor("bob"), payment_method="online")
    assert order.payment_method == PaymentMethod.ONLINE
    assert order.total == Decimal("6.75")


def test_checkout_records_audit_event(platform, events, place_order):
    order = place_order()
    [placed] = events.events_for(order.id)
    assert events.all() == [placed]
    assert placed.event == "placed"
    assert placed.actor == "alice"
    assert placed.data["total"] == "9.99"


def test_checkout_refuses_food_removed_from_catalog(platform, actor):
    cart = platform.carts.for_session("alice")
    cart.add("coke")
    cart.add("burger")
    platform.catalog.remove_item("burger")
    with pytest.raises(ItemUnavailable, match="burger"):
        platform.engine.checkout(cart, actor("alice"))
    assert sorted(cart.entries()) == [("burger", "", 1), ("coke", "", 1)]
    assert platform.orders.all() == []

    cart.remove("burger")
    order = platform.engine.checkout(cart, actor("alice"))
    assert order.total == Decimal("1.50")
