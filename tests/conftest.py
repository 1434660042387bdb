import os
import tempfile

# Vóór elke import van fooddelivery: settings lezen de omgeving bij import
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("DATA_FILE", os.path.join(tempfile.mkdtemp(), "snapshot.json"))
os.environ.setdefault("APP_MODE", "prod")

from datetime import datetime, timedelta, timezone

import pytest

from fooddelivery.adapters.memory_order_events import InMemoryOrderEvents
from fooddelivery.core.catalog.loader import load_seed
from fooddelivery.ports.clock import Clock
from fooddelivery.workflows.platform import Platform

SEED = {
    "categories": ["Burgers", "Pizza", "Drinks"],
    "users": [
        {"username": "alice", "password": "pw", "role": "CUSTOMER",
         "address": "12 Le Loi", "phone": "0901"},
        {"username": "bob", "password": "pw", "role": "CUSTOMER",
         "address": "3 Hai Ba Trung", "phone": "0902"},
        {"username": "pizzahub", "password": "pw", "role": "RESTAURANT",
         "restaurant_name": "Pizza Hub"},
        {"username": "burgerbar", "password": "pw", "role": "RESTAURANT",
         "restaurant_name": "Burger Bar"},
        {"username": "ship_a", "password": "pw", "role": "SHIPPER", "shipper_name": "Anh"},
        {"username": "ship_b", "password": "pw", "role": "SHIPPER", "shipper_name": "Binh"},
        {"username": "owner", "password": "pw", "role": "OWNER"},
        {"username": "admin", "password": "pw", "role": "ADMIN"},
        {"username": "ops", "password": "pw", "role": "ADMINISTRATOR"},
        {"username": "support", "password": "pw", "role": "CUSTOMER_SERVICE"},
    ],
    "foods": [
        {"id": "burger", "name": "Classic Burger", "price": "6.99", "category": "Burgers",
         "restaurant_owner": "pizzahub", "variations": {"Large": "1.00"}},
        {"id": "coke", "name": "Coke", "price": "1.50", "category": "Drinks",
         "restaurant_owner": "pizzahub"},
        {"id": "margherita", "name": "Margherita Pizza", "price": "10.99", "category": "Pizza",
         "restaurant_owner": "pizzahub"},
        {"id": "fries", "name": "Fries", "price": "2.25", "category": "Burgers",
         "restaurant_owner": "burgerbar"},
    ],
}


class FakeClock(Clock):
    def __init__(self, start: datetime = None):
        self.current = start or datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)

    def now(self) -> datetime:
        return self.current

    def advance(self, seconds: float) -> None:
        self.current += timedelta(seconds=seconds)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def events():
    return InMemoryOrderEvents()


@pytest.fixture
def platform(clock, events):
    p = Platform(clock=clock, events=events)
    load_seed(SEED, p.users, p.catalog)
    return p


@pytest.fixture
def actor(platform):
    def _actor(username):
        return platform.users.require(username).actor
    return _actor


@pytest.fixture
def place_order(platform, actor):
    """Plaatst een order voor `customer` met (food_id, aantal[, variatie]) regels."""
    def _place(customer="alice", lines=(("burger", 1), ("coke", 2)), note=None):
        cart = platform.carts.for_session(customer)
        for line in lines:
            food_id, qty = line[0], line[1]
            variation = line[2] if len(line) > 2 else ""
            cart.add(food_id, variation, qty)
        return platform.engine.checkout(cart, actor(customer), note=note)
    return _place


@pytest.fixture
def delivered_order(platform, actor, place_order):
    order = place_order()
    engine = platform.engine
    engine.start_preparing(order.id, actor("pizzahub"))
    engine.mark_ready(order.id, actor("pizzahub"))
    engine.claim(order.id, actor("ship_a"))
    engine.start_delivery(order.id, actor("ship_a"))
    engine.mark_delivered(order.id, actor("ship_a"))
    return order
