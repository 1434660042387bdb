from __future__ import annotations
from typing import Any, Dict

from fooddelivery.core.catalog.loader import load_seed, load_seed_file
from fooddelivery.core.users import Role
from .settings import settings

DEFAULT_SEED: Dict[str, Any] = {
    "categories": ["Burgers", "Pizza", "Drinks", "Dessert"],
    "users": [
        {"username": "admin", "password": "admin123", "role": "ADMIN"},
        {"username": "owner", "password": "owner123", "role": "OWNER"},
        {"username": "shipper", "password": "shipper123", "role": "SHIPPER"},
        {"username": "administrator", "password": "adminops123", "role": "ADMINISTRATOR"},
        {"username": "support", "password": "support123", "role": "CUSTOMER_SERVICE"},
        {"username": "customer1", "password": "pass123", "role": "CUSTOMER"},
        {"username": "shipper1", "password": "shipper123", "role": "SHIPPER"},
        {"username": "pizzahub", "password": "rest123", "role": "RESTAURANT",
         "restaurant_name": "Pizza Hub"},
    ],
    "foods": [
        {"name": "Classic Burger", "description": "Beef patty, lettuce, tomato",
         "price": "6.99", "category": "Burgers", "restaurant_owner": "pizzahub"},
        {"name": "Cheese Burger", "description": "Double cheese",
         "price": "8.49", "category": "Burgers", "restaurant_owner": "pizzahub"},
        {"name": "Margherita Pizza", "description": "Fresh basil & mozzarella",
         "price": "10.99", "category": "Pizza", "restaurant_owner": "pizzahub"},
        {"name": "Pepperoni Pizza", "description": "Classic pepperoni",
         "price": "12.50", "category": "Pizza", "restaurant_owner": "pizzahub"},
        {"name": "Coke", "description": "330ml can",
         "price": "1.50", "category": "Drinks", "restaurant_owner": "pizzahub"},
        {"name": "Chocolate Cake", "description": "Slice of heaven",
         "price": "4.75", "category": "Dessert", "restaurant_owner": "pizzahub"},
    ],
}

# Voorbeeldorder: (gerecht, aantal)
_SAMPLE_ORDER = [("Classic Burger", 1), ("Coke", 2)]


def seed_demo(platform, data: Dict[str, Any] = None) -> None:
    """Vult een leeg platform met demo-accounts, gerechten en één geplaatste order."""
    if data is None and settings.SEED_FILE:
        load_seed_file(settings.SEED_FILE, platform.users, platform.catalog)
    else:
        load_seed(data or DEFAULT_SEED, platform.users, platform.catalog)

    customer = next((u for u in platform.users.by_role(Role.CUSTOMER)), None)
    if customer is None:
        return
    cart = platform.carts.for_session(customer.username)
    for name, qty in _SAMPLE_ORDER:
        food = platform.catalog.find_by_name(name)
        if food is not None:
            cart.add(food.id, qty=qty)
    if not cart.is_empty():
        platform.engine.checkout(cart, customer.actor)
