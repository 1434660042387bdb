from decimal import Decimal

import pytest

from fooddelivery.core.catalog.catalog import ALL_CATEGORIES
from fooddelivery.core.catalog.loader import load_seed
from fooddelivery.core.catalog.validator import validate
from fooddelivery.core.errors import ItemUnavailable, NotFound, Unauthorized
from fooddelivery.core.money import to_money


def test_prices_are_exact_decimals(platform):
    item = platform.catalog.add_item("Iced Tea", 0.1 + 0.2, "Drinks", restaurant_owner="pizzahub")
    assert item.price == Decimal("0.30")
    assert to_money("1,250.5") == Decimal("1250.50")


@pytest.mark.parametrize("bad", [True, "abc", float("nan"), float("inf")])
def test_to_money_rejects_garbage(bad):
    with pytest.raises(ValueError):
        to_money(bad)


def test_add_item_rejects_negative_price(platform):
    with pytest.raises(ValueError):
        platform.catalog.add_item("Broken", "-1", "Drinks")


def test_list_by_category_and_restaurant(platform):
    names = {f.name for f in platform.catalog.list_by_category("Burgers")}
    assert names == {"Classic Burger", "Fries"}
    assert len(platform.catalog.list_by_category(ALL_CATEGORIES)) == 4
    assert {f.id for f in platform.catalog.list_by_restaurant("burgerbar")} == {"fries"}
    assert [f.id for f in platform.catalog.list_by_category("Burgers", restaurant_owner="burgerbar")] == ["fries"]


def test_categories_keep_first_seen_order(platform):
    cats = platform.catalog.categories()
    assert cats[0] == ALL_CATEGORIES
    assert set(cats[1:]) == {"Burgers", "Drinks", "Pizza"}
    assert platform.catalog.categories(restaurant_owner="burgerbar") == [ALL_CATEGORIES, "Burgers"]


def test_restaurants_report_open_flag(platform):
    platform.catalog.set_restaurant_open("burgerbar", False)
    rows = {owner: (name, is_open) for owner, name, is_open in platform.catalog.restaurants()}
    assert rows["pizzahub"] == ("Pizza Hub", True)
    assert rows["burgerbar"] == ("Burger Bar", False)


def test_find_by_name_ignores_case_and_punctuation(platform):
    assert platform.catalog.find_by_name("classic-burger!").id == "burger"
    assert platform.catalog.find_by_name("sushi") is None


def test_update_item(platform):
    item = platform.catalog.update_item("coke", price="1.75", variations={"Zero": 0})
    assert item.price == Decimal("1.75")
    assert item.variations == {"Zero": Decimal("0.00")}
    with pytest.raises(NotFound):
        platform.catalog.update_item("nope", name="x")


def test_ensure_available(platform):
    fries = platform.catalog.require("fries")
    platform.catalog.set_stock("fries", False)
    with pytest.raises(ItemUnavailable, match="out of stock"):
        platform.catalog.ensure_available(fries)
    platform.catalog.set_stock("fries", True)
    platform.catalog.set_restaurant_open("burgerbar", False)
    with pytest.raises(ItemUnavailable, match="closed"):
        platform.catalog.ensure_available(fries)


def test_set_restaurant_open_requires_restaurant(platform):
    with pytest.raises(Unauthorized):
        platform.catalog.set_restaurant_open("alice", False)


def test_only_owner_or_admin_can_edit(platform, actor):
    burger = platform.catalog.require("burger")
    platform.catalog.require_editor(actor("pizzahub"), burger)
    platform.catalog.require_editor(actor("admin"), burger)
    with pytest.raises(Unauthorized):
        platform.catalog.require_editor(actor("burgerbar"), burger)
    with pytest.raises(Unauthorized):
        platform.catalog.require_editor(actor("alice"), burger)


def test_remove_item_keeps_existing_orders_intact(platform, place_order):
    order = place_order()
    platform.catalog.remove_item("burger")
    assert platform.catalog.get("burger") is None
    assert order.items[0].name == "Classic Burger"
    assert order.recalc_total() == Decimal("9.99")
    with pytest.raises(NotFound):
        platform.catalog.remove_item("burger")


def test_reviews_pair_ratings_with_comments(platform):
    platform.catalog.add_rating("coke", 4.0, "cold")
    platform.catalog.add_rating("coke", 2.0)
    assert platform.catalog.reviews("coke") == [(4.0, "cold"), (2.0, "")]
    assert platform.catalog.require("coke").rating == pytest.approx(3.0)
    assert platform.catalog.add_rating("missing", 5.0) is None


def test_comment_stays_with_its_own_rating(platform):
    platform.catalog.add_rating("burger", 1.0)
    platform.catalog.add_rating("burger", 5.0, "excellent")
    platform.catalog.add_rating("burger", 3.0, "")
    assert platform.catalog.reviews("burger") == [(1.0, ""), (5.0, "excellent"), (3.0, "")]
    assert platform.catalog.require("burger").comments == ["excellent"]


def test_validator_reports_every_problem():
    errors = validate({
        "categories": ["Drinks"],
        "users": [{"username": "r", "role": "RESTAURANT"}, {"username": "r", "role": "CHEF"}],
        "foods": [
            {"name": "Tea", "price": "abc", "category": "Drinks", "restaurant_owner": "r"},
            {"name": "Cake", "price": -1, "category": "Dessert", "restaurant_owner": "ghost"},
        ],
    })
    joined = "\n".join(errors)
    assert "duplicate username: r" in joined
    assert "unknown role 'CHEF'" in joined
    assert "Tea: price must be a number" in joined
    assert "Cake: price must not be negative" in joined
    assert "Cake: unknown category 'Dessert'" in joined
    assert "Cake: unknown restaurant 'ghost'" in joined


def test_load_seed_refuses_invalid_data(platform):
    with pytest.raises(ValueError, match="Seed validation failed"):
        load_seed({"categories": [], "users": [], "foods": []}, platform.users, platform.catalog)
