import pytest

from fooddelivery.core.errors import (
    AlreadyRated, InvalidRating, NotFound, OrderNotDeliverable, Unauthorized,
)


def _deliver(platform, actor, order, shipper="ship_a"):
    engine = platform.engine
    engine.claim(order.id, actor(shipper))
    engine.start_delivery(order.id, actor(shipper))
    engine.mark_delivered(order.id, actor(shipper))
    return order


def test_rate_order_updates_food_and_shipper(platform, actor, delivered_order):
    platform.ratings.rate_order(
        delivered_order.id, actor("alice"),
        food_ratings={"burger": 4, "coke": 5.0},
        food_comments={"burger": " juicy ", "coke": ""},
        shipper_rating=3,
        shipper_comment="",
    )
    burger = platform.catalog.require("burger")
    assert burger.ratings == [4.0]
    assert burger.comments == ["juicy"]
    assert platform.catalog.require("coke").comments == []
    assert delivered_order.food_ratings == {"burger": 4.0, "coke": 5.0}
    assert delivered_order.rated_at is not None

    shipper = platform.users.require("ship_a")
    assert shipper.shipper_ratings == [3.0]
    assert shipper.shipper_comments == []
    assert platform.users.shipper_average("ship_a") == 3.0


def test_food_average_is_exact_mean_across_orders(platform, actor, place_order):
    values = [5, 4, 2, 3.5]
    for i, value in enumerate(values):
        customer = "alice" if i % 2 == 0 else "bob"
        order = _deliver(platform, actor, place_order(customer=customer))
        platform.ratings.rate_order(order.id, actor(customer), {"burger": value})
    assert platform.ratings.food_average("burger") == pytest.approx(sum(values) / len(values))
    assert platform.catalog.require("burger").ratings == [float(v) for v in values]


def test_shipper_summary(platform, actor, place_order):
    for value, comment in ((5, "fast"), (2, "late")):
        order = _deliver(platform, actor, place_order(), shipper="ship_b")
        platform.ratings.rate_order(order.id, actor("alice"), {}, shipper_rating=value,
                                    shipper_comment=comment)
    summary = platform.ratings.shipper_summary("ship_b")
    assert summary == {"shipper": "ship_b", "name": "Binh", "average": 3.5,
                       "reviews": 2, "comments": ["fast", "late"]}


def test_not_delivered_cannot_be_rated(platform, actor, place_order):
    order = place_order()
    with pytest.raises(OrderNotDeliverable):
        platform.ratings.rate_order(order.id, actor("alice"), {"burger": 5})


def test_only_the_customer_can_rate(platform, actor, delivered_order):
    with pytest.raises(Unauthorized):
        platform.ratings.rate_order(delivered_order.id, actor("bob"), {"burger": 5})


@pytest.mark.parametrize("bad", [-0.1, 5.01, 10, float("nan"), True, "5", None])
def test_out_of_range_rating_changes_nothing(platform, actor, delivered_order, bad):
    with pytest.raises(InvalidRating):
        platform.ratings.rate_order(delivered_order.id, actor("alice"),
                                    {"coke": 4, "burger": bad})
    assert platform.catalog.require("coke").ratings == []
    assert delivered_order.rated_at is None


def test_bounds_are_inclusive(platform, actor, delivered_order):
    platform.ratings.rate_order(delivered_order.id, actor("alice"), {"burger": 0, "coke": 5})
    assert platform.catalog.require("burger").rating == 0.0
    assert platform.catalog.require("coke").rating == 5.0


def test_food_must_belong_to_order(platform, actor, delivered_order):
    with pytest.raises(NotFound):
        platform.ratings.rate_order(delivered_order.id, actor("alice"), {"fries": 5})


def test_order_can_be_rated_once(platform, actor, delivered_order):
    platform.ratings.rate_order(delivered_order.id, actor("alice"), {"burger": 5})
    with pytest.raises(AlreadyRated):
        platform.ratings.rate_order(delivered_order.id, actor("alice"), {"coke": 5})


def test_empty_batch_is_rejected(platform, actor, delivered_order):
    with pytest.raises(InvalidRating):
        platform.ratings.rate_order(delivered_order.id, actor("alice"), {})


def test_removed_food_keeps_rating_on_order(platform, actor, delivered_order):
    platform.catalog.remove_item("burger")
    platform.ratings.rate_order(delivered_order.id, actor("alice"), {"burger": 4})
    assert delivered_order.food_ratings == {"burger": 4.0}


def test_removed_shipper_keeps_rating_on_order(platform, actor, delivered_order):
    platform.users.load([u for u in platform.users.all() if u.username != "ship_a"])
    platform.ratings.rate_order(delivered_order.id, actor("alice"), {}, shipper_rating=4)
    assert delivered_order.shipper_rating == 4.0


def test_reviews_keep_comment_on_the_right_customer(platform, actor, place_order):
    first = _deliver(platform, actor, place_order(customer="alice"))
    platform.ratings.rate_order(first.id, actor("alice"), {"burger": 1})
    second = _deliver(platform, actor, place_order(customer="bob"))
    platform.ratings.rate_order(second.id, actor("bob"), {"burger": 5},
                                food_comments={"burger": "excellent"})
    assert platform.catalog.reviews("burger") == [(1.0, ""), (5.0, "excellent")]
