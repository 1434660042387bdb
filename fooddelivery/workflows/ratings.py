from __future__ import annotations
from typing import Any, Dict, Mapping, Optional
import logging
import math

from fooddelivery.core.catalog.catalog import FoodCatalog
from fooddelivery.core.errors import (
    AlreadyRated, InvalidRating, NotFound, OrderNotDeliverable, Unauthorized,
)
from fooddelivery.core.orders.models import Order, OrderStatus
from fooddelivery.core.orders.store import OrderStore
from fooddelivery.core.users import Actor, UserStore
from fooddelivery.ports.clock import Clock
from fooddelivery.ports.order_events import OrderEvent, OrderEventSink
from fooddelivery.infra.settings import settings

log = logging.getLogger("fooddelivery.ratings")


def _check_rating(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidRating(f"rating must be a number, got {value!r}")
    value = float(value)
    if math.isnan(value) or not settings.RATING_MIN <= value <= settings.RATING_MAX:
        raise InvalidRating(
            f"rating must be between {settings.RATING_MIN} and {settings.RATING_MAX}")
    return value


def _clean(comment: Optional[str]) -> Optional[str]:
    comment = (comment or "").strip()
    return comment or None


class RatingAggregator:
    """Beoordelingen na levering: per gerecht en voor de shipper.

    Een order wordt in één keer beoordeeld; daarna staat `rated_at` vast.
    """

    def __init__(self, users: UserStore, catalog: FoodCatalog, orders: OrderStore,
                 clock: Clock, events: OrderEventSink):
        self.users = users
        self.catalog = catalog
        self.orders = orders
        self.clock = clock
        self.events = events

    def rate_order(
        self,
        order_id: str,
        actor: Actor,
        food_ratings: Mapping[str, Any],
        food_comments: Optional[Mapping[str, str]] = None,
        shipper_rating: Optional[Any] = None,
        shipper_comment: Optional[str] = None,
    ) -> Order:
        food_comments = food_comments or {}
        with self.orders.locked(order_id) as order:
            if order.status != OrderStatus.DELIVERED:
                raise OrderNotDeliverable()
            if actor.user_id != order.customer:
                raise Unauthorized("only the customer of this order can rate it")
            if order.rated_at is not None:
                raise AlreadyRated()
            for food_id in list(food_ratings) + list(food_comments):
                if not order.has_food(food_id):
                    raise NotFound("food in order", food_id)

            # Eerst alles valideren, dan pas iets wijzigen
            ratings: Dict[str, float] = {fid: _check_rating(v) for fid, v in food_ratings.items()}
            srating = _check_rating(shipper_rating) if shipper_rating is not None else None
            if not ratings and srating is None:
                raise InvalidRating("nothing to rate")

            for food_id, value in ratings.items():
                comment = _clean(food_comments.get(food_id))
                order.food_ratings[food_id] = value
                if comment:
                    order.food_comments[food_id] = comment
                if self.catalog.add_rating(food_id, value, comment) is None:
                    log.warning("Food %s was removed from the catalog, rating kept on order %s",
                                food_id, order_id)

            if srating is not None:
                order.shipper_rating = srating
                order.shipper_comment = _clean(shipper_comment)
                if order.assigned_shipper:
                    self.users.add_shipper_rating(order.assigned_shipper, srating, order.shipper_comment)
            order.rated_at = self.clock.now()

        log.info("Customer %s rated order %s", actor.user_id, order_id)
        self.events.record(OrderEvent(
            order_id=order_id,
            event="rated",
            actor=actor.user_id,
            ts=self.clock.now(),
            data={"foods": ratings, "shipper": srating},
        ))
        return order

    def food_average(self, food_id: str) -> float:
        return self.catalog.require(food_id).rating

    def shipper_summary(self, username: str) -> Dict[str, Any]:
        user = self.users.require(username)
        return {
            "shipper": username,
            "name": user.display_name,
            "average": self.users.shipper_average(username),
            "reviews": len(user.shipper_ratings),
            "comments": list(user.shipper_comments),
        }
