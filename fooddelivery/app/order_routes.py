from __future__ import annotations
from typing import Dict, Optional
from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from fooddelivery.core.errors import Unauthorized
from fooddelivery.core.orders.models import Order, OrderStatus
from fooddelivery.core.users import Role, User
from fooddelivery.workflows import formatting
from fooddelivery.workflows.platform import Platform
from .serializers import chat_out, order_out
from .state import current_user, get_platform, require_roles

router = APIRouter(prefix="/orders", tags=["orders"])

STAFF = (Role.OWNER, Role.ADMIN, Role.ADMINISTRATOR, Role.CUSTOMER_SERVICE)


class StatusIn(BaseModel):
    status: OrderStatus


class MessageIn(BaseModel):
    text: str


class RatingIn(BaseModel):
    food_ratings: Dict[str, float] = {}
    food_comments: Dict[str, str] = {}
    shipper_rating: Optional[float] = Field(default=None)
    shipper_comment: Optional[str] = None


class ComplaintIn(BaseModel):
    text: str


def _visible(order: Order, user: User) -> bool:
    if user.role in STAFF:
        return True
    if user.role == Role.CUSTOMER:
        return order.customer == user.username
    if user.role == Role.RESTAURANT:
        return user.username in order.restaurants
    if user.role == Role.SHIPPER:
        return order.assigned_shipper in (None, user.username)
    return False


def _load(order_id: str, user: User, p: Platform) -> Order:
    order = p.orders.require(order_id)
    if not _visible(order, user):
        raise Unauthorized("you cannot view this order")
    return order


@router.get("")
def my_orders(user: User = Depends(current_user), p: Platform = Depends(get_platform)):
    if user.role == Role.CUSTOMER:
        orders = p.orders.for_customer(user.username)
    elif user.role == Role.RESTAURANT:
        orders = p.orders.for_restaurant(user.username)
    elif user.role == Role.SHIPPER:
        orders = p.orders.for_shipper(user.username)
    else:
        orders = p.orders.all()
    return [order_out(o, p) for o in orders]


@router.get("/available")
def available(user: User = Depends(current_user), p: Platform = Depends(get_platform)):
    require_roles(user, Role.SHIPPER)
    return [order_out(o, p) for o in p.orders.available_for_claim()]


@router.get("/lookup/{token}")
def lookup(token: str, user: User = Depends(current_user), p: Platform = Depends(get_platform)):
    order = p.orders.find_by_short_id(token)
    return order_out(_load(order.id, user, p), p)


@router.get("/{order_id}")
def get_order(order_id: str, user: User = Depends(current_user), p: Platform = Depends(get_platform)):
    order = _load(order_id, user, p)
    out = order_out(order, p)
    out["details"] = formatting.format_order_detailed(order, p.users)
    return out


@router.get("/{order_id}/events")
def order_events(order_id: str, user: User = Depends(current_user), p: Platform = Depends(get_platform)):
    require_roles(user, *STAFF)
    return [
        {"event": e.event, "actor": e.actor, "ts": e.ts.isoformat(), "data": e.data}
        for e in p.engine.events_for(order_id)
    ]


# -------- statusovergangen --------

@router.post("/{order_id}/status")
def change_status(order_id: str, payload: StatusIn, user: User = Depends(current_user),
                  p: Platform = Depends(get_platform)):
    return order_out(p.engine.advance(order_id, user.actor, payload.status), p)


@router.post("/{order_id}/claim")
def claim(order_id: str, user: User = Depends(current_user), p: Platform = Depends(get_platform)):
    return order_out(p.engine.claim(order_id, user.actor), p)


@router.post("/{order_id}/cancel")
def cancel(order_id: str, user: User = Depends(current_user), p: Platform = Depends(get_platform)):
    return order_out(p.engine.cancel(order_id, user.actor), p)


# -------- chat --------

@router.get("/{order_id}/chat")
def read_chat(order_id: str, user: User = Depends(current_user), p: Platform = Depends(get_platform)):
    return [chat_out(m) for m in p.engine.chat(order_id, user.actor)]


@router.post("/{order_id}/chat", status_code=201)
def post_chat(order_id: str, payload: MessageIn, user: User = Depends(current_user),
              p: Platform = Depends(get_platform)):
    return chat_out(p.engine.post_message(order_id, user.actor, payload.text))


# -------- beoordeling & klacht --------

@router.post("/{order_id}/rating")
def rate(order_id: str, payload: RatingIn, user: User = Depends(current_user),
         p: Platform = Depends(get_platform)):
    order = p.ratings.rate_order(
        order_id, user.actor,
        food_ratings=payload.food_ratings,
        food_comments=payload.food_comments,
        shipper_rating=payload.shipper_rating,
        shipper_comment=payload.shipper_comment,
    )
    return order_out(order, p)


@router.post("/{order_id}/complaint")
def complain(order_id: str, payload: ComplaintIn, user: User = Depends(current_user),
             p: Platform = Depends(get_platform)):
    return order_out(p.complaints.attach_complaint(order_id, user.actor, payload.text), p)


@router.delete("/{order_id}/complaint")
def resolve_complaint(order_id: str, user: User = Depends(current_user), p: Platform = Depends(get_platform)):
    return order_out(p.complaints.resolve_order_complaint(order_id, user.actor), p)
