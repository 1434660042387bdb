from __future__ import annotations
from typing import Optional
from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from fooddelivery.core.errors import Unauthorized
from fooddelivery.core.orders.models import PaymentMethod
from fooddelivery.core.users import Role, User
from fooddelivery.workflows.platform import Platform
from .serializers import cart_out, order_out
from .state import current_user, get_platform, require_roles

router = APIRouter(prefix="/cart", tags=["cart"])


class CartItemIn(BaseModel):
    food_id: str
    variation: str = ""
    qty: int = Field(default=1, ge=1)


class CheckoutIn(BaseModel):
    note: Optional[str] = None
    payment_method: PaymentMethod = PaymentMethod.CASH_ON_DELIVERY


@router.get("")
def get_cart(user: User = Depends(current_user), p: Platform = Depends(get_platform)):
    return cart_out(p.carts.for_session(user.username))


@router.post("/items")
def add_item(payload: CartItemIn, user: User = Depends(current_user), p: Platform = Depends(get_platform)):
    require_roles(user, Role.CUSTOMER)
    cart = p.carts.for_session(user.username)
    cart.add(payload.food_id, payload.variation, payload.qty)
    return cart_out(cart)


@router.post("/items/remove")
def remove_item(payload: CartItemIn, user: User = Depends(current_user), p: Platform = Depends(get_platform)):
    cart = p.carts.for_session(user.username)
    cart.remove(payload.food_id, payload.variation, payload.qty)
    return cart_out(cart)


@router.delete("")
def clear_cart(user: User = Depends(current_user), p: Platform = Depends(get_platform)):
    cart = p.carts.for_session(user.username)
    cart.clear()
    return cart_out(cart)


@router.post("/checkout", status_code=201)
def checkout(payload: CheckoutIn, user: User = Depends(current_user), p: Platform = Depends(get_platform)):
    # Online betalen wordt gesimuleerd en slaagt direct
    order = p.engine.checkout(p.carts.for_session(user.username), user.actor,
                              note=payload.note, payment_method=payload.payment_method)
    return order_out(order, p)


@router.post("/reorder/{order_id}")
def reorder(order_id: str, user: User = Depends(current_user), p: Platform = Depends(get_platform)):
    require_roles(user, Role.CUSTOMER)
    order = p.orders.require(order_id)
    if order.customer != user.username:
        raise Unauthorized("you can only reorder your own orders")
    cart = p.carts.for_session(user.username)
    cart.reorder(order.items)
    return cart_out(cart)
