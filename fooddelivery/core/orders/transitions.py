from __future__ import annotations
from enum import Enum
from typing import Dict, FrozenSet, Tuple

from ..errors import InvalidTransition, Unauthorized
from ..users import Actor, Role
from .models import Order, OrderStatus as S


class Authority(str, Enum):
    KITCHEN = "kitchen"                    # restaurant van de gerechten, of OWNER
    CLAIM = "claim"                        # elke shipper (zolang niet toegewezen)
    ASSIGNED_SHIPPER = "assigned_shipper"  # alleen de toegewezen shipper
    CANCEL = "cancel"                      # klant van de order of restaurant van de gerechten


# (van, naar) -> wie mag. Alles wat hier niet staat bestaat niet.
AUTHORITY: Dict[Tuple[S, S], Authority] = {
    (S.PLACED, S.PREPARING): Authority.KITCHEN,
    (S.PLACED, S.READY_FOR_PICKUP): Authority.KITCHEN,
    (S.PREPARING, S.READY_FOR_PICKUP): Authority.KITCHEN,
    (S.PLACED, S.ACCEPTED_BY_SHIPPER): Authority.CLAIM,
    (S.READY_FOR_PICKUP, S.ACCEPTED_BY_SHIPPER): Authority.CLAIM,
    (S.ACCEPTED_BY_SHIPPER, S.DELIVERING): Authority.ASSIGNED_SHIPPER,
    (S.DELIVERING, S.DELIVERED): Authority.ASSIGNED_SHIPPER,
    (S.PLACED, S.CANCELLED): Authority.CANCEL,
}


def _successors() -> Dict[S, FrozenSet[S]]:
    out: Dict[S, set] = {s: set() for s in S}
    for frm, to in AUTHORITY:
        out[frm].add(to)
    return {s: frozenset(v) for s, v in out.items()}


SUCCESSORS: Dict[S, FrozenSet[S]] = _successors()


def check_transition(current: S, target: S) -> Authority:
    authority = AUTHORITY.get((current, target))
    if authority is None:
        raise InvalidTransition(f"cannot change status from {current.value} to {target.value}")
    return authority


def is_allowed(order: Order, actor: Actor, authority: Authority) -> bool:
    if authority == Authority.KITCHEN:
        if actor.role == Role.OWNER:
            return True
        return actor.role == Role.RESTAURANT and actor.user_id in order.restaurants
    if authority == Authority.CLAIM:
        return actor.role == Role.SHIPPER
    if authority == Authority.ASSIGNED_SHIPPER:
        return actor.role == Role.SHIPPER and order.assigned_shipper == actor.user_id
    if authority == Authority.CANCEL:
        if actor.role == Role.CUSTOMER:
            return order.customer == actor.user_id
        return actor.role == Role.RESTAURANT and actor.user_id in order.restaurants
    return False


def authorize(order: Order, actor: Actor, authority: Authority) -> None:
    if not is_allowed(order, actor, authority):
        raise Unauthorized(f"{actor.user_id} ({actor.role.value}) may not do this on this order")
