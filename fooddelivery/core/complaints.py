from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from threading import RLock
from typing import Dict, List
import logging

from .catalog.models import new_id, short_prefix
from .errors import EmptyMessage, NotFound, Unauthorized
from .orders.models import Order
from .orders.store import OrderStore
from .users import Actor, Role
from ..ports.clock import Clock
from ..ports.order_events import OrderEvent, OrderEventSink

log = logging.getLogger("fooddelivery.complaints")

SUPPORT_ROLES = (Role.CUSTOMER_SERVICE, Role.ADMINISTRATOR)


class ComplaintStatus(str, Enum):
    PENDING = "Pending"
    RESOLVED = "Resolved"


@dataclass
class Complaint:
    author: str
    author_role: Role
    message: str
    created: datetime
    status: ComplaintStatus = ComplaintStatus.PENDING
    id: str = field(default_factory=new_id)


class ComplaintLedger:
    """Losse klachten plus de ene actieve klacht die aan een order hangt."""

    def __init__(self, orders: OrderStore, clock: Clock, events: OrderEventSink,
                 short_id_len: int = 6):
        self.orders = orders
        self.short_id_len = short_id_len
        self.clock = clock
        self.events = events
        self._complaints: Dict[str, Complaint] = {}
        self._lock = RLock()

    # ---------- losse klachten ----------

    def file_complaint(self, author: Actor, message: str) -> Complaint:
        message = (message or "").strip()
        if not message:
            raise EmptyMessage("complaint text is empty")
        c = Complaint(author=author.user_id, author_role=author.role,
                      message=message, created=self.clock.now())
        with self._lock:
            self._complaints[c.id] = c
        log.info("Complaint filed by %s", author.user_id)
        return c

    def resolve_complaint(self, actor: Actor, complaint_id: str) -> Complaint:
        _require_support(actor)
        with self._lock:
            c = self._complaints.get(complaint_id)
            if c is None:
                raise NotFound("complaint", complaint_id)
            c.status = ComplaintStatus.RESOLVED
        log.info("Customer service %s resolved complaint %s", actor.user_id, complaint_id)
        return c

    def get(self, complaint_id: str) -> Complaint:
        with self._lock:
            c = self._complaints.get(complaint_id)
        if c is None:
            raise NotFound("complaint", complaint_id)
        return c

    def all(self) -> List[Complaint]:
        with self._lock:
            return list(self._complaints.values())

    def pending(self) -> List[Complaint]:
        return [c for c in self.all() if c.status == ComplaintStatus.PENDING]

    def short_id(self, complaint_id: str) -> str:
        with self._lock:
            ids = list(self._complaints)
        return short_prefix(complaint_id, ids, self.short_id_len)

    def load(self, complaints: List[Complaint]) -> None:
        with self._lock:
            self._complaints = {c.id: c for c in complaints}

    # ---------- klachten op een order ----------

    def attach_complaint(self, order_id: str, actor: Actor, text: str) -> Order:
        text = (text or "").strip()
        if not text:
            raise EmptyMessage("complaint text is empty")
        with self.orders.locked(order_id) as order:
            if actor.user_id != order.customer:
                raise Unauthorized("you can only complain about your own orders")
            # Eén actieve klacht per order: een nieuwe overschrijft de vorige
            order.complaint = text
        log.info("Complaint filed by %s on order %s", actor.user_id, order_id)
        self._record(order_id, "complaint_attached", actor)
        return order

    def resolve_order_complaint(self, order_id: str, actor: Actor) -> Order:
        _require_support(actor)
        with self.orders.locked(order_id) as order:
            if order.complaint is None:
                raise NotFound("complaint on order", order_id)
            order.complaint = None
        # Terugbetaling hoort bij een andere dienst; status van de order blijft gelijk
        log.info("Customer service resolved complaint for order %s", order_id)
        self._record(order_id, "complaint_resolved", actor)
        return order

    def _record(self, order_id: str, event: str, actor: Actor) -> None:
        self.events.record(OrderEvent(order_id=order_id, event=event,
                                      actor=actor.user_id, ts=self.clock.now()))


def _require_support(actor: Actor) -> None:
    if actor.role not in SUPPORT_ROLES:
        raise Unauthorized("only customer service can resolve complaints")
