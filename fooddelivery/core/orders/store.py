from __future__ import annotations
from contextlib import contextmanager
from threading import Lock, RLock
from typing import Callable, Dict, Iterator, List, Optional
import re

from ..catalog.models import short_prefix
from ..errors import NotFound
from .models import Order, OrderStatus

_SHORT_RE = re.compile(r"\[([0-9a-fA-F-]+)\]")


class OrderStore:
    """Alle orders, met één lock per order.

    `_lock` beschermt alleen de dicts; mutaties op een order lopen via
    `locked(order_id)` zodat verschillende orders elkaar nooit blokkeren.
    """

    def __init__(self, short_id_len: int = 6):
        self.short_id_len = short_id_len
        self._orders: Dict[str, Order] = {}
        self._order_locks: Dict[str, RLock] = {}
        self._lock = Lock()

    def add(self, order: Order) -> Order:
        with self._lock:
            if order.id in self._orders:
                raise ValueError(f"duplicate order id: {order.id}")
            self._orders[order.id] = order
            self._order_locks[order.id] = RLock()
        return order

    def get(self, order_id: str) -> Optional[Order]:
        with self._lock:
            return self._orders.get(order_id)

    def require(self, order_id: str) -> Order:
        order = self.get(order_id)
        if order is None:
            raise NotFound("order", order_id)
        return order

    @contextmanager
    def locked(self, order_id: str) -> Iterator[Order]:
        with self._lock:
            order = self._orders.get(order_id)
            order_lock = self._order_locks.get(order_id)
        if order is None or order_lock is None:
            raise NotFound("order", order_id)
        with order_lock:
            yield order

    def all(self) -> List[Order]:
        with self._lock:
            return list(self._orders.values())

    def filter(self, pred: Callable[[Order], bool]) -> List[Order]:
        return [o for o in self.all() if pred(o)]

    def load(self, orders: List[Order]) -> None:
        with self._lock:
            self._orders = {o.id: o for o in orders}
            self._order_locks = {o.id: RLock() for o in orders}

    # ---------- queries per rol ----------

    def for_customer(self, username: str) -> List[Order]:
        return self.filter(lambda o: o.customer == username)

    def for_restaurant(self, owner_id: str) -> List[Order]:
        return self.filter(lambda o: owner_id in o.restaurants)

    def for_shipper(self, username: str) -> List[Order]:
        return self.filter(lambda o: o.assigned_shipper == username)

    def available_for_claim(self) -> List[Order]:
        return self.filter(
            lambda o: o.assigned_shipper is None
            and o.status in (OrderStatus.PLACED, OrderStatus.READY_FOR_PICKUP)
        )

    def with_complaints(self) -> List[Order]:
        return self.filter(lambda o: o.complaint is not None)

    # ---------- korte id's ----------

    def short_id(self, order_id: str) -> str:
        """Kortste prefix (minstens `short_id_len`) die binnen de huidige orders uniek is."""
        return short_prefix(order_id, self._ids(), self.short_id_len)

    def find_by_short_id(self, text: str) -> Order:
        """Zoekt de order bij een kort id of een weergaveregel met `[kort-id]`."""
        m = _SHORT_RE.search(text or "")
        token = (m.group(1) if m else (text or "")).strip().lower()
        if not token:
            raise NotFound("order", text)
        hits = [oid for oid in self._ids() if oid.startswith(token)]
        if len(hits) != 1:
            raise NotFound("order", token)
        return self.require(hits[0])

    def _ids(self) -> List[str]:
        with self._lock:
            return list(self._orders)
