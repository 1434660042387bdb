from threading import Lock
from typing import List
from fooddelivery.ports.order_events import OrderEvent, OrderEventSink

class InMemoryOrderEvents(OrderEventSink):
    def __init__(self):
        self._events: List[OrderEvent] = []
        self._lock = Lock()

    def record(self, event: OrderEvent) -> None:
        with self._lock:
            self._events.append(event)

    def events_for(self, order_id: str) -> List[OrderEvent]:
        with self._lock:
            return [e for e in self._events if e.order_id == order_id]

    def all(self) -> List[OrderEvent]:
        with self._lock:
            return list(self._events)
