from __future__ import annotations
from datetime import timedelta
from typing import Any, Dict, Optional

from fooddelivery.core import snapshot
from fooddelivery.core.cart import CartStore
from fooddelivery.core.catalog.catalog import FoodCatalog
from fooddelivery.core.complaints import ComplaintLedger
from fooddelivery.core.orders.store import OrderStore
from fooddelivery.core.users import UserStore
from fooddelivery.ports.clock import Clock
from fooddelivery.ports.order_events import OrderEventSink
from fooddelivery.adapters.memory_order_events import InMemoryOrderEvents
from fooddelivery.adapters.system_clock import SystemClock
from fooddelivery.infra.settings import settings
from fooddelivery.workflows.fulfillment import FulfillmentEngine
from fooddelivery.workflows.ratings import RatingAggregator


class Platform:
    """Alle stores en diensten samen; geen globale toestand, dus per test een eigen instantie."""

    def __init__(
        self,
        clock: Optional[Clock] = None,
        events: Optional[OrderEventSink] = None,
        cancel_window: timedelta = timedelta(seconds=settings.CANCEL_WINDOW_SEC),
        short_id_len: int = settings.SHORT_ID_LEN,
    ):
        self.clock = clock or SystemClock()
        self.events = events or InMemoryOrderEvents()
        self.users = UserStore()
        self.catalog = FoodCatalog(self.users)
        self.carts = CartStore(self.catalog)
        self.orders = OrderStore(short_id_len=short_id_len)
        self.engine = FulfillmentEngine(
            self.users, self.catalog, self.orders, self.clock, self.events,
            cancel_window=cancel_window,
        )
        self.ratings = RatingAggregator(self.users, self.catalog, self.orders, self.clock, self.events)
        self.complaints = ComplaintLedger(self.orders, self.clock, self.events,
                                          short_id_len=short_id_len)

    def snapshot(self) -> Dict[str, Any]:
        return snapshot.dump(self.users, self.catalog, self.orders, self.complaints)

    def restore(self, data: Dict[str, Any]) -> None:
        snapshot.restore(data, self.users, self.catalog, self.orders, self.complaints)
