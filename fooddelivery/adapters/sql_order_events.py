from typing import List
from fooddelivery.ports.order_events import OrderEvent, OrderEventSink
from fooddelivery.infra.logs import log_order_event, get_order_events

class SqlOrderEvents(OrderEventSink):
    def record(self, event: OrderEvent) -> None:
        log_order_event(event.order_id, event.event, actor=event.actor, data=event.data, ts=event.ts)

    def events_for(self, order_id: str) -> List[OrderEvent]:
        return [
            OrderEvent(
                order_id=r["order_id"],
                event=r["event"],
                actor=r["actor"],
                ts=r["ts"],
                data=r["data"] or {},
            )
            for r in get_order_events(order_id)
        ]
