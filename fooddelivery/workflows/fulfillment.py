from __future__ import annotations
from datetime import timedelta
from typing import Any, Callable, Dict, List, Optional
import logging

from fooddelivery.core.cart import Cart
from fooddelivery.core.catalog.catalog import FoodCatalog
from fooddelivery.core.errors import (
    AlreadyClaimed, CancellationWindowClosed, ChatNotAvailable, EmptyCart,
    EmptyMessage, InternalError, InvalidTransition, ItemUnavailable, NotACustomer,
    Unauthorized,
)
from fooddelivery.core.orders.models import (
    CHAT_OPEN, ChatMessage, Order, OrderItem, OrderStatus, PaymentMethod,
)
from fooddelivery.core.orders.store import OrderStore
from fooddelivery.core.orders import transitions
from fooddelivery.core.users import Actor, Role, UserStore
from fooddelivery.ports.clock import Clock
from fooddelivery.ports.order_events import OrderEvent, OrderEventSink
from fooddelivery.infra.settings import settings

log = logging.getLogger("fooddelivery.orders")

CLAIMABLE = (OrderStatus.PLACED, OrderStatus.READY_FOR_PICKUP)


class FulfillmentEngine:
    """Van winkelwagen naar order en door de hele levenscyclus.

    Elke statuswijziging gebeurt onder het lock van die ene order; de
    transitie- en rechtentabel staat in `core.orders.transitions`.
    """

    def __init__(
        self,
        users: UserStore,
        catalog: FoodCatalog,
        orders: OrderStore,
        clock: Clock,
        events: OrderEventSink,
        cancel_window: timedelta = timedelta(seconds=settings.CANCEL_WINDOW_SEC),
    ):
        self.users = users
        self.catalog = catalog
        self.orders = orders
        self.clock = clock
        self.events = events
        self.cancel_window = cancel_window

    # -------------------------------------------------
    #  Checkout
    # -------------------------------------------------
    def checkout(
        self,
        cart: Cart,
        customer: Actor,
        note: Optional[str] = None,
        payment_method: PaymentMethod = PaymentMethod.CASH_ON_DELIVERY,
    ) -> Order:
        if customer.role != Role.CUSTOMER:
            raise NotACustomer()
        profile = self.users.require(customer.user_id)

        with cart.lock:
            entries = cart.entries()
            if not entries:
                raise EmptyCart()
            gone = cart.missing()
            if gone:
                raise ItemUnavailable(
                    f"no longer on the menu, remove it from your cart: {', '.join(gone)}")
            # Prijs-snapshot: naam, basisprijs en meerprijs van dit moment
            items = [
                OrderItem.snapshot(self.catalog.require(fid), var, qty)
                for fid, var, qty in entries
            ]
            order = Order(
                customer=customer.user_id,
                created=self.clock.now(),
                items=items,
                address=profile.address,
                phone=profile.phone,
                note=(note or "").strip() or None,
                payment_method=PaymentMethod(payment_method),
            )
            order.recalc_total()
            self.orders.add(order)
            cart.clear()

        log.info("Order placed by %s orderId=%s payment=%s",
                 customer.user_id, order.id, order.payment_method.value)
        self._record(order.id, "placed", customer, total=str(order.total),
                     payment=order.payment_method.value)
        return order

    # -------------------------------------------------
    #  Statusovergangen
    # -------------------------------------------------
    def advance(self, order_id: str, actor: Actor, target: OrderStatus) -> Order:
        """Generiek: zet de order naar `target` als tabel en rol dat toelaten."""
        target = OrderStatus(target)
        if target == OrderStatus.ACCEPTED_BY_SHIPPER:
            return self.claim(order_id, actor)
        if target == OrderStatus.CANCELLED:
            return self.cancel(order_id, actor)
        if target == OrderStatus.DELIVERED:
            return self.mark_delivered(order_id, actor)
        return self._transition(order_id, actor, target)

    def start_preparing(self, order_id: str, actor: Actor) -> Order:
        return self._transition(order_id, actor, OrderStatus.PREPARING)

    def mark_ready(self, order_id: str, actor: Actor) -> Order:
        return self._transition(order_id, actor, OrderStatus.READY_FOR_PICKUP)

    def start_delivery(self, order_id: str, actor: Actor) -> Order:
        return self._transition(order_id, actor, OrderStatus.DELIVERING)

    def mark_delivered(self, order_id: str, actor: Actor) -> Order:
        order = self._transition(order_id, actor, OrderStatus.DELIVERED, effect=self._clear_chat)
        self._record(order_id, "chat_cleared", actor)
        return order

    def claim(self, order_id: str, actor: Actor) -> Order:
        """Shipper neemt de order aan; precies één gelijktijdige poging wint."""
        if actor.role != Role.SHIPPER:
            raise Unauthorized("only shippers can accept orders")
        with self.orders.locked(order_id) as order:
            if order.assigned_shipper is not None:
                raise AlreadyClaimed(order.assigned_shipper)
            if order.status not in CLAIMABLE:
                raise InvalidTransition(
                    f"cannot accept an order with status {order.status.value}")
            authority = transitions.check_transition(order.status, OrderStatus.ACCEPTED_BY_SHIPPER)
            transitions.authorize(order, actor, authority)
            previous = order.status
            order.assigned_shipper = actor.user_id
            order.status = OrderStatus.ACCEPTED_BY_SHIPPER

        log.info("Shipper %s accepted order %s", actor.user_id, order_id)
        self._record(order_id, "claimed", actor, previous=previous.value)
        return order

    def cancel(self, order_id: str, actor: Actor) -> Order:
        with self.orders.locked(order_id) as order:
            if order.status != OrderStatus.PLACED:
                raise InvalidTransition("can only cancel orders that are placed")
            authority = transitions.check_transition(order.status, OrderStatus.CANCELLED)
            transitions.authorize(order, actor, authority)
            elapsed = self.clock.now() - order.created
            if elapsed >= self.cancel_window:
                raise CancellationWindowClosed()
            order.status = OrderStatus.CANCELLED

        who = "customer" if actor.role == Role.CUSTOMER else "restaurant"
        log.info("Order %s cancelled by %s %s", order_id, who, actor.user_id)
        self._record(order_id, "cancelled", actor, elapsed_sec=round(elapsed.total_seconds(), 3))
        return order

    def _transition(
        self,
        order_id: str,
        actor: Actor,
        target: OrderStatus,
        effect: Optional[Callable[[Order], None]] = None,
    ) -> Order:
        with self.orders.locked(order_id) as order:
            previous = order.status
            authority = transitions.check_transition(previous, target)
            if authority == transitions.Authority.ASSIGNED_SHIPPER and order.assigned_shipper is None:
                raise InternalError(f"order {order_id} is {previous.value} without a shipper")
            transitions.authorize(order, actor, authority)
            order.status = target
            if effect is not None:
                effect(order)

        log.info("%s %s set %s for order %s",
                 actor.role.value.capitalize(), actor.user_id, target.value, order_id)
        self._record(order_id, "status_changed", actor, previous=previous.value, status=target.value)
        return order

    @staticmethod
    def _clear_chat(order: Order) -> None:
        order.chat.clear()

    # -------------------------------------------------
    #  Chat tussen klant en shipper
    # -------------------------------------------------
    def post_message(self, order_id: str, actor: Actor, text: str) -> ChatMessage:
        text = (text or "").strip()
        with self.orders.locked(order_id) as order:
            if order.status not in CHAT_OPEN:
                raise ChatNotAvailable()
            if actor.user_id not in (order.customer, order.assigned_shipper):
                raise Unauthorized("only the customer and the assigned shipper can chat")
            if not text:
                raise EmptyMessage()
            msg = ChatMessage(sender=actor.user_id, text=text, time=self.clock.now())
            order.chat.append(msg)

        self._record(order_id, "chat_message", actor)
        return msg

    def chat(self, order_id: str, actor: Actor) -> List[ChatMessage]:
        with self.orders.locked(order_id) as order:
            if actor.user_id not in (order.customer, order.assigned_shipper):
                raise Unauthorized("only the customer and the assigned shipper can read this chat")
            return list(order.chat)

    # -------------------------------------------------
    #  Audit
    # -------------------------------------------------
    def _record(self, order_id: str, event: str, actor: Optional[Actor], **data: Any) -> None:
        self.events.record(OrderEvent(
            order_id=order_id,
            event=event,
            actor=actor.user_id if actor else None,
            ts=self.clock.now(),
            data=dict(data),
        ))

    def events_for(self, order_id: str) -> List[OrderEvent]:
        self.orders.require(order_id)
        return self.events.events_for(order_id)

    def cancellable_for(self, order: Order) -> Dict[str, Any]:
        """Hulpfunctie voor de UI: mag er nog geannuleerd worden en hoe lang nog."""
        left = self.cancel_window - (self.clock.now() - order.created)
        open_ = order.status == OrderStatus.PLACED and left > timedelta(0)
        return {"cancellable": open_, "seconds_left": max(0.0, left.total_seconds()) if open_ else 0.0}
