from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Dict, List, Optional, Set

from ..catalog.models import FoodItem, new_id
from ..money import ZERO


class OrderStatus(str, Enum):
    PLACED = "PLACED"
    PREPARING = "PREPARING"
    READY_FOR_PICKUP = "READY_FOR_PICKUP"
    ACCEPTED_BY_SHIPPER = "ACCEPTED_BY_SHIPPER"
    DELIVERING = "DELIVERING"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"


TERMINAL = frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELLED})
CHAT_OPEN = frozenset({OrderStatus.ACCEPTED_BY_SHIPPER, OrderStatus.DELIVERING})


class PaymentMethod(str, Enum):
    CASH_ON_DELIVERY = "cash_on_delivery"
    ONLINE = "online"


@dataclass(frozen=True)
class OrderItem:
    """Bevroren orderregel: naam en prijzen zoals ze bij de checkout waren."""
    food_id: str
    name: str
    variation: str
    qty: int
    unit_price: Decimal
    variation_delta: Decimal = ZERO
    restaurant_owner: Optional[str] = None

    @classmethod
    def snapshot(cls, food: FoodItem, variation: str, qty: int) -> "OrderItem":
        return cls(
            food_id=food.id,
            name=food.name,
            variation=variation or "",
            qty=qty,
            unit_price=food.price,
            variation_delta=food.variation_delta(variation),
            restaurant_owner=food.restaurant_owner,
        )

    @property
    def line_total(self) -> Decimal:
        return (self.unit_price + self.variation_delta) * self.qty


@dataclass
class ChatMessage:
    sender: str
    text: str
    time: datetime


@dataclass
class Order:
    customer: str
    created: datetime
    items: List[OrderItem] = field(default_factory=list)
    status: OrderStatus = OrderStatus.PLACED
    total: Decimal = ZERO
    address: str = ""
    phone: str = ""
    note: Optional[str] = None
    payment_method: PaymentMethod = PaymentMethod.CASH_ON_DELIVERY
    assigned_shipper: Optional[str] = None
    chat: List[ChatMessage] = field(default_factory=list)
    complaint: Optional[str] = None
    food_ratings: Dict[str, float] = field(default_factory=dict)
    food_comments: Dict[str, str] = field(default_factory=dict)
    shipper_rating: Optional[float] = None
    shipper_comment: Optional[str] = None
    rated_at: Optional[datetime] = None
    id: str = field(default_factory=new_id)

    def recalc_total(self) -> Decimal:
        # Altijd opnieuw optellen, nooit incrementeel bijwerken
        self.total = sum((it.line_total for it in self.items), ZERO)
        return self.total

    @property
    def is_closed(self) -> bool:
        return self.status in TERMINAL

    @property
    def restaurants(self) -> Set[str]:
        return {it.restaurant_owner for it in self.items if it.restaurant_owner}

    def has_food(self, food_id: str) -> bool:
        return any(it.food_id == food_id for it in self.items)
