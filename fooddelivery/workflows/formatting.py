from __future__ import annotations
from decimal import Decimal
from typing import Iterable, Optional, Tuple

from fooddelivery.core.complaints import Complaint, ComplaintLedger
from fooddelivery.core.money import ZERO, format_price as _fmt
from fooddelivery.core.orders.models import ChatMessage, Order, OrderItem
from fooddelivery.core.orders.store import OrderStore
from fooddelivery.core.users import UserStore
from fooddelivery.infra.settings import settings


def format_price(amount: Decimal) -> str:
    return f"{settings.CURRENCY} {_fmt(amount)}"


def format_item(it: OrderItem) -> str:
    var = f" ({it.variation})" if it.variation else ""
    return f"{it.name}{var} x{it.qty}  {format_price(it.line_total)}"


def summarize(items: Iterable[OrderItem]) -> Tuple[str, Decimal]:
    parts = []
    total = ZERO
    for it in items:
        if it.qty <= 0:
            continue
        var = f" ({it.variation})" if it.variation else ""
        parts.append(f"{it.qty}× {it.name}{var}")
        total += it.line_total
    return ("; ".join(parts) if parts else "no items"), total


def format_order_line(order: Order, orders: OrderStore) -> str:
    """`[kort-id] klant - VND totaal - STATUS`; het korte id leidt terug naar de order."""
    return (f"[{orders.short_id(order.id)}] {order.customer} - "
            f"{format_price(order.total)} - {order.status.value}")


def format_order_detailed(order: Order, users: Optional[UserStore] = None) -> str:
    lines = [
        f"Order ID: {order.id}",
        f"Customer: {order.customer}",
        f"Address: {order.address}",
        f"Phone: {order.phone}",
        f"Created: {order.created:%Y-%m-%d %H:%M:%S}",
        f"Status: {order.status.value}",
        "Items:",
    ]
    lines += [f"  - {format_item(it)}" for it in order.items]
    lines.append(f"Total: {format_price(order.total)}")
    if order.note:
        lines.append(f"Customer Note: {order.note}")
    if order.complaint is not None:
        lines.append(f"Complaint: {order.complaint}")
    if order.assigned_shipper:
        shipper = users.get(order.assigned_shipper) if users else None
        name = shipper.display_name if shipper else order.assigned_shipper
        lines.append(f"Shipper: {name}")
        if shipper is not None and users is not None:
            avg = users.shipper_average(shipper.username)
            lines.append(f"Shipper rating: {avg:.1f} ({len(shipper.shipper_ratings)} reviews)")
    else:
        lines.append("No shipper assigned yet.")
    return "\n".join(lines)


def format_complaint(c: Complaint, complaints: ComplaintLedger) -> str:
    return f"[{complaints.short_id(c.id)}] {c.author} ({c.author_role.value}): {c.message} [{c.status.value}]"


def format_order_complaint(order: Order, orders: OrderStore) -> str:
    return f"{format_order_line(order, orders)} COMPLAINT: {order.complaint}"


def format_chat_line(m: ChatMessage) -> str:
    return f"[{m.time:%H:%M}] {m.sender}: {m.text}"
