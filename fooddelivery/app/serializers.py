from __future__ import annotations
from typing import Any, Dict

from fooddelivery.core.cart import Cart
from fooddelivery.core.catalog.models import FoodItem
from fooddelivery.core.complaints import Complaint
from fooddelivery.core.orders.models import ChatMessage, Order
from fooddelivery.workflows import formatting
from fooddelivery.workflows.platform import Platform


def food_out(f: FoodItem) -> Dict[str, Any]:
    return {
        "id": f.id,
        "name": f.name,
        "description": f.description,
        "price": str(f.price),
        "category": f.category,
        "restaurant_owner": f.restaurant_owner,
        "in_stock": f.in_stock,
        "variations": {k: str(v) for k, v in f.variations.items()},
        "rating": round(f.rating, 2),
        "reviews": len(f.reviews),
    }


def cart_out(cart: Cart) -> Dict[str, Any]:
    lines = cart.lines()
    return {
        "lines": [
            {
                "food_id": ln.food.id,
                "name": ln.food.name,
                "variation": ln.variation,
                "qty": ln.qty,
                "unit_price": str(ln.unit_price),
                "line_total": str(ln.line_total),
            }
            for ln in lines
        ],
        "count": sum(ln.qty for ln in lines),
        "total": str(cart.total()),
        # food_ids die niet meer in de catalogus staan; checkout weigert zolang dit niet leeg is
        "unavailable": cart.missing(),
    }


def chat_out(m: ChatMessage) -> Dict[str, Any]:
    return {"sender": m.sender, "text": m.text, "time": m.time.isoformat(),
            "line": formatting.format_chat_line(m)}


def order_out(o: Order, p: Platform) -> Dict[str, Any]:
    return {
        "id": o.id,
        "short_id": p.orders.short_id(o.id),
        "line": formatting.format_order_line(o, p.orders),
        "summary": formatting.summarize(o.items)[0],
        "customer": o.customer,
        "status": o.status.value,
        "created": o.created.isoformat(),
        "items": [
            {
                "food_id": it.food_id,
                "name": it.name,
                "variation": it.variation,
                "qty": it.qty,
                "unit_price": str(it.unit_price + it.variation_delta),
                "line_total": str(it.line_total),
            }
            for it in o.items
        ],
        "total": str(o.total),
        "address": o.address,
        "phone": o.phone,
        "note": o.note,
        "payment_method": o.payment_method.value,
        "assigned_shipper": o.assigned_shipper,
        "complaint": o.complaint,
        "rated": o.rated_at is not None,
        **p.engine.cancellable_for(o),
    }


def complaint_out(c: Complaint, p: Platform) -> Dict[str, Any]:
    return {
        "id": c.id,
        "author": c.author,
        "author_role": c.author_role.value,
        "message": c.message,
        "created": c.created.isoformat(),
        "status": c.status.value,
        "line": formatting.format_complaint(c, p.complaints),
    }
