from __future__ import annotations
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List

from .catalog.catalog import FoodCatalog
from .catalog.models import FoodItem
from .complaints import Complaint, ComplaintLedger, ComplaintStatus
from .orders.models import ChatMessage, Order, OrderItem, OrderStatus, PaymentMethod
from .orders.store import OrderStore
from .users import Role, User, UserStore

VERSION = 1

# Serialiseerbare momentopname van alle data. Het formaat op schijf is de zaak
# van de aanroeper; hier alleen dict <-> objecten.


def _ts(dt: datetime) -> str:
    return dt.isoformat()


def _dt(s: str) -> datetime:
    return datetime.fromisoformat(s)


def _opt_dt(s: Any):
    return _dt(s) if s else None


# ---------- dump ----------

def _user_to_dict(u: User) -> Dict[str, Any]:
    return {
        "username": u.username,
        "role": u.role.value,
        "password": u.password,
        "address": u.address,
        "phone": u.phone,
        "restaurant_name": u.restaurant_name,
        "shipper_name": u.shipper_name,
        "is_open": u.is_open,
        "shipper_ratings": list(u.shipper_ratings),
        "shipper_comments": list(u.shipper_comments),
    }


def _food_to_dict(f: FoodItem) -> Dict[str, Any]:
    return {
        "id": f.id,
        "name": f.name,
        "description": f.description,
        "price": str(f.price),
        "category": f.category,
        "restaurant_owner": f.restaurant_owner,
        "in_stock": f.in_stock,
        "variations": {k: str(v) for k, v in f.variations.items()},
        "reviews": [[r, c] for r, c in f.reviews],
        "image_path": f.image_path,
    }


def _order_to_dict(o: Order) -> Dict[str, Any]:
    return {
        "id": o.id,
        "customer": o.customer,
        "created": _ts(o.created),
        "status": o.status.value,
        "items": [
            {
                "food_id": it.food_id,
                "name": it.name,
                "variation": it.variation,
                "qty": it.qty,
                "unit_price": str(it.unit_price),
                "variation_delta": str(it.variation_delta),
                "restaurant_owner": it.restaurant_owner,
            }
            for it in o.items
        ],
        "address": o.address,
        "phone": o.phone,
        "note": o.note,
        "payment_method": o.payment_method.value,
        "assigned_shipper": o.assigned_shipper,
        "chat": [{"sender": m.sender, "text": m.text, "time": _ts(m.time)} for m in o.chat],
        "complaint": o.complaint,
        "food_ratings": dict(o.food_ratings),
        "food_comments": dict(o.food_comments),
        "shipper_rating": o.shipper_rating,
        "shipper_comment": o.shipper_comment,
        "rated_at": _ts(o.rated_at) if o.rated_at else None,
    }


def _complaint_to_dict(c: Complaint) -> Dict[str, Any]:
    return {
        "id": c.id,
        "author": c.author,
        "author_role": c.author_role.value,
        "message": c.message,
        "created": _ts(c.created),
        "status": c.status.value,
    }


def dump(users: UserStore, catalog: FoodCatalog, orders: OrderStore,
         complaints: ComplaintLedger) -> Dict[str, Any]:
    # elke order onder zijn eigen lock, anders kan een lopende transitie half in de dump komen
    order_docs = []
    for o in orders.all():
        with orders.locked(o.id) as order:
            order_docs.append(_order_to_dict(order))
    return {
        "version": VERSION,
        "users": [_user_to_dict(u) for u in users.all()],
        "foods": [_food_to_dict(f) for f in catalog.all()],
        "orders": order_docs,
        "complaints": [_complaint_to_dict(c) for c in complaints.all()],
    }


# ---------- restore ----------

def _user(d: Dict[str, Any]) -> User:
    return User(
        username=d["username"],
        role=Role(d["role"]),
        password=d.get("password", ""),
        address=d.get("address", ""),
        phone=d.get("phone", ""),
        restaurant_name=d.get("restaurant_name"),
        shipper_name=d.get("shipper_name"),
        is_open=d.get("is_open", True),
        shipper_ratings=[float(r) for r in d.get("shipper_ratings", [])],
        shipper_comments=list(d.get("shipper_comments", [])),
    )


def _food(d: Dict[str, Any]) -> FoodItem:
    f = FoodItem(
        name=d["name"],
        price=Decimal(d["price"]),
        category=d["category"],
        description=d.get("description", ""),
        restaurant_owner=d.get("restaurant_owner"),
        in_stock=d.get("in_stock", True),
        variations={k: Decimal(v) for k, v in (d.get("variations") or {}).items()},
        reviews=[(float(r), c or "") for r, c in d.get("reviews", [])],
        image_path=d.get("image_path"),
        id=d["id"],
    )
    f.update_rating()
    return f


def _order(d: Dict[str, Any]) -> Order:
    o = Order(
        customer=d["customer"],
        created=_dt(d["created"]),
        items=[
            OrderItem(
                food_id=it["food_id"],
                name=it["name"],
                variation=it.get("variation", ""),
                qty=int(it["qty"]),
                unit_price=Decimal(it["unit_price"]),
                variation_delta=Decimal(it.get("variation_delta", "0")),
                restaurant_owner=it.get("restaurant_owner"),
            )
            for it in d.get("items", [])
        ],
        status=OrderStatus(d["status"]),
        address=d.get("address", ""),
        phone=d.get("phone", ""),
        note=d.get("note"),
        payment_method=PaymentMethod(d.get("payment_method", PaymentMethod.CASH_ON_DELIVERY.value)),
        assigned_shipper=d.get("assigned_shipper"),
        chat=[ChatMessage(m["sender"], m["text"], _dt(m["time"])) for m in d.get("chat", [])],
        complaint=d.get("complaint"),
        food_ratings={k: float(v) for k, v in (d.get("food_ratings") or {}).items()},
        food_comments=dict(d.get("food_comments") or {}),
        shipper_rating=d.get("shipper_rating"),
        shipper_comment=d.get("shipper_comment"),
        rated_at=_opt_dt(d.get("rated_at")),
        id=d["id"],
    )
    o.recalc_total()
    return o


def _complaint(d: Dict[str, Any]) -> Complaint:
    return Complaint(
        author=d["author"],
        author_role=Role(d["author_role"]),
        message=d["message"],
        created=_dt(d["created"]),
        status=ComplaintStatus(d.get("status", ComplaintStatus.PENDING.value)),
        id=d["id"],
    )


def restore(data: Dict[str, Any], users: UserStore, catalog: FoodCatalog,
            orders: OrderStore, complaints: ComplaintLedger) -> None:
    version = data.get("version")
    if version != VERSION:
        raise ValueError(f"unsupported snapshot version: {version!r}")
    # Eerst alles parsen; bij een fout blijven de stores ongemoeid
    loaded_users: List[User] = [_user(u) for u in data.get("users", [])]
    loaded_foods: List[FoodItem] = [_food(f) for f in data.get("foods", [])]
    loaded_orders: List[Order] = [_order(o) for o in data.get("orders", [])]
    loaded_complaints: List[Complaint] = [_complaint(c) for c in data.get("complaints", [])]
    users.load(loaded_users)
    catalog.load(loaded_foods)
    orders.load(loaded_orders)
    complaints.load(loaded_complaints)
