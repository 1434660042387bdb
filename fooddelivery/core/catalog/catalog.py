from __future__ import annotations
from decimal import Decimal
from threading import RLock
from typing import Dict, Iterable, List, Optional, Tuple
import logging
import re
import unicodedata

from ..errors import ItemUnavailable, NotFound, Unauthorized
from ..money import Number, to_money
from ..users import Actor, Role, UserStore
from .models import FoodItem

log = logging.getLogger("fooddelivery.catalog")

ALL_CATEGORIES = "All"


def _norm(s: str) -> str:
    s = unicodedata.normalize("NFKD", s).encode("ascii", "ignore").decode("ascii")
    s = re.sub(r"[^a-z0-9]+", " ", s.lower()).strip()
    return s


def _variations(raw: Optional[Dict[str, Number]]) -> Dict[str, Decimal]:
    out: Dict[str, Decimal] = {}
    for name, delta in (raw or {}).items():
        name = (name or "").strip()
        if not name:
            raise ValueError("variation name must not be empty")
        out[name] = to_money(delta)
    return out


class FoodCatalog:
    """Gerechten op id. Heeft een eigen lock zodat lijsten nooit op een order wachten."""

    def __init__(self, users: UserStore):
        self.users = users
        self.by_id: Dict[str, FoodItem] = {}
        self._lock = RLock()

    # ---------- mutaties ----------

    def add_item(
        self,
        name: str,
        price: Number,
        category: str,
        description: str = "",
        restaurant_owner: Optional[str] = None,
        variations: Optional[Dict[str, Number]] = None,
        in_stock: bool = True,
        image_path: Optional[str] = None,
        item_id: Optional[str] = None,
    ) -> FoodItem:
        name = (name or "").strip()
        if not name:
            raise ValueError("food name must not be empty")
        amount = to_money(price)
        if amount < 0:
            raise ValueError(f"{name}: price must not be negative")
        item = FoodItem(
            name=name,
            price=amount,
            category=(category or "").strip() or "Other",
            description=description or "",
            restaurant_owner=restaurant_owner,
            in_stock=in_stock,
            variations=_variations(variations),
            image_path=image_path,
        )
        if item_id:
            item.id = item_id
        return self.put(item)

    def put(self, item: FoodItem) -> FoodItem:
        with self._lock:
            if item.id in self.by_id:
                raise ValueError(f"duplicate food id: {item.id}")
            self.by_id[item.id] = item
        log.info("Added food %s (%s) for %s", item.name, item.id, item.restaurant_owner or "-")
        return item

    def remove_item(self, item_id: str) -> FoodItem:
        # Orders bewaren hun eigen snapshot; verwijderen raakt ze niet
        with self._lock:
            item = self.by_id.pop(item_id, None)
        if item is None:
            raise NotFound("food", item_id)
        log.info("Removed food %s (%s)", item.name, item_id)
        return item

    def update_item(
        self,
        item_id: str,
        name: Optional[str] = None,
        price: Optional[Number] = None,
        description: Optional[str] = None,
        category: Optional[str] = None,
        variations: Optional[Dict[str, Number]] = None,
    ) -> FoodItem:
        with self._lock:
            item = self.require(item_id)
            if name is not None:
                if not name.strip():
                    raise ValueError("food name must not be empty")
                item.name = name.strip()
            if price is not None:
                amount = to_money(price)
                if amount < 0:
                    raise ValueError(f"{item.name}: price must not be negative")
                item.price = amount
            if description is not None:
                item.description = description
            if category is not None:
                item.category = category.strip() or item.category
            if variations is not None:
                item.variations = _variations(variations)
        log.info("Updated food %s (%s)", item.name, item_id)
        return item

    def set_stock(self, item_id: str, in_stock: bool) -> FoodItem:
        with self._lock:
            item = self.require(item_id)
            item.in_stock = in_stock
        log.info("Set %s %s", item.name, "in stock" if in_stock else "out of stock")
        return item

    def set_restaurant_open(self, owner_id: str, is_open: bool) -> None:
        self.users.set_restaurant_open(owner_id, is_open)

    def add_rating(self, item_id: str, rating: float, comment: Optional[str] = None) -> Optional[FoodItem]:
        """Voegt een beoordeling toe en herberekent het gemiddelde.

        Geeft None als het gerecht intussen uit de catalogus is verwijderd.
        """
        with self._lock:
            item = self.by_id.get(item_id)
            if item is None:
                return None
            item.reviews.append((rating, comment or ""))
            item.update_rating()
            return item

    # ---------- queries ----------

    def get(self, item_id: str) -> Optional[FoodItem]:
        with self._lock:
            return self.by_id.get(item_id)

    def require(self, item_id: str) -> FoodItem:
        item = self.get(item_id)
        if item is None:
            raise NotFound("food", item_id)
        return item

    def all(self) -> List[FoodItem]:
        with self._lock:
            return list(self.by_id.values())

    def list_by_category(self, category: str, restaurant_owner: Optional[str] = None) -> List[FoodItem]:
        items = self.all() if restaurant_owner is None else self.list_by_restaurant(restaurant_owner)
        if not category or category == ALL_CATEGORIES:
            return items
        return [it for it in items if it.category == category]

    def list_by_restaurant(self, owner_id: str) -> List[FoodItem]:
        return [it for it in self.all() if it.restaurant_owner == owner_id]

    def categories(self, restaurant_owner: Optional[str] = None) -> List[str]:
        items = self.all() if restaurant_owner is None else self.list_by_restaurant(restaurant_owner)
        cats = [ALL_CATEGORIES]
        for it in items:
            if it.category and it.category not in cats:
                cats.append(it.category)
        return cats

    def restaurants(self) -> List[Tuple[str, str, bool]]:
        """(owner, weergavenaam, open) voor elk restaurant met gerechten."""
        owners: List[str] = []
        for it in self.all():
            if it.restaurant_owner and it.restaurant_owner not in owners:
                owners.append(it.restaurant_owner)
        out = []
        for owner in owners:
            user = self.users.get(owner)
            name = user.display_name if user else owner
            out.append((owner, name, self.users.is_restaurant_open(owner)))
        return out

    def find_by_name(self, text: str) -> Optional[FoodItem]:
        key = _norm(text)
        for it in self.all():
            if _norm(it.name) == key:
                return it
        return None

    def reviews(self, item_id: str) -> List[Tuple[float, str]]:
        item = self.require(item_id)
        with self._lock:
            return list(item.reviews)

    def ensure_available(self, item: FoodItem) -> None:
        if not self.users.is_restaurant_open(item.restaurant_owner):
            raise ItemUnavailable("this restaurant is currently closed")
        if not item.in_stock:
            raise ItemUnavailable("this item is out of stock")

    def can_edit(self, actor: Actor, item: FoodItem) -> bool:
        if actor.role == Role.ADMIN:
            return True
        return actor.role == Role.RESTAURANT and item.restaurant_owner == actor.user_id

    def require_editor(self, actor: Actor, item: FoodItem) -> None:
        if not self.can_edit(actor, item):
            raise Unauthorized("only the owning restaurant or an admin can edit this item")

    def load(self, items: Iterable[FoodItem]) -> None:
        with self._lock:
            self.by_id = {it.id: it for it in items}
