from __future__ import annotations
from dataclasses import dataclass
from decimal import Decimal
from threading import RLock
from typing import Any, Dict, Iterable, List, Tuple
import logging

from .catalog.catalog import FoodCatalog
from .catalog.models import FoodItem
from .errors import InvalidQuantity, NotFound
from .money import ZERO

log = logging.getLogger("fooddelivery.cart")


@dataclass
class CartLine:
    food: FoodItem
    variation: str
    qty: int

    @property
    def unit_price(self) -> Decimal:
        return self.food.unit_price(self.variation)

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.qty


class Cart:
    """Winkelwagen van één sessie: food_id -> {variatie -> aantal}.

    Prijzen worden bij elke aanroep vers uit de catalogus gelezen; pas de
    checkout bevriest ze.
    """

    def __init__(self, catalog: FoodCatalog, owner: str = ""):
        self.catalog = catalog
        self.owner = owner
        self._entries: Dict[str, Dict[str, int]] = {}
        self.lock = RLock()

    def add(self, food_id: str, variation: str = "", qty: int = 1) -> None:
        if qty < 1:
            raise InvalidQuantity()
        variation = variation or ""
        food = self.catalog.require(food_id)
        if not food.has_variation(variation):
            raise NotFound("variation", f"{food.name} ({variation})")
        self.catalog.ensure_available(food)
        with self.lock:
            per_var = self._entries.setdefault(food_id, {})
            per_var[variation] = per_var.get(variation, 0) + qty
        log.info("%s added %s%s to cart", self.owner or "anonymous", food.name,
                 f" ({variation})" if variation else "")

    def remove(self, food_id: str, variation: str = "", qty: int = 1) -> None:
        if qty < 1:
            raise InvalidQuantity()
        variation = variation or ""
        with self.lock:
            per_var = self._entries.get(food_id)
            if not per_var or variation not in per_var:
                raise NotFound("cart entry", f"{food_id} ({variation})" if variation else food_id)
            left = per_var[variation] - qty
            if left > 0:
                per_var[variation] = left
            else:
                del per_var[variation]
                if not per_var:
                    del self._entries[food_id]

    def clear(self) -> None:
        with self.lock:
            self._entries.clear()

    def is_empty(self) -> bool:
        with self.lock:
            return not self._entries

    def entries(self) -> List[Tuple[str, str, int]]:
        with self.lock:
            return [(fid, var, qty) for fid, per_var in self._entries.items() for var, qty in per_var.items()]

    def lines(self) -> List[CartLine]:
        """Regels met een bestaand gerecht; verwijderde gerechten staan in `missing()`."""
        out = []
        for fid, var, qty in self.entries():
            food = self.catalog.get(fid)
            if food is not None:
                out.append(CartLine(food, var, qty))
        return out

    def missing(self) -> List[str]:
        with self.lock:
            ids = list(self._entries)
        return [fid for fid in ids if self.catalog.get(fid) is None]

    def discard_food(self, food_id: str) -> bool:
        with self.lock:
            return self._entries.pop(food_id, None) is not None

    def total(self) -> Decimal:
        return sum((line.line_total for line in self.lines()), ZERO)

    def count(self) -> int:
        return sum(qty for _, _, qty in self.entries())

    def merge(self, selections: Iterable[Tuple[str, str, int]]) -> None:
        """Voegt meerdere regels toe; eerst alles controleren, dan pas toevoegen."""
        selections = list(selections)
        for fid, var, qty in selections:
            if qty < 1:
                raise InvalidQuantity()
            food = self.catalog.require(fid)
            if not food.has_variation(var):
                raise NotFound("variation", f"{food.name} ({var})")
            self.catalog.ensure_available(food)
        with self.lock:
            for fid, var, qty in selections:
                per_var = self._entries.setdefault(fid, {})
                per_var[var] = per_var.get(var, 0) + qty

    def reorder(self, items: Iterable[Any]) -> None:
        """Zet de regels van een eerdere order terug in de wagen (huidige prijzen)."""
        self.merge((it.food_id, it.variation, it.qty) for it in items)


class CartStore:
    def __init__(self, catalog: FoodCatalog):
        self.catalog = catalog
        self._carts: Dict[str, Cart] = {}
        self._lock = RLock()

    def for_session(self, session_id: str) -> Cart:
        with self._lock:
            cart = self._carts.get(session_id)
            if cart is None:
                cart = Cart(self.catalog, owner=session_id)
                self._carts[session_id] = cart
            return cart

    def drop(self, session_id: str) -> None:
        with self._lock:
            self._carts.pop(session_id, None)

    def purge_food(self, food_id: str) -> int:
        """Haalt een uit de catalogus verwijderd gerecht uit alle winkelwagens."""
        with self._lock:
            carts = list(self._carts.values())
        purged = sum(1 for cart in carts if cart.discard_food(food_id))
        if purged:
            log.info("Removed food %s from %d cart(s)", food_id, purged)
        return purged
