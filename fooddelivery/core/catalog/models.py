from __future__ import annotations
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Tuple
import uuid

from ..money import ZERO


def new_id() -> str:
    return str(uuid.uuid4())


def short_prefix(full_id: str, others: Iterable[str], min_len: int) -> str:
    """Kortste prefix van minstens `min_len` tekens die geen van `others` deelt."""
    others = [o for o in others if o != full_id]
    n = min_len
    while n < len(full_id) and any(o.startswith(full_id[:n]) for o in others):
        n += 1
    return full_id[:n]


@dataclass
class FoodItem:
    name: str
    price: Decimal
    category: str
    description: str = ""
    restaurant_owner: Optional[str] = None  # username van het restaurant
    in_stock: bool = True
    # variatienaam -> meerprijs (mag negatief zijn), volgorde = weergavevolgorde
    variations: Dict[str, Decimal] = field(default_factory=dict)
    # (score, commentaar) per beoordeling; leeg commentaar is ""
    reviews: List[Tuple[float, str]] = field(default_factory=list)
    rating: float = 0.0
    image_path: Optional[str] = None
    id: str = field(default_factory=new_id)

    def variation_delta(self, variation: str) -> Decimal:
        if not variation:
            return ZERO
        return self.variations.get(variation, ZERO)

    def unit_price(self, variation: str = "") -> Decimal:
        return self.price + self.variation_delta(variation)

    def has_variation(self, variation: str) -> bool:
        return not variation or variation in self.variations

    @property
    def ratings(self) -> List[float]:
        return [r for r, _ in self.reviews]

    @property
    def comments(self) -> List[str]:
        return [c for _, c in self.reviews if c]

    def update_rating(self) -> None:
        ratings = self.ratings
        self.rating = sum(ratings) / len(ratings) if ratings else 0.0
