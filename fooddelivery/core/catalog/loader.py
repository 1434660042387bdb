from __future__ import annotations
import json
from pathlib import Path
from typing import Any, Dict

from ..users import Role, User, UserStore
from .catalog import FoodCatalog
from .validator import validate


def _to_user(d: Dict[str, Any]) -> User:
    return User(
        username=d["username"],
        role=Role(d["role"]),
        password=d.get("password", ""),
        address=d.get("address", ""),
        phone=d.get("phone", ""),
        restaurant_name=d.get("restaurant_name"),
        shipper_name=d.get("shipper_name"),
        is_open=d.get("is_open", True),
    )


def load_seed(data: Dict[str, Any], users: UserStore, catalog: FoodCatalog) -> None:
    """Vult lege stores met een seed-document (gebruikers + gerechten)."""
    errors = validate(data)
    if errors:
        raise ValueError("Seed validation failed:\n" + "\n".join(errors))
    for u in data.get("users", []):
        users.add(_to_user(u))
    for d in data.get("foods", []):
        catalog.add_item(
            name=d["name"],
            price=d["price"],
            category=d["category"],
            description=d.get("description", ""),
            restaurant_owner=d.get("restaurant_owner"),
            variations=d.get("variations"),
            in_stock=d.get("in_stock", True),
            image_path=d.get("image_path"),
            item_id=d.get("id"),
        )


def load_seed_file(path: str | Path, users: UserStore, catalog: FoodCatalog) -> None:
    p = Path(path)
    data = json.loads(p.read_text(encoding="utf-8"))
    load_seed(data, users, catalog)
