from __future__ import annotations
from typing import Dict, Any, List, Set

from ..users import Role

_ROLES = {r.value for r in Role}


def _is_number(v: Any) -> bool:
    if isinstance(v, bool):
        return False
    if isinstance(v, (int, float)):
        return True
    if isinstance(v, str):
        try:
            float(v)
            return True
        except ValueError:
            return False
    return False


def validate(data: Dict[str, Any]) -> List[str]:
    errors: List[str] = []
    cats: Set[str] = set(data.get("categories", []))
    seen_users: Set[str] = set()
    restaurants: Set[str] = set()
    seen_ids: Set[str] = set()

    if not cats:
        errors.append("categories list is empty")

    for idx, u in enumerate(data.get("users", []), start=1):
        name = u.get("username")
        if not name or not isinstance(name, str):
            errors.append(f"user[{idx}] missing username")
            continue
        if name in seen_users:
            errors.append(f"duplicate username: {name}")
        seen_users.add(name)
        role = u.get("role")
        if role not in _ROLES:
            errors.append(f"{name}: unknown role '{role}'")
        elif role == Role.RESTAURANT.value:
            restaurants.add(name)

    for idx, it in enumerate(data.get("foods", []), start=1):
        name = it.get("name")
        label = name or f"food[{idx}]"
        if not name:
            errors.append(f"food[{idx}] missing name")

        fid = it.get("id")
        if fid is not None:
            if fid in seen_ids:
                errors.append(f"duplicate food id: {fid}")
            seen_ids.add(fid)

        cat = it.get("category")
        if cat not in cats:
            errors.append(f"{label}: unknown category '{cat}'")

        price = it.get("price")
        if not _is_number(price):
            errors.append(f"{label}: price must be a number")
        elif float(price) < 0:
            errors.append(f"{label}: price must not be negative")

        owner = it.get("restaurant_owner")
        if owner is not None and owner not in restaurants:
            errors.append(f"{label}: unknown restaurant '{owner}'")

        for vname, delta in (it.get("variations") or {}).items():
            if not _is_number(delta):
                errors.append(f"{label}: variation {vname} price must be a number")

    return errors
