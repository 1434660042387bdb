from __future__ import annotations
from decimal import Decimal
from typing import Dict, Optional
from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from fooddelivery.core.catalog.catalog import ALL_CATEGORIES
from fooddelivery.core.users import Role, User
from fooddelivery.workflows.platform import Platform
from .serializers import food_out
from .state import current_user, get_platform, require_roles

router = APIRouter(prefix="/catalog", tags=["catalog"])


class FoodIn(BaseModel):
    name: str = Field(min_length=1)
    price: Decimal = Field(ge=0, decimal_places=2)
    category: str
    description: str = ""
    variations: Dict[str, Decimal] = {}
    in_stock: bool = True
    restaurant_owner: Optional[str] = None  # alleen ADMIN mag dit zetten


class FoodUpdate(BaseModel):
    name: Optional[str] = None
    price: Optional[Decimal] = Field(default=None, ge=0, decimal_places=2)
    category: Optional[str] = None
    description: Optional[str] = None
    variations: Optional[Dict[str, Decimal]] = None


class StockIn(BaseModel):
    in_stock: bool


class OpenIn(BaseModel):
    is_open: bool


# -------- publiek --------

@router.get("/foods")
def list_foods(category: str = ALL_CATEGORIES, restaurant: Optional[str] = None,
               p: Platform = Depends(get_platform)):
    return [food_out(f) for f in p.catalog.list_by_category(category, restaurant_owner=restaurant)]


@router.get("/foods/{food_id}")
def get_food(food_id: str, p: Platform = Depends(get_platform)):
    return food_out(p.catalog.require(food_id))


@router.get("/foods/{food_id}/reviews")
def food_reviews(food_id: str, p: Platform = Depends(get_platform)):
    return [{"rating": r, "comment": c} for r, c in p.catalog.reviews(food_id)]


@router.get("/categories")
def categories(restaurant: Optional[str] = None, p: Platform = Depends(get_platform)):
    return p.catalog.categories(restaurant_owner=restaurant)


@router.get("/restaurants")
def restaurants(p: Platform = Depends(get_platform)):
    return [{"owner": o, "name": n, "is_open": is_open} for o, n, is_open in p.catalog.restaurants()]


# -------- restaurant / admin --------

@router.post("/foods", status_code=201)
def add_food(payload: FoodIn, user: User = Depends(current_user), p: Platform = Depends(get_platform)):
    require_roles(user, Role.RESTAURANT, Role.ADMIN)
    owner = user.username if user.role == Role.RESTAURANT else payload.restaurant_owner
    item = p.catalog.add_item(
        name=payload.name,
        price=payload.price,
        category=payload.category,
        description=payload.description,
        restaurant_owner=owner,
        variations=payload.variations,
        in_stock=payload.in_stock,
    )
    return food_out(item)


@router.patch("/foods/{food_id}")
def update_food(food_id: str, payload: FoodUpdate, user: User = Depends(current_user),
                p: Platform = Depends(get_platform)):
    p.catalog.require_editor(user.actor, p.catalog.require(food_id))
    item = p.catalog.update_item(food_id, **payload.model_dump(exclude_none=True))
    return food_out(item)


@router.delete("/foods/{food_id}")
def delete_food(food_id: str, user: User = Depends(current_user), p: Platform = Depends(get_platform)):
    p.catalog.require_editor(user.actor, p.catalog.require(food_id))
    p.catalog.remove_item(food_id)
    p.carts.purge_food(food_id)
    return {"ok": True}


@router.post("/foods/{food_id}/stock")
def set_stock(food_id: str, payload: StockIn, user: User = Depends(current_user),
              p: Platform = Depends(get_platform)):
    p.catalog.require_editor(user.actor, p.catalog.require(food_id))
    return food_out(p.catalog.set_stock(food_id, payload.in_stock))


@router.post("/restaurants/me/open")
def set_open(payload: OpenIn, user: User = Depends(current_user), p: Platform = Depends(get_platform)):
    require_roles(user, Role.RESTAURANT)
    p.catalog.set_restaurant_open(user.username, payload.is_open)
    return {"ok": True, "is_open": payload.is_open}
