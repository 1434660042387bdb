from __future__ import annotations
from typing import Optional
from fastapi import APIRouter, Depends
from pydantic import BaseModel

from fooddelivery.core.users import User
from fooddelivery.workflows.platform import Platform
from .state import current_user, get_platform

router = APIRouter(prefix="/me", tags=["account"])


class ProfileIn(BaseModel):
    address: Optional[str] = None
    phone: Optional[str] = None


def _profile(u: User) -> dict:
    return {
        "username": u.username,
        "role": u.role.value,
        "address": u.address,
        "phone": u.phone,
        "display_name": u.display_name,
    }


@router.get("")
def me(user: User = Depends(current_user)):
    return _profile(user)


@router.patch("")
def update_me(payload: ProfileIn, user: User = Depends(current_user), p: Platform = Depends(get_platform)):
    # Nieuwe gegevens gelden alleen voor toekomstige orders (snapshot bij checkout)
    return _profile(p.users.update_profile(user.username, payload.address, payload.phone))
