from __future__ import annotations
from fastapi import APIRouter, Depends
from pydantic import BaseModel

from fooddelivery.core.complaints import SUPPORT_ROLES
from fooddelivery.core.users import User
from fooddelivery.workflows import formatting
from fooddelivery.workflows.platform import Platform
from .serializers import complaint_out
from .state import current_user, get_platform, require_roles

router = APIRouter(prefix="/complaints", tags=["complaints"])


class ComplaintIn(BaseModel):
    message: str


@router.post("", status_code=201)
def file_complaint(payload: ComplaintIn, user: User = Depends(current_user),
                   p: Platform = Depends(get_platform)):
    return complaint_out(p.complaints.file_complaint(user.actor, payload.message), p)


@router.get("")
def open_complaints(user: User = Depends(current_user), p: Platform = Depends(get_platform)):
    require_roles(user, *SUPPORT_ROLES)
    return {
        "complaints": [complaint_out(c, p) for c in p.complaints.pending()],
        "orders": [
            {"order_id": o.id, "line": formatting.format_order_complaint(o, p.orders)}
            for o in p.orders.with_complaints()
        ],
    }


@router.post("/{complaint_id}/resolve")
def resolve(complaint_id: str, user: User = Depends(current_user), p: Platform = Depends(get_platform)):
    return complaint_out(p.complaints.resolve_complaint(user.actor, complaint_id), p)
