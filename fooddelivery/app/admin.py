from fastapi import APIRouter, Depends, Request
from fooddelivery.core.users import Role, User
from fooddelivery.infra.logs import get_events
from fooddelivery.workflows import formatting
from fooddelivery.workflows.platform import Platform
from .state import current_user, get_platform, require_roles

router = APIRouter(prefix="/admin", tags=["admin"])


def require_administrator(user: User = Depends(current_user)) -> User:
    require_roles(user, Role.ADMINISTRATOR)
    return user


@router.get("/logs", dependencies=[Depends(require_administrator)])
def admin_logs(request: Request):
    level = request.query_params.get("level")
    q = request.query_params.get("q")
    offset = int(request.query_params.get("offset", 0) or 0)
    return get_events(300, level=level, q=q, offset=offset)


@router.get("/users", dependencies=[Depends(require_administrator)])
def admin_users(p: Platform = Depends(get_platform)):
    return [
        {"username": u.username, "role": u.role.value, "name": u.display_name,
         "address": u.address, "phone": u.phone}
        for u in p.users.all()
    ]


@router.delete("/users/{username}")
def admin_delete_customer(username: str, user: User = Depends(require_administrator),
                          p: Platform = Depends(get_platform)):
    p.users.delete_customer(user.actor, username)
    p.carts.drop(username)
    return {"ok": True, "deleted": username}


@router.get("/orders", dependencies=[Depends(require_administrator)])
def admin_orders(p: Platform = Depends(get_platform)):
    orders = sorted(p.orders.all(), key=lambda o: o.created, reverse=True)
    return [
        {"id": o.id, "line": formatting.format_order_line(o, p.orders),
         "details": formatting.format_order_detailed(o, p.users)}
        for o in orders
    ]


@router.get("/shippers/{username}", dependencies=[Depends(require_administrator)])
def admin_shipper(username: str, p: Platform = Depends(get_platform)):
    return p.ratings.shipper_summary(username)
