from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBasic, HTTPBasicCredentials
import secrets

from fooddelivery.core.errors import Unauthorized
from fooddelivery.core.users import Role, User
from fooddelivery.adapters.sql_order_events import SqlOrderEvents
from fooddelivery.workflows.platform import Platform

platform = Platform(events=SqlOrderEvents())
security = HTTPBasic()


def get_platform() -> Platform:
    return platform


def current_user(
    credentials: HTTPBasicCredentials = Depends(security),
    p: Platform = Depends(get_platform),
) -> User:
    # Wachtwoordcontrole hoort bij de aanroeper, niet bij de kern
    user = p.users.get(credentials.username)
    ok = user is not None and secrets.compare_digest(
        credentials.password.encode("utf-8"), user.password.encode("utf-8"))
    if not ok:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Basic"},
        )
    return user


def require_roles(user: User, *roles: Role) -> None:
    if user.role not in roles:
        raise Unauthorized(f"{user.role.value} cannot open this panel")
