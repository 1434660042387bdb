from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from threading import RLock
from typing import Dict, List, Optional
import logging

from .errors import NotFound, Unauthorized

log = logging.getLogger("fooddelivery.users")


class Role(str, Enum):
    CUSTOMER = "CUSTOMER"
    SHIPPER = "SHIPPER"
    RESTAURANT = "RESTAURANT"
    ADMIN = "ADMIN"
    OWNER = "OWNER"
    ADMINISTRATOR = "ADMINISTRATOR"
    CUSTOMER_SERVICE = "CUSTOMER_SERVICE"


@dataclass(frozen=True)
class Actor:
    """Wie een actie uitvoert: identiteit + rol, door de UI aangeleverd."""
    user_id: str
    role: Role


@dataclass
class User:
    username: str
    role: Role
    password: str = ""
    address: str = ""
    phone: str = ""
    restaurant_name: Optional[str] = None  # alleen RESTAURANT
    shipper_name: Optional[str] = None     # alleen SHIPPER
    is_open: bool = True                   # alleen RESTAURANT
    shipper_ratings: List[float] = field(default_factory=list)
    shipper_comments: List[str] = field(default_factory=list)

    @property
    def actor(self) -> Actor:
        return Actor(self.username, self.role)

    @property
    def display_name(self) -> str:
        return self.shipper_name or self.restaurant_name or self.username


class UserStore:
    """Gebruikers op username; eigen lock, los van catalogus en orders."""

    def __init__(self):
        self._users: Dict[str, User] = {}
        self._lock = RLock()

    def add(self, user: User) -> User:
        with self._lock:
            if user.username in self._users:
                raise ValueError(f"duplicate username: {user.username}")
            self._users[user.username] = user
        log.info("User %s registered as %s", user.username, user.role.value)
        return user

    def load(self, users: List[User]) -> None:
        with self._lock:
            self._users = {u.username: u for u in users}

    def get(self, username: str) -> Optional[User]:
        with self._lock:
            return self._users.get(username)

    def require(self, username: str) -> User:
        user = self.get(username)
        if user is None:
            raise NotFound("user", username)
        return user

    def all(self) -> List[User]:
        with self._lock:
            return list(self._users.values())

    def by_role(self, role: Role) -> List[User]:
        return [u for u in self.all() if u.role == role]

    def update_profile(self, username: str, address: Optional[str] = None,
                       phone: Optional[str] = None) -> User:
        with self._lock:
            user = self.require(username)
            if address is not None:
                user.address = address.strip()
            if phone is not None:
                user.phone = phone.strip()
            return user

    def delete_customer(self, actor: Actor, username: str) -> None:
        if actor.role != Role.ADMINISTRATOR:
            raise Unauthorized("only administrators can delete accounts")
        with self._lock:
            user = self.require(username)
            if user.role != Role.CUSTOMER:
                raise Unauthorized("can only delete customers")
            del self._users[username]
        log.info("Administrator %s deleted customer: %s", actor.user_id, username)

    def is_restaurant_open(self, owner_id: Optional[str]) -> bool:
        # Geen bekend restaurantaccount -> behandelen als open
        user = self.get(owner_id) if owner_id else None
        if user is None or user.role != Role.RESTAURANT:
            return True
        return user.is_open

    def set_restaurant_open(self, owner_id: str, is_open: bool) -> User:
        with self._lock:
            user = self.require(owner_id)
            if user.role != Role.RESTAURANT:
                raise Unauthorized(f"{owner_id} is not a restaurant")
            user.is_open = is_open
        log.info("Restaurant %s %s their restaurant", owner_id, "opened" if is_open else "closed")
        return user

    def add_shipper_rating(self, username: str, rating: float, comment: Optional[str]) -> None:
        with self._lock:
            user = self.get(username)
            if user is None:
                # Verwijderde shipper: beoordeling blijft alleen op de order staan
                log.warning("Shipper %s no longer exists, rating kept on order only", username)
                return
            user.shipper_ratings.append(rating)
            if comment:
                user.shipper_comments.append(comment)

    def shipper_average(self, username: str) -> float:
        user = self.require(username)
        with self._lock:
            ratings = list(user.shipper_ratings)
        return sum(ratings) / len(ratings) if ratings else 0.0
