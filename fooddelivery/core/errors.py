from __future__ import annotations
from typing import Optional


class FulfillmentError(Exception):
    """Herstelbare bedrijfsregel-fout; de UI toont `reason` als melding."""

    kind = "FulfillmentError"
    default_reason = "operation not permitted"

    def __init__(self, reason: Optional[str] = None):
        self.reason = reason or self.default_reason
        super().__init__(self.reason)

    def as_dict(self) -> dict:
        return {"ok": False, "error": self.kind, "message": self.reason}


class InvalidTransition(FulfillmentError):
    kind = "InvalidTransition"
    default_reason = "status change not allowed from the current status"


class Unauthorized(FulfillmentError):
    kind = "Unauthorized"
    default_reason = "you are not allowed to do this"


class NotACustomer(Unauthorized):
    kind = "NotACustomer"
    default_reason = "you must be logged in as a customer to checkout"


class AlreadyClaimed(FulfillmentError):
    kind = "AlreadyClaimed"

    def __init__(self, winner: str):
        self.winner = winner
        super().__init__(f"this order was already accepted by {winner}")


class CancellationWindowClosed(FulfillmentError):
    kind = "CancellationWindowClosed"
    default_reason = "cannot cancel order after 1 minute"


class EmptyCart(FulfillmentError):
    kind = "EmptyCart"
    default_reason = "cart is empty"


class ItemUnavailable(FulfillmentError):
    kind = "ItemUnavailable"
    default_reason = "item is not available"


class OrderNotDeliverable(FulfillmentError):
    kind = "OrderNotDeliverable"
    default_reason = "only delivered orders can be rated"


class AlreadyRated(FulfillmentError):
    kind = "AlreadyRated"
    default_reason = "this order has already been rated"


class InvalidRating(FulfillmentError):
    kind = "InvalidRating"
    default_reason = "rating must be between 0 and 5"


class InvalidQuantity(FulfillmentError):
    kind = "InvalidQuantity"
    default_reason = "quantity must be at least 1"


class ChatNotAvailable(FulfillmentError):
    kind = "ChatNotAvailable"
    default_reason = "chat available only when order is accepted by shipper or delivering"


class EmptyMessage(FulfillmentError):
    kind = "EmptyMessage"
    default_reason = "message text is empty"


class NotFound(FulfillmentError):
    kind = "NotFound"

    def __init__(self, what: str, key: str):
        self.what = what
        self.key = key
        super().__init__(f"unknown {what}: {key}")


class InternalError(Exception):
    """Programmeerfout of inconsistente toestand; operatie wordt afgebroken."""

    kind = "InternalError"
