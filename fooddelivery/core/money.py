from __future__ import annotations
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Union

CENT = Decimal("0.01")
ZERO = Decimal("0.00")

Number = Union[Decimal, int, float, str]


def to_money(value: Number) -> Decimal:
    """Zet een prijs om naar een exact Decimal-bedrag met twee decimalen.

    Floats gaan eerst via `str` zodat 6.99 ook echt 6.99 wordt.
    """
    if isinstance(value, bool):
        raise ValueError("price must be a number")
    if isinstance(value, float):
        value = repr(value)
    try:
        amount = Decimal(str(value).replace(",", "").strip())
    except InvalidOperation:
        raise ValueError(f"invalid price: {value!r}") from None
    if not amount.is_finite():
        raise ValueError(f"invalid price: {value!r}")
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def format_price(amount: Decimal) -> str:
    return f"{amount:,.2f}"
