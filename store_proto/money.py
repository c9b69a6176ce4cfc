"""Currency helpers shared by the engine and the client.

Amounts are ``Decimal`` values quantized to cents. On the wire they travel
as integer cents so no float ever crosses the process boundary.
"""
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


def to_money(value) -> Decimal:
    """Coerce a Decimal/int/float/str amount to a cent-quantized Decimal."""
    if isinstance(value, bool):
        raise ValueError(f"not a currency amount: {value!r}")
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except InvalidOperation:
        raise ValueError(f"not a currency amount: {value!r}") from None
    if not amount.is_finite():
        raise ValueError(f"not a currency amount: {value!r}")
    try:
        return amount.quantize(CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise ValueError(f"not a currency amount: {value!r}") from None


def to_cents(amount) -> int:
    return int(to_money(amount) * 100)


def from_cents(cents: int) -> Decimal:
    return (Decimal(int(cents)) / 100).quantize(CENT)


def fmt(amount) -> str:
    """Render an amount the way receipts show it: two decimals, no symbol."""
    return f"{to_money(amount):.2f}"
