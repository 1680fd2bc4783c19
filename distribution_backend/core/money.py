# core/money.py

"""
MONEY + QUANTITY NORMALIZERS

Hard rules:
- Money is Decimal, 2 decimal places, ROUND_HALF_UP.
- Quantities are whole integer units.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from core.exceptions import InputValidationError

TWOPLACES = Decimal("0.01")
ZERO = Decimal("0.00")


def money(v) -> Decimal:
    if v is None or v == "":
        return ZERO
    if isinstance(v, bool):
        raise InputValidationError("amount must be a decimal value")
    try:
        return Decimal(str(v)).quantize(TWOPLACES, rounding=ROUND_HALF_UP)
    except (InvalidOperation, ValueError) as exc:
        raise InputValidationError(f"Invalid amount: {v!r}") from exc


def to_int_qty(value) -> int:
    """
    Quantity normalizer.
    HARD RULE: quantities are integer units in this system.
    """
    if value is None or value == "":
        return 0

    if isinstance(value, bool):
        raise InputValidationError("quantity must be a whole integer unit")

    if isinstance(value, int):
        return value

    if isinstance(value, str):
        s = value.strip()
        if s.isdigit():
            return int(s)

    raise InputValidationError("quantity must be a whole integer unit")
