"""Decimal helpers for monetary amounts."""
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Union

from app.services.pricing.errors import ValidationError

CENT = Decimal("0.01")
ZERO = Decimal("0.00")

# Largest figure an order record can hold (DECIMAL(10, 2) columns)
MAX_AMOUNT = Decimal("99999999.99")

Amount = Union[Decimal, int, float, str]


def to_decimal(value: Amount, field: str = "amount") -> Decimal:
    """Convert a number to Decimal, going through str() so 33.33 stays 33.33."""
    if isinstance(value, bool):
        raise ValidationError(field, "must be a number")
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value))
        except (InvalidOperation, ValueError):
            raise ValidationError(field, f"'{value}' is not a number")
    if not result.is_finite():
        raise ValidationError(field, "must be a finite number")
    return result


def round2(value: Amount, field: str = "amount") -> Decimal:
    """Round half-up to whole cents, rejecting figures above MAX_AMOUNT."""
    amount = to_decimal(value, field)
    try:
        rounded = amount.quantize(CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise ValidationError(field, f"amount too large (limit {MAX_AMOUNT})")
    if abs(rounded) > MAX_AMOUNT:
        raise ValidationError(field, f"amount too large (limit {MAX_AMOUNT})")
    return rounded


def require_non_negative(value: Amount, field: str) -> Decimal:
    """Return value as Decimal, raising ValidationError if it is negative."""
    amount = to_decimal(value, field)
    if amount < 0:
        raise ValidationError(field, f"must not be negative (got {amount})")
    return amount
