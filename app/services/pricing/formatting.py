"""Currency display helpers.

Formatted strings are for receipts and UI only; stored and compared
amounts always stay as rounded Decimals.
"""
from decimal import ROUND_HALF_UP, localcontext

from app.services.pricing.money import CENT, Amount, to_decimal


def _group_western(digits: str) -> str:
    return f"{int(digits):,}"


def _group_indian(digits: str) -> str:
    """Group as 12,34,567: last three digits, then pairs."""
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    pairs = []
    while len(head) > 2:
        pairs.insert(0, head[-2:])
        head = head[:-2]
    if head:
        pairs.insert(0, head)
    return ",".join(pairs + [tail])


def format_currency(amount: Amount, symbol: str = "₹", locale: str = "en-IN") -> str:
    """
    Format an amount with a currency symbol, digit grouping and two decimals.

    Example: 123456.7 -> "₹1,23,456.70" (en-IN), "$123,456.70" (en-US)
    """
    value = to_decimal(amount)
    # Display has no upper limit, so widen precision to fit the value
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, value.adjusted() + 3)
        value = value.quantize(CENT, rounding=ROUND_HALF_UP)
    sign = "-" if value < 0 else ""
    whole, cents = f"{abs(value):.2f}".split(".")

    if locale.replace("_", "-").lower() == "en-in":
        grouped = _group_indian(whole)
    else:
        grouped = _group_western(whole)

    return f"{sign}{symbol}{grouped}.{cents}"
