"""
Indian currency formatting and amount-to-words conversion.
Used only at display time; computation never goes through these helpers.
"""
from decimal import Decimal, ROUND_HALF_UP, ROUND_DOWN
from typing import Union

Number = Union[Decimal, int, float, str]

RUPEE_SYMBOL = "₹"

_ONES = [
    "", "One", "Two", "Three", "Four", "Five", "Six", "Seven", "Eight", "Nine",
    "Ten", "Eleven", "Twelve", "Thirteen", "Fourteen", "Fifteen", "Sixteen",
    "Seventeen", "Eighteen", "Nineteen",
]
_TENS = [
    "", "", "Twenty", "Thirty", "Forty", "Fifty", "Sixty", "Seventy", "Eighty", "Ninety",
]

# Largest magnitude first
_MAGNITUDES = [
    (10_000_000, "Crore"),
    (100_000, "Lakh"),
    (1_000, "Thousand"),
    (100, "Hundred"),
]


def _to_decimal(value: Number) -> Decimal:
    if isinstance(value, Decimal):
        return value
    # str() keeps floats like 0.1 from dragging binary noise along
    return Decimal(str(value))


def group_indian(digits: str) -> str:
    """
    Group a string of digits using the Indian 3-then-2 scheme.

    Example:
        "1234567" -> "12,34,567"
    """
    if len(digits) <= 3:
        return digits

    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)

    return ",".join(groups + [tail])


def format_indian(amount: Number, decimals: bool = False) -> str:
    """
    Format a number with Indian digit grouping.

    Args:
        amount: Value to format
        decimals: If True, always show two decimals (half-up rounding);
                  otherwise the fractional part is dropped

    Returns:
        Grouped string, e.g. "12,34,567" or "3,59,531.50"
    """
    value = _to_decimal(amount)

    if decimals:
        value = value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    else:
        value = value.quantize(Decimal("1"), rounding=ROUND_DOWN)

    sign = "-" if value < 0 else ""
    text = f"{abs(value):.2f}" if decimals else f"{abs(value):.0f}"

    integer_part, _, fraction = text.partition(".")
    grouped = group_indian(integer_part)

    if decimals:
        return f"{sign}{grouped}.{fraction}"
    return f"{sign}{grouped}"


def format_rupees(amount: Number, decimals: bool = False) -> str:
    """Format with the rupee symbol prefix, e.g. "₹3,59,531"."""
    return f"{RUPEE_SYMBOL}{format_indian(amount, decimals)}"


def _words(n: int) -> str:
    if n < 20:
        return _ONES[n]
    if n < 100:
        tens, rest = divmod(n, 10)
        return _TENS[tens] + (f" {_ONES[rest]}" if rest else "")

    for size, name in _MAGNITUDES:
        if n >= size:
            head, rest = divmod(n, size)
            text = f"{_words(head)} {name}"
            if rest:
                text += f" {_words(rest)}"
            return text

    return ""


def to_words(amount: Number) -> str:
    """
    Convert an amount to words using the lakh/crore vocabulary.

    The integer part is spelled out; a non-zero paise remainder is
    appended as "and N/100". Negative amounts are prefixed with "Minus".

    Examples:
        to_words(0)       -> "Zero"
        to_words(1000)    -> "One Thousand"
        to_words(100000)  -> "One Lakh"
        to_words(1250.5)  -> "One Thousand Two Hundred Fifty and 50/100"
        to_words(-500)    -> "Minus Five Hundred"
    """
    value = _to_decimal(amount).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    negative = value < 0
    value = abs(value)
    rupees = int(value)
    paise = int((value - rupees) * 100)

    text = _words(rupees) if rupees else "Zero"
    if paise:
        text += f" and {paise}/100"
    if negative:
        text = f"Minus {text}"
    return text


def amount_in_words(amount: Number) -> str:
    """Full phrase used on the invoice, e.g. "Rupees One Thousand Only"."""
    return f"Rupees {to_words(amount)} Only"


def format_weight(grams: Number, places: int = 1) -> str:
    """Fixed-place weight string for tables, e.g. "10.5"."""
    quantum = Decimal(1).scaleb(-places)
    return str(_to_decimal(grams).quantize(quantum, rounding=ROUND_HALF_UP))
