"""Fixed-precision money arithmetic and jurisdiction-aware formatting.

All amounts are Decimals. Arithmetic runs in a private decimal context so
results never depend on the caller's global context; rounding happens only
when a value is quantized for display.

Grouping follows the ``locale`` convention: a sequence of group sizes read
right to left, with the last size repeating. ``(3,)`` gives 1,234,567.89 and
``(3, 2)`` gives the Indian 12,34,567.89.
"""

import re
from decimal import ROUND_HALF_UP, Context, Decimal, InvalidOperation
from typing import Iterable, Optional, Sequence, Tuple, Union

Number = Union[Decimal, int, float, str]

MONEY_CONTEXT = Context(prec=34, rounding=ROUND_HALF_UP)
CENT = Decimal("0.01")
INDIAN_GROUPING: Tuple[int, ...] = (3, 2)
WESTERN_GROUPING: Tuple[int, ...] = (3,)

_CURRENCY_PATTERN = re.compile(r"(?i)\binr\b|\brs\.?|₹")


def to_decimal(value: Number) -> Decimal:
    """Convert a stored numeric value to Decimal without binary float drift.

    Floats go through their shortest repr (0.1 -> Decimal("0.1")). Strings may
    carry a currency marker and comma group separators ("₹ 1,23,456.50").

    Raises:
        ValueError: For None, booleans, non-finite values or unparseable text
    """
    if value is None:
        raise ValueError("Amount is None")
    if isinstance(value, bool):
        raise ValueError(f"Boolean is not an amount: {value!r}")
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, int):
        result = Decimal(value)
    elif isinstance(value, float):
        result = Decimal(repr(value))
    elif isinstance(value, str):
        result = _parse_amount_text(value)
    else:
        raise ValueError(f"Unsupported amount type: {type(value).__name__}")

    if not result.is_finite():
        raise ValueError(f"Amount must be finite, got {value!r}")
    return result


def _parse_amount_text(text: str) -> Decimal:
    raw = text.strip()
    if not raw:
        raise ValueError("Amount text is empty")

    negative = raw.startswith("-")
    if negative:
        raw = raw[1:]

    cleaned = _CURRENCY_PATTERN.sub("", raw)
    cleaned = re.sub(r"\s+", "", cleaned)
    cleaned = cleaned.replace(",", "")

    if not re.fullmatch(r"\d+(\.\d+)?|\.\d+", cleaned):
        raise ValueError(f"Invalid amount format: {text!r}")

    try:
        value = Decimal(cleaned)
    except InvalidOperation as exc:
        raise ValueError(f"Invalid amount format: {text!r}") from exc

    return -value if negative else value


def multiply(a: Number, b: Number) -> Decimal:
    """Exact product of two amounts."""
    return MONEY_CONTEXT.multiply(to_decimal(a), to_decimal(b))


def percentage_of(base: Number, rate_percent: Number) -> Decimal:
    """``base × rate / 100`` computed as a multiplication by a shifted rate."""
    rate = to_decimal(rate_percent).scaleb(-2, MONEY_CONTEXT)
    return MONEY_CONTEXT.multiply(to_decimal(base), rate)


def sum_money(values: Iterable[Number]) -> Decimal:
    """Exact sum of amounts; an empty iterable sums to Decimal("0")."""
    total = Decimal("0")
    for value in values:
        total = MONEY_CONTEXT.add(total, to_decimal(value))
    return total


def quantize_money(value: Number) -> Decimal:
    """Round to two decimals, half away from zero.

    Raises:
        ValueError: If the amount has too many digits to carry two decimals
    """
    amount = to_decimal(value)
    try:
        return amount.quantize(CENT, rounding=ROUND_HALF_UP, context=MONEY_CONTEXT)
    except InvalidOperation as exc:
        raise ValueError(f"Amount out of range: {value!r}") from exc


def to_minor_units(value: Number) -> int:
    """Amount as an integer count of minor units (paisa/cents)."""
    return int(quantize_money(value).scaleb(2, MONEY_CONTEXT))


def within_tolerance(a: Number, b: Number, tolerance: Number = CENT) -> bool:
    """True if two amounts differ by at most ``tolerance``."""
    diff = MONEY_CONTEXT.subtract(to_decimal(a), to_decimal(b))
    return abs(diff) <= to_decimal(tolerance)


def group_digits(digits: str, grouping: Sequence[int] = INDIAN_GROUPING, separator: str = ",") -> str:
    """Insert group separators into a string of integer digits."""
    if not grouping or any(size <= 0 for size in grouping):
        raise ValueError(f"Invalid grouping: {grouping!r}")

    groups = []
    remaining = digits
    sizes = list(grouping)
    while remaining:
        size = sizes.pop(0) if len(sizes) > 1 else sizes[0]
        groups.append(remaining[-size:])
        remaining = remaining[:-size]
    return separator.join(reversed(groups))


def format_money(
    value: Number,
    grouping: Optional[Sequence[int]] = None,
    group_separator: str = ",",
    decimal_separator: str = ".",
) -> str:
    """Format an amount with exactly two fractional digits and grouped thousands.

    Args:
        value: Amount to format
        grouping: Group sizes, right to left, last repeating (default Indian)
        group_separator: Separator between digit groups
        decimal_separator: Separator before the fractional digits

    Returns:
        Formatted string, e.g. "12,34,567.89"
    """
    amount = quantize_money(value)
    sign = "-" if amount < 0 else ""
    integer_part, fraction_part = f"{abs(amount):f}".split(".")
    grouped = group_digits(integer_part, grouping or INDIAN_GROUPING, group_separator)
    return f"{sign}{grouped}{decimal_separator}{fraction_part}"


def format_rate(rate: Number) -> str:
    """Format a percentage rate without trailing zeros ("18", "12.5")."""
    value = to_decimal(rate)
    if value == value.to_integral_value():
        return str(value.quantize(Decimal("1")))
    return f"{value.normalize():f}"
