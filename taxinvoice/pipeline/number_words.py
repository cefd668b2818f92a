"""Convert money amounts to words using the Indian numbering system.

The integer part is read in descending tiers: crore (10,000,000),
lakh (100,000), thousand (1,000) and the remainder below one thousand.
The minor part (paisa) is appended as "and <words> Paisa" when non-zero.

Examples:
    >>> to_words(Decimal("1234.50"))
    'One Thousand Two Hundred Thirty Four Rupees and Fifty Paisa'
    >>> to_words(Decimal("0.40"))
    'Zero Rupees and Forty Paisa'
"""

from typing import Optional

from .money import Number, quantize_money, to_minor_units

ONES = ["", "One", "Two", "Three", "Four", "Five", "Six", "Seven", "Eight", "Nine"]
TEENS = [
    "Ten", "Eleven", "Twelve", "Thirteen", "Fourteen",
    "Fifteen", "Sixteen", "Seventeen", "Eighteen", "Nineteen",
]
TENS = ["", "", "Twenty", "Thirty", "Forty", "Fifty", "Sixty", "Seventy", "Eighty", "Ninety"]

# (unit size, tier name), largest first
TIERS = (
    (10_000_000, "Crore"),
    (100_000, "Lakh"),
    (1_000, "Thousand"),
)


def words_below_thousand(n: int) -> str:
    """Words for 0 <= n < 1000; zero gives an empty string."""
    if not 0 <= n < 1000:
        raise ValueError(f"Expected 0 <= n < 1000, got {n}")
    if n == 0:
        return ""
    if n < 10:
        return ONES[n]
    if n < 20:
        return TEENS[n - 10]
    if n < 100:
        return TENS[n // 10] + (" " + ONES[n % 10] if n % 10 else "")
    rest = words_below_thousand(n % 100)
    return ONES[n // 100] + " Hundred" + (" " + rest if rest else "")


def integer_to_words(n: int) -> str:
    """Words for a non-negative integer; zero gives an empty string.

    A crore count of 1000 or more is itself read with the full converter
    ("One Thousand Crore").
    """
    if n < 0:
        raise ValueError(f"Expected a non-negative integer, got {n}")

    parts = []
    remaining = n
    for unit, name in TIERS:
        if remaining >= unit:
            count = remaining // unit
            count_words = integer_to_words(count) if count >= 1000 else words_below_thousand(count)
            parts.append(f"{count_words} {name}")
            remaining %= unit
    tail = words_below_thousand(remaining)
    if tail:
        parts.append(tail)
    return " ".join(parts)


def to_words(
    amount: Number,
    major_unit: str = "Rupees",
    minor_unit: str = "Paisa",
    zero_word: str = "Zero",
    suffix: Optional[str] = None,
) -> str:
    """Render a non-negative amount in words.

    The amount is rounded half away from zero to two decimals before it is
    split, so 0.999 reads as one major unit, never as a hundred minor units.

    Args:
        amount: Non-negative amount
        major_unit: Name of the major currency unit
        minor_unit: Name of the minor currency unit
        zero_word: Word for zero
        suffix: Optional trailing word, e.g. "Only"

    Returns:
        The amount in words. Exactly zero gives ``zero_word`` (plus suffix); an amount
        below one major unit reads "Zero <major> and <minor words> <minor>".

    Raises:
        ValueError: If amount is negative
    """
    rounded = quantize_money(amount)
    if rounded < 0:
        raise ValueError(f"Cannot convert a negative amount to words: {amount}")

    if rounded == 0:
        result = zero_word
    else:
        major, minor = divmod(to_minor_units(rounded), 100)
        result = (integer_to_words(major) or zero_word) + " " + major_unit
        if minor:
            result += " and " + words_below_thousand(minor) + " " + minor_unit
    if suffix:
        result += " " + suffix
    return result


def amount_in_words(amount: Number, profile=None) -> str:
    """``to_words`` with unit names taken from a profile's currency section."""
    if profile is None:
        from ..config.profile_manager import get_profile
        profile = get_profile()
    currency = profile.currency
    return to_words(
        amount,
        major_unit=currency.get("major_unit", "Rupees"),
        minor_unit=currency.get("minor_unit", "Paisa"),
        zero_word=currency.get("zero_word", "Zero"),
        suffix=currency.get("words_suffix"),
    )
