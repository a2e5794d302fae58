# bizdocs/domain/services/money.py
"""
Money, GST and amount-in-words helpers.

Everything here is a pure function: no state, no logging side effects.
Bad numeric input never raises (it becomes 0) except where a negative
number is meaningless, i.e. spelling an amount in words.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP

from bizdocs.domain.models.enums import TaxMode

_ONES = [
    "", "one", "two", "three", "four", "five", "six", "seven", "eight", "nine",
]
_TEENS = [
    "ten", "eleven", "twelve", "thirteen", "fourteen",
    "fifteen", "sixteen", "seventeen", "eighteen", "nineteen",
]
_TENS = [
    "", "", "twenty", "thirty", "forty", "fifty", "sixty", "seventy", "eighty", "ninety",
]

CRORE = 10_000_000
LAKH = 100_000
THOUSAND = 1_000


# ---------------------------------------------------------------------------
# Coercion
# ---------------------------------------------------------------------------

def coerce_number(value) -> float:
    """Return ``value`` as a finite float; anything unusable becomes 0.0."""
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, str):
        value = value.strip().replace(",", "")
        if not value:
            return 0.0
    try:
        num = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(num) or math.isinf(num):
        return 0.0
    return num


def coerce_non_negative(value) -> float:
    """Like :func:`coerce_number` but negatives clamp to 0.0 (quantities, rates)."""
    return max(coerce_number(value), 0.0)


def _to_decimal(value) -> Decimal:
    return Decimal(repr(coerce_number(value)))


def round_half_up(value) -> int:
    """Round to the nearest whole unit, halves away from zero."""
    return int(_to_decimal(value).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


# ---------------------------------------------------------------------------
# Display
# ---------------------------------------------------------------------------

def to_money(value) -> str:
    """Format ``value`` with exactly two decimals (``"1180.00"``)."""
    q = _to_decimal(value).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    if q == 0:
        q = abs(q)
    return f"{q:.2f}"


def _indian_grouping(digits: str) -> str:
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


def format_amount(value, *, symbol: str = "Rs.") -> str:
    """Format as Indian currency text: ``Rs. 1,00,300.00``."""
    text = to_money(value)
    sign = ""
    if text.startswith("-"):
        sign, text = "-", text[1:]
    whole, frac = text.split(".")
    amount = f"{sign}{_indian_grouping(whole)}.{frac}"
    return f"{symbol} {amount}" if symbol else amount


def format_quantity(value) -> str:
    """Quantities print without a trailing ``.0`` when whole."""
    num = coerce_number(value)
    if num == int(num):
        return str(int(num))
    return f"{num:g}"


# ---------------------------------------------------------------------------
# GST
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class GstBreakup:
    igst: float = 0.0
    cgst: float = 0.0
    sgst: float = 0.0

    @property
    def total(self) -> float:
        return self.igst + self.cgst + self.sgst


def gst_breakup(base_amount, rate_percent, mode: TaxMode | str = TaxMode.IGST) -> GstBreakup:
    """
    Split the GST on ``base_amount`` at ``rate_percent``.

    IGST mode puts the whole tax in ``igst``. CGST_SGST mode applies half the
    rate to each of ``cgst`` and ``sgst`` from the same expression, so the
    two are always exactly equal.
    """
    base = coerce_number(base_amount)
    rate = coerce_number(rate_percent)

    if TaxMode(mode) is TaxMode.IGST:
        return GstBreakup(igst=base * rate / 100)

    half = base * (rate / 2) / 100
    return GstBreakup(cgst=half, sgst=half)


def line_amount(quantity, rate, tax_rate=0) -> float:
    """Derived line amount: ``qty * rate`` plus the line's own GST share."""
    base = coerce_non_negative(quantity) * coerce_non_negative(rate)
    return base + base * coerce_non_negative(tax_rate) / 100


# ---------------------------------------------------------------------------
# Amount in words (Indian numbering)
# ---------------------------------------------------------------------------

def _chunk(x: int) -> str:
    """Words for 1..999."""
    words = []
    if x >= 100:
        words.append(f"{_ONES[x // 100]} hundred")
        x %= 100
    if x >= 20:
        words.append(_TENS[x // 10])
        if x % 10:
            words.append(_ONES[x % 10])
    elif x >= 10:
        words.append(_TEENS[x - 10])
    elif x > 0:
        words.append(_ONES[x])
    return " ".join(words)


def integer_to_words_indian(value) -> str:
    """
    Spell a whole number using crore / lakh / thousand / hundred grouping.

    >>> integer_to_words_indian(12345)
    'twelve thousand three hundred forty five'
    >>> integer_to_words_indian(1000000)
    'ten lakh'

    Fractions are floored. Non-numeric input counts as 0 (``"zero"``).
    Raises ValueError for negative numbers.
    """
    num = coerce_number(value)
    if num < 0:
        raise ValueError(f"Cannot spell a negative amount: {value!r}")
    n = math.floor(num)
    if n == 0:
        return "zero"

    crore, rest = divmod(n, CRORE)
    lakh, rest = divmod(rest, LAKH)
    thousand, hundred = divmod(rest, THOUSAND)

    parts = []
    if crore:
        # Amounts of 1000 crore and above spell the crore count recursively
        parts.append(f"{integer_to_words_indian(crore)} crore")
    if lakh:
        parts.append(f"{_chunk(lakh)} lakh")
    if thousand:
        parts.append(f"{_chunk(thousand)} thousand")
    if hundred:
        parts.append(_chunk(hundred))
    return " ".join(parts)


def amount_in_words(value) -> str:
    """``1180.4`` -> ``"Rupees one thousand one hundred eighty only"``."""
    return f"Rupees {integer_to_words_indian(round_half_up(value))} only"
