"""
Counter text normalization.

The widget prints counters as plain integers ("980"), comma grouped integers
("1,234") or shorthand with a k/m suffix ("2.5K"). `normalize` turns any of them
into an int and never raises; anything it does not recognise becomes 0.
"""
import re
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP, localcontext

_PLAIN_INTEGER = re.compile(r"\d+", re.ASCII)
_SUFFIXED = re.compile(r"(\d+(?:\.\d+)?)([kKmM])", re.ASCII)
_GROUPED_INTEGER = re.compile(r"\d[\d,]*", re.ASCII)

_MULTIPLIERS = {"k": 1_000, "m": 1_000_000}
# Extra precision for the digits a suffix multiplier adds.
_SUFFIX_DIGITS = 8
# Longer counter text is treated as unrecognised; the result must stay printable
# under the interpreter's int string conversion limit (4300 digits by default).
MAX_COUNTER_DIGITS = 4000


def normalize(text: str) -> int:
    """
    Converts counter text into a non-negative integer.

    >>> normalize("1,234")
    1234
    >>> normalize("2.5k")
    2500
    >>> normalize("abc")
    0

    Text longer than MAX_COUNTER_DIGITS also gives 0.
    """
    cleaned = (text or "").strip().replace(",", "")
    if not cleaned or len(cleaned) > MAX_COUNTER_DIGITS:
        return 0

    try:
        match = _SUFFIXED.fullmatch(cleaned)
        if match:
            digits = match.group(1)
            # Default Decimal precision (28 digits) would make quantize() fail on long values.
            with localcontext() as ctx:
                ctx.prec = len(digits) + _SUFFIX_DIGITS
                value = Decimal(digits) * _MULTIPLIERS[match.group(2).lower()]
                return int(value.quantize(Decimal(1), rounding=ROUND_HALF_UP))

        if _PLAIN_INTEGER.fullmatch(cleaned):
            return int(cleaned)
    except (InvalidOperation, ValueError):
        return 0
    return 0


def is_stat_text(text: str) -> bool:
    """True for text shaped like a counter: a grouped integer or a k/m shorthand."""
    candidate = (text or "").strip()
    return bool(_GROUPED_INTEGER.fullmatch(candidate) or _SUFFIXED.fullmatch(candidate))
