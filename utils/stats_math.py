"""Statistical utility functions: count coercion, rounded means, match dates."""

import re
from datetime import date, datetime
from decimal import Decimal, ROUND_HALF_UP

import numpy as np

from utils.constants import DATE_FORMAT

_LEADING_INT = re.compile(r"^\s*([+-]?[0-9]+)")


def parse_count_or_zero(value) -> int:
    """
    Permissive count parser: never raises.
    Reads the leading integer of a string ("12abc" -> 12, "7.9" -> 7),
    truncates floats, and maps anything unreadable (None, "", "abc", NaN) to 0.
    Negative results clamp to 0.
    """
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, (int, np.integer)):
        count = int(value)
    elif isinstance(value, (float, np.floating)):
        if not np.isfinite(value):
            return 0
        count = int(value)
    else:
        match = _LEADING_INT.match(str(value))
        if not match:
            return 0
        count = int(match.group(1))
    return max(count, 0)


def rounded_mean(values: list[int], digits: int = 1) -> float:
    """Arithmetic mean of integer counts, rounded to `digits` decimals. 0.0 if empty."""
    if len(values) == 0:
        return 0.0
    total = int(np.sum(np.asarray(values, dtype=np.int64)))
    mean = Decimal(total) / Decimal(len(values))
    quantum = Decimal(1).scaleb(-digits)
    return float(mean.quantize(quantum, rounding=ROUND_HALF_UP))


def parse_match_date(value) -> str:
    """Normalize a match date to YYYY-MM-DD. Raises ValueError if unreadable."""
    if isinstance(value, datetime):
        return value.date().strftime(DATE_FORMAT)
    if isinstance(value, date):
        return value.strftime(DATE_FORMAT)
    if value is None:
        raise ValueError("date is required")
    text = str(value).strip()
    if not text:
        raise ValueError("date is required")
    return datetime.strptime(text, DATE_FORMAT).strftime(DATE_FORMAT)
