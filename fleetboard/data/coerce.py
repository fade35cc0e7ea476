"""
Cell coercion — turn whatever a spreadsheet cell holds into a number or trimmed text.

Nothing here raises: a bad cell degrades to the field default (0 or "").
"""
from __future__ import annotations

import math
import re

_NON_NUMERIC_RE = re.compile(r"[^0-9.\-]+")


def _is_missing(value: object) -> bool:
    return value is None or (isinstance(value, float) and math.isnan(value))


def coerce_number(value: object) -> float:
    """Parse "$1,234.50", "+$280,000", " 12 " etc. Returns 0.0 for anything unusable."""
    if _is_missing(value):
        return 0.0
    cleaned = _NON_NUMERIC_RE.sub("", str(value))
    if not cleaned:
        return 0.0
    try:
        number = float(cleaned)
    except ValueError:
        return 0.0
    return number if math.isfinite(number) else 0.0


def coerce_integer(value: object) -> int:
    """coerce_number truncated toward zero (years, days of month)."""
    return int(coerce_number(value))


def coerce_text(value: object) -> str:
    if _is_missing(value):
        return ""
    return str(value).strip()
