"""
Lenient parsers for values coming from JSON bodies.
Clients send numbers as strings ("48", "5.5"), so parsing reads the leading
numeric prefix the way browser form values are usually read.
"""

import math
import re
from typing import Any

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")
_LEADING_FLOAT = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|[+-]?Infinity)")


def _as_text(value: Any) -> str | None:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, float):
        if math.isnan(value):
            return None
        return repr(value)
    if isinstance(value, (int, str)):
        return str(value)
    return None


def parse_leading_int(value: Any) -> int | None:
    """'48' -> 48, '5.5' -> 5, 12.9 -> 12, '12px' -> 12; None when nothing parses."""
    if isinstance(value, float) and math.isfinite(value):
        return int(value)
    text = _as_text(value)
    if text is None:
        return None
    m = _LEADING_INT.match(text)
    return int(m.group(1)) if m else None


def parse_leading_float(value: Any) -> float | None:
    """'5.5' -> 5.5, '-3.5h' -> -3.5, 2 -> 2.0; None when nothing parses."""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return None if math.isnan(value) else float(value)
    text = _as_text(value)
    if text is None:
        return None
    m = _LEADING_FLOAT.match(text)
    return float(m.group(1).replace("Infinity", "inf")) if m else None


def int_or_default(value: Any, default: int) -> int:
    """Parsed integer, or default when unparseable or zero."""
    return parse_leading_int(value) or default


def float_or_default(value: Any, default: float) -> float:
    """Parsed float, or default when unparseable or zero."""
    return parse_leading_float(value) or default


def is_blank(value: Any) -> bool:
    """Legacy 'required' rule: absent, null, false, empty string and 0 all count as missing."""
    if value is None or value is False:
        return True
    if isinstance(value, str):
        return value == ""
    if isinstance(value, (int, float)):
        return value == 0 or (isinstance(value, float) and math.isnan(value))
    return False
