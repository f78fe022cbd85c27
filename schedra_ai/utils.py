"""
Small utilities: lenient number parsing and display helpers.

Rationale:
- Project data arrives straight from the frontend, so budgets may be numbers,
  numeric strings, junk or missing. Never raise on them.
- Keep API keys out of the logs except for a short prefix.
"""

import math
import re
from typing import Any, Optional

_LEADING_FLOAT = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")
_STRICT_FLOAT = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?$")


def parse_float(value: Any) -> Optional[float]:
    """
    Parse the leading numeric part of a value ("1200abc" -> 1200.0).
    Returns None when nothing numeric can be read.
    """
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        return None if math.isnan(value) else float(value)
    match = _LEADING_FLOAT.match(str(value))
    if not match:
        return None
    return float(match.group(1))


def to_number(value: Any) -> float:
    """
    Strict numeric conversion used for totals: the whole value must be a
    number, otherwise it counts as 0.
    """
    if value is None:
        return 0.0
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float)):
        return 0.0 if math.isnan(value) else float(value)
    text = str(value).strip()
    if not text:
        return 0.0
    if _STRICT_FLOAT.match(text):
        return float(text)
    return 0.0


def format_value(value: Any) -> str:
    """Render a prompt value; integral floats lose their trailing .0."""
    if value is None:
        return "N/A"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def mask_key(key: str, visible: int = 8) -> str:
    return f"{key[:visible]}..."
