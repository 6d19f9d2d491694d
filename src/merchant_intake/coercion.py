from __future__ import annotations

import math
import re
from typing import Any, Optional

# ASCII decimal or exponent form only; no underscores, no non-ASCII digits.
_NUMERIC_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)


def to_text(value: Any) -> Optional[str]:
    """Trimmed text, or None for missing/blank values."""
    if value is None:
        return None
    t = str(value).strip()
    return t or None


def to_boolean(value: Any) -> bool:
    if value is True:
        return True
    if isinstance(value, str):
        return value.strip().lower() == "true"
    return False


def to_number(value: Any) -> Optional[float]:
    """
    Best-effort numeric coercion for persisted columns.

    Accepts real numbers or text like "12,500.00" (thousands separators are
    stripped). Anything else, including NaN/inf, becomes None.
    """
    # bool is an int subclass; a checkbox value is not an amount.
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        n = float(value)
    elif isinstance(value, str):
        cleaned = value.replace(",", "").strip()
        if not _NUMERIC_RE.fullmatch(cleaned):
            return None
        n = float(cleaned)
    else:
        return None
    if not math.isfinite(n):
        return None
    return n


def to_int(value: Any) -> Optional[int]:
    n = to_number(value)
    if n is None:
        return None
    return int(n)
