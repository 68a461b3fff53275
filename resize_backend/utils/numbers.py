"""Numeric coercion helpers shared by the value objects."""
from __future__ import annotations

import math
from typing import Any, Optional


def round_half_up(value: float) -> int:
    """Round to the nearest integer, with .5 always rounding up.

    The built-in ``round`` uses banker's rounding (``round(2.5) == 2``), which
    disagrees with the client-side rounding crop and size values come from.
    """
    return int(math.floor(value + 0.5))


def to_finite_float(value: Any) -> Optional[float]:
    """Return ``value`` as a finite float, or ``None`` if it is not one."""
    if isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number
