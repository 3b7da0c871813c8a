"""Conversions between floats and their shortest decimal text."""

from __future__ import annotations

import math
import re
from decimal import Decimal

_INF_NAMES = {"inf", "infinity"}
_HEX_RE = re.compile(r"[+-]?0x", re.IGNORECASE)


def float64_to_str(val: float) -> str:
    """Format ``val`` with the fewest digits that round-trip, never in exponent form."""
    if math.isnan(val):
        return "NaN"
    if math.isinf(val):
        return "+Inf" if val > 0 else "-Inf"
    return format(Decimal(repr(float(val))).normalize(), "f")


def str_to_float64(val: str) -> float:
    """Parse ``val`` as a 64-bit float; raise ValueError on bad or out-of-range input."""
    if not val or val != val.strip() or "_" in val:
        raise ValueError(f"invalid float syntax: {val!r}")
    if _HEX_RE.match(val):
        result = float.fromhex(val)
    else:
        result = float(val)
    if math.isinf(result) and val.lstrip("+-").lower() not in _INF_NAMES:
        raise ValueError(f"value out of range: {val!r}")
    return result