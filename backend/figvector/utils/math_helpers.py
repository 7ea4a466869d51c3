"""Math helpers — snapping, safe division, number formatting. No engine imports."""

from __future__ import annotations

import logging
import math

logger = logging.getLogger(__name__)


def snap_to_multiple(value: float, multiple: float) -> float:
    """Round to the nearest multiple unconditionally (shape drawables need 45° steps)."""
    return round(value / multiple) * multiple


def at_least(value: float, minimum: float) -> float:
    """Replace values below ``minimum`` (including NaN) with ``minimum``."""
    if not math.isfinite(value) or value < minimum:
        return minimum
    return value


def safe_ratio(numerator: float, denominator: float, minimum: float) -> float:
    """``numerator / denominator`` with the denominator floored at ``minimum``."""
    return numerator / at_least(abs(denominator), minimum)


def format_number(value: float, decimals: int = 4) -> str:
    """Deterministic compact number text: fixed precision, no trailing zeros, no -0.

    Non-finite values are written as 0.
    """
    if not math.isfinite(value):
        logger.warning("Non-finite value %r replaced by 0", value)
        return "0"
    text = f"{value:.{decimals}f}".rstrip("0").rstrip(".")
    if text in ("-0", ""):
        return "0"
    return text
