"""Basis-point integer arithmetic helpers.

Values are plain Python ints, so products never overflow; every division
truncates and is guarded against a zero denominator.
"""

from __future__ import annotations

from .protocol_constants import BPS_SCALE


def _require_int(value: int, name: str) -> int:
    """Reject floats, bools and other non-integers before they reach the math."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError("{0} must be an int, got {1}".format(name, type(value).__name__))
    return value


def clamp(value: int, low: int, high: int) -> int:
    """Limit ``value`` to the closed range [low, high]."""
    _require_int(value, "value")
    if low > high:
        raise ValueError("low must not exceed high")
    return max(low, min(value, high))


def clamp_bps(value: int) -> int:
    """Limit ``value`` to [0, BPS_SCALE]."""
    return clamp(value, 0, BPS_SCALE)


def saturating_sub(minuend: int, subtrahend: int) -> int:
    """Subtract, stopping at zero instead of going negative."""
    _require_int(minuend, "minuend")
    _require_int(subtrahend, "subtrahend")
    return max(minuend - subtrahend, 0)


def safe_div(numerator: int, denominator: int, default: int = 0) -> int:
    """Integer division returning ``default`` when the denominator is zero.

    Callers pass non-negative operands, for which floor division and
    truncation toward zero agree.
    """
    _require_int(numerator, "numerator")
    _require_int(denominator, "denominator")
    if denominator == 0:
        return default
    return numerator // denominator


def mul_div(multiplicand: int, multiplier: int, denominator: int, default: int = 0) -> int:
    """Compute ``multiplicand * multiplier // denominator`` with a zero guard."""
    _require_int(multiplicand, "multiplicand")
    _require_int(multiplier, "multiplier")
    return safe_div(multiplicand * multiplier, denominator, default)


def apply_bps(amount: int, bps: int) -> int:
    """Scale ``amount`` by a basis-point factor, e.g. ``apply_bps(500, 7500) == 375``."""
    return mul_div(amount, bps, BPS_SCALE)
