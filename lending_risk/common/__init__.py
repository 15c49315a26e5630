"""Common reusable constants and fixed-point helpers."""

from .fixed_point import apply_bps, clamp, clamp_bps, mul_div, safe_div, saturating_sub
from .protocol_constants import BLOCKS_PER_YEAR, BPS_SCALE, LIQUIDATION_THRESHOLD_BPS

__all__ = [
    "apply_bps",
    "clamp",
    "clamp_bps",
    "mul_div",
    "safe_div",
    "saturating_sub",
    "BLOCKS_PER_YEAR",
    "BPS_SCALE",
    "LIQUIDATION_THRESHOLD_BPS",
]
