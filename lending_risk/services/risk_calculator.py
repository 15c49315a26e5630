"""Pure risk formulas: health ratio, tier, interest rate and risk score.

Nothing here reads global state or performs I/O; market volatility and
every other parameter arrive as arguments.

Health ratio (bps):
    health = collateral * 10000 // debt          (0 when debt == 0)

Tiers, evaluated high to low:
    health >= 15000  -> LOW       base rate  500
    health >= 12500  -> MEDIUM    base rate 1000
    health >= 11000  -> HIGH      base rate 1500
    otherwise        -> CRITICAL  base rate 1500

A zero health ratio from zero debt means "no debt", not "no collateral";
callers decide how to treat it.
"""

from __future__ import annotations

from lending_risk.common.fixed_point import apply_bps, clamp_bps, mul_div, safe_div, saturating_sub
from lending_risk.common.protocol_constants import (
    BLOCKS_PER_YEAR,
    BPS_SCALE,
    DEFAULT_RISK_PER_EVENT_BPS,
    HIGH_RISK_RATE_BPS,
    HIGH_RISK_THRESHOLD_BPS,
    LIQUIDATION_THRESHOLD_BPS,
    LOW_RISK_RATE_BPS,
    LOW_RISK_THRESHOLD_BPS,
    MEDIUM_RISK_RATE_BPS,
    MEDIUM_RISK_THRESHOLD_BPS,
    TIME_RISK_BLOCK_DIVISOR,
    UNDERCOLLATERALIZED_RISK_BPS,
)
from lending_risk.models.enums import RiskTier


_BASE_RATE_BY_TIER = {
    RiskTier.LOW: LOW_RISK_RATE_BPS,
    RiskTier.MEDIUM: MEDIUM_RISK_RATE_BPS,
    RiskTier.HIGH: HIGH_RISK_RATE_BPS,
    RiskTier.CRITICAL: HIGH_RISK_RATE_BPS,
}


def health_ratio(collateral: int, debt: int) -> int:
    """Collateral over debt in bps, truncated; 0 when there is no debt."""
    return mul_div(collateral, BPS_SCALE, debt, default=0)


def risk_tier(ratio: int) -> RiskTier:
    """Bucket a health ratio; each band is closed on its lower bound."""
    if ratio >= LOW_RISK_THRESHOLD_BPS:
        return RiskTier.LOW
    if ratio >= MEDIUM_RISK_THRESHOLD_BPS:
        return RiskTier.MEDIUM
    if ratio >= HIGH_RISK_THRESHOLD_BPS:
        return RiskTier.HIGH
    return RiskTier.CRITICAL


def base_rate(ratio: int) -> int:
    """Tier base rate in bps per year."""
    return _BASE_RATE_BY_TIER[risk_tier(ratio)]


def interest_rate(ratio: int, reputation: int) -> int:
    """Tier base rate minus a reputation discount of ``base * reputation / 10000``.

    A perfect reputation of 10000 brings the rate to zero.
    """
    rate = base_rate(ratio)
    discount = apply_bps(rate, reputation)
    return saturating_sub(rate, discount)


def risk_score(ratio: int, volatility: int, defaults: int) -> int:
    """Composite risk in bps, clamped to 10000.

    Sum of three independent terms: 5000 when the loan is below the HIGH
    tier floor, half the volatility index, and 1000 per past default.
    """
    collateral_risk = UNDERCOLLATERALIZED_RISK_BPS if ratio < HIGH_RISK_THRESHOLD_BPS else 0
    volatility_risk = safe_div(volatility, 2)
    history_risk = defaults * DEFAULT_RISK_PER_EVENT_BPS
    return clamp_bps(collateral_risk + volatility_risk + history_risk)


def accrued_interest(loan_amount: int, rate: int, blocks_elapsed: int, blocks_per_year: int = BLOCKS_PER_YEAR) -> int:
    """Simple interest over ``blocks_elapsed`` blocks, truncated."""
    return mul_div(loan_amount * rate, blocks_elapsed, blocks_per_year * BPS_SCALE)


def time_risk_increase(blocks_elapsed: int) -> int:
    """One bps of extra risk per full thousand blocks since the last update."""
    return safe_div(blocks_elapsed, TIME_RISK_BLOCK_DIVISOR)


def adjust_rate(rate: int, risk_adjustment_factor: int) -> int:
    """Scale a rate by the global adjustment factor (10000 = x1.0)."""
    return apply_bps(rate, risk_adjustment_factor)


def is_liquidatable(ratio: int) -> bool:
    """True strictly below the liquidation threshold; 10500 itself survives."""
    return ratio < LIQUIDATION_THRESHOLD_BPS


def meets_creation_floor(ratio: int) -> bool:
    """True when a ratio is high enough to open a loan."""
    return ratio >= HIGH_RISK_THRESHOLD_BPS
