"""Canonical protocol constants for the risk engine.

All ratios, rates and scores are integer basis points where
``BPS_SCALE`` (10000) means 100 %.  Health ratio is collateral value
over debt, so a loan backed 2:1 reports 20000.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Scaling
# ---------------------------------------------------------------------------
BPS_SCALE: int = 10_000

# ~144 blocks per day.
BLOCKS_PER_YEAR: int = 52_560

# ---------------------------------------------------------------------------
# Health-ratio thresholds (bps, lower bound of each band)
# ---------------------------------------------------------------------------
LOW_RISK_THRESHOLD_BPS: int = 15_000
MEDIUM_RISK_THRESHOLD_BPS: int = 12_500
HIGH_RISK_THRESHOLD_BPS: int = 11_000

# Creation floor: a new loan needs 110 % coverage.
MIN_COLLATERAL_RATIO_BPS: int = HIGH_RISK_THRESHOLD_BPS

# Strictly below this a reassessed loan is liquidated.
LIQUIDATION_THRESHOLD_BPS: int = 10_500

# ---------------------------------------------------------------------------
# Interest rates (bps per year). CRITICAL shares the HIGH rate.
# ---------------------------------------------------------------------------
LOW_RISK_RATE_BPS: int = 500
MEDIUM_RISK_RATE_BPS: int = 1_000
HIGH_RISK_RATE_BPS: int = 1_500

# ---------------------------------------------------------------------------
# Risk score components
# ---------------------------------------------------------------------------
MAX_RISK_SCORE_BPS: int = BPS_SCALE
UNDERCOLLATERALIZED_RISK_BPS: int = 5_000
DEFAULT_RISK_PER_EVENT_BPS: int = 1_000
TIME_RISK_BLOCK_DIVISOR: int = 1_000

# ---------------------------------------------------------------------------
# Reputation
# ---------------------------------------------------------------------------
DEFAULT_REPUTATION_BPS: int = 7_500
MAX_REPUTATION_BPS: int = BPS_SCALE
REPAY_REPUTATION_BONUS_BPS: int = 100
# At or above this score a repayment jumps straight to the ceiling.
REPAY_REPUTATION_JUMP_BPS: int = 9_500
DEFAULT_REPUTATION_PENALTY_BPS: int = 1_000

# ---------------------------------------------------------------------------
# Global risk parameter defaults
# ---------------------------------------------------------------------------
DEFAULT_VOLATILITY_INDEX_BPS: int = 5_000
MAX_VOLATILITY_INDEX_BPS: int = BPS_SCALE
DEFAULT_LIQUIDATION_PENALTY_BPS: int = 1_000
MAX_LIQUIDATION_PENALTY_BPS: int = BPS_SCALE
DEFAULT_RISK_ADJUSTMENT_FACTOR_BPS: int = BPS_SCALE
