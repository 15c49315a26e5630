"""Process-wide risk parameters read by every risk computation."""

from pydantic import Field

from lending_risk.common.protocol_constants import (
    DEFAULT_LIQUIDATION_PENALTY_BPS,
    DEFAULT_RISK_ADJUSTMENT_FACTOR_BPS,
    DEFAULT_VOLATILITY_INDEX_BPS,
    MAX_LIQUIDATION_PENALTY_BPS,
    MAX_VOLATILITY_INDEX_BPS,
)

from .base import BaseRecordModel, BasisPoints


class GlobalRiskParametersModel(BaseRecordModel):
    """Market volatility, liquidation penalty and rate multiplier, all in bps.

    ``liquidation_penalty`` is reported on liquidation but never deducted
    by the engine. ``risk_adjustment_factor`` scales reassessed rates,
    10000 meaning x1.0.
    """

    volatility_index: BasisPoints = Field(default=DEFAULT_VOLATILITY_INDEX_BPS, ge=0, le=MAX_VOLATILITY_INDEX_BPS)
    liquidation_penalty: BasisPoints = Field(
        default=DEFAULT_LIQUIDATION_PENALTY_BPS,
        ge=0,
        le=MAX_LIQUIDATION_PENALTY_BPS,
    )
    risk_adjustment_factor: BasisPoints = Field(default=DEFAULT_RISK_ADJUSTMENT_FACTOR_BPS, ge=0)
