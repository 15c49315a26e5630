"""Return payloads for loan lifecycle operations."""

from typing import NamedTuple

from pydantic import BaseModel, Field

from .enums import ReassessmentAction, RiskTier


class LoanTerms(NamedTuple):
    """Terms fixed at loan creation; compares equal to a plain tuple."""

    loan_amount: int
    interest_rate: int
    risk_score: int


class ReassessmentResult(BaseModel):
    """Outcome of one periodic reassessment.

    On liquidation ``risk_score`` carries the unclamped adjusted score and
    ``new_interest_rate`` is 0; on update ``liquidation_penalty`` is 0.
    """

    borrower: str
    action: ReassessmentAction
    health_ratio: int = Field(..., ge=0)
    risk_score: int = Field(..., ge=0)
    new_interest_rate: int = Field(..., ge=0)
    liquidation_penalty: int = Field(..., ge=0)
    interest_accrued: int = Field(default=0, ge=0)
    total_debt: int = Field(default=0, ge=0)
    blocks_elapsed: int = Field(default=0, ge=0)

    @property
    def liquidated(self) -> bool:
        return self.action == ReassessmentAction.LIQUIDATED


class LoanHealthSnapshot(BaseModel):
    """Read-only view of a loan's coverage at a given collateral value."""

    borrower: str
    collateral_value: int = Field(..., ge=0)
    debt: int = Field(..., ge=0)
    health_ratio: int = Field(..., ge=0)
    risk_tier: RiskTier
    is_liquidatable: bool
