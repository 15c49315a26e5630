"""Borrower profile model tracking long-term repayment behaviour."""

from pydantic import Field

from lending_risk.common.protocol_constants import DEFAULT_REPUTATION_BPS, MAX_REPUTATION_BPS

from .base import BaseRecordModel, BasisPoints


class BorrowerProfileModel(BaseRecordModel):
    """Reputation and loan counters that persist across a borrower's loans."""

    borrower: str = Field(..., min_length=1)
    total_loans_taken: int = Field(default=0, ge=0)
    loans_repaid: int = Field(default=0, ge=0)
    defaults: int = Field(default=0, ge=0)
    reputation_score: BasisPoints = Field(default=DEFAULT_REPUTATION_BPS, ge=0, le=MAX_REPUTATION_BPS)
