"""Loan domain model for collateralized positions."""

import logging
from typing import Optional

from pydantic import Field, root_validator

from lending_risk.common.protocol_constants import MAX_RISK_SCORE_BPS

from .base import Amount, BaseRecordModel, BasisPoints, BlockHeight
from .enums import LoanStatus


logger = logging.getLogger(__name__)


class LoanModel(BaseRecordModel):
    """Represents the single loan a borrower holds against posted collateral."""

    borrower: str = Field(..., min_length=1)

    collateral_amount: Amount = Field(..., ge=0)
    loan_amount: Amount = Field(..., ge=0)
    interest_rate: BasisPoints = Field(..., ge=0)
    risk_score: BasisPoints = Field(..., ge=0, le=MAX_RISK_SCORE_BPS)

    last_update_block: BlockHeight = Field(..., ge=0)
    created_block: BlockHeight = Field(default=0, ge=0)
    closed_block: Optional[BlockHeight] = Field(default=None, ge=0)

    is_active: bool = Field(default=True)
    status: LoanStatus = Field(default=LoanStatus.ACTIVE)

    @root_validator(skip_on_failure=True)
    def _validate_lifecycle(cls, values: dict) -> dict:
        """Keep the active flag, status and block markers consistent."""
        try:
            is_active = bool(values.get("is_active"))
            status = values.get("status")
            created_block = int(values.get("created_block", 0))
            last_update_block = int(values.get("last_update_block", 0))
            closed_block = values.get("closed_block")

            if is_active != (status == LoanStatus.ACTIVE):
                raise ValueError("is_active must be true exactly when status is ACTIVE")

            if last_update_block < created_block:
                raise ValueError("last_update_block cannot precede created_block")

            if closed_block is not None:
                if is_active:
                    raise ValueError("closed_block is only set on closed loans")
                if closed_block < created_block:
                    raise ValueError("closed_block cannot precede created_block")

            return values
        except Exception:
            logger.exception("Loan validation failed borrower=%s", values.get("borrower"))
            raise
