"""Reputation state transitions for borrower profiles."""

import logging
from typing import Union

from lending_risk.common.fixed_point import saturating_sub
from lending_risk.common.protocol_constants import (
    DEFAULT_REPUTATION_PENALTY_BPS,
    MAX_REPUTATION_BPS,
    REPAY_REPUTATION_BONUS_BPS,
    REPAY_REPUTATION_JUMP_BPS,
)
from lending_risk.models.enums import ReputationEvent
from lending_risk.models.exceptions import InvalidReputationEventError
from lending_risk.models.profiles import BorrowerProfileModel


logger = logging.getLogger(__name__)


def default_profile(borrower: str) -> BorrowerProfileModel:
    """Profile used for a borrower seen for the first time."""
    return BorrowerProfileModel(borrower=borrower)


def _coerce_event(event: Union[ReputationEvent, str]) -> ReputationEvent:
    if isinstance(event, ReputationEvent):
        return event
    try:
        return ReputationEvent(str(event).strip().lower())
    except ValueError:
        logger.warning("Rejected unknown reputation event=%r", event)
        raise InvalidReputationEventError("Unknown reputation event: {0!r}".format(event)) from None


def repaid_score(score: int) -> int:
    """Score after a repayment.

    Below 9500 the score gains 100; from 9500 upward it jumps to 10000.
    """
    if score < REPAY_REPUTATION_JUMP_BPS:
        return score + REPAY_REPUTATION_BONUS_BPS
    return MAX_REPUTATION_BPS


def defaulted_score(score: int) -> int:
    """Score after a default, floored at zero."""
    return saturating_sub(score, DEFAULT_REPUTATION_PENALTY_BPS)


def apply_event(profile: BorrowerProfileModel, event: Union[ReputationEvent, str]) -> BorrowerProfileModel:
    """Return the profile that results from ``event``; the input is untouched.

    Raises:
        InvalidReputationEventError: If ``event`` is not REPAY or DEFAULT.
    """
    resolved = _coerce_event(event)
    if resolved == ReputationEvent.REPAY:
        updated = profile.copy_with(
            loans_repaid=profile.loans_repaid + 1,
            reputation_score=repaid_score(profile.reputation_score),
        )
    else:
        updated = profile.copy_with(
            defaults=profile.defaults + 1,
            reputation_score=defaulted_score(profile.reputation_score),
        )
    logger.info(
        "Reputation updated borrower=%s event=%s score=%d->%d",
        profile.borrower,
        resolved.value,
        profile.reputation_score,
        updated.reputation_score,
    )
    return updated


def register_new_loan(profile: BorrowerProfileModel) -> BorrowerProfileModel:
    """Count a newly opened loan against the profile."""
    return profile.copy_with(total_loans_taken=profile.total_loans_taken + 1)
