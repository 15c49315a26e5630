"""Reusable enums for the lending risk domain."""

from enum import Enum


class StringEnum(str, Enum):
    """Base enum class with string behavior for JSON serialization."""


class RiskTier(StringEnum):
    """Risk classification tiers derived from health ratio."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


class LoanStatus(StringEnum):
    """Loan lifecycle states. REPAID and LIQUIDATED are terminal."""

    ACTIVE = "ACTIVE"
    REPAID = "REPAID"
    LIQUIDATED = "LIQUIDATED"


class ReputationEvent(StringEnum):
    """Events that move a borrower's reputation score."""

    REPAY = "repay"
    DEFAULT = "default"


class ReassessmentAction(StringEnum):
    """Outcome of a periodic loan reassessment."""

    UPDATED = "updated"
    LIQUIDATED = "liquidated"


class EngineErrorCode(StringEnum):
    """Stable failure codes attached to engine exceptions."""

    UNAUTHORIZED = "UNAUTHORIZED"
    NOT_FOUND = "NOT_FOUND"
    ALREADY_EXISTS = "ALREADY_EXISTS"
    INVALID_AMOUNT = "INVALID_AMOUNT"
    INSUFFICIENT_COLLATERAL = "INSUFFICIENT_COLLATERAL"
    INVALID_RISK_PARAMS = "INVALID_RISK_PARAMS"
    INVALID_EVENT = "INVALID_EVENT"
    MODEL_VALIDATION = "MODEL_VALIDATION"
