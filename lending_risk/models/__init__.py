"""Public model package exports for the lending risk engine."""

from .base import Amount, BaseRecordModel, BasisPoints, BlockHeight
from .enums import (
    EngineErrorCode,
    LoanStatus,
    ReassessmentAction,
    ReputationEvent,
    RiskTier,
)
from .exceptions import (
    InsufficientCollateralError,
    InvalidAmountError,
    InvalidReputationEventError,
    InvalidRiskParamsError,
    LoanAlreadyExistsError,
    LoanNotFoundError,
    ModelValidationError,
    RiskEngineError,
    UnauthorizedError,
)
from .loans import LoanModel
from .profiles import BorrowerProfileModel
from .repositories import LoanStore
from .results import LoanHealthSnapshot, LoanTerms, ReassessmentResult
from .risk_parameters import GlobalRiskParametersModel

__all__ = [
    "Amount",
    "BaseRecordModel",
    "BasisPoints",
    "BlockHeight",
    "LoanModel",
    "BorrowerProfileModel",
    "GlobalRiskParametersModel",
    "LoanTerms",
    "ReassessmentResult",
    "LoanHealthSnapshot",
    "EngineErrorCode",
    "LoanStatus",
    "ReassessmentAction",
    "ReputationEvent",
    "RiskTier",
    "RiskEngineError",
    "ModelValidationError",
    "UnauthorizedError",
    "LoanNotFoundError",
    "LoanAlreadyExistsError",
    "InvalidAmountError",
    "InsufficientCollateralError",
    "InvalidRiskParamsError",
    "InvalidReputationEventError",
    "LoanStore",
]
