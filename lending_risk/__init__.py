"""Collateralized-loan risk engine."""

from .main import create_engine
from .models import (
    BorrowerProfileModel,
    GlobalRiskParametersModel,
    LoanModel,
    LoanTerms,
    ReassessmentAction,
    ReassessmentResult,
    ReputationEvent,
    RiskEngineError,
    RiskTier,
)
from .services import LiquidationKeeper, LoanLifecycleManager, ParameterStore

__version__ = "0.1.0"

__all__ = [
    "create_engine",
    "BorrowerProfileModel",
    "GlobalRiskParametersModel",
    "LoanModel",
    "LoanTerms",
    "ReassessmentAction",
    "ReassessmentResult",
    "ReputationEvent",
    "RiskEngineError",
    "RiskTier",
    "LiquidationKeeper",
    "LoanLifecycleManager",
    "ParameterStore",
]
