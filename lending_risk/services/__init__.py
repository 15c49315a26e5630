"""Service layer exports."""

from .access_policy import AccessPolicy, StaticAccessPolicy
from .liquidation_keeper import LiquidationKeeper
from .loan_lifecycle import LoanLifecycleManager
from .parameter_store import ParameterStore

__all__ = [
    "AccessPolicy",
    "StaticAccessPolicy",
    "LiquidationKeeper",
    "LoanLifecycleManager",
    "ParameterStore",
]
