"""Custom exceptions for the engine, model and store layers."""

from .enums import EngineErrorCode


class RiskEngineError(Exception):
    """Base class for every recoverable engine failure."""

    code = EngineErrorCode.MODEL_VALIDATION

    def __init__(self, message: str = "") -> None:
        super().__init__(message or self.__class__.__doc__ or self.code.value)
        self.message = message or str(self.args[0])


class ModelValidationError(RiskEngineError):
    """Raised when a record fails parsing or serialization."""

    code = EngineErrorCode.MODEL_VALIDATION


class UnauthorizedError(RiskEngineError):
    """Caller is not allowed to perform an administrator operation."""

    code = EngineErrorCode.UNAUTHORIZED


class LoanNotFoundError(RiskEngineError):
    """No active loan or profile exists for the target borrower."""

    code = EngineErrorCode.NOT_FOUND


class LoanAlreadyExistsError(RiskEngineError):
    """A loan record already exists for the borrower."""

    code = EngineErrorCode.ALREADY_EXISTS


class InvalidAmountError(RiskEngineError):
    """An amount is zero, negative or not an integer."""

    code = EngineErrorCode.INVALID_AMOUNT


class InsufficientCollateralError(RiskEngineError):
    """Collateral does not cover the minimum creation ratio."""

    code = EngineErrorCode.INSUFFICIENT_COLLATERAL


class InvalidRiskParamsError(RiskEngineError):
    """A global risk parameter is outside its allowed range."""

    code = EngineErrorCode.INVALID_RISK_PARAMS


class InvalidReputationEventError(RiskEngineError):
    """A reputation event outside the closed REPAY/DEFAULT set."""

    code = EngineErrorCode.INVALID_EVENT
