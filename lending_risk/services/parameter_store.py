"""Holder of the mutable global risk parameters."""

import logging
from threading import RLock
from typing import Optional

from lending_risk.common.protocol_constants import MAX_LIQUIDATION_PENALTY_BPS, MAX_VOLATILITY_INDEX_BPS
from lending_risk.core.config import EngineSettings
from lending_risk.models.exceptions import InvalidRiskParamsError, UnauthorizedError
from lending_risk.models.risk_parameters import GlobalRiskParametersModel

from .access_policy import AccessPolicy, StaticAccessPolicy


logger = logging.getLogger(__name__)


def _validate_range(name: str, value: int, low: int, high: Optional[int]) -> int:
    """Check that ``value`` is an int inside [low, high] (open-ended when high is None)."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidRiskParamsError("{0} must be an integer".format(name))
    if value < low or (high is not None and value > high):
        bound = "{0}..{1}".format(low, high) if high is not None else ">= {0}".format(low)
        raise InvalidRiskParamsError("{0}={1} outside allowed range {2}".format(name, value, bound))
    return value


class ParameterStore:
    """Global volatility, liquidation penalty and rate adjustment factor.

    Reads are open to everyone; every setter requires the administrator
    capability and is checked for authorization before range validation.
    """

    def __init__(
        self,
        access_policy: AccessPolicy,
        parameters: Optional[GlobalRiskParametersModel] = None,
    ) -> None:
        self._access_policy = access_policy
        self._parameters = parameters or GlobalRiskParametersModel()
        self._lock = RLock()

    @classmethod
    def from_settings(cls, settings: EngineSettings, access_policy: Optional[AccessPolicy] = None) -> "ParameterStore":
        """Build a store initialized from configuration values.

        Raises:
            InvalidRiskParamsError: If configured values are out of range.
        """
        policy = access_policy or StaticAccessPolicy(settings.administrators)
        volatility = _validate_range("volatility_index", settings.volatility_index, 0, MAX_VOLATILITY_INDEX_BPS)
        penalty = _validate_range("liquidation_penalty", settings.liquidation_penalty, 0, MAX_LIQUIDATION_PENALTY_BPS)
        factor = _validate_range("risk_adjustment_factor", settings.risk_adjustment_factor, 0, None)
        parameters = GlobalRiskParametersModel(
            volatility_index=volatility,
            liquidation_penalty=penalty,
            risk_adjustment_factor=factor,
        )
        return cls(access_policy=policy, parameters=parameters)

    def get_parameters(self) -> GlobalRiskParametersModel:
        """Return a copy of the current parameters."""
        with self._lock:
            return self._parameters.model_copy()

    def is_administrator(self, caller: str) -> bool:
        return self._access_policy.is_administrator(caller)

    def _require_administrator(self, caller: str, operation: str) -> None:
        if not self._access_policy.is_administrator(caller):
            logger.warning("Unauthorized parameter update operation=%s caller=%s", operation, caller)
            raise UnauthorizedError("{0} requires the administrator capability".format(operation))

    def _update(self, caller: str, operation: str, field_name: str, value: int) -> GlobalRiskParametersModel:
        with self._lock:
            previous = getattr(self._parameters, field_name)
            self._parameters = self._parameters.copy_with(**{field_name: value})
            logger.info(
                "Risk parameter updated operation=%s caller=%s %s=%d->%d",
                operation,
                caller,
                field_name,
                previous,
                value,
            )
            return self._parameters.model_copy()

    def set_volatility(self, caller: str, new_value: int) -> GlobalRiskParametersModel:
        """Set the market volatility index (0..10000).

        Raises:
            UnauthorizedError: If ``caller`` is not an administrator.
            InvalidRiskParamsError: If ``new_value`` is out of range.
        """
        self._require_administrator(caller, "set_volatility")
        value = _validate_range("volatility_index", new_value, 0, MAX_VOLATILITY_INDEX_BPS)
        return self._update(caller, "set_volatility", "volatility_index", value)

    def set_liquidation_penalty(self, caller: str, new_value: int) -> GlobalRiskParametersModel:
        """Set the reported liquidation penalty (0..10000)."""
        self._require_administrator(caller, "set_liquidation_penalty")
        value = _validate_range("liquidation_penalty", new_value, 0, MAX_LIQUIDATION_PENALTY_BPS)
        return self._update(caller, "set_liquidation_penalty", "liquidation_penalty", value)

    def set_risk_adjustment_factor(self, caller: str, new_value: int) -> GlobalRiskParametersModel:
        """Set the reassessment rate multiplier (>= 0, 10000 = x1.0)."""
        self._require_administrator(caller, "set_risk_adjustment_factor")
        value = _validate_range("risk_adjustment_factor", new_value, 0, None)
        return self._update(caller, "set_risk_adjustment_factor", "risk_adjustment_factor", value)
