"""Configuration loading utilities for YAML-based engine settings."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Union

import yaml

from lending_risk.common.protocol_constants import (
    DEFAULT_LIQUIDATION_PENALTY_BPS,
    DEFAULT_RISK_ADJUSTMENT_FACTOR_BPS,
    DEFAULT_VOLATILITY_INDEX_BPS,
)

from .logging_config import get_logger


logger = get_logger(__name__)
_BASE_DIR = Path(__file__).resolve().parent.parent
_CONFIG_PATH = _BASE_DIR / "config.yml"


@dataclass(frozen=True)
class EngineSettings:
    """Engine settings loaded from YAML configuration file."""

    app_name: str = "Lending Risk Engine"
    log_level: str = "INFO"
    administrators: tuple = ("protocol-admin",)
    allow_reborrow_after_close: bool = False
    volatility_index: int = DEFAULT_VOLATILITY_INDEX_BPS
    liquidation_penalty: int = DEFAULT_LIQUIDATION_PENALTY_BPS
    risk_adjustment_factor: int = DEFAULT_RISK_ADJUSTMENT_FACTOR_BPS
    keeper_enabled: bool = False
    keeper_poll_interval_sec: int = 10
    keeper_borrowers: tuple = field(default_factory=tuple)


def _to_bool(value: Any, default: bool = False) -> bool:
    """Convert value to bool with a default fallback."""
    try:
        if isinstance(value, bool):
            return value
        return value.strip().lower() in {"1", "true", "yes", "on"}
    except (AttributeError, ValueError):
        logger.warning("Invalid boolean value '%s'. Using default=%s", value, default)
        return default


def _to_int(value: Any, default: int) -> int:
    """Convert value to int with a default fallback."""
    try:
        if isinstance(value, bool):
            raise TypeError("boolean is not an integer setting")
        return int(value)
    except (TypeError, ValueError):
        logger.warning("Invalid integer value '%s'. Using default=%s", value, default)
        return default


def _to_list(value: Any) -> list[str]:
    """Convert list-like or comma-separated value to list[str]."""
    if value is None:
        return []
    if isinstance(value, list):
        return [str(item).strip() for item in value if str(item).strip()]
    return [item.strip() for item in str(value).split(",") if item.strip()]


def _read_config(path: Optional[Union[str, Path]] = None) -> dict:
    """Read and parse YAML configuration."""
    config_path = Path(path) if path is not None else _CONFIG_PATH
    try:
        with config_path.open("r", encoding="utf-8") as config_file:
            config_data = yaml.safe_load(config_file) or {}
        logger.info("Configuration loaded from %s", config_path)
        return config_data
    except FileNotFoundError:
        logger.warning("Config file not found at %s. Falling back to defaults.", config_path)
        return {}
    except yaml.YAMLError:
        logger.exception("Failed to parse config file %s. Falling back to defaults.", config_path)
        return {}


def get_env(key: str, default: Optional[str] = None, path: Optional[Union[str, Path]] = None) -> Optional[str]:
    """Read a single config value using dot-notation keys."""
    data = _read_config(path)
    current: Any = data
    for part in key.split("."):
        if not isinstance(current, dict) or part not in current:
            return default
        current = current[part]
    if current is None:
        return default
    return str(current)


def load_settings(path: Optional[Union[str, Path]] = None) -> EngineSettings:
    """Load engine settings from `config.yml`, or from ``path`` when given."""
    config = _read_config(path)
    app_cfg = config.get("app") or {}
    engine_cfg = config.get("engine") or {}
    params_cfg = config.get("risk_parameters") or {}
    keeper_cfg = config.get("keeper") or {}

    app_name = str(app_cfg.get("name", "Lending Risk Engine"))
    log_level = str(app_cfg.get("log_level", "INFO")).upper()

    administrators = tuple(_to_list(engine_cfg.get("administrators", ["protocol-admin"])))
    if not administrators:
        logger.warning("No administrators configured. Parameter updates will be rejected.")
    allow_reborrow_after_close = _to_bool(engine_cfg.get("allow_reborrow_after_close", False), False)

    volatility_index = _to_int(
        params_cfg.get("volatility_index", DEFAULT_VOLATILITY_INDEX_BPS),
        DEFAULT_VOLATILITY_INDEX_BPS,
    )
    liquidation_penalty = _to_int(
        params_cfg.get("liquidation_penalty", DEFAULT_LIQUIDATION_PENALTY_BPS),
        DEFAULT_LIQUIDATION_PENALTY_BPS,
    )
    risk_adjustment_factor = _to_int(
        params_cfg.get("risk_adjustment_factor", DEFAULT_RISK_ADJUSTMENT_FACTOR_BPS),
        DEFAULT_RISK_ADJUSTMENT_FACTOR_BPS,
    )

    keeper_enabled = _to_bool(keeper_cfg.get("enabled", False), False)
    keeper_poll_interval_sec = _to_int(keeper_cfg.get("poll_interval_sec", 10), 10)
    keeper_borrowers = tuple(_to_list(keeper_cfg.get("borrowers", [])))

    return EngineSettings(
        app_name=app_name,
        log_level=log_level,
        administrators=administrators,
        allow_reborrow_after_close=allow_reborrow_after_close,
        volatility_index=volatility_index,
        liquidation_penalty=liquidation_penalty,
        risk_adjustment_factor=risk_adjustment_factor,
        keeper_enabled=keeper_enabled,
        keeper_poll_interval_sec=keeper_poll_interval_sec,
        keeper_borrowers=keeper_borrowers,
    )
