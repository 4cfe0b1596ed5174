"""Configuration loader with validation and singleton access."""

import os
from pathlib import Path

import yaml
from loguru import logger
from pydantic import ValidationError as PydanticValidationError

from portfolio_engine.config.models import EngineConfig
from portfolio_engine.core.exceptions.portfolio import ConfigurationError

CONFIG_ENV_VAR = "PORTFOLIO_ENGINE_CONFIG"

# Global config singleton
_config: EngineConfig | None = None


def load_config(config_path: str | Path) -> EngineConfig:
    """
    Load and validate configuration from YAML file.

    Args:
        config_path: Path to config.yaml file

    Returns:
        Validated EngineConfig instance

    Raises:
        ConfigurationError: If the file is missing, unparsable or invalid
    """
    global _config

    config_path = Path(config_path)

    if not config_path.exists():
        raise ConfigurationError(f"Configuration file not found: {config_path}")

    logger.info(f"Loading configuration from: {config_path}")

    try:
        with open(config_path, encoding="utf-8") as f:
            raw_config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        logger.error(f"Configuration parsing failed: {e}")
        raise ConfigurationError(f"Invalid YAML in {config_path}: {e}") from e

    if raw_config is None:
        raw_config = {}
    if not isinstance(raw_config, dict):
        raise ConfigurationError(f"Configuration root must be a mapping: {config_path}")

    try:
        _config = EngineConfig(**raw_config)
    except PydanticValidationError as e:
        logger.error(f"Configuration validation failed: {e}")
        raise ConfigurationError(f"Invalid configuration: {e}") from e

    logger.info("Configuration loaded successfully:")
    logger.info(f"  Beneficiaries: {', '.join(_config.entities.beneficiaries) or '-'}")
    logger.info(f"  Account entities: {len(_config.entities.entities)}")
    logger.info(f"  Always-funds names: {len(_config.liquidity.always_funds_names)}")
    logger.info(f"  Limited liquidity names: {len(_config.liquidity.limited_liquidity_names)}")
    logger.info(f"  Default view currency: {_config.valuation.default_view_currency}")
    logger.info(f"  Strict FX rates: {_config.valuation.strict_rates}")
    logger.info(
        f"  Cash equivalent horizon: {_config.valuation.cash_equivalent_horizon_days} days"
    )

    return _config


def get_config() -> EngineConfig:
    """
    Get the current configuration.

    On first use, loads the file named by PORTFOLIO_ENGINE_CONFIG when set,
    otherwise falls back to defaults.

    Returns:
        Current EngineConfig instance
    """
    global _config

    if _config is None:
        env_path = os.environ.get(CONFIG_ENV_VAR)
        if env_path:
            return load_config(env_path)
        logger.debug("No configuration file set, using defaults")
        _config = EngineConfig()
    return _config


def set_config(config: EngineConfig | None) -> None:
    """Replace the active configuration (None resets to lazy loading)."""
    global _config
    _config = config
