"""Engine configuration management."""

from .loader import CONFIG_ENV_VAR, get_config, load_config, set_config
from .models import (
    ComparisonConfig,
    EngineConfig,
    EntitiesConfig,
    LiquidityConfig,
    ValuationConfig,
)

__all__ = [
    "CONFIG_ENV_VAR",
    "ComparisonConfig",
    "EngineConfig",
    "EntitiesConfig",
    "LiquidityConfig",
    "ValuationConfig",
    "get_config",
    "load_config",
    "set_config",
]
