"""
Context Compactor — Configuration Module

Provides typed settings loading and validation.
"""

from .loader import get_settings, load_settings, reload_settings
from .schemas import (
    DEFAULT_STRATEGY_WEIGHTS,
    STRATEGY_NAMES,
    LogLevel,
    OptimizerSettings,
    StrategySettings,
)

__all__ = [
    # Loader functions
    "load_settings",
    "get_settings",
    "reload_settings",
    # Schemas
    "OptimizerSettings",
    "StrategySettings",
    "LogLevel",
    # Strategy registry constants
    "DEFAULT_STRATEGY_WEIGHTS",
    "STRATEGY_NAMES",
]
