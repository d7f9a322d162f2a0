"""
Context Compactor — Configuration Schemas

Defines typed configuration models using Pydantic for validation and type safety.
Settings are immutable once built; changing them produces a new instance.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Strategy names in declaration order, with their informational weights.
# The order here is the order the optimizer runs them in.
DEFAULT_STRATEGY_WEIGHTS: dict[str, float] = {
    "trimComments": 0.8,
    "reduceIndentation": 0.5,
    "removeBlankLines": 0.3,
    "summarizeFiles": 0.9,
    "shortenPaths": 0.4,
    "codeSkeletonization": 0.7,
}

STRATEGY_NAMES: tuple[str, ...] = tuple(DEFAULT_STRATEGY_WEIGHTS)


class LogLevel(str, Enum):
    """Log levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class StrategySettings(BaseModel):
    """Per-strategy settings."""

    model_config = ConfigDict(frozen=True)

    enabled: bool = Field(
        default=True,
        description="Allow the strategy to run when its tier selects it",
    )
    weight: float = Field(
        default=0.5,
        ge=0.0,
        le=1.0,
        description="Informational weight, kept for extensibility (not used by tier selection)",
    )


def _default_strategies() -> dict[str, StrategySettings]:
    return {name: StrategySettings(weight=weight) for name, weight in DEFAULT_STRATEGY_WEIGHTS.items()}


class OptimizerSettings(BaseModel):
    """
    Configuration for the token-budget optimizer.

    - Character-per-token ratios for prose and code
    - Per-strategy enable flags and weights
    - Log level for the package logger
    """

    model_config = ConfigDict(frozen=True)

    chars_per_token: float = Field(
        default=4.0,
        gt=0.0,
        description="Average characters per token for prose",
    )
    code_chars_per_token: float = Field(
        default=3.5,
        gt=0.0,
        description="Average characters per token for code (denser than prose)",
    )
    strategies: dict[str, StrategySettings] = Field(
        default_factory=_default_strategies,
        description="Per-strategy settings keyed by strategy name",
    )
    log_level: LogLevel = Field(default=LogLevel.INFO, description="Package log level")

    @field_validator("strategies", mode="before")
    @classmethod
    def merge_strategy_defaults(cls, v: Any) -> dict[str, Any]:
        """Fill in missing strategies and reject unknown names."""
        if v is None:
            return _default_strategies()
        if not isinstance(v, dict):
            raise ValueError("strategies must be a mapping of strategy name to settings")

        unknown = sorted(set(v) - set(STRATEGY_NAMES))
        if unknown:
            raise ValueError(f"Unknown strategies: {unknown}. Valid strategies: {list(STRATEGY_NAMES)}")

        merged: dict[str, Any] = {}
        for name, weight in DEFAULT_STRATEGY_WEIGHTS.items():
            override = v.get(name)
            if override is None:
                merged[name] = StrategySettings(weight=weight)
            elif isinstance(override, StrategySettings):
                merged[name] = override
            else:
                merged[name] = {"weight": weight, **dict(override)}
        return merged

    def is_enabled(self, strategy: str) -> bool:
        """Return whether a strategy is allowed to run."""
        settings = self.strategies.get(strategy)
        return settings is not None and settings.enabled
