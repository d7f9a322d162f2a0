"""
Tier Selection

Chooses which strategies run from the fraction of tokens that must go.
Destructive strategies only run when a light pass cannot be enough.
"""

from dataclasses import dataclass
from enum import Enum

from ..config.schemas import STRATEGY_NAMES, OptimizerSettings

LIGHT_TIER_LIMIT = 0.2
MEDIUM_TIER_LIMIT = 0.5


class ReductionTier(str, Enum):
    """Strategy tiers by required reduction."""

    LIGHT = "light"
    MEDIUM = "medium"
    AGGRESSIVE = "aggressive"


TIER_STRATEGIES: dict[ReductionTier, frozenset[str]] = {
    ReductionTier.LIGHT: frozenset({"trimComments", "reduceIndentation", "removeBlankLines"}),
    ReductionTier.MEDIUM: frozenset({"trimComments", "reduceIndentation", "removeBlankLines", "summarizeFiles"}),
    ReductionTier.AGGRESSIVE: frozenset(STRATEGY_NAMES),
}


@dataclass(frozen=True)
class StrategyPlan:
    """Strategies enabled for one optimize call, in declaration order."""

    tier: ReductionTier
    target_reduction: float
    enabled: tuple[str, ...]


def target_reduction(original_tokens: int, token_budget: int) -> float:
    """Fraction of the original estimate that must be removed."""
    if original_tokens <= 0:
        return 0.0
    return (original_tokens - token_budget) / original_tokens


def select_tier(reduction: float) -> ReductionTier:
    """
    Map a required reduction fraction to a tier.

    Below 0.2 is light, below 0.5 medium, anything else aggressive.
    """
    if reduction < LIGHT_TIER_LIMIT:
        return ReductionTier.LIGHT
    if reduction < MEDIUM_TIER_LIMIT:
        return ReductionTier.MEDIUM
    return ReductionTier.AGGRESSIVE


def select_plan(reduction: float, settings: OptimizerSettings | None = None) -> StrategyPlan:
    """
    Build the strategy plan for a required reduction.

    Strategies disabled in settings are left out of every tier.

    Args:
        reduction: Fraction of tokens to remove
        settings: Optimizer settings (defaults enable everything)

    Returns:
        Immutable StrategyPlan
    """
    settings = settings or OptimizerSettings()
    tier = select_tier(reduction)
    allowed = TIER_STRATEGIES[tier]
    enabled = tuple(name for name in STRATEGY_NAMES if name in allowed and settings.is_enabled(name))
    return StrategyPlan(tier=tier, target_reduction=reduction, enabled=enabled)
