"""
Token Optimization Module

Fits generated project documentation into a token budget before it is
handed to a language-model prompt.

Public API:
    - ContextOptimizer: Budget-driven optimizer (entry point)
    - OptimizationResult / StrategyApplication: Result models
    - TokenEstimator / estimate_tokens: Character-ratio token estimation
    - parse_sections / score_section / prioritize_sections: Section handling
    - select_plan / ReductionTier: Tier selection
    - extract_code_elements / identify_complex_regions: Code helpers

Example:
    >>> from context_compactor.token_optimization import ContextOptimizer
    >>> optimizer = ContextOptimizer()
    >>> result = optimizer.optimize_context(summary_markdown, token_budget=4000)
    >>> prompt_context = result.context
"""

from .code_elements import CodeElements, ComplexRegion, extract_code_elements, identify_complex_regions
from .estimator import TokenEstimator, estimate_tokens
from .models import OptimizationResult, Section, StrategyApplication, StrategyOutcome
from .optimizer import MET_BUDGET_NOTE, OVER_BUDGET_NOTE, ContextOptimizer, optimize_context
from .sections import TRUNCATION_MARKER, parse_sections, prioritize_sections, score_section
from .strategies import STRATEGY_CLASSES, OptimizationStrategy, build_strategies
from .tiers import ReductionTier, StrategyPlan, select_plan, select_tier

__all__ = [
    # Optimizer
    "ContextOptimizer",
    "optimize_context",
    "OptimizationResult",
    "StrategyApplication",
    "StrategyOutcome",
    "MET_BUDGET_NOTE",
    "OVER_BUDGET_NOTE",
    # Token estimation
    "TokenEstimator",
    "estimate_tokens",
    # Sections
    "Section",
    "parse_sections",
    "score_section",
    "prioritize_sections",
    "TRUNCATION_MARKER",
    # Strategies
    "OptimizationStrategy",
    "STRATEGY_CLASSES",
    "build_strategies",
    # Tiers
    "ReductionTier",
    "StrategyPlan",
    "select_plan",
    "select_tier",
    # Code helpers
    "CodeElements",
    "ComplexRegion",
    "extract_code_elements",
    "identify_complex_regions",
]
