"""
Context Optimizer Module

Fits generated documentation into a token budget: selects a strategy tier,
runs the enabled strategies in declaration order until the estimate fits,
falls back to section prioritization, and annotates the result with a status note.
"""

import logging
import math
import time
from typing import Any

from pydantic import ValidationError

from ..config.loader import get_settings
from ..config.schemas import STRATEGY_NAMES, OptimizerSettings
from ..errors import ConfigurationError, ErrorCode, InvalidInputError
from .estimator import TokenEstimator
from .models import SECTION_PRIORITIZATION, OptimizationResult, Section, StrategyApplication
from .sections import parse_sections, prioritize_sections
from .strategies import OptimizationStrategy, build_strategies
from .tiers import StrategyPlan, select_plan, target_reduction

logger = logging.getLogger(__name__)

MET_BUDGET_NOTE = "\n\n*Note: Context was optimized to fit the token budget. Reduced by {percent}%.*"
OVER_BUDGET_NOTE = "\n\n*Note: Context was optimized but still exceeds the token budget by approximately {tokens} tokens.*"


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positive values."""
    return math.floor(value + 0.5)


def budget_note(optimized_tokens: int, token_budget: int, reduction_percent: float) -> str:
    """Status footnote for an optimized context."""
    if optimized_tokens > token_budget:
        return OVER_BUDGET_NOTE.format(tokens=round_half_up(optimized_tokens - token_budget))
    return MET_BUDGET_NOTE.format(percent=round_half_up(reduction_percent))


class ContextOptimizer:
    """
    Token-budget optimizer for generated documentation.

    Holds only immutable settings, the estimator and the stateless strategies;
    everything decided for a call lives in that call, so one instance can be
    shared freely.
    """

    def __init__(
        self,
        settings: OptimizerSettings | None = None,
        estimator: TokenEstimator | None = None,
    ) -> None:
        """
        Initialize context optimizer.

        Args:
            settings: Optimizer settings (defaults if None)
            estimator: Token estimator (built from settings if None)
        """
        self.settings = settings or OptimizerSettings()
        self.estimator = estimator or TokenEstimator(
            chars_per_token=self.settings.chars_per_token,
            code_chars_per_token=self.settings.code_chars_per_token,
        )
        self.strategies: dict[str, OptimizationStrategy] = build_strategies(self.estimator)

    def estimate_tokens(self, text: str | None, is_code: bool = False) -> int:
        """
        Estimate token count for text.

        Args:
            text: Text to estimate
            is_code: Use the code ratio

        Returns:
            Estimated token count
        """
        return self.estimator.estimate(text, is_code)

    def configure(
        self,
        strategies: dict[str, dict[str, Any]] | None = None,
        chars_per_token: float | None = None,
        code_chars_per_token: float | None = None,
    ) -> "ContextOptimizer":
        """
        Build a new optimizer with updated settings.

        The current instance is left untouched. Unknown strategy names are ignored.

        Args:
            strategies: Per-strategy overrides, e.g. {"summarizeFiles": {"enabled": False}}
            chars_per_token: Prose characters per token
            code_chars_per_token: Code characters per token

        Returns:
            New ContextOptimizer

        Raises:
            ConfigurationError: If the merged settings are invalid
        """
        merged: dict[str, dict[str, Any]] = {
            name: settings.model_dump() for name, settings in self.settings.strategies.items()
        }
        for name, override in (strategies or {}).items():
            if name not in STRATEGY_NAMES:
                logger.warning(f"Ignoring unknown strategy: {name}", extra={"strategy": name})
                continue
            if not isinstance(override, dict):
                logger.warning(f"Ignoring non-mapping settings for strategy: {name}", extra={"strategy": name})
                continue
            merged[name] = {**merged[name], **override}

        try:
            settings = OptimizerSettings(
                chars_per_token=chars_per_token or self.settings.chars_per_token,
                code_chars_per_token=code_chars_per_token or self.settings.code_chars_per_token,
                strategies=merged,  # type: ignore[arg-type]
                log_level=self.settings.log_level,
            )
        except ValidationError as e:
            raise ConfigurationError(
                "Invalid optimizer settings",
                details={"validation_errors": e.errors()},
            ) from e

        return ContextOptimizer(settings=settings)

    def optimize_context(
        self,
        context: str,
        token_budget: int,
        *,
        preserve_headers: bool = True,
        module_context: bool = False,
    ) -> OptimizationResult:
        """
        Optimize context to fit within a token budget.

        Args:
            context: Original context
            token_budget: Maximum allowed tokens (best effort)
            preserve_headers: Accepted for caller compatibility, no effect
            module_context: Accepted for caller compatibility, no effect

        Returns:
            OptimizationResult; ``context`` carries a status footnote unless the
            input already fit

        Raises:
            InvalidInputError: If token_budget is not a non-negative integer
        """
        if isinstance(token_budget, bool) or not isinstance(token_budget, int):
            raise InvalidInputError(
                "token_budget must be an integer",
                details={"token_budget": repr(token_budget)},
                error_code=ErrorCode.INVALID_PARAMETER_TYPE,
            )
        if token_budget < 0:
            raise InvalidInputError(
                "token_budget must be non-negative",
                details={"token_budget": token_budget},
                error_code=ErrorCode.INVALID_PARAMETER_VALUE,
            )

        context = context or ""
        original_tokens = self.estimate_tokens(context)

        if original_tokens <= token_budget:
            return OptimizationResult(
                context=context,
                original_tokens=original_tokens,
                optimized_tokens=original_tokens,
                reduction_percent=0.0,
                strategies=[],
                token_budget=token_budget,
            )

        start_time = time.perf_counter()
        plan = select_plan(target_reduction(original_tokens, token_budget), self.settings)
        sections = parse_sections(context, self.estimator)

        optimized, current_tokens, applied = self._run_strategies(plan, context, sections, original_tokens, token_budget)

        if current_tokens > token_budget:
            fallback_sections = sections if optimized == context else parse_sections(optimized, self.estimator)
            outcome = prioritize_sections(fallback_sections, token_budget, self.estimator)
            if outcome is not None:
                optimized = outcome.text
                if outcome.tokens != current_tokens:
                    applied.append(StrategyApplication.record(SECTION_PRIORITIZATION, current_tokens, outcome.tokens))
                current_tokens = outcome.tokens

        final_tokens = self.estimate_tokens(optimized)
        reduction_percent = ((original_tokens - final_tokens) / original_tokens) * 100

        logger.info(
            f"Optimized context from {original_tokens} to {final_tokens} tokens",
            extra={
                "tier": plan.tier.value,
                "token_budget": token_budget,
                "strategies_applied": [application.name for application in applied],
                "within_budget": final_tokens <= token_budget,
                "preserve_headers": preserve_headers,
                "module_context": module_context,
                "processing_time_ms": (time.perf_counter() - start_time) * 1000,
            },
        )

        return OptimizationResult(
            context=optimized + budget_note(final_tokens, token_budget, reduction_percent),
            original_tokens=original_tokens,
            optimized_tokens=final_tokens,
            reduction_percent=reduction_percent,
            strategies=applied,
            token_budget=token_budget,
        )

    def _run_strategies(
        self,
        plan: StrategyPlan,
        context: str,
        sections: list[Section],
        tokens: int,
        token_budget: int,
    ) -> tuple[str, int, list[StrategyApplication]]:
        """Apply enabled strategies in order, stopping once the estimate fits."""
        applied: list[StrategyApplication] = []

        for name in plan.enabled:
            outcome = self.strategies[name].apply(context, sections, tokens, token_budget)
            if outcome is None:
                logger.debug(f"Strategy {name} made no changes")
                continue

            context = outcome.text
            if outcome.tokens != tokens:
                applied.append(StrategyApplication.record(name, tokens, outcome.tokens))
                logger.debug(
                    f"Strategy {name} reduced {tokens} -> {outcome.tokens} tokens",
                    extra={"strategy": name},
                )
            tokens = outcome.tokens

            if tokens <= token_budget:
                break

        return context, tokens, applied


def optimize_context(context: str, token_budget: int, **options: Any) -> OptimizationResult:
    """
    Convenience function: optimize with an optimizer built from loaded settings.

    Args:
        context: Original context
        token_budget: Maximum allowed tokens
        **options: Keyword options forwarded to ContextOptimizer.optimize_context

    Returns:
        OptimizationResult
    """
    return ContextOptimizer(settings=get_settings()).optimize_context(context, token_budget, **options)
