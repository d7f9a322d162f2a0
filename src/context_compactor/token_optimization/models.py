"""
Token Optimization Models

Data models shared by the section parser, the strategies and the optimizer.
"""

from dataclasses import dataclass, field
from typing import Any

SECTION_PRIORITIZATION = "sectionPrioritization"


@dataclass(frozen=True)
class Section:
    """
    A heading-delimited span of the source text.

    ``end`` is exclusive. Level 0 marks the preamble before the first heading.
    """

    level: int
    title: str
    content: str
    start: int
    end: int
    tokens: int
    priority: int


@dataclass(frozen=True)
class StrategyOutcome:
    """Text produced by a strategy that changed its input, with its token estimate."""

    text: str
    tokens: int


@dataclass
class StrategyApplication:
    """Log record for one strategy that changed the token estimate."""

    name: str
    tokens_before: int
    tokens_after: int
    reduction: int
    reduction_percent: float

    @classmethod
    def record(cls, name: str, tokens_before: int, tokens_after: int) -> "StrategyApplication":
        """Build a record, deriving reduction figures from the token counts."""
        reduction = tokens_before - tokens_after
        percent = (reduction / tokens_before) * 100 if tokens_before > 0 else 0.0
        return cls(
            name=name,
            tokens_before=tokens_before,
            tokens_after=tokens_after,
            reduction=reduction,
            reduction_percent=percent,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "tokens_before": self.tokens_before,
            "tokens_after": self.tokens_after,
            "reduction": self.reduction,
            "reduction_percent": self.reduction_percent,
        }


@dataclass
class OptimizationResult:
    """Result from context optimization."""

    context: str
    original_tokens: int
    optimized_tokens: int
    reduction_percent: float
    strategies: list[StrategyApplication] = field(default_factory=list)
    token_budget: int | None = None

    @property
    def tokens_saved(self) -> int:
        """Calculate tokens saved."""
        return self.original_tokens - self.optimized_tokens

    @property
    def within_budget(self) -> bool:
        """Whether the optimized estimate fits the requested budget."""
        if self.token_budget is None:
            return True
        return self.optimized_tokens <= self.token_budget

    @property
    def strategy_names(self) -> list[str]:
        return [application.name for application in self.strategies]

    def summary_line(self) -> str:
        """
        One-line provenance note for prompt footers.

        Example: ``*Optimized from 5200 to 3900 tokens using: trimComments, summarizeFiles*``
        """
        line = f"*Optimized from {self.original_tokens} to {self.optimized_tokens} tokens"
        if self.strategies:
            line += f" using: {', '.join(self.strategy_names)}"
        return line + "*"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "context": self.context,
            "original_tokens": self.original_tokens,
            "optimized_tokens": self.optimized_tokens,
            "tokens_saved": self.tokens_saved,
            "reduction_percent": self.reduction_percent,
            "token_budget": self.token_budget,
            "within_budget": self.within_budget,
            "strategies": [application.to_dict() for application in self.strategies],
        }
