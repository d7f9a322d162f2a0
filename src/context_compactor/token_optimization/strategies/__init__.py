"""
Reduction Strategies

Six independent text -> text transforms behind one interface. The registry
order is the declaration order the optimizer runs them in.
"""

from ..estimator import TokenEstimator
from .base import MIN_BLOCK_CHARS, OptimizationStrategy
from .blank_lines import RemoveBlankLinesStrategy
from .comments import TrimCommentsStrategy
from .file_summary import SummarizeFilesStrategy, file_importance
from .indentation import ReduceIndentationStrategy
from .paths import ShortenPathsStrategy, shorten_path
from .skeleton import CodeSkeletonizationStrategy

STRATEGY_CLASSES: dict[str, type[OptimizationStrategy]] = {
    strategy.name: strategy
    for strategy in (
        TrimCommentsStrategy,
        ReduceIndentationStrategy,
        RemoveBlankLinesStrategy,
        SummarizeFilesStrategy,
        ShortenPathsStrategy,
        CodeSkeletonizationStrategy,
    )
}


def build_strategies(estimator: TokenEstimator) -> dict[str, OptimizationStrategy]:
    """
    Instantiate every strategy around a shared estimator.

    Args:
        estimator: Token estimator used for all strategy outcomes

    Returns:
        Strategy instances keyed by name, in declaration order
    """
    return {name: strategy_class(estimator) for name, strategy_class in STRATEGY_CLASSES.items()}


__all__ = [
    "MIN_BLOCK_CHARS",
    "OptimizationStrategy",
    "TrimCommentsStrategy",
    "ReduceIndentationStrategy",
    "RemoveBlankLinesStrategy",
    "SummarizeFilesStrategy",
    "ShortenPathsStrategy",
    "CodeSkeletonizationStrategy",
    "STRATEGY_CLASSES",
    "build_strategies",
    "file_importance",
    "shorten_path",
]
