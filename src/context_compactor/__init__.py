"""
Context Compactor

Token-budget optimizer for generated project documentation.
"""

from .errors import CompactorError, ConfigurationError, ErrorCode, InvalidInputError
from .token_optimization import ContextOptimizer, OptimizationResult, TokenEstimator, optimize_context

__version__ = "1.0.0"

__all__ = [
    "ContextOptimizer",
    "OptimizationResult",
    "TokenEstimator",
    "optimize_context",
    "CompactorError",
    "ConfigurationError",
    "InvalidInputError",
    "ErrorCode",
    "__version__",
]
