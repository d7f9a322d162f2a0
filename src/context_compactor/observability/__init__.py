"""
Context Compactor — Observability Module

Structured JSON logging for the package.
"""

from .logs import PACKAGE_LOGGER, JSONFormatter, setup_logging

__all__ = [
    "JSONFormatter",
    "PACKAGE_LOGGER",
    "setup_logging",
]
