"""
Context Compactor - Core Error Types

Defines the exception hierarchy for the context compactor.
All exceptions inherit from CompactorError for consistent error handling.

Over-budget optimization results are reported as data, never raised:
only caller contract violations and invalid configuration surface here.
"""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Error codes carried by every CompactorError and rendered by to_dict()."""

    # Input validation errors
    INVALID_INPUT = "INVALID_INPUT"
    INVALID_PARAMETER_TYPE = "INVALID_PARAMETER_TYPE"
    INVALID_PARAMETER_VALUE = "INVALID_PARAMETER_VALUE"

    # Configuration errors
    INVALID_CONFIGURATION = "INVALID_CONFIGURATION"

    # Internal errors
    INTERNAL_ERROR = "INTERNAL_ERROR"


class CompactorError(Exception):
    """Base exception for all context compactor errors."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        error_code: ErrorCode = ErrorCode.INTERNAL_ERROR,
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.error_code = error_code

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": self.__class__.__name__,
            "error_code": self.error_code.value,
            "message": self.message,
            "details": self.details,
        }


class ConfigurationError(CompactorError):
    """Raised when optimizer settings are invalid or cannot be loaded."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message, details, error_code=ErrorCode.INVALID_CONFIGURATION)


class InvalidInputError(CompactorError):
    """Raised when a caller passes arguments outside the optimizer contract."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        error_code: ErrorCode = ErrorCode.INVALID_INPUT,
    ):
        super().__init__(message, details, error_code=error_code)
