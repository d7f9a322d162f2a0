"""
Token Estimator Module

Approximates token counts from character length. This is the single counting
primitive of the optimizer: every component estimates through one
TokenEstimator so that a ratio change applies everywhere at once.
"""

import math

from ..errors import ConfigurationError

DEFAULT_CHARS_PER_TOKEN = 4.0
DEFAULT_CODE_CHARS_PER_TOKEN = 3.5


def estimate_tokens(text: str | None, chars_per_token: float = DEFAULT_CHARS_PER_TOKEN) -> int:
    """
    Estimate token count using a character ratio.

    Args:
        text: Text content (None counts as empty)
        chars_per_token: Average characters per token

    Returns:
        ceil(len(text) / chars_per_token), 0 for empty input
    """
    if not text:
        return 0
    return math.ceil(len(text) / chars_per_token)


class TokenEstimator:
    """
    Character-ratio token estimator.

    Prose and code use different ratios since code is usually
    more token-dense than English text.
    """

    def __init__(
        self,
        chars_per_token: float = DEFAULT_CHARS_PER_TOKEN,
        code_chars_per_token: float = DEFAULT_CODE_CHARS_PER_TOKEN,
    ) -> None:
        """
        Initialize token estimator.

        Args:
            chars_per_token: Characters per token for prose
            code_chars_per_token: Characters per token for code

        Raises:
            ConfigurationError: If a ratio is not positive
        """
        for name, ratio in (("chars_per_token", chars_per_token), ("code_chars_per_token", code_chars_per_token)):
            if ratio <= 0:
                raise ConfigurationError(
                    f"{name} must be positive",
                    details={name: ratio},
                )
        self.chars_per_token = float(chars_per_token)
        self.code_chars_per_token = float(code_chars_per_token)

    def estimate(self, text: str | None, is_code: bool = False) -> int:
        """
        Estimate token count for text.

        Args:
            text: Text content
            is_code: Use the code ratio instead of the prose ratio

        Returns:
            Estimated token count
        """
        return estimate_tokens(text, self.code_chars_per_token if is_code else self.chars_per_token)

    def __repr__(self) -> str:
        return (
            f"TokenEstimator(chars_per_token={self.chars_per_token}, "
            f"code_chars_per_token={self.code_chars_per_token})"
        )
