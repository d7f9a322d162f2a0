"""
Base Strategy Interface

Defines the abstract interface for token reduction strategies.
All concrete strategies must implement this interface.

A strategy is a pure text -> text transform. It rescans the text it receives,
keeps no state between calls, and reports a no-op as None.
"""

from abc import ABC, abstractmethod
from typing import ClassVar

from ..estimator import TokenEstimator
from ..models import Section, StrategyOutcome

# Code bodies shorter than this are not worth rewriting
MIN_BLOCK_CHARS = 100


class OptimizationStrategy(ABC):
    """
    Abstract base class for reduction strategies.

    Subclasses implement ``transform``; ``apply`` handles change detection
    and token estimation so every strategy reports results the same way.
    """

    name: ClassVar[str]

    def __init__(self, estimator: TokenEstimator) -> None:
        """
        Initialize strategy.

        Args:
            estimator: Shared token estimator
        """
        self.estimator = estimator

    @abstractmethod
    def transform(
        self,
        text: str,
        sections: list[Section],
        tokens_before: int,
        tokens_target: int,
    ) -> str:
        """
        Produce the reduced text.

        Args:
            text: Current text
            sections: Sections parsed at the start of the optimize call
            tokens_before: Current token estimate of ``text``
            tokens_target: Token budget being aimed for

        Returns:
            Reduced text (the input itself when nothing applies)
        """
        pass

    def apply(
        self,
        text: str,
        sections: list[Section],
        tokens_before: int,
        tokens_target: int,
    ) -> StrategyOutcome | None:
        """
        Run the strategy.

        Returns:
            StrategyOutcome with the new text and its estimate, or None if nothing changed
        """
        optimized = self.transform(text, sections, tokens_before, tokens_target)
        if optimized == text:
            return None
        return StrategyOutcome(text=optimized, tokens=self.estimator.estimate(optimized))

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"
