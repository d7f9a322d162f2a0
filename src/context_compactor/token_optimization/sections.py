"""
Section Parsing and Prioritization

Splits documentation into heading-delimited sections, scores them, and
rebuilds a budget-constrained text from the most important ones when the
strategy pipeline alone cannot reach the budget.
"""

import logging
import re

from .estimator import TokenEstimator
from .fences import fenced_spans
from .models import Section, StrategyOutcome

logger = logging.getLogger(__name__)

HEADING_RE = re.compile(r"^(#{1,6})[ \t]+(\S[^\r\n]*?)[ \t]*\r?$", re.MULTILINE)

PREAMBLE_LEVEL = 0

HIGH_PRIORITY_KEYWORDS = ("overview", "summary", "purpose", "architecture", "api", "interface", "export")
MEDIUM_PRIORITY_KEYWORDS = ("structure", "usage", "flow", "data model", "relationships")
LOW_PRIORITY_KEYWORDS = ("implementation", "utilities", "helper", "details", "internal")

# Sections at or above this priority survive the fallback in full
ALWAYS_KEEP_PRIORITY = 8
TRUNCATED_SECTION_CHARS = 200
TRUNCATION_MARKER = "\n\n*[Section truncated to save tokens]*"


def score_section(title: str, level: int) -> int:
    """
    Get section priority based on title and heading level.

    Shallower headings score higher; keyword matches in the title adjust the
    score (only the first matching keyword group counts).

    Args:
        title: Section title
        level: Heading level (0 for preamble)

    Returns:
        Priority in [0, 10], higher = more important
    """
    priority = 10 - min(level, 5)

    lower_title = title.lower()
    if any(keyword in lower_title for keyword in HIGH_PRIORITY_KEYWORDS):
        priority += 3
    elif any(keyword in lower_title for keyword in MEDIUM_PRIORITY_KEYWORDS):
        priority += 1
    elif any(keyword in lower_title for keyword in LOW_PRIORITY_KEYWORDS):
        priority -= 2

    return max(0, min(10, priority))


def _inside(position: int, spans: list[tuple[int, int]]) -> bool:
    return any(start < position < end for start, end in spans)


def _make_section(text: str, level: int, title: str, start: int, end: int, estimator: TokenEstimator) -> Section:
    content = text[start:end]
    return Section(
        level=level,
        title=title,
        content=content,
        start=start,
        end=end,
        tokens=estimator.estimate(content),
        priority=score_section(title, level),
    )


def parse_sections(text: str, estimator: TokenEstimator) -> list[Section]:
    """
    Parse text into heading-delimited sections.

    Sections partition the text completely, in source order:
    - non-blank text before the first heading becomes a level-0 preamble section
    - blank text before the first heading is folded into the first section
    - ``#`` lines inside fenced code spans are not headings

    Args:
        text: Text to parse
        estimator: Token estimator for per-section counts

    Returns:
        Sections ordered by source offset
    """
    if not text:
        return []

    spans = fenced_spans(text)
    headings = [match for match in HEADING_RE.finditer(text) if not _inside(match.start(), spans)]

    if not headings:
        return [_make_section(text, PREAMBLE_LEVEL, "", 0, len(text), estimator)]

    sections: list[Section] = []
    first_heading = headings[0].start()
    if text[:first_heading].strip():
        sections.append(_make_section(text, PREAMBLE_LEVEL, "", 0, first_heading, estimator))
        first_section_start = first_heading
    else:
        first_section_start = 0

    for index, match in enumerate(headings):
        start = first_section_start if index == 0 else match.start()
        end = headings[index + 1].start() if index + 1 < len(headings) else len(text)
        sections.append(_make_section(text, len(match.group(1)), match.group(2).strip(), start, end, estimator))

    return sections


def truncate_section(section: Section) -> str:
    """Content of a section cut down to a short excerpt plus the truncation marker."""
    return section.content[:TRUNCATED_SECTION_CHARS] + TRUNCATION_MARKER


def prioritize_sections(
    sections: list[Section],
    token_budget: int,
    estimator: TokenEstimator,
) -> StrategyOutcome | None:
    """
    Keep the most important sections to fit the token budget.

    Sections are visited by priority (descending, source order on ties):
    priority >= 8 is always kept in full; others are kept in full while they fit,
    truncated while budget remains, and dropped once it is exhausted. The kept
    sections are concatenated back in source order.

    Args:
        sections: Parsed sections of the current text
        token_budget: Maximum allowed tokens
        estimator: Token estimator

    Returns:
        StrategyOutcome, or None if there is nothing to prioritize
    """
    if not sections:
        return None

    total_tokens = sum(section.tokens for section in sections)
    if total_tokens <= token_budget:
        return None

    by_priority = sorted(sections, key=lambda section: -section.priority)

    kept: dict[int, str] = {}
    tokens_used = 0
    truncated = dropped = 0

    for section in by_priority:
        if section.priority >= ALWAYS_KEEP_PRIORITY or tokens_used + section.tokens <= token_budget:
            kept[section.start] = section.content
            tokens_used += section.tokens
        elif tokens_used < token_budget:
            stub = truncate_section(section)
            kept[section.start] = stub
            tokens_used += estimator.estimate(stub)
            truncated += 1
        else:
            dropped += 1

    optimized = "".join(kept[start] for start in sorted(kept))

    logger.debug(
        f"Section prioritization kept {len(kept) - truncated} sections in full",
        extra={"truncated": truncated, "dropped": dropped, "token_budget": token_budget},
    )

    return StrategyOutcome(text=optimized, tokens=estimator.estimate(optimized))
