"""
Indentation reduction strategy.

Rewrites code indentation to one space per nesting level.
"""

import math
import re
from collections import Counter
from functools import reduce

from ..fences import FencedBlock, rewrite_fenced_blocks
from ..models import Section
from .base import MIN_BLOCK_CHARS, OptimizationStrategy

_LEADING_WS_RE = re.compile(r"^[ \t]*")


def _is_comment_continuation(stripped: str) -> bool:
    # " * text" and " */" lines inside a block comment
    return stripped.startswith("*")


def indent_unit(widths: list[int]) -> int:
    """
    Prevailing indent unit: the most common step between consecutive indent widths.

    Ties go to the smaller step. Without any step the gcd of the widths is used.
    """
    steps = Counter(abs(current - previous) for previous, current in zip(widths, widths[1:]) if current != previous)
    if steps:
        return min(steps, key=lambda step: (-steps[step], step))
    return reduce(math.gcd, widths, 0) or 1


def reduce_code_indentation(code: str) -> str:
    """
    Collapse indentation to one space per level.

    A tab counts as one level; runs of spaces count as width // unit levels,
    and spaces left over from an uneven width are kept, so block comment
    continuation lines stay aligned under their opener.
    Code with at most one distinct indent width is returned unchanged.
    """
    lines = code.split("\n")
    content_lines = [line for line in lines if line.strip()]
    indents = [_LEADING_WS_RE.match(line).group(0) for line in content_lines]

    if len({indent for indent in indents if indent}) <= 1:
        return code

    widths = [
        len(indent)
        for line, indent in zip(content_lines, indents)
        if "\t" not in indent and not _is_comment_continuation(line.strip())
    ]
    unit = indent_unit(widths)
    has_tabs = any("\t" in indent for indent in indents)
    if unit == 1 and not has_tabs:
        return code

    reduced: list[str] = []
    for line in lines:
        if not line.strip():
            reduced.append("")
            continue
        indent = _LEADING_WS_RE.match(line).group(0)
        spaces = indent.count(" ")
        level = indent.count("\t") + spaces // unit + spaces % unit
        reduced.append(" " * level + line[len(indent):])

    return "\n".join(reduced)


class ReduceIndentationStrategy(OptimizationStrategy):
    """Shrink indentation inside fenced code spans."""

    name = "reduceIndentation"

    def transform(self, text: str, sections: list[Section], tokens_before: int, tokens_target: int) -> str:
        def _reduce(block: FencedBlock) -> str | None:
            if len(block.body) < MIN_BLOCK_CHARS:
                return None
            return block.replace_body(reduce_code_indentation(block.body))

        return rewrite_fenced_blocks(text, _reduce)
