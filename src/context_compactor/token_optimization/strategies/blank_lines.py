"""
Blank line removal strategy.

Collapses blank-line runs in code and prose, and drops blank lines
hugging braces inside code.
"""

import re

from ..fences import FencedBlock, fenced_spans, rewrite_fenced_blocks
from ..models import Section
from .base import MIN_BLOCK_CHARS, OptimizationStrategy

# Two or more consecutive blank (or whitespace-only) lines
_BLANK_RUN_RE = re.compile(r"\n(?:[ \t]*\n){2,}")
_AFTER_OPEN_BRACE_RE = re.compile(r"\{[ \t]*\n(?:[ \t]*\n)+")
_BEFORE_CLOSE_BRACE_RE = re.compile(r"\n(?:[ \t]*\n)+([ \t]*\})")


def collapse_blank_runs(text: str) -> str:
    """Keep at most one blank line between content lines."""
    return _BLANK_RUN_RE.sub("\n\n", text)


def collapse_prose_blank_runs(text: str) -> str:
    """Collapse blank runs outside fenced code; code bodies are not touched."""
    pieces: list[str] = []
    position = 0
    for start, end in fenced_spans(text):
        pieces.append(collapse_blank_runs(text[position:start]))
        pieces.append(text[start:end])
        position = end
    pieces.append(collapse_blank_runs(text[position:]))
    return "".join(pieces)


def remove_code_blank_lines(code: str) -> str:
    """Collapse blank runs and drop blank lines right after ``{`` or right before ``}``."""
    code = collapse_blank_runs(code)
    code = _AFTER_OPEN_BRACE_RE.sub("{\n", code)
    return _BEFORE_CLOSE_BRACE_RE.sub(r"\n\1", code)


class RemoveBlankLinesStrategy(OptimizationStrategy):
    """Remove redundant blank lines in code and prose."""

    name = "removeBlankLines"

    def transform(self, text: str, sections: list[Section], tokens_before: int, tokens_target: int) -> str:
        def _compact(block: FencedBlock) -> str | None:
            if len(block.body) < MIN_BLOCK_CHARS:
                return None
            return block.replace_body(remove_code_blank_lines(block.body))

        return collapse_prose_blank_runs(rewrite_fenced_blocks(text, _compact))
