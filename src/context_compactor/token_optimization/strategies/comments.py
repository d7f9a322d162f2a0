"""
Comment trimming strategy.

Removes full-line and block comments from fenced code, keeping a one-line
summary of a leading documentation comment.
"""

import re

from ..fences import FencedBlock, rewrite_fenced_blocks
from ..models import Section
from .base import MIN_BLOCK_CHARS, OptimizationStrategy

HASH_COMMENT_LANGUAGES = frozenset(
    {"py", "python", "pyi", "sh", "bash", "zsh", "shell", "yaml", "yml", "toml", "rb", "ruby", "perl", "r", "dockerfile", "makefile"}
)

_DOC_HEADER_RE = re.compile(r"^\s*/\*\*.*?\*/", re.DOTALL)
# A block comment only starts after whitespace, punctuation or at the start of the body,
# so globs like "src/**/*.js" inside strings survive
_BLOCK_COMMENT_RE = re.compile(r"(?<![^\s;{}(),])/\*.*?\*/", re.DOTALL)

_REMOVED = "\x00"


def doc_comment_summary(header: str) -> str:
    """First descriptive line of a ``/** ... */`` comment, ignoring tag lines."""
    inner = header.strip()[3:-2]
    for line in inner.split("\n"):
        line = line.strip().lstrip("*").strip()
        if line and not line.startswith("@"):
            return line
    return ""


def _is_line_comment(stripped: str, hash_comments: bool) -> bool:
    if stripped.startswith("//"):
        return True
    return hash_comments and stripped.startswith("#") and not stripped.startswith("#!")


def trim_code_comments(code: str, language: str) -> str:
    """
    Remove comments from a code body.

    Lines left empty by comment removal are dropped; blank lines that were
    already blank are kept.
    """
    header = _DOC_HEADER_RE.match(code)
    summary = doc_comment_summary(header.group(0)) if header else ""

    marked = _BLOCK_COMMENT_RE.sub(_REMOVED, code)
    hash_comments = language.lower() in HASH_COMMENT_LANGUAGES

    kept: list[str] = []
    for line in marked.split("\n"):
        stripped = line.strip()
        if _REMOVED in line and not stripped.replace(_REMOVED, ""):
            continue
        if _is_line_comment(stripped, hash_comments):
            continue
        kept.append(line.replace(_REMOVED, "").rstrip() if _REMOVED in line else line)

    trimmed = "\n".join(kept)
    if summary:
        trimmed = f"/**\n * {summary}\n */\n{trimmed}"
    return trimmed


class TrimCommentsStrategy(OptimizationStrategy):
    """Strip comments from fenced code spans."""

    name = "trimComments"

    def transform(self, text: str, sections: list[Section], tokens_before: int, tokens_target: int) -> str:
        def _trim(block: FencedBlock) -> str | None:
            if len(block.body) < MIN_BLOCK_CHARS:
                return None
            trimmed = trim_code_comments(block.code, block.language)
            # Keep a "// path/to/file.js" label so summarizeFiles can still find the file
            if block.label_line is not None:
                trimmed = f"{block.label_line}\n{trimmed}"
            return block.replace_body(trimmed)

        return rewrite_fenced_blocks(text, _trim)
