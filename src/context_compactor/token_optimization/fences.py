"""
Fenced code span scanning.

Shared by the section parser (headings never start inside a fence) and by every
strategy. Each caller rescans the text it is given; nothing is cached between calls.
"""

import re
from collections.abc import Callable, Iterator
from dataclasses import dataclass

# Opening fence + optional language tag + optional info text, body, closing fence.
# The body is optional and tried empty first, so an empty block never pairs with
# the next block's fence. A CR before a line break is allowed and left in place.
FENCE_RE = re.compile(
    r"^```(?P<lang>[\w+#.-]*)[ \t]*(?P<info>[^\r\n`]*?)[ \t]*\r?\n(?:(?P<body>.*?)\n)??```[ \t]*(?=\r?$)",
    re.MULTILINE | re.DOTALL,
)

_COMMENT_WRAPPER_RE = re.compile(r"^(?://+|#+|/\*+|<!--|--|;+)?\s*(?P<inner>.*?)\s*(?:\*+/|-->)?$")
_PATH_RE = re.compile(r"^(?:[A-Za-z]:)?[\w.@~+-]*(?:[/\\][\w.@~+-]+)+[/\\]?$")


@dataclass(frozen=True)
class FencedBlock:
    """A fenced code span located in a text."""

    start: int
    end: int
    language: str
    info: str
    body: str
    opening: str

    @property
    def header_path(self) -> str | None:
        """
        Path the block is labelled with, if any.

        The info text after the language tag wins; otherwise the first body line
        is used, with a leading comment marker stripped.
        """
        candidates = [self.info] if self.info else []
        first_line = self.body.split("\n", 1)[0]
        candidates.append(first_line)

        for candidate in candidates:
            match = _COMMENT_WRAPPER_RE.match(candidate.strip())
            inner = match.group("inner") if match else candidate.strip()
            if is_path_like(inner):
                return inner
        return None

    @property
    def label_line(self) -> str | None:
        """First body line when it carries the path label, otherwise None."""
        path = self.header_path
        if path is None or (self.info and path in self.info):
            return None
        return self.body.split("\n", 1)[0]

    @property
    def code(self) -> str:
        """Body without the path label line, when the label was taken from the body."""
        if self.label_line is None:
            return self.body
        parts = self.body.split("\n", 1)
        return parts[1] if len(parts) > 1 else ""

    def render(self, body: str, language: str | None = None) -> str:
        """
        Rebuild the block with a new body.

        The original opening line is kept unless a new language tag is given.
        """
        opening = self.opening if language is None else f"```{language}"
        return f"{opening}\n{body}\n```"

    def replace_body(self, body: str) -> str | None:
        """Rendered block with a new body, or None when the body is unchanged."""
        if body == self.body:
            return None
        return self.render(body)


def is_path_like(value: str) -> bool:
    """True for a single token containing at least one path separator."""
    return bool(value) and bool(_PATH_RE.match(value))


def _block_from_match(match: re.Match[str]) -> FencedBlock:
    return FencedBlock(
        start=match.start(),
        end=match.end(),
        language=match.group("lang"),
        info=match.group("info"),
        body=match.group("body") or "",
        opening=match.group(0).split("\n", 1)[0],
    )


def find_fenced_blocks(text: str) -> Iterator[FencedBlock]:
    """Yield fenced blocks in source order."""
    for match in FENCE_RE.finditer(text):
        yield _block_from_match(match)


def fenced_spans(text: str) -> list[tuple[int, int]]:
    """Character spans (start, end) covered by fenced blocks."""
    return [(block.start, block.end) for block in find_fenced_blocks(text)]


def rewrite_fenced_blocks(text: str, rewrite: Callable[[FencedBlock], str | None]) -> str:
    """
    Rewrite every fenced block through a callback.

    The callback returns the replacement for the whole block, or None to keep it.
    """

    def _replace(match: re.Match[str]) -> str:
        replacement = rewrite(_block_from_match(match))
        return match.group(0) if replacement is None else replacement

    return FENCE_RE.sub(_replace, text)
