"""
Path shortening strategy.

Shortens long file paths used as fenced-block labels and replaces every
literal occurrence of each path in the text.
"""

import re

from ..fences import find_fenced_blocks
from ..models import Section
from .base import OptimizationStrategy

MIN_PATH_CHARS = 30
MIN_PATH_PARTS = 3

_SEPARATOR_RE = re.compile(r"[/\\]")


def shorten_path(path: str) -> str:
    """
    Shorten a path.

    More than four parts: root + first real segment + ``...`` + last three parts,
    e.g. ``/home/user/project/src/app.js`` -> ``/home/.../project/src/app.js``.
    Otherwise every directory segment longer than three characters is cut to
    three, keeping the file name.
    """
    parts = _SEPARATOR_RE.split(path)

    if len(parts) > 4:
        first = next(part for part in parts if part)
        root = "/" if parts[0] == "" else ""
        return f"{root}{first}/.../{'/'.join(parts[-3:])}"

    last = len(parts) - 1
    return "/".join(part if index == last or len(part) <= 3 else part[:3] for index, part in enumerate(parts))


class ShortenPathsStrategy(OptimizationStrategy):
    """Shorten long multi-segment paths in fenced-block headers."""

    name = "shortenPaths"

    def find_paths(self, text: str) -> dict[str, str]:
        """Map of original path -> shortened path for every eligible block label."""
        paths: dict[str, str] = {}
        for block in find_fenced_blocks(text):
            path = block.header_path
            if path is None or path in paths:
                continue
            if len(path) < MIN_PATH_CHARS or len(_SEPARATOR_RE.split(path)) < MIN_PATH_PARTS:
                continue
            shortened = shorten_path(path)
            if shortened != path:
                paths[path] = shortened
        return paths

    def transform(self, text: str, sections: list[Section], tokens_before: int, tokens_target: int) -> str:
        # Longest first so a path that prefixes another is not replaced inside it
        for original, shortened in sorted(self.find_paths(text).items(), key=lambda item: -len(item[0])):
            text = text.replace(original, shortened)
        return text
