"""
File summarization strategy.

Replaces embedded files (fenced blocks labelled with a path) by short
signature stubs, least important files first, until enough tokens are saved.
"""

import logging
import re
from dataclasses import dataclass
from pathlib import PurePosixPath

from ..code_elements import extract_code_elements, summarize_json_keys
from ..fences import FencedBlock, find_fenced_blocks
from ..models import Section
from .base import OptimizationStrategy
from .comments import HASH_COMMENT_LANGUAGES

logger = logging.getLogger(__name__)

CONFIG_FILES = frozenset(
    {
        "package.json",
        "package-lock.json",
        "yarn.lock",
        "pnpm-lock.yaml",
        "tsconfig.json",
        "webpack.config.js",
        "config.js",
        "pyproject.toml",
        "setup.cfg",
        "setup.py",
        "requirements.txt",
        "poetry.lock",
        "Pipfile",
        "Pipfile.lock",
        "Cargo.toml",
        "Cargo.lock",
        "go.mod",
        "go.sum",
    }
)
TYPE_EXTENSIONS = frozenset({"ts", "tsx", "pyi"})
INDEX_FILES = frozenset({"index.js", "index.ts", "__init__.py"})
ASSET_EXTENSIONS = frozenset({"css", "scss", "less", "svg", "html"})

_TEST_NAME_RE = re.compile(r"^test[\w.-]*\.(?:js|jsx|ts|tsx)$|^test_\w+\.py$|^\w+_test\.py$|^conftest\.py$")

OMITTED_NOTE = "Full file content omitted to save tokens"


def file_name(path: str) -> str:
    return PurePosixPath(path.replace("\\", "/")).name


def file_extension(path: str) -> str:
    name = file_name(path)
    return name.rsplit(".", 1)[-1].lower() if "." in name else ""


def file_importance(path: str) -> int:
    """
    Importance of an embedded file (lower = summarized first).

    Config and lock files 8, type files 7, index files 6, default 5,
    styles/markup 4, tests 3.
    """
    name = file_name(path)
    extension = file_extension(path)

    if name in CONFIG_FILES:
        return 8
    if ".test." in name or ".spec." in name or _TEST_NAME_RE.match(name):
        return 3
    if extension in TYPE_EXTENSIONS or name.endswith(".d.ts"):
        return 7
    if name in INDEX_FILES:
        return 6
    if extension in ASSET_EXTENSIONS:
        return 4
    return 5


def _comment(text: str, language: str) -> str:
    if language in HASH_COMMENT_LANGUAGES:
        return f"# {text}"
    return f"/* {text} */"


def build_file_summary(block: FencedBlock, path: str) -> str:
    """Stub block listing the file's signatures (or top-level JSON keys)."""
    extension = file_extension(path)
    language = (block.language or extension).lower()
    code = block.code

    key_lines: list[str] = []
    if extension == "json":
        keys = summarize_json_keys(code)
        if keys:
            key_lines.append("// Main properties:")
            key_lines.extend(f"// - {key}" for key in keys)
    else:
        key_lines.extend(extract_code_elements(code, extension or language).signature_lines())

    lines = [_comment(f"FILE SUMMARY: {path}", language), *key_lines, _comment(OMITTED_NOTE, language)]
    return block.render("\n".join(lines), language=block.language or extension)


@dataclass(frozen=True)
class _FileCandidate:
    block: FencedBlock
    path: str
    importance: int
    tokens: int


class SummarizeFilesStrategy(OptimizationStrategy):
    """Swap low-importance embedded files for signature stubs."""

    name = "summarizeFiles"

    def find_files(self, text: str) -> list[_FileCandidate]:
        """Embedded files ordered by importance (ascending), then source order."""
        candidates = []
        for block in find_fenced_blocks(text):
            path = block.header_path
            if path is None:
                continue
            candidates.append(
                _FileCandidate(
                    block=block,
                    path=path,
                    importance=file_importance(path),
                    tokens=self.estimator.estimate(text[block.start:block.end], is_code=True),
                )
            )
        return sorted(candidates, key=lambda candidate: (candidate.importance, candidate.block.start))

    def transform(self, text: str, sections: list[Section], tokens_before: int, tokens_target: int) -> str:
        tokens_to_reduce = tokens_before - tokens_target
        if tokens_to_reduce <= 0:
            return text

        files = self.find_files(text)
        if not files:
            return text

        replacements: dict[int, tuple[int, str]] = {}
        tokens_reduced = 0

        for candidate in files:
            summary = build_file_summary(candidate.block, candidate.path)
            saved = candidate.tokens - self.estimator.estimate(summary, is_code=True)
            if saved <= 0:
                continue

            replacements[candidate.block.start] = (candidate.block.end, summary)
            tokens_reduced += saved
            logger.debug(
                f"Summarized {candidate.path}",
                extra={"importance": candidate.importance, "tokens_saved": saved},
            )

            if tokens_reduced >= tokens_to_reduce:
                break

        if not replacements:
            return text

        pieces: list[str] = []
        cursor = 0
        for start in sorted(replacements):
            end, summary = replacements[start]
            pieces.append(text[cursor:start])
            pieces.append(summary)
            cursor = end
        pieces.append(text[cursor:])
        return "".join(pieces)
