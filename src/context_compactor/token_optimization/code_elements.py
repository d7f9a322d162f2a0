"""
Code Element Extraction

Pattern-based extraction of the declarations worth keeping when a code
excerpt is reduced to a stub. No parsing: patterns are line-based and lossy.
"""

import json
import logging
import re
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

JS_LANGUAGES = frozenset({"js", "jsx", "ts", "tsx", "mjs", "cjs", "javascript", "typescript"})
PYTHON_LANGUAGES = frozenset({"py", "pyi", "python"})

_JS_IMPORT_RE = re.compile(r"^import\s+.+?[;'\"]$", re.MULTILINE)
_JS_EXPORT_RE = re.compile(r"^(?:export\s+(?:const|let|var|function|class|default|async|\{)|module\.exports\b)[^\n]*", re.MULTILINE)
_JS_FUNCTION_RE = re.compile(r"^(?:export\s+)?(?:default\s+)?(?:async\s+)?function\*?\s+\w+\s*\([^)]*\)", re.MULTILINE)
_JS_CLASS_RE = re.compile(r"^(?:export\s+)?(?:default\s+)?class\s+\w+(?:\s+extends\s+[\w.]+)?", re.MULTILINE)

_PY_IMPORT_RE = re.compile(r"^(?:from\s+\S+\s+)?import\s+[^\n]+", re.MULTILINE)
_PY_EXPORT_RE = re.compile(r"^__all__\s*=[^\n]*", re.MULTILINE)
_PY_FUNCTION_RE = re.compile(r"^[ \t]*(?:async\s+)?def\s+\w+\s*\([^)]*\)(?:\s*->\s*[^:\n]+)?", re.MULTILINE)
_PY_CLASS_RE = re.compile(r"^[ \t]*class\s+\w+(?:\([^)]*\))?", re.MULTILINE)


@dataclass
class CodeElements:
    """Declarations found in a code excerpt."""

    imports: list[str] = field(default_factory=list)
    exports: list[str] = field(default_factory=list)
    functions: list[str] = field(default_factory=list)
    classes: list[str] = field(default_factory=list)

    def signature_lines(self) -> list[str]:
        """Exports, functions and classes in that order, without duplicates."""
        seen: set[str] = set()
        lines: list[str] = []
        for line in (*self.exports, *self.functions, *self.classes):
            if line not in seen:
                seen.add(line)
                lines.append(line)
        return lines


@dataclass(frozen=True)
class ComplexRegion:
    """A run of lines nested at least as deep as the complexity threshold."""

    start_line: int
    end_line: int
    lines: int


def _stripped(pattern: re.Pattern[str], code: str) -> list[str]:
    return [match.group(0).strip() for match in pattern.finditer(code)]


def extract_code_elements(code: str, language: str) -> CodeElements:
    """
    Extract key elements from code for structured summarization.

    Args:
        code: Code to analyze
        language: Language tag or file extension (e.g. "ts", "python")

    Returns:
        CodeElements; empty for unsupported languages
    """
    language = language.lower()

    if language in JS_LANGUAGES:
        return CodeElements(
            imports=_stripped(_JS_IMPORT_RE, code),
            exports=_stripped(_JS_EXPORT_RE, code),
            functions=_stripped(_JS_FUNCTION_RE, code),
            classes=_stripped(_JS_CLASS_RE, code),
        )

    if language in PYTHON_LANGUAGES:
        return CodeElements(
            imports=_stripped(_PY_IMPORT_RE, code),
            exports=_stripped(_PY_EXPORT_RE, code),
            functions=_stripped(_PY_FUNCTION_RE, code),
            classes=_stripped(_PY_CLASS_RE, code),
        )

    return CodeElements()


def summarize_json_keys(code: str) -> list[str]:
    """
    Top-level keys of a JSON object.

    Returns an empty list when the text is not a JSON object.
    """
    try:
        document = json.loads(code)
    except ValueError as e:
        logger.debug(f"Skipping key extraction for unparseable JSON: {e}")
        return []

    if not isinstance(document, dict):
        return []
    return list(document)


def identify_complex_regions(code: str, threshold: int = 3) -> list[ComplexRegion]:
    """
    Identify deeply nested regions of brace-delimited code.

    Depth is tracked from lines ending with ``{`` and starting with ``}``;
    a region opens when depth reaches the threshold and closes on the line
    where it drops below it. A region still open at the end runs to the last line.

    Args:
        code: Code to analyze
        threshold: Nesting depth that counts as complex

    Returns:
        Regions with 0-based start/end lines
    """
    regions: list[ComplexRegion] = []
    lines = code.split("\n")
    depth = 0
    region_start: int | None = None

    for index, line in enumerate(lines):
        stripped = line.strip()
        if stripped.endswith("{"):
            depth += 1
        elif stripped.startswith("}"):
            depth -= 1

        if region_start is None and depth >= threshold:
            region_start = index
        elif region_start is not None and depth < threshold:
            regions.append(ComplexRegion(region_start, index, index - region_start + 1))
            region_start = None

    if region_start is not None:
        last = len(lines) - 1
        regions.append(ComplexRegion(region_start, last, last - region_start + 1))

    return regions
