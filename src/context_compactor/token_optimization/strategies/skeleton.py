"""
Code skeletonization strategy.

Replaces function and class bodies with placeholder comments, keeping
signatures. Brace languages are handled by brace counting, Python by
indentation. Both are line based and lossy.
"""

import re

from ..code_elements import PYTHON_LANGUAGES
from ..fences import FencedBlock, rewrite_fenced_blocks
from ..models import Section
from .base import OptimizationStrategy

MIN_SKELETON_CHARS = 200

BRACE_LANGUAGES = frozenset(
    {"js", "ts", "jsx", "tsx", "mjs", "cjs", "javascript", "typescript", "java", "c", "cpp", "c++", "cs", "csharp", "php"}
)
SUPPORTED_LANGUAGES = BRACE_LANGUAGES | PYTHON_LANGUAGES

IMPLEMENTATION_OMITTED = "/* Implementation omitted */"
METHOD_OMITTED = "{ /* Method implementation omitted */ }"
PYTHON_OMITTED = "...  # implementation omitted"

CONTROL_KEYWORDS = frozenset(
    {"if", "for", "foreach", "while", "switch", "catch", "else", "elseif", "return", "do", "try", "with", "using", "lock", "synchronized", "new", "function"}
)

_STRING_RE = re.compile(r'"(?:\\.|[^"\\])*"|\'(?:\\.|[^\'\\])*\'|`(?:\\.|[^`\\])*`')
_LINE_COMMENT_RE = re.compile(r"//.*$")
_INDENT_RE = re.compile(r"^[ \t]*")

_CLASS_HEAD_RE = re.compile(
    r"^[ \t]*(?:export\s+)?(?:default\s+)?"
    r"(?:(?:public|private|protected|internal|abstract|final|static|sealed|partial)\s+)*"
    r"class\s+\w+[^;{]*\{\s*$"
)
_JS_FUNCTION_HEAD_RE = re.compile(r"^[ \t]*(?:export\s+)?(?:default\s+)?(?:async\s+)?function\b[^;]*\{\s*$")
_ARROW_HEAD_RE = re.compile(
    r"^[ \t]*(?:export\s+)?(?:const|let|var)\s+\w+\s*=\s*(?:async\s*)?(?:\([^)]*\)|\w+)\s*(?::\s*[^=]+)?=>\s*\{\s*$"
)
# Typed functions and methods: int main(...) {, public static void run() throws X {, function foo(): int {
_TYPED_HEAD_RE = re.compile(
    r"^[ \t]*(?:[\w<>\[\],.*&:?]+\s+)+[*&]?(?P<name>~?[\w:]+)\s*\([^;]*\)\s*(?:const\s*)?"
    r"(?:throws\s+[\w.,\s]+)?(?::\s*[\w<>\[\]?|, ]+)?\{\s*$"
)
# Method shorthand inside class bodies: foo(a) {, async bar() {, static get baz() {
_METHOD_HEAD_RE = re.compile(
    r"^[ \t]*(?:(?:public|private|protected|static|async|readonly|override|abstract|final|virtual|get|set)\s+)*"
    r"\*?(?P<name>[#$\w]+)\s*\([^;]*\)\s*(?::\s*[^{]+)?\{\s*$"
)
_METHOD_DONE_RE = re.compile(r"\{ /\* Method implementation omitted \*/ \}\s*$")

_PY_DEF_RE = re.compile(r"^(?P<indent>[ \t]*)(?:async\s+)?def\s+\w+\s*\(.*\)\s*(?:->\s*[^:]+)?:\s*(?:#.*)?$")


def _brace_delta(line: str) -> int:
    code = _LINE_COMMENT_RE.sub("", _STRING_RE.sub('""', line))
    return code.count("{") - code.count("}")


def _find_block_end(lines: list[str], start: int) -> int | None:
    """Index of the line closing the block opened on ``lines[start]``."""
    depth = 0
    for index in range(start, len(lines)):
        depth += _brace_delta(lines[index])
        if depth <= 0:
            return index
    return None


def _indent(line: str) -> str:
    match = _INDENT_RE.match(line)
    return match.group(0) if match else ""


def _named_head(pattern: re.Pattern[str], line: str) -> bool:
    match = pattern.match(line)
    return bool(match) and match.group("name") not in CONTROL_KEYWORDS


def _is_function_head(line: str) -> bool:
    return bool(_JS_FUNCTION_HEAD_RE.match(line) or _ARROW_HEAD_RE.match(line)) or _named_head(_TYPED_HEAD_RE, line)


def _is_method_head(line: str) -> bool:
    return _is_function_head(line) or _named_head(_METHOD_HEAD_RE, line)


def _method_signatures(body: list[str]) -> list[str]:
    """Top-level method signatures of a class body, each with an omitted-body marker."""
    signatures: list[str] = []
    depth = 0
    index = 0
    while index < len(body):
        line = body[index]
        if depth == 0 and _METHOD_DONE_RE.search(line):
            signatures.append(line)
        elif depth == 0 and _is_method_head(line):
            end = _find_block_end(body, index)
            if end is None:
                break
            signatures.append(f"{line.rstrip()[:-1].rstrip()} {METHOD_OMITTED}")
            index = end + 1
            continue
        else:
            depth += _brace_delta(line)
        index += 1
    return signatures


def skeletonize_brace_code(code: str) -> str:
    """Replace function and class bodies in brace-delimited code."""
    lines = code.split("\n")
    output: list[str] = []
    index = 0

    while index < len(lines):
        line = lines[index]
        is_class = bool(_CLASS_HEAD_RE.match(line))
        if not is_class and not _is_function_head(line):
            output.append(line)
            index += 1
            continue

        end = _find_block_end(lines, index)
        if end is None or end == index:
            output.append(line)
            index += 1
            continue

        body = lines[index + 1:end]
        placeholder = [f"{_indent(line)}    {IMPLEMENTATION_OMITTED}"]
        if is_class:
            body = _method_signatures(body) or placeholder
        else:
            body = placeholder

        output.append(line)
        output.extend(body)
        output.append(lines[end])
        index = end + 1

    return "\n".join(output)


def skeletonize_python_code(code: str) -> str:
    """Replace ``def`` bodies with an ellipsis placeholder, keeping signatures and decorators."""
    lines = code.split("\n")
    output: list[str] = []
    index = 0

    while index < len(lines):
        line = lines[index]
        match = _PY_DEF_RE.match(line)
        output.append(line)
        index += 1
        if match is None:
            continue

        def_width = len(match.group("indent"))
        body_end = index
        last_content = index - 1
        while body_end < len(lines):
            candidate = lines[body_end]
            if candidate.strip():
                if len(_indent(candidate)) <= def_width:
                    break
                last_content = body_end
            body_end += 1

        if last_content < index:
            continue

        body_indent = next(_indent(candidate) for candidate in lines[index:last_content + 1] if candidate.strip())
        output.append(f"{body_indent}{PYTHON_OMITTED}")
        index = last_content + 1

    return "\n".join(output)


def skeletonize_code(code: str, language: str) -> str:
    """Skeletonize code in a supported language; other code is returned unchanged."""
    language = language.lower()
    if language in PYTHON_LANGUAGES:
        return skeletonize_python_code(code)
    if language in BRACE_LANGUAGES:
        return skeletonize_brace_code(code)
    return code


class CodeSkeletonizationStrategy(OptimizationStrategy):
    """Reduce code spans to their signatures."""

    name = "codeSkeletonization"

    def transform(self, text: str, sections: list[Section], tokens_before: int, tokens_target: int) -> str:
        def _skeletonize(block: FencedBlock) -> str | None:
            if len(block.body) < MIN_SKELETON_CHARS or block.language.lower() not in SUPPORTED_LANGUAGES:
                return None
            return block.replace_body(skeletonize_code(block.body, block.language))

        return rewrite_fenced_blocks(text, _skeletonize)
