"""
Context Compactor — Test Configuration and Shared Fixtures

Provides pytest configuration and shared fixtures for unit and integration tests.
"""

import os
from collections.abc import Generator

import pytest

from context_compactor.config import loader
from context_compactor.token_optimization import ContextOptimizer, TokenEstimator

# Keep a developer's .env or shell settings out of the tests
for _name in ("COMPACTOR_CHARS_PER_TOKEN", "COMPACTOR_CODE_CHARS_PER_TOKEN", "COMPACTOR_DISABLED_STRATEGIES"):
    os.environ.pop(_name, None)
os.environ["COMPACTOR_LOG_LEVEL"] = "DEBUG"


@pytest.fixture(autouse=True)
def reset_settings() -> Generator[None, None, None]:
    """Reset the cached settings around each test to prevent state leakage."""
    loader._settings_instance = None
    yield
    loader._settings_instance = None


@pytest.fixture
def estimator() -> TokenEstimator:
    """Estimator with the default ratios (4 prose, 3.5 code)."""
    return TokenEstimator()


@pytest.fixture
def optimizer() -> ContextOptimizer:
    """Optimizer with default settings."""
    return ContextOptimizer()


@pytest.fixture
def commented_js_block() -> str:
    """A JavaScript body with a doc header, line comments and block comments."""
    return (
        "/**\n"
        " * Parses the configuration file.\n"
        " * @param {string} path\n"
        " */\n"
        "function parse(path) {\n"
        "  // read the file\n"
        "  const raw = read(path); /* inline */\n"
        "  /* block\n"
        "     comment */\n"
        "  return JSON.parse(raw);\n"
        "}"
    )


@pytest.fixture
def sectioned_prose() -> str:
    """Prose-only document with high, medium and low priority sections."""
    return (
        "# Overview\n"
        "The scanner walks the project tree and records every module it finds.\n"
        "## Usage\n"
        "Call scan() with a root directory and read the returned registry.\n"
        "### Implementation details\n"
        + "The walker keeps a queue of directories and expands them breadth first. " * 20
        + "\n"
    )


def _fenced(language: str, body: str, info: str = "") -> str:
    """Render a fenced code block."""
    opening = f"```{language} {info}" if info else f"```{language}"
    return f"{opening}\n{body}\n```"


@pytest.fixture
def embedded_files_doc() -> str:
    """Module summary embedding five files of different importance."""
    test_body = "\n".join(
        f'  it("adds {i} and one", () => {{ expect(add({i}, 1)).toBe({i + 1}); }});' for i in range(30)
    )
    files = [
        _fenced("json", 'app/package.json\n{"name": "app", "version": "1.0.0", "main": "src/index.js"}'),
        _fenced("ts", "app/src/types.ts\nexport interface User {\n  id: string;\n  name: string;\n}"),
        _fenced("js", "app/src/index.js\nexport { start } from './server';\nexport default start;"),
        _fenced(
            "js",
            "app/src/server.js\nexport function start(port) {\n  return listen(port);\n}\n"
            "function listen(port) {\n  console.log(`listening on ${port}`);\n  return port;\n}",
        ),
        _fenced("js", f'app/src/server.test.js\ndescribe("add", () => {{\n{test_body}\n}});'),
    ]
    return "# Module: app\n\n## Files\n\n" + "\n\n".join(files) + "\n"
