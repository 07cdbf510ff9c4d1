"""Shared pytest fixtures for code-commenter test suite.

This module provides common fixtures used across unit and integration tests,
reducing duplication and standardizing test setup.
"""

import shutil

# Add src to path for imports
import sys
import tempfile
from pathlib import Path
from typing import Callable, Generator

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from code_commenter.features.commenting.syntax_tree import parse_source  # noqa: E402
from code_commenter.models.config import CommenterConfig  # noqa: E402
from code_commenter.models.syntax import FunctionNode, FunctionSite, SourceLanguage  # noqa: E402

# ============================================================================
# Temporary Directory Fixtures
# ============================================================================


@pytest.fixture
def temp_dir() -> Generator[str, None, None]:
    """Create a temporary directory for test isolation.

    Automatically cleaned up after test completion.

    Yields:
        str: Path to temporary directory
    """
    tmp = tempfile.mkdtemp()
    yield tmp
    shutil.rmtree(tmp, ignore_errors=True)


@pytest.fixture
def temp_project_dir(temp_dir) -> str:
    """Create a temporary project with a few JavaScript and TypeScript files.

    Layout:
        src/math.js        undocumented functions
        src/documented.js  already documented
        src/types.ts       TypeScript class
        node_modules/dep/index.js  must never be touched

    Returns:
        str: Path to project root
    """
    project = Path(temp_dir) / "project"
    (project / "src").mkdir(parents=True)
    (project / "node_modules" / "dep").mkdir(parents=True)

    (project / "src" / "math.js").write_text(
        "function add(a, b) {\n  return a + b;\n}\n\nconst double = (x) => x * 2;\n",
        encoding="utf-8",
    )
    (project / "src" / "documented.js").write_text(
        "// Subtracts b from a\nfunction sub(a, b) {\n  return a - b;\n}\n",
        encoding="utf-8",
    )
    (project / "src" / "types.ts").write_text(
        "class User {\n  constructor(public name: string, private age?: number) {}\n}\n",
        encoding="utf-8",
    )
    (project / "node_modules" / "dep" / "index.js").write_text("function dep(x) {}\n", encoding="utf-8")

    return str(project)


# ============================================================================
# Parsing Fixtures
# ============================================================================


@pytest.fixture
def parse_sites() -> Callable[..., list]:
    """Parse source text and return its function sites.

    Returns:
        Callable taking (source, language=SourceLanguage.JAVASCRIPT)
    """
    def _parse(source: str, language: SourceLanguage = SourceLanguage.JAVASCRIPT) -> list:
        return parse_source(source, language).functions

    return _parse


@pytest.fixture
def parse_function() -> Callable[..., FunctionNode]:
    """Parse source text and return the first function node in it.

    Returns:
        Callable taking (source, language=SourceLanguage.JAVASCRIPT)
    """
    def _parse(source: str, language: SourceLanguage = SourceLanguage.JAVASCRIPT) -> FunctionNode:
        sites: list[FunctionSite] = parse_source(source, language).functions
        assert sites, f"no function found in: {source!r}"
        return sites[0].function

    return _parse


# ============================================================================
# Configuration Fixtures
# ============================================================================


@pytest.fixture
def quiet_config() -> CommenterConfig:
    """Configuration without TODO lines, so rendered blocks are minimal."""
    return CommenterConfig(todo=False)


# ============================================================================
# Sample Code Fixtures
# ============================================================================


@pytest.fixture
def sample_js_code() -> str:
    """Provide sample JavaScript with several kinds of functions.

    Returns:
        str: JavaScript source
    """
    return """function add(a, b) {
  return a + b;
}

const greet = (name = "world") => `Hello ${name}`;

class Counter {
  constructor(start) {
    this.value = start;
  }

  get current() {
    return this.value;
  }

  increment(step = 1) {
    this.value += step;
  }
}
"""


@pytest.fixture
def sample_ts_code() -> str:
    """Provide sample TypeScript with annotations and parameter properties.

    Returns:
        str: TypeScript source
    """
    return """export function format(value: number, unit?: string): string {
  return value + (unit ?? "");
}

export class Service {
  constructor(private readonly url: string, public retries: number = 3) {}

  async fetch(...ids: number[]): Promise<Item[]> {
    return [];
  }
}
"""
