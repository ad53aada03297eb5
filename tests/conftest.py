"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages.
"""

from __future__ import annotations

import logging
import sys
import textwrap
from collections.abc import Callable, Generator, Mapping
from pathlib import Path

import pytest

# Insert local src directory at the beginning of sys.path
_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

from scopegraph.extraction.models import ScopeFileAnalysis  # noqa: E402
from scopegraph.ops import analyze_source  # noqa: E402
from scopegraph.parsing.registry import ParserRegistry, default_registry  # noqa: E402


@pytest.fixture(autouse=True)
def _reset_root_handlers() -> Generator[None, None, None]:
    """Handlers bound to a captured stream must not outlive the test."""
    yield
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)


@pytest.fixture(scope="session")
def registry() -> ParserRegistry:
    """One registry shared by the session; grammars load once."""
    return default_registry()


@pytest.fixture
def extract(registry: ParserRegistry) -> Callable[..., ScopeFileAnalysis]:
    """Extract dedented source text as the file at ``path``."""

    def _extract(path: str, source: str, **kwargs: object) -> ScopeFileAnalysis:
        return analyze_source(path, textwrap.dedent(source).lstrip("\n"), registry, **kwargs)  # type: ignore[arg-type]

    return _extract


@pytest.fixture
def write_tree(tmp_path: Path) -> Callable[[Mapping[str, str]], Path]:
    """Write ``{relative path: dedented content}`` under tmp_path."""

    def _write(files: Mapping[str, str]) -> Path:
        for rel, content in files.items():
            path = tmp_path / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(textwrap.dedent(content).lstrip("\n"))
        return tmp_path

    return _write

