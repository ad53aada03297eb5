"""Scope extraction entry point.

Usage::

    extractor = ScopeExtractor(default_registry())
    analysis = extractor.extract_source("src/shapes.ts", source_bytes)
    for scope in analysis.scopes:
        print(scope.type, scope.name, scope.start_line, scope.end_line)
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from scopegraph.core.logging import get_logger
from scopegraph.extraction.languages import get_strategy
from scopegraph.extraction.models import ScopeFileAnalysis
from scopegraph.extraction.walker import ExtractionContext, content_hash
from scopegraph.parsing.registry import ParserRegistry

log = get_logger(__name__)


class ScopeExtractor:
    """Turns a parsed syntax tree into a ``ScopeFileAnalysis``.

    Extraction is a pure walk over one tree: no state is shared between
    calls, so one extractor can serve concurrent worker threads.
    """

    def __init__(self, registry: ParserRegistry, *, include_module_scopes: bool = True) -> None:
        self._registry = registry
        self._include_module_scopes = include_module_scopes

    def extract_source(
        self,
        file_path: str | Path,
        source: bytes | str,
        language: str | None = None,
    ) -> ScopeFileAnalysis:
        """Parse and extract ``source``.  Language defaults to the path's extension.

        Raises:
            LanguageError: Unsupported language or missing grammar.
        """
        if isinstance(source, str):
            source = source.encode("utf-8")
        language = language or self._registry.language_for_path(file_path)
        result = self._registry.parse(language, source)
        return self.extract(result.tree, source, str(file_path), language)

    def extract(self, tree: Any, source: bytes, file_path: str, language: str) -> ScopeFileAnalysis:
        """Extract scopes from an already parsed tree.

        Malformed source never raises: syntax errors and builder failures are
        reported through ``ast_issues`` on the file and on affected scopes.
        """
        pack = self._registry.get_pack(language)
        strategy = get_strategy(pack.family)
        root = getattr(tree, "root_node", tree)
        ctx = ExtractionContext(pack=pack, strategy=strategy, source=source, file_path=file_path)
        ctx.syntax_problems = _syntax_problems(root, pack.node_types.errors)

        ctx.imports = strategy.extract_imports(ctx, root)
        try:
            ctx.walk(root, 0, None)
        except RecursionError:
            ctx.issues.append("Maximum nesting depth exceeded; nested scopes truncated")
            log.warning("extraction_truncated", file=file_path, language=language)
        if self._include_module_scopes:
            ctx.add_module_scopes(root)

        scopes = sorted(ctx.scopes, key=lambda s: (s.start_line, s.depth))
        issues = [msg for _, _, msg in ctx.syntax_problems] + ctx.issues
        exports = [name for s in scopes if s.parent is None for name in s.exports]
        dependencies = sorted(
            {strategy.package_name(imp.source) for imp in ctx.imports if not imp.is_local and imp.source}
        )

        if issues:
            log.debug("extraction_issues", file=file_path, language=language, issues=len(issues))
        log.debug("scopes_extracted", file=file_path, language=language, scopes=len(scopes))

        return ScopeFileAnalysis(
            file_path=file_path,
            language=language,
            scopes=tuple(scopes),
            total_lines=len(ctx.lines),
            imports=tuple(dict.fromkeys(imp.source for imp in ctx.imports)),
            exports=tuple(dict.fromkeys(exports)),
            dependencies=tuple(dependencies),
            import_references=tuple(ctx.imports),
            ast_valid=not issues,
            ast_issues=tuple(issues),
            content_hash=content_hash(source),
        )


def _syntax_problems(root: Any, error_types: frozenset[str]) -> list[tuple[int, int, str]]:
    """(start_byte, end_byte, message) for each ERROR and MISSING node."""
    problems: list[tuple[int, int, str]] = []
    stack = [root]
    while stack:
        node = stack.pop()
        row, col = node.start_point
        if node.type in error_types:
            problems.append((node.start_byte, node.end_byte, f"Syntax error at line {row + 1}:{col + 1}"))
            continue
        if node.is_missing:
            problems.append((node.start_byte, node.end_byte, f"Missing {node.type} at line {row + 1}:{col + 1}"))
        stack.extend(reversed(node.children))
    return problems
