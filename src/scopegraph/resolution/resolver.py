"""Project-wide relationship resolution.

Usage::

    resolver = RelationshipResolver(ResolutionConfig())
    result = resolver.resolve(project_root, analyses)
    for rel in result.relationships:
        print(rel.from_name, rel.type.value, rel.to_name)

Resolution requires the complete map of per-file analyses and runs
synchronously to completion.  Edge emission per classified reference:

- ``import`` references follow the import resolver to the target file and
  the scope named there, falling back to the global name index (flagged
  ``fallback_resolution``).  A local import that reaches no scope is
  recorded as unresolved with reason ``no-import-match``.
- ``local_scope`` references link to the classifier's target scope.
- Base-type references become INHERITS_FROM / IMPLEMENTS, everything else
  CONSUMES.  Parent nesting yields CONTAINS, decorators DECORATED_BY.
"""

from __future__ import annotations

import re
import time
from collections import Counter
from collections.abc import Mapping
from pathlib import Path

from scopegraph.config.models import ResolutionConfig
from scopegraph.core.errors import LanguageError
from scopegraph.core.logging import get_logger
from scopegraph.extraction.models import IdentifierReference, ImportReference, ScopeFileAnalysis, ScopeInfo
from scopegraph.extraction.walker import base_type_name
from scopegraph.imports import resolver_for_language
from scopegraph.imports.base import ImportResolver
from scopegraph.resolution.classify import (
    NO_IMPORT_MATCH,
    ClassificationResult,
    ReferenceClassifier,
    build_alias_map,
    match_alias,
)
from scopegraph.resolution.models import (
    RelationshipResolutionResult,
    RelationshipType,
    ResolutionStats,
    ResolvedRelationship,
    ScopeMappingEntry,
    UnresolvedReference,
)

log = get_logger(__name__)

_HERITAGE_TYPES = {
    "extends": RelationshipType.INHERITS_FROM,
    "implements": RelationshipType.IMPLEMENTS,
}


class RelationshipResolver:
    """Builds the relationship graph for one project.

    ``resolvers`` maps language tags to loaded import resolvers.  Languages
    without an entry get one built from ``resolver_for_language`` with the
    project's manifest loaded.
    """

    def __init__(
        self,
        config: ResolutionConfig | None = None,
        resolvers: Mapping[str, ImportResolver] | None = None,
    ) -> None:
        self.config = config or ResolutionConfig()
        self._resolvers: dict[str, ImportResolver] = dict(resolvers or {})

    def resolve(
        self,
        project_root: Path | str,
        analyses: Mapping[str, ScopeFileAnalysis],
    ) -> RelationshipResolutionResult:
        start = time.perf_counter()
        root = Path(project_root).resolve()
        self._load_resolvers(root, {a.language for a in analyses.values()})

        classification = ReferenceClassifier(analyses, self._resolvers).classify()
        run = _ResolutionRun(root, classification, self._resolvers, self.config)
        relationships, unresolved = run.execute()

        by_type = Counter(rel.type.value for rel in relationships)
        stats = ResolutionStats(
            files_analyzed=len(analyses),
            total_scopes=sum(a.total_scopes for a in analyses.values()),
            total_relationships=len(relationships),
            by_type=dict(sorted(by_type.items())),
            unresolved_count=len(unresolved),
            resolution_time_ms=round((time.perf_counter() - start) * 1000, 2),
        )
        log.info(
            "relationships_resolved",
            files=stats.files_analyzed,
            scopes=stats.total_scopes,
            relationships=stats.total_relationships,
            unresolved=stats.unresolved_count,
            duration_ms=stats.resolution_time_ms,
        )

        scope_mapping = {
            name: [ScopeMappingEntry.from_scope(s) for s in scopes] for name, scopes in classification.index.items()
        }
        id_mapping = {entry.id: entry for entries in scope_mapping.values() for entry in entries}
        return RelationshipResolutionResult(
            relationships=tuple(relationships),
            unresolved_references=tuple(unresolved),
            stats=stats,
            scope_mapping=scope_mapping,
            id_mapping=id_mapping,
            analyses=classification.analyses,
        )

    def _load_resolvers(self, root: Path, languages: set[str]) -> None:
        for language in sorted(languages - self._resolvers.keys()):
            try:
                self._resolvers[language] = resolver_for_language(language, root)
            except LanguageError:
                log.warning("no_import_resolver", language=language)


class _ResolutionRun:
    """State for a single resolution pass."""

    def __init__(
        self,
        root: Path,
        classification: ClassificationResult,
        resolvers: Mapping[str, ImportResolver],
        config: ResolutionConfig,
    ) -> None:
        self.root = root
        self.analyses = classification.analyses
        self.index = classification.index
        self.unresolved: list[UnresolvedReference] = list(classification.unresolved)
        self.resolvers = resolvers
        self.config = config
        self.by_pointer: dict[str, ScopeInfo] = {}
        for scopes in self.index.values():
            for scope in scopes:
                self.by_pointer.setdefault(scope.pointer, scope)
        # Absolute path -> analysis key
        self.files: dict[Path, str] = {self._absolute(key): key for key in self.analyses}
        self.edges: dict[tuple[str, str, RelationshipType], ResolvedRelationship] = {}

    def _absolute(self, file_path: str) -> Path:
        path = Path(file_path)
        return (path if path.is_absolute() else self.root / path).resolve()

    def execute(self) -> tuple[list[ResolvedRelationship], list[UnresolvedReference]]:
        for path, analysis in self.analyses.items():
            aliases = build_alias_map(analysis.import_references)
            resolver = self.resolvers.get(analysis.language)
            for scope in analysis.scopes:
                if self.config.include_contains:
                    self._contains(scope, analysis)
                for ref in scope.identifier_references:
                    if ref.kind == "import":
                        self._import_edge(scope, ref, aliases, resolver, path)
                    elif ref.kind == "local_scope":
                        target = self.by_pointer.get(ref.target_scope or "")
                        if target is not None:
                            self._add(scope, target, _edge_type(scope, ref), _ref_properties(ref))
                if self.config.include_decorators:
                    self._decorators(scope, aliases, resolver, path)

        relationships = list(self.edges.values())
        if self.config.include_inverse:
            relationships.extend([rel.inverted() for rel in relationships])
        return relationships, self.unresolved

    # ------------------------------------------------------------------

    def _add(
        self,
        source: ScopeInfo,
        target: ScopeInfo,
        rel_type: RelationshipType,
        properties: dict | None = None,
    ) -> None:
        if source.id == target.id:
            return
        if not self.config.resolve_cross_file and source.file_path != target.file_path:
            return
        key = (source.id, target.id, rel_type)
        if key in self.edges:
            return
        self.edges[key] = ResolvedRelationship(
            type=rel_type,
            from_id=source.id,
            from_name=source.name,
            from_file=source.file_path,
            from_type=source.type,
            to_id=target.id,
            to_name=target.name,
            to_file=target.file_path,
            to_type=target.type,
            properties=properties or {},
        )

    def _contains(self, scope: ScopeInfo, analysis: ScopeFileAnalysis) -> None:
        if scope.parent is None:
            return
        parent = _enclosing(scope, analysis.scopes)
        if parent is not None:
            self._add(parent, scope, RelationshipType.CONTAINS)

    def _import_edge(
        self,
        scope: ScopeInfo,
        ref: IdentifierReference,
        aliases: Mapping[str, ImportReference],
        resolver: ImportResolver | None,
        path: str,
    ) -> None:
        imp = match_alias(ref, aliases)
        if imp is None:
            return
        properties = {**_ref_properties(ref), "via_import": True, "import_path": imp.source}
        target = self._import_target(imp, ref, resolver, path)
        if target is None:
            target = self._first_candidate(_import_names(imp, ref))
            if target is not None:
                properties["fallback_resolution"] = True
        if target is None:
            if ref.is_local_import:
                self.unresolved.append(
                    UnresolvedReference(
                        from_scope=scope.name,
                        from_type=scope.type,
                        from_file=scope.file_path,
                        identifier=ref.identifier,
                        reason=NO_IMPORT_MATCH,
                        kind="import",
                        line=ref.line,
                    )
                )
            return
        self._add(scope, target, _edge_type(scope, ref), properties)

    def _import_target(
        self,
        imp: ImportReference,
        ref: IdentifierReference,
        resolver: ImportResolver | None,
        path: str,
    ) -> ScopeInfo | None:
        if resolver is None or not ref.is_local_import:
            return None
        names = _import_names(imp, ref)
        for candidate in resolver.resolve_candidates(imp.source, self._absolute(path)):
            key = self.files.get(candidate.resolve())
            if key is None:
                continue
            scopes = self.analyses[key].scopes
            for name in names:
                matches = [s for s in scopes if s.name == name]
                if matches:
                    top_level = [s for s in matches if s.parent is None]
                    return (top_level or matches)[0]
        return None

    def _first_candidate(self, names: list[str]) -> ScopeInfo | None:
        for name in names:
            candidates = self.index.get(name)
            if candidates:
                return candidates[0]
        return None

    def _decorators(
        self,
        scope: ScopeInfo,
        aliases: Mapping[str, ImportReference],
        resolver: ImportResolver | None,
        path: str,
    ) -> None:
        for decorator in scope.decorators:
            name = decorator.name.lstrip("@").split("(")[0]
            short = re.split(r"\.|::", name)[-1]
            qualifier = name.rpartition(".")[0] or None
            ref = IdentifierReference(short, decorator.line, 0, "", qualifier=qualifier, is_local_import=True)
            imp = match_alias(ref, aliases)
            target = self._import_target(imp, ref, resolver, path) if imp is not None else None
            if target is None:
                same_file = [s for s in self.index.get(short, []) if s.file_path == scope.file_path]
                target = same_file[0] if same_file else self._first_candidate([short])
            if target is not None:
                properties = {"decorator_args": decorator.arguments} if decorator.arguments else {}
                self._add(scope, target, RelationshipType.DECORATED_BY, properties)


def _import_names(imp: ImportReference, ref: IdentifierReference) -> list[str]:
    """Names to look up in the imported file, most specific first."""
    names: list[str] = []
    if imp.kind in ("named", "default") and imp.imported not in ("*", imp.source):
        names.append(imp.imported)
    names.append(ref.identifier)
    return list(dict.fromkeys(names))


def _enclosing(scope: ScopeInfo, scopes: tuple[ScopeInfo, ...]) -> ScopeInfo | None:
    """Innermost scope named ``scope.parent`` one level up that spans ``scope``."""
    best = None
    for candidate in scopes:
        if (
            candidate.name == scope.parent
            and candidate.depth == scope.depth - 1
            and candidate.start_line <= scope.start_line
            and candidate.end_line >= scope.end_line
        ):
            if best is None or candidate.start_line >= best.start_line:
                best = candidate
    if best is None:
        # Receiver methods and out-of-line definitions sit outside their type
        best = next((c for c in scopes if c.name == scope.parent and c.depth == scope.depth - 1), None)
    return best


def _edge_type(scope: ScopeInfo, ref: IdentifierReference) -> RelationshipType:
    if ref.heritage is not None:
        return _HERITAGE_TYPES[ref.heritage]
    for clause in scope.heritage_clauses:
        if any(base_type_name(t) == ref.identifier for t in clause.types):
            return _HERITAGE_TYPES[clause.clause]
    context = ref.context
    if re.search(rf"\bextends\b[^{{]*\b{re.escape(ref.identifier)}\b", context):
        return RelationshipType.INHERITS_FROM
    if re.search(rf"\bimplements\b[^{{]*\b{re.escape(ref.identifier)}\b", context):
        return RelationshipType.IMPLEMENTS
    return RelationshipType.CONSUMES


def _ref_properties(ref: IdentifierReference) -> dict:
    properties: dict = {"line": ref.line, "identifier": ref.identifier}
    if ref.context:
        properties["context"] = ref.context
    return properties
