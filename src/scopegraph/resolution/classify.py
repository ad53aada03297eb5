"""Reference classification stage.

Consumes immutable extraction results and produces new, classified ones.
Every identifier reference is tagged, in priority order:

1. ``import``      - qualifier or identifier matches a local import binding
2. ``local_scope`` - identifier matches an indexed scope name (first
                     candidate in file-processing order wins)
3. ``builtin``     - a language builtin; dropped from the reference list
4. ``unknown``     - recorded in the unresolved ledger
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace

from scopegraph.core.logging import get_logger
from scopegraph.extraction.models import (
    IdentifierReference,
    ImportReference,
    ScopeFileAnalysis,
    ScopeInfo,
)
from scopegraph.imports.base import ImportResolver
from scopegraph.parsing.packs import get_pack
from scopegraph.resolution.models import UnresolvedReference

log = get_logger(__name__)

NO_LOCAL_SCOPE_MATCH = "no-local-scope-match"
NO_IMPORT_MATCH = "no-import-match"


@dataclass
class ClassificationResult:
    analyses: dict[str, ScopeFileAnalysis]
    unresolved: list[UnresolvedReference] = field(default_factory=list)
    # name -> scopes bearing it, in file-processing order
    index: dict[str, list[ScopeInfo]] = field(default_factory=dict)


def build_name_index(analyses: Mapping[str, ScopeFileAnalysis]) -> dict[str, list[ScopeInfo]]:
    index: dict[str, list[ScopeInfo]] = {}
    for analysis in analyses.values():
        for scope in analysis.scopes:
            if scope.name:
                index.setdefault(scope.name, []).append(scope)
    return index


def build_alias_map(imports: tuple[ImportReference, ...] | list[ImportReference]) -> dict[str, ImportReference]:
    """Local binding name -> import.  The first binding of a name wins."""
    aliases: dict[str, ImportReference] = {}
    for imp in imports:
        name = imp.local_name
        if name and name not in aliases:
            aliases[name] = imp
    return aliases


def match_alias(ref: IdentifierReference, aliases: Mapping[str, ImportReference]) -> ImportReference | None:
    """Import bound to the reference's qualifier root or its identifier."""
    if ref.qualifier:
        qualifier = ref.qualifier.replace("::", ".")
        for candidate in (qualifier, qualifier.split(".")[0]):
            if candidate in aliases:
                return aliases[candidate]
    return aliases.get(ref.identifier)


class ReferenceClassifier:
    """Tags every identifier reference of a project's analyses.

    ``resolvers`` maps a language tag to the import resolver whose
    ``is_local_import`` decides ``IdentifierReference.is_local_import``;
    without one the import's extraction-time ``is_local`` is used.
    """

    def __init__(
        self,
        analyses: Mapping[str, ScopeFileAnalysis],
        resolvers: Mapping[str, ImportResolver] | None = None,
    ) -> None:
        self._analyses = analyses
        self._resolvers = resolvers or {}
        self._local_cache: dict[tuple[str, str], bool] = {}

    def classify(self) -> ClassificationResult:
        index = build_name_index(self._analyses)
        result = ClassificationResult(analyses={}, index=index)
        for path, analysis in self._analyses.items():
            aliases = build_alias_map(analysis.import_references)
            builtins = self._builtins(analysis.language)
            resolver = self._resolvers.get(analysis.language)
            scopes = tuple(
                self._classify_scope(scope, aliases, index, builtins, resolver, result.unresolved)
                for scope in analysis.scopes
            )
            result.analyses[path] = replace(analysis, scopes=scopes)

        log.debug(
            "references_classified",
            files=len(result.analyses),
            unresolved=len(result.unresolved),
        )
        return result

    @staticmethod
    def _builtins(language: str) -> frozenset[str]:
        pack = get_pack(language)
        return pack.builtins if pack is not None else frozenset()

    def _is_local(self, imp: ImportReference, resolver: ImportResolver | None) -> bool:
        if resolver is None:
            return imp.is_local
        key = (resolver.language, imp.source)
        if key not in self._local_cache:
            self._local_cache[key] = resolver.is_local_import(imp.source)
        return self._local_cache[key]

    def _classify_scope(
        self,
        scope: ScopeInfo,
        aliases: Mapping[str, ImportReference],
        index: Mapping[str, list[ScopeInfo]],
        builtins: frozenset[str],
        resolver: ImportResolver | None,
        unresolved: list[UnresolvedReference],
    ) -> ScopeInfo:
        refs: list[IdentifierReference] = []
        import_refs = list(scope.import_references)

        for ref in scope.identifier_references:
            imp = match_alias(ref, aliases)
            if imp is not None:
                is_local = self._is_local(imp, resolver)
                refs.append(replace(ref, kind="import", source=imp.source, is_local_import=is_local))
                if imp not in import_refs:
                    import_refs.append(imp)
                continue

            candidates = index.get(ref.identifier)
            if candidates:
                refs.append(replace(ref, kind="local_scope", target_scope=candidates[0].pointer))
                continue

            if ref.identifier in builtins:
                continue

            refs.append(replace(ref, kind="unknown"))
            unresolved.append(
                UnresolvedReference(
                    from_scope=scope.name,
                    from_type=scope.type,
                    from_file=scope.file_path,
                    identifier=ref.identifier,
                    reason=NO_LOCAL_SCOPE_MATCH,
                    kind="unknown",
                    line=ref.line,
                )
            )

        return replace(scope, identifier_references=tuple(refs), import_references=tuple(import_refs))
