"""Read-side helpers over a ``RelationshipResolutionResult``."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any

from scopegraph.extraction.models import ScopeInfo
from scopegraph.resolution.models import (
    RelationshipResolutionResult,
    RelationshipType,
    ResolvedRelationship,
    ScopeMappingEntry,
)

_INHERITANCE = (RelationshipType.INHERITS_FROM, RelationshipType.IMPLEMENTS)


@dataclass(frozen=True, slots=True)
class EnrichedScope:
    """A classified scope with its relationship endpoints as scope ids."""

    scope: ScopeInfo
    consumes: list[str] = field(default_factory=list)
    consumed_by: list[str] = field(default_factory=list)
    inherits_from: list[str] = field(default_factory=list)
    inherited_by: list[str] = field(default_factory=list)
    contains: list[str] = field(default_factory=list)
    contained_by: str | None = None
    decorated_by: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        data = self.scope.to_dict()
        data.update(
            consumes=self.consumes,
            consumed_by=self.consumed_by,
            inherits_from=self.inherits_from,
            inherited_by=self.inherited_by,
            contains=self.contains,
            contained_by=self.contained_by,
            decorated_by=self.decorated_by,
        )
        return data


def _forward(result: RelationshipResolutionResult) -> list[ResolvedRelationship]:
    return [rel for rel in result.relationships if not rel.type.is_inverse]


def enrich(result: RelationshipResolutionResult) -> dict[str, list[EnrichedScope]]:
    """Per-file scopes annotated with outgoing and incoming edges.

    Built from forward edges only, so the output is the same whether or not
    inverse edges were generated.
    """
    outgoing: dict[str, list[ResolvedRelationship]] = defaultdict(list)
    incoming: dict[str, list[ResolvedRelationship]] = defaultdict(list)
    for rel in _forward(result):
        outgoing[rel.from_id].append(rel)
        incoming[rel.to_id].append(rel)

    enriched: dict[str, list[EnrichedScope]] = {}
    for path, analysis in result.analyses.items():
        scopes: list[EnrichedScope] = []
        for scope in analysis.scopes:
            out = outgoing.get(scope.id, [])
            inc = incoming.get(scope.id, [])
            parent = next((r.from_id for r in inc if r.type == RelationshipType.CONTAINS), None)
            scopes.append(
                EnrichedScope(
                    scope=scope,
                    consumes=[r.to_id for r in out if r.type == RelationshipType.CONSUMES],
                    consumed_by=[r.from_id for r in inc if r.type == RelationshipType.CONSUMES],
                    inherits_from=[r.to_id for r in out if r.type in _INHERITANCE],
                    inherited_by=[r.from_id for r in inc if r.type in _INHERITANCE],
                    contains=[r.to_id for r in out if r.type == RelationshipType.CONTAINS],
                    contained_by=parent,
                    decorated_by=[r.to_id for r in out if r.type == RelationshipType.DECORATED_BY],
                )
            )
        enriched[path] = scopes
    return enriched


def scopes_by_name(result: RelationshipResolutionResult, name: str) -> list[ScopeMappingEntry]:
    return list(result.scope_mapping.get(name, []))


def scope_by_id(result: RelationshipResolutionResult, scope_id: str) -> ScopeMappingEntry | None:
    return result.id_mapping.get(scope_id)


def find_consumers(result: RelationshipResolutionResult, scope_id: str) -> list[ScopeMappingEntry]:
    """Scopes with a CONSUMES edge into ``scope_id``."""
    entries = (
        result.id_mapping.get(rel.from_id)
        for rel in _forward(result)
        if rel.to_id == scope_id and rel.type == RelationshipType.CONSUMES
    )
    return [e for e in entries if e is not None]


def find_dependencies(result: RelationshipResolutionResult, scope_id: str) -> list[ScopeMappingEntry]:
    """Scopes ``scope_id`` has a CONSUMES edge to."""
    entries = (
        result.id_mapping.get(rel.to_id)
        for rel in _forward(result)
        if rel.from_id == scope_id and rel.type == RelationshipType.CONSUMES
    )
    return [e for e in entries if e is not None]
