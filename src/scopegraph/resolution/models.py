"""Relationship graph records.

Everything here is derived and rebuilt wholesale on each resolution pass.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any

from scopegraph.extraction.models import ScopeFileAnalysis, ScopeInfo


class RelationshipType(str, Enum):
    CONSUMES = "CONSUMES"
    CONSUMED_BY = "CONSUMED_BY"
    INHERITS_FROM = "INHERITS_FROM"
    INHERITED_BY = "INHERITED_BY"
    IMPLEMENTS = "IMPLEMENTS"
    IMPLEMENTED_BY = "IMPLEMENTED_BY"
    CONTAINS = "CONTAINS"
    CONTAINED_BY = "CONTAINED_BY"
    DECORATED_BY = "DECORATED_BY"
    DECORATES = "DECORATES"

    @property
    def inverse(self) -> RelationshipType:
        return INVERSE_TYPES[self]

    @property
    def is_inverse(self) -> bool:
        return self in _DERIVED


_PAIRS = (
    (RelationshipType.CONSUMES, RelationshipType.CONSUMED_BY),
    (RelationshipType.INHERITS_FROM, RelationshipType.INHERITED_BY),
    (RelationshipType.IMPLEMENTS, RelationshipType.IMPLEMENTED_BY),
    (RelationshipType.CONTAINS, RelationshipType.CONTAINED_BY),
    (RelationshipType.DECORATED_BY, RelationshipType.DECORATES),
)

INVERSE_TYPES: dict[RelationshipType, RelationshipType] = {
    **{a: b for a, b in _PAIRS},
    **{b: a for a, b in _PAIRS},
}

_DERIVED = frozenset(b for _, b in _PAIRS)


@dataclass(frozen=True, slots=True)
class ScopeMappingEntry:
    """Index entry for one scope across the project."""

    id: str
    name: str
    type: str
    file: str
    start_line: int
    end_line: int
    signature: str | None = None
    parent: str | None = None

    @classmethod
    def from_scope(cls, scope: ScopeInfo) -> ScopeMappingEntry:
        return cls(
            id=scope.id,
            name=scope.name,
            type=scope.type,
            file=scope.file_path,
            start_line=scope.start_line,
            end_line=scope.end_line,
            signature=scope.signature,
            parent=scope.parent,
        )

    @property
    def pointer(self) -> str:
        return f"{self.file}::{self.name}:{self.start_line}-{self.end_line}"


@dataclass(frozen=True, slots=True)
class ResolvedRelationship:
    """A typed, directed edge between two scopes."""

    type: RelationshipType
    from_id: str
    from_name: str
    from_file: str
    from_type: str
    to_id: str
    to_name: str
    to_file: str
    to_type: str
    properties: dict[str, Any] = field(default_factory=dict)

    @property
    def key(self) -> tuple[str, str, RelationshipType]:
        return (self.from_id, self.to_id, self.type)

    def inverted(self) -> ResolvedRelationship:
        return ResolvedRelationship(
            type=self.type.inverse,
            from_id=self.to_id,
            from_name=self.to_name,
            from_file=self.to_file,
            from_type=self.to_type,
            to_id=self.from_id,
            to_name=self.from_name,
            to_file=self.from_file,
            to_type=self.from_type,
            properties={**self.properties, "inverse": True},
        )

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["type"] = self.type.value
        return data


@dataclass(frozen=True, slots=True)
class UnresolvedReference:
    """An identifier use that matched no import target and no indexed scope."""

    from_scope: str
    from_type: str
    from_file: str
    identifier: str
    reason: str  # no-local-scope-match | no-import-match
    kind: str = "unknown"
    line: int = 0

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True, slots=True)
class ResolutionStats:
    files_analyzed: int
    total_scopes: int
    total_relationships: int
    by_type: dict[str, int]
    unresolved_count: int
    resolution_time_ms: float

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True, slots=True)
class RelationshipResolutionResult:
    """Relationship graph plus the unresolved-reference ledger.

    ``analyses`` holds the classified per-file results the graph was built
    from; ``scope_mapping`` maps names to every scope bearing that name and
    ``id_mapping`` maps scope ids to their entries.
    """

    relationships: tuple[ResolvedRelationship, ...]
    unresolved_references: tuple[UnresolvedReference, ...]
    stats: ResolutionStats
    scope_mapping: dict[str, list[ScopeMappingEntry]] = field(default_factory=dict)
    id_mapping: dict[str, ScopeMappingEntry] = field(default_factory=dict)
    analyses: dict[str, ScopeFileAnalysis] = field(default_factory=dict)

    def to_dict(self, *, include_analyses: bool = False) -> dict[str, Any]:
        data: dict[str, Any] = {
            "relationships": [r.to_dict() for r in self.relationships],
            "unresolved_references": [u.to_dict() for u in self.unresolved_references],
            "stats": self.stats.to_dict(),
        }
        if include_analyses:
            data["analyses"] = {path: a.to_dict() for path, a in self.analyses.items()}
        return data
