"""Reference classification and relationship resolution."""

from scopegraph.resolution.classify import ClassificationResult, ReferenceClassifier
from scopegraph.resolution.models import (
    INVERSE_TYPES,
    RelationshipResolutionResult,
    RelationshipType,
    ResolutionStats,
    ResolvedRelationship,
    ScopeMappingEntry,
    UnresolvedReference,
)
from scopegraph.resolution.queries import (
    EnrichedScope,
    enrich,
    find_consumers,
    find_dependencies,
    scope_by_id,
    scopes_by_name,
)
from scopegraph.resolution.resolver import RelationshipResolver

__all__ = [
    "INVERSE_TYPES",
    "ClassificationResult",
    "EnrichedScope",
    "ReferenceClassifier",
    "RelationshipResolutionResult",
    "RelationshipResolver",
    "RelationshipType",
    "ResolutionStats",
    "ResolvedRelationship",
    "ScopeMappingEntry",
    "UnresolvedReference",
    "enrich",
    "find_consumers",
    "find_dependencies",
    "scope_by_id",
    "scopes_by_name",
]
