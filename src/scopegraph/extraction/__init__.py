"""Scope extraction: syntax tree -> ScopeFileAnalysis."""

from scopegraph.extraction.extractor import ScopeExtractor
from scopegraph.extraction.models import (
    ClassMemberInfo,
    DecoratorInfo,
    EnumMemberInfo,
    GenericParameter,
    HeritageClause,
    IdentifierReference,
    ImportReference,
    ParameterInfo,
    ScopeFileAnalysis,
    ScopeInfo,
    VariableInfo,
)

__all__ = [
    "ScopeExtractor",
    "ClassMemberInfo",
    "DecoratorInfo",
    "EnumMemberInfo",
    "GenericParameter",
    "HeritageClause",
    "IdentifierReference",
    "ImportReference",
    "ParameterInfo",
    "ScopeFileAnalysis",
    "ScopeInfo",
    "VariableInfo",
]
