"""Assertion helpers shared across test modules."""

from __future__ import annotations

from scopegraph.extraction.models import ScopeFileAnalysis, ScopeInfo


def scope_named(analysis: ScopeFileAnalysis, name: str) -> ScopeInfo:
    """The first scope called ``name``; fails the test when missing."""
    for scope in analysis.scopes:
        if scope.name == name:
            return scope
    names = [s.name for s in analysis.scopes]
    raise AssertionError(f"no scope named {name!r} in {names}")


def ref_names(scope: ScopeInfo) -> set[str]:
    return {ref.identifier for ref in scope.identifier_references}
