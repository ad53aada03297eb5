"""Tests for read-side queries over resolution results."""

import pytest

from scopegraph.config.models import ResolutionConfig
from scopegraph.ops import analyze_file
from scopegraph.resolution.queries import (
    enrich,
    find_consumers,
    find_dependencies,
    scope_by_id,
    scopes_by_name,
)
from scopegraph.resolution.resolver import RelationshipResolver

PROJECT = {
    "billing/invoice.py": """
        class LineItem:
            def total(self):
                return round_cents(1.005)


        def round_cents(value):
            return value


        def render(items):
            return round_cents(len(items))
        """,
}


def _resolve(write_tree, registry, config=None):
    root = write_tree(PROJECT)
    analyses = {rel: analyze_file(root / rel, registry, display_path=rel) for rel in PROJECT}
    return RelationshipResolver(config).resolve(root, analyses)


@pytest.fixture
def result(write_tree, registry):
    return _resolve(write_tree, registry)


def _id(result, name):
    return scopes_by_name(result, name)[0].id


class TestLookups:
    def test_scopes_by_name(self, result) -> None:
        [entry] = scopes_by_name(result, "round_cents")
        assert entry.type == "function"
        assert entry.file == "billing/invoice.py"
        assert scopes_by_name(result, "missing") == []

    def test_scope_by_id(self, result) -> None:
        scope_id = _id(result, "LineItem")
        assert scope_by_id(result, scope_id).name == "LineItem"
        assert scope_by_id(result, "nope") is None


class TestConsumers:
    def test_find_consumers(self, result) -> None:
        """A class consumes what its method bodies reference."""
        consumers = find_consumers(result, _id(result, "round_cents"))
        assert {c.name for c in consumers} == {"LineItem", "total", "render"}

    def test_find_dependencies(self, result) -> None:
        dependencies = find_dependencies(result, _id(result, "render"))
        assert [d.name for d in dependencies] == ["round_cents"]


class TestEnrich:
    def test_enriched_scopes(self, result) -> None:
        enriched = {e.scope.name: e for e in enrich(result)["billing/invoice.py"]}

        line_item = enriched["LineItem"]
        total = enriched["total"]
        round_cents = enriched["round_cents"]

        assert line_item.contains == [total.scope.id]
        assert total.contained_by == line_item.scope.id
        assert total.consumes == [round_cents.scope.id]
        assert set(round_cents.consumed_by) == {line_item.scope.id, total.scope.id, enriched["render"].scope.id}
        assert line_item.consumes == [round_cents.scope.id]
        assert line_item.contained_by is None

    def test_same_output_without_inverse_edges(self, write_tree, registry, result) -> None:
        forward_only = _resolve(write_tree, registry, ResolutionConfig(include_inverse=False))

        def snapshot(res):
            return [e.to_dict() for e in enrich(res)["billing/invoice.py"]]

        assert snapshot(result) == snapshot(forward_only)

    def test_to_dict_includes_edges(self, result) -> None:
        data = next(e for e in enrich(result)["billing/invoice.py"] if e.scope.name == "render").to_dict()
        assert data["name"] == "render"
        assert len(data["consumes"]) == 1
        assert data["decorated_by"] == []
