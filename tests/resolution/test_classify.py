"""Tests for reference classification."""

import pytest

from helpers import scope_named
from scopegraph.resolution.classify import (
    NO_LOCAL_SCOPE_MATCH,
    ReferenceClassifier,
    build_alias_map,
    build_name_index,
    match_alias,
)
from scopegraph.extraction.models import IdentifierReference, ImportReference

SHAPE_TS = """
export interface Shape {
  area(): number;
}
"""

CIRCLE_TS = """
import { Shape } from "./shape";
import { debounce as throttle } from "lodash";

export class Circle implements Shape {
  area(): number {
    return helper(parseInt("3"));
  }
}

function helper(x: number): number {
  return throttle(x * mystery);
}
"""


@pytest.fixture
def classified(extract):
    analyses = {
        "src/shape.ts": extract("src/shape.ts", SHAPE_TS),
        "src/circle.ts": extract("src/circle.ts", CIRCLE_TS),
    }
    return ReferenceClassifier(analyses).classify()


def _ref(scope, identifier):
    return next(r for r in scope.identifier_references if r.identifier == identifier)


class TestReferenceClassifier:
    """Priority order: import, local scope, builtin, unknown."""

    def test_import_reference(self, classified) -> None:
        circle = scope_named(classified.analyses["src/circle.ts"], "Circle")
        ref = _ref(circle, "Shape")

        assert ref.kind == "import"
        assert ref.source == "./shape"
        assert ref.is_local_import is True
        assert "./shape" in circle.imports

    def test_aliased_package_import(self, classified) -> None:
        helper = scope_named(classified.analyses["src/circle.ts"], "helper")
        ref = _ref(helper, "throttle")

        assert ref.kind == "import"
        assert ref.source == "lodash"
        assert ref.is_local_import is False

    def test_local_scope_pointer(self, classified) -> None:
        analysis = classified.analyses["src/circle.ts"]
        area = next(s for s in analysis.scopes if s.name == "area" and s.type == "method")
        helper = scope_named(analysis, "helper")
        ref = _ref(area, "helper")

        assert ref.kind == "local_scope"
        assert ref.target_scope == helper.pointer
        assert ref.target_scope == f"src/circle.ts::helper:{helper.start_line}-{helper.end_line}"

    def test_builtins_are_dropped(self, classified) -> None:
        analysis = classified.analyses["src/circle.ts"]
        area = next(s for s in analysis.scopes if s.name == "area" and s.type == "method")
        assert "parseInt" not in {r.identifier for r in area.identifier_references}

    def test_unknown_reference_is_recorded(self, classified) -> None:
        helper = scope_named(classified.analyses["src/circle.ts"], "helper")
        assert _ref(helper, "mystery").kind == "unknown"

        entry = next(u for u in classified.unresolved if u.identifier == "mystery")
        assert entry.reason == NO_LOCAL_SCOPE_MATCH
        assert entry.from_scope == "helper"
        assert entry.from_file == "src/circle.ts"
        assert entry.kind == "unknown"

    def test_inputs_are_not_mutated(self, extract) -> None:
        analysis = extract("src/circle.ts", CIRCLE_TS)
        before = scope_named(analysis, "helper").identifier_references

        ReferenceClassifier({"src/circle.ts": analysis}).classify()

        assert scope_named(analysis, "helper").identifier_references == before
        assert all(r.kind == "unknown" for r in before)

    def test_index_follows_file_order(self, extract) -> None:
        """The first file processed supplies the first candidate for a shared name."""
        first = extract("a.py", "def run():\n    pass\n")
        second = extract("b.py", "def run():\n    pass\n")

        index = build_name_index({"b.py": second, "a.py": first})

        assert [s.file_path for s in index["run"]] == ["b.py", "a.py"]


class TestAliasMatching:
    def test_first_binding_wins(self) -> None:
        imports = (
            ImportReference("./a", "Thing", line=1),
            ImportReference("./b", "Thing", line=2),
            ImportReference("fs", "*", kind="side-effect"),
        )
        aliases = build_alias_map(imports)

        assert aliases["Thing"].source == "./a"
        assert "*" not in aliases

    def test_qualifier_root_matches(self) -> None:
        aliases = build_alias_map((ImportReference("os", "os", kind="namespace"),))
        ref = IdentifierReference("join", 1, 0, "os.path.join(a, b)", qualifier="os.path")

        assert match_alias(ref, aliases) is aliases["os"]

    def test_rust_path_qualifier(self) -> None:
        aliases = build_alias_map((ImportReference("crate::models", "models", kind="namespace"),))
        ref = IdentifierReference("User", 1, 0, "models::User::new()", qualifier="models")

        assert match_alias(ref, aliases) is aliases["models"]

    def test_no_match(self) -> None:
        ref = IdentifierReference("other", 1, 0, "other()")
        assert match_alias(ref, {}) is None
