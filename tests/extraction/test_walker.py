"""Tests for the language-independent walker helpers."""

import pytest

from scopegraph.extraction.models import HeritageClause, IdentifierReference, ImportReference
from scopegraph.extraction.walker import (
    _apply_heritage,
    alias_map,
    base_type_name,
    clean_comment,
    match_import,
    scope_id,
    synthesized_name,
)


class TestScopeId:
    """Content-addressed scope identity."""

    def test_deterministic(self) -> None:
        assert scope_id("a.ts", 0, 10, "class A {}") == scope_id("a.ts", 0, 10, "class A {}")

    def test_differs_by_file_and_span(self) -> None:
        base = scope_id("a.ts", 0, 10, "class A {}")
        assert scope_id("b.ts", 0, 10, "class A {}") != base
        assert scope_id("a.ts", 5, 15, "class A {}") != base

    def test_is_short_hex(self) -> None:
        sid = scope_id("a.ts", 0, 1, "x")
        assert len(sid) == 16
        int(sid, 16)


class TestBaseTypeName:
    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("Base", "Base"),
            ("ns.Base<T>", "Base"),
            ("crate::shapes::Shape", "Shape"),
            ("*Base", "Base"),
            ("Generic[T]", "Generic"),
            ("  List<Pair<A, B>> ", "List"),
        ],
    )
    def test_strips_qualifiers_and_generics(self, text: str, expected: str) -> None:
        assert base_type_name(text) == expected


class TestCleanComment:
    def test_jsdoc_block(self) -> None:
        text = "/**\n * Computes the area.\n * @returns number\n */"
        assert clean_comment(text) == "Computes the area.\n@returns number"

    def test_line_comments(self) -> None:
        assert clean_comment("/// First\n/// Second") == "First\nSecond"

    def test_hash_comment(self) -> None:
        assert clean_comment("# note") == "note"


class TestSynthesizedName:
    def test_capitalizes_kind(self) -> None:
        assert synthesized_name("class") == "AnonymousClass"


class TestImportMatching:
    """alias_map and match_import tests."""

    def test_alias_preferred_over_imported_name(self) -> None:
        imp = ImportReference("./shapes", "Shape", alias="BaseShape")
        by_name = alias_map([imp])

        assert "BaseShape" in by_name
        assert "Shape" not in by_name

    def test_side_effect_import_binds_nothing(self) -> None:
        assert alias_map([ImportReference("./polyfill", "*", kind="side-effect")]) == {}

    def test_dotted_import_binds_head(self) -> None:
        imp = ImportReference("os.path", "os.path", kind="namespace")
        assert alias_map([imp])["os"] is imp

    def test_qualifier_root_matches(self) -> None:
        imp = ImportReference("./utils", "*", alias="utils", kind="namespace")
        ref = IdentifierReference("format", 3, 4, "utils.format(x)", qualifier="utils")

        assert match_import(alias_map([imp]), ref) is imp

    def test_scoped_qualifier_matches_head(self) -> None:
        imp = ImportReference("crate::models", "models", kind="named")
        ref = IdentifierReference("User", 1, 0, "models::User::new()", qualifier="models::User")

        assert match_import(alias_map([imp]), ref) is imp

    def test_unmatched_returns_none(self) -> None:
        ref = IdentifierReference("helper", 1, 0, "helper()")
        assert match_import({}, ref) is None


class TestApplyHeritage:
    def test_first_matching_reference_tagged(self) -> None:
        refs = [
            IdentifierReference("Shape", 1, 20, "class Circle implements Shape"),
            IdentifierReference("Shape", 4, 8, "const s: Shape"),
        ]

        result = _apply_heritage(refs, [HeritageClause("implements", ("Shape",))], [])

        assert result[0].heritage == "implements"
        assert result[1].heritage is None

    def test_synthetic_reference_added_once(self) -> None:
        synthetic = IdentifierReference("Display", 1, 5, "impl Display for Point", heritage="implements")

        result = _apply_heritage([synthetic], [], [synthetic])

        assert len(result) == 1
