"""Scope extraction tests for Rust."""

from helpers import ref_names, scope_named


class TestRustScopes:
    def test_struct_trait_and_impl(self, extract) -> None:
        """``impl Trait for Type`` is a class named after the type that implements the trait."""
        analysis = extract(
            "src/shapes.rs",
            """
            pub trait Shape {
                fn area(&self) -> f64;
            }

            pub struct Circle {
                radius: f64,
            }

            impl Shape for Circle {
                fn area(&self) -> f64 {
                    3.14 * self.radius * self.radius
                }
            }
            """,
        )

        assert scope_named(analysis, "Shape").type == "interface"
        structs = [s for s in analysis.scopes if s.name == "Circle"]
        assert {s.type for s in structs} == {"class"}
        impl = next(s for s in structs if "impl" in s.modifiers)
        assert impl.signature == "impl Shape for Circle"
        assert impl.heritage_clauses[0].clause == "implements"
        assert impl.heritage_clauses[0].types == ("Shape",)
        trait_refs = [r for r in impl.identifier_references if r.identifier == "Shape"]
        assert len(trait_refs) == 1
        assert trait_refs[0].heritage == "implements"

    def test_impl_methods_parented_to_type(self, extract) -> None:
        analysis = extract(
            "src/point.rs",
            """
            struct Point { x: i32 }

            impl Point {
                pub fn new(x: i32) -> Self {
                    Point { x }
                }
            }
            """,
        )

        new = scope_named(analysis, "new")
        assert new.type == "method"
        assert new.parent == "Point"
        assert new.depth == 1
        assert "pub" in new.modifiers

    def test_qualified_trait_keeps_qualifier(self, extract) -> None:
        analysis = extract(
            "src/display.rs",
            """
            use std::fmt;

            struct Meters(f64);

            impl fmt::Display for Meters {
                fn fmt(&self, f: &mut fmt::Formatter) -> fmt::Result {
                    write!(f, "{}m", self.0)
                }
            }
            """,
        )

        impl = next(s for s in analysis.scopes if s.name == "Meters" and "impl" in s.modifiers)
        display = next(r for r in impl.identifier_references if r.identifier == "Display")
        assert display.qualifier == "fmt"
        assert display.heritage == "implements"

    def test_mod_enum_const_and_alias(self, extract) -> None:
        analysis = extract(
            "src/lib.rs",
            """
            pub mod geometry {
                pub enum Kind { Round, Square }
            }

            const LIMIT: u32 = 10;
            type Grid = Vec<Vec<u8>>;
            """,
        )

        assert scope_named(analysis, "geometry").type == "namespace"
        kind = scope_named(analysis, "Kind")
        assert kind.type == "enum"
        assert kind.parent == "geometry"
        assert scope_named(analysis, "LIMIT").type == "constant"
        assert scope_named(analysis, "Grid").type == "type_alias"


class TestRustImports:
    def test_use_trees_flattened(self, extract) -> None:
        analysis = extract(
            "src/main.rs",
            """
            use crate::models::{User, Account as Acct};
            use std::collections::HashMap;
            use super::helpers::*;
            """,
        )

        refs = {(i.source, i.imported, i.alias) for i in analysis.import_references}
        assert ("crate::models", "User", None) in refs
        assert ("crate::models", "Account", "Acct") in refs
        assert ("std::collections", "HashMap", None) in refs
        assert ("super::helpers", "*", None) in refs
        local = {i.imported: i.is_local for i in analysis.import_references}
        assert local["User"] is True
        assert local["HashMap"] is False

    def test_scoped_call_matches_import(self, extract) -> None:
        analysis = extract(
            "src/run.rs",
            """
            use crate::models;

            fn run() {
                let user = models::User::new();
            }
            """,
        )

        run = scope_named(analysis, "run")
        assert "User" in ref_names(run) or "new" in ref_names(run)
        assert [i.imported for i in run.import_references] == ["models"]
