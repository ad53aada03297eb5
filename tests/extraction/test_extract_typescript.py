"""Scope extraction tests for TypeScript and JavaScript."""

from helpers import ref_names, scope_named


class TestTypeScriptScopes:
    """Declaration kinds and hierarchy."""

    def test_class_with_methods(self, extract) -> None:
        """Methods are nested under their class one level deeper."""
        analysis = extract(
            "src/shapes.ts",
            """
            export class Circle {
              constructor(private radius: number) {}

              area(): number {
                return Math.PI * this.radius ** 2;
              }
            }
            """,
        )

        circle = scope_named(analysis, "Circle")
        area = scope_named(analysis, "area")
        assert circle.type == "class"
        assert circle.depth == 0
        assert circle.exports == ("Circle",)
        assert area.type == "method"
        assert area.parent == "Circle"
        assert area.depth == 1
        assert area.return_type == "number"
        assert "area" in {m.name for m in circle.members}

    def test_interface_enum_and_type_alias(self, extract) -> None:
        analysis = extract(
            "src/types.ts",
            """
            export interface Shape {
              area(): number;
            }

            export enum Color {
              Red = "red",
              Blue = "blue",
            }

            export type Id = string | number;
            """,
        )

        assert scope_named(analysis, "Shape").type == "interface"
        color = scope_named(analysis, "Color")
        assert color.type == "enum"
        assert [m.name for m in color.enum_members] == ["Red", "Blue"]
        alias = scope_named(analysis, "Id")
        assert alias.type == "type_alias"
        assert alias.value == "string | number"
        assert set(analysis.exports) == {"Shape", "Color", "Id"}

    def test_arrow_const_becomes_function(self, extract) -> None:
        """``const f = () => ...`` is a function scope, not a variable."""
        analysis = extract(
            "src/greet.ts",
            """
            export const greet = (name: string): string => `Hello ${name}`;
            """,
        )

        greet = scope_named(analysis, "greet")
        assert greet.type == "function"
        assert "arrow" in greet.modifiers
        assert [p.name for p in greet.parameters] == ["name"]
        assert greet.exports == ("greet",)

    def test_upper_case_const_is_constant(self, extract) -> None:
        analysis = extract("src/config.ts", "const MAX_RETRIES = 3;\nlet counter = 0;\n")

        assert scope_named(analysis, "MAX_RETRIES").type == "constant"
        assert scope_named(analysis, "counter").type == "variable"

    def test_namespace_children(self, extract) -> None:
        analysis = extract(
            "src/ns.ts",
            """
            namespace Geometry {
              export function distance(a: number, b: number): number {
                return Math.abs(a - b);
              }
            }
            """,
        )

        assert scope_named(analysis, "Geometry").type == "namespace"
        assert scope_named(analysis, "distance").parent == "Geometry"

    def test_jsdoc_attached(self, extract) -> None:
        analysis = extract(
            "src/doc.ts",
            """
            /**
             * Adds two numbers.
             */
            export function add(a: number, b: number): number {
              return a + b;
            }
            """,
        )

        assert scope_named(analysis, "add").docstring == "Adds two numbers."


class TestTypeScriptReferences:
    """Identifier references and heritage."""

    def test_nested_generic_arguments_are_referenced(self, extract) -> None:
        """Every type name inside a nested generic is kept, builtins included."""
        analysis = extract(
            "src/store.ts",
            """
            function load(): Container<Pair<User, Error>> {
              return fetchAll();
            }
            """,
        )

        names = ref_names(scope_named(analysis, "load"))
        assert {"Container", "Pair", "User", "Error", "fetchAll"} <= names

    def test_builtin_values_dropped(self, extract) -> None:
        analysis = extract(
            "src/log.ts",
            """
            function report(value: number) {
              console.log(JSON.stringify(value));
              return helper(value);
            }
            """,
        )

        names = ref_names(scope_named(analysis, "report"))
        assert "console" not in names
        assert "JSON" not in names
        assert "value" not in names
        assert "helper" in names

    def test_implements_clause_tags_reference(self, extract) -> None:
        analysis = extract(
            "src/circle.ts",
            """
            import { Shape } from "./shape";

            export class Circle implements Shape {
              area(): number {
                return 1;
              }
            }
            """,
        )

        circle = scope_named(analysis, "Circle")
        assert circle.heritage_clauses[0].clause == "implements"
        assert circle.heritage_clauses[0].types == ("Shape",)
        shape_refs = [r for r in circle.identifier_references if r.identifier == "Shape"]
        assert shape_refs[0].heritage == "implements"
        assert [i.imported for i in circle.import_references] == ["Shape"]

    def test_extends_clause(self, extract) -> None:
        analysis = extract("src/dog.ts", "class Dog extends Animal {}\n")

        dog = scope_named(analysis, "Dog")
        assert dog.heritage_clauses[0].clause == "extends"
        assert any(r.identifier == "Animal" and r.heritage == "extends" for r in dog.identifier_references)

    def test_member_access_carries_qualifier(self, extract) -> None:
        analysis = extract(
            "src/use.ts",
            """
            function run() {
              return utils.format(1);
            }
            """,
        )

        refs = scope_named(analysis, "run").identifier_references
        fmt = next(r for r in refs if r.identifier == "format")
        assert fmt.qualifier == "utils"
        assert "utils" in {r.identifier for r in refs}


class TestTypeScriptImports:
    def test_import_kinds(self, extract) -> None:
        analysis = extract(
            "src/app.ts",
            """
            import React from "react";
            import * as path from "path";
            import { a, b as c } from "./local";
            import "./polyfill";
            """,
        )

        kinds = {(i.imported, i.alias, i.kind) for i in analysis.import_references}
        assert ("default", "React", "default") in kinds
        assert ("*", "path", "namespace") in kinds
        assert ("a", None, "named") in kinds
        assert ("b", "c", "named") in kinds
        assert ("*", None, "side-effect") in kinds
        assert analysis.dependencies == ("path", "react")


class TestModuleScopes:
    """Top-level statements outside declarations."""

    def test_top_level_statements_grouped(self, extract) -> None:
        analysis = extract(
            "src/main.ts",
            """
            import { setup } from "./setup";

            setup();
            run(1);

            function helper() {}

            finish();
            """,
        )

        modules = [s for s in analysis.scopes if s.type == "module"]
        assert [m.name for m in modules] == ["file_scope_01", "file_scope_02"]
        first = modules[0]
        assert first.start_line == 3
        assert first.end_line == 4
        assert "setup" in ref_names(first)
        assert [i.imported for i in first.import_references] == ["setup"]

    def test_module_scopes_disabled(self, extract) -> None:
        analysis = extract("src/main.ts", "start();\n", include_module_scopes=False)

        assert analysis.scopes == ()


class TestMalformedSource:
    def test_syntax_error_reported_not_raised(self, extract) -> None:
        analysis = extract("src/broken.ts", "class Broken {\n  method( {\n}\n")

        assert analysis.ast_valid is False
        assert analysis.ast_issues


class TestJavaScript:
    def test_js_class_heritage(self, extract) -> None:
        analysis = extract("src/view.js", "class View extends Base {\n  render() {}\n}\n")

        view = scope_named(analysis, "View")
        assert view.heritage_clauses[0].types == ("Base",)
        assert scope_named(analysis, "render").type == "method"
        assert analysis.language == "javascript"
