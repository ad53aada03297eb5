"""Scope extraction tests for C#."""

from helpers import scope_named


class TestCSharpScopes:
    def test_base_list_split_into_extends_and_implements(self, extract) -> None:
        """The first non-interface base is extended; I-prefixed bases are implemented."""
        analysis = extract(
            "Shapes/Circle.cs",
            """
            namespace Shapes
            {
                public class Circle : Shape, IDrawable, IComparable<Circle>
                {
                    public double Area() { return 0; }
                }
            }
            """,
        )

        circle = scope_named(analysis, "Circle")
        clauses = {c.clause: c.types for c in circle.heritage_clauses}
        assert clauses["extends"] == ("Shape",)
        assert clauses["implements"] == ("IDrawable", "IComparable<Circle>")
        assert circle.parent == "Shapes"
        area = scope_named(analysis, "Area")
        assert area.type == "method"
        assert area.parent == "Circle"

    def test_interface_extends_bases(self, extract) -> None:
        analysis = extract("Api/IRepo.cs", "public interface IRepo : IDisposable { }\n")

        repo = scope_named(analysis, "IRepo")
        assert repo.type == "interface"
        assert repo.heritage_clauses[0].clause == "extends"

    def test_file_scoped_namespace(self, extract) -> None:
        analysis = extract(
            "App/Program.cs",
            """
            namespace App;

            public class Program
            {
                static void Main() { }
            }
            """,
        )

        assert scope_named(analysis, "App").type == "namespace"
        assert scope_named(analysis, "Program").parent == "App"

    def test_using_directives(self, extract) -> None:
        analysis = extract(
            "App/Startup.cs",
            """
            using System.Collections.Generic;
            using Json = Newtonsoft.Json;
            """,
        )

        by_source = {i.source: i for i in analysis.import_references}
        assert by_source["System.Collections.Generic"].imported == "*"
        assert by_source["Newtonsoft.Json"].alias == "Json"
