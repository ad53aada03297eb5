"""Tests for C# using-directive resolution."""

from pathlib import Path

from scopegraph.imports import CSharpImportResolver, ImportType
from scopegraph.imports.csharp import parse_csproj

_CSPROJ = """
<Project Sdk="Microsoft.NET.Sdk">
  <PropertyGroup>
    <RootNamespace>MyApp</RootNamespace>
  </PropertyGroup>
  <ItemGroup>
    <PackageReference Include="Serilog.Sinks.Console" Version="5.0.0" />
    <ProjectReference Include="..\\Shared\\Shared.csproj" />
  </ItemGroup>
</Project>
"""


def _resolver(root: Path) -> CSharpImportResolver:
    resolver = CSharpImportResolver(root)
    resolver.load_config()
    return resolver


class TestCsproj:
    def test_root_namespace_and_references(self) -> None:
        manifest = parse_csproj(_CSPROJ)

        assert manifest.name == "MyApp"
        assert manifest.dependencies == {"Serilog.Sinks.Console"}
        assert manifest.project_references == ["Shared"]

    def test_name_falls_back_to_file_stem(self) -> None:
        assert parse_csproj("<Project />", Path("Billing.csproj")).name == "Billing"


class TestCSharpResolver:
    def test_classify(self, write_tree) -> None:
        root = write_tree({"MyApp.csproj": _CSPROJ})
        resolver = _resolver(root)

        assert resolver.classify("System.Linq") == ImportType.BUILTIN
        assert resolver.classify("MyApp.Models") == ImportType.RELATIVE
        assert resolver.classify("Shared.Dto") == ImportType.RELATIVE
        assert resolver.classify("Serilog.Sinks.Console") == ImportType.PACKAGE
        assert resolver.classify("Newtonsoft.Json.Linq") == ImportType.PACKAGE
        assert resolver.package_name("Newtonsoft.Json.Linq") == "Newtonsoft.Json"

    def test_namespace_resolves_to_directory_files(self, write_tree) -> None:
        """The root namespace is stripped: ``MyApp.Models`` lives in ``Models/``."""
        root = write_tree(
            {
                "MyApp.csproj": _CSPROJ,
                "Models/User.cs": "",
                "Models/Account.cs": "",
                "Program.cs": "",
            }
        )
        resolver = _resolver(root)

        candidates = resolver.resolve_candidates("MyApp.Models", root / "Program.cs")

        models = (root / "Models").resolve()
        assert candidates == [models / "Account.cs", models / "User.cs"]

    def test_type_name_resolves_to_file(self, write_tree) -> None:
        root = write_tree({"MyApp.csproj": _CSPROJ, "src/Services/Mailer.cs": ""})

        found = _resolver(root).resolve("MyApp.Services.Mailer", root / "Program.cs")

        assert found == (root / "src" / "Services" / "Mailer.cs").resolve()

    def test_builtin_never_resolved(self, tmp_path: Path) -> None:
        assert _resolver(tmp_path).resolve_candidates("System.IO", tmp_path / "A.cs") == []
