"""C# ``using`` resolution.

Namespaces map onto directories by convention: ``MyApp.Models`` lives in
``Models/`` (root namespace stripped) or ``MyApp/Models/``, optionally under
src/.  A namespace resolves to every ``.cs`` file in its directory, or to
``<Name>.cs`` when a segment names a single file.
"""

from __future__ import annotations

import re
from pathlib import Path

from scopegraph.imports.base import ImportResolver, ImportType, ManifestData
from scopegraph.imports.paths import first_file

BCL_NAMESPACES = frozenset(
    {
        "System",
        "System.Collections",
        "System.Collections.Generic",
        "System.Collections.Concurrent",
        "System.Collections.Immutable",
        "System.Collections.ObjectModel",
        "System.Collections.Specialized",
        "System.ComponentModel",
        "System.ComponentModel.DataAnnotations",
        "System.Configuration",
        "System.Data",
        "System.Diagnostics",
        "System.Drawing",
        "System.Dynamic",
        "System.Globalization",
        "System.IO",
        "System.IO.Compression",
        "System.IO.Pipes",
        "System.Linq",
        "System.Linq.Expressions",
        "System.Net",
        "System.Net.Http",
        "System.Net.Sockets",
        "System.Net.WebSockets",
        "System.Numerics",
        "System.Reflection",
        "System.Resources",
        "System.Runtime",
        "System.Runtime.CompilerServices",
        "System.Runtime.InteropServices",
        "System.Runtime.Serialization",
        "System.Security",
        "System.Security.Cryptography",
        "System.Text",
        "System.Text.Json",
        "System.Text.RegularExpressions",
        "System.Threading",
        "System.Threading.Tasks",
        "System.Threading.Channels",
        "System.Timers",
        "System.Transactions",
        "System.Web",
        "System.Xml",
        "System.Xml.Linq",
        "System.Xml.Serialization",
        "Microsoft.Extensions",
        "Microsoft.Extensions.DependencyInjection",
        "Microsoft.Extensions.Logging",
        "Microsoft.Extensions.Configuration",
        "Microsoft.Extensions.Hosting",
        "Microsoft.Extensions.Options",
        "Microsoft.AspNetCore",
        "Microsoft.AspNetCore.Mvc",
        "Microsoft.AspNetCore.Http",
        "Microsoft.EntityFrameworkCore",
        "Microsoft.Data",
    }
)

COMMON_NUGET_PACKAGES = frozenset(
    {
        "Newtonsoft.Json",
        "AutoMapper",
        "FluentValidation",
        "MediatR",
        "Serilog",
        "NLog",
        "log4net",
        "Polly",
        "Dapper",
        "Moq",
        "xunit",
        "NUnit",
        "FluentAssertions",
        "Bogus",
        "Swashbuckle",
        "Hangfire",
    }
)

_SOURCE_DIRS = ("", "src", "Source", "Sources")
_ROOT_NAMESPACE = re.compile(r"<RootNamespace>([^<]+)</RootNamespace>")
_ASSEMBLY_NAME = re.compile(r"<AssemblyName>([^<]+)</AssemblyName>")
_PACKAGE_REFERENCE = re.compile(r'<PackageReference\s+Include="([^"]+)"')
_PROJECT_REFERENCE = re.compile(r'<ProjectReference\s+Include="([^"]+)"')


def parse_csproj(text: str, path: Path | None = None) -> ManifestData:
    """Root namespace, PackageReference and ProjectReference names.

    The root namespace falls back to AssemblyName, then the project file name.
    """
    manifest = ManifestData()
    match = _ROOT_NAMESPACE.search(text) or _ASSEMBLY_NAME.search(text)
    if match:
        manifest.name = match.group(1).strip()
    elif path is not None:
        manifest.name = path.stem
    manifest.dependencies.update(m.group(1) for m in _PACKAGE_REFERENCE.finditer(text))
    for m in _PROJECT_REFERENCE.finditer(text):
        # Include paths use Windows separators
        manifest.project_references.append(Path(m.group(1).replace("\\", "/")).stem)
    return manifest


class CSharpImportResolver(ImportResolver):
    language = "csharp"

    def find_manifest(self) -> Path | None:
        projects = sorted(self.project_root.glob("*.csproj"))
        return projects[0] if projects else None

    def parse_manifest(self, text: str, path: Path) -> ManifestData:
        return parse_csproj(text, path)

    def is_builtin_module(self, name: str) -> bool:
        return name in BCL_NAMESPACES or name.split(".")[0] in ("System", "Microsoft")

    def _is_project_namespace(self, spec: str) -> bool:
        roots = [self.manifest.name, *self.manifest.project_references]
        return any(root and (spec == root or spec.startswith(f"{root}.")) for root in roots)

    def classify(self, spec: str) -> ImportType:
        if self.is_builtin_module(spec):
            return ImportType.BUILTIN
        if self._is_project_namespace(spec):
            return ImportType.RELATIVE
        root = spec.split(".")[0]
        deps = self.manifest.dependencies
        if any(spec == d or spec.startswith(f"{d}.") for d in deps) or root in deps:
            return ImportType.PACKAGE
        if root in COMMON_NUGET_PACKAGES or any(spec == p or spec.startswith(f"{p}.") for p in COMMON_NUGET_PACKAGES):
            return ImportType.PACKAGE
        if self._namespace_files(spec):
            return ImportType.RELATIVE
        return ImportType.UNKNOWN

    def package_name(self, spec: str) -> str:
        deps = sorted(self.manifest.dependencies | COMMON_NUGET_PACKAGES, key=len, reverse=True)
        for dep in deps:
            if spec == dep or spec.startswith(f"{dep}."):
                return dep
        return spec.split(".")[0]

    def resolve(self, spec: str, current_file: Path | str) -> Path | None:
        files = self.resolve_candidates(spec, current_file)
        return files[0] if files else None

    def resolve_candidates(self, spec: str, current_file: Path | str) -> list[Path]:
        if self.classify(spec) in (ImportType.BUILTIN, ImportType.PACKAGE):
            return []
        return self._namespace_files(spec)

    def _namespace_files(self, spec: str) -> list[Path]:
        parts = spec.split(".")
        variants = [parts]
        root = self.manifest.name
        if root and spec.startswith(f"{root}."):
            variants.insert(0, spec[len(root) + 1 :].split("."))
        for segments in variants:
            for src in _SOURCE_DIRS:
                base = self.project_root / src if src else self.project_root
                directory = base.joinpath(*segments)
                if directory.is_dir():
                    files = sorted(p.resolve() for p in directory.glob("*.cs") if p.is_file())
                    if files:
                        return files
            # Longest prefix naming a single file: MyApp.Models.User -> Models/User.cs
            for i in range(len(segments), 0, -1):
                for src in _SOURCE_DIRS:
                    base = self.project_root / src if src else self.project_root
                    found = first_file([base.joinpath(*segments[:i]).with_suffix(".cs")])
                    if found is not None:
                        return [found.resolve()]
        return []
