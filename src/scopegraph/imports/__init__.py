"""Per-language import resolvers: specifier -> project file."""

from __future__ import annotations

from pathlib import Path

from scopegraph.core.errors import LanguageError
from scopegraph.imports.base import ImportResolver, ImportType, ManifestData, ResolvedImport
from scopegraph.imports.c import CImportResolver
from scopegraph.imports.csharp import CSharpImportResolver
from scopegraph.imports.go import GoImportResolver
from scopegraph.imports.python import PythonImportResolver
from scopegraph.imports.rust import RustImportResolver
from scopegraph.imports.typescript import TypeScriptImportResolver
from scopegraph.parsing.packs import get_pack

# Keyed by LanguagePack.family
RESOLVERS: dict[str, type[ImportResolver]] = {
    "typescript": TypeScriptImportResolver,
    "python": PythonImportResolver,
    "rust": RustImportResolver,
    "go": GoImportResolver,
    "c": CImportResolver,
    "cpp": CImportResolver,
    "csharp": CSharpImportResolver,
}


def resolver_for_language(language: str, project_root: Path | str | None = None, *, load: bool = True) -> ImportResolver:
    """Build the resolver for ``language`` (a language tag or family).

    With ``load`` the project manifest under ``project_root`` is read.

    Raises:
        LanguageError: No resolver for the language.
    """
    pack = get_pack(language)
    family = pack.family if pack is not None else language
    cls = RESOLVERS.get(family)
    if cls is None:
        raise LanguageError.unsupported_language(language)
    resolver = cls(project_root)
    if load:
        resolver.load_config()
    return resolver


__all__ = [
    "CImportResolver",
    "CSharpImportResolver",
    "GoImportResolver",
    "ImportResolver",
    "ImportType",
    "ManifestData",
    "PythonImportResolver",
    "ResolvedImport",
    "RustImportResolver",
    "TypeScriptImportResolver",
    "resolver_for_language",
]
