"""Import resolver contract.

Each language resolver reads its ecosystem's manifest with a minimal
parser (package identity and declared dependency names only), classifies
import specifiers, and resolves local specifiers to files.  ``None`` from
``resolve`` is the "not a project file" signal: unresolvable external
packages never raise, and a missing manifest degrades to no declared
dependencies.
"""

from __future__ import annotations

import os
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import ClassVar

from scopegraph.core.logging import get_logger

log = get_logger(__name__)


class ImportType(str, Enum):
    """Classification of an import specifier."""

    RELATIVE = "relative"  # ./foo, ../bar, crate::x, from .m import y
    ABSOLUTE = "absolute"  # /path/to/file, project-rooted module paths
    ALIAS = "alias"  # @/foo, ~/bar, tsconfig paths
    PACKAGE = "package"  # Declared or well-known third-party dependency
    BUILTIN = "builtin"  # Standard library
    UNKNOWN = "unknown"


LOCAL_TYPES = frozenset({ImportType.RELATIVE, ImportType.ABSOLUTE, ImportType.ALIAS})


@dataclass(frozen=True, slots=True)
class ResolvedImport:
    """Full resolution of one specifier."""

    specifier: str
    absolute_path: Path | None
    is_local: bool
    import_type: ImportType
    package_name: str | None = None


@dataclass
class ManifestData:
    """Pre-parsed project manifest.

    ``name`` is the project identity the language uses for self-imports:
    Go module path, Rust crate name, C# root namespace, Python
    distribution name.
    """

    name: str | None = None
    dependencies: set[str] = field(default_factory=set)
    dev_dependencies: set[str] = field(default_factory=set)
    # Source roots (Python src layout, C include paths, TS baseUrl)
    source_dirs: list[Path] = field(default_factory=list)
    # tsconfig "paths": pattern -> replacement patterns
    path_aliases: dict[str, list[str]] = field(default_factory=dict)
    # C# ProjectReference names
    project_references: list[str] = field(default_factory=list)

    @property
    def all_dependencies(self) -> set[str]:
        return self.dependencies | self.dev_dependencies


class ImportResolver(ABC):
    """Base class for per-language import resolvers."""

    language: ClassVar[str]
    # Manifest file names looked up in the project root, in order
    manifest_files: ClassVar[tuple[str, ...]] = ()

    def __init__(self, project_root: Path | str | None = None, manifest: ManifestData | None = None) -> None:
        self.project_root = Path(project_root or Path.cwd()).resolve()
        self.manifest = manifest if manifest is not None else ManifestData()

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def load_config(self, project_root: Path | str | None = None, config_path: Path | str | None = None) -> None:
        """Read the project manifest.  Absence is not an error."""
        if project_root is not None:
            self.project_root = Path(project_root).resolve()
        path = Path(config_path) if config_path is not None else self.find_manifest()
        if path is None or not path.is_file():
            log.debug("manifest_not_found", language=self.language, root=str(self.project_root))
            self.manifest = self.default_manifest()
            return
        try:
            text = path.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            log.warning("manifest_unreadable", language=self.language, path=str(path), error=str(e))
            self.manifest = self.default_manifest()
            return
        self.manifest = self.parse_manifest(text, path)
        log.debug(
            "manifest_loaded",
            language=self.language,
            path=str(path),
            name=self.manifest.name,
            dependencies=len(self.manifest.all_dependencies),
        )

    def find_manifest(self) -> Path | None:
        for name in self.manifest_files:
            candidate = self.project_root / name
            if candidate.is_file():
                return candidate
        return None

    def default_manifest(self) -> ManifestData:
        return ManifestData()

    @abstractmethod
    def parse_manifest(self, text: str, path: Path) -> ManifestData:
        """Extract package identity and dependency names from manifest text."""
        ...

    # ------------------------------------------------------------------
    # Classification
    # ------------------------------------------------------------------

    @abstractmethod
    def is_builtin_module(self, name: str) -> bool:
        """True for standard-library modules."""
        ...

    @abstractmethod
    def classify(self, spec: str) -> ImportType:
        ...

    def is_local_import(self, spec: str) -> bool:
        return self.classify(spec) in LOCAL_TYPES

    def package_name(self, spec: str) -> str:
        return spec

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    @abstractmethod
    def resolve(self, spec: str, current_file: Path | str) -> Path | None:
        """Absolute path of the file ``spec`` names, or None if not a project file."""
        ...

    def resolve_candidates(self, spec: str, current_file: Path | str) -> list[Path]:
        """Every file that may define names imported through ``spec``.

        A single file for most languages; package-per-directory languages
        return all files of the package, primary file first.
        """
        path = self.resolve(spec, current_file)
        return [path] if path is not None else []

    def resolve_full(self, spec: str, current_file: Path | str) -> ResolvedImport:
        path = self.resolve(spec, current_file)
        import_type = self.classify(spec)
        is_local = path is not None or import_type in LOCAL_TYPES
        return ResolvedImport(
            specifier=spec,
            absolute_path=path,
            is_local=is_local,
            import_type=import_type,
            package_name=None if is_local else self.package_name(spec),
        )

    def get_relative_path(self, absolute_path: Path | str) -> str:
        """Project-relative POSIX path."""
        return Path(os.path.relpath(Path(absolute_path), self.project_root)).as_posix()

    def _absolute(self, current_file: Path | str) -> Path:
        path = Path(current_file)
        return path if path.is_absolute() else self.project_root / path
