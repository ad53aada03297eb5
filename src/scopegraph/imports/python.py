"""Python import resolution.

Handles:
- Relative imports: ``from .models import User``, ``from ..base import X``
- Absolute imports searched under the project's source roots (src layout,
  ``tool.setuptools.packages.find.where``, flat layout)
- Standard library detection via ``sys.stdlib_module_names``
- Declared dependencies from pyproject.toml (PEP 621 and Poetry) and
  requirements.txt
"""

from __future__ import annotations

import re
import sys
import tomllib
from pathlib import Path

from scopegraph.core.logging import get_logger
from scopegraph.imports.base import ImportResolver, ImportType, ManifestData
from scopegraph.imports.paths import first_file

log = get_logger(__name__)

# "requests[socks]>=2.0; python_version<'3.12'" -> "requests"
_REQUIREMENT_NAME = re.compile(r"^\s*([A-Za-z0-9][A-Za-z0-9._-]*)")


def requirement_name(requirement: str) -> str | None:
    match = _REQUIREMENT_NAME.match(requirement)
    if match is None:
        return None
    return match.group(1).lower().replace("-", "_")


def parse_requirements_txt(text: str) -> set[str]:
    names: set[str] = set()
    for line in text.splitlines():
        line = line.split("#", 1)[0].strip()
        if not line or line.startswith("-"):
            continue
        name = requirement_name(line)
        if name:
            names.add(name)
    return names


class PythonImportResolver(ImportResolver):
    language = "python"
    manifest_files = ("pyproject.toml",)

    def parse_manifest(self, text: str, path: Path) -> ManifestData:
        manifest = ManifestData()
        try:
            data = tomllib.loads(text)
        except tomllib.TOMLDecodeError as e:
            log.warning("pyproject_parse_failed", path=str(path), error=str(e))
            data = {}

        project = data.get("project", {})
        manifest.name = project.get("name")
        for requirement in project.get("dependencies", []):
            if name := requirement_name(requirement):
                manifest.dependencies.add(name)
        for group in project.get("optional-dependencies", {}).values():
            for requirement in group:
                if name := requirement_name(requirement):
                    manifest.dev_dependencies.add(name)

        poetry = data.get("tool", {}).get("poetry", {})
        manifest.name = manifest.name or poetry.get("name")
        manifest.dependencies.update(
            n.lower().replace("-", "_") for n in poetry.get("dependencies", {}) if n != "python"
        )
        manifest.dev_dependencies.update(
            n.lower().replace("-", "_") for n in poetry.get("dev-dependencies", {})
        )

        find = data.get("tool", {}).get("setuptools", {}).get("packages", {})
        where = find.get("find", {}).get("where", []) if isinstance(find, dict) else []
        manifest.source_dirs = [(path.parent / w).resolve() for w in where]
        manifest.source_dirs.extend(d for d in self._detect_source_dirs() if d not in manifest.source_dirs)
        self._read_requirements(manifest)
        return manifest

    def default_manifest(self) -> ManifestData:
        manifest = ManifestData(source_dirs=self._detect_source_dirs())
        self._read_requirements(manifest)
        return manifest

    def _detect_source_dirs(self) -> list[Path]:
        dirs = [self.project_root / d for d in ("src", "lib") if (self.project_root / d).is_dir()]
        dirs.append(self.project_root)
        return dirs

    def _read_requirements(self, manifest: ManifestData) -> None:
        path = self.project_root / "requirements.txt"
        if path.is_file():
            manifest.dependencies.update(parse_requirements_txt(path.read_text(encoding="utf-8", errors="replace")))

    @property
    def _source_dirs(self) -> list[Path]:
        return self.manifest.source_dirs or self._detect_source_dirs()

    # ------------------------------------------------------------------

    def is_builtin_module(self, name: str) -> bool:
        return name.split(".")[0] in sys.stdlib_module_names

    def classify(self, spec: str) -> ImportType:
        if spec.startswith("."):
            return ImportType.RELATIVE
        if self.is_builtin_module(spec):
            return ImportType.BUILTIN
        top = spec.split(".")[0]
        if top.lower().replace("-", "_") in self.manifest.all_dependencies:
            return ImportType.PACKAGE
        if self._find_module(spec) is not None:
            return ImportType.ABSOLUTE
        return ImportType.UNKNOWN

    def is_local_import(self, spec: str) -> bool:
        """Relative imports and modules found under a source root."""
        import_type = self.classify(spec)
        return import_type in (ImportType.RELATIVE, ImportType.ABSOLUTE)

    def package_name(self, spec: str) -> str:
        return spec.split(".")[0]

    def resolve(self, spec: str, current_file: Path | str) -> Path | None:
        if spec.startswith("."):
            dots = len(spec) - len(spec.lstrip("."))
            base = self._absolute(current_file).parent
            for _ in range(dots - 1):
                base = base.parent
            module = spec[dots:]
            return _module_file(base, module.split(".") if module else [])
        if self.is_builtin_module(spec):
            return None
        return self._find_module(spec)

    def _find_module(self, spec: str) -> Path | None:
        segments = spec.split(".")
        for src in self._source_dirs:
            found = _module_file(src, segments)
            if found is not None:
                return found
        return None


def _module_file(base: Path, segments: list[str]) -> Path | None:
    """``a.b`` -> ``a/b.py`` or ``a/b/__init__.py`` under ``base``."""
    target = base.joinpath(*segments)
    found = first_file([target.with_name(target.name + ".py"), target.with_name(target.name + ".pyi")]) if segments else None
    if found is None:
        found = first_file([target / "__init__.py", target / "__init__.pyi"])
    return found.resolve() if found is not None else None
