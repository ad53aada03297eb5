"""Rust ``use`` path resolution.

Handles:
- ``crate::`` paths resolved from the crate root (``src/``)
- ``self::`` and ``super::`` paths resolved from the current module
- ``foo.rs`` and ``foo/mod.rs`` module layouts
- Standard crates (std, core, alloc, ...) and Cargo.toml dependencies
"""

from __future__ import annotations

import re
from pathlib import Path

from scopegraph.imports.base import ImportResolver, ImportType, ManifestData
from scopegraph.imports.paths import first_file, package_file, resolve_segments

STD_CRATES = frozenset({"std", "core", "alloc", "proc_macro", "test"})

# Well-known crates treated as packages even without a Cargo.toml entry
COMMON_CRATES = frozenset(
    {
        "serde",
        "serde_json",
        "tokio",
        "async_std",
        "futures",
        "log",
        "env_logger",
        "tracing",
        "anyhow",
        "thiserror",
        "clap",
        "structopt",
        "regex",
        "lazy_static",
        "once_cell",
        "chrono",
        "uuid",
        "rand",
        "reqwest",
        "hyper",
        "actix",
        "diesel",
        "sqlx",
        "rusqlite",
        "syn",
        "quote",
        "proc_macro2",
    }
)

_LOCAL_ROOTS = ("crate", "self", "super")
_EXTENSIONS = (".rs",)
_INDEX = ("mod.rs",)
_CRATE_ROOTS = ("lib.rs", "main.rs")
_SECTION = re.compile(r"^\[([^\]]+)\]")
_KEY = re.compile(r"^([A-Za-z0-9_-]+)\s*=")
_STRING_VALUE = re.compile(r'^\w+\s*=\s*"([^"]+)"')


def parse_cargo_toml(text: str) -> ManifestData:
    """Crate name and dependency names, read line by line."""
    manifest = ManifestData()
    section = ""
    for raw in text.splitlines():
        line = raw.split("#", 1)[0].strip()
        if not line:
            continue
        match = _SECTION.match(line)
        if match:
            section = match.group(1).strip()
            # [dependencies.serde] table form
            for table in ("dependencies", "dev-dependencies"):
                if section.startswith(f"{table}."):
                    target = manifest.dependencies if table == "dependencies" else manifest.dev_dependencies
                    target.add(section[len(table) + 1 :].replace("-", "_"))
            continue
        if section == "package" and line.startswith("name"):
            value = _STRING_VALUE.match(line)
            if value:
                manifest.name = value.group(1).replace("-", "_")
        elif section in ("dependencies", "dev-dependencies", "build-dependencies"):
            key = _KEY.match(line)
            if key:
                target = manifest.dev_dependencies if section == "dev-dependencies" else manifest.dependencies
                target.add(key.group(1).replace("-", "_"))
    return manifest


class RustImportResolver(ImportResolver):
    language = "rust"
    manifest_files = ("Cargo.toml",)

    def parse_manifest(self, text: str, path: Path) -> ManifestData:
        return parse_cargo_toml(text)

    @property
    def crate_root(self) -> Path:
        src = self.project_root / "src"
        return src if src.is_dir() else self.project_root

    def is_builtin_module(self, name: str) -> bool:
        return name.split("::")[0] in STD_CRATES

    def classify(self, spec: str) -> ImportType:
        head = spec.split("::")[0]
        if head in _LOCAL_ROOTS or (self.manifest.name and head == self.manifest.name):
            return ImportType.RELATIVE
        if head in STD_CRATES:
            return ImportType.BUILTIN
        if head in self.manifest.all_dependencies or head in COMMON_CRATES:
            return ImportType.PACKAGE
        return ImportType.UNKNOWN

    def package_name(self, spec: str) -> str:
        return spec.split("::")[0]

    def resolve(self, spec: str, current_file: Path | str) -> Path | None:
        segments = [s for s in spec.split("::") if s]
        if not segments:
            return None
        head, rest = segments[0], segments[1:]
        current = self._absolute(current_file)
        if head == "crate" or (self.manifest.name and head == self.manifest.name):
            base = self.crate_root
        elif head == "self":
            if not rest:
                return current.resolve() if current.is_file() else None
            base = _module_dir(current)
        elif head == "super":
            base = _module_dir(current).parent
            while rest and rest[0] == "super":
                base = base.parent
                rest = rest[1:]
        else:
            return None

        if not rest:
            found = self._module_file(base)
        else:
            found = resolve_segments(base, rest, extensions=_EXTENSIONS, index_files=_INDEX)
            if found is None and len(rest) == 1:
                # crate::Item / super::Item live in the base module itself
                found = self._module_file(base)
        return found.resolve() if found is not None else None

    def _module_file(self, directory: Path) -> Path | None:
        if directory.resolve() == self.crate_root.resolve():
            return first_file(directory / name for name in _CRATE_ROOTS)
        return package_file(directory, extensions=_EXTENSIONS, index_files=_INDEX)


def _module_dir(file_path: Path) -> Path:
    """Directory holding the children of the module ``file_path`` defines."""
    if file_path.stem in ("mod", "lib", "main"):
        return file_path.parent
    return file_path.parent / file_path.stem
