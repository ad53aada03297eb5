"""C / C++ ``#include`` resolution.

Handles:
- Relative to the including file's directory
- Include paths from compile_commands.json (``-I`` flags)
- Project root and common include directories: include/, src/, lib/, third_party/
- C and C++ standard headers, plus ``std::`` namespaces from ``using``
"""

from __future__ import annotations

import json
import os
import shlex
from pathlib import Path

from scopegraph.core.logging import get_logger
from scopegraph.imports.base import ImportResolver, ImportType, ManifestData
from scopegraph.imports.paths import is_relative_specifier

log = get_logger(__name__)

C_STDLIB_HEADERS = frozenset(
    {
        "assert.h",
        "complex.h",
        "ctype.h",
        "errno.h",
        "fenv.h",
        "float.h",
        "inttypes.h",
        "iso646.h",
        "limits.h",
        "locale.h",
        "math.h",
        "setjmp.h",
        "signal.h",
        "stdalign.h",
        "stdarg.h",
        "stdatomic.h",
        "stdbool.h",
        "stddef.h",
        "stdint.h",
        "stdio.h",
        "stdlib.h",
        "stdnoreturn.h",
        "string.h",
        "tgmath.h",
        "threads.h",
        "time.h",
        "uchar.h",
        "wchar.h",
        "wctype.h",
    }
)

CPP_STDLIB_HEADERS = frozenset(
    {
        "algorithm",
        "any",
        "array",
        "atomic",
        "bitset",
        "cassert",
        "cctype",
        "cerrno",
        "cfenv",
        "cfloat",
        "chrono",
        "cinttypes",
        "climits",
        "clocale",
        "cmath",
        "codecvt",
        "complex",
        "condition_variable",
        "csetjmp",
        "csignal",
        "cstdarg",
        "cstddef",
        "cstdint",
        "cstdio",
        "cstdlib",
        "cstring",
        "ctime",
        "cuchar",
        "cwchar",
        "cwctype",
        "deque",
        "exception",
        "execution",
        "filesystem",
        "forward_list",
        "fstream",
        "functional",
        "future",
        "initializer_list",
        "iomanip",
        "ios",
        "iosfwd",
        "iostream",
        "istream",
        "iterator",
        "limits",
        "list",
        "locale",
        "map",
        "memory",
        "memory_resource",
        "mutex",
        "new",
        "numeric",
        "optional",
        "ostream",
        "queue",
        "random",
        "ratio",
        "regex",
        "scoped_allocator",
        "set",
        "shared_mutex",
        "span",
        "sstream",
        "stack",
        "stdexcept",
        "streambuf",
        "string",
        "string_view",
        "syncstream",
        "system_error",
        "thread",
        "tuple",
        "type_traits",
        "typeindex",
        "typeinfo",
        "unordered_map",
        "unordered_set",
        "utility",
        "valarray",
        "variant",
        "vector",
        "version",
    }
)

_COMMON_INCLUDE_DIRS = ("include", "src", "lib", "third_party")


def include_paths_from_compile_commands(text: str, project_root: Path) -> list[Path]:
    """Distinct ``-I`` directories across all compile commands, in order."""
    try:
        commands = json.loads(text)
    except json.JSONDecodeError as e:
        log.warning("compile_commands_parse_failed", error=str(e))
        return []
    paths: list[Path] = []
    for cmd in commands if isinstance(commands, list) else []:
        if not isinstance(cmd, dict):
            continue
        args = cmd.get("arguments") or shlex.split(cmd.get("command", ""))
        directory = Path(cmd.get("directory") or project_root)
        for i, arg in enumerate(args):
            if not arg.startswith("-I"):
                continue
            value = arg[2:] or (args[i + 1] if i + 1 < len(args) else "")
            if not value or value.startswith("-"):
                continue
            path = Path(value) if os.path.isabs(value) else (directory / value).resolve()
            if path not in paths:
                paths.append(path)
    return paths


class CImportResolver(ImportResolver):
    language = "c"
    manifest_files = ("compile_commands.json", "build/compile_commands.json")

    def parse_manifest(self, text: str, path: Path) -> ManifestData:
        manifest = ManifestData(source_dirs=include_paths_from_compile_commands(text, self.project_root))
        for directory in self._default_include_dirs():
            if directory not in manifest.source_dirs:
                manifest.source_dirs.append(directory)
        return manifest

    def default_manifest(self) -> ManifestData:
        return ManifestData(source_dirs=self._default_include_dirs())

    def _default_include_dirs(self) -> list[Path]:
        dirs = [self.project_root]
        dirs.extend(self.project_root / d for d in _COMMON_INCLUDE_DIRS if (self.project_root / d).is_dir())
        return dirs

    def add_include_path(self, include_path: Path | str) -> None:
        path = Path(include_path)
        if not path.is_absolute():
            path = (self.project_root / path).resolve()
        if path not in self.manifest.source_dirs:
            self.manifest.source_dirs.append(path)

    # ------------------------------------------------------------------

    def is_builtin_module(self, name: str) -> bool:
        if name == "std" or name.startswith("std::"):
            return True
        base = name.rsplit("/", 1)[-1]
        return base in C_STDLIB_HEADERS or base in CPP_STDLIB_HEADERS

    def classify(self, spec: str) -> ImportType:
        if self.is_builtin_module(spec):
            return ImportType.BUILTIN
        if "::" in spec or not _looks_like_header(spec):
            # using-declarations name namespaces, not files
            return ImportType.UNKNOWN
        if is_relative_specifier(spec):
            return ImportType.RELATIVE
        if os.path.isabs(spec):
            return ImportType.ABSOLUTE
        # "foo.h" and <lib/foo.h> alike are project headers unless proven otherwise
        return ImportType.RELATIVE

    def package_name(self, spec: str) -> str:
        return spec

    def resolve(self, spec: str, current_file: Path | str) -> Path | None:
        if self.classify(spec) not in (ImportType.RELATIVE, ImportType.ABSOLUTE):
            return None
        if os.path.isabs(spec):
            path = Path(spec)
            return path if path.is_file() else None
        candidates = [self._absolute(current_file).parent / spec]
        include_dirs = self.manifest.source_dirs or self._default_include_dirs()
        candidates.extend(directory / spec for directory in include_dirs)
        for candidate in candidates:
            normalized = Path(os.path.normpath(candidate))
            if normalized.is_file():
                return normalized.resolve()
        return None


def _looks_like_header(spec: str) -> bool:
    return "." in spec.rsplit("/", 1)[-1] or "/" in spec
