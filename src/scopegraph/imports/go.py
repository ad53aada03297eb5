"""Go import resolution.

Import paths name package directories.  Paths under the go.mod module
path, relative paths, and vendored packages resolve to the package's
primary file (``<dir>/<dir>.go``, else the first non-test ``.go`` file).
"""

from __future__ import annotations

from pathlib import Path

from scopegraph.imports.base import ImportResolver, ImportType, ManifestData
from scopegraph.imports.paths import is_relative_specifier

STDLIB_PACKAGES = frozenset(
    {
        "fmt",
        "io",
        "os",
        "bufio",
        "bytes",
        "strings",
        "strconv",
        "errors",
        "log",
        "flag",
        "context",
        "time",
        "math",
        "sort",
        "sync",
        "atomic",
        "runtime",
        "reflect",
        "unsafe",
        "io/ioutil",
        "io/fs",
        "os/exec",
        "os/signal",
        "path",
        "path/filepath",
        "net",
        "net/http",
        "net/url",
        "net/http/httptest",
        "net/http/httputil",
        "encoding",
        "encoding/json",
        "encoding/xml",
        "encoding/base64",
        "encoding/binary",
        "encoding/csv",
        "encoding/gob",
        "encoding/hex",
        "crypto",
        "crypto/md5",
        "crypto/sha1",
        "crypto/sha256",
        "crypto/sha512",
        "crypto/rand",
        "crypto/tls",
        "crypto/x509",
        "crypto/aes",
        "crypto/cipher",
        "text/template",
        "html/template",
        "regexp",
        "container/heap",
        "container/list",
        "container/ring",
        "testing",
        "testing/quick",
        "testing/iotest",
        "compress/gzip",
        "compress/zlib",
        "archive/zip",
        "archive/tar",
        "database/sql",
        "database/sql/driver",
        "embed",
        "go/ast",
        "go/parser",
        "go/token",
        "go/format",
        "unicode",
        "unicode/utf8",
        "unicode/utf16",
        "image",
        "image/png",
        "image/jpeg",
        "image/gif",
        "debug/dwarf",
        "debug/elf",
        "debug/pe",
    }
)


def parse_go_mod(text: str) -> ManifestData:
    """Module path and required module paths."""
    manifest = ManifestData()
    in_require = False
    for raw in text.splitlines():
        line = raw.split("//", 1)[0].strip()
        if not line:
            continue
        if line.startswith("module "):
            manifest.name = line[len("module ") :].strip().strip('"')
        elif line.startswith("require ("):
            in_require = True
        elif line == ")":
            in_require = False
        elif line.startswith("require ") or in_require:
            parts = line.removeprefix("require ").split()
            if len(parts) >= 2:
                manifest.dependencies.add(parts[0])
    return manifest


def root_package(path: str) -> str:
    """``github.com/org/repo/sub`` -> ``github.com/org/repo``."""
    parts = path.split("/")
    if "." in parts[0] and len(parts) >= 3:
        return "/".join(parts[:3])
    return path


class GoImportResolver(ImportResolver):
    language = "go"
    manifest_files = ("go.mod",)

    def parse_manifest(self, text: str, path: Path) -> ManifestData:
        return parse_go_mod(text)

    def is_builtin_module(self, name: str) -> bool:
        first = name.split("/")[0]
        if "." in first:
            return False
        return name in STDLIB_PACKAGES or first in STDLIB_PACKAGES

    def _in_module(self, spec: str) -> bool:
        name = self.manifest.name
        return bool(name) and (spec == name or spec.startswith(f"{name}/"))

    def classify(self, spec: str) -> ImportType:
        if self.is_builtin_module(spec):
            return ImportType.BUILTIN
        if is_relative_specifier(spec) or self._in_module(spec):
            return ImportType.RELATIVE
        if root_package(spec) in self.manifest.dependencies or spec in self.manifest.dependencies:
            return ImportType.PACKAGE
        if "." in spec.split("/")[0]:
            return ImportType.PACKAGE
        return ImportType.UNKNOWN

    def package_name(self, spec: str) -> str:
        return root_package(spec)

    def _package_dir(self, spec: str, current_file: Path | str) -> Path | None:
        if self.is_builtin_module(spec):
            return None
        if self._in_module(spec):
            rel = spec[len(self.manifest.name or "") :].lstrip("/")
            directory = self.project_root / rel
        elif is_relative_specifier(spec):
            directory = (self._absolute(current_file).parent / spec).resolve()
        else:
            directory = self.project_root / "vendor" / spec
        return directory if directory.is_dir() else None

    def resolve(self, spec: str, current_file: Path | str) -> Path | None:
        files = self.resolve_candidates(spec, current_file)
        return files[0] if files else None

    def resolve_candidates(self, spec: str, current_file: Path | str) -> list[Path]:
        directory = self._package_dir(spec, current_file)
        if directory is None:
            return []
        files = sorted(
            p.resolve() for p in directory.iterdir() if p.suffix == ".go" and not p.name.endswith("_test.go") and p.is_file()
        )
        primary = [p for p in files if p.stem == directory.name]
        return primary + [p for p in files if p not in primary]
