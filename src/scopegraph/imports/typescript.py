"""TypeScript / JavaScript import resolution.

Handles:
- Relative: './utils' -> probe extensions + /index variants
- Extension remapping: './foo.js' -> './foo.ts' (TypeScript convention)
- tsconfig ``baseUrl`` and ``paths`` aliases ('@/components/x')
- Bare specifiers: 'react' -> external package, never resolved
- Node builtins, with or without the ``node:`` prefix
"""

from __future__ import annotations

import json
import os
import re
from pathlib import Path

from scopegraph.core.logging import get_logger
from scopegraph.imports.base import ImportResolver, ImportType, ManifestData
from scopegraph.imports.paths import first_file, is_relative_specifier

log = get_logger(__name__)

_EXTENSIONS = (".ts", ".tsx", ".d.ts", ".js", ".jsx", ".mjs", ".mts", ".cjs", ".cts")
_INDEX_NAMES = tuple(f"index{ext}" for ext in _EXTENSIONS)
_JS_REMAP = (".js", ".jsx", ".mjs", ".cjs")

_NODE_BUILTINS = frozenset(
    {
        "assert",
        "async_hooks",
        "buffer",
        "child_process",
        "cluster",
        "console",
        "constants",
        "crypto",
        "dgram",
        "diagnostics_channel",
        "dns",
        "domain",
        "events",
        "fs",
        "http",
        "http2",
        "https",
        "inspector",
        "module",
        "net",
        "os",
        "path",
        "perf_hooks",
        "process",
        "punycode",
        "querystring",
        "readline",
        "repl",
        "stream",
        "string_decoder",
        "timers",
        "tls",
        "trace_events",
        "tty",
        "url",
        "util",
        "v8",
        "vm",
        "wasi",
        "worker_threads",
        "zlib",
    }
)

# // line and /* block */ comments, skipping string contents
_JSONC_TOKEN = re.compile(r'"(?:\\.|[^"\\])*"|//[^\n]*|/\*.*?\*/', re.DOTALL)
_TRAILING_COMMA = re.compile(r",(\s*[}\]])")


def strip_json_comments(text: str) -> str:
    """tsconfig files are JSON with comments and trailing commas."""
    without = _JSONC_TOKEN.sub(lambda m: m.group(0) if m.group(0).startswith('"') else "", text)
    return _TRAILING_COMMA.sub(r"\1", without)


def package_name(spec: str) -> str:
    parts = spec.split("/")
    if spec.startswith("@") and len(parts) > 1:
        return "/".join(parts[:2])
    return parts[0]


class TypeScriptImportResolver(ImportResolver):
    language = "typescript"
    manifest_files = ("tsconfig.json", "jsconfig.json")

    def parse_manifest(self, text: str, path: Path) -> ManifestData:
        manifest = ManifestData()
        try:
            config = json.loads(strip_json_comments(text))
        except json.JSONDecodeError as e:
            log.warning("tsconfig_parse_failed", path=str(path), error=str(e))
            config = {}
        options = config.get("compilerOptions", {}) if isinstance(config, dict) else {}
        base_url = options.get("baseUrl")
        if isinstance(base_url, str):
            manifest.source_dirs.append((path.parent / base_url).resolve())
        for pattern, targets in (options.get("paths") or {}).items():
            if isinstance(targets, list):
                manifest.path_aliases[pattern] = [t for t in targets if isinstance(t, str)]
        self._read_package_json(path.parent / "package.json", manifest)
        return manifest

    def default_manifest(self) -> ManifestData:
        manifest = ManifestData()
        self._read_package_json(self.project_root / "package.json", manifest)
        return manifest

    @staticmethod
    def _read_package_json(path: Path, manifest: ManifestData) -> None:
        if not path.is_file():
            return
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            log.warning("package_json_unreadable", path=str(path), error=str(e))
            return
        if not isinstance(data, dict):
            return
        if isinstance(data.get("name"), str):
            manifest.name = data["name"]
        for key in ("dependencies", "peerDependencies", "optionalDependencies"):
            manifest.dependencies.update(data.get(key) or {})
        manifest.dev_dependencies.update(data.get("devDependencies") or {})

    # ------------------------------------------------------------------

    def is_builtin_module(self, name: str) -> bool:
        if name.startswith("node:"):
            return True
        return name.split("/")[0] in _NODE_BUILTINS

    def _alias_match(self, spec: str) -> list[str] | None:
        """Replacement paths of the first tsconfig ``paths`` pattern matching ``spec``."""
        for pattern, targets in self.manifest.path_aliases.items():
            if "*" in pattern:
                prefix, _, suffix = pattern.partition("*")
                if spec.startswith(prefix) and spec.endswith(suffix) and len(spec) >= len(prefix) + len(suffix):
                    rest = spec[len(prefix) : len(spec) - len(suffix)]
                    return [t.replace("*", rest) for t in targets]
            elif spec == pattern:
                return list(targets)
        return None

    def classify(self, spec: str) -> ImportType:
        if is_relative_specifier(spec):
            return ImportType.RELATIVE
        if spec.startswith("/"):
            return ImportType.ABSOLUTE
        if self._alias_match(spec) is not None or spec.startswith(("@/", "~/")):
            return ImportType.ALIAS
        if self.is_builtin_module(spec):
            return ImportType.BUILTIN
        return ImportType.PACKAGE

    def package_name(self, spec: str) -> str:
        return package_name(spec.removeprefix("node:"))

    def resolve(self, spec: str, current_file: Path | str) -> Path | None:
        import_type = self.classify(spec)
        if import_type == ImportType.RELATIVE:
            return self._probe(self._absolute(current_file).parent / spec)
        if import_type == ImportType.ABSOLUTE:
            return self._probe(self.project_root / spec.lstrip("/"))
        if import_type == ImportType.ALIAS:
            base = self.manifest.source_dirs[0] if self.manifest.source_dirs else self.project_root
            targets = self._alias_match(spec)
            if targets is None:
                # Conventional '@/x' and '~/x' -> <root>/src/x, then <root>/x
                rest = spec[2:]
                targets = [f"src/{rest}", rest]
            for target in targets:
                found = self._probe(base / target)
                if found is not None:
                    return found
            return None
        if import_type == ImportType.PACKAGE and self.manifest.source_dirs:
            # baseUrl makes bare specifiers resolvable against the project
            return self._probe(self.manifest.source_dirs[0] / spec)
        return None

    @staticmethod
    def _probe(target: Path) -> Path | None:
        target = Path(os.path.normpath(target))
        if target.is_file():
            return target.resolve()
        stem = str(target)
        for ext in _JS_REMAP:
            if stem.endswith(ext):
                stem = stem[: -len(ext)]
                break
        found = first_file(Path(stem + ext) for ext in _EXTENSIONS)
        if found is None and target.is_dir():
            found = first_file(target / name for name in _INDEX_NAMES)
        return found.resolve() if found is not None else None
