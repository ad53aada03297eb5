"""Tests for C / C++ include resolution."""

import json
from pathlib import Path

from scopegraph.imports import CImportResolver, ImportType
from scopegraph.imports.c import include_paths_from_compile_commands


def _resolver(root: Path) -> CImportResolver:
    resolver = CImportResolver(root)
    resolver.load_config()
    return resolver


class TestCResolver:
    def test_classify(self, tmp_path: Path) -> None:
        resolver = _resolver(tmp_path)

        assert resolver.classify("stdio.h") == ImportType.BUILTIN
        assert resolver.classify("vector") == ImportType.BUILTIN
        assert resolver.classify("std::chrono") == ImportType.BUILTIN
        assert resolver.classify("util.h") == ImportType.RELATIVE
        assert resolver.classify("engine::core") == ImportType.UNKNOWN

    def test_relative_to_including_file(self, write_tree) -> None:
        root = write_tree({"src/main.c": "", "src/util.h": ""})

        found = _resolver(root).resolve("util.h", root / "src" / "main.c")

        assert found == (root / "src" / "util.h").resolve()

    def test_common_include_directory(self, write_tree) -> None:
        root = write_tree({"include/engine/core.h": "", "src/main.c": ""})

        found = _resolver(root).resolve("engine/core.h", root / "src" / "main.c")

        assert found == (root / "include" / "engine" / "core.h").resolve()

    def test_compile_commands_include_paths(self, write_tree) -> None:
        root = write_tree({"vendor/api/api.h": "", "src/main.c": ""})
        commands = [{"directory": str(root), "command": "cc -Ivendor/api -c src/main.c", "file": "src/main.c"}]
        (root / "compile_commands.json").write_text(json.dumps(commands))

        resolver = _resolver(root)

        assert (root / "vendor" / "api").resolve() in resolver.manifest.source_dirs
        assert resolver.resolve("api.h", root / "src" / "main.c") == (root / "vendor" / "api" / "api.h").resolve()

    def test_compile_commands_invalid_json(self, tmp_path: Path) -> None:
        assert include_paths_from_compile_commands("not json", tmp_path) == []

    def test_missing_header(self, tmp_path: Path) -> None:
        assert _resolver(tmp_path).resolve("nope.h", tmp_path / "main.c") is None
