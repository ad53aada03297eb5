"""Tests for analysis entry points."""

from pathlib import Path

import pytest

from scopegraph.config.models import ExtractionConfig, ResolutionConfig, ScopeGraphConfig
from scopegraph.core.errors import ErrorCode, LanguageError, SourceFileError
from scopegraph.extraction.extractor import ScopeExtractor
from scopegraph.ops import analyze_file, analyze_project, analyze_source, discover_files, read_source
from scopegraph.resolution.models import RelationshipType


class TestAnalyzeFile:
    def test_display_path(self, tmp_path: Path, registry) -> None:
        path = tmp_path / "pkg" / "mod.py"
        path.parent.mkdir()
        path.write_text("def main():\n    pass\n")

        analysis = analyze_file(path, registry, display_path="pkg/mod.py")

        assert analysis.file_path == "pkg/mod.py"
        assert analysis.language == "python"
        assert [s.name for s in analysis.scopes] == ["main"]
        assert analysis.scopes[0].file_path == "pkg/mod.py"

    def test_missing_file(self, tmp_path: Path, registry) -> None:
        with pytest.raises(SourceFileError) as exc_info:
            analyze_file(tmp_path / "gone.py", registry)

        assert exc_info.value.code == ErrorCode.SOURCE_NOT_FOUND

    def test_unsupported_extension(self, tmp_path: Path, registry) -> None:
        path = tmp_path / "notes.txt"
        path.write_text("hello")

        with pytest.raises(LanguageError):
            analyze_file(path, registry)

    def test_read_source_returns_bytes(self, tmp_path: Path) -> None:
        path = tmp_path / "a.go"
        path.write_text("package a\n")
        assert read_source(path) == b"package a\n"

    def test_analyze_source_explicit_language(self, registry) -> None:
        """An explicit language overrides the extension."""
        analysis = analyze_source("snippet.txt", "fn main() {}\n", registry, language="rust")
        assert analysis.language == "rust"
        assert analysis.scopes[0].name == "main"

    def test_module_scopes_can_be_disabled(self, registry) -> None:
        source = "import os\n\nprint(os.getcwd())\n"

        with_modules = analyze_source("run.py", source, registry)
        without = analyze_source("run.py", source, registry, include_module_scopes=False)

        assert [s.type for s in with_modules.scopes] == ["module"]
        assert without.scopes == ()


class TestDiscoverFiles:
    def test_excluded_dirs_and_unsupported_files(self, write_tree, registry) -> None:
        root = write_tree(
            {
                "src/app.ts": "export const a = 1;\n",
                "src/util.py": "x = 1\n",
                "node_modules/lib/index.js": "module.exports = {};\n",
                "README.md": "# readme\n",
            }
        )

        files, oversized = discover_files(root, registry, excluded_dirs=["node_modules"])

        assert [p.relative_to(root).as_posix() for p in files] == ["src/app.ts", "src/util.py"]
        assert oversized == []

    def test_size_limit(self, write_tree, registry) -> None:
        root = write_tree({"small.py": "x = 1\n", "big.py": "x = 1\n" * 400})

        files, oversized = discover_files(root, registry, max_file_size_kb=1)

        assert [p.name for p in files] == ["small.py"]
        assert [p.name for p in oversized] == ["big.py"]


class TestAnalyzeProject:
    def test_resolves_across_files(self, write_tree, registry) -> None:
        # Given
        root = write_tree(
            {
                "src/shape.ts": "export interface Shape {\n  area(): number;\n}\n",
                "src/square.ts": """
                    import { Shape } from "./shape";

                    export class Square implements Shape {
                      area(): number {
                        return 4;
                      }
                    }
                    """,
            }
        )

        # When
        project = analyze_project(root, registry=registry)

        # Then
        assert list(project.analyses) == ["src/shape.ts", "src/square.ts"]
        assert project.errors == {}
        types = {(r.from_name, r.type, r.to_name) for r in project.resolution.relationships}
        assert ("Square", RelationshipType.IMPLEMENTS, "Shape") in types
        assert ("Shape", RelationshipType.IMPLEMENTED_BY, "Square") in types

    def test_errors_keyed_by_relative_path(self, write_tree, registry) -> None:
        root = write_tree({"ok.py": "def ok():\n    pass\n"})

        project = analyze_project(root, paths=["ok.py", "missing.py", "notes.txt"], registry=registry)

        assert list(project.analyses) == ["ok.py"]
        assert set(project.errors) == {"missing.py", "notes.txt"}
        assert project.resolution.stats.files_analyzed == 1

    def test_oversized_files_are_skipped(self, write_tree, registry) -> None:
        root = write_tree({"small.py": "x = 1\n", "big.py": "x = 1\n" * 400})
        config = ScopeGraphConfig(extraction=ExtractionConfig(max_file_size_kb=1))

        project = analyze_project(root, config=config, registry=registry)

        assert project.skipped == ["big.py"]
        assert list(project.analyses) == ["small.py"]

    def test_config_flows_to_resolution(self, write_tree, registry) -> None:
        root = write_tree(
            {
                "models.py": """
                    class Account:
                        def close(self):
                            pass
                    """,
            }
        )
        config = ScopeGraphConfig(
            extraction=ExtractionConfig(max_workers=1),
            resolution=ResolutionConfig(include_inverse=False),
        )

        project = analyze_project(root, config=config, registry=registry)

        [edge] = project.resolution.relationships
        assert edge.type == RelationshipType.CONTAINS
        assert (edge.from_name, edge.to_name) == ("Account", "close")

    def test_empty_project(self, tmp_path: Path, registry) -> None:
        project = analyze_project(tmp_path, registry=registry)

        assert project.analyses == {}
        assert project.resolution.relationships == ()
        assert project.root == tmp_path.resolve()

    def test_extraction_crash_is_isolated(self, write_tree, registry, monkeypatch: pytest.MonkeyPatch) -> None:
        """A builder crash on one file is reported and the rest still resolve."""
        root = write_tree({"good.py": "def ok():\n    pass\n", "bad.py": "def boom():\n    pass\n"})
        original = ScopeExtractor.extract_source

        def flaky(self, file_path, source, language=None):
            if str(file_path) == "bad.py":
                raise RuntimeError("builder exploded")
            return original(self, file_path, source, language)

        monkeypatch.setattr(ScopeExtractor, "extract_source", flaky)

        project = analyze_project(root, registry=registry)

        assert list(project.analyses) == ["good.py"]
        assert "builder exploded" in project.errors["bad.py"]
