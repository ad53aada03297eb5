"""Tests for the scopegraph CLI."""

import json
import os
from pathlib import Path

import pytest
from click.testing import CliRunner

from scopegraph import __version__
from scopegraph.cli.main import cli
from scopegraph.config import loader


@pytest.fixture(autouse=True)
def _isolated_global_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(loader, "GLOBAL_CONFIG_PATH", tmp_path / "home" / "config.yaml")
    for key in list(os.environ):
        if key.upper().startswith("SCOPEGRAPH__"):
            monkeypatch.delenv(key)


@pytest.fixture
def project(tmp_path: Path) -> Path:
    root = tmp_path / "proj"
    (root / "app").mkdir(parents=True)
    (root / "app" / "models.py").write_text("class Base:\n    pass\n\n\nclass User(Base):\n    def save(self):\n        pass\n")
    return root


class TestCli:
    def test_version(self) -> None:
        result = CliRunner().invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output

    def test_help_lists_commands(self) -> None:
        result = CliRunner().invoke(cli, ["--help"])

        assert result.exit_code == 0
        assert "analyze" in result.output
        assert "scopes" in result.output


class TestAnalyzeCommand:
    def test_json_output(self, project: Path) -> None:
        result = CliRunner().invoke(cli, ["analyze", str(project), "--json"])

        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["stats"]["files_analyzed"] == 1
        assert data["errors"] == {}
        triples = {(r["from_name"], r["type"], r["to_name"]) for r in data["relationships"]}
        assert ("User", "INHERITS_FROM", "Base") in triples
        assert ("Base", "INHERITED_BY", "User") in triples
        assert ("User", "CONTAINS", "save") in triples

    def test_no_inverse_flag(self, project: Path) -> None:
        result = CliRunner().invoke(cli, ["analyze", str(project), "--json", "--no-inverse", "--no-contains"])

        assert result.exit_code == 0, result.output
        types = {r["type"] for r in json.loads(result.stdout)["relationships"]}
        assert types == {"INHERITS_FROM"}

    def test_repo_config_is_applied(self, project: Path) -> None:
        config_dir = project / ".scopegraph"
        config_dir.mkdir()
        (config_dir / "config.yaml").write_text("resolution:\n  include_contains: false\n")

        result = CliRunner().invoke(cli, ["analyze", str(project), "--json"])

        assert result.exit_code == 0, result.output
        types = {r["type"] for r in json.loads(result.stdout)["relationships"]}
        assert "CONTAINS" not in types

    def test_summary_output(self, project: Path) -> None:
        result = CliRunner().invoke(cli, ["analyze", str(project)])

        assert result.exit_code == 0, result.output

    def test_missing_path(self, tmp_path: Path) -> None:
        result = CliRunner().invoke(cli, ["analyze", str(tmp_path / "nowhere")])

        assert result.exit_code != 0


class TestScopesCommand:
    def test_json_output(self, project: Path) -> None:
        result = CliRunner().invoke(cli, ["scopes", str(project / "app" / "models.py"), "--json"])

        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["language"] == "python"
        assert [s["name"] for s in data["scopes"]] == ["Base", "User", "save"]
        assert data["total_scopes"] == 3

    def test_unsupported_file(self, tmp_path: Path) -> None:
        path = tmp_path / "notes.txt"
        path.write_text("hello")

        result = CliRunner().invoke(cli, ["scopes", str(path)])

        assert result.exit_code == 1
        assert "No scope extractor registered" in result.output


class TestCliLogging:
    """Log output never mixes into command output."""

    def test_verbose_json_keeps_stdout_clean(self, project: Path) -> None:
        result = CliRunner().invoke(cli, ["-v", "analyze", str(project), "--json"])

        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["stats"]["files_analyzed"] == 1
        assert "project_analysis_started" in result.stderr

    def test_repo_logging_outputs_are_applied(self, project: Path, tmp_path: Path) -> None:
        # Given
        log_file = tmp_path / "logs" / "analyze.jsonl"
        config_dir = project / ".scopegraph"
        config_dir.mkdir()
        (config_dir / "config.yaml").write_text(
            "logging:\n"
            "  level: INFO\n"
            "  outputs:\n"
            f"    - destination: {log_file}\n"
            "      format: json\n"
        )

        # When
        result = CliRunner().invoke(cli, ["analyze", str(project), "--json"])

        # Then
        assert result.exit_code == 0, result.output
        json.loads(result.stdout)
        events = [json.loads(line)["event"] for line in log_file.read_text().splitlines()]
        assert "project_analysis_started" in events
        assert "relationships_resolved" in events
        assert "source_parsed" not in events
