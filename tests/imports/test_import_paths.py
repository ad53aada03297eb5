"""Tests for shared path probing helpers."""

from pathlib import Path

import pytest

from scopegraph.imports.paths import is_relative_specifier, normalize_path, package_file, resolve_segments

_EXT = (".rs",)
_INDEX = ("mod.rs",)


class TestNormalizePath:
    @pytest.mark.parametrize(
        ("path", "expected"),
        [
            ("src/utils/../models/user", "src/models/user"),
            ("src/./utils", "src/utils"),
            ("a//b/", "a/b"),
            ("../outside", "outside"),
            ("win\\style\\path", "win/style/path"),
        ],
    )
    def test_collapses_segments(self, path: str, expected: str) -> None:
        assert normalize_path(path) == expected


class TestIsRelativeSpecifier:
    @pytest.mark.parametrize("spec", ["./a", "../a", ".", ".."])
    def test_relative(self, spec: str) -> None:
        assert is_relative_specifier(spec) is True

    @pytest.mark.parametrize("spec", ["react", "@/a", "/abs", ".hidden"])
    def test_not_relative(self, spec: str) -> None:
        assert is_relative_specifier(spec) is False


class TestResolveSegments:
    """Module path walking over a directory tree."""

    def test_file_segment(self, write_tree) -> None:
        root = write_tree({"models/user.rs": ""})

        found = resolve_segments(root, ["models", "user"], extensions=_EXT, index_files=_INDEX)

        assert found == root / "models" / "user.rs"

    def test_directory_with_index(self, write_tree) -> None:
        root = write_tree({"models/mod.rs": ""})

        found = resolve_segments(root, ["models"], extensions=_EXT, index_files=_INDEX)

        assert found == root / "models" / "mod.rs"

    def test_trailing_segments_name_items_in_file(self, write_tree) -> None:
        """``models::User`` stops at models.rs when no models/ directory exists."""
        root = write_tree({"models.rs": ""})

        found = resolve_segments(root, ["models", "User"], extensions=_EXT, index_files=_INDEX)

        assert found == root / "models.rs"

    def test_directory_preferred_for_intermediate_segment(self, write_tree) -> None:
        root = write_tree({"models.rs": "", "models/user.rs": ""})

        found = resolve_segments(root, ["models", "user"], extensions=_EXT, index_files=_INDEX)

        assert found == root / "models" / "user.rs"

    def test_item_of_package_falls_back_to_package_file(self, write_tree) -> None:
        root = write_tree({"models/mod.rs": "", "models/user.rs": ""})

        found = resolve_segments(root, ["models", "Account"], extensions=_EXT, index_files=_INDEX)

        assert found == root / "models" / "mod.rs"

    def test_missing_returns_none(self, tmp_path: Path) -> None:
        assert resolve_segments(tmp_path, ["nothing"], extensions=_EXT, index_files=_INDEX) is None


class TestPackageFile:
    def test_file_beside_directory(self, write_tree) -> None:
        root = write_tree({"net.rs": "", "net/tcp.rs": ""})

        assert package_file(root / "net", extensions=_EXT, index_files=_INDEX) == root / "net.rs"
