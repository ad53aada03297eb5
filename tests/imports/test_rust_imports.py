"""Tests for Rust use-path resolution."""

from pathlib import Path

from scopegraph.imports import ImportType, RustImportResolver
from scopegraph.imports.rust import parse_cargo_toml


def _resolver(root: Path) -> RustImportResolver:
    resolver = RustImportResolver(root)
    resolver.load_config()
    return resolver


class TestCargoToml:
    def test_name_and_dependencies(self) -> None:
        manifest = parse_cargo_toml(
            """
[package]
name = "my-app"
version = "0.1.0"

[dependencies]
serde = { version = "1", features = ["derive"] }
tokio-util = "0.7"

[dev-dependencies]
proptest = "1"

[dependencies.reqwest]
version = "0.11"
"""
        )

        assert manifest.name == "my_app"
        assert manifest.dependencies == {"serde", "tokio_util", "reqwest"}
        assert manifest.dev_dependencies == {"proptest"}


class TestRustResolver:
    def test_classify(self, write_tree) -> None:
        root = write_tree({"Cargo.toml": '[package]\nname = "app"\n\n[dependencies]\nfoo = "1"\n'})
        resolver = _resolver(root)

        assert resolver.classify("crate::models") == ImportType.RELATIVE
        assert resolver.classify("app::models") == ImportType.RELATIVE
        assert resolver.classify("std::collections") == ImportType.BUILTIN
        assert resolver.classify("foo::bar") == ImportType.PACKAGE
        assert resolver.classify("serde") == ImportType.PACKAGE
        assert resolver.classify("mystery") == ImportType.UNKNOWN

    def test_crate_path_to_module_file(self, write_tree) -> None:
        root = write_tree({"src/main.rs": "", "src/models/mod.rs": "", "src/models/user.rs": ""})
        resolver = _resolver(root)

        assert resolver.resolve("crate::models::user", root / "src" / "main.rs") == (
            root / "src" / "models" / "user.rs"
        ).resolve()
        assert resolver.resolve("crate::models", root / "src" / "main.rs") == (root / "src" / "models" / "mod.rs").resolve()

    def test_crate_item_lives_in_crate_root(self, write_tree) -> None:
        root = write_tree({"src/lib.rs": "", "src/shapes.rs": ""})

        found = _resolver(root).resolve("crate::Config", root / "src" / "shapes.rs")

        assert found == (root / "src" / "lib.rs").resolve()

    def test_super_from_nested_module(self, write_tree) -> None:
        root = write_tree({"src/main.rs": "", "src/net.rs": "", "src/net/tcp.rs": ""})

        found = _resolver(root).resolve("super::Socket", root / "src" / "net" / "tcp.rs")

        assert found == (root / "src" / "net.rs").resolve()

    def test_external_crate_not_resolved(self, tmp_path: Path) -> None:
        assert _resolver(tmp_path).resolve("serde::Serialize", tmp_path / "main.rs") is None
