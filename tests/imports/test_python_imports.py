"""Tests for Python import resolution."""

from pathlib import Path

from scopegraph.imports import ImportType, PythonImportResolver
from scopegraph.imports.python import parse_requirements_txt, requirement_name


def _resolver(root: Path) -> PythonImportResolver:
    resolver = PythonImportResolver(root)
    resolver.load_config()
    return resolver


class TestRequirements:
    def test_requirement_name_normalized(self) -> None:
        assert requirement_name("Flask-Login[extra]>=1.0; python_version<'3.12'") == "flask_login"

    def test_requirements_txt_skips_comments_and_options(self) -> None:
        text = "# deps\nrequests>=2\n-r other.txt\n\nPyYAML==6.0  # yaml\n"
        assert parse_requirements_txt(text) == {"requests", "pyyaml"}


class TestPythonResolver:
    def test_relative_import(self, write_tree) -> None:
        root = write_tree({"app/__init__.py": "", "app/models.py": "", "app/views.py": ""})

        found = _resolver(root).resolve(".models", root / "app" / "views.py")

        assert found == (root / "app" / "models.py").resolve()

    def test_parent_relative_package(self, write_tree) -> None:
        root = write_tree({"app/__init__.py": "", "app/api/handlers.py": ""})

        found = _resolver(root).resolve("..", root / "app" / "api" / "handlers.py")

        assert found == (root / "app" / "__init__.py").resolve()

    def test_src_layout_absolute_import(self, write_tree) -> None:
        root = write_tree({"src/shop/__init__.py": "", "src/shop/cart.py": "", "tests/test_cart.py": ""})
        resolver = _resolver(root)

        assert resolver.resolve("shop.cart", root / "tests" / "test_cart.py") == (root / "src" / "shop" / "cart.py").resolve()
        assert resolver.classify("shop.cart") == ImportType.ABSOLUTE
        assert resolver.is_local_import("shop.cart") is True

    def test_stdlib_and_declared_dependencies(self, write_tree) -> None:
        root = write_tree(
            {
                "pyproject.toml": """
                [project]
                name = "shop"
                dependencies = ["requests>=2", "Jinja2"]

                [project.optional-dependencies]
                test = ["pytest"]
                """
            }
        )
        resolver = _resolver(root)

        assert resolver.manifest.name == "shop"
        assert resolver.classify("json") == ImportType.BUILTIN
        assert resolver.classify("requests.adapters") == ImportType.PACKAGE
        assert resolver.classify("jinja2") == ImportType.PACKAGE
        assert "pytest" in resolver.manifest.dev_dependencies
        assert resolver.classify("nowhere") == ImportType.UNKNOWN
        assert resolver.resolve("json", root / "x.py") is None

    def test_invalid_pyproject_degrades(self, write_tree) -> None:
        root = write_tree({"pyproject.toml": "[project\nname = "})

        resolver = _resolver(root)

        assert resolver.manifest.name is None
        assert resolver.manifest.dependencies == set()

    def test_relative_path_of_resolved_file(self, write_tree) -> None:
        root = write_tree({"app/__init__.py": "", "app/models.py": "", "app/views.py": ""})
        resolver = _resolver(root)

        found = resolver.resolve(".models", root / "app" / "views.py")

        assert resolver.get_relative_path(found) == "app/models.py"
