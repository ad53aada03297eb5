"""Scope extraction data model.

All records are frozen.  Extraction produces them once per parse; the
classification stage derives new records with ``dataclasses.replace``.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Literal

ScopeType = Literal[
    "module",
    "class",
    "interface",
    "function",
    "method",
    "enum",
    "type_alias",
    "namespace",
    "variable",
    "constant",
    "lambda",
]

ReferenceKind = Literal["unknown", "import", "local_scope", "builtin"]

ImportKind = Literal["default", "named", "namespace", "side-effect"]

HeritageKind = Literal["extends", "implements"]


@dataclass(frozen=True, slots=True)
class ParameterInfo:
    """A declared parameter."""

    name: str
    type: str | None = None
    optional: bool = False
    rest: bool = False
    default_value: str | None = None
    line: int = 0
    column: int = 0


@dataclass(frozen=True, slots=True)
class ImportReference:
    """A binding introduced by an import statement."""

    source: str  # Module/path specifier as written
    imported: str  # Symbol name, or the module for namespace/default imports
    alias: str | None = None
    kind: ImportKind = "named"
    is_local: bool = False
    line: int = 0

    @property
    def local_name(self) -> str | None:
        """Name this import binds in the importing file, if any."""
        if self.alias:
            return self.alias
        if self.kind == "side-effect" or self.imported == "*":
            return None
        return self.imported


@dataclass(frozen=True, slots=True)
class IdentifierReference:
    """A non-definition use of a name inside a scope."""

    identifier: str
    line: int
    column: int
    context: str  # Trimmed source line
    qualifier: str | None = None  # "a" in a.b / a::b
    kind: ReferenceKind = "unknown"
    source: str | None = None  # Import specifier when kind == "import"
    target_scope: str | None = None  # "file::name:start-end" when kind == "local_scope"
    is_local_import: bool | None = None
    heritage: HeritageKind | None = None  # Set on base-type references


@dataclass(frozen=True, slots=True)
class VariableInfo:
    """A variable declared directly inside a scope."""

    name: str
    type: str | None = None
    kind: str = "var"  # let/const/var/static/... as spelled by the language
    line: int = 0


@dataclass(frozen=True, slots=True)
class ClassMemberInfo:
    """A field, property or method of a class-like scope."""

    name: str
    member_type: Literal["property", "method", "field", "constructor"] = "property"
    type: str | None = None
    accessibility: str | None = None
    is_static: bool = False
    is_readonly: bool = False
    signature: str | None = None
    line: int = 0


@dataclass(frozen=True, slots=True)
class GenericParameter:
    name: str
    constraint: str | None = None
    default: str | None = None


@dataclass(frozen=True, slots=True)
class HeritageClause:
    clause: HeritageKind
    types: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class DecoratorInfo:
    """Decorator (Python/TypeScript) or attribute (C#/Rust)."""

    name: str
    arguments: str | None = None
    line: int = 0


@dataclass(frozen=True, slots=True)
class EnumMemberInfo:
    name: str
    value: str | None = None
    line: int = 0


@dataclass(frozen=True, slots=True)
class ScopeInfo:
    """One semantic unit of code.

    ``parent`` is the enclosing scope's name, used for lookup only.  The
    scope list of a file is flat; hierarchy is rebuilt from ``parent`` and
    ``depth``.
    """

    id: str
    name: str
    type: ScopeType
    file_path: str
    start_line: int
    end_line: int
    signature: str | None = None
    parameters: tuple[ParameterInfo, ...] = ()
    return_type: str | None = None
    modifiers: tuple[str, ...] = ()
    generic_parameters: tuple[GenericParameter, ...] = ()
    heritage_clauses: tuple[HeritageClause, ...] = ()
    content: str = ""
    content_dedented: str = ""
    members: tuple[ClassMemberInfo, ...] = ()
    enum_members: tuple[EnumMemberInfo, ...] = ()
    variables: tuple[VariableInfo, ...] = ()
    identifier_references: tuple[IdentifierReference, ...] = ()
    import_references: tuple[ImportReference, ...] = ()
    dependencies: tuple[str, ...] = ()
    exports: tuple[str, ...] = ()
    decorators: tuple[DecoratorInfo, ...] = ()
    docstring: str | None = None
    value: str | None = None  # Initializer text for variable/constant scopes
    ast_valid: bool = True
    ast_issues: tuple[str, ...] = ()
    ast_notes: tuple[str, ...] = ()
    complexity: int = 1
    lines_of_code: int = 0
    parent: str | None = None
    depth: int = 0

    @property
    def pointer(self) -> str:
        """Stable textual pointer: ``file::name:start-end``."""
        return f"{self.file_path}::{self.name}:{self.start_line}-{self.end_line}"

    @property
    def imports(self) -> list[str]:
        """Distinct import sources used by this scope."""
        return list(dict.fromkeys(ref.source for ref in self.import_references))

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True, slots=True)
class ScopeFileAnalysis:
    """Per-file extraction result."""

    file_path: str
    language: str
    scopes: tuple[ScopeInfo, ...] = ()
    total_lines: int = 0
    imports: tuple[str, ...] = ()
    exports: tuple[str, ...] = ()
    dependencies: tuple[str, ...] = ()
    import_references: tuple[ImportReference, ...] = ()
    ast_valid: bool = True
    ast_issues: tuple[str, ...] = ()
    content_hash: str | None = None

    @property
    def total_scopes(self) -> int:
        return len(self.scopes)

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["total_scopes"] = self.total_scopes
        return data
