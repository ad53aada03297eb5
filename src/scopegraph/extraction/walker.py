"""Generic scope walker.

One depth-first walk serves every language.  The walker consults the
pack's node-type table to decide whether a node is a scope construct and
dispatches to the builder that the language strategy registered for the
construct's category.  Builders compute the construct-specific parts
(name, signature, parameters, members, heritage) and hand them to
``ExtractionContext.add_scope``, which derives everything that is shared:
references, import usage, complexity, variables, content and diagnostics.

Non-scope nodes are recursed through.  Builder failures on malformed
subtrees are recorded as AST issues and the walk continues.
"""

from __future__ import annotations

import hashlib
import textwrap
from collections.abc import Callable, Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass, field, replace
from typing import Any

from scopegraph.core.logging import get_logger
from scopegraph.extraction.models import (
    ClassMemberInfo,
    DecoratorInfo,
    EnumMemberInfo,
    GenericParameter,
    HeritageClause,
    IdentifierReference,
    ImportReference,
    ParameterInfo,
    ScopeInfo,
    ScopeType,
    VariableInfo,
)
from scopegraph.parsing.packs import LanguagePack

log = get_logger(__name__)

Node = Any  # tree_sitter.Node

Builder = Callable[["ExtractionContext", Node, int, "str | None"], None]

# Builder failures that indicate an unexpected tree shape, not a bug in the walk
_RECOVERABLE = (AttributeError, IndexError, KeyError, ValueError, UnicodeDecodeError)


@dataclass(frozen=True)
class LanguageStrategy:
    """Construct builders and hooks for one language family."""

    family: str
    builders: Mapping[str, Builder]
    extract_imports: Callable[[ExtractionContext, Node], list[ImportReference]]
    is_exported: Callable[[ExtractionContext, Node, str], bool]
    # Package name an external import specifier belongs to
    package_name: Callable[[str], str] = lambda source: source


@dataclass
class ExtractionContext:
    """Mutable state for extracting one file."""

    pack: LanguagePack
    strategy: LanguageStrategy
    source: bytes
    file_path: str
    imports: list[ImportReference] = field(default_factory=list)
    scopes: list[ScopeInfo] = field(default_factory=list)
    issues: list[str] = field(default_factory=list)
    # (start_byte, end_byte, message) for ERROR and MISSING nodes
    syntax_problems: list[tuple[int, int, str]] = field(default_factory=list)
    lines: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.lines = self.source.decode("utf-8", errors="replace").splitlines()

    # ------------------------------------------------------------------
    # Node helpers
    # ------------------------------------------------------------------

    def text(self, node: Node | None) -> str:
        if node is None:
            return ""
        return self.source[node.start_byte : node.end_byte].decode("utf-8", errors="replace")

    def line_text(self, row: int) -> str:
        if 0 <= row < len(self.lines):
            return self.lines[row].strip()
        return ""

    def field_text(self, node: Node, name: str) -> str | None:
        child = node.child_by_field_name(name)
        return self.text(child) if child is not None else None

    def category(self, node: Node) -> str | None:
        return self.pack.node_types.scopes.get(node.type)

    # ------------------------------------------------------------------
    # Walk
    # ------------------------------------------------------------------

    def walk(self, node: Node, depth: int, parent: str | None) -> None:
        """Dispatch ``node`` to its construct builder or recurse through it."""
        category = self.category(node)
        builder = self.strategy.builders.get(category) if category else None
        if builder is None:
            self.walk_children(node, depth, parent)
            return
        try:
            builder(self, node, depth, parent)
        except _RECOVERABLE as e:
            row, col = node.start_point
            self.issues.append(f"Failed to extract {node.type} at line {row + 1}:{col + 1}: {e}")
            log.debug("builder_failed", file=self.file_path, node_type=node.type, error=str(e))
            self.walk_children(node, depth, parent)

    def walk_children(self, node: Node, depth: int, parent: str | None) -> None:
        for child in node.children:
            self.walk(child, depth, parent)

    # ------------------------------------------------------------------
    # Definitions
    # ------------------------------------------------------------------

    def is_definition(self, node: Node) -> bool:
        """True when ``node`` binds a name rather than using one."""
        nt = self.pack.node_types
        child, parent = node, node.parent
        while parent is not None:
            if parent.type in nt.definition_containers:
                return True
            fields = nt.definition_fields.get(parent.type)
            if fields is not None:
                if not any(child == c for f in fields for c in parent.children_by_field_name(f)):
                    return False
                if parent.type not in nt.pattern_types:
                    return True
            elif parent.type not in nt.pattern_types:
                return False
            child, parent = parent, parent.parent
        return False

    def local_symbols(self, root: Node) -> set[str]:
        """Every name bound anywhere inside ``root``."""
        nt = self.pack.node_types
        names: set[str] = set()
        for node in _iter_tree(root):
            if (node.type in nt.identifiers or node.type in nt.type_identifiers) and self.is_definition(node):
                names.add(self.text(node))
        return names

    def bound_names(self, node: Node | None) -> list[str]:
        """Names bound by a declarator or pattern node, in source order."""
        if node is None:
            return []
        nt = self.pack.node_types
        if node.type in nt.identifiers or node.type in nt.type_identifiers:
            return [self.text(node)]
        return [
            self.text(n)
            for n in _iter_tree(node)
            if (n.type in nt.identifiers or n.type in nt.type_identifiers) and self.is_definition(n)
        ]

    # ------------------------------------------------------------------
    # References
    # ------------------------------------------------------------------

    def _in_type_position(self, node: Node) -> bool:
        nt = self.pack.node_types
        if node.type in nt.type_identifiers:
            return True
        parent = node.parent
        return parent is not None and parent.type in nt.type_contexts

    def _reference(self, node: Node, name: str, qualifier: str | None = None) -> IdentifierReference:
        row, col = node.start_point
        return IdentifierReference(
            identifier=name,
            line=row + 1,
            column=col,
            context=self.line_text(row),
            qualifier=qualifier,
        )

    def _qualifier(self, obj: Node) -> str | None:
        text = self.text(obj)
        if not text or "(" in text or "\n" in text:
            return None
        return text

    def collect_references(
        self,
        roots: Sequence[Node],
        exclusions: set[str],
        skip: Sequence[Node] = (),
    ) -> list[IdentifierReference]:
        """Identifier uses inside ``roots``, excluding definitions and keywords.

        Member accesses (``a.b``, ``a::b``) yield a reference to the member
        carrying the object text as qualifier, then the object is searched
        as usual.  Type-position identifiers are kept even when they name a
        builtin so nested generic arguments are never lost.
        """
        nt = self.pack.node_types
        stop_words = self.pack.stop_words
        builtins = self.pack.builtins
        refs: list[IdentifierReference] = []
        seen: set[tuple[str, int, int, str | None]] = set()

        def add(ref: IdentifierReference) -> None:
            key = (ref.identifier, ref.line, ref.column, ref.qualifier)
            if key not in seen:
                seen.add(key)
                refs.append(ref)

        stack = list(reversed(roots))
        while stack:
            node = stack.pop()
            node_type = node.type
            if any(node == s for s in skip):
                continue
            if node_type in nt.skip_references or node_type in nt.comments or node_type in nt.imports:
                continue

            access = nt.member_access.get(node_type)
            if access is not None:
                obj = node.child_by_field_name(access[0])
                member = node.child_by_field_name(access[1])
                if obj is not None and member is not None:
                    name = self.text(member)
                    qualifier = self._qualifier(obj)
                    root = (qualifier or "").replace("::", ".").split(".")[0]
                    if name and name not in stop_words and root not in builtins:
                        add(self._reference(member, name, qualifier))
                    stack.append(obj)
                    continue

            if node_type in nt.identifiers or node_type in nt.type_identifiers:
                name = self.text(node)
                if not name or name in stop_words or name in exclusions:
                    continue
                if self.is_definition(node):
                    continue
                if name in builtins and not self._in_type_position(node):
                    continue
                add(self._reference(node, name))
                continue

            stack.extend(reversed(node.children))

        refs.sort(key=lambda r: (r.line, r.column))
        return refs

    # ------------------------------------------------------------------
    # Shared scope metrics
    # ------------------------------------------------------------------

    def complexity(self, roots: Sequence[Node]) -> int:
        nt = self.pack.node_types
        count = 1
        for root in roots:
            for node in _iter_tree(root):
                if node.type in nt.branches:
                    count += 1
                elif node.type in nt.binary_expressions:
                    op = node.child_by_field_name("operator")
                    if op is not None and op.type in nt.logical_operators:
                        count += 1
        return count

    def collect_variables(self, roots: Sequence[Node]) -> list[VariableInfo]:
        """Variables declared directly inside ``roots`` (not in nested scopes)."""
        nt = self.pack.node_types
        declarators = nt.variable_declarators
        variables: list[VariableInfo] = []
        stack = list(reversed([c for root in roots for c in root.children]))
        while stack:
            node = stack.pop()
            category = nt.scopes.get(node.type)
            if category is not None and category not in ("variable", "compilation_unit"):
                continue
            spec = declarators.get(node.type)
            if spec is None:
                stack.extend(reversed(node.children))
                continue
            name_field, type_field = spec
            type_node = node.child_by_field_name(type_field) if type_field else None
            if type_node is None and type_field and node.parent is not None:
                type_node = node.parent.child_by_field_name(type_field)
            var_type = _strip_annotation(self.text(type_node)) if type_node is not None else None
            kind = _declaration_kind(node)
            for name_node in node.children_by_field_name(name_field):
                for name in self.bound_names(name_node):
                    variables.append(
                        VariableInfo(name=name, type=var_type, kind=kind, line=node.start_point[0] + 1)
                    )
        return variables

    def problems_within(self, start_byte: int, end_byte: int) -> list[str]:
        return [msg for s, e, msg in self.syntax_problems if s >= start_byte and e <= end_byte]

    def matching_imports(self, refs: Iterable[IdentifierReference]) -> list[ImportReference]:
        """File imports whose local name is used by ``refs``."""
        by_name = alias_map(self.imports)
        matched: dict[int, ImportReference] = {}
        for ref in refs:
            imp = match_import(by_name, ref)
            if imp is not None:
                matched.setdefault(id(imp), imp)
        return list(matched.values())

    # ------------------------------------------------------------------
    # Scope assembly
    # ------------------------------------------------------------------

    def add_scope(
        self,
        node: Node,
        *,
        name: str,
        type: ScopeType,
        depth: int,
        parent: str | None,
        name_node: Node | None = None,
        skip: Sequence[Node] = (),
        signature: str | None = None,
        parameters: Sequence[ParameterInfo] = (),
        return_type: str | None = None,
        modifiers: Iterable[str] = (),
        generic_parameters: Sequence[GenericParameter] = (),
        heritage_clauses: Sequence[HeritageClause] = (),
        members: Sequence[ClassMemberInfo] = (),
        enum_members: Sequence[EnumMemberInfo] = (),
        decorators: Sequence[DecoratorInfo] = (),
        docstring: str | None = None,
        value: str | None = None,
        exclude: Iterable[str] = (),
        extra_references: Sequence[IdentifierReference] = (),
        notes: Sequence[str] = (),
        exported: bool | None = None,
        extent: Sequence[Node] = (),
    ) -> ScopeInfo:
        """Assemble a ScopeInfo for ``node`` and append it to the file's scopes.

        ``extent`` lists following sibling nodes the scope also spans.
        """
        return self._assemble(
            [node, *extent],
            name=name,
            type=type,
            depth=depth,
            parent=parent,
            skip=[*skip, name_node] if name_node is not None else list(skip),
            signature=signature,
            parameters=parameters,
            return_type=return_type,
            modifiers=modifiers,
            generic_parameters=generic_parameters,
            heritage_clauses=heritage_clauses,
            members=members,
            enum_members=enum_members,
            decorators=decorators,
            docstring=docstring,
            value=value,
            exclude=exclude,
            extra_references=extra_references,
            notes=notes,
            exported=self.strategy.is_exported(self, node, name) if exported is None else exported,
        )

    def _assemble(
        self,
        nodes: Sequence[Node],
        *,
        name: str,
        type: ScopeType,
        depth: int,
        parent: str | None,
        skip: Sequence[Node] = (),
        signature: str | None = None,
        parameters: Sequence[ParameterInfo] = (),
        return_type: str | None = None,
        modifiers: Iterable[str] = (),
        generic_parameters: Sequence[GenericParameter] = (),
        heritage_clauses: Sequence[HeritageClause] = (),
        members: Sequence[ClassMemberInfo] = (),
        enum_members: Sequence[EnumMemberInfo] = (),
        decorators: Sequence[DecoratorInfo] = (),
        docstring: str | None = None,
        value: str | None = None,
        exclude: Iterable[str] = (),
        extra_references: Sequence[IdentifierReference] = (),
        notes: Sequence[str] = (),
        exported: bool = False,
    ) -> ScopeInfo:
        first, last = nodes[0], nodes[-1]
        start_byte, end_byte = first.start_byte, last.end_byte
        start_row, end_row = first.start_point[0], last.end_point[0]
        # A node ending at column 0 of the next line does not occupy it
        if last.end_point[1] == 0 and end_row > start_row:
            end_row -= 1

        exclusions = {name, *exclude, *(p.name for p in parameters), *self.pack.receivers}
        for node in nodes:
            exclusions |= self.local_symbols(node)
        refs = self.collect_references(nodes, exclusions, skip)
        refs = _apply_heritage(refs, heritage_clauses, extra_references)

        content = self.source[start_byte:end_byte].decode("utf-8", errors="replace")
        full_lines = "\n".join(self.lines[start_row : end_row + 1])
        issues = self.problems_within(start_byte, end_byte)
        import_refs = self.matching_imports(refs)
        package_name = self.strategy.package_name
        dependencies = sorted({package_name(imp.source) for imp in import_refs if not imp.is_local})

        scope = ScopeInfo(
            id=scope_id(self.file_path, start_byte, end_byte, content),
            name=name,
            type=type,
            file_path=self.file_path,
            start_line=start_row + 1,
            end_line=end_row + 1,
            signature=signature,
            parameters=tuple(parameters),
            return_type=return_type,
            modifiers=tuple(dict.fromkeys(modifiers)),
            generic_parameters=tuple(generic_parameters),
            heritage_clauses=tuple(heritage_clauses),
            content=content,
            content_dedented=textwrap.dedent(full_lines).strip("\n"),
            members=tuple(members),
            enum_members=tuple(enum_members),
            variables=tuple(self.collect_variables(nodes)),
            identifier_references=tuple(refs),
            import_references=tuple(import_refs),
            dependencies=tuple(dependencies),
            exports=(name,) if exported else (),
            decorators=tuple(decorators),
            docstring=docstring,
            value=value,
            ast_valid=not issues,
            ast_issues=tuple(issues),
            ast_notes=tuple(notes),
            complexity=self.complexity(nodes),
            lines_of_code=sum(1 for line in content.splitlines() if line.strip()),
            parent=parent,
            depth=depth,
        )
        self.scopes.append(scope)
        return scope

    def add_module_scopes(self, root: Node) -> None:
        """Group top-level code outside any declaration into module scopes.

        Top-level children that contain any scope break a group.
        Imports and comments join a group but never start one on their own.
        """
        nt = self.pack.node_types
        scope_starts = [s.start_line - 1 for s in self.scopes]

        def covered(node: Node) -> bool:
            start, end = node.start_point[0], node.end_point[0]
            return any(start <= row <= end for row in scope_starts)

        groups: list[list[Node]] = []
        current: list[Node] = []
        for child in root.named_children:
            if covered(child):
                if current:
                    groups.append(current)
                current = []
            elif child.type in nt.imports or child.type in nt.comments:
                if current:
                    current.append(child)
            else:
                current.append(child)
        if current:
            groups.append(current)

        for index, group in enumerate(groups, start=1):
            while group[-1].type in nt.imports or group[-1].type in nt.comments:
                group.pop()
            self._assemble(group, name=f"file_scope_{index:02d}", type="module", depth=0, parent=None)

    # ------------------------------------------------------------------
    # Docs and decorators
    # ------------------------------------------------------------------

    def leading_comments(self, node: Node, prefixes: tuple[str, ...] | None = None) -> str | None:
        """Contiguous comment block directly above ``node``.

        With ``prefixes``, only comments starting with one of them count
        (``///`` doc comments, ``/**`` JSDoc).
        """
        nt = self.pack.node_types
        block: list[str] = []
        expected_row = node.start_point[0]
        sibling = node.prev_sibling
        while sibling is not None and sibling.type in nt.decorators:
            expected_row = sibling.start_point[0]
            sibling = sibling.prev_sibling
        while sibling is not None and sibling.type in nt.comments:
            if sibling.end_point[0] < expected_row - 1:
                break
            text = self.text(sibling)
            if prefixes is not None and not text.startswith(prefixes):
                break
            block.append(text)
            expected_row = sibling.start_point[0]
            sibling = sibling.prev_sibling
        if not block:
            return None
        return clean_comment("\n".join(reversed(block)))


# ----------------------------------------------------------------------
# Module helpers
# ----------------------------------------------------------------------


def _iter_tree(root: Node) -> Iterator[Node]:
    stack = [root]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))


def iter_named(root: Node, types: frozenset[str] | set[str]) -> Iterator[Node]:
    """Pre-order iteration over nodes of the given types."""
    for node in _iter_tree(root):
        if node.type in types:
            yield node


def scope_id(file_path: str, start_byte: int, end_byte: int, content: str) -> str:
    """Content-addressed scope identity."""
    digest = hashlib.sha256(f"{file_path}:{start_byte}-{end_byte}\n{content}".encode())
    return digest.hexdigest()[:16]


def content_hash(source: bytes) -> str:
    return hashlib.sha256(source).hexdigest()


def alias_map(imports: Iterable[ImportReference]) -> dict[str, ImportReference]:
    """Local name -> import.  Unaliased dotted imports also bind their head."""
    by_name: dict[str, ImportReference] = {}
    for imp in imports:
        local = imp.local_name
        if not local:
            continue
        by_name.setdefault(local, imp)
        if imp.alias is None and "." in local:
            by_name.setdefault(local.split(".")[0], imp)
    return by_name


def match_import(by_name: Mapping[str, ImportReference], ref: IdentifierReference) -> ImportReference | None:
    """Import bound to the reference's qualifier root or identifier."""
    if ref.qualifier:
        qualifier = ref.qualifier
        if qualifier in by_name:
            return by_name[qualifier]
        for sep in (".", "::", "->"):
            head = qualifier.split(sep)[0]
            if head in by_name:
                return by_name[head]
    return by_name.get(ref.identifier)


def base_type_name(text: str) -> str:
    """``ns.Base<T>`` / ``crate::Base`` / ``*Base`` -> ``Base``."""
    text = text.strip().lstrip("*&").strip()
    for open_ in ("<", "[", "("):
        if open_ in text:
            text = text.split(open_, 1)[0]
    for sep in ("::", "."):
        if sep in text:
            text = text.rsplit(sep, 1)[-1]
    return text.strip()


def clean_comment(text: str) -> str:
    """Strip comment markers from a comment block."""
    lines = []
    for raw in text.splitlines():
        line = raw.strip()
        for marker in ("/**", "/*!", "/*", "*/", "///", "//!", "//", "#"):
            if line.startswith(marker):
                line = line[len(marker) :]
                break
        if line.endswith("*/"):
            line = line[:-2]
        line = line.strip()
        if line.startswith("*"):
            line = line[1:].strip()
        lines.append(line)
    return "\n".join(lines).strip()


def synthesized_name(kind: str) -> str:
    """Placeholder for anonymous constructs."""
    return f"Anonymous{kind[:1].upper()}{kind[1:]}"


def _strip_annotation(text: str) -> str:
    return text.lstrip(":").strip()


def _declaration_kind(node: Node) -> str:
    for candidate in (node, node.parent):
        if candidate is None or not candidate.children:
            continue
        first = candidate.children[0].type
        if first in ("let", "const", "var", "static"):
            return first
    return "var"


def _apply_heritage(
    refs: list[IdentifierReference],
    clauses: Sequence[HeritageClause],
    synthetic: Sequence[IdentifierReference],
) -> list[IdentifierReference]:
    """Tag base-type references with their heritage clause.

    Synthetic references (e.g. the trait of an impl block) are added first
    unless an equivalent reference already exists.
    """
    refs = list(refs)
    for ref in synthetic:
        if not any(r.identifier == ref.identifier and r.heritage == ref.heritage for r in refs):
            refs.append(ref)
    for clause in clauses:
        for type_text in clause.types:
            name = base_type_name(type_text)
            for i, ref in enumerate(refs):
                if ref.identifier == name and ref.heritage is None:
                    refs[i] = replace(ref, heritage=clause.clause)
                    break
    refs.sort(key=lambda r: (r.line, r.column))
    return refs

