"""C and C++ construct builders.

Both languages share the declarator handling: names sit at the bottom of a
chain of pointer/array/function/parenthesized declarators, so every name
lookup unwraps that chain first.  C++ adds namespaces, templates, classes
with base clauses and out-of-line ``Owner::method`` definitions.
"""

from __future__ import annotations

from collections.abc import Sequence

from scopegraph.extraction.models import (
    ClassMemberInfo,
    EnumMemberInfo,
    GenericParameter,
    HeritageClause,
    ImportReference,
    ParameterInfo,
)
from scopegraph.extraction.walker import (
    ExtractionContext,
    LanguageStrategy,
    Node,
    base_type_name,
    iter_named,
    synthesized_name,
)

_WRAPPERS = frozenset(
    {
        "pointer_declarator",
        "array_declarator",
        "parenthesized_declarator",
        "function_declarator",
        "reference_declarator",
        "init_declarator",
        "attributed_declarator",
    }
)
_NAMES = frozenset(
    {"identifier", "field_identifier", "type_identifier", "destructor_name", "operator_name", "namespace_identifier"}
)
_RECORDS = frozenset({"struct_specifier", "union_specifier", "class_specifier"})
_RECORD_KEYWORDS = {"struct_specifier": "struct", "union_specifier": "union", "class_specifier": "class"}
_FUNCTION_SPECIFIERS = frozenset(
    {"storage_class_specifier", "type_qualifier", "virtual", "explicit_function_specifier"}
)
_TRAILING_SPECIFIERS = frozenset({"type_qualifier", "virtual_specifier", "noexcept"})


def _compact(text: str) -> str:
    return " ".join(text.split())


# ----------------------------------------------------------------------
# Declarators
# ----------------------------------------------------------------------


def _inner(node: Node) -> Node | None:
    inner = node.child_by_field_name("declarator")
    if inner is not None:
        return inner
    # parenthesized and reference declarators carry no field name
    return next((c for c in node.named_children if c.type not in ("parameter_list", "attribute_specifier")), None)


def innermost_declarator(node: Node | None) -> Node | None:
    """Descend through declarator wrappers to the name-bearing node."""
    while node is not None and node.type in _WRAPPERS:
        node = _inner(node)
    return node


def _function_declarator(node: Node | None) -> Node | None:
    while node is not None and node.type in _WRAPPERS:
        if node.type == "function_declarator":
            return node
        node = _inner(node)
    return None


def declarator_name(ctx: ExtractionContext, node: Node | None) -> tuple[str, Node | None, str | None]:
    """(name, name node, qualifying scope) of a declarator."""
    target = innermost_declarator(node)
    if target is None:
        return "", None, None
    if target.type == "qualified_identifier":
        scope = ctx.field_text(target, "scope")
        name_node = target.child_by_field_name("name")
        while name_node is not None and name_node.type == "qualified_identifier":
            scope = f"{scope}::{ctx.field_text(name_node, 'scope')}"
            name_node = name_node.child_by_field_name("name")
        return ctx.text(name_node), target, scope
    if target.type in _NAMES:
        return ctx.text(target), target, None
    return "", None, None


def _is_prototype(decl: Node) -> bool:
    node = decl
    while node is not None and node.type in ("pointer_declarator", "reference_declarator", "attributed_declarator"):
        node = _inner(node)
    if node is None or node.type != "function_declarator":
        return False
    inner = node.child_by_field_name("declarator")
    return inner is None or inner.type != "parenthesized_declarator"


def _pointer_depth(decl: Node | None) -> str:
    stars = ""
    while decl is not None and decl.type in ("pointer_declarator", "reference_declarator"):
        stars += "*" if decl.type == "pointer_declarator" else "&"
        decl = _inner(decl)
    return stars


def _inside_function(node: Node) -> bool:
    parent = node.parent
    while parent is not None:
        if parent.type in ("compound_statement", "lambda_expression"):
            return True
        parent = parent.parent
    return False


def _is_static(ctx: ExtractionContext, node: Node) -> bool:
    return any(c.type == "storage_class_specifier" and ctx.text(c) == "static" for c in node.children)


def _is_exported(ctx: ExtractionContext, node: Node, name: str) -> bool:
    target = node
    if node.type == "template_declaration":
        target = node.named_children[-1] if node.named_children else node
    return not _is_static(ctx, target) and not _inside_function(node)


def _docstring(ctx: ExtractionContext, node: Node) -> str | None:
    return ctx.leading_comments(node)


# ----------------------------------------------------------------------
# Parameters and generics
# ----------------------------------------------------------------------


def _parameters(ctx: ExtractionContext, params_node: Node | None) -> list[ParameterInfo]:
    params: list[ParameterInfo] = []
    for param in params_node.named_children if params_node is not None else []:
        row, col = param.start_point
        if param.type == "variadic_parameter" or ctx.text(param) == "...":
            params.append(ParameterInfo(name="...", rest=True, line=row + 1, column=col))
            continue
        if param.type not in (
            "parameter_declaration",
            "optional_parameter_declaration",
            "variadic_parameter_declaration",
        ):
            continue
        type_text = ctx.field_text(param, "type") or ""
        declarator = param.child_by_field_name("declarator")
        name, _, _ = declarator_name(ctx, declarator)
        if declarator is not None and name:
            type_text = _compact(f"{type_text} {ctx.text(declarator).replace(name, '', 1)}")
        if type_text == "void" and not name:
            continue
        default = ctx.field_text(param, "default_value")
        params.append(
            ParameterInfo(
                name=name or f"arg{len(params)}",
                type=type_text or None,
                optional=default is not None,
                rest=param.type == "variadic_parameter_declaration",
                default_value=default,
                line=row + 1,
                column=col,
            )
        )
    return params


def _template_parameters(ctx: ExtractionContext, params_node: Node | None) -> list[GenericParameter]:
    generics: list[GenericParameter] = []
    for param in params_node.named_children if params_node is not None else []:
        if param.type in ("type_parameter_declaration", "variadic_type_parameter_declaration"):
            name_node = next((c for c in param.named_children if c.type == "type_identifier"), None)
            if name_node is not None:
                generics.append(GenericParameter(name=ctx.text(name_node)))
        elif param.type == "optional_type_parameter_declaration":
            generics.append(
                GenericParameter(name=ctx.field_text(param, "name") or "", default=ctx.field_text(param, "default_type"))
            )
        elif param.type in ("parameter_declaration", "optional_parameter_declaration"):
            name, _, _ = declarator_name(ctx, param.child_by_field_name("declarator"))
            if name:
                generics.append(
                    GenericParameter(
                        name=name,
                        constraint=ctx.field_text(param, "type"),
                        default=ctx.field_text(param, "default_value"),
                    )
                )
    return generics


# ----------------------------------------------------------------------
# Functions
# ----------------------------------------------------------------------


def _build_function(
    ctx: ExtractionContext,
    node: Node,
    depth: int,
    parent: str | None,
    *,
    outer: Node | None = None,
    generics: Sequence[GenericParameter] = (),
) -> None:
    scope_node = outer or node
    declarator = node.child_by_field_name("declarator")
    func = _function_declarator(declarator)
    name, name_node, qualifier = declarator_name(ctx, func.child_by_field_name("declarator") if func else declarator)
    if not name:
        ctx.walk_children(node, depth, parent)
        return

    in_class = scope_node.parent is not None and scope_node.parent.type == "field_declaration_list"
    owner = parent
    scope_depth = depth
    if qualifier:
        owner = base_type_name(qualifier)
        scope_depth = depth + 1
    scope_type = "method" if qualifier or in_class else "function"

    type_text = ctx.field_text(node, "type") or ""
    modifiers = [ctx.text(c) for c in node.children if c.type in _FUNCTION_SPECIFIERS]
    if func is not None:
        modifiers += [ctx.text(c) for c in func.children if c.type in _TRAILING_SPECIFIERS]
    if generics:
        modifiers.append("template")
    end = declarator.end_byte if declarator is not None else node.end_byte
    signature = _compact(ctx.source[scope_node.start_byte : end].decode("utf-8", errors="replace"))
    return_type = _compact(f"{type_text}{_pointer_depth(declarator)}") or None

    ctx.add_scope(
        scope_node,
        name=name,
        type=scope_type,
        depth=scope_depth,
        parent=owner,
        name_node=name_node,
        signature=signature,
        parameters=_parameters(ctx, func.child_by_field_name("parameters") if func else None),
        return_type=return_type,
        modifiers=modifiers,
        generic_parameters=generics,
        docstring=_docstring(ctx, scope_node),
        exclude=[g.name for g in generics],
    )
    body = node.child_by_field_name("body")
    if body is not None:
        ctx.walk_children(body, scope_depth + 1, name)


# ----------------------------------------------------------------------
# Records and enums
# ----------------------------------------------------------------------


def _record_members(
    ctx: ExtractionContext, body: Node, default_access: str
) -> list[ClassMemberInfo]:
    members: list[ClassMemberInfo] = []
    access = default_access
    for child in body.named_children:
        if child.type == "access_specifier":
            access = ctx.text(child).rstrip(":").strip()
            continue
        target = child.named_children[-1] if child.type == "template_declaration" and child.named_children else child
        line = child.start_point[0] + 1
        if target.type in ("field_declaration", "declaration"):
            type_text = ctx.field_text(target, "type")
            is_static = _is_static(ctx, target)
            for decl in target.children_by_field_name("declarator"):
                name, _, _ = declarator_name(ctx, decl)
                if not name:
                    continue
                is_method = _function_declarator(decl) is not None
                members.append(
                    ClassMemberInfo(
                        name=name,
                        member_type="method" if is_method else "field",
                        type=_compact(f"{type_text or ''}{_pointer_depth(decl)}") or None,
                        accessibility=access,
                        is_static=is_static,
                        is_readonly=any(c.type == "type_qualifier" and ctx.text(c) == "const" for c in target.children),
                        signature=_compact(f"{type_text or ''} {ctx.text(decl)}") if is_method else None,
                        line=line,
                    )
                )
        elif target.type == "function_definition":
            declarator = target.child_by_field_name("declarator")
            name, _, _ = declarator_name(ctx, declarator)
            if name:
                members.append(
                    ClassMemberInfo(
                        name=name,
                        member_type="method",
                        type=ctx.field_text(target, "type"),
                        accessibility=access,
                        is_static=_is_static(ctx, target),
                        signature=_compact(f"{ctx.field_text(target, 'type') or ''} {ctx.text(declarator)}"),
                        line=line,
                    )
                )
    return members


def _base_classes(ctx: ExtractionContext, node: Node) -> list[str]:
    clause = next((c for c in node.children if c.type == "base_class_clause"), None)
    if clause is None:
        return []
    return [
        ctx.text(c)
        for c in clause.named_children
        if c.type in ("type_identifier", "qualified_identifier", "template_type")
    ]


def _build_record(
    ctx: ExtractionContext,
    node: Node,
    depth: int,
    parent: str | None,
    *,
    name: str | None = None,
    name_node: Node | None = None,
    outer: Node | None = None,
    generics: Sequence[GenericParameter] = (),
) -> None:
    body = node.child_by_field_name("body")
    if body is None:
        return
    scope_node = outer or node
    if name is None:
        name_node = node.child_by_field_name("name")
        name = base_type_name(ctx.text(name_node)) if name_node is not None else synthesized_name(
            _RECORD_KEYWORDS[node.type]
        )
    keyword = _RECORD_KEYWORDS[node.type]
    bases = _base_classes(ctx, node)
    modifiers = [keyword]
    if generics:
        modifiers.append("template")
    signature = f"{keyword} {name}"
    if bases:
        signature += " : " + ", ".join(bases)

    ctx.add_scope(
        scope_node,
        name=name,
        type="class",
        depth=depth,
        parent=parent,
        name_node=name_node,
        signature=signature,
        modifiers=modifiers,
        generic_parameters=generics,
        heritage_clauses=[HeritageClause("extends", tuple(bases))] if bases else (),
        members=_record_members(ctx, body, "private" if keyword == "class" else "public"),
        docstring=_docstring(ctx, scope_node),
        exclude=[g.name for g in generics],
    )
    ctx.walk_children(body, depth + 1, name)


def _build_enum(
    ctx: ExtractionContext,
    node: Node,
    depth: int,
    parent: str | None,
    *,
    name: str | None = None,
    name_node: Node | None = None,
    outer: Node | None = None,
) -> None:
    body = node.child_by_field_name("body")
    if body is None:
        return
    scope_node = outer or node
    if name is None:
        name_node = node.child_by_field_name("name")
        name = ctx.text(name_node) if name_node is not None else synthesized_name("enum")
    scoped = any(c.type in ("class", "struct") for c in node.children)
    underlying = ctx.field_text(node, "base")
    members = [
        EnumMemberInfo(
            name=ctx.field_text(e, "name") or "",
            value=ctx.field_text(e, "value"),
            line=e.start_point[0] + 1,
        )
        for e in body.named_children
        if e.type == "enumerator"
    ]
    signature = f"enum {'class ' if scoped else ''}{name}"
    if underlying:
        signature += f" : {underlying}"
    ctx.add_scope(
        scope_node,
        name=name,
        type="enum",
        depth=depth,
        parent=parent,
        name_node=name_node,
        signature=signature,
        return_type=underlying,
        modifiers=["scoped"] if scoped else (),
        enum_members=members,
        docstring=_docstring(ctx, scope_node),
        exclude=[m.name for m in members],
    )


def _build_specifier(ctx: ExtractionContext, node: Node, depth: int, parent: str | None) -> None:
    if node.type == "enum_specifier":
        _build_enum(ctx, node, depth, parent)
    else:
        _build_record(ctx, node, depth, parent)


def _has_body(node: Node | None) -> bool:
    return (
        node is not None
        and node.type in (_RECORDS | {"enum_specifier"})
        and node.child_by_field_name("body") is not None
    )


# ----------------------------------------------------------------------
# Type aliases and declarations
# ----------------------------------------------------------------------


def _build_alias(ctx: ExtractionContext, node: Node, depth: int, parent: str | None) -> None:
    if node.type == "alias_declaration":
        _build_using_alias(ctx, node, depth, parent)
        return

    type_node = node.child_by_field_name("type")
    declarators = node.children_by_field_name("declarator")
    alias, alias_node, _ = declarator_name(ctx, declarators[0]) if declarators else ("", None, None)
    has_body = _has_body(type_node)
    if has_body:
        if type_node.child_by_field_name("name") is None and alias:
            # typedef struct { ... } Name;
            if type_node.type == "enum_specifier":
                _build_enum(ctx, type_node, depth, parent, name=alias, name_node=alias_node, outer=node)
            else:
                _build_record(ctx, type_node, depth, parent, name=alias, name_node=alias_node, outer=node)
            return
        _build_specifier(ctx, type_node, depth, parent)
    if not alias:
        return

    if has_body:
        target = ctx.field_text(type_node, "name") or ""
        signature = f"typedef {_RECORD_KEYWORDS.get(type_node.type, 'enum')} {target} {alias}"
        value = target
    else:
        value = _compact(ctx.text(type_node)) + _pointer_depth(declarators[0])
        signature = _compact(ctx.text(node)).rstrip(";")
    ctx.add_scope(
        node,
        name=alias,
        type="type_alias",
        depth=depth,
        parent=parent,
        name_node=alias_node,
        skip=[type_node] if has_body else (),
        signature=signature,
        value=value,
        docstring=_docstring(ctx, node),
    )


def _build_using_alias(
    ctx: ExtractionContext,
    node: Node,
    depth: int,
    parent: str | None,
    *,
    outer: Node | None = None,
    generics: Sequence[GenericParameter] = (),
) -> None:
    scope_node = outer or node
    name_node = node.child_by_field_name("name")
    name = ctx.text(name_node)
    value = ctx.field_text(node, "type")
    ctx.add_scope(
        scope_node,
        name=name,
        type="type_alias",
        depth=depth,
        parent=parent,
        name_node=name_node,
        signature=f"using {name} = {_compact(value or '')}",
        modifiers=["template"] if generics else (),
        generic_parameters=generics,
        value=value,
        docstring=_docstring(ctx, scope_node),
        exclude=[g.name for g in generics],
    )


def _build_declaration(ctx: ExtractionContext, node: Node, depth: int, parent: str | None) -> None:
    """File- and namespace-level variables; prototypes and locals are skipped."""
    type_node = node.child_by_field_name("type")
    has_body = _has_body(type_node)
    if has_body:
        _build_specifier(ctx, type_node, depth, parent)
    if _inside_function(node) or (node.parent is not None and node.parent.type == "field_declaration_list"):
        return

    declarators = [d for d in node.children_by_field_name("declarator") if not _is_prototype(d)]
    qualifiers = {ctx.text(c) for c in node.children if c.type in ("type_qualifier", "storage_class_specifier")}
    type_text = ctx.text(type_node) if type_node is not None else None
    for decl in declarators:
        name, name_node, _ = declarator_name(ctx, decl)
        if not name:
            continue
        constant = bool(qualifiers & {"const", "constexpr"}) or name.isupper()
        var_type = _compact(f"{type_text or ''}{_pointer_depth(_strip_initializer(decl))}") or None
        value = ctx.field_text(decl, "value") if decl.type == "init_declarator" else None
        ctx.add_scope(
            node if len(declarators) == 1 else decl,
            name=name,
            type="constant" if constant else "variable",
            depth=depth,
            parent=parent,
            name_node=name_node,
            skip=[type_node] if has_body else (),
            signature=_compact(f"{' '.join(sorted(qualifiers))} {var_type or ''} {name}"),
            return_type=var_type,
            modifiers=sorted(qualifiers),
            value=value,
            docstring=_docstring(ctx, node),
        )


def _strip_initializer(decl: Node) -> Node:
    """Strip a trailing initializer so pointer depth is read from the declarator."""
    if decl.type == "init_declarator":
        inner = decl.child_by_field_name("declarator")
        if inner is not None:
            return inner
    return decl


def _build_macro(ctx: ExtractionContext, node: Node, depth: int, parent: str | None) -> None:
    name_node = node.child_by_field_name("name")
    name = ctx.text(name_node)
    value = ctx.field_text(node, "value")
    value = value.strip() if value else None
    if node.type == "preproc_function_def":
        params_node = node.child_by_field_name("parameters")
        params = [
            ParameterInfo(
                name=ctx.text(p) if p.type == "identifier" else "...",
                rest=p.type != "identifier",
                line=p.start_point[0] + 1,
                column=p.start_point[1],
            )
            for p in (params_node.named_children if params_node is not None else [])
        ]
        ctx.add_scope(
            node,
            name=name,
            type="function",
            depth=depth,
            parent=parent,
            name_node=name_node,
            signature=f"#define {name}{_compact(ctx.text(params_node))}",
            parameters=params,
            modifiers=["macro"],
            value=value,
            docstring=_docstring(ctx, node),
        )
        return
    ctx.add_scope(
        node,
        name=name,
        type="constant",
        depth=depth,
        parent=parent,
        name_node=name_node,
        signature=f"#define {name}",
        modifiers=["macro"],
        value=value,
        docstring=_docstring(ctx, node),
    )


# ----------------------------------------------------------------------
# C++ only
# ----------------------------------------------------------------------


def _build_namespace(ctx: ExtractionContext, node: Node, depth: int, parent: str | None) -> None:
    name_node = node.child_by_field_name("name")
    name = ctx.text(name_node) if name_node is not None else synthesized_name("namespace")
    ctx.add_scope(
        node,
        name=name,
        type="namespace",
        depth=depth,
        parent=parent,
        name_node=name_node,
        signature=f"namespace {name}",
        modifiers=() if name_node is not None else ["anonymous"],
        docstring=_docstring(ctx, node),
        exported=name_node is not None,
    )
    body = node.child_by_field_name("body")
    if body is not None:
        ctx.walk_children(body, depth + 1, name)


def _build_template(ctx: ExtractionContext, node: Node, depth: int, parent: str | None) -> None:
    generics = _template_parameters(ctx, node.child_by_field_name("parameters"))
    inner = next(
        (c for c in reversed(node.named_children) if c.type not in ("template_parameter_list", "comment")),
        None,
    )
    if inner is None:
        return
    if inner.type == "function_definition":
        _build_function(ctx, inner, depth, parent, outer=node, generics=generics)
    elif inner.type in _RECORDS and inner.child_by_field_name("body") is not None:
        _build_record(ctx, inner, depth, parent, outer=node, generics=generics)
    elif inner.type == "alias_declaration":
        _build_using_alias(ctx, inner, depth, parent, outer=node, generics=generics)
    elif inner.type == "declaration":
        type_node = inner.child_by_field_name("type")
        if _has_body(type_node) and type_node.type in _RECORDS:
            _build_record(ctx, type_node, depth, parent, outer=node, generics=generics)
    else:
        ctx.walk(inner, depth, parent)


# ----------------------------------------------------------------------
# Includes
# ----------------------------------------------------------------------


def package_name(source: str) -> str:
    head = source.replace("::", "/").split("/")[0]
    return head.rsplit(".", 1)[0] if "." in head else head


def _extract_imports(ctx: ExtractionContext, root: Node) -> list[ImportReference]:
    refs: list[ImportReference] = []
    for node in iter_named(root, frozenset({"preproc_include", "using_declaration"})):
        line = node.start_point[0] + 1
        if node.type == "preproc_include":
            path_node = node.child_by_field_name("path")
            if path_node is None:
                continue
            raw = ctx.text(path_node)
            source = raw.strip('"<>')
            refs.append(
                ImportReference(source, source, kind="side-effect", is_local=path_node.type == "string_literal", line=line)
            )
            continue
        # using namespace std;  /  using std::vector;
        target = next((c for c in node.named_children if c.type in ("identifier", "qualified_identifier")), None)
        if target is None:
            continue
        text = ctx.text(target)
        if any(c.type == "namespace" for c in node.children):
            refs.append(ImportReference(text, "*", kind="namespace", line=line))
        elif "::" in text:
            module, _, imported = text.rpartition("::")
            refs.append(ImportReference(module, imported, kind="named", line=line))
    return refs


_C_BUILDERS = {
    "function": _build_function,
    "class": _build_specifier,
    "enum": _build_specifier,
    "type_alias": _build_alias,
    "variable": _build_declaration,
    "macro": _build_macro,
}

C_STRATEGY = LanguageStrategy(
    family="c",
    builders=_C_BUILDERS,
    extract_imports=_extract_imports,
    is_exported=_is_exported,
    package_name=package_name,
)

CPP_STRATEGY = LanguageStrategy(
    family="cpp",
    builders={**_C_BUILDERS, "namespace": _build_namespace, "template": _build_template},
    extract_imports=_extract_imports,
    is_exported=_is_exported,
    package_name=package_name,
)
