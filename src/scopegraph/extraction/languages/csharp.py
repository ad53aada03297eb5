"""C# construct builders."""

from __future__ import annotations

import re

from scopegraph.extraction.models import (
    ClassMemberInfo,
    DecoratorInfo,
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
)

# Interface naming convention: IDisposable, IRepository<T>
_INTERFACE_NAME = re.compile(r"^I[A-Z]")

_KEYWORDS = {
    "class_declaration": "class",
    "struct_declaration": "struct",
    "record_declaration": "record",
    "record_struct_declaration": "record struct",
    "interface_declaration": "interface",
}
_ACCESS = ("public", "private", "protected", "internal")


def _compact(text: str) -> str:
    return " ".join(text.split())


def _modifiers(ctx: ExtractionContext, node: Node) -> list[str]:
    return [ctx.text(c) for c in node.children if c.type == "modifier"]


def _is_exported(ctx: ExtractionContext, node: Node, name: str) -> bool:
    return "public" in _modifiers(ctx, node)


def _docstring(ctx: ExtractionContext, node: Node) -> str | None:
    return ctx.leading_comments(node, ("///",))


def _decorators(ctx: ExtractionContext, node: Node) -> list[DecoratorInfo]:
    decorators: list[DecoratorInfo] = []
    for attr_list in (c for c in node.children if c.type == "attribute_list"):
        for attr in attr_list.named_children:
            if attr.type != "attribute":
                continue
            args_node = next((c for c in attr.named_children if c.type == "attribute_argument_list"), None)
            arguments = ctx.text(args_node)[1:-1].strip() if args_node is not None else None
            decorators.append(
                DecoratorInfo(name=ctx.field_text(attr, "name") or "", arguments=arguments or None, line=attr.start_point[0] + 1)
            )
    return decorators


def _parameters(ctx: ExtractionContext, params_node: Node | None) -> list[ParameterInfo]:
    params: list[ParameterInfo] = []
    for param in params_node.named_children if params_node is not None else []:
        if param.type != "parameter":
            continue
        default = next((c for c in param.named_children if c.type == "equals_value_clause"), None)
        default_text = ctx.text(default).lstrip("=").strip() if default is not None else None
        row, col = param.start_point
        params.append(
            ParameterInfo(
                name=ctx.field_text(param, "name") or "",
                type=ctx.field_text(param, "type"),
                optional=default is not None,
                rest=any(c.type == "params" or (c.type == "modifier" and ctx.text(c) == "params") for c in param.children),
                default_value=default_text,
                line=row + 1,
                column=col,
            )
        )
    return params


def _type_parameters(ctx: ExtractionContext, node: Node) -> list[GenericParameter]:
    tp = node.child_by_field_name("type_parameters")
    if tp is None:
        tp = next((c for c in node.children if c.type == "type_parameter_list"), None)
    if tp is None:
        return []
    constraints: dict[str, str] = {}
    for clause in (c for c in node.children if c.type == "type_parameter_constraints_clause"):
        target = next((c for c in clause.named_children if c.type == "identifier"), None)
        if target is None:
            continue
        bounds = [ctx.text(c) for c in clause.named_children if c != target]
        constraints[ctx.text(target)] = ", ".join(bounds)
    generics: list[GenericParameter] = []
    for param in tp.named_children:
        if param.type != "type_parameter":
            continue
        name = ctx.field_text(param, "name")
        if name is None:
            name = next((ctx.text(c) for c in param.named_children if c.type == "identifier"), "")
        generics.append(GenericParameter(name=name, constraint=constraints.get(name) or None))
    return generics


def _base_types(ctx: ExtractionContext, node: Node) -> list[str]:
    bases = node.child_by_field_name("bases")
    if bases is None:
        bases = next((c for c in node.children if c.type == "base_list"), None)
    if bases is None:
        return []
    names: list[str] = []
    for child in bases.named_children:
        if child.type == "primary_constructor_base_type":
            child = child.named_children[0] if child.named_children else child
        if child.type in ("identifier", "generic_name", "qualified_name", "predefined_type"):
            names.append(ctx.text(child))
    return names


def _heritage(node: Node, bases: list[str]) -> list[HeritageClause]:
    """Split a base list into extends/implements.

    Interfaces extend their bases, structs can only implement, and classes
    extend at most one non-interface base.
    """
    if not bases:
        return []
    if node.type == "interface_declaration":
        return [HeritageClause("extends", tuple(bases))]
    if node.type in ("struct_declaration", "record_struct_declaration"):
        return [HeritageClause("implements", tuple(bases))]
    extends = [b for b in bases if not _INTERFACE_NAME.match(base_type_name(b))]
    implements = [b for b in bases if _INTERFACE_NAME.match(base_type_name(b))]
    clauses = []
    if extends:
        clauses.append(HeritageClause("extends", tuple(extends[:1])))
        implements = extends[1:] + implements
    if implements:
        clauses.append(HeritageClause("implements", tuple(implements)))
    return clauses


def _accessibility(mods: list[str]) -> str:
    return next((m for m in mods if m in _ACCESS), "private")


def _members(ctx: ExtractionContext, body: Node) -> list[ClassMemberInfo]:
    members: list[ClassMemberInfo] = []
    for child in body.named_children:
        mods = _modifiers(ctx, child)
        common = {
            "accessibility": _accessibility(mods),
            "is_static": "static" in mods,
            "is_readonly": "readonly" in mods or "const" in mods,
            "line": child.start_point[0] + 1,
        }
        if child.type in ("field_declaration", "event_field_declaration"):
            decl = next((c for c in child.named_children if c.type == "variable_declaration"), None)
            if decl is None:
                continue
            var_type = ctx.field_text(decl, "type")
            for var in decl.named_children:
                if var.type == "variable_declarator":
                    members.append(
                        ClassMemberInfo(name=ctx.field_text(var, "name") or "", member_type="field", type=var_type, **common)
                    )
        elif child.type == "property_declaration":
            members.append(
                ClassMemberInfo(
                    name=ctx.field_text(child, "name") or "",
                    member_type="property",
                    type=ctx.field_text(child, "type"),
                    **common,
                )
            )
        elif child.type in ("method_declaration", "constructor_declaration"):
            name = ctx.field_text(child, "name") or ""
            returns = _return_type(ctx, child)
            members.append(
                ClassMemberInfo(
                    name=name,
                    member_type="constructor" if child.type == "constructor_declaration" else "method",
                    type=returns,
                    signature=_method_signature(ctx, child, name, returns),
                    **common,
                )
            )
    return members


def _return_type(ctx: ExtractionContext, node: Node) -> str | None:
    return ctx.field_text(node, "returns") or ctx.field_text(node, "type")


def _method_signature(ctx: ExtractionContext, node: Node, name: str, returns: str | None) -> str:
    mods = " ".join(_modifiers(ctx, node))
    tp = node.child_by_field_name("type_parameters")
    params = node.child_by_field_name("parameters")
    parts = [p for p in (mods, returns) if p]
    head = " ".join(parts)
    call = f"{name}{ctx.text(tp) if tp is not None else ''}{_compact(ctx.text(params)) if params is not None else '()'}"
    return f"{head} {call}".strip()


# ----------------------------------------------------------------------
# Builders
# ----------------------------------------------------------------------


def _build_compilation_unit(ctx: ExtractionContext, node: Node, depth: int, parent: str | None) -> None:
    children = node.children
    for index, child in enumerate(children):
        if child.type == "file_scoped_namespace_declaration":
            # Members may be nested in the node or follow it as siblings
            rest = [c for c in children[index + 1 :] if c.is_named]
            _build_namespace(ctx, child, depth, parent, extent=rest)
            for sibling in rest:
                ctx.walk(sibling, depth + 1, ctx.field_text(child, "name"))
            return
        ctx.walk(child, depth, parent)


def _build_namespace(
    ctx: ExtractionContext,
    node: Node,
    depth: int,
    parent: str | None,
    *,
    extent: list[Node] | None = None,
) -> None:
    name_node = node.child_by_field_name("name")
    name = ctx.text(name_node)
    ctx.add_scope(
        node,
        name=name,
        type="namespace",
        depth=depth,
        parent=parent,
        name_node=name_node,
        signature=f"namespace {name}",
        docstring=_docstring(ctx, node),
        exported=True,
        extent=extent or (),
    )
    body = node.child_by_field_name("body")
    if body is None and node.type == "file_scoped_namespace_declaration":
        body = node
    if body is not None:
        for child in body.children:
            if child != name_node:
                ctx.walk(child, depth + 1, name)


def _build_type(ctx: ExtractionContext, node: Node, depth: int, parent: str | None) -> None:
    name_node = node.child_by_field_name("name")
    name = ctx.text(name_node)
    keyword = _KEYWORDS[node.type]
    mods = _modifiers(ctx, node)
    generics = _type_parameters(ctx, node)
    bases = _base_types(ctx, node)
    params_node = node.child_by_field_name("parameters")
    if params_node is None:
        params_node = next((c for c in node.children if c.type == "parameter_list"), None)
    tp = node.child_by_field_name("type_parameters")
    signature = " ".join([*mods, keyword, name]) + (ctx.text(tp) if tp is not None else "")
    if params_node is not None:
        signature += _compact(ctx.text(params_node))
    if bases:
        signature += " : " + ", ".join(bases)
    body = node.child_by_field_name("body")
    scope_type = "interface" if node.type == "interface_declaration" else "class"
    ctx.add_scope(
        node,
        name=name,
        type=scope_type,
        depth=depth,
        parent=parent,
        name_node=name_node,
        signature=signature,
        parameters=_parameters(ctx, params_node),
        modifiers=[*mods, keyword] if keyword != scope_type else mods,
        generic_parameters=generics,
        heritage_clauses=_heritage(node, bases),
        members=_members(ctx, body) if body is not None else (),
        decorators=_decorators(ctx, node),
        docstring=_docstring(ctx, node),
        exclude=[g.name for g in generics],
    )
    if body is not None:
        ctx.walk_children(body, depth + 1, name)


def _build_enum(ctx: ExtractionContext, node: Node, depth: int, parent: str | None) -> None:
    name_node = node.child_by_field_name("name")
    name = ctx.text(name_node)
    body = node.child_by_field_name("body")
    members = [
        EnumMemberInfo(
            name=ctx.field_text(m, "name") or "",
            value=ctx.field_text(m, "value"),
            line=m.start_point[0] + 1,
        )
        for m in (body.named_children if body is not None else [])
        if m.type == "enum_member_declaration"
    ]
    bases = _base_types(ctx, node)
    mods = _modifiers(ctx, node)
    ctx.add_scope(
        node,
        name=name,
        type="enum",
        depth=depth,
        parent=parent,
        name_node=name_node,
        signature=" ".join([*mods, "enum", name]) + (f" : {bases[0]}" if bases else ""),
        return_type=bases[0] if bases else None,
        modifiers=mods,
        enum_members=members,
        decorators=_decorators(ctx, node),
        docstring=_docstring(ctx, node),
        exclude=[m.name for m in members],
    )


def _build_method(ctx: ExtractionContext, node: Node, depth: int, parent: str | None) -> None:
    name_node = node.child_by_field_name("name")
    name = ctx.text(name_node)
    mods = _modifiers(ctx, node)
    returns = _return_type(ctx, node) if node.type != "constructor_declaration" else None
    generics = _type_parameters(ctx, node)
    if node.type == "constructor_declaration":
        mods = [*mods, "constructor"]
    ctx.add_scope(
        node,
        name=name,
        type="method",
        depth=depth,
        parent=parent,
        name_node=name_node,
        signature=_method_signature(ctx, node, name, returns),
        parameters=_parameters(ctx, node.child_by_field_name("parameters")),
        return_type=returns,
        modifiers=mods,
        generic_parameters=generics,
        decorators=_decorators(ctx, node),
        docstring=_docstring(ctx, node),
        exclude=[g.name for g in generics],
    )
    body = node.child_by_field_name("body")
    if body is not None:
        ctx.walk_children(body, depth + 1, name)


def _build_local_function(ctx: ExtractionContext, node: Node, depth: int, parent: str | None) -> None:
    name_node = node.child_by_field_name("name")
    name = ctx.text(name_node)
    returns = _return_type(ctx, node)
    generics = _type_parameters(ctx, node)
    ctx.add_scope(
        node,
        name=name,
        type="function",
        depth=depth,
        parent=parent,
        name_node=name_node,
        signature=_method_signature(ctx, node, name, returns),
        parameters=_parameters(ctx, node.child_by_field_name("parameters")),
        return_type=returns,
        modifiers=[*_modifiers(ctx, node), "local"],
        generic_parameters=generics,
        decorators=_decorators(ctx, node),
        exclude=[g.name for g in generics],
        exported=False,
    )
    body = node.child_by_field_name("body")
    if body is not None:
        ctx.walk_children(body, depth + 1, name)


def _build_delegate(ctx: ExtractionContext, node: Node, depth: int, parent: str | None) -> None:
    name_node = node.child_by_field_name("name")
    name = ctx.text(name_node)
    returns = _return_type(ctx, node)
    mods = _modifiers(ctx, node)
    params_node = node.child_by_field_name("parameters")
    generics = _type_parameters(ctx, node)
    ctx.add_scope(
        node,
        name=name,
        type="type_alias",
        depth=depth,
        parent=parent,
        name_node=name_node,
        signature=" ".join([*mods, "delegate", returns or "void", name]) + _compact(ctx.text(params_node)),
        parameters=_parameters(ctx, params_node),
        return_type=returns,
        modifiers=[*mods, "delegate"],
        generic_parameters=generics,
        decorators=_decorators(ctx, node),
        docstring=_docstring(ctx, node),
        exclude=[g.name for g in generics],
    )


# ----------------------------------------------------------------------
# Imports
# ----------------------------------------------------------------------


def package_name(source: str) -> str:
    return source.split(".")[0]


def _extract_imports(ctx: ExtractionContext, root: Node) -> list[ImportReference]:
    refs: list[ImportReference] = []
    for node in iter_named(root, frozenset({"using_directive"})):
        alias_node = node.child_by_field_name("name")
        name_equals = next((c for c in node.named_children if c.type == "name_equals"), None)
        if alias_node is None and name_equals is not None:
            alias_node = next((c for c in name_equals.named_children if c.type == "identifier"), None)
        target = next(
            (
                c
                for c in reversed(node.named_children)
                if c.type in ("qualified_name", "identifier", "generic_name") and c != alias_node and c != name_equals
            ),
            None,
        )
        if target is None:
            continue
        source = ctx.text(target)
        line = node.start_point[0] + 1
        if alias_node is not None:
            refs.append(ImportReference(source, source, alias=ctx.text(alias_node), kind="namespace", line=line))
        else:
            refs.append(ImportReference(source, "*", kind="namespace", line=line))
    return refs


STRATEGY = LanguageStrategy(
    family="csharp",
    builders={
        "compilation_unit": _build_compilation_unit,
        "namespace": _build_namespace,
        "class": _build_type,
        "interface": _build_type,
        "enum": _build_enum,
        "method": _build_method,
        "function": _build_local_function,
        "type_alias": _build_delegate,
    },
    extract_imports=_extract_imports,
    is_exported=_is_exported,
    package_name=package_name,
)
