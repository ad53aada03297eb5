"""Go construct builders.

Methods are parented to their receiver type even though Go declares them
at file level.  Capitalized names are exported.
"""

from __future__ import annotations

from scopegraph.extraction.models import (
    ClassMemberInfo,
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


def _is_exported(ctx: ExtractionContext, node: Node, name: str) -> bool:
    return name[:1].isupper()


def _docstring(ctx: ExtractionContext, node: Node) -> str | None:
    return ctx.leading_comments(node)


def _modifiers(name: str) -> list[str]:
    return ["exported"] if name[:1].isupper() else []


def _parameters(ctx: ExtractionContext, params_node: Node | None) -> list[ParameterInfo]:
    params: list[ParameterInfo] = []
    for decl in params_node.named_children if params_node is not None else []:
        if decl.type not in ("parameter_declaration", "variadic_parameter_declaration"):
            continue
        type_text = ctx.field_text(decl, "type")
        rest = decl.type == "variadic_parameter_declaration"
        names = decl.children_by_field_name("name")
        row, col = decl.start_point
        if not names:
            params.append(ParameterInfo(name="_", type=type_text, rest=rest, line=row + 1, column=col))
        for name_node in names:
            params.append(ParameterInfo(name=ctx.text(name_node), type=type_text, rest=rest, line=row + 1, column=col))
    return params


def _type_parameters(ctx: ExtractionContext, node: Node) -> list[GenericParameter]:
    tp = node.child_by_field_name("type_parameters")
    params: list[GenericParameter] = []
    for decl in tp.named_children if tp is not None else []:
        if decl.type != "type_parameter_declaration":
            continue
        constraint = ctx.field_text(decl, "type")
        for name_node in decl.children_by_field_name("name"):
            params.append(GenericParameter(name=ctx.text(name_node), constraint=constraint))
    return params


def _type_parameters_text(ctx: ExtractionContext, node: Node) -> str:
    tp = node.child_by_field_name("type_parameters")
    return ctx.text(tp) if tp is not None else ""


def _compact(text: str) -> str:
    return " ".join(text.split())


# ----------------------------------------------------------------------
# Builders
# ----------------------------------------------------------------------


def _build_function(ctx: ExtractionContext, node: Node, depth: int, parent: str | None) -> None:
    name_node = node.child_by_field_name("name")
    name = ctx.text(name_node)
    params_node = node.child_by_field_name("parameters")
    result = ctx.field_text(node, "result")
    signature = f"func {name}{_type_parameters_text(ctx, node)}{_compact(ctx.text(params_node))}"
    if result:
        signature += f" {result}"
    ctx.add_scope(
        node,
        name=name,
        type="function",
        depth=depth,
        parent=parent,
        name_node=name_node,
        signature=signature,
        parameters=_parameters(ctx, params_node),
        return_type=result,
        modifiers=_modifiers(name),
        generic_parameters=_type_parameters(ctx, node),
        docstring=_docstring(ctx, node),
    )
    body = node.child_by_field_name("body")
    if body is not None:
        ctx.walk_children(body, depth + 1, name)


def _build_method(ctx: ExtractionContext, node: Node, depth: int, parent: str | None) -> None:
    name_node = node.child_by_field_name("name")
    name = ctx.text(name_node)
    receiver = node.child_by_field_name("receiver")
    receiver_params = _parameters(ctx, receiver)
    receiver_type = base_type_name(receiver_params[0].type or "") if receiver_params else ""
    receiver_names = [p.name for p in receiver_params]
    params_node = node.child_by_field_name("parameters")
    result = ctx.field_text(node, "result")
    signature = f"func {_compact(ctx.text(receiver))} {name}{_compact(ctx.text(params_node))}"
    if result:
        signature += f" {result}"
    modifiers = _modifiers(name)
    if receiver_params and (receiver_params[0].type or "").startswith("*"):
        modifiers.append("pointer_receiver")
    owner = receiver_type or parent
    ctx.add_scope(
        node,
        name=name,
        type="method",
        depth=depth + 1 if receiver_type else depth,
        parent=owner,
        name_node=name_node,
        skip=[receiver] if receiver is not None else (),
        signature=signature,
        parameters=_parameters(ctx, params_node),
        return_type=result,
        modifiers=modifiers,
        docstring=_docstring(ctx, node),
        exclude=receiver_names,
    )
    body = node.child_by_field_name("body")
    if body is not None:
        ctx.walk_children(body, depth + 2 if receiver_type else depth + 1, name)


def _struct_parts(ctx: ExtractionContext, struct: Node) -> tuple[list[ClassMemberInfo], list[str]]:
    members: list[ClassMemberInfo] = []
    embedded: list[str] = []
    fields = next((c for c in struct.named_children if c.type == "field_declaration_list"), None)
    for decl in fields.named_children if fields is not None else []:
        if decl.type != "field_declaration":
            continue
        type_text = ctx.field_text(decl, "type")
        names = decl.children_by_field_name("name")
        if not names and type_text:
            embedded.append(type_text.lstrip("*"))
            continue
        for name_node in names:
            name = ctx.text(name_node)
            members.append(
                ClassMemberInfo(
                    name=name,
                    member_type="field",
                    type=type_text,
                    accessibility="public" if name[:1].isupper() else "private",
                    line=decl.start_point[0] + 1,
                )
            )
    return members, embedded


def _interface_parts(ctx: ExtractionContext, iface: Node) -> tuple[list[ClassMemberInfo], list[str]]:
    members: list[ClassMemberInfo] = []
    embedded: list[str] = []
    for elem in iface.named_children:
        if elem.type in ("method_elem", "method_spec"):
            name = ctx.field_text(elem, "name") or ""
            params = _compact(ctx.field_text(elem, "parameters") or "()")
            result = ctx.field_text(elem, "result")
            members.append(
                ClassMemberInfo(
                    name=name,
                    member_type="method",
                    type=result,
                    accessibility="public" if name[:1].isupper() else "private",
                    signature=f"{name}{params}" + (f" {result}" if result else ""),
                    line=elem.start_point[0] + 1,
                )
            )
        elif elem.type in ("type_elem", "constraint_elem", "type_identifier", "qualified_type"):
            embedded.append(ctx.text(elem))
    return members, embedded


def _build_type_declaration(ctx: ExtractionContext, node: Node, depth: int, parent: str | None) -> None:
    specs = [c for c in node.named_children if c.type in ("type_spec", "type_alias")]
    for spec in specs:
        scope_node = node if len(specs) == 1 else spec
        name_node = spec.child_by_field_name("name")
        name = ctx.text(name_node)
        type_node = spec.child_by_field_name("type")
        generics = _type_parameters(ctx, spec)
        generics_text = _type_parameters_text(ctx, spec)
        docstring = _docstring(ctx, scope_node)
        modifiers = _modifiers(name)

        if spec.type == "type_spec" and type_node is not None and type_node.type == "struct_type":
            members, embedded = _struct_parts(ctx, type_node)
            ctx.add_scope(
                scope_node,
                name=name,
                type="class",
                depth=depth,
                parent=parent,
                name_node=name_node,
                signature=f"type {name}{generics_text} struct",
                modifiers=["struct", *modifiers],
                generic_parameters=generics,
                heritage_clauses=[HeritageClause("extends", tuple(embedded))] if embedded else (),
                members=members,
                docstring=docstring,
            )
        elif spec.type == "type_spec" and type_node is not None and type_node.type == "interface_type":
            members, embedded = _interface_parts(ctx, type_node)
            ctx.add_scope(
                scope_node,
                name=name,
                type="interface",
                depth=depth,
                parent=parent,
                name_node=name_node,
                signature=f"type {name}{generics_text} interface",
                modifiers=modifiers,
                generic_parameters=generics,
                heritage_clauses=[HeritageClause("extends", tuple(embedded))] if embedded else (),
                members=members,
                docstring=docstring,
            )
        else:
            value = ctx.text(type_node) if type_node is not None else None
            joiner = " = " if spec.type == "type_alias" else " "
            ctx.add_scope(
                scope_node,
                name=name,
                type="type_alias",
                depth=depth,
                parent=parent,
                name_node=name_node,
                signature=f"type {name}{generics_text}{joiner}{_compact(value or '')}",
                modifiers=modifiers,
                generic_parameters=generics,
                value=value,
                docstring=docstring,
            )


def _build_var(ctx: ExtractionContext, node: Node, depth: int, parent: str | None) -> None:
    """Package-level const/var declarations; locals stay variables of their function."""
    if parent is not None:
        return
    keyword = "const" if node.type == "const_declaration" else "var"
    specs = [c for c in iter_named(node, frozenset({"const_spec", "var_spec"}))]
    for spec in specs:
        names = spec.children_by_field_name("name")
        var_type = ctx.field_text(spec, "type")
        value = ctx.field_text(spec, "value")
        for name_node in names:
            name = ctx.text(name_node)
            scope_node = node if len(specs) == 1 and len(names) == 1 else spec
            ctx.add_scope(
                scope_node,
                name=name,
                type="constant" if keyword == "const" else "variable",
                depth=depth,
                parent=parent,
                name_node=name_node,
                exclude=[ctx.text(n) for n in names],
                signature=f"{keyword} {name}" + (f" {var_type}" if var_type else ""),
                return_type=var_type,
                modifiers=[keyword, *_modifiers(name)],
                value=value,
                docstring=_docstring(ctx, scope_node),
            )


# ----------------------------------------------------------------------
# Imports
# ----------------------------------------------------------------------


def is_local_specifier(source: str) -> bool:
    return source.startswith(("./", "../"))


def go_package_name(path: str) -> str:
    """Default package name for an import path (``.../v2`` suffixes skipped)."""
    parts = [p for p in path.split("/") if p]
    if len(parts) > 1 and parts[-1].startswith("v") and parts[-1][1:].isdigit():
        parts = parts[:-1]
    return parts[-1] if parts else path


def package_name(source: str) -> str:
    parts = source.split("/")
    if "." in parts[0]:
        return "/".join(parts[:3])
    return parts[0]


def _extract_imports(ctx: ExtractionContext, root: Node) -> list[ImportReference]:
    refs: list[ImportReference] = []
    for spec in iter_named(root, frozenset({"import_spec"})):
        path_node = spec.child_by_field_name("path")
        if path_node is None:
            continue
        path = ctx.text(path_node).strip('"`')
        name_node = spec.child_by_field_name("name")
        alias = ctx.text(name_node) if name_node is not None else None
        line = spec.start_point[0] + 1
        is_local = is_local_specifier(path)
        if alias == "_":
            refs.append(ImportReference(path, path, kind="side-effect", is_local=is_local, line=line))
        elif alias == ".":
            refs.append(ImportReference(path, "*", kind="namespace", is_local=is_local, line=line))
        else:
            refs.append(
                ImportReference(path, go_package_name(path), alias=alias, kind="namespace", is_local=is_local, line=line)
            )
    return refs


STRATEGY = LanguageStrategy(
    family="go",
    builders={
        "function": _build_function,
        "method": _build_method,
        "type_declaration": _build_type_declaration,
        "variable": _build_var,
    },
    extract_imports=_extract_imports,
    is_exported=_is_exported,
    package_name=package_name,
)
