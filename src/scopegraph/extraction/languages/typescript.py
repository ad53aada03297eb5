"""TypeScript / JavaScript / TSX construct builders."""

from __future__ import annotations

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
    iter_named,
    synthesized_name,
)

_FUNCTION_VALUES = frozenset({"arrow_function", "function_expression", "function", "generator_function"})
_MODIFIER_TOKENS = frozenset({"static", "async", "readonly", "abstract", "get", "set", "declare", "override_modifier"})


def _unquote(text: str) -> str:
    return text.strip().strip("'\"`")


def _annotation(ctx: ExtractionContext, node: Node | None) -> str | None:
    if node is None:
        return None
    return ctx.text(node).lstrip(":").strip() or None


def _export_target(node: Node) -> Node:
    """Outermost statement node that a doc comment or export keyword attaches to."""
    target = node
    if target.type == "variable_declarator" and target.parent is not None:
        target = target.parent
    if target.parent is not None and target.parent.type == "export_statement":
        target = target.parent
    return target


def _is_exported(ctx: ExtractionContext, node: Node, name: str) -> bool:
    return _export_target(node).type == "export_statement"


def _export_modifiers(node: Node) -> list[str]:
    target = _export_target(node)
    if target.type != "export_statement":
        return []
    mods = ["export"]
    if any(c.type == "default" for c in target.children):
        mods.append("default")
    return mods


def _modifiers(ctx: ExtractionContext, node: Node) -> list[str]:
    mods: list[str] = []
    for child in node.children:
        if child.type == "accessibility_modifier":
            mods.append(ctx.text(child))
        elif child.type in _MODIFIER_TOKENS:
            mods.append("override" if child.type == "override_modifier" else child.type)
        elif child.type == "*":
            mods.append("generator")
    return mods


def _docstring(ctx: ExtractionContext, node: Node) -> str | None:
    return ctx.leading_comments(_export_target(node), ("/**",))


def _decorators(ctx: ExtractionContext, node: Node) -> list[DecoratorInfo]:
    candidates = [c for c in node.children if c.type == "decorator"]
    target = _export_target(node)
    if target is not node:
        candidates = [c for c in target.children if c.type == "decorator"] + candidates
    sibling = node.prev_named_sibling
    leading: list[Node] = []
    while sibling is not None and sibling.type == "decorator":
        leading.insert(0, sibling)
        sibling = sibling.prev_named_sibling
    decorators = []
    for dec in leading + candidates:
        expr = dec.named_children[0] if dec.named_children else None
        if expr is None:
            continue
        if expr.type == "call_expression":
            fn = expr.child_by_field_name("function")
            args = expr.child_by_field_name("arguments")
            name = ctx.text(fn)
            arguments = ctx.text(args)[1:-1].strip() if args is not None else None
        else:
            name, arguments = ctx.text(expr), None
        decorators.append(DecoratorInfo(name=name, arguments=arguments or None, line=dec.start_point[0] + 1))
    return decorators


def _type_parameters(ctx: ExtractionContext, node: Node | None) -> list[GenericParameter]:
    if node is None:
        return []
    params = []
    for tp in node.named_children:
        if tp.type != "type_parameter":
            continue
        constraint = tp.child_by_field_name("constraint")
        default = tp.child_by_field_name("value")
        params.append(
            GenericParameter(
                name=ctx.field_text(tp, "name") or ctx.text(tp),
                constraint=ctx.text(constraint).removeprefix("extends").strip() if constraint else None,
                default=ctx.text(default).lstrip("=").strip() if default else None,
            )
        )
    return params


def _parameters(ctx: ExtractionContext, fn: Node) -> list[ParameterInfo]:
    single = fn.child_by_field_name("parameter")
    if single is not None:
        row, col = single.start_point
        return [ParameterInfo(name=ctx.text(single), line=row + 1, column=col)]
    params_node = fn.child_by_field_name("parameters")
    if params_node is None:
        return []
    params = []
    for child in params_node.named_children:
        name_node: Node | None = None
        type_text = default = None
        optional = rest = False
        if child.type in ("required_parameter", "optional_parameter"):
            name_node = child.child_by_field_name("pattern")
            type_text = _annotation(ctx, child.child_by_field_name("type"))
            value = child.child_by_field_name("value")
            default = ctx.text(value) if value is not None else None
            optional = child.type == "optional_parameter" or value is not None
        elif child.type == "assignment_pattern":
            name_node = child.child_by_field_name("left")
            default = ctx.field_text(child, "right")
            optional = True
        elif child.type in ("identifier", "rest_pattern", "object_pattern", "array_pattern"):
            name_node = child
        if name_node is None:
            continue
        if name_node.type == "rest_pattern":
            rest = True
            name_node = name_node.named_children[0] if name_node.named_children else name_node
        name = ctx.text(name_node)
        if name == "this":
            continue
        row, col = child.start_point
        params.append(
            ParameterInfo(
                name=name,
                type=type_text,
                optional=optional,
                rest=rest,
                default_value=default,
                line=row + 1,
                column=col,
            )
        )
    return params


def _render_params(params: list[ParameterInfo]) -> str:
    parts = []
    for p in params:
        text = ("..." if p.rest else "") + p.name + ("?" if p.optional and p.default_value is None else "")
        if p.type:
            text += f": {p.type}"
        if p.default_value is not None:
            text += f" = {p.default_value}"
        parts.append(text)
    return "(" + ", ".join(parts) + ")"


def _render_generics(generics: list[GenericParameter]) -> str:
    if not generics:
        return ""
    parts = []
    for g in generics:
        text = g.name
        if g.constraint:
            text += f" extends {g.constraint}"
        if g.default:
            text += f" = {g.default}"
        parts.append(text)
    return "<" + ", ".join(parts) + ">"


# ----------------------------------------------------------------------
# Builders
# ----------------------------------------------------------------------


def _function_scope(
    ctx: ExtractionContext,
    node: Node,
    fn: Node,
    name: str,
    name_node: Node | None,
    depth: int,
    parent: str | None,
    *,
    method: bool = False,
    keyword: str = "function",
) -> None:
    params = _parameters(ctx, fn)
    generics = _type_parameters(ctx, fn.child_by_field_name("type_parameters"))
    return_type = _annotation(ctx, fn.child_by_field_name("return_type"))
    modifiers = _export_modifiers(node) + _modifiers(ctx, fn)
    if fn.type == "arrow_function":
        modifiers.append("arrow")

    prefix = " ".join(m for m in modifiers if m not in ("export", "default", "arrow", "generator"))
    head = f"{prefix} " if prefix else ""
    if not method:
        head += f"{keyword} "
    signature = f"{head}{name}{_render_generics(generics)}{_render_params(params)}"
    if return_type:
        signature += f": {return_type}"

    ctx.add_scope(
        node,
        name=name,
        type="method" if method else "function",
        depth=depth,
        parent=parent,
        name_node=name_node,
        signature=signature,
        parameters=params,
        return_type=return_type,
        modifiers=modifiers,
        generic_parameters=generics,
        decorators=_decorators(ctx, node),
        docstring=_docstring(ctx, node),
        notes=["anonymous function"] if name_node is None else (),
    )
    body = fn.child_by_field_name("body")
    if body is not None:
        ctx.walk_children(body, depth + 1, name)


def _build_function(ctx: ExtractionContext, node: Node, depth: int, parent: str | None) -> None:
    name_node = node.child_by_field_name("name")
    name = ctx.text(name_node) if name_node is not None else synthesized_name("function")
    _function_scope(ctx, node, node, name, name_node, depth, parent)


def _build_method(ctx: ExtractionContext, node: Node, depth: int, parent: str | None) -> None:
    name_node = node.child_by_field_name("name")
    name = ctx.text(name_node) if name_node is not None else synthesized_name("method")
    _function_scope(ctx, node, node, name, name_node, depth, parent, method=True)


def _class_members(ctx: ExtractionContext, body: Node | None) -> list[ClassMemberInfo]:
    if body is None:
        return []
    members = []
    for child in body.named_children:
        line = child.start_point[0] + 1
        mods = _modifiers(ctx, child)
        access = next((m for m in mods if m in ("public", "private", "protected")), None)
        if child.type in ("public_field_definition", "field_definition", "property_signature"):
            name_node = child.child_by_field_name("name") or child.child_by_field_name("property")
            if name_node is None:
                continue
            members.append(
                ClassMemberInfo(
                    name=ctx.text(name_node),
                    member_type="property",
                    type=_annotation(ctx, child.child_by_field_name("type")),
                    accessibility=access,
                    is_static="static" in mods,
                    is_readonly="readonly" in mods,
                    line=line,
                )
            )
        elif child.type in ("method_definition", "method_signature", "abstract_method_signature"):
            name = ctx.field_text(child, "name") or synthesized_name("method")
            signature = f"{name}{_render_params(_parameters(ctx, child))}"
            return_type = _annotation(ctx, child.child_by_field_name("return_type"))
            if return_type:
                signature += f": {return_type}"
            members.append(
                ClassMemberInfo(
                    name=name,
                    member_type="method",
                    type=return_type,
                    accessibility=access,
                    is_static="static" in mods,
                    signature=signature,
                    line=line,
                )
            )
    return members


def _heritage(ctx: ExtractionContext, node: Node) -> list[HeritageClause]:
    clauses: list[HeritageClause] = []
    for child in node.children:
        if child.type == "class_heritage":
            for part in child.named_children:
                if part.type == "extends_clause":
                    values = part.children_by_field_name("value") or part.named_children[:1]
                    clauses.append(HeritageClause("extends", tuple(ctx.text(v) for v in values)))
                elif part.type == "implements_clause":
                    clauses.append(HeritageClause("implements", tuple(ctx.text(t) for t in part.named_children)))
                else:
                    # JavaScript: class_heritage holds the base expression directly
                    clauses.append(HeritageClause("extends", (ctx.text(part),)))
        elif child.type == "extends_type_clause":
            clauses.append(HeritageClause("extends", tuple(ctx.text(t) for t in child.named_children)))
    return clauses


def _render_heritage(clauses: list[HeritageClause]) -> str:
    return "".join(f" {c.clause} {', '.join(c.types)}" for c in clauses)


def _build_class(ctx: ExtractionContext, node: Node, depth: int, parent: str | None) -> None:
    name_node = node.child_by_field_name("name")
    name = ctx.text(name_node) if name_node is not None else synthesized_name("class")
    generics = _type_parameters(ctx, node.child_by_field_name("type_parameters"))
    heritage = _heritage(ctx, node)
    body = node.child_by_field_name("body")
    modifiers = _export_modifiers(node)
    if node.type == "abstract_class_declaration":
        modifiers.append("abstract")
    keyword = "abstract class" if "abstract" in modifiers else "class"

    ctx.add_scope(
        node,
        name=name,
        type="class",
        depth=depth,
        parent=parent,
        name_node=name_node,
        signature=f"{keyword} {name}{_render_generics(generics)}{_render_heritage(heritage)}",
        modifiers=modifiers,
        generic_parameters=generics,
        heritage_clauses=heritage,
        members=_class_members(ctx, body),
        decorators=_decorators(ctx, node),
        docstring=_docstring(ctx, node),
        notes=["anonymous class"] if name_node is None else (),
    )
    if body is not None:
        ctx.walk_children(body, depth + 1, name)


def _build_interface(ctx: ExtractionContext, node: Node, depth: int, parent: str | None) -> None:
    name_node = node.child_by_field_name("name")
    name = ctx.text(name_node)
    generics = _type_parameters(ctx, node.child_by_field_name("type_parameters"))
    heritage = _heritage(ctx, node)
    ctx.add_scope(
        node,
        name=name,
        type="interface",
        depth=depth,
        parent=parent,
        name_node=name_node,
        signature=f"interface {name}{_render_generics(generics)}{_render_heritage(heritage)}",
        modifiers=_export_modifiers(node),
        generic_parameters=generics,
        heritage_clauses=heritage,
        members=_class_members(ctx, node.child_by_field_name("body")),
        docstring=_docstring(ctx, node),
    )


def _build_enum(ctx: ExtractionContext, node: Node, depth: int, parent: str | None) -> None:
    name_node = node.child_by_field_name("name")
    name = ctx.text(name_node)
    members: list[EnumMemberInfo] = []
    body = node.child_by_field_name("body")
    for child in body.named_children if body is not None else []:
        line = child.start_point[0] + 1
        if child.type == "enum_assignment":
            members.append(
                EnumMemberInfo(
                    name=ctx.field_text(child, "name") or "",
                    value=ctx.field_text(child, "value"),
                    line=line,
                )
            )
        elif child.type in ("property_identifier", "string"):
            members.append(EnumMemberInfo(name=_unquote(ctx.text(child)), line=line))
    modifiers = _export_modifiers(node)
    if any(c.type == "const" for c in node.children):
        modifiers.append("const")
    ctx.add_scope(
        node,
        name=name,
        type="enum",
        depth=depth,
        parent=parent,
        name_node=name_node,
        signature=f"enum {name}",
        modifiers=modifiers,
        enum_members=members,
        docstring=_docstring(ctx, node),
    )


def _build_type_alias(ctx: ExtractionContext, node: Node, depth: int, parent: str | None) -> None:
    name_node = node.child_by_field_name("name")
    name = ctx.text(name_node)
    generics = _type_parameters(ctx, node.child_by_field_name("type_parameters"))
    ctx.add_scope(
        node,
        name=name,
        type="type_alias",
        depth=depth,
        parent=parent,
        name_node=name_node,
        signature=f"type {name}{_render_generics(generics)}",
        modifiers=_export_modifiers(node),
        generic_parameters=generics,
        value=ctx.field_text(node, "value"),
        docstring=_docstring(ctx, node),
    )


def _build_namespace(ctx: ExtractionContext, node: Node, depth: int, parent: str | None) -> None:
    name_node = node.child_by_field_name("name")
    name = _unquote(ctx.text(name_node)) if name_node is not None else synthesized_name("namespace")
    keyword = "namespace" if node.type == "internal_module" else "module"
    ctx.add_scope(
        node,
        name=name,
        type="namespace",
        depth=depth,
        parent=parent,
        name_node=name_node,
        signature=f"{keyword} {name}",
        modifiers=_export_modifiers(node),
        docstring=_docstring(ctx, node),
    )
    body = node.child_by_field_name("body")
    if body is not None:
        ctx.walk_children(body, depth + 1, name)


def _build_variable(ctx: ExtractionContext, node: Node, depth: int, parent: str | None) -> None:
    """``const f = () => ...`` becomes a function; module-level bindings become variables."""
    keyword = node.children[0].type if node.children else "var"
    declarators = [c for c in node.named_children if c.type == "variable_declarator"]
    for decl in declarators:
        name_node = decl.child_by_field_name("name")
        value = decl.child_by_field_name("value")
        if name_node is None:
            continue
        name = ctx.text(name_node)
        if value is not None and value.type in _FUNCTION_VALUES and name_node.type == "identifier":
            _function_scope(ctx, decl, value, name, name_node, depth, parent, keyword=keyword)
            continue
        if parent is None and name_node.type == "identifier":
            var_type = _annotation(ctx, decl.child_by_field_name("type"))
            is_constant = keyword == "const" and name.isupper()
            signature = f"{keyword} {name}" + (f": {var_type}" if var_type else "")
            ctx.add_scope(
                node if len(declarators) == 1 else decl,
                name=name,
                type="constant" if is_constant else "variable",
                depth=depth,
                parent=parent,
                name_node=name_node,
                signature=signature,
                return_type=var_type,
                modifiers=[*_export_modifiers(decl), keyword],
                value=ctx.text(value) if value is not None else None,
                docstring=_docstring(ctx, decl),
                exported=_is_exported(ctx, decl, name),
            )
            if value is not None:
                ctx.walk(value, depth + 1, name)
        elif value is not None:
            ctx.walk(value, depth, parent)


# ----------------------------------------------------------------------
# Imports
# ----------------------------------------------------------------------


def is_local_specifier(source: str) -> bool:
    return source.startswith((".", "/", "@/", "~/"))


def package_name(source: str) -> str:
    parts = source.split("/")
    if source.startswith("@") and len(parts) > 1:
        return "/".join(parts[:2])
    return parts[0]


def _extract_imports(ctx: ExtractionContext, root: Node) -> list[ImportReference]:
    refs: list[ImportReference] = []
    for node in iter_named(root, frozenset({"import_statement"})):
        source_node = node.child_by_field_name("source")
        if source_node is None:
            continue
        source = _unquote(ctx.text(source_node))
        is_local = is_local_specifier(source)
        line = node.start_point[0] + 1
        clause = next((c for c in node.named_children if c.type == "import_clause"), None)
        if clause is None:
            refs.append(ImportReference(source, "*", kind="side-effect", is_local=is_local, line=line))
            continue
        for part in clause.named_children:
            if part.type == "identifier":
                refs.append(
                    ImportReference(source, "default", alias=ctx.text(part), kind="default", is_local=is_local, line=line)
                )
            elif part.type == "namespace_import":
                alias = next((ctx.text(c) for c in part.named_children if c.type == "identifier"), None)
                refs.append(ImportReference(source, "*", alias=alias, kind="namespace", is_local=is_local, line=line))
            elif part.type == "named_imports":
                for spec in part.named_children:
                    if spec.type != "import_specifier":
                        continue
                    refs.append(
                        ImportReference(
                            source,
                            _unquote(ctx.field_text(spec, "name") or ""),
                            alias=ctx.field_text(spec, "alias"),
                            kind="named",
                            is_local=is_local,
                            line=line,
                        )
                    )
    return refs


STRATEGY = LanguageStrategy(
    family="typescript",
    builders={
        "class": _build_class,
        "interface": _build_interface,
        "function": _build_function,
        "method": _build_method,
        "enum": _build_enum,
        "type_alias": _build_type_alias,
        "namespace": _build_namespace,
        "variable": _build_variable,
    },
    extract_imports=_extract_imports,
    is_exported=_is_exported,
    package_name=package_name,
)
