"""Rust construct builders.

``impl`` blocks become scopes named after their target type.  A trait
impl also carries an ``implements`` heritage clause and a synthetic
reference to the trait so relationship resolution links the type to it.
"""

from __future__ import annotations

from scopegraph.extraction.models import (
    ClassMemberInfo,
    DecoratorInfo,
    EnumMemberInfo,
    GenericParameter,
    HeritageClause,
    IdentifierReference,
    ImportKind,
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

_LOCAL_ROOTS = ("crate", "self", "super")


def _visibility(ctx: ExtractionContext, node: Node) -> str | None:
    vis = next((c for c in node.children if c.type == "visibility_modifier"), None)
    return ctx.text(vis) if vis is not None else None


def _is_exported(ctx: ExtractionContext, node: Node, name: str) -> bool:
    return _visibility(ctx, node) is not None


def _docstring(ctx: ExtractionContext, node: Node) -> str | None:
    return ctx.leading_comments(node, ("///", "//!", "/**"))


def _attributes(ctx: ExtractionContext, node: Node) -> list[DecoratorInfo]:
    attrs: list[DecoratorInfo] = []
    sibling = node.prev_named_sibling
    while sibling is not None and sibling.type in ("attribute_item", "line_comment", "block_comment"):
        if sibling.type == "attribute_item":
            attr = next((c for c in sibling.named_children if c.type == "attribute"), None)
            if attr is not None and attr.named_children:
                head = attr.named_children[0]
                args = attr.child_by_field_name("arguments")
                arguments = ctx.text(args)[1:-1].strip() if args is not None else None
                attrs.insert(0, DecoratorInfo(name=ctx.text(head), arguments=arguments or None, line=sibling.start_point[0] + 1))
        sibling = sibling.prev_named_sibling
    return attrs


def _generics(ctx: ExtractionContext, node: Node) -> list[GenericParameter]:
    tp = node.child_by_field_name("type_parameters")
    if tp is None:
        return []
    params = []
    for child in tp.named_children:
        if child.type == "constrained_type_parameter":
            bounds = child.child_by_field_name("bounds")
            params.append(
                GenericParameter(
                    name=ctx.field_text(child, "left") or "",
                    constraint=ctx.text(bounds).lstrip(":").strip() if bounds is not None else None,
                )
            )
        elif child.type == "optional_type_parameter":
            params.append(
                GenericParameter(name=ctx.field_text(child, "name") or "", default=ctx.field_text(child, "default_type"))
            )
        elif child.type == "const_parameter":
            params.append(GenericParameter(name=ctx.field_text(child, "name") or ctx.text(child)))
        elif child.type in ("type_identifier", "lifetime"):
            params.append(GenericParameter(name=ctx.text(child)))
    return params


def _generics_text(ctx: ExtractionContext, node: Node) -> str:
    tp = node.child_by_field_name("type_parameters")
    return ctx.text(tp) if tp is not None else ""


def _parameters(ctx: ExtractionContext, node: Node) -> list[ParameterInfo]:
    params_node = node.child_by_field_name("parameters")
    params = []
    for child in params_node.named_children if params_node is not None else []:
        if child.type != "parameter":
            continue
        pattern = child.child_by_field_name("pattern")
        row, col = child.start_point
        params.append(
            ParameterInfo(
                name=ctx.text(pattern).removeprefix("mut ").strip(),
                type=ctx.field_text(child, "type"),
                line=row + 1,
                column=col,
            )
        )
    return params


def _in_type_body(node: Node) -> str | None:
    """``impl`` or ``trait`` owning ``node`` through its declaration list."""
    body = node.parent
    if body is not None and body.type == "declaration_list" and body.parent is not None:
        if body.parent.type in ("impl_item", "trait_item"):
            return body.parent.type
    return None


def _fn_signature(ctx: ExtractionContext, node: Node, name: str) -> str:
    parts = []
    vis = _visibility(ctx, node)
    if vis:
        parts.append(vis)
    mods = next((c for c in node.children if c.type == "function_modifiers"), None)
    if mods is not None:
        parts.append(ctx.text(mods))
    params = " ".join((ctx.field_text(node, "parameters") or "()").split())
    sig = " ".join([*parts, f"fn {name}{_generics_text(ctx, node)}{params}"])
    ret = ctx.field_text(node, "return_type")
    if ret:
        sig += f" -> {ret}"
    return sig


# ----------------------------------------------------------------------
# Builders
# ----------------------------------------------------------------------


def _build_function(ctx: ExtractionContext, node: Node, depth: int, parent: str | None) -> None:
    name_node = node.child_by_field_name("name")
    name = ctx.text(name_node)
    owner = _in_type_body(node)
    modifiers = []
    vis = _visibility(ctx, node)
    if vis:
        modifiers.append("pub")
    mods = next((c for c in node.children if c.type == "function_modifiers"), None)
    if mods is not None:
        modifiers.extend(ctx.text(mods).split())
    params_node = node.child_by_field_name("parameters")
    if params_node is not None and any(c.type == "self_parameter" for c in params_node.named_children):
        modifiers.append("self")

    ctx.add_scope(
        node,
        name=name,
        type="method" if owner else "function",
        depth=depth,
        parent=parent,
        name_node=name_node,
        signature=_fn_signature(ctx, node, name),
        parameters=_parameters(ctx, node),
        return_type=ctx.field_text(node, "return_type"),
        modifiers=modifiers,
        generic_parameters=_generics(ctx, node),
        decorators=_attributes(ctx, node),
        docstring=_docstring(ctx, node),
    )
    body = node.child_by_field_name("body")
    if body is not None:
        ctx.walk_children(body, depth + 1, name)


def _struct_members(ctx: ExtractionContext, body: Node | None) -> list[ClassMemberInfo]:
    members: list[ClassMemberInfo] = []
    if body is None:
        return members
    if body.type == "ordered_field_declaration_list":
        types = [c for c in body.named_children if c.type not in ("visibility_modifier", "attribute_item")]
        for index, type_node in enumerate(types):
            members.append(ClassMemberInfo(name=str(index), member_type="field", type=ctx.text(type_node), line=type_node.start_point[0] + 1))
        return members
    for field_node in body.named_children:
        if field_node.type != "field_declaration":
            continue
        vis = _visibility(ctx, field_node)
        members.append(
            ClassMemberInfo(
                name=ctx.field_text(field_node, "name") or "",
                member_type="field",
                type=ctx.field_text(field_node, "type"),
                accessibility="public" if vis else "private",
                line=field_node.start_point[0] + 1,
            )
        )
    return members


def _build_struct(ctx: ExtractionContext, node: Node, depth: int, parent: str | None) -> None:
    name_node = node.child_by_field_name("name")
    name = ctx.text(name_node)
    keyword = "union" if node.type == "union_item" else "struct"
    vis = _visibility(ctx, node)
    ctx.add_scope(
        node,
        name=name,
        type="class",
        depth=depth,
        parent=parent,
        name_node=name_node,
        signature=f"{vis + ' ' if vis else ''}{keyword} {name}{_generics_text(ctx, node)}",
        modifiers=[keyword, *(["pub"] if vis else [])],
        generic_parameters=_generics(ctx, node),
        members=_struct_members(ctx, node.child_by_field_name("body")),
        decorators=_attributes(ctx, node),
        docstring=_docstring(ctx, node),
    )


def _build_enum(ctx: ExtractionContext, node: Node, depth: int, parent: str | None) -> None:
    name_node = node.child_by_field_name("name")
    name = ctx.text(name_node)
    variants = []
    body = node.child_by_field_name("body")
    for variant in body.named_children if body is not None else []:
        if variant.type != "enum_variant":
            continue
        payload = variant.child_by_field_name("body") or variant.child_by_field_name("value")
        variants.append(
            EnumMemberInfo(
                name=ctx.field_text(variant, "name") or "",
                value=ctx.text(payload) if payload is not None else None,
                line=variant.start_point[0] + 1,
            )
        )
    vis = _visibility(ctx, node)
    ctx.add_scope(
        node,
        name=name,
        type="enum",
        depth=depth,
        parent=parent,
        name_node=name_node,
        signature=f"{vis + ' ' if vis else ''}enum {name}{_generics_text(ctx, node)}",
        modifiers=["pub"] if vis else [],
        generic_parameters=_generics(ctx, node),
        enum_members=variants,
        decorators=_attributes(ctx, node),
        docstring=_docstring(ctx, node),
    )


def _body_methods(ctx: ExtractionContext, body: Node | None) -> list[ClassMemberInfo]:
    members: list[ClassMemberInfo] = []
    for item in body.named_children if body is not None else []:
        if item.type in ("function_item", "function_signature_item"):
            name = ctx.field_text(item, "name") or ""
            members.append(
                ClassMemberInfo(
                    name=name,
                    member_type="method",
                    type=ctx.field_text(item, "return_type"),
                    accessibility="public" if _visibility(ctx, item) else None,
                    is_static=not any(
                        c.type == "self_parameter"
                        for c in (item.child_by_field_name("parameters") or item).named_children
                    ),
                    signature=_fn_signature(ctx, item, name),
                    line=item.start_point[0] + 1,
                )
            )
        elif item.type == "associated_type":
            members.append(
                ClassMemberInfo(name=ctx.field_text(item, "name") or "", member_type="property", line=item.start_point[0] + 1)
            )
    return members


def _build_trait(ctx: ExtractionContext, node: Node, depth: int, parent: str | None) -> None:
    name_node = node.child_by_field_name("name")
    name = ctx.text(name_node)
    bounds = node.child_by_field_name("bounds")
    supertraits = tuple(ctx.text(b) for b in bounds.named_children) if bounds is not None else ()
    body = node.child_by_field_name("body")
    vis = _visibility(ctx, node)
    signature = f"{vis + ' ' if vis else ''}trait {name}{_generics_text(ctx, node)}"
    if supertraits:
        signature += f": {' + '.join(supertraits)}"
    ctx.add_scope(
        node,
        name=name,
        type="interface",
        depth=depth,
        parent=parent,
        name_node=name_node,
        signature=signature,
        modifiers=["trait", *(["pub"] if vis else [])],
        generic_parameters=_generics(ctx, node),
        heritage_clauses=[HeritageClause("extends", supertraits)] if supertraits else (),
        members=_body_methods(ctx, body),
        decorators=_attributes(ctx, node),
        docstring=_docstring(ctx, node),
    )
    if body is not None:
        ctx.walk_children(body, depth + 1, name)


def _build_impl(ctx: ExtractionContext, node: Node, depth: int, parent: str | None) -> None:
    type_node = node.child_by_field_name("type")
    trait_node = node.child_by_field_name("trait")
    type_text = ctx.text(type_node)
    name = base_type_name(type_text) or synthesized_name("impl")
    body = node.child_by_field_name("body")
    generics = _generics_text(ctx, node)

    heritage = []
    synthetic: list[IdentifierReference] = []
    if trait_node is not None:
        trait_text = ctx.text(trait_node)
        trait_name = base_type_name(trait_text)
        signature = f"impl{generics} {trait_text} for {type_text}"
        heritage.append(HeritageClause("implements", (trait_text,)))
        qualifier = trait_text.rsplit("::", 1)[0] if "::" in trait_text.split("<")[0] else None
        row, col = trait_node.start_point
        synthetic.append(
            IdentifierReference(
                identifier=trait_name,
                line=row + 1,
                column=col,
                context=f"impl {trait_name} for {name}",
                qualifier=qualifier,
                heritage="implements",
            )
        )
    else:
        signature = f"impl{generics} {type_text}"

    ctx.add_scope(
        node,
        name=name,
        type="class",
        depth=depth,
        parent=parent,
        name_node=type_node,
        skip=[trait_node] if trait_node is not None else (),
        signature=signature,
        modifiers=["impl"],
        generic_parameters=_generics(ctx, node),
        heritage_clauses=heritage,
        members=_body_methods(ctx, body),
        decorators=_attributes(ctx, node),
        docstring=_docstring(ctx, node),
        extra_references=synthetic,
        exported=False,
    )
    if body is not None:
        ctx.walk_children(body, depth + 1, name)


def _build_mod(ctx: ExtractionContext, node: Node, depth: int, parent: str | None) -> None:
    name_node = node.child_by_field_name("name")
    name = ctx.text(name_node)
    vis = _visibility(ctx, node)
    body = node.child_by_field_name("body")
    ctx.add_scope(
        node,
        name=name,
        type="namespace",
        depth=depth,
        parent=parent,
        name_node=name_node,
        signature=f"{vis + ' ' if vis else ''}mod {name}",
        modifiers=["pub"] if vis else [],
        decorators=_attributes(ctx, node),
        docstring=_docstring(ctx, node),
        notes=() if body is not None else ["module declared in another file"],
    )
    if body is not None:
        ctx.walk_children(body, depth + 1, name)


def _build_type_item(ctx: ExtractionContext, node: Node, depth: int, parent: str | None) -> None:
    name_node = node.child_by_field_name("name")
    name = ctx.text(name_node)
    value = ctx.field_text(node, "type")
    vis = _visibility(ctx, node)
    ctx.add_scope(
        node,
        name=name,
        type="type_alias",
        depth=depth,
        parent=parent,
        name_node=name_node,
        signature=f"{vis + ' ' if vis else ''}type {name}{_generics_text(ctx, node)} = {value}",
        modifiers=["pub"] if vis else [],
        generic_parameters=_generics(ctx, node),
        value=value,
        docstring=_docstring(ctx, node),
    )


def _build_const(ctx: ExtractionContext, node: Node, depth: int, parent: str | None) -> None:
    if _in_type_body(node):
        return
    name_node = node.child_by_field_name("name")
    name = ctx.text(name_node)
    var_type = ctx.field_text(node, "type")
    keyword = "const" if node.type == "const_item" else "static"
    vis = _visibility(ctx, node)
    ctx.add_scope(
        node,
        name=name,
        type="constant" if keyword == "const" else "variable",
        depth=depth,
        parent=parent,
        name_node=name_node,
        signature=f"{vis + ' ' if vis else ''}{keyword} {name}: {var_type}",
        return_type=var_type,
        modifiers=[keyword, *(["pub"] if vis else [])],
        value=ctx.field_text(node, "value"),
        docstring=_docstring(ctx, node),
    )


# ----------------------------------------------------------------------
# Imports
# ----------------------------------------------------------------------


def is_local_specifier(source: str) -> bool:
    return source.split("::")[0] in _LOCAL_ROOTS


def package_name(source: str) -> str:
    return source.split("::")[0]


def _join(prefix: str, path: str) -> str:
    if not prefix:
        return path
    if not path:
        return prefix
    return f"{prefix}::{path}"


def _use_tree(ctx: ExtractionContext, node: Node, prefix: str, line: int, out: list[ImportReference]) -> None:
    def add(source: str, imported: str, alias: str | None = None, kind: ImportKind = "named") -> None:
        out.append(
            ImportReference(source, imported, alias=alias, kind=kind, is_local=is_local_specifier(source), line=line)
        )

    if node.type in ("identifier", "crate", "super", "metavariable"):
        name = ctx.text(node)
        add(prefix or name, name)
    elif node.type == "self":
        head, _, last = prefix.rpartition("::")
        add(head or prefix, last or prefix)
    elif node.type == "scoped_identifier":
        add(_join(prefix, ctx.field_text(node, "path") or ""), ctx.field_text(node, "name") or "")
    elif node.type == "use_as_clause":
        path = node.child_by_field_name("path")
        alias = ctx.field_text(node, "alias")
        collected: list[ImportReference] = []
        if path is not None:
            _use_tree(ctx, path, prefix, line, collected)
        for ref in collected:
            add(ref.source, ref.imported, alias)
    elif node.type == "scoped_use_list":
        path = ctx.field_text(node, "path") or ""
        use_list = node.child_by_field_name("list")
        if use_list is not None:
            _use_tree(ctx, use_list, _join(prefix, path), line, out)
    elif node.type == "use_list":
        for child in node.named_children:
            _use_tree(ctx, child, prefix, line, out)
    elif node.type == "use_wildcard":
        path = ctx.text(node).removesuffix("*").removesuffix("::")
        add(_join(prefix, path), "*", kind="namespace")


def _extract_imports(ctx: ExtractionContext, root: Node) -> list[ImportReference]:
    refs: list[ImportReference] = []
    for node in iter_named(root, frozenset({"use_declaration"})):
        argument = node.child_by_field_name("argument")
        if argument is not None:
            _use_tree(ctx, argument, "", node.start_point[0] + 1, refs)
    return refs


STRATEGY = LanguageStrategy(
    family="rust",
    builders={
        "class": _build_struct,
        "interface": _build_trait,
        "impl": _build_impl,
        "function": _build_function,
        "enum": _build_enum,
        "type_alias": _build_type_item,
        "namespace": _build_mod,
        "variable": _build_const,
    },
    extract_imports=_extract_imports,
    is_exported=_is_exported,
    package_name=package_name,
)
