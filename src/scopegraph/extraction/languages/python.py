"""Python construct builders."""

from __future__ import annotations

import inspect
import sys
from collections.abc import Sequence

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

_ENUM_BASES = frozenset({"Enum", "IntEnum", "StrEnum", "Flag", "IntFlag"})
_RECEIVERS = frozenset({"self", "cls"})


def _string_value(text: str) -> str:
    body = text.lstrip("rRbBuUfF")
    for quote in ('"""', "'''", '"', "'"):
        if body.startswith(quote) and body.endswith(quote) and len(body) >= 2 * len(quote):
            body = body[len(quote) : -len(quote)]
            break
    return inspect.cleandoc(body)


def _docstring(ctx: ExtractionContext, body: Node | None) -> str | None:
    if body is None or not body.named_children:
        return None
    first = body.named_children[0]
    if first.type == "expression_statement" and first.named_children and first.named_children[0].type == "string":
        return _string_value(ctx.text(first.named_children[0])) or None
    return None


def _enclosing_class(node: Node) -> Node | None:
    """Class whose body directly holds ``node`` (through a decorator wrapper)."""
    current = node.parent
    if current is not None and current.type == "decorated_definition":
        current = current.parent
    if current is not None and current.type == "block" and current.parent is not None:
        if current.parent.type == "class_definition":
            return current.parent
    return None


def _is_module_level(node: Node) -> bool:
    parent = node.parent
    if parent is not None and parent.type == "decorated_definition":
        parent = parent.parent
    return parent is not None and parent.type == "module"


def _is_exported(ctx: ExtractionContext, node: Node, name: str) -> bool:
    return _is_module_level(node) and not name.startswith("_")


def _decorators(ctx: ExtractionContext, wrapper: Node | None) -> list[DecoratorInfo]:
    if wrapper is None or wrapper.type != "decorated_definition":
        return []
    decorators = []
    for dec in wrapper.named_children:
        if dec.type != "decorator" or not dec.named_children:
            continue
        expr = dec.named_children[0]
        if expr.type == "call":
            name = ctx.field_text(expr, "function") or ""
            args = ctx.field_text(expr, "arguments") or "()"
            arguments: str | None = args[1:-1].strip() or None
        else:
            name, arguments = ctx.text(expr), None
        decorators.append(DecoratorInfo(name=name, arguments=arguments, line=dec.start_point[0] + 1))
    return decorators


def _parameters(ctx: ExtractionContext, params_node: Node | None, *, skip_receiver: bool) -> list[ParameterInfo]:
    if params_node is None:
        return []
    params = []
    for child in params_node.named_children:
        type_text = default = None
        rest = optional = False
        target = child
        if child.type in ("typed_parameter", "typed_default_parameter", "default_parameter"):
            name_node = child.child_by_field_name("name")
            if name_node is None:
                name_node = child.named_children[0] if child.named_children else None
            type_node = child.child_by_field_name("type")
            type_text = ctx.text(type_node) if type_node is not None else None
            value = child.child_by_field_name("value")
            if value is not None:
                default = ctx.text(value)
                optional = True
            target = name_node
        if target is None:
            continue
        if target.type in ("list_splat_pattern", "dictionary_splat_pattern"):
            rest = True
            target = target.named_children[0] if target.named_children else target
        if target.type != "identifier":
            continue
        name = ctx.text(target)
        if skip_receiver and name in _RECEIVERS:
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


def _render_params(params: Sequence[ParameterInfo], raw: Node | None, ctx: ExtractionContext) -> str:
    if raw is not None:
        return " ".join(ctx.text(raw).split())
    return "(" + ", ".join(p.name for p in params) + ")"


def _function_modifiers(node: Node, name: str, decorators: list[DecoratorInfo]) -> list[str]:
    mods = []
    if any(c.type == "async" for c in node.children):
        mods.append("async")
    decorator_names = {base_type_name(d.name) for d in decorators}
    for marker in ("staticmethod", "classmethod", "property", "abstractmethod"):
        if marker in decorator_names:
            mods.append(marker)
    if name.startswith("__") and name.endswith("__"):
        mods.append("dunder")
    elif name.startswith("_"):
        mods.append("private")
    return mods


# ----------------------------------------------------------------------
# Builders
# ----------------------------------------------------------------------


def _build_function(
    ctx: ExtractionContext,
    node: Node,
    depth: int,
    parent: str | None,
    decorators: list[DecoratorInfo] | None = None,
) -> None:
    decorators = decorators if decorators is not None else _decorators(ctx, node.parent)
    name_node = node.child_by_field_name("name")
    name = ctx.text(name_node)
    is_method = _enclosing_class(node) is not None
    params_node = node.child_by_field_name("parameters")
    params = _parameters(ctx, params_node, skip_receiver=is_method)
    return_node = node.child_by_field_name("return_type")
    return_type = ctx.text(return_node) if return_node is not None else None
    modifiers = _function_modifiers(node, name, decorators)
    body = node.child_by_field_name("body")

    signature = f"{'async ' if 'async' in modifiers else ''}def {name}{_render_params(params, params_node, ctx)}"
    if return_type:
        signature += f" -> {return_type}"

    ctx.add_scope(
        node,
        name=name,
        type="method" if is_method else "function",
        depth=depth,
        parent=parent,
        name_node=name_node,
        signature=signature,
        parameters=params,
        return_type=return_type,
        modifiers=modifiers,
        decorators=decorators,
        docstring=_docstring(ctx, body),
    )
    if body is not None:
        ctx.walk_children(body, depth + 1, name)


def _class_members(ctx: ExtractionContext, body: Node | None) -> tuple[list[ClassMemberInfo], list[EnumMemberInfo]]:
    members: list[ClassMemberInfo] = []
    enum_members: list[EnumMemberInfo] = []
    if body is None:
        return members, enum_members
    seen: set[str] = set()
    for stmt in body.named_children:
        definition = stmt.child_by_field_name("definition") if stmt.type == "decorated_definition" else stmt
        if definition is None:
            continue
        if definition.type == "function_definition":
            name = ctx.field_text(definition, "name") or ""
            params = ctx.field_text(definition, "parameters") or "()"
            members.append(
                ClassMemberInfo(
                    name=name,
                    member_type="method",
                    type=ctx.field_text(definition, "return_type"),
                    accessibility="private" if name.startswith("_") and not name.endswith("__") else "public",
                    signature=f"{name}{' '.join(params.split())}",
                    line=definition.start_point[0] + 1,
                )
            )
            if name == "__init__":
                members.extend(_instance_attributes(ctx, definition, seen))
        elif definition.type == "expression_statement" and definition.named_children:
            assign = definition.named_children[0]
            if assign.type != "assignment":
                continue
            left = assign.child_by_field_name("left")
            if left is None or left.type != "identifier":
                continue
            name = ctx.text(left)
            seen.add(name)
            type_node = assign.child_by_field_name("type")
            value_node = assign.child_by_field_name("right")
            members.append(
                ClassMemberInfo(
                    name=name,
                    member_type="property",
                    type=ctx.text(type_node) if type_node is not None else None,
                    accessibility="private" if name.startswith("_") else "public",
                    is_static=type_node is None,
                    line=assign.start_point[0] + 1,
                )
            )
            enum_members.append(
                EnumMemberInfo(
                    name=name,
                    value=ctx.text(value_node) if value_node is not None else None,
                    line=assign.start_point[0] + 1,
                )
            )
    return members, enum_members


def _instance_attributes(ctx: ExtractionContext, init: Node, seen: set[str]) -> list[ClassMemberInfo]:
    """``self.x = ...`` assignments in ``__init__``."""
    members = []
    for assign in iter_named(init, frozenset({"assignment"})):
        left = assign.child_by_field_name("left")
        if left is None or left.type != "attribute":
            continue
        obj = left.child_by_field_name("object")
        attr = left.child_by_field_name("attribute")
        if obj is None or attr is None or ctx.text(obj) != "self":
            continue
        name = ctx.text(attr)
        if name in seen:
            continue
        seen.add(name)
        type_node = assign.child_by_field_name("type")
        members.append(
            ClassMemberInfo(
                name=name,
                member_type="property",
                type=ctx.text(type_node) if type_node is not None else None,
                accessibility="private" if name.startswith("_") else "public",
                line=assign.start_point[0] + 1,
            )
        )
    return members


def _generic_parameters(ctx: ExtractionContext, node: Node, bases: list[str]) -> list[GenericParameter]:
    params: list[GenericParameter] = []
    type_params = node.child_by_field_name("type_parameters")
    if type_params is not None:
        for child in type_params.named_children:
            params.append(GenericParameter(name=ctx.text(child)))
    for base in bases:
        if base.startswith(("Generic[", "typing.Generic[")) and base.endswith("]"):
            inner = base.split("[", 1)[1][:-1]
            params.extend(GenericParameter(name=p.strip()) for p in inner.split(",") if p.strip())
    return params


def _build_class(
    ctx: ExtractionContext,
    node: Node,
    depth: int,
    parent: str | None,
    decorators: list[DecoratorInfo] | None = None,
) -> None:
    decorators = decorators if decorators is not None else _decorators(ctx, node.parent)
    name_node = node.child_by_field_name("name")
    name = ctx.text(name_node)
    bases: list[str] = []
    modifiers: list[str] = []
    superclasses = node.child_by_field_name("superclasses")
    for arg in superclasses.named_children if superclasses is not None else []:
        if arg.type == "keyword_argument":
            if ctx.field_text(arg, "name") == "metaclass":
                modifiers.append("metaclass")
            continue
        if arg.type in ("identifier", "attribute", "subscript", "generic_type"):
            bases.append(ctx.text(arg))
    base_names = {base_type_name(b) for b in bases}
    if "Protocol" in base_names:
        modifiers.append("protocol")
    if base_names & {"ABC", "ABCMeta"}:
        modifiers.append("abstract")
    if any(d.name.endswith("dataclass") for d in decorators):
        modifiers.append("dataclass")

    body = node.child_by_field_name("body")
    members, enum_members = _class_members(ctx, body)
    is_enum = bool(base_names & _ENUM_BASES)
    signature = f"class {name}" + (f"({', '.join(bases)})" if bases else "")

    ctx.add_scope(
        node,
        name=name,
        type="enum" if is_enum else "class",
        depth=depth,
        parent=parent,
        name_node=name_node,
        signature=signature,
        modifiers=modifiers,
        generic_parameters=_generic_parameters(ctx, node, bases),
        heritage_clauses=[HeritageClause("extends", tuple(bases))] if bases else (),
        members=members,
        enum_members=enum_members if is_enum else (),
        decorators=decorators,
        docstring=_docstring(ctx, body),
    )
    if body is not None:
        ctx.walk_children(body, depth + 1, name)


def _build_decorated(ctx: ExtractionContext, node: Node, depth: int, parent: str | None) -> None:
    definition = node.child_by_field_name("definition")
    if definition is None:
        ctx.walk_children(node, depth, parent)
        return
    decorators = _decorators(ctx, node)
    if definition.type == "class_definition":
        _build_class(ctx, definition, depth, parent, decorators)
    else:
        _build_function(ctx, definition, depth, parent, decorators)


def _is_constant_name(name: str) -> bool:
    return name.isupper() and name.replace("_", "").isalnum()


def _build_statement(ctx: ExtractionContext, node: Node, depth: int, parent: str | None) -> None:
    """Lambda assignments anywhere; module-level assignments become variables."""
    assign = node.named_children[0] if node.named_children else None
    if assign is None or assign.type != "assignment":
        return
    left = assign.child_by_field_name("left")
    right = assign.child_by_field_name("right")
    if left is None or left.type != "identifier":
        return
    name = ctx.text(left)

    if right is not None and right.type == "lambda":
        params_node = right.child_by_field_name("parameters")
        params = _parameters(ctx, params_node, skip_receiver=False)
        params_text = ctx.text(params_node) if params_node is not None else ""
        ctx.add_scope(
            node,
            name=name,
            type="lambda",
            depth=depth,
            parent=parent,
            name_node=left,
            signature=f"{name} = lambda{' ' + params_text if params_text else ''}",
            parameters=params,
            value=ctx.text(right),
        )
        return

    if node.parent is None or node.parent.type != "module":
        return
    type_node = assign.child_by_field_name("type")
    var_type = ctx.text(type_node) if type_node is not None else None
    ctx.add_scope(
        node,
        name=name,
        type="constant" if _is_constant_name(name) else "variable",
        depth=depth,
        parent=parent,
        name_node=left,
        signature=name + (f": {var_type}" if var_type else ""),
        return_type=var_type,
        value=ctx.text(right) if right is not None else None,
    )


# ----------------------------------------------------------------------
# Imports
# ----------------------------------------------------------------------


def is_local_specifier(source: str) -> bool:
    """Relative imports are local; stdlib is not; anything else may be."""
    if source.startswith("."):
        return True
    return source.split(".")[0] not in sys.stdlib_module_names


def package_name(source: str) -> str:
    return source.split(".")[0]


def _extract_imports(ctx: ExtractionContext, root: Node) -> list[ImportReference]:
    refs: list[ImportReference] = []
    for node in iter_named(root, frozenset({"import_statement", "import_from_statement"})):
        line = node.start_point[0] + 1
        if node.type == "import_statement":
            for name_node in node.children_by_field_name("name"):
                if name_node.type == "aliased_import":
                    module = ctx.field_text(name_node, "name") or ""
                    alias = ctx.field_text(name_node, "alias")
                else:
                    module, alias = ctx.text(name_node), None
                refs.append(
                    ImportReference(
                        module, module, alias=alias, kind="namespace", is_local=is_local_specifier(module), line=line
                    )
                )
            continue

        source = "".join(ctx.text(node.child_by_field_name("module_name")).split())
        is_local = is_local_specifier(source)
        if any(c.type == "wildcard_import" for c in node.named_children):
            refs.append(ImportReference(source, "*", kind="namespace", is_local=is_local, line=line))
            continue
        for name_node in node.children_by_field_name("name"):
            if name_node.type == "aliased_import":
                imported = ctx.field_text(name_node, "name") or ""
                alias = ctx.field_text(name_node, "alias")
            else:
                imported, alias = ctx.text(name_node), None
            refs.append(ImportReference(source, imported, alias=alias, kind="named", is_local=is_local, line=line))
    return refs


STRATEGY = LanguageStrategy(
    family="python",
    builders={
        "class": _build_class,
        "function": _build_function,
        "decorated": _build_decorated,
        "variable": _build_statement,
    },
    extract_imports=_extract_imports,
    is_exported=_is_exported,
    package_name=package_name,
)
