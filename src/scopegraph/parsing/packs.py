"""LanguagePack: single source of truth for per-language tree-sitter config.

Every language scopegraph supports has exactly ONE LanguagePack holding:
- Grammar install metadata (package, module, version, loader function)
- File extension detection
- The node-type table the scope walker consults (which node types are
  scope constructs, which are identifiers, member accesses, branches, ...)
- Keyword (stop-word) and built-in symbol sets

Packs are pure data.  Construct builders live in
``scopegraph.extraction.languages`` and are selected by ``LanguagePack.family``.

The PACKS registry is the canonical lookup: ``PACKS["python"]``.
"""

from __future__ import annotations

from dataclasses import dataclass, field

# =========================================================================
# Dataclasses
# =========================================================================


@dataclass(frozen=True)
class NodeTypes:
    """Node-type table for one grammar.

    ``scopes`` maps a concrete node type to the construct category whose
    builder handles it (``class``, ``function``, ``impl``, ...).
    """

    scopes: dict[str, str] = field(default_factory=dict)

    # Reference collection
    identifiers: frozenset[str] = frozenset({"identifier"})
    type_identifiers: frozenset[str] = frozenset()
    # Parent node types that put a plain identifier in type position
    type_contexts: frozenset[str] = frozenset()
    # node_type -> (object field, member field)
    member_access: dict[str, tuple[str, str]] = field(default_factory=dict)
    decorators: frozenset[str] = frozenset()
    imports: frozenset[str] = frozenset()
    comments: frozenset[str] = frozenset({"comment"})
    # Subtrees never searched for references
    skip_references: frozenset[str] = frozenset()

    # Definition detection (identifiers that bind rather than use a name)
    definition_fields: dict[str, tuple[str, ...]] = field(default_factory=dict)
    definition_containers: frozenset[str] = frozenset()
    pattern_types: frozenset[str] = frozenset()

    # node_type -> (name field, type field); type falls back to the parent node
    variable_declarators: dict[str, tuple[str, str | None]] = field(default_factory=dict)

    # Complexity
    branches: frozenset[str] = frozenset()
    binary_expressions: frozenset[str] = frozenset({"binary_expression"})
    logical_operators: frozenset[str] = frozenset({"&&", "||"})

    errors: frozenset[str] = frozenset({"ERROR"})


@dataclass(frozen=True)
class LanguagePack:
    """Complete tree-sitter configuration for a single language."""

    # -- Identity --
    name: str  # Canonical language tag ("python", "typescript", ...)
    family: str  # Builder family ("typescript" serves javascript/tsx too)
    grammar_name: str  # tree-sitter grammar key ("c_sharp", "tsx", ...)

    # -- Grammar install --
    grammar_package: str  # PyPI package ("tree-sitter-python")
    grammar_module: str  # Python import ("tree_sitter_python")
    min_version: str
    # Non-standard function name (e.g. "language_typescript", "language_tsx")
    language_func: str | None = None

    # -- File detection --
    extensions: frozenset[str] = field(default_factory=frozenset)

    # -- Walker configuration --
    node_types: NodeTypes = field(default_factory=NodeTypes)
    stop_words: frozenset[str] = field(default_factory=frozenset)
    builtins: frozenset[str] = field(default_factory=frozenset)
    # Implicit receiver bindings never reported as references
    receivers: frozenset[str] = field(default_factory=frozenset)


# =========================================================================
# Shared keyword / builtin sets
# =========================================================================

_BASE_STOP_WORDS: frozenset[str] = frozenset(
    {
        "if", "for", "while", "return", "const", "let", "var", "function",
        "class", "extends", "implements", "import", "from", "export", "default",
        "new", "this", "super", "await", "async", "switch", "case", "break",
        "continue", "try", "catch", "finally", "throw", "true", "false", "null",
        "undefined", "typeof", "instanceof", "in", "of",
    }
)  # fmt: skip

_JS_BUILTINS: frozenset[str] = frozenset(
    {
        "Number", "String", "Boolean", "Object", "Array", "Map", "Set", "WeakMap",
        "WeakSet", "Promise", "Date", "Error", "TypeError", "RangeError",
        "console", "Math", "JSON", "RegExp", "Symbol", "BigInt", "Reflect",
        "Proxy", "isNaN", "isFinite", "parseInt", "parseFloat", "globalThis",
        "window", "document", "process", "require", "module", "exports",
        "setTimeout", "clearTimeout", "setInterval", "clearInterval",
        "Record", "Partial", "Required", "Readonly", "Pick", "Omit",
        "ReturnType", "Parameters", "Awaited", "NonNullable",
        "string", "number", "boolean", "any", "unknown", "never", "void",
        "object", "bigint", "symbol",
    }
)  # fmt: skip

# =========================================================================
# TypeScript / JavaScript
# =========================================================================

_TS_SCOPES: dict[str, str] = {
    "class_declaration": "class",
    "abstract_class_declaration": "class",
    "interface_declaration": "interface",
    "function_declaration": "function",
    "generator_function_declaration": "function",
    "method_definition": "method",
    "abstract_method_signature": "method",
    "enum_declaration": "enum",
    "type_alias_declaration": "type_alias",
    "internal_module": "namespace",
    "module": "namespace",
    "lexical_declaration": "variable",
    "variable_declaration": "variable",
}

_TS_NODE_TYPES = NodeTypes(
    scopes=_TS_SCOPES,
    identifiers=frozenset({"identifier", "shorthand_property_identifier"}),
    type_identifiers=frozenset({"type_identifier"}),
    member_access={
        "member_expression": ("object", "property"),
        "nested_type_identifier": ("module", "name"),
    },
    decorators=frozenset({"decorator"}),
    imports=frozenset({"import_statement"}),
    skip_references=frozenset({"string", "regex", "hash_bang_line"}),
    definition_fields={
        "function_declaration": ("name",),
        "generator_function_declaration": ("name",),
        "function_expression": ("name",),
        "function": ("name",),
        "class_declaration": ("name",),
        "abstract_class_declaration": ("name",),
        "class": ("name",),
        "interface_declaration": ("name",),
        "type_alias_declaration": ("name",),
        "enum_declaration": ("name",),
        "internal_module": ("name",),
        "variable_declarator": ("name",),
        "required_parameter": ("pattern",),
        "optional_parameter": ("pattern",),
        "assignment_pattern": ("left",),
        "pair_pattern": ("value",),
        "catch_clause": ("parameter",),
        "for_in_statement": ("left",),
        "arrow_function": ("parameter",),
        "type_parameter": ("name",),
        "labeled_statement": ("label",),
    },
    definition_containers=frozenset(
        {"formal_parameters", "array_pattern", "object_pattern", "rest_pattern"}
    ),
    pattern_types=frozenset({"array_pattern", "object_pattern", "rest_pattern"}),
    variable_declarators={"variable_declarator": ("name", "type")},
    branches=frozenset(
        {
            "if_statement",
            "for_statement",
            "for_in_statement",
            "while_statement",
            "do_statement",
            "switch_case",
            "catch_clause",
            "ternary_expression",
        }
    ),
    logical_operators=frozenset({"&&", "||", "??"}),
)

_TS_STOP_WORDS: frozenset[str] = _BASE_STOP_WORDS | frozenset(
    {"interface", "type", "enum", "namespace", "declare", "readonly", "public",
     "private", "protected", "static", "abstract", "as", "is", "keyof", "get", "set"}
)  # fmt: skip

TYPESCRIPT_PACK = LanguagePack(
    name="typescript",
    family="typescript",
    grammar_name="typescript",
    grammar_package="tree-sitter-typescript",
    grammar_module="tree_sitter_typescript",
    min_version="0.23.0",
    language_func="language_typescript",
    extensions=frozenset({"ts", "mts", "cts"}),
    node_types=_TS_NODE_TYPES,
    stop_words=_TS_STOP_WORDS,
    builtins=_JS_BUILTINS,
    receivers=frozenset({"this", "super"}),
)

TSX_PACK = LanguagePack(
    name="tsx",
    family="typescript",
    grammar_name="tsx",
    grammar_package="tree-sitter-typescript",
    grammar_module="tree_sitter_typescript",
    min_version="0.23.0",
    language_func="language_tsx",
    extensions=frozenset({"tsx"}),
    node_types=_TS_NODE_TYPES,
    stop_words=_TS_STOP_WORDS,
    builtins=_JS_BUILTINS | frozenset({"React", "JSX"}),
    receivers=frozenset({"this", "super"}),
)

JAVASCRIPT_PACK = LanguagePack(
    name="javascript",
    family="typescript",
    grammar_name="javascript",
    grammar_package="tree-sitter-javascript",
    grammar_module="tree_sitter_javascript",
    min_version="0.23.0",
    extensions=frozenset({"js", "jsx", "mjs", "cjs"}),
    node_types=_TS_NODE_TYPES,
    stop_words=_BASE_STOP_WORDS | frozenset({"static", "get", "set"}),
    builtins=_JS_BUILTINS,
    receivers=frozenset({"this", "super"}),
)

# =========================================================================
# Python
# =========================================================================

_PYTHON_NODE_TYPES = NodeTypes(
    scopes={
        "class_definition": "class",
        "function_definition": "function",
        "decorated_definition": "decorated",
        "expression_statement": "variable",
    },
    identifiers=frozenset({"identifier"}),
    type_contexts=frozenset({"type", "generic_type", "type_parameter"}),
    member_access={"attribute": ("object", "attribute")},
    decorators=frozenset({"decorator"}),
    imports=frozenset({"import_statement", "import_from_statement", "future_import_statement"}),
    skip_references=frozenset({"string", "concatenated_string"}),
    definition_fields={
        "function_definition": ("name",),
        "class_definition": ("name",),
        "assignment": ("left",),
        "for_statement": ("left",),
        "for_in_clause": ("left",),
        "default_parameter": ("name",),
        "typed_default_parameter": ("name",),
        "keyword_argument": ("name",),
        "named_expression": ("name",),
        "as_pattern": ("alias",),
    },
    definition_containers=frozenset(
        {
            "parameters",
            "lambda_parameters",
            "typed_parameter",
            "global_statement",
            "nonlocal_statement",
            "as_pattern_target",
        }
    ),
    pattern_types=frozenset(
        {
            "pattern_list",
            "tuple_pattern",
            "list_pattern",
            "list_splat_pattern",
            "dictionary_splat_pattern",
        }
    ),
    variable_declarators={"assignment": ("left", "type")},
    branches=frozenset(
        {
            "if_statement",
            "elif_clause",
            "for_statement",
            "while_statement",
            "except_clause",
            "with_statement",
            "case_clause",
            "conditional_expression",
            "for_in_clause",
            "if_clause",
            "boolean_operator",
        }
    ),
    binary_expressions=frozenset(),
    logical_operators=frozenset(),
)

PYTHON_PACK = LanguagePack(
    name="python",
    family="python",
    grammar_name="python",
    grammar_package="tree-sitter-python",
    grammar_module="tree_sitter_python",
    min_version="0.23.0",
    extensions=frozenset({"py", "pyi"}),
    node_types=_PYTHON_NODE_TYPES,
    stop_words=frozenset(
        {
            "and", "as", "assert", "break", "class", "continue", "def", "del",
            "elif", "else", "except", "finally", "for", "from", "global", "if",
            "import", "in", "is", "lambda", "nonlocal", "not", "or", "pass",
            "raise", "return", "try", "while", "with", "yield", "True", "False",
            "None", "async", "await", "match", "case",
        }
    ),  # fmt: skip
    builtins=frozenset(
        {
            "print", "len", "range", "str", "int", "float", "bool", "list", "dict",
            "tuple", "set", "frozenset", "type", "object", "super", "property",
            "staticmethod", "classmethod", "enumerate", "zip", "map", "filter",
            "sorted", "reversed", "sum", "min", "max", "abs", "all", "any",
            "ascii", "bin", "callable", "chr", "compile", "delattr", "dir",
            "divmod", "eval", "exec", "format", "getattr", "globals", "hasattr",
            "hash", "help", "hex", "id", "input", "isinstance", "issubclass",
            "iter", "locals", "next", "oct", "open", "ord", "pow", "repr",
            "round", "setattr", "slice", "vars", "bytes", "bytearray",
            "memoryview", "complex", "Exception", "BaseException", "ValueError",
            "TypeError", "KeyError", "IndexError", "AttributeError",
            "RuntimeError", "NotImplementedError", "StopIteration",
            "OSError", "IOError", "ImportError", "LookupError", "ArithmeticError",
            "ZeroDivisionError", "FileNotFoundError", "PermissionError",
            "AssertionError", "NotImplemented", "Ellipsis", "__name__",
            "__file__", "__doc__",
        }
    ),  # fmt: skip
    receivers=frozenset({"self", "cls"}),
)

# =========================================================================
# Rust
# =========================================================================

RUST_PACK = LanguagePack(
    name="rust",
    family="rust",
    grammar_name="rust",
    grammar_package="tree-sitter-rust",
    grammar_module="tree_sitter_rust",
    min_version="0.23.0",
    extensions=frozenset({"rs"}),
    node_types=NodeTypes(
        scopes={
            "struct_item": "class",
            "union_item": "class",
            "trait_item": "interface",
            "impl_item": "impl",
            "function_item": "function",
            "enum_item": "enum",
            "type_item": "type_alias",
            "mod_item": "namespace",
            "const_item": "variable",
            "static_item": "variable",
        },
        identifiers=frozenset({"identifier"}),
        type_identifiers=frozenset({"type_identifier"}),
        member_access={
            "field_expression": ("value", "field"),
            "scoped_identifier": ("path", "name"),
            "scoped_type_identifier": ("path", "name"),
        },
        decorators=frozenset({"attribute_item"}),
        imports=frozenset({"use_declaration", "extern_crate_declaration"}),
        comments=frozenset({"line_comment", "block_comment"}),
        skip_references=frozenset(
            {"string_literal", "raw_string_literal", "char_literal", "lifetime", "attribute_item"}
        ),
        definition_fields={
            "function_item": ("name",),
            "function_signature_item": ("name",),
            "struct_item": ("name",),
            "union_item": ("name",),
            "enum_item": ("name",),
            "trait_item": ("name",),
            "type_item": ("name",),
            "mod_item": ("name",),
            "const_item": ("name",),
            "static_item": ("name",),
            "let_declaration": ("pattern",),
            "parameter": ("pattern",),
            "for_expression": ("pattern",),
            "match_arm": ("pattern",),
            "enum_variant": ("name",),
            "field_declaration": ("name",),
            "constrained_type_parameter": ("left",),
            "macro_definition": ("name",),
            "let_condition": ("pattern",),
        },
        definition_containers=frozenset({"closure_parameters", "type_parameters"}),
        pattern_types=frozenset(
            {
                "tuple_pattern",
                "tuple_struct_pattern",
                "struct_pattern",
                "field_pattern",
                "ref_pattern",
                "mut_pattern",
                "reference_pattern",
                "slice_pattern",
                "captured_pattern",
                "or_pattern",
                "match_pattern",
            }
        ),
        variable_declarators={"let_declaration": ("pattern", "type")},
        branches=frozenset(
            {
                "if_expression",
                "match_arm",
                "while_expression",
                "loop_expression",
                "for_expression",
                "try_expression",
            }
        ),
    ),
    stop_words=frozenset(
        {
            "fn", "let", "mut", "const", "static", "struct", "enum", "trait", "impl",
            "type", "mod", "use", "pub", "crate", "self", "super", "where", "if",
            "else", "match", "loop", "while", "for", "in", "break", "continue",
            "return", "async", "await", "move", "ref", "dyn", "unsafe", "extern",
            "as", "true", "false", "Some", "None", "Ok", "Err",
        }
    ),  # fmt: skip
    builtins=frozenset(
        {
            "Self", "Option", "Result", "Vec", "String", "Box", "Rc", "Arc",
            "HashMap", "HashSet", "BTreeMap", "BTreeSet", "VecDeque", "Cell",
            "RefCell", "Mutex", "RwLock", "Cow", "Clone", "Copy", "Debug",
            "Default", "Display", "Eq", "Hash", "Ord", "PartialEq", "PartialOrd",
            "Send", "Sync", "Sized", "Iterator", "IntoIterator", "FromIterator",
            "Extend", "From", "Into", "TryFrom", "TryInto", "AsRef", "AsMut",
            "Drop", "Deref", "DerefMut", "Fn", "FnMut", "FnOnce", "println",
            "print", "eprintln", "eprint", "format", "panic", "assert",
            "assert_eq", "assert_ne", "vec", "dbg", "todo", "unimplemented",
            "unreachable", "write", "writeln", "bool", "char", "str", "i8",
            "i16", "i32", "i64", "i128", "isize", "u8", "u16", "u32", "u64",
            "u128", "usize", "f32", "f64", "std", "core", "alloc",
        }
    ),  # fmt: skip
    receivers=frozenset({"self", "Self"}),
)

# =========================================================================
# Go
# =========================================================================

GO_PACK = LanguagePack(
    name="go",
    family="go",
    grammar_name="go",
    grammar_package="tree-sitter-go",
    grammar_module="tree_sitter_go",
    min_version="0.23.0",
    extensions=frozenset({"go"}),
    node_types=NodeTypes(
        scopes={
            "function_declaration": "function",
            "method_declaration": "method",
            "type_declaration": "type_declaration",
            "const_declaration": "variable",
            "var_declaration": "variable",
        },
        identifiers=frozenset({"identifier"}),
        type_identifiers=frozenset({"type_identifier"}),
        member_access={
            "selector_expression": ("operand", "field"),
            "qualified_type": ("package", "name"),
        },
        imports=frozenset({"import_declaration"}),
        skip_references=frozenset(
            {"interpreted_string_literal", "raw_string_literal", "rune_literal", "package_clause"}
        ),
        definition_fields={
            "function_declaration": ("name",),
            "method_declaration": ("name",),
            "type_spec": ("name",),
            "type_alias": ("name",),
            "var_spec": ("name",),
            "const_spec": ("name",),
            "parameter_declaration": ("name",),
            "variadic_parameter_declaration": ("name",),
            "short_var_declaration": ("left",),
            "range_clause": ("left",),
            "field_declaration": ("name",),
            "labeled_statement": ("label",),
            "type_parameter_declaration": ("name",),
        },
        definition_containers=frozenset({"identifier_list"}),
        pattern_types=frozenset({"expression_list"}),
        variable_declarators={
            "short_var_declaration": ("left", None),
            "var_spec": ("name", "type"),
            "const_spec": ("name", "type"),
        },
        branches=frozenset(
            {
                "if_statement",
                "for_statement",
                "expression_case",
                "type_case",
                "communication_case",
            }
        ),
    ),
    stop_words=frozenset(
        {
            "package", "import", "func", "var", "const", "type", "struct",
            "interface", "map", "chan", "range", "go", "select", "case",
            "default", "defer", "if", "else", "switch", "for", "break",
            "continue", "return", "goto", "fallthrough", "nil", "true", "false",
            "iota",
        }
    ),  # fmt: skip
    builtins=frozenset(
        {
            "append", "cap", "clear", "close", "complex", "copy", "delete", "imag",
            "len", "make", "max", "min", "new", "panic", "print", "println",
            "real", "recover", "bool", "byte", "complex64", "complex128",
            "error", "float32", "float64", "int", "int8", "int16", "int32",
            "int64", "rune", "string", "uint", "uint8", "uint16", "uint32",
            "uint64", "uintptr", "any", "comparable",
        }
    ),  # fmt: skip
)

# =========================================================================
# C / C++
# =========================================================================

_C_STOP_WORDS: frozenset[str] = frozenset(
    {
        "auto", "break", "case", "char", "const", "continue", "default", "do",
        "double", "else", "enum", "extern", "float", "for", "goto", "if",
        "inline", "int", "long", "register", "restrict", "return", "short",
        "signed", "sizeof", "static", "struct", "switch", "typedef", "union",
        "unsigned", "void", "volatile", "while", "_Bool", "_Complex",
        "_Imaginary",
    }
)  # fmt: skip

_C_BUILTINS: frozenset[str] = frozenset(
    {
        "printf", "scanf", "sprintf", "snprintf", "puts", "malloc", "free",
        "calloc", "realloc", "strlen", "strcpy", "strncpy", "strcat", "strcmp",
        "strncmp", "memcpy", "memset", "memmove", "fopen", "fclose", "fread",
        "fwrite", "fprintf", "fscanf", "exit", "abort", "atoi", "atof", "rand",
        "srand", "assert", "NULL", "EOF", "stdin", "stdout", "stderr", "size_t",
        "ptrdiff_t", "intptr_t", "uintptr_t", "int8_t", "int16_t", "int32_t",
        "int64_t", "uint8_t", "uint16_t", "uint32_t", "uint64_t", "bool",
        "true", "false", "errno",
    }
)  # fmt: skip

_C_DECLARATOR_WRAPPERS: frozenset[str] = frozenset(
    {
        "pointer_declarator",
        "array_declarator",
        "parenthesized_declarator",
        "function_declarator",
        "reference_declarator",
        "init_declarator",
    }
)

_C_DEFINITION_FIELDS: dict[str, tuple[str, ...]] = {
    "init_declarator": ("declarator",),
    "pointer_declarator": ("declarator",),
    "array_declarator": ("declarator",),
    "function_declarator": ("declarator",),
    "function_definition": ("declarator",),
    "declaration": ("declarator",),
    "parameter_declaration": ("declarator",),
    "optional_parameter_declaration": ("declarator",),
    "field_declaration": ("declarator",),
    "type_definition": ("declarator",),
    "struct_specifier": ("name",),
    "union_specifier": ("name",),
    "enum_specifier": ("name",),
    "class_specifier": ("name",),
    "enumerator": ("name",),
    "preproc_def": ("name",),
    "preproc_function_def": ("name",),
    "labeled_statement": ("label",),
    "namespace_definition": ("name",),
    "alias_declaration": ("name",),
    "for_range_loop": ("declarator",),
}

_C_BRANCHES: frozenset[str] = frozenset(
    {
        "if_statement",
        "for_statement",
        "while_statement",
        "do_statement",
        "case_statement",
        "conditional_expression",
    }
)

C_PACK = LanguagePack(
    name="c",
    family="c",
    grammar_name="c",
    grammar_package="tree-sitter-c",
    grammar_module="tree_sitter_c",
    min_version="0.23.0",
    extensions=frozenset({"c", "h"}),
    node_types=NodeTypes(
        scopes={
            "function_definition": "function",
            "struct_specifier": "class",
            "union_specifier": "class",
            "enum_specifier": "enum",
            "type_definition": "type_alias",
            "declaration": "variable",
            "preproc_def": "macro",
            "preproc_function_def": "macro",
        },
        identifiers=frozenset({"identifier"}),
        type_identifiers=frozenset({"type_identifier"}),
        member_access={"field_expression": ("argument", "field")},
        imports=frozenset({"preproc_include"}),
        skip_references=frozenset({"string_literal", "char_literal", "system_lib_string"}),
        definition_fields=_C_DEFINITION_FIELDS,
        definition_containers=frozenset({"preproc_params"}),
        pattern_types=_C_DECLARATOR_WRAPPERS,
        variable_declarators={"declaration": ("declarator", "type")},
        branches=_C_BRANCHES,
    ),
    stop_words=_C_STOP_WORDS,
    builtins=_C_BUILTINS,
)

CPP_PACK = LanguagePack(
    name="cpp",
    family="cpp",
    grammar_name="cpp",
    grammar_package="tree-sitter-cpp",
    grammar_module="tree_sitter_cpp",
    min_version="0.23.0",
    extensions=frozenset({"cpp", "cc", "cxx", "hpp", "hxx", "hh"}),
    node_types=NodeTypes(
        scopes={
            "function_definition": "function",
            "class_specifier": "class",
            "struct_specifier": "class",
            "union_specifier": "class",
            "enum_specifier": "enum",
            "type_definition": "type_alias",
            "alias_declaration": "type_alias",
            "namespace_definition": "namespace",
            "template_declaration": "template",
            "declaration": "variable",
            "preproc_def": "macro",
            "preproc_function_def": "macro",
        },
        identifiers=frozenset({"identifier"}),
        type_identifiers=frozenset({"type_identifier"}),
        member_access={
            "field_expression": ("argument", "field"),
            "qualified_identifier": ("scope", "name"),
        },
        imports=frozenset({"preproc_include", "using_declaration"}),
        skip_references=frozenset(
            {"string_literal", "raw_string_literal", "char_literal", "system_lib_string"}
        ),
        definition_fields=_C_DEFINITION_FIELDS,
        definition_containers=frozenset({"preproc_params", "template_parameter_list"}),
        pattern_types=_C_DECLARATOR_WRAPPERS | frozenset({"type_parameter_declaration"}),
        variable_declarators={"declaration": ("declarator", "type")},
        branches=_C_BRANCHES | frozenset({"for_range_loop", "catch_clause"}),
    ),
    stop_words=_C_STOP_WORDS
    | frozenset(
        {
            "class", "namespace", "template", "typename", "public", "private",
            "protected", "virtual", "override", "final", "explicit", "constexpr",
            "consteval", "mutable", "friend", "operator", "new", "delete", "this",
            "nullptr", "try", "catch", "throw", "noexcept", "using", "decltype",
            "static_cast", "dynamic_cast", "const_cast", "reinterpret_cast",
            "wchar_t", "char16_t", "char32_t",
        }
    ),  # fmt: skip
    builtins=_C_BUILTINS
    | frozenset(
        {
            "std", "cout", "cin", "cerr", "endl", "string", "vector", "map", "set",
            "unordered_map", "unordered_set", "list", "deque", "array", "pair",
            "tuple", "optional", "variant", "any", "shared_ptr", "unique_ptr",
            "weak_ptr", "make_shared", "make_unique", "move", "forward",
        }
    ),  # fmt: skip
    receivers=frozenset({"this"}),
)

# =========================================================================
# C#
# =========================================================================

CSHARP_PACK = LanguagePack(
    name="csharp",
    family="csharp",
    grammar_name="c_sharp",
    grammar_package="tree-sitter-c-sharp",
    grammar_module="tree_sitter_c_sharp",
    min_version="0.23.0",
    extensions=frozenset({"cs"}),
    node_types=NodeTypes(
        scopes={
            "compilation_unit": "compilation_unit",
            "namespace_declaration": "namespace",
            "file_scoped_namespace_declaration": "namespace",
            "class_declaration": "class",
            "struct_declaration": "class",
            "record_declaration": "class",
            "record_struct_declaration": "class",
            "interface_declaration": "interface",
            "enum_declaration": "enum",
            "method_declaration": "method",
            "constructor_declaration": "method",
            "local_function_statement": "function",
            "delegate_declaration": "type_alias",
        },
        identifiers=frozenset({"identifier"}),
        type_contexts=frozenset(
            {
                "type_argument_list",
                "generic_name",
                "nullable_type",
                "array_type",
                "base_list",
                "type_parameter_constraint",
                "type_constraint",
                "parameter",
                "variable_declaration",
                "object_creation_expression",
                "property_declaration",
            }
        ),
        member_access={
            "member_access_expression": ("expression", "name"),
            "qualified_name": ("qualifier", "name"),
        },
        decorators=frozenset({"attribute_list"}),
        imports=frozenset({"using_directive"}),
        skip_references=frozenset(
            {"string_literal", "verbatim_string_literal", "character_literal", "attribute_list"}
        ),
        definition_fields={
            "class_declaration": ("name",),
            "struct_declaration": ("name",),
            "record_declaration": ("name",),
            "interface_declaration": ("name",),
            "enum_declaration": ("name",),
            "method_declaration": ("name",),
            "constructor_declaration": ("name",),
            "property_declaration": ("name",),
            "local_function_statement": ("name",),
            "variable_declarator": ("name",),
            "parameter": ("name",),
            "namespace_declaration": ("name",),
            "file_scoped_namespace_declaration": ("name",),
            "enum_member_declaration": ("name",),
            "type_parameter": ("name",),
            "foreach_statement": ("left",),
            "catch_declaration": ("name",),
            "delegate_declaration": ("name",),
        },
        definition_containers=frozenset({"type_parameter_list"}),
        variable_declarators={"variable_declarator": ("name", "type")},
        branches=frozenset(
            {
                "if_statement",
                "for_statement",
                "foreach_statement",
                "while_statement",
                "do_statement",
                "switch_section",
                "catch_clause",
                "conditional_expression",
            }
        ),
        logical_operators=frozenset({"&&", "||", "??"}),
    ),
    stop_words=_BASE_STOP_WORDS
    | frozenset(
        {
            "namespace", "using", "struct", "record", "interface", "enum", "public",
            "private", "protected", "internal", "static", "readonly", "virtual",
            "override", "abstract", "sealed", "partial", "base", "void", "var",
            "dynamic", "get", "set", "init", "value", "where", "when", "is", "as",
            "out", "ref", "else", "foreach", "do", "lock", "yield", "params",
            "sizeof", "nameof", "checked", "unchecked", "fixed", "unsafe",
            "stackalloc",
        }
    ),  # fmt: skip
    builtins=frozenset(
        {
            "object", "string", "bool", "byte", "sbyte", "char", "decimal", "double",
            "float", "int", "uint", "long", "ulong", "short", "ushort", "nint",
            "nuint", "String", "Object", "Boolean", "Int32", "Int64", "Double",
            "Decimal", "DateTime", "TimeSpan", "Guid", "Type", "Enum", "Array",
            "Exception", "ArgumentException", "ArgumentNullException",
            "InvalidOperationException", "NotImplementedException", "List",
            "Dictionary", "HashSet", "Queue", "Stack", "LinkedList", "IEnumerable",
            "ICollection", "IList", "IDictionary", "ISet", "IQueryable", "Task",
            "ValueTask", "CancellationToken", "IDisposable", "IAsyncDisposable",
            "IComparable", "IEquatable", "ICloneable", "Nullable", "Console",
            "Debug", "Trace", "Enumerable", "Queryable", "Math", "Func", "Action",
        }
    ),  # fmt: skip
    receivers=frozenset({"this", "base"}),
)


# =========================================================================
# Canonical registries
# =========================================================================

ALL_PACKS: tuple[LanguagePack, ...] = (
    TYPESCRIPT_PACK,
    TSX_PACK,
    JAVASCRIPT_PACK,
    PYTHON_PACK,
    RUST_PACK,
    GO_PACK,
    C_PACK,
    CPP_PACK,
    CSHARP_PACK,
)

# name -> Pack
PACKS: dict[str, LanguagePack] = {pack.name: pack for pack in ALL_PACKS}
PACKS["c_sharp"] = CSHARP_PACK

# Extension -> Pack
_EXT_TO_PACK: dict[str, LanguagePack] = {}
for _pack in ALL_PACKS:
    for _ext in _pack.extensions:
        _EXT_TO_PACK[_ext] = _pack


# =========================================================================
# Public API
# =========================================================================


def get_pack_for_ext(ext: str) -> LanguagePack | None:
    """Get a LanguagePack for a file extension (with or without leading dot)."""
    return _EXT_TO_PACK.get(ext.lower().lstrip("."))


def get_pack(name: str) -> LanguagePack | None:
    """Get a LanguagePack by language name."""
    return PACKS.get(name)
