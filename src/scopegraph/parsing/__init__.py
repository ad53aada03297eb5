"""Tree-sitter grammar configuration and parsing."""

from scopegraph.parsing.packs import PACKS, LanguagePack, NodeTypes, get_pack, get_pack_for_ext
from scopegraph.parsing.registry import ParseResult, ParserRegistry, default_registry

__all__ = [
    "PACKS",
    "LanguagePack",
    "NodeTypes",
    "ParseResult",
    "ParserRegistry",
    "default_registry",
    "get_pack",
    "get_pack_for_ext",
]
