"""Parser registry: grammar loading and parsing by file extension.

Grammars are loaded lazily from their ``tree_sitter_*`` wheels and memoized
per registry.  Parsing creates a fresh ``tree_sitter.Parser`` per call so a
single registry can be shared by extraction worker threads.

Usage::

    registry = ParserRegistry()
    language = registry.language_for_path("src/models.ts")
    result = registry.parse(language, source_bytes)
    result.root_node.type  # "program"
"""

from __future__ import annotations

import importlib
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import tree_sitter

from scopegraph.core.errors import LanguageError
from scopegraph.core.logging import get_logger
from scopegraph.parsing.packs import ALL_PACKS, LanguagePack

log = get_logger(__name__)


@dataclass
class ParseResult:
    """Result of parsing a file."""

    tree: Any  # Tree-sitter Tree (not serializable)
    language: str
    pack: LanguagePack
    error_count: int
    total_nodes: int
    root_node: Any  # Tree-sitter Node


@dataclass
class ParserRegistry:
    """Maps languages and file extensions to loaded tree-sitter grammars."""

    _packs: dict[str, LanguagePack] = field(default_factory=dict, repr=False)
    _extensions: dict[str, str] = field(default_factory=dict, repr=False)
    _languages: dict[str, Any] = field(default_factory=dict, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def __post_init__(self) -> None:
        for pack in ALL_PACKS:
            self.register(pack)

    def register(self, pack: LanguagePack) -> None:
        """Register (or replace) a language pack and its extensions."""
        with self._lock:
            self._packs[pack.name] = pack
            self._languages.pop(pack.name, None)
            for ext in pack.extensions:
                self._extensions[ext] = pack.name

    @property
    def languages(self) -> list[str]:
        return sorted(self._packs)

    def get_pack(self, name: str) -> LanguagePack:
        pack = self._packs.get(name)
        if pack is None:
            raise LanguageError.unsupported_language(name)
        return pack

    def language_for_path(self, path: Path | str) -> str:
        """Language tag for a path based on its extension.

        Raises:
            LanguageError: No registered pack handles the extension.
        """
        ext = Path(path).suffix.lower().lstrip(".")
        name = self._extensions.get(ext)
        if name is None:
            raise LanguageError.unsupported_language(ext or Path(path).name, path=str(path))
        return name

    def is_supported(self, path: Path | str) -> bool:
        return Path(path).suffix.lower().lstrip(".") in self._extensions

    def language(self, name: str) -> Any:
        """Get (loading on first use) the tree-sitter Language for ``name``."""
        with self._lock:
            cached = self._languages.get(name)
            if cached is not None:
                return cached
            pack = self._packs.get(name)
            if pack is None:
                raise LanguageError.unsupported_language(name)
            lang = self._load(pack)
            self._languages[name] = lang
            return lang

    @staticmethod
    def _load(pack: LanguagePack) -> Any:
        try:
            mod = importlib.import_module(pack.grammar_module)
            lang_fn = getattr(mod, pack.language_func or "language")
            return tree_sitter.Language(lang_fn())
        except (ImportError, AttributeError) as err:
            raise LanguageError.grammar_unavailable(pack.name, pack.grammar_module, str(err)) from err

    def initialize_all(self) -> list[str]:
        """Eagerly load every registered grammar.

        Returns the names that loaded.  Missing grammar packages are logged
        and skipped, never raised.
        """
        loaded: list[str] = []
        for name in self.languages:
            try:
                self.language(name)
            except LanguageError as e:
                log.warning("grammar_unavailable", language=name, reason=e.message)
                continue
            loaded.append(name)
        return loaded

    def parse(self, language: str, source: bytes) -> ParseResult:
        """Parse ``source`` with the grammar registered as ``language``.

        Raises:
            LanguageError: Unknown language or grammar not installed.
        """
        pack = self.get_pack(language)
        parser = tree_sitter.Parser(self.language(language))
        tree = parser.parse(source)

        error_count = 0
        total_nodes = 0
        stack = [tree.root_node]
        while stack:
            node = stack.pop()
            total_nodes += 1
            if node.type == "ERROR" or node.is_missing:
                error_count += 1
            stack.extend(node.children)

        log.debug("source_parsed", language=language, errors=error_count, nodes=total_nodes)
        return ParseResult(
            tree=tree,
            language=language,
            pack=pack,
            error_count=error_count,
            total_nodes=total_nodes,
            root_node=tree.root_node,
        )

    def dispose(self) -> None:
        """Drop all loaded grammars.  Later calls reload on demand."""
        with self._lock:
            self._languages.clear()


def default_registry() -> ParserRegistry:
    """Build a registry holding every built-in language pack."""
    return ParserRegistry()
