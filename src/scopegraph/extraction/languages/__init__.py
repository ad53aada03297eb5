"""Per-family construct builders, selected by ``LanguagePack.family``."""

from __future__ import annotations

from scopegraph.core.errors import LanguageError
from scopegraph.extraction.languages import c_family, csharp, go, python, rust, typescript
from scopegraph.extraction.walker import LanguageStrategy

STRATEGIES: dict[str, LanguageStrategy] = {
    "typescript": typescript.STRATEGY,
    "python": python.STRATEGY,
    "rust": rust.STRATEGY,
    "go": go.STRATEGY,
    "c": c_family.C_STRATEGY,
    "cpp": c_family.CPP_STRATEGY,
    "csharp": csharp.STRATEGY,
}


def get_strategy(family: str) -> LanguageStrategy:
    strategy = STRATEGIES.get(family)
    if strategy is None:
        raise LanguageError.unsupported_language(family)
    return strategy


__all__ = ["STRATEGIES", "get_strategy"]
