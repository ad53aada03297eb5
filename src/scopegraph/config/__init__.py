"""Config module exports."""

from scopegraph.config.loader import load_config
from scopegraph.config.models import (
    ExtractionConfig,
    LoggingConfig,
    ResolutionConfig,
    ScopeGraphConfig,
)

__all__ = [
    "load_config",
    "ExtractionConfig",
    "LoggingConfig",
    "ResolutionConfig",
    "ScopeGraphConfig",
]
