"""Core module exports."""

from scopegraph.core.errors import (
    ConfigError,
    ErrorCode,
    InternalError,
    LanguageError,
    ScopeGraphError,
    SourceFileError,
)
from scopegraph.core.logging import (
    clear_run_id,
    configure_logging,
    get_logger,
    get_run_id,
    set_run_id,
)

__all__ = [
    # Errors
    "ConfigError",
    "ErrorCode",
    "InternalError",
    "LanguageError",
    "ScopeGraphError",
    "SourceFileError",
    # Logging
    "clear_run_id",
    "configure_logging",
    "get_logger",
    "get_run_id",
    "set_run_id",
]
