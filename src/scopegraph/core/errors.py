"""scopegraph error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 3xxx: Language / source file
- 9xxx: Internal

Malformed source code never raises; it is reported through ``ast_issues``.
Only the conditions below propagate to callers.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002
    CONFIG_MISSING_REQUIRED = 2003
    CONFIG_FILE_NOT_FOUND = 2004

    # Language / source (3xxx)
    UNSUPPORTED_LANGUAGE = 3001
    GRAMMAR_UNAVAILABLE = 3002
    SOURCE_NOT_FOUND = 3003
    SOURCE_UNREADABLE = 3004

    # Internal (9xxx)
    INTERNAL_ERROR = 9001


@dataclass(frozen=True, slots=True)
class ScopeGraphError(Exception):
    """Base error with structured context."""

    code: ErrorCode
    message: str
    retryable: bool = False
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'UNSUPPORTED_LANGUAGE')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output."""
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "retryable": self.retryable,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(ScopeGraphError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )

    @classmethod
    def file_not_found(cls, path: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_FILE_NOT_FOUND,
            message=f"Config file not found: {path}",
            details={"path": path},
        )


class LanguageError(ScopeGraphError):
    """Language selection errors (no extractor or grammar for a language)."""

    @classmethod
    def unsupported_language(cls, language: str, path: str | None = None) -> "LanguageError":
        details: dict[str, Any] = {"language": language}
        if path is not None:
            details["path"] = path
        return cls(
            code=ErrorCode.UNSUPPORTED_LANGUAGE,
            message=f"No scope extractor registered for '{language}'",
            details=details,
        )

    @classmethod
    def grammar_unavailable(cls, language: str, module: str, reason: str) -> "LanguageError":
        return cls(
            code=ErrorCode.GRAMMAR_UNAVAILABLE,
            message=f"Grammar for '{language}' could not be loaded from {module}: {reason}",
            details={"language": language, "module": module, "reason": reason},
        )


class SourceFileError(ScopeGraphError):
    """Missing or unreadable source files."""

    @classmethod
    def not_found(cls, path: str) -> "SourceFileError":
        return cls(
            code=ErrorCode.SOURCE_NOT_FOUND,
            message=f"Source file not found: {path}",
            details={"path": path},
        )

    @classmethod
    def unreadable(cls, path: str, reason: str) -> "SourceFileError":
        return cls(
            code=ErrorCode.SOURCE_UNREADABLE,
            message=f"Source file could not be read: {path}: {reason}",
            retryable=True,
            details={"path": path, "reason": reason},
        )


class InternalError(ScopeGraphError):
    """Internal/unexpected errors."""

    @classmethod
    def unexpected(cls, reason: str, **details: Any) -> "InternalError":
        return cls(
            code=ErrorCode.INTERNAL_ERROR,
            message=f"Internal error: {reason}",
            details=details,
        )
