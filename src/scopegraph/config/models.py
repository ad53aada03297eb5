"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (SCOPEGRAPH__SECTION__KEY)
3. Repo YAML (.scopegraph/config.yaml)
4. Global YAML (~/.config/scopegraph/config.yaml)
5. Built-in defaults (this file)

Environment Variable Format:
    SCOPEGRAPH__<SECTION>__<KEY>=<VALUE>

Examples:
    SCOPEGRAPH__LOGGING__LEVEL=DEBUG
    SCOPEGRAPH__EXTRACTION__MAX_WORKERS=8
    SCOPEGRAPH__RESOLUTION__INCLUDE_INVERSE=false
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration.

    Env vars: Not directly configurable via env (use YAML for multi-output).
    """

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        SCOPEGRAPH__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="WARNING",
        description="Root log level. DEBUG logs every file parse.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class ExtractionConfig(BaseModel):
    """Scope extraction configuration.

    Env vars:
        SCOPEGRAPH__EXTRACTION__MAX_FILE_SIZE_KB: Skip files larger than this
        SCOPEGRAPH__EXTRACTION__MAX_WORKERS: Parallel parse+extract workers
        SCOPEGRAPH__EXTRACTION__INCLUDE_MODULE_SCOPES: Emit file_scope_NN scopes
    """

    max_file_size_kb: int = Field(
        default=1024,
        description="Skip files larger than this (KB). Generated bundles slow extraction.",
    )
    max_workers: int = Field(
        default=4,
        description="Parallel extraction workers. Extraction is independent per file.",
    )
    include_module_scopes: bool = Field(
        default=True,
        description="Group top-level code outside any declaration into module scopes.",
    )
    excluded_dirs: list[str] = Field(
        default_factory=lambda: [
            ".git",
            "node_modules",
            "target",
            "vendor",
            "dist",
            "build",
            "__pycache__",
            ".venv",
            "venv",
            "bin",
            "obj",
        ],
        description="Directory names skipped during project discovery.",
    )

    @field_validator("max_workers")
    @classmethod
    def validate_workers(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"max_workers must be >= 1, got {v}")
        return v

    @field_validator("max_file_size_kb")
    @classmethod
    def validate_size(cls, v: int) -> int:
        if v <= 0:
            raise ValueError(f"max_file_size_kb must be positive, got {v}")
        return v


class ResolutionConfig(BaseModel):
    """Relationship resolution configuration.

    Env vars:
        SCOPEGRAPH__RESOLUTION__INCLUDE_CONTAINS: Emit CONTAINS edges
        SCOPEGRAPH__RESOLUTION__INCLUDE_INVERSE: Mirror every edge
        SCOPEGRAPH__RESOLUTION__INCLUDE_DECORATORS: Emit DECORATED_BY edges
        SCOPEGRAPH__RESOLUTION__RESOLVE_CROSS_FILE: Follow imports across files
    """

    include_contains: bool = Field(
        default=True,
        description="Emit CONTAINS edges from enclosing scopes to nested scopes.",
    )
    include_inverse: bool = Field(
        default=True,
        description="Mirror every edge with swapped endpoints and the inverse type.",
    )
    include_decorators: bool = Field(
        default=True,
        description="Emit DECORATED_BY edges for decorators and attributes.",
    )
    resolve_cross_file: bool = Field(
        default=True,
        description="Emit edges for references that resolve to scopes in other files.",
    )


class ScopeGraphConfig(BaseModel):
    """Root configuration for scopegraph.

    All settings can be configured via:
    1. Environment variables: SCOPEGRAPH__SECTION__KEY
    2. YAML config files (repo or global)
    3. Direct kwargs to load_config()
    """

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    extraction: ExtractionConfig = Field(default_factory=ExtractionConfig)
    resolution: ResolutionConfig = Field(default_factory=ResolutionConfig)
