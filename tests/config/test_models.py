"""Tests for config/models.py module.

Covers:
- LogOutputConfig model
- LoggingConfig model
- ExtractionConfig model
- ResolutionConfig model
- ScopeGraphConfig root model
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from scopegraph.config.models import (
    ExtractionConfig,
    LoggingConfig,
    LogOutputConfig,
    ResolutionConfig,
    ScopeGraphConfig,
)


class TestLogOutputConfig:
    """Tests for LogOutputConfig model."""

    def test_defaults(self) -> None:
        config = LogOutputConfig()
        assert config.format == "console"
        assert config.destination == "stderr"
        assert config.level is None

    def test_absolute_path_destination(self) -> None:
        config = LogOutputConfig(destination="/var/log/scopegraph.log")
        assert config.destination == "/var/log/scopegraph.log"

    def test_relative_path_fails(self) -> None:
        """Relative path is rejected."""
        with pytest.raises(ValidationError):
            LogOutputConfig(destination="logs/out.log")

    def test_invalid_format(self) -> None:
        with pytest.raises(ValidationError):
            LogOutputConfig(format="xml")  # type: ignore[arg-type]


class TestLoggingConfig:
    def test_defaults(self) -> None:
        config = LoggingConfig()
        assert config.level == "WARNING"
        assert len(config.outputs) == 1
        assert config.outputs[0].destination == "stderr"

    def test_invalid_level(self) -> None:
        with pytest.raises(ValidationError):
            LoggingConfig(level="VERBOSE")  # type: ignore[arg-type]


class TestExtractionConfig:
    """Tests for ExtractionConfig model."""

    def test_defaults(self) -> None:
        config = ExtractionConfig()
        assert config.max_file_size_kb == 1024
        assert config.max_workers == 4
        assert config.include_module_scopes is True
        assert "node_modules" in config.excluded_dirs
        assert ".git" in config.excluded_dirs

    @pytest.mark.parametrize("workers", [0, -2])
    def test_workers_must_be_positive(self, workers: int) -> None:
        with pytest.raises(ValidationError, match="max_workers"):
            ExtractionConfig(max_workers=workers)

    def test_size_limit_must_be_positive(self) -> None:
        with pytest.raises(ValidationError, match="max_file_size_kb"):
            ExtractionConfig(max_file_size_kb=0)


class TestResolutionConfig:
    def test_all_enabled_by_default(self) -> None:
        config = ResolutionConfig()
        assert config.include_contains
        assert config.include_inverse
        assert config.include_decorators
        assert config.resolve_cross_file


class TestScopeGraphConfig:
    """Tests for the root model."""

    def test_sections(self) -> None:
        config = ScopeGraphConfig()
        assert isinstance(config.logging, LoggingConfig)
        assert isinstance(config.extraction, ExtractionConfig)
        assert isinstance(config.resolution, ResolutionConfig)

    def test_nested_dict_input(self) -> None:
        config = ScopeGraphConfig.model_validate(
            {"extraction": {"max_workers": 2}, "resolution": {"include_inverse": False}}
        )
        assert config.extraction.max_workers == 2
        assert config.resolution.include_inverse is False
        assert config.resolution.include_contains is True
