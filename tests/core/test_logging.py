"""Tests for structured logging."""

import json
import logging
from pathlib import Path

import pytest
import structlog

from scopegraph.config.models import LoggingConfig, LogOutputConfig
from scopegraph.core.logging import (
    ConsoleSuppressingFilter,
    clear_run_id,
    configure_logging,
    get_logger,
    get_run_id,
    set_run_id,
)
from scopegraph.core.progress import suppress_console_logs


class TestRunIdCorrelation:
    """Run ID context variable tests."""

    def setup_method(self) -> None:
        clear_run_id()

    def test_given_run_id_when_set_then_can_retrieve(self) -> None:
        """Run ID can be set and retrieved."""
        result = set_run_id("run-123")

        assert result == "run-123"
        assert get_run_id() == "run-123"

    def test_given_no_id_when_set_then_generates_id(self) -> None:
        """Set generates a short UUID-based ID when none provided."""
        rid = set_run_id()

        assert len(rid) == 12

    def test_given_set_id_when_clear_then_removes_id(self) -> None:
        set_run_id("to-clear")

        clear_run_id()

        assert get_run_id() is None


class TestLoggingConfiguration:
    """Logging configuration tests."""

    def setup_method(self) -> None:
        """Reset structlog and stdlib logging before each test."""
        structlog.reset_defaults()
        logging.getLogger().handlers.clear()
        clear_run_id()

    def test_given_json_format_when_log_then_valid_json_output(self, capsys: pytest.CaptureFixture[str]) -> None:
        """JSON format produces valid JSON with required fields."""
        # Given
        configure_logging(json_format=True, level="INFO")
        logger = get_logger("test")

        # When
        logger.info("test message", key="value")

        # Then
        captured = capsys.readouterr()
        lines = [line for line in captured.err.strip().split("\n") if line]
        data = json.loads(lines[-1])
        assert data["event"] == "test message"
        assert data["key"] == "value"
        assert data["logger"] == "test"
        assert data["level"] == "info"
        assert "timestamp" in data

    def test_given_logger_created_before_configure_then_config_applies(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Module-level loggers pick up configuration done after import."""
        # Given
        early = get_logger("scopegraph.early")
        log_file = tmp_path / "early.log"

        # When
        configure_logging(config=LoggingConfig(level="INFO", outputs=[LogOutputConfig(format="json", destination=str(log_file))]))
        early.debug("filtered_out")
        early.info("kept", files=2)

        # Then
        lines = log_file.read_text().strip().splitlines()
        assert [json.loads(line)["event"] for line in lines] == ["kept"]
        assert json.loads(lines[0])["logger"] == "scopegraph.early"
        assert capsys.readouterr().out == ""

    def test_given_run_id_when_log_then_id_attached(self, tmp_path: Path) -> None:
        """Events logged during a run carry its correlation ID."""
        log_file = tmp_path / "run.log"
        configure_logging(config=LoggingConfig(level="INFO", outputs=[LogOutputConfig(format="json", destination=str(log_file))]))
        set_run_id("abc123")

        get_logger().info("files_discovered", count=3)

        data = json.loads(log_file.read_text().strip().splitlines()[-1])
        assert data["run_id"] == "abc123"

    def test_given_config_object_when_configure_then_takes_precedence(self, tmp_path: Path) -> None:
        """LoggingConfig object takes precedence over simple params."""
        log_file = tmp_path / "test.log"
        config = LoggingConfig(level="DEBUG", outputs=[LogOutputConfig(format="json", destination=str(log_file))])

        configure_logging(config=config, json_format=False, level="ERROR")
        get_logger().debug("debug msg")

        assert "debug msg" in log_file.read_text()

    def test_given_multi_output_config_when_configure_then_logs_to_all(self, tmp_path: Path) -> None:
        """Multiple outputs receive logs according to their levels."""
        debug_file = tmp_path / "debug.log"
        info_file = tmp_path / "info.log"
        config = LoggingConfig(
            level="DEBUG",
            outputs=[
                LogOutputConfig(format="json", destination=str(info_file), level="INFO"),
                LogOutputConfig(format="json", destination=str(debug_file)),
            ],
        )

        configure_logging(config=config)
        logger = get_logger()
        logger.debug("debug only")
        logger.info("info msg")

        info_content = info_file.read_text()
        assert "info msg" in info_content
        assert "debug only" not in info_content
        debug_content = debug_file.read_text()
        assert "debug only" in debug_content
        assert "info msg" in debug_content

    def test_given_console_output_when_suppressed_then_nothing_written(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Console handlers drop records while a spinner owns the terminal."""
        configure_logging(json_format=True, level="INFO")
        logger = get_logger()

        with suppress_console_logs():
            logger.warning("hidden")
        logger.warning("shown")

        err = capsys.readouterr().err
        assert "hidden" not in err
        assert "shown" in err

    def test_given_file_output_when_configured_then_no_console_filter(self, tmp_path: Path) -> None:
        configure_logging(config=LoggingConfig(outputs=[LogOutputConfig(destination=str(tmp_path / "x.log"))]))

        (handler,) = logging.getLogger().handlers
        assert not any(isinstance(f, ConsoleSuppressingFilter) for f in handler.filters)


class TestLogOutputConfig:
    def test_relative_file_destination_rejected(self) -> None:
        with pytest.raises(ValueError):
            LogOutputConfig(destination="relative/path.log")
