"""Tests for core/progress.py module.

Covers:
- _is_tty() function
- status() function
- spinner() context manager
- pluralize() function
- suppress_console_logs() context manager
- is_console_suppressed() function
"""

from __future__ import annotations

import sys
from io import StringIO

import pytest

from scopegraph.core.progress import (
    _STYLES,
    _is_tty,
    get_console,
    is_console_suppressed,
    pluralize,
    spinner,
    status,
    suppress_console_logs,
)


class TestIsTty:
    """Tests for _is_tty function."""

    def test_false_for_stringio(self) -> None:
        """Returns False for non-TTY stderr."""
        original = sys.stderr
        try:
            sys.stderr = StringIO()
            assert _is_tty() is False
        finally:
            sys.stderr = original


class TestStatus:
    """Tests for status function."""

    def test_styles_cover_expected_keys(self) -> None:
        assert set(_STYLES) == {"success", "error", "warning", "info", "none"}

    def test_writes_message_to_stderr(self, capsys: pytest.CaptureFixture[str]) -> None:
        status("Analysis complete", style="success")

        err = capsys.readouterr().err
        assert "Analysis complete" in err
        assert "✓" in err

    def test_indent(self, capsys: pytest.CaptureFixture[str]) -> None:
        status("nested", style="none", indent=4)

        assert capsys.readouterr().err.startswith("    nested")


class TestPluralize:
    """Tests for pluralize function."""

    @pytest.mark.parametrize(
        ("count", "expected"),
        [(0, "0 files"), (1, "1 file"), (2, "2 files")],
    )
    def test_regular_plural(self, count: int, expected: str) -> None:
        assert pluralize(count, "file") == expected

    def test_explicit_plural(self) -> None:
        assert pluralize(3, "entry", "entries") == "3 entries"


class TestSuppressConsoleLogs:
    """Tests for suppress_console_logs and is_console_suppressed."""

    def test_flag_set_only_inside_block(self) -> None:
        assert is_console_suppressed() is False
        with suppress_console_logs():
            assert is_console_suppressed() is True
        assert is_console_suppressed() is False

    def test_flag_cleared_after_exception(self) -> None:
        with pytest.raises(RuntimeError), suppress_console_logs():
            raise RuntimeError("boom")
        assert is_console_suppressed() is False


class TestSpinner:
    """Tests for spinner context manager."""

    def test_non_tty_prints_plain_line(self, capsys: pytest.CaptureFixture[str]) -> None:
        with spinner("Analyzing"):
            pass

        assert "Analyzing..." in capsys.readouterr().err

    def test_get_console_writes_to_stderr(self) -> None:
        assert get_console().stderr is True
