"""Tests for error types and codes."""

import pytest

from scopegraph.core.errors import (
    ConfigError,
    ErrorCode,
    InternalError,
    LanguageError,
    ScopeGraphError,
    SourceFileError,
)


class TestErrorCode:
    """Error code value tests."""

    @pytest.mark.parametrize(
        ("code", "expected_range"),
        [
            (ErrorCode.CONFIG_PARSE_ERROR, 2000),
            (ErrorCode.CONFIG_INVALID_VALUE, 2000),
            (ErrorCode.UNSUPPORTED_LANGUAGE, 3000),
            (ErrorCode.GRAMMAR_UNAVAILABLE, 3000),
            (ErrorCode.SOURCE_NOT_FOUND, 3000),
            (ErrorCode.SOURCE_UNREADABLE, 3000),
            (ErrorCode.INTERNAL_ERROR, 9000),
        ],
    )
    def test_given_error_code_when_checked_then_in_correct_range(self, code: ErrorCode, expected_range: int) -> None:
        """Error codes fall within their designated numeric range."""
        assert expected_range <= code.value < expected_range + 1000


class TestScopeGraphError:
    """Base error behavior tests."""

    def test_given_error_when_to_dict_then_serializes_all_fields(self) -> None:
        """Error serializes to dict with all required fields."""
        # Given
        error = ScopeGraphError(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message="Test message",
            retryable=True,
            details={"key": "value"},
        )

        # When
        result = error.to_dict()

        # Then
        assert result == {
            "code": 2001,
            "error": "CONFIG_PARSE_ERROR",
            "message": "Test message",
            "retryable": True,
            "details": {"key": "value"},
        }

    def test_given_error_when_str_then_human_readable(self) -> None:
        """Error string representation is human readable."""
        error = ScopeGraphError(code=ErrorCode.INTERNAL_ERROR, message="Something broke")
        assert str(error) == "[9001] INTERNAL_ERROR: Something broke"

    def test_given_error_when_raised_then_catchable_as_exception(self) -> None:
        """Errors are real exceptions."""
        with pytest.raises(ScopeGraphError):
            raise SourceFileError.not_found("a.ts")


class TestConfigError:
    """ConfigError factory method tests."""

    def test_parse_error(self) -> None:
        error = ConfigError.parse_error("/x/config.yaml", "bad indent")
        assert error.code == ErrorCode.CONFIG_PARSE_ERROR
        assert error.details == {"path": "/x/config.yaml", "reason": "bad indent"}
        assert "/x/config.yaml" in error.message

    def test_invalid_value(self) -> None:
        error = ConfigError.invalid_value("extraction.max_workers", 0, "must be >= 1")
        assert error.code == ErrorCode.CONFIG_INVALID_VALUE
        assert error.details["field"] == "extraction.max_workers"
        assert error.details["value"] == "0"


class TestLanguageError:
    """LanguageError factory method tests."""

    def test_unsupported_language_records_path(self) -> None:
        error = LanguageError.unsupported_language("cobol", path="main.cbl")
        assert error.code == ErrorCode.UNSUPPORTED_LANGUAGE
        assert error.details == {"language": "cobol", "path": "main.cbl"}
        assert error.error_name == "UNSUPPORTED_LANGUAGE"

    def test_unsupported_language_without_path(self) -> None:
        error = LanguageError.unsupported_language("cobol")
        assert "path" not in error.details

    def test_grammar_unavailable(self) -> None:
        error = LanguageError.grammar_unavailable("rust", "tree_sitter_rust", "No module named 'tree_sitter_rust'")
        assert error.code == ErrorCode.GRAMMAR_UNAVAILABLE
        assert error.details["module"] == "tree_sitter_rust"


class TestSourceFileError:
    """SourceFileError factory method tests."""

    def test_not_found_is_not_retryable(self) -> None:
        error = SourceFileError.not_found("src/missing.py")
        assert error.code == ErrorCode.SOURCE_NOT_FOUND
        assert error.retryable is False

    def test_unreadable_is_retryable(self) -> None:
        error = SourceFileError.unreadable("src/locked.py", "Permission denied")
        assert error.code == ErrorCode.SOURCE_UNREADABLE
        assert error.retryable is True
        assert error.details["reason"] == "Permission denied"


class TestInternalError:
    def test_unexpected_carries_details(self) -> None:
        error = InternalError.unexpected("walk failed", file="a.go")
        assert error.code == ErrorCode.INTERNAL_ERROR
        assert error.details == {"file": "a.go"}
