"""Unit tests for the exception hierarchy."""

from pathlib import Path

from gitvault.exceptions import (
    CommandValidationError,
    ConfigError,
    ConfigLoadError,
    ConfigValidationError,
    ErrorKind,
    GitOperationError,
    GitVaultError,
    RepositoryNotFoundError,
)


class TestErrorKinds:
    def test_only_missing_store_is_repository_missing(self) -> None:
        assert RepositoryNotFoundError.kind is ErrorKind.REPOSITORY_MISSING
        for cls in (
            GitVaultError,
            GitOperationError,
            CommandValidationError,
            ConfigError,
            ConfigLoadError,
            ConfigValidationError,
        ):
            assert cls.kind is ErrorKind.OPERATION_FAILED

    def test_kind_values(self) -> None:
        assert ErrorKind.REPOSITORY_MISSING == "repository_missing"
        assert ErrorKind.OPERATION_FAILED == "operation_failed"


class TestGitVaultError:
    def test_cause_is_chained(self) -> None:
        cause = OSError("disk full")
        error = GitOperationError("I/O error: disk full", path=Path("/x"), cause=cause)

        assert error.cause is cause
        assert error.__cause__ is cause
        assert error.path == Path("/x")

    def test_no_cause(self) -> None:
        error = GitVaultError("plain")
        assert error.cause is None
        assert error.__cause__ is None


class TestCommandValidationError:
    def test_is_value_error_and_operation_error(self) -> None:
        error = CommandValidationError("bad", field="name")

        assert isinstance(error, ValueError)
        assert isinstance(error, GitOperationError)
        assert error.field == "name"
        assert error.cause is None


class TestConfigErrors:
    def test_load_error_location(self) -> None:
        error = ConfigLoadError("bad toml", path=Path("c.toml"), line=3, column=7)
        assert (error.path, error.line, error.column) == (Path("c.toml"), 3, 7)

    def test_validation_error_context(self) -> None:
        error = ConfigValidationError(
            "bad", key="logging.level", value="loud", expected="enum", source="env"
        )
        assert error.key == "logging.level"
        assert error.value == "loud"
        assert error.expected == "enum"
        assert error.source == "env"
