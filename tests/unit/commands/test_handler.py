"""Unit tests for GitCommandHandler dispatch, using a mocked resolver."""

import io
from pathlib import Path
from unittest.mock import MagicMock

import pytest
from dulwich.errors import NotGitRepository
from pytest_mock import MockerFixture

from gitvault.commands import (
    GitCommandHandler,
    add_files,
    create_tag,
    list_logs,
    list_tags,
    read_file,
)
from gitvault.config import Config
from gitvault.exceptions import (
    CommandValidationError,
    ErrorKind,
    GitOperationError,
    RepositoryNotFoundError,
)
from gitvault.repository import RepositoryResolver, TagInfo

REPO = Path("/data/store")


@pytest.fixture
def repo(mocker: MockerFixture) -> MagicMock:
    """Create a mock repository handle usable as a context manager."""
    handle = mocker.MagicMock(name="RepositoryHandle")
    handle.__enter__.return_value = handle
    handle.__exit__.return_value = None
    handle.created = False
    return handle


@pytest.fixture
def resolver(mocker: MockerFixture, repo: MagicMock) -> MagicMock:
    """Create a mock resolver returning the mock handle."""
    mock = mocker.MagicMock(spec=RepositoryResolver)
    mock.resolve.return_value = repo
    return mock


@pytest.fixture
def logger(mocker: MockerFixture) -> MagicMock:
    """Create a mock logger whose bind returns itself."""
    mock = mocker.MagicMock(name="logger")
    mock.bind.return_value = mock
    return mock


@pytest.fixture
def mock_handler(resolver: MagicMock, logger: MagicMock) -> GitCommandHandler:
    """Create a handler wired to the mocks."""
    config = Config.from_dict({"author": {"name": "Jane", "email": "jane@x"}})
    return GitCommandHandler(config, resolver=resolver, logger=logger)


class TestResolution:
    @pytest.mark.parametrize(
        ("command", "create"),
        [
            (add_files(REPO, "msg", {"a.txt": io.BytesIO(b"a")}), True),
            (create_tag(REPO, "1.0", "msg"), True),
            (read_file(REPO, "a.txt"), False),
            (list_logs(REPO), False),
            (list_tags(REPO), False),
        ],
    )
    def test_passes_creation_policy(
        self,
        mock_handler: GitCommandHandler,
        resolver: MagicMock,
        command: object,
        create: bool,
    ) -> None:
        _ = mock_handler.execute(command)  # pyright: ignore[reportArgumentType]

        resolver.resolve.assert_called_once_with(REPO, create_if_absent=create)

    def test_closes_handle_on_success(
        self, mock_handler: GitCommandHandler, repo: MagicMock
    ) -> None:
        _ = mock_handler.list_tags(REPO)
        repo.__exit__.assert_called_once()

    def test_closes_handle_on_failure(
        self, mock_handler: GitCommandHandler, repo: MagicMock
    ) -> None:
        repo.list_tags.side_effect = OSError("disk")

        with pytest.raises(GitOperationError):
            _ = mock_handler.list_tags(REPO)
        repo.__exit__.assert_called_once()


class TestDispatch:
    def test_add_files_reads_streams_and_uses_identity(
        self, mock_handler: GitCommandHandler, repo: MagicMock
    ) -> None:
        repo.commit_files.return_value = "c0ffee"

        result = mock_handler.add_files(
            REPO, "msg", {"a.txt": io.BytesIO(b"A"), "b/c.txt": io.BytesIO(b"BC")}
        )

        assert result == "c0ffee"
        repo.commit_files.assert_called_once_with(
            [("a.txt", b"A"), ("b/c.txt", b"BC")], "msg", identity=b"Jane <jane@x>"
        )

    def test_add_files_rejects_text_stream(
        self, mock_handler: GitCommandHandler, resolver: MagicMock, repo: MagicMock
    ) -> None:
        command = add_files(REPO, "msg", {"a.txt": io.StringIO("text")})  # pyright: ignore[reportArgumentType]

        with pytest.raises(GitOperationError) as exc_info:
            _ = mock_handler.execute(command)

        assert isinstance(exc_info.value.cause, TypeError)
        repo.commit_files.assert_not_called()
        resolver.resolve.assert_not_called()

    def test_add_files_reads_streams_before_resolving(
        self, mock_handler: GitCommandHandler, resolver: MagicMock, mocker: MockerFixture
    ) -> None:
        stream = mocker.MagicMock(name="stream")
        stream.read.side_effect = OSError("stream closed")

        with pytest.raises(GitOperationError, match="stream closed"):
            _ = mock_handler.add_files(REPO, "msg", {"a.txt": stream})
        resolver.resolve.assert_not_called()

    def test_read_file_returns_stream(
        self, mock_handler: GitCommandHandler, repo: MagicMock
    ) -> None:
        repo.read_file.return_value = b"content"

        stream = mock_handler.read_file(REPO, "a.txt", tag="1.0")

        assert stream.read() == b"content"
        repo.read_file.assert_called_once_with("a.txt", commit_id=None, tag="1.0")

    def test_list_logs_passes_path_filter(
        self, mock_handler: GitCommandHandler, repo: MagicMock
    ) -> None:
        repo.get_commits.return_value = []

        assert mock_handler.list_logs(REPO, path="a.txt") == []
        repo.get_commits.assert_called_once_with("a.txt")

    def test_create_tag(self, mock_handler: GitCommandHandler, repo: MagicMock) -> None:
        repo.has_tag.return_value = False
        repo.create_tag.return_value = TagInfo(name="1.0", commit_id="abc")

        assert mock_handler.create_tag(REPO, "1.0", "msg") == TagInfo("1.0", "abc")
        repo.create_tag.assert_called_once_with(
            "1.0", "msg", identity=b"Jane <jane@x>"
        )

    def test_create_duplicate_tag_fails_before_writing(
        self, mock_handler: GitCommandHandler, repo: MagicMock
    ) -> None:
        repo.has_tag.return_value = True

        with pytest.raises(CommandValidationError, match="already exists"):
            _ = mock_handler.create_tag(REPO, "1.0", "msg")
        repo.create_tag.assert_not_called()

    def test_unknown_command_type(self, mock_handler: GitCommandHandler) -> None:
        class Bogus:
            kind = "bogus"
            create_if_absent = False
            repository_path = REPO

        with pytest.raises(GitOperationError) as exc_info:
            _ = mock_handler.execute(Bogus())  # pyright: ignore[reportArgumentType]
        assert isinstance(exc_info.value.cause, TypeError)


class TestErrorHandling:
    def test_missing_store_is_reported(
        self, mock_handler: GitCommandHandler, resolver: MagicMock, logger: MagicMock
    ) -> None:
        resolver.resolve.side_effect = RepositoryNotFoundError("missing", path=REPO)

        with pytest.raises(RepositoryNotFoundError):
            _ = mock_handler.list_logs(REPO)
        logger.warning.assert_not_called()

    def test_raw_engine_error_is_translated(
        self, mock_handler: GitCommandHandler, resolver: MagicMock
    ) -> None:
        cause = NotGitRepository("gone")
        resolver.resolve.side_effect = cause

        with pytest.raises(RepositoryNotFoundError) as exc_info:
            _ = mock_handler.list_logs(REPO)
        assert exc_info.value.__cause__ is cause

    def test_missing_file_is_logged_at_debug(
        self, mock_handler: GitCommandHandler, repo: MagicMock, logger: MagicMock
    ) -> None:
        repo.read_file.side_effect = FileNotFoundError("a.txt")

        with pytest.raises(GitOperationError):
            _ = mock_handler.read_file(REPO, "a.txt")

        logger.bind.assert_called_once_with(command="read_file", repository=str(REPO))
        logger.warning.assert_not_called()
        failed = [c for c in logger.debug.call_args_list if c.args == ("command_failed",)]
        assert failed[0].kwargs["error_kind"] == "operation_failed"

    def test_rejected_parameters_are_not_warnings(
        self, mock_handler: GitCommandHandler, repo: MagicMock, logger: MagicMock
    ) -> None:
        repo.has_tag.return_value = True

        with pytest.raises(CommandValidationError):
            _ = mock_handler.create_tag(REPO, "1.0", "msg")
        logger.warning.assert_not_called()

    def test_unexpected_failure_is_logged_as_warning(
        self, mock_handler: GitCommandHandler, repo: MagicMock, logger: MagicMock
    ) -> None:
        repo.list_tags.side_effect = OSError("disk")

        with pytest.raises(GitOperationError):
            _ = mock_handler.list_tags(REPO)

        logger.warning.assert_called_once()
        assert logger.warning.call_args.kwargs["error_kind"] == "operation_failed"


class TestDiscard:
    def test_failed_command_discards_created_store(
        self, mock_handler: GitCommandHandler, repo: MagicMock
    ) -> None:
        repo.created = True
        repo.commit_files.side_effect = OSError("disk full")

        with pytest.raises(GitOperationError):
            _ = mock_handler.add_files(REPO, "msg", {"a.txt": io.BytesIO(b"a")})
        repo.discard.assert_called_once_with()

    def test_failed_command_keeps_existing_store(
        self, mock_handler: GitCommandHandler, repo: MagicMock
    ) -> None:
        repo.commit_files.side_effect = OSError("disk full")

        with pytest.raises(GitOperationError):
            _ = mock_handler.add_files(REPO, "msg", {"a.txt": io.BytesIO(b"a")})
        repo.discard.assert_not_called()

    def test_successful_command_keeps_created_store(
        self, mock_handler: GitCommandHandler, repo: MagicMock
    ) -> None:
        repo.created = True
        repo.commit_files.return_value = "c0ffee"

        _ = mock_handler.add_files(REPO, "msg", {"a.txt": io.BytesIO(b"a")})
        repo.discard.assert_not_called()


class TestTryExecute:
    def test_success(self, mock_handler: GitCommandHandler, repo: MagicMock) -> None:
        repo.list_tags.return_value = []

        outcome = mock_handler.try_execute(list_tags(REPO))

        assert outcome.ok
        assert outcome.unwrap() == []

    def test_failure(self, mock_handler: GitCommandHandler, resolver: MagicMock) -> None:
        resolver.resolve.side_effect = RepositoryNotFoundError("missing")

        outcome = mock_handler.try_execute(list_tags(REPO))

        assert not outcome.ok
        assert outcome.kind is ErrorKind.REPOSITORY_MISSING


class TestDefaults:
    def test_default_config(self) -> None:
        handler = GitCommandHandler()
        assert handler.config.author.name == "GitVault"
