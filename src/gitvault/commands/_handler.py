"""Command execution.

This module provides GitCommandHandler, the single funnel through which
commands reach a repository. The handler resolves the repository with the
command's creation policy, runs the command, translates failures and closes
the repository before returning. A store created for a command that then
fails is removed again.
"""

import io
from collections.abc import Callable, Iterable, Mapping
from functools import partial
from pathlib import Path
from typing import BinaryIO, cast

from structlog.typing import FilteringBoundLogger  # noqa: TC002 - Used at runtime in __init__

from gitvault.commands._commands import (
    AddFilesCommand,
    Command,
    CreateTagCommand,
    ListLogsCommand,
    ListTagsCommand,
    ReadFileCommand,
    add_files,
    create_tag,
    list_logs,
    list_tags,
    read_file,
)
from gitvault.commands._outcome import CommandOutcome
from gitvault.commands._translate import translate_error
from gitvault.config import Config
from gitvault.exceptions import (
    CommandValidationError,
    ErrorKind,
    GitVaultError,
)
from gitvault.repository import (
    CommitInfo,
    FileEntry,
    RepositoryHandle,
    RepositoryResolver,
    TagInfo,
)
from gitvault.utils import create_logger_from_config


class GitCommandHandler:
    """Execute commands against repositories.

    The handler keeps no per-call state; one instance can run any number of
    commands against any number of repository paths, one at a time. Writers
    targeting the same path must be serialized by the caller.

    Example:
        >>> handler = GitCommandHandler()
        >>> with open("notes.txt", "rb") as f:
        ...     commit_id = handler.execute(
        ...         add_files(path, "Initial commit", {"notes.txt": f})
        ...     )
        >>> stream = handler.execute(read_file(path, "notes.txt"))
    """

    __slots__ = ("_config", "_logger", "_resolver")

    def __init__(
        self,
        config: Config | None = None,
        *,
        resolver: RepositoryResolver | None = None,
        logger: FilteringBoundLogger | None = None,
    ) -> None:
        """Initialize the handler.

        Args:
            config: Configuration supplying the commit identity and logging
                settings. Defaults are used when None.
            resolver: Repository resolver. A new one is created when None.
            logger: Logger for command events. Built from the logging
                configuration when None.
        """
        self._config: Config = config if config is not None else Config.from_dict({})
        self._resolver: RepositoryResolver = (
            resolver if resolver is not None else RepositoryResolver()
        )
        self._logger: FilteringBoundLogger = (
            logger
            if logger is not None
            else create_logger_from_config(self._config.logging)
        )

    @property
    def config(self) -> Config:
        """The configuration this handler uses."""
        return self._config

    # =========================================================================
    # Entry Points
    # =========================================================================

    def execute[ResultT](self, command: Command[ResultT]) -> ResultT:
        """Execute a command.

        Args:
            command: The command to run.

        Returns:
            The command's result: a commit id for AddFilesCommand, a binary
            stream for ReadFileCommand, a list of CommitInfo for
            ListLogsCommand, a TagInfo for CreateTagCommand and a list of
            TagInfo for ListTagsCommand.

        Raises:
            RepositoryNotFoundError: If a read command targets a path with no
                initialized store.
            GitOperationError: For any other failure, with the underlying
                cause attached.
        """
        path = command.repository_path
        log = self._logger.bind(command=command.kind, repository=str(path))
        log.debug("command_executing")

        try:
            # Plans read caller streams, so no store is created for bad input
            action = self._plan(command)
            with self._resolver.resolve(
                path, create_if_absent=command.create_if_absent
            ) as repo:
                try:
                    result = action(repo)
                except Exception:
                    if repo.created:
                        repo.discard()
                    raise
                created = repo.created
        except Exception as e:
            error = translate_error(e, path=path)
            log_failure = log.warning if _is_unexpected(error) else log.debug
            log_failure("command_failed", error_kind=error.kind.value, error=str(error))
            if error is e:
                raise
            raise error from e

        log.debug("command_completed", created=created)
        return cast("ResultT", result)

    def try_execute[ResultT](
        self, command: Command[ResultT]
    ) -> CommandOutcome[ResultT]:
        """Execute a command, returning failures instead of raising them.

        Args:
            command: The command to run.

        Returns:
            CommandOutcome holding either the result or the translated error.
        """
        try:
            return CommandOutcome(value=self.execute(command))
        except GitVaultError as e:
            return CommandOutcome(error=e)

    # =========================================================================
    # Typed Convenience Methods
    # =========================================================================

    def add_files(
        self,
        repository_path: Path | str,
        message: str,
        files: Mapping[str, BinaryIO] | Iterable[FileEntry | tuple[str, BinaryIO]],
    ) -> str:
        """Commit files to a repository, creating it if needed.

        Returns:
            The new commit id.
        """
        return self.execute(add_files(repository_path, message, files))

    def read_file(
        self,
        repository_path: Path | str,
        path: str,
        *,
        commit_id: str | None = None,
        tag: str | None = None,
    ) -> BinaryIO:
        """Read a file as of a commit, a tag, or the current head."""
        return self.execute(read_file(repository_path, path, commit_id=commit_id, tag=tag))

    def list_logs(
        self, repository_path: Path | str, *, path: str | None = None
    ) -> list[CommitInfo]:
        """List the commit history, newest first."""
        return self.execute(list_logs(repository_path, path=path))

    def create_tag(self, repository_path: Path | str, name: str, message: str) -> TagInfo:
        """Tag the current head."""
        return self.execute(create_tag(repository_path, name, message))

    def list_tags(self, repository_path: Path | str) -> list[TagInfo]:
        """List the tags of a repository."""
        return self.execute(list_tags(repository_path))

    # =========================================================================
    # Planning
    # =========================================================================

    def _plan(self, command: Command[object]) -> Callable[[RepositoryHandle], object]:
        """Bind a command to the handle operation that runs it.

        Input streams of AddFilesCommand are read here, before any store is
        resolved or created.
        """
        match command:
            case AddFilesCommand():
                return partial(self._add_files, command, _read_contents(command))
            case ReadFileCommand():
                return partial(self._read_file, command)
            case ListLogsCommand():
                return partial(_list_logs, command)
            case CreateTagCommand():
                return partial(self._create_tag, command)
            case ListTagsCommand():
                return _list_tags
            case _:
                msg = f"Unsupported command: {type(command).__name__}"
                raise TypeError(msg)

    def _add_files(
        self,
        command: AddFilesCommand,
        contents: list[tuple[str, bytes]],
        repo: RepositoryHandle,
    ) -> str:
        return repo.commit_files(
            contents, command.message, identity=self._config.author.identity()
        )

    def _read_file(self, command: ReadFileCommand, repo: RepositoryHandle) -> BinaryIO:
        data = repo.read_file(command.path, commit_id=command.commit_id, tag=command.tag)
        return io.BytesIO(data)

    def _create_tag(self, command: CreateTagCommand, repo: RepositoryHandle) -> TagInfo:
        if repo.has_tag(command.name):
            msg = f"Tag already exists: {command.name}"
            raise CommandValidationError(msg, field="name", path=repo.root)
        return repo.create_tag(
            command.name, command.message, identity=self._config.author.identity()
        )


def _read_contents(command: AddFilesCommand) -> list[tuple[str, bytes]]:
    contents: list[tuple[str, bytes]] = []
    for entry in command.files:
        data = entry.content.read()
        if not isinstance(data, bytes):
            msg = f"Stream for {entry.path} must be binary"
            raise TypeError(msg)
        contents.append((entry.path, data))
    return contents


def _list_logs(command: ListLogsCommand, repo: RepositoryHandle) -> list[CommitInfo]:
    return repo.get_commits(command.path)


def _list_tags(repo: RepositoryHandle) -> list[TagInfo]:
    return repo.list_tags()


def _is_unexpected(error: GitVaultError) -> bool:
    """Whether a failure points at a fault rather than a caller-visible outcome.

    A missing store, an unknown path or ref and rejected parameters are
    routine results of caller input.
    """
    if error.kind is ErrorKind.REPOSITORY_MISSING or isinstance(
        error, CommandValidationError
    ):
        return False
    return not isinstance(error.cause, (FileNotFoundError, KeyError))
