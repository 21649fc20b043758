"""Command definitions.

Each command is an immutable description of one operation against the store
at ``repository_path``. All parameter validation happens on construction, so
an invalid command never reaches the repository. The factory functions at
the bottom of the module accept looser input types and build the commands.
"""

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, ClassVar, Final

from gitvault.exceptions import CommandValidationError
from gitvault.repository import CommitInfo, FileEntry, TagInfo, is_valid_tag_name

_COMMIT_ID_PATTERN: Final = re.compile(r"^[0-9a-fA-F]{4,40}$")


def _require_text(value: str, *, field: str, path: Path) -> None:
    if not value or not value.strip():
        msg = f"{field} must not be empty"
        raise CommandValidationError(msg, field=field, path=path)


def _check_relative_path(value: str, *, field: str, path: Path) -> None:
    """Reject paths that are absolute, non-normalized or point into .git."""
    _require_text(value, field=field, path=path)
    parts = value.split("/")
    if (
        value.startswith("/")
        or "\\" in value
        or "\0" in value
        or any(part in {"", ".", ".."} for part in parts)
        or parts[0] == ".git"
    ):
        msg = f"{field} must be a normalized relative path: {value!r}"
        raise CommandValidationError(msg, field=field, path=path)


class Command[ResultT]:
    """Base class for commands producing a ``ResultT``.

    Attributes:
        kind: Short operation name used in logs.
        create_if_absent: Whether the store is created when missing.
        repository_path: Path of the repository work tree.
    """

    __slots__ = ()

    kind: ClassVar[str]
    create_if_absent: ClassVar[bool]
    repository_path: Path


@dataclass(frozen=True, slots=True)
class AddFilesCommand(Command[str]):
    """Record the given files as one new commit.

    Produces the new commit id.

    Attributes:
        repository_path: Path of the repository work tree.
        message: Commit message.
        files: Files to write, in order; paths are unique.
    """

    kind: ClassVar[str] = "add_files"
    create_if_absent: ClassVar[bool] = True

    repository_path: Path
    message: str
    files: tuple[FileEntry, ...]

    def __post_init__(self) -> None:
        _require_text(self.message, field="message", path=self.repository_path)
        if not self.files:
            msg = "At least one file is required"
            raise CommandValidationError(msg, field="files", path=self.repository_path)

        seen: set[str] = set()
        for entry in self.files:
            _check_relative_path(entry.path, field="files", path=self.repository_path)
            if entry.path in seen:
                msg = f"Duplicate file path: {entry.path}"
                raise CommandValidationError(
                    msg, field="files", path=self.repository_path
                )
            seen.add(entry.path)


@dataclass(frozen=True, slots=True)
class ReadFileCommand(Command[BinaryIO]):
    """Read a file as of a commit, a tag, or the current head.

    Produces a binary stream positioned at the start of the content.

    Attributes:
        repository_path: Path of the repository work tree.
        path: Repository-relative posix path of the file.
        commit_id: Full or abbreviated commit SHA to read from.
        tag: Tag name to read from. Mutually exclusive with ``commit_id``.
    """

    kind: ClassVar[str] = "read_file"
    create_if_absent: ClassVar[bool] = False

    repository_path: Path
    path: str
    commit_id: str | None = None
    tag: str | None = None

    def __post_init__(self) -> None:
        _check_relative_path(self.path, field="path", path=self.repository_path)
        if self.commit_id is not None and self.tag is not None:
            msg = "Only one of commit_id and tag may be given"
            raise CommandValidationError(
                msg, field="commit_id", path=self.repository_path
            )
        if self.commit_id is not None and not _COMMIT_ID_PATTERN.match(
            self.commit_id
        ):
            msg = f"Invalid commit id: {self.commit_id!r}"
            raise CommandValidationError(
                msg, field="commit_id", path=self.repository_path
            )
        if self.tag is not None and not is_valid_tag_name(self.tag):
            msg = f"Invalid tag name: {self.tag!r}"
            raise CommandValidationError(msg, field="tag", path=self.repository_path)


@dataclass(frozen=True, slots=True)
class ListLogsCommand(Command[list[CommitInfo]]):
    """List the commit history from head, newest first.

    Attributes:
        repository_path: Path of the repository work tree.
        path: Only list commits touching this path. Lists all when None.
    """

    kind: ClassVar[str] = "list_logs"
    create_if_absent: ClassVar[bool] = False

    repository_path: Path
    path: str | None = None

    def __post_init__(self) -> None:
        if self.path is not None:
            _check_relative_path(self.path, field="path", path=self.repository_path)


@dataclass(frozen=True, slots=True)
class CreateTagCommand(Command[TagInfo]):
    """Create an annotated tag at the current head.

    Attributes:
        repository_path: Path of the repository work tree.
        name: Tag name; must not exist yet.
        message: Tag annotation.
    """

    kind: ClassVar[str] = "create_tag"
    create_if_absent: ClassVar[bool] = True

    repository_path: Path
    name: str
    message: str

    def __post_init__(self) -> None:
        _require_text(self.name, field="name", path=self.repository_path)
        if not is_valid_tag_name(self.name):
            msg = f"Invalid tag name: {self.name!r}"
            raise CommandValidationError(msg, field="name", path=self.repository_path)
        _require_text(self.message, field="message", path=self.repository_path)


@dataclass(frozen=True, slots=True)
class ListTagsCommand(Command[list[TagInfo]]):
    """List every tag with the commit it points at."""

    kind: ClassVar[str] = "list_tags"
    create_if_absent: ClassVar[bool] = False

    repository_path: Path


type AnyCommand = (
    AddFilesCommand
    | ReadFileCommand
    | ListLogsCommand
    | CreateTagCommand
    | ListTagsCommand
)


# =============================================================================
# Factory Functions
# =============================================================================


def add_files(
    repository_path: Path | str,
    message: str,
    files: Mapping[str, BinaryIO] | Iterable[FileEntry | tuple[str, BinaryIO]],
) -> AddFilesCommand:
    """Build an AddFilesCommand.

    Args:
        repository_path: Path of the repository work tree.
        message: Commit message.
        files: Mapping of path to stream, or an iterable of FileEntry or
            (path, stream) pairs. Order is preserved.

    Returns:
        The validated command.

    Raises:
        CommandValidationError: If any parameter is invalid.

    Example:
        >>> with open("report.csv", "rb") as f:
        ...     command = add_files("/data/store", "Add report", {"reports/q1.csv": f})
    """
    items = files.items() if isinstance(files, Mapping) else files
    entries = tuple(
        item if isinstance(item, FileEntry) else FileEntry(path=item[0], content=item[1])
        for item in items
    )
    return AddFilesCommand(
        repository_path=Path(repository_path), message=message, files=entries
    )


def read_file(
    repository_path: Path | str,
    path: str,
    *,
    commit_id: str | None = None,
    tag: str | None = None,
) -> ReadFileCommand:
    """Build a ReadFileCommand.

    Raises:
        CommandValidationError: If both ``commit_id`` and ``tag`` are given,
            or any parameter is malformed.
    """
    return ReadFileCommand(
        repository_path=Path(repository_path), path=path, commit_id=commit_id, tag=tag
    )


def list_logs(
    repository_path: Path | str, *, path: str | None = None
) -> ListLogsCommand:
    """Build a ListLogsCommand."""
    return ListLogsCommand(repository_path=Path(repository_path), path=path)


def create_tag(repository_path: Path | str, name: str, message: str) -> CreateTagCommand:
    """Build a CreateTagCommand.

    Raises:
        CommandValidationError: If the name or message is invalid.
    """
    return CreateTagCommand(
        repository_path=Path(repository_path), name=name, message=message
    )


def list_tags(repository_path: Path | str) -> ListTagsCommand:
    """Build a ListTagsCommand."""
    return ListTagsCommand(repository_path=Path(repository_path))
