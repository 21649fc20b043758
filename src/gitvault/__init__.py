"""gitvault: a typed command layer over git-backed file stores.

A directory becomes an append-only, auditable, taggable file store. Callers
build commands and pass them to a GitCommandHandler instead of driving the
git engine directly.

Example:
    >>> from gitvault import GitCommandHandler, add_files, read_file
    >>> handler = GitCommandHandler()
    >>> with open("root.txt", "rb") as f:
    ...     handler.execute(add_files("/data/store", "Initial commit", {"root.txt": f}))
    >>> handler.execute(read_file("/data/store", "root.txt")).read()
"""

from gitvault.commands import (
    AddFilesCommand,
    AnyCommand,
    Command,
    CommandOutcome,
    CreateTagCommand,
    GitCommandHandler,
    ListLogsCommand,
    ListTagsCommand,
    ReadFileCommand,
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
    GitVaultError,
    RepositoryNotFoundError,
)
from gitvault.repository import CommitInfo, FileEntry, TagInfo

__all__ = [
    "AddFilesCommand",
    "AnyCommand",
    "Command",
    "CommandOutcome",
    "CommandValidationError",
    "CommitInfo",
    "Config",
    "CreateTagCommand",
    "ErrorKind",
    "FileEntry",
    "GitCommandHandler",
    "GitOperationError",
    "GitVaultError",
    "ListLogsCommand",
    "ListTagsCommand",
    "ReadFileCommand",
    "RepositoryNotFoundError",
    "TagInfo",
    "add_files",
    "create_tag",
    "list_logs",
    "list_tags",
    "read_file",
]
