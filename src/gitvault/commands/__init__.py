"""gitvault commands.

Commands describe one operation each and are validated when built. The
GitCommandHandler executes them against the repository at the command's
path.

Commands:
    AddFilesCommand: Record files as one new commit.
    ReadFileCommand: Read a file as of a commit, tag, or head.
    ListLogsCommand: List history from head, newest first.
    CreateTagCommand: Create an annotated tag at head.
    ListTagsCommand: List tags and the commits they point at.

Example:
    >>> from gitvault.commands import GitCommandHandler, create_tag, list_tags
    >>> handler = GitCommandHandler()
    >>> handler.execute(create_tag(path, "1.0", "First release"))
    >>> [tag.name for tag in handler.execute(list_tags(path))]
    ['1.0']
"""

from gitvault.commands._commands import (
    AddFilesCommand,
    AnyCommand,
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
from gitvault.commands._handler import GitCommandHandler
from gitvault.commands._outcome import CommandOutcome
from gitvault.commands._translate import translate_error

__all__ = [
    "AddFilesCommand",
    "AnyCommand",
    "Command",
    "CommandOutcome",
    "CreateTagCommand",
    "GitCommandHandler",
    "ListLogsCommand",
    "ListTagsCommand",
    "ReadFileCommand",
    "add_files",
    "create_tag",
    "list_logs",
    "list_tags",
    "read_file",
    "translate_error",
]
