"""gitvault repository management.

This package opens, creates and operates on the git stores that back
gitvault commands.

Classes:
    RepositoryResolver: Opens a store by path, creating it when allowed.
    RepositoryHandle: Open store exposing write, read, log and tag operations.

Models:
    CommitInfo: Metadata about a single commit.
    TagInfo: A tag name and the commit it points at.
    FileEntry: A relative path and the stream holding its content.

Example:
    >>> from gitvault.repository import RepositoryResolver
    >>> with RepositoryResolver().resolve(path, create_if_absent=False) as repo:
    ...     commits = repo.get_commits()
"""

from gitvault.repository._handle import RepositoryHandle
from gitvault.repository._models import CommitInfo, FileEntry, TagInfo
from gitvault.repository._refs import is_valid_tag_name
from gitvault.repository._resolver import RepositoryResolver

__all__ = [
    "CommitInfo",
    "FileEntry",
    "RepositoryHandle",
    "RepositoryResolver",
    "TagInfo",
    "is_valid_tag_name",
]
