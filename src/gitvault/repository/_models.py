# ruff: noqa: TC003  # datetime needed at runtime for dataclass fields
"""Repository value objects.

This module defines the data structures returned by, or passed into, the
command layer.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import BinaryIO


@dataclass(frozen=True, slots=True)
class CommitInfo:
    """Information about a single commit.

    Attributes:
        commit_id: Full 40-character commit SHA hex string.
        author_name: Author name from commit.
        author_email: Author email from commit.
        timestamp: Author timestamp with the author's timezone.
        message: Complete commit message (subject + body).
        is_head: True only for the commit at the tip of history.
        is_current: True for the checked-out commit. With a single line of
            history this always equals ``is_head``.
    """

    commit_id: str
    author_name: str
    author_email: str
    timestamp: datetime
    message: str
    is_head: bool = False
    is_current: bool = False


@dataclass(frozen=True, slots=True)
class TagInfo:
    """Information about an annotated tag.

    Attributes:
        name: Tag name, unique per repository.
        commit_id: SHA hex string of the commit the tag points at.
    """

    name: str
    commit_id: str


@dataclass(frozen=True, slots=True)
class FileEntry:
    """A file to be written into the repository.

    The stream is read to the end during execution and is never closed by
    gitvault; it stays owned by the caller.

    Attributes:
        path: Posix-style path relative to the repository root.
        content: Readable binary stream holding the file content.
    """

    path: str
    content: BinaryIO
