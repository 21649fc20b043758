"""Ref resolution and commit parsing helpers.

This module holds the small, stateless helpers used by RepositoryHandle to
turn dulwich objects into gitvault value objects and to resolve the
reference a read should use.
"""

from datetime import datetime, timedelta, timezone
from typing import Final, cast

from dulwich.objects import Commit
from dulwich.objectspec import parse_commit
from dulwich.refs import check_ref_format
from dulwich.repo import Repo  # noqa: TC002 - Used at runtime in signatures

from gitvault.repository._models import CommitInfo

TAG_REF_PREFIX: Final = b"refs/tags/"


def decode_bytes(value: bytes | str) -> str:
    """Decode bytes to str if needed.

    Args:
        value: A bytes or str value.

    Returns:
        The value as a string.
    """
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return value


def tag_ref(name: str) -> bytes:
    """Return the full ref name for a tag.

    Args:
        name: Short tag name (e.g., "1.0").

    Returns:
        The ref as bytes (e.g., b"refs/tags/1.0").
    """
    return TAG_REF_PREFIX + name.encode()


def is_valid_tag_name(name: str) -> bool:
    """Check that a tag name forms a valid git ref.

    Args:
        name: Short tag name.

    Returns:
        True if ``refs/tags/<name>`` is a well-formed ref name.
    """
    return bool(name) and check_ref_format(tag_ref(name))


def parse_author_line(
    author: bytes, author_time: int, author_tz: int
) -> tuple[str, str, datetime]:
    """Parse author line into name, email, and datetime.

    Args:
        author: Author bytes in "Name <email>" format.
        author_time: Unix timestamp.
        author_tz: Timezone offset in seconds east of UTC, as dulwich reports it.

    Returns:
        Tuple of (name, email, datetime with correct timezone).
    """
    author_str = decode_bytes(author)
    if "<" in author_str and author_str.endswith(">"):
        name_part = author_str.rsplit("<", 1)[0].strip()
        email_part = author_str.rsplit("<", 1)[1].rstrip(">")
    else:
        name_part = author_str
        email_part = ""

    tz = timezone(timedelta(seconds=author_tz))
    dt = datetime.fromtimestamp(author_time, tz=tz)

    return (name_part, email_part, dt)


def commit_to_info(commit: Commit, *, head_id: bytes) -> CommitInfo:
    """Convert a dulwich commit to CommitInfo.

    Args:
        commit: The commit object.
        head_id: SHA of the current head, used to set the head flags.

    Returns:
        CommitInfo populated from the commit data.
    """
    author_name, author_email, timestamp = parse_author_line(
        cast("bytes", commit.author),
        cast("int", commit.author_time),
        cast("int", commit.author_timezone),
    )
    is_head = commit.id == head_id

    return CommitInfo(
        commit_id=decode_bytes(commit.id),
        author_name=author_name,
        author_email=author_email,
        timestamp=timestamp,
        message=decode_bytes(commit.message),
        is_head=is_head,
        is_current=is_head,
    )


def resolve_commit_id(repo: Repo, commit_id: str) -> Commit:
    """Resolve a full or abbreviated commit SHA.

    Args:
        repo: The open repository.
        commit_id: Hex commit SHA (4 to 40 characters, any case).

    Returns:
        The commit object.

    Raises:
        KeyError: If no commit matches, or the prefix is ambiguous.
    """
    try:
        # Loose objects are stored under lowercase hex names
        commit = parse_commit(repo, commit_id.lower().encode("ascii"))
    except (KeyError, ValueError) as e:
        msg = f"Unknown commit: {commit_id}"
        raise KeyError(msg) from e
    if not isinstance(commit, Commit):
        msg = f"Not a commit: {commit_id}"
        raise KeyError(msg)
    return commit


def resolve_tag(repo: Repo, name: str) -> Commit:
    """Resolve a tag to the commit it was created on.

    Args:
        repo: The open repository.
        name: Short tag name.

    Returns:
        The commit the tag points at, annotated tags peeled.

    Raises:
        KeyError: If the tag does not exist.
    """
    ref = tag_ref(name)
    if ref not in repo.refs:
        msg = f"Unknown tag: {name}"
        raise KeyError(msg)
    commit = repo[repo.get_peeled(ref)]
    if not isinstance(commit, Commit):
        msg = f"Tag does not point at a commit: {name}"
        raise KeyError(msg)
    return commit
