"""Open repository handle.

This module provides RepositoryHandle, a thin wrapper over a dulwich Repo
that exposes the storage operations the command layer needs: staging and
committing files, reading blobs at a ref, walking history and managing
annotated tags.

Content is staged and committed directly through the object store and the
index. Ignore rules, line-ending filters, hooks and signing settings from
any git configuration never apply to stored bytes.
"""

import shutil
import stat
import time
from collections.abc import Sequence
from pathlib import Path
from types import TracebackType
from typing import Final, Self

from dulwich import porcelain
from dulwich.errors import NotTreeError
from dulwich.index import build_file_from_blob, index_entry_from_stat
from dulwich.object_store import tree_lookup_path
from dulwich.objects import Blob, Commit
from dulwich.repo import Repo  # noqa: TC002 - Used at runtime in __init__

from gitvault.exceptions import CommandValidationError, GitOperationError
from gitvault.repository._models import CommitInfo, TagInfo
from gitvault.repository._refs import (
    TAG_REF_PREFIX,
    commit_to_info,
    decode_bytes,
    resolve_commit_id,
    resolve_tag,
    tag_ref,
)

_REGULAR_FILE_MODE: Final = stat.S_IFREG | 0o644


def _new_commit(
    tree_id: bytes, parent: bytes | None, message: str, identity: bytes
) -> Commit:
    """Build a commit object stamped with the current local time.

    Args:
        tree_id: SHA of the root tree.
        parent: SHA of the parent commit, or None for the first commit.
        message: Commit message, stored verbatim.
        identity: Author and committer in "Name <email>" form.

    Returns:
        The unsigned commit, not yet stored.
    """
    now = int(time.time())
    offset = time.localtime(now).tm_gmtoff

    commit = Commit()
    commit.tree = tree_id
    commit.parents = [parent] if parent is not None else []
    commit.author = commit.committer = identity
    commit.author_time = commit.commit_time = now
    commit.author_timezone = commit.commit_timezone = offset
    commit.message = message.encode()
    return commit


class RepositoryHandle:
    """An open, initialized repository rooted at a filesystem path.

    Handles are obtained from RepositoryResolver and implement the context
    manager protocol; the underlying dulwich Repo is closed on exit.

    Attributes:
        root: The resolved path to the repository work tree.
        created: True if the store was initialized by this resolution.
    """

    __slots__: Final = ("_closed", "_created", "_repo", "_root")
    _root: Path
    _repo: Repo
    _created: bool
    _closed: bool

    def __init__(self, root: Path, repo: Repo, *, created: bool = False) -> None:
        """Wrap an open dulwich repository.

        Args:
            root: The resolved work tree path.
            repo: The open dulwich repository.
            created: Whether the store was just initialized.
        """
        self._root = root
        self._repo = repo
        self._created = created
        self._closed = False

    # =========================================================================
    # Context Manager Protocol
    # =========================================================================

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying git repository. Closing twice is a no-op."""
        if not self._closed:
            self._closed = True
            self._repo.close()

    def discard(self) -> None:
        """Close the handle and delete the store it created.

        Only the git directory is removed; the work tree directory stays.

        Raises:
            GitOperationError: If the store existed before this resolution.
        """
        if not self._created:
            msg = f"Refusing to delete a store this handle did not create: {self._root}"
            raise GitOperationError(msg, path=self._root)
        self.close()
        shutil.rmtree(self._root / ".git")

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def root(self) -> Path:
        """Get the resolved root path of the repository."""
        return self._root

    @property
    def created(self) -> bool:
        """Whether the store was initialized when this handle was resolved."""
        return self._created

    # =========================================================================
    # Head
    # =========================================================================

    def head_commit_id(self) -> str | None:
        """Get the current head commit SHA.

        Returns:
            The head commit SHA as a hex string, or None if no commits exist.
        """
        head = self._head_bytes()
        return decode_bytes(head) if head is not None else None

    def _head_bytes(self) -> bytes | None:
        try:
            return self._repo.head()
        except KeyError:
            # No commits yet (empty repository)
            return None

    def _head_commit(self) -> Commit:
        head = self._head_bytes()
        if head is None:
            msg = f"Repository has no commits: {self._root}"
            raise KeyError(msg)
        commit = self._repo[head]
        if not isinstance(commit, Commit):
            msg = f"HEAD does not point at a commit: {self._root}"
            raise KeyError(msg)
        return commit

    # =========================================================================
    # Writing
    # =========================================================================

    def validate_path(self, path: Path) -> bool:
        """Validate that a path is within the work tree and outside .git.

        Args:
            path: The path to validate.

        Returns:
            True if the resolved path can hold tracked content.
        """
        resolved = path.resolve()
        if not resolved.is_relative_to(self._root) or resolved == self._root:
            return False
        return resolved.relative_to(self._root).parts[0] != ".git"

    def commit_files(
        self,
        files: Sequence[tuple[str, bytes]],
        message: str,
        *,
        identity: bytes,
    ) -> str:
        """Write, stage and commit files as a single new commit.

        Either one commit holding every file is recorded, or nothing is:
        if writing, staging or committing fails, the touched paths are
        restored to their head state in both the index and the work tree.

        Args:
            files: Pairs of (repository-relative posix path, content).
            message: Commit message.
            identity: Author and committer in "Name <email>" form.

        Returns:
            The new commit SHA hex string.

        Raises:
            CommandValidationError: If a path escapes the work tree.
            GitOperationError: If HEAD moved while the commit was built.
            OSError: If writing a file fails.
        """
        targets = [(self._to_absolute_path(rel), rel, data) for rel, data in files]
        parent = self._head_bytes()
        written: list[str] = []

        try:
            index = self._repo.open_index()
            for target, rel, data in targets:
                written.append(rel)
                target.parent.mkdir(parents=True, exist_ok=True)
                _ = target.write_bytes(data)

                # Stage the exact bytes; no ignore rules or filters apply
                blob = Blob.from_string(data)
                self._repo.object_store.add_object(blob)
                index[rel.encode()] = index_entry_from_stat(
                    target.stat(), blob.id, _REGULAR_FILE_MODE
                )

            tree_id = index.commit(self._repo.object_store)
            index.write()

            commit = _new_commit(tree_id, parent, message, identity)
            self._repo.object_store.add_object(commit)
            self._advance_head(parent, commit.id)
        except Exception:
            self._restore_from_head(written)
            raise

        return decode_bytes(commit.id)

    def _advance_head(self, parent: bytes | None, commit_id: bytes) -> None:
        """Move HEAD (and the branch it names) from ``parent`` to ``commit_id``.

        Raises:
            GitOperationError: If HEAD no longer points at ``parent``.
        """
        refs = self._repo.refs
        if parent is None:
            updated = refs.add_if_new(b"HEAD", commit_id)
        else:
            updated = refs.set_if_equals(b"HEAD", parent, commit_id)
        if not updated:
            msg = f"HEAD moved while committing: {self._root}"
            raise GitOperationError(msg, path=self._root)

    def _to_absolute_path(self, relative_path: str) -> Path:
        """Convert a repository-relative posix path to an absolute path.

        Raises:
            CommandValidationError: If the path is outside the work tree.
        """
        target = self._root.joinpath(*relative_path.split("/"))
        if not self.validate_path(target):
            msg = f"Path is outside repository scope: {relative_path}"
            raise CommandValidationError(msg, field="files", path=self._root)
        return target

    def _restore_from_head(self, relative_paths: Sequence[str]) -> None:
        """Restore index entries and work tree files to match HEAD.

        Files present at HEAD are rewritten from their blobs; files absent
        from HEAD are removed from the index and deleted.

        Args:
            relative_paths: Repository-relative posix paths to restore.
        """
        if not relative_paths:
            return

        head = self._head_bytes()
        tree_sha: bytes | None = None
        if head is not None:
            tree_sha = self._head_commit().tree

        index = self._repo.open_index()
        try:
            for rel_path in relative_paths:
                path_bytes = rel_path.encode()
                target = self._root / rel_path
                entry = self._lookup(tree_sha, path_bytes) if tree_sha else None

                if entry is None:
                    if path_bytes in index:
                        del index[path_bytes]
                    if target.is_file():
                        target.unlink()
                    continue

                mode, blob_sha = entry
                blob = self._repo[blob_sha]
                if isinstance(blob, Blob):
                    target.parent.mkdir(parents=True, exist_ok=True)
                    _ = build_file_from_blob(blob, mode, str(target).encode())
                    index[path_bytes] = index_entry_from_stat(
                        target.stat(), blob_sha, mode
                    )
        finally:
            index.write()

    # =========================================================================
    # Reading
    # =========================================================================

    def read_file(
        self,
        path: str,
        *,
        commit_id: str | None = None,
        tag: str | None = None,
    ) -> bytes:
        """Read a file's content as of a reference.

        Reference precedence: ``commit_id``, then ``tag``, then HEAD.

        Args:
            path: Repository-relative posix path.
            commit_id: Full or abbreviated commit SHA.
            tag: Tag name.

        Returns:
            The blob content.

        Raises:
            KeyError: If the reference cannot be resolved.
            FileNotFoundError: If the path is not a file in the commit's tree.
        """
        if commit_id is not None:
            commit = resolve_commit_id(self._repo, commit_id)
        elif tag is not None:
            commit = resolve_tag(self._repo, tag)
        else:
            commit = self._head_commit()

        entry = self._lookup(commit.tree, path.encode())
        blob = self._repo[entry[1]] if entry is not None else None
        if not isinstance(blob, Blob):
            msg = f"File not found at {decode_bytes(commit.id)[:8]}: {path}"
            raise FileNotFoundError(msg)
        return blob.data

    def _lookup(self, tree_sha: bytes, path: bytes) -> tuple[int, bytes] | None:
        """Look up a path in a tree.

        Returns:
            Tuple of (mode, sha), or None if the path is not in the tree.
        """
        try:
            return tree_lookup_path(self._repo.__getitem__, tree_sha, path)
        except (KeyError, NotTreeError):
            return None

    # =========================================================================
    # History Methods
    # =========================================================================

    def get_commits(self, path: str | None = None) -> list[CommitInfo]:
        """Walk the history from HEAD.

        Args:
            path: Only include commits that touch this repository-relative
                path. Includes every commit when None.

        Returns:
            List of CommitInfo in reverse chronological order (newest first).
            Returns an empty list if the repository has no commits.
        """
        head = self._head_bytes()
        if head is None:
            return []

        paths = [path.encode()] if path is not None else None
        walker = self._repo.get_walker(include=[head], paths=paths)
        return [commit_to_info(entry.commit, head_id=head) for entry in walker]

    # =========================================================================
    # Tag Methods
    # =========================================================================

    def has_tag(self, name: str) -> bool:
        """Check whether a tag exists.

        Args:
            name: Short tag name.

        Returns:
            True if ``refs/tags/<name>`` exists.
        """
        return tag_ref(name) in self._repo.refs

    def create_tag(self, name: str, message: str, *, identity: bytes) -> TagInfo:
        """Create an annotated tag at HEAD.

        Args:
            name: Short tag name. Must not exist yet.
            message: Tag annotation.
            identity: Tagger in "Name <email>" form.

        Returns:
            TagInfo for the new tag.

        Raises:
            KeyError: If the repository has no commits.
        """
        head = self._head_commit()
        porcelain.tag_create(
            self._repo,
            name.encode(),
            author=identity,
            message=message.encode(),
            annotated=True,
            objectish=head.id,
            sign=False,
        )
        return TagInfo(name=name, commit_id=decode_bytes(head.id))

    def list_tags(self) -> list[TagInfo]:
        """List all tags with the commits they point at.

        Returns:
            List of TagInfo sorted by tag name.
        """
        names = sorted(self._repo.refs.keys(base=TAG_REF_PREFIX))
        return [
            TagInfo(
                name=decode_bytes(name),
                commit_id=decode_bytes(self._repo.get_peeled(TAG_REF_PREFIX + name)),
            )
            for name in names
        ]
