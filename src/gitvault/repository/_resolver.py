"""Repository resolution.

This module locates, opens or initializes the store rooted at a path. It is
the only place that decides whether a missing store is created or reported.
"""

from pathlib import Path

from dulwich.errors import NotGitRepository
from dulwich.repo import Repo

from gitvault.exceptions import RepositoryNotFoundError
from gitvault.repository._handle import RepositoryHandle


class RepositoryResolver:
    """Open or create repositories by path.

    The resolver holds no state and can be shared freely.

    Example:
        >>> resolver = RepositoryResolver()
        >>> with resolver.resolve(Path("/data/store"), create_if_absent=True) as repo:
        ...     repo.head_commit_id()
    """

    def exists(self, path: Path) -> bool:
        """Check whether an initialized store exists at a path.

        Args:
            path: The repository work tree path.

        Returns:
            True if a store can be opened at the path.
        """
        try:
            repo = Repo(str(path))
        except NotGitRepository:
            return False
        repo.close()
        return True

    def resolve(self, path: Path, *, create_if_absent: bool) -> RepositoryHandle:
        """Open the store at a path, initializing it if allowed.

        An existing store is opened regardless of ``create_if_absent`` and its
        history is never touched.

        Args:
            path: The repository work tree path.
            create_if_absent: Initialize an empty store when none exists.

        Returns:
            An open RepositoryHandle. The caller must close it.

        Raises:
            RepositoryNotFoundError: If no store exists and
                ``create_if_absent`` is False.
        """
        root = path.resolve()
        try:
            return RepositoryHandle(root, Repo(str(root)))
        except NotGitRepository as e:
            if not create_if_absent:
                msg = f"Repository not initialized: {root}"
                raise RepositoryNotFoundError(msg, path=root, cause=e) from e

        root.mkdir(parents=True, exist_ok=True)
        return RepositoryHandle(root, Repo.init(str(root)), created=True)
