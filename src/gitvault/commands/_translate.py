"""Error translation.

Maps failures raised while executing a command onto the two gitvault error
kinds. Errors that are already gitvault errors pass through unchanged.
"""

from pathlib import Path  # noqa: TC003 - Used at runtime in signature

from dulwich.errors import NotGitRepository

from gitvault.exceptions import (
    GitOperationError,
    GitVaultError,
    RepositoryNotFoundError,
)


def _describe(exc: BaseException) -> str:
    # KeyError wraps its message in quotes when converted with str()
    if isinstance(exc, KeyError) and exc.args:
        return str(exc.args[0])
    return str(exc) or type(exc).__name__


def translate_error(exc: BaseException, *, path: Path | None = None) -> GitVaultError:
    """Translate a failure into a gitvault error.

    Args:
        exc: The exception raised while executing a command.
        path: The repository path the command targeted.

    Returns:
        ``exc`` itself if it is already a GitVaultError; a
        RepositoryNotFoundError for a missing store; otherwise a
        GitOperationError carrying ``exc`` as its cause.
    """
    if isinstance(exc, GitVaultError):
        return exc

    if isinstance(exc, NotGitRepository):
        msg = f"Repository not initialized: {path}"
        return RepositoryNotFoundError(msg, path=path, cause=exc)

    if isinstance(exc, FileNotFoundError):
        prefix = "File not found"
    elif isinstance(exc, KeyError):
        prefix = "Reference not found"
    elif isinstance(exc, OSError):
        prefix = "I/O error"
    else:
        prefix = "Git operation failed"

    return GitOperationError(f"{prefix}: {_describe(exc)}", path=path, cause=exc)
