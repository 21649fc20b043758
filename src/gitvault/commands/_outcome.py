"""Non-raising command results."""

from dataclasses import dataclass

from gitvault.exceptions import ErrorKind, GitVaultError


@dataclass(frozen=True, slots=True)
class CommandOutcome[ResultT]:
    """The result of a command, or the error that stopped it.

    Exactly one of ``value`` and ``error`` is meaningful: ``error`` is None
    on success.

    Attributes:
        value: The command's result on success.
        error: The translated error on failure.

    Example:
        >>> outcome = handler.try_execute(read_file(path, "notes.txt"))
        >>> if outcome.kind is ErrorKind.REPOSITORY_MISSING:
        ...     print("nothing written yet")
    """

    value: ResultT | None = None
    error: GitVaultError | None = None

    @property
    def ok(self) -> bool:
        """True if the command succeeded."""
        return self.error is None

    @property
    def kind(self) -> ErrorKind | None:
        """The error kind, or None on success."""
        return self.error.kind if self.error is not None else None

    def unwrap(self) -> ResultT:
        """Return the value, raising the error if the command failed.

        Raises:
            GitVaultError: The error that stopped the command.
        """
        if self.error is not None:
            raise self.error
        return self.value  # pyright: ignore[reportReturnType]
