"""Shared test fixtures for gitvault tests."""

import os
from collections.abc import Iterator
from pathlib import Path

import pytest

from gitvault.commands import GitCommandHandler
from gitvault.utils import create_logger


@pytest.fixture(scope="session", autouse=True)
def isolated_git_config(tmp_path_factory: pytest.TempPathFactory) -> Iterator[Path]:
    """Point HOME at an empty directory so user git config cannot leak in.

    Also clears GITVAULT_* variables.

    Session scoped so that it also applies to hypothesis tests.
    """
    home = tmp_path_factory.mktemp("home")
    with pytest.MonkeyPatch.context() as mp:
        mp.setenv("HOME", str(home))
        mp.setenv("XDG_CONFIG_HOME", str(home / ".config"))
        mp.delenv("GIT_CONFIG_GLOBAL", raising=False)
        mp.delenv("GIT_CONFIG_SYSTEM", raising=False)
        for key in list(os.environ):
            if key.startswith("GITVAULT_"):
                mp.delenv(key)
        yield home


@pytest.fixture
def repo_path(tmp_path: Path) -> Path:
    """Return a path where no repository exists yet."""
    return tmp_path / "store"


@pytest.fixture
def handler() -> GitCommandHandler:
    """Create a handler with default config that only logs errors."""
    return GitCommandHandler(logger=create_logger(level="error"))
