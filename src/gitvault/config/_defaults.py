"""Default configuration values.

This module defines the built-in default configuration values that are used
when no other configuration sources provide values.
"""

from typing import Any, Final

# Identity recorded on commits and tags unless configuration overrides it
DEFAULT_AUTHOR_NAME: Final = "GitVault"
DEFAULT_AUTHOR_EMAIL: Final = "gitvault@localhost"

DEFAULT_CONFIG: dict[str, Any] = {  # pyright: ignore[reportExplicitAny]
    "author": {
        "name": DEFAULT_AUTHOR_NAME,
        "email": DEFAULT_AUTHOR_EMAIL,
    },
    "logging": {
        "level": "info",
        "format": "json",
        "file": "",
    },
}
