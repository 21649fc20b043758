"""gitvault configuration.

This module provides the public API for gitvault configuration, including
loading from TOML files and environment variables and typed access to the
commit identity and logging settings.

Example:
    >>> from gitvault.config import Config
    >>> config = Config.load()
    >>> config.author.name
    'GitVault'
"""

from gitvault.exceptions import (
    ConfigError,
    ConfigLoadError,
    ConfigValidationError,
)

from ._defaults import DEFAULT_AUTHOR_EMAIL, DEFAULT_AUTHOR_NAME, DEFAULT_CONFIG
from ._loader import deep_merge, parse_env_vars, read_toml_file, set_nested_key
from ._models import (
    AuthorConfig,
    Config,
    ConfigSource,
    ConfigSourceName,
    LogFormat,
    LoggingConfig,
    LogLevel,
)

__all__ = [
    "DEFAULT_AUTHOR_EMAIL",
    "DEFAULT_AUTHOR_NAME",
    "DEFAULT_CONFIG",
    "AuthorConfig",
    "Config",
    "ConfigError",
    "ConfigLoadError",
    "ConfigSource",
    "ConfigSourceName",
    "ConfigValidationError",
    "LogFormat",
    "LogLevel",
    "LoggingConfig",
    "deep_merge",
    "parse_env_vars",
    "read_toml_file",
    "set_nested_key",
]
