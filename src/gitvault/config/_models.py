# pyright: reportExplicitAny=false, reportAny=false, reportUnknownVariableType=false, reportUnknownArgumentType=false
"""Configuration models with typed access.

This module provides the Config class that serves as the primary interface
for accessing gitvault configuration values.
"""

import os
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path
from typing import TYPE_CHECKING, Any, ClassVar

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, ValidationError

from gitvault.config._defaults import (
    DEFAULT_AUTHOR_EMAIL,
    DEFAULT_AUTHOR_NAME,
    DEFAULT_CONFIG,
)
from gitvault.config._loader import (
    CONFIG_PATH_ENV_VAR,
    deep_merge,
    parse_env_vars,
    read_toml_file,
)
from gitvault.exceptions import ConfigLoadError, ConfigValidationError

if TYPE_CHECKING:
    from typing import Self

    from pydantic_core import ErrorDetails


class LogLevel(StrEnum):
    """Log level threshold values.

    Values are ordered from most verbose (debug) to least verbose (error).
    """

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class LogFormat(StrEnum):
    """Log output format values."""

    JSON = "json"
    TEXT = "text"


class ConfigSourceName(StrEnum):
    """Configuration source names in precedence order (highest first)."""

    ENV = "env"
    FILE = "file"
    DEFAULT = "default"


@dataclass(frozen=True, slots=True)
class ConfigSource:
    """Represents a configuration source.

    Attributes:
        name: The source type identifier.
        path: Path to the config file, or None for non-file sources.
        values: Configuration values from this source.
    """

    name: ConfigSourceName
    path: Path | None
    values: dict[str, Any]


class AuthorConfig(BaseModel):
    """Identity recorded as author, committer and tagger.

    Attributes:
        name: Author name.
        email: Author email.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    name: str = Field(default=DEFAULT_AUTHOR_NAME, min_length=1)
    email: str = Field(default=DEFAULT_AUTHOR_EMAIL, min_length=1)

    def identity(self) -> bytes:
        """Format the identity in git's "Name <email>" form."""
        return f"{self.name} <{self.email}>".encode()


class LoggingConfig(BaseModel):
    """Logging configuration section.

    Attributes:
        level: Log level threshold.
        format: Log output format.
        file: Path to log file (empty logs to stderr).
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    level: LogLevel = LogLevel.INFO
    format: LogFormat = LogFormat.JSON
    file: str = ""


def _to_config_error(
    error: ValidationError, *, section: str, source: str | None = None
) -> ConfigValidationError:
    """Convert the first pydantic error into a ConfigValidationError.

    Args:
        error: The pydantic validation error.
        section: Top-level config section that was being validated.
        source: Label of the source that produced the values, if known.

    Returns:
        ConfigValidationError keyed by the dotted path of the bad value.
    """
    detail: ErrorDetails = error.errors()[0]
    key = ".".join([section, *(str(part) for part in detail["loc"])])
    msg = f"Invalid configuration value for '{key}': {detail['msg']}"
    return ConfigValidationError(
        msg,
        key=key,
        value=detail.get("input"),
        expected=detail["type"],
        source=source,
    )


class Config(BaseModel):
    """Configuration container with typed access.

    Instances are immutable. Use the factory methods rather than the
    constructor so that defaults are merged and sources are tracked.

    Example:
        >>> config = Config.from_dict({"author": {"name": "Jane"}})
        >>> config.author.name
        'Jane'
        >>> config.author.email
        'gitvault@localhost'
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    author: AuthorConfig = AuthorConfig()
    logging: LoggingConfig = LoggingConfig()
    _sources: tuple[ConfigSource, ...] = PrivateAttr(default=())

    @classmethod
    def _build(
        cls,
        data: dict[str, Any],
        sources: tuple[ConfigSource, ...],
        *,
        source_label: str | None = None,
    ) -> "Self":
        merged = deep_merge(DEFAULT_CONFIG, data)

        try:
            author = AuthorConfig.model_validate(merged["author"])
        except ValidationError as e:
            raise _to_config_error(e, section="author", source=source_label) from e

        try:
            logging_config = LoggingConfig.model_validate(merged["logging"])
        except ValidationError as e:
            raise _to_config_error(e, section="logging", source=source_label) from e

        config = cls(author=author, logging=logging_config)
        config._sources = sources
        return config

    @property
    def sources(self) -> list[ConfigSource]:
        """Return the sources that contributed to this configuration.

        Returns:
            List of ConfigSource objects, highest precedence first.
        """
        return list(self._sources)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Self":
        """Create configuration from a dictionary.

        Args:
            data: Dictionary of configuration values.

        Returns:
            Configuration object from the dictionary merged over defaults.

        Raises:
            ConfigValidationError: If validation fails.
        """
        return cls._build(data, ())

    @classmethod
    def from_file(cls, path: Path) -> "Self":
        """Load configuration from a specific file.

        Args:
            path: Path to the TOML config file.

        Returns:
            Configuration object from the specified file only.

        Raises:
            FileNotFoundError: If the file does not exist.
            ConfigLoadError: If the file cannot be parsed.
            ConfigValidationError: If validation fails.
        """
        data = read_toml_file(path)
        source = ConfigSource(name=ConfigSourceName.FILE, path=path, values=data)
        return cls._build(data, (source,), source_label=str(path))

    @classmethod
    def load(
        cls,
        *,
        config_path: Path | None = None,
        include_env: bool = True,
    ) -> "Self":
        """Load merged configuration from all sources.

        Precedence (lowest to highest): defaults, the TOML file named by
        ``config_path`` or ``GITVAULT_CONFIG``, ``GITVAULT_*`` environment
        variables.

        Args:
            config_path: Explicit path to a TOML config file. Must exist.
            include_env: Include environment variables as a source.

        Returns:
            Merged configuration object.

        Raises:
            ConfigLoadError: If the config file is missing or malformed.
            ConfigValidationError: If merged config fails validation.
        """
        sources: list[ConfigSource] = [
            ConfigSource(name=ConfigSourceName.DEFAULT, path=None, values=DEFAULT_CONFIG)
        ]
        merged: dict[str, Any] = {}

        if config_path is None and include_env:
            env_path = os.environ.get(CONFIG_PATH_ENV_VAR)
            if env_path:
                config_path = Path(env_path)

        if config_path is not None:
            try:
                values = read_toml_file(config_path)
            except FileNotFoundError as e:
                msg = f"Config file not found: {config_path}"
                raise ConfigLoadError(msg, path=config_path) from e
            sources.append(
                ConfigSource(name=ConfigSourceName.FILE, path=config_path, values=values)
            )
            merged = deep_merge(merged, values)

        if include_env:
            values = parse_env_vars()
            if values:
                sources.append(
                    ConfigSource(name=ConfigSourceName.ENV, path=None, values=values)
                )
                merged = deep_merge(merged, values)

        # Highest precedence first, matching discovery order
        return cls._build(merged, tuple(reversed(sources)))

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a plain dictionary."""
        return self.model_dump(mode="json")

    def to_toml(self) -> str:
        """Convert configuration to a TOML string."""
        return tomli_w.dumps(self.to_dict())
