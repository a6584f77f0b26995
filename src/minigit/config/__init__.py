"""minigit configuration.

This module provides the public API for minigit configuration management:
the frozen pydantic models and the loader that layers built-in defaults, a
TOML file and ``MINIGIT_*`` environment variables.

Example:
    >>> from minigit.config import load_config
    >>> config = load_config()
    >>> config.storage.default_branch
    'main'
"""

import os
from pathlib import Path

import pydantic

from minigit.exceptions import ConfigError, ConfigLoadError

from ._loader import (
    ENV_PREFIX,
    deep_merge,
    parse_env_value,
    parse_env_vars,
    read_toml_file,
    set_nested_key,
)
from ._models import (
    Config,
    LogFormat,
    LoggingConfig,
    LogLevel,
    PreviewConfiguration,
    ServerConfiguration,
    StorageConfiguration,
)

CONFIG_ENV_VAR = "MINIGIT_CONFIG"
DEFAULT_CONFIG_FILE = "minigit.toml"


def _discover_config_file(config_path: Path | None) -> Path | None:
    if config_path is not None:
        if not config_path.is_file():
            msg = f"Config file not found: {config_path}"
            raise ConfigLoadError(msg, path=config_path)
        return config_path

    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        path = Path(env_path)
        if not path.is_file():
            msg = f"Config file not found: {path} (from {CONFIG_ENV_VAR})"
            raise ConfigLoadError(msg, path=path)
        return path

    local = Path.cwd() / DEFAULT_CONFIG_FILE
    return local if local.is_file() else None


def load_config(
    config_path: Path | None = None,
    *,
    include_env: bool = True,
) -> Config:
    """Load the process configuration.

    Sources, lowest precedence first: model defaults, the TOML file
    (``config_path``, else ``$MINIGIT_CONFIG``, else ``./minigit.toml`` if
    present), then ``MINIGIT_<SECTION>__<KEY>`` environment variables.

    Args:
        config_path: Explicit configuration file. Must exist when given.
        include_env: Whether to apply environment variable overrides.

    Returns:
        The validated, frozen configuration.

    Raises:
        ConfigLoadError: If the file is missing, unparseable or invalid.
    """
    data: dict[str, object] = {}

    source = _discover_config_file(config_path)
    if source is not None:
        data = deep_merge(data, read_toml_file(source))

    if include_env:
        data = deep_merge(data, parse_env_vars())

    try:
        return Config.from_dict(data)
    except pydantic.ValidationError as e:
        msg = f"Invalid configuration: {e}"
        raise ConfigLoadError(msg, path=source) from e


__all__ = [
    "CONFIG_ENV_VAR",
    "DEFAULT_CONFIG_FILE",
    "ENV_PREFIX",
    "Config",
    "ConfigError",
    "ConfigLoadError",
    "LogFormat",
    "LogLevel",
    "LoggingConfig",
    "PreviewConfiguration",
    "ServerConfiguration",
    "StorageConfiguration",
    "deep_merge",
    "load_config",
    "parse_env_value",
    "parse_env_vars",
    "read_toml_file",
    "set_nested_key",
]
