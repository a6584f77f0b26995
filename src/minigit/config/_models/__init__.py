"""Configuration models."""

from ._common import LogFormat, LogLevel
from ._config import Config
from ._logging import LoggingConfig
from ._preview import PreviewConfiguration
from ._server import ServerConfiguration
from ._storage import StorageConfiguration

__all__ = [
    "Config",
    "LogFormat",
    "LogLevel",
    "LoggingConfig",
    "PreviewConfiguration",
    "ServerConfiguration",
    "StorageConfiguration",
]
