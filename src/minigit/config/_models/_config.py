# pyright: reportExplicitAny=false, reportAny=false
"""Configuration container with typed access.

This module provides the main Config class that serves as the primary
interface for accessing minigit configuration values.
"""

from typing import Any, ClassVar, Self

from pydantic import BaseModel, ConfigDict, Field

from minigit.config._models._logging import LoggingConfig
from minigit.config._models._preview import PreviewConfiguration
from minigit.config._models._server import ServerConfiguration
from minigit.config._models._storage import StorageConfiguration


class Config(BaseModel):
    """Root configuration object.

    Built once at startup and passed by reference to every component. The
    model is frozen, so it is safe to share across request threads.

    Attributes:
        storage: Repository storage settings.
        preview: Content classification settings.
        logging: Logging settings.
        server: HTTP server settings.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    storage: StorageConfiguration = Field(default_factory=StorageConfiguration)
    preview: PreviewConfiguration = Field(default_factory=PreviewConfiguration)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    server: ServerConfiguration = Field(default_factory=ServerConfiguration)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        """Create a Config from a nested dictionary.

        Args:
            data: Configuration dictionary, as read from TOML.

        Returns:
            Validated Config instance.

        Raises:
            pydantic.ValidationError: If any value fails validation.
        """
        return cls.model_validate(data)
