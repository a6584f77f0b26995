"""Server configuration model."""

from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field


class ServerConfiguration(BaseModel):
    """HTTP server configuration.

    Attributes:
        host: Interface the server binds to.
        port: Port the server binds to.
        git_prefix: URL prefix of the Git smart-HTTP endpoints.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    host: str = "127.0.0.1"
    port: int = Field(default=8080, ge=0, le=65535)
    git_prefix: str = Field(default="/git", pattern=r"^/[A-Za-z0-9_/-]*[A-Za-z0-9_-]$")
