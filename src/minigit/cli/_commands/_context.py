# pyright: reportUnusedCallResult=false
# ruff: noqa: TC003  # Path needed at runtime for dataclass field
"""CLI context for global state management.

The CLIContext is set once at CLI startup and made available to all commands
via contextvars.
"""

import contextvars
from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger

    from minigit.config import Config
    from minigit.repository import GitRepositoryService, RepositoryStorage


class OutputFormat(StrEnum):
    """Supported output formats for commands."""

    TABLE = "table"
    JSON = "json"


_current_cli_context: "contextvars.ContextVar[CLIContext | None]" = contextvars.ContextVar(
    "cli_context", default=None
)


@dataclass(frozen=True, slots=True)
class CLIContext:
    """Global CLI context with configuration and options.

    Attributes:
        config: Loaded configuration object.
        config_path: Explicit configuration file, if one was given.
        logger: Structured logger for CLI commands.
    """

    config: "Config" = field(repr=False)
    config_path: Path | None = None
    logger: "FilteringBoundLogger | None" = field(default=None, repr=False)

    @classmethod
    def get_current(cls) -> "CLIContext":
        """Get the active CLIContext, or one with default configuration."""
        ctx = _current_cli_context.get()
        if ctx is not None:
            return ctx

        from minigit.config import Config

        return cls(config=Config.from_dict({}))

    @classmethod
    def set_current(cls, ctx: "CLIContext") -> None:
        _current_cli_context.set(ctx)

    @classmethod
    def reset(cls) -> None:
        """Reset to default context."""
        _current_cli_context.set(None)

    def storage(self) -> "RepositoryStorage":
        from minigit.repository import RepositoryStorage

        return RepositoryStorage.from_config(self.config.storage, self.logger)

    def service(self) -> "GitRepositoryService":
        from minigit.repository import GitRepositoryService

        return GitRepositoryService.from_config(self.config.storage, self.logger)
