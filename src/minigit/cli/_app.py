"""The command-line interface for minigit."""
# ruff: noqa: TC003  # Path needed at runtime for cyclopts parameter parsing

from pathlib import Path
from typing import Annotated

from cyclopts import App, Parameter
from rich.console import Console

from minigit import __version__
from minigit.config import load_config
from minigit.exceptions import ConfigLoadError
from minigit.utils import create_logger

from ._commands import ExitCode, exit_with_error, register_commands
from ._commands._context import CLIContext

APP_HELP = "A small Git hosting server."


def create_app(
    console: Console | None = None,
    error_console: Console | None = None,
    *,
    exit_on_error: bool = True,
) -> App:
    if console is None:
        console = Console()
    if error_console is None:
        error_console = Console(stderr=True)
    app = App(
        name="minigit",
        help=APP_HELP,
        version=__version__,
        help_on_error=True,
        console=console,
        error_console=error_console,
        exit_on_error=exit_on_error,
    )

    @app.meta.default
    def _default(  # pyright: ignore[reportUnusedFunction]
        *tokens: Annotated[str, Parameter(show=False, allow_leading_hyphen=True)],
        config: Annotated[
            Path | None, Parameter(name="--config", help="Path to config file")
        ] = None,
    ) -> None:
        """Launch minigit with global options.

        Args:
            tokens: Command tokens to pass to subcommands.
            config: Explicit path to config file.
        """
        try:
            loaded_config = load_config(config)
        except ConfigLoadError as e:
            exit_with_error(str(e), ExitCode.LOAD_ERROR, console=error_console)

        logging_config = loaded_config.logging
        cli_logger = create_logger(
            level=str(logging_config.level),
            log_format="text" if str(logging_config.format) == "text" else "json",
            log_file=logging_config.file,
        )

        CLIContext.set_current(
            CLIContext(config=loaded_config, config_path=config, logger=cli_logger)
        )
        try:
            app(tokens)
        finally:
            CLIContext.reset()

    register_commands(app)
    return app


def main() -> None:
    """Default entrypoint for the `minigit` CLI."""
    app = create_app()
    app.meta()


if __name__ == "__main__":
    main()
