"""minigit CLI commands."""
# pyright: reportUnusedCallResult=false

from typing import TYPE_CHECKING

from ._context import CLIContext, OutputFormat
from ._repo import app as repo_app
from ._serve import app as serve_app
from ._shared import (
    ExitCode,
    FormattableData,
    exit_code_for,
    exit_with_error,
    exit_with_repository_error,
    format_json,
    get_error_console,
)

if TYPE_CHECKING:
    from cyclopts import App

__all__ = [
    "CLIContext",
    "ExitCode",
    "FormattableData",
    "OutputFormat",
    "exit_code_for",
    "exit_with_error",
    "exit_with_repository_error",
    "format_json",
    "get_error_console",
    "register_commands",
    "repo_app",
    "serve_app",
]


def register_commands(app: "App") -> None:
    app.command(repo_app)
    app.command(serve_app)
