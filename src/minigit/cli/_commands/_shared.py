# pyright: reportExplicitAny=false
"""Shared CLI utilities for commands.

This module provides common utilities used across CLI command implementations:
- Standardized exit codes and the mapping from repository errors
- JSON output formatting
- Console utilities for error handling
"""

from enum import IntEnum
from typing import TYPE_CHECKING, Any, Never

from minigit.exceptions import (
    ConflictError,
    NotFoundError,
    RepositoryError,
    RepositoryIOError,
    ValidationError,
)

if TYPE_CHECKING:
    from rich.console import Console

FormattableData = dict[str, Any] | list[Any]

__all__ = [
    "ExitCode",
    "FormattableData",
    "exit_code_for",
    "exit_with_error",
    "exit_with_repository_error",
    "format_json",
    "get_error_console",
]


class ExitCode(IntEnum):
    """Standard exit codes for minigit CLI commands."""

    SUCCESS = 0
    LOAD_ERROR = 1
    VALIDATION_ERROR = 2
    NOT_FOUND = 3
    IO_ERROR = 4
    INTERNAL_ERROR = 5
    CONFLICT = 6


def exit_code_for(exc: RepositoryError) -> ExitCode:
    if isinstance(exc, ValidationError):
        return ExitCode.VALIDATION_ERROR
    if isinstance(exc, NotFoundError):
        return ExitCode.NOT_FOUND
    if isinstance(exc, ConflictError):
        return ExitCode.CONFLICT
    if isinstance(exc, RepositoryIOError):
        return ExitCode.IO_ERROR
    return ExitCode.INTERNAL_ERROR


def format_json(data: FormattableData, *, indent: bool = True) -> str:
    """Format data as JSON.

    Args:
        data: Dictionary or list to format as JSON.
        indent: Whether to pretty-print with indentation.

    Returns:
        JSON-formatted string representation.
    """
    import orjson

    options = orjson.OPT_INDENT_2 if indent else 0
    return orjson.dumps(data, option=options).decode("utf-8")


def get_error_console() -> "Console":
    """Get a Rich console configured for error output to stderr."""
    from rich.console import Console

    return Console(stderr=True)


def exit_with_error(
    message: str,
    code: ExitCode = ExitCode.INTERNAL_ERROR,
    *,
    console: "Console | None" = None,
) -> Never:
    """Print an error message and exit with the specified code.

    Args:
        message: The error message to display.
        code: The exit code to use (defaults to INTERNAL_ERROR).
        console: Optional Rich console for output. If not provided,
            a new stderr console will be created.

    Raises:
        SystemExit: Always raised with the specified exit code.
    """
    if console is None:
        console = get_error_console()

    console.print(f"[red]Error:[/red] {message}", markup=True, highlight=False)
    raise SystemExit(code)


def exit_with_repository_error(
    exc: RepositoryError, *, console: "Console | None" = None
) -> Never:
    """Report a repository error and exit with its mapped code."""
    exit_with_error(str(exc), exit_code_for(exc), console=console)
