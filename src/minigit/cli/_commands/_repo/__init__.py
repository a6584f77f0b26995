# pyright: reportUnusedCallResult=false, reportUnusedFunction=false
# ruff: noqa: FBT002
"""Repository management and browsing commands."""

import sys
from typing import Annotated

from cyclopts import Parameter
from rich.console import Console
from rich.table import Table

from minigit.cli._commands._context import CLIContext, OutputFormat
from minigit.cli._commands._shared import exit_with_repository_error, format_json
from minigit.exceptions import RepositoryError
from minigit.repository import DEFAULT_LOG_LIMIT
from minigit.utils import format_bytes

from ._app import app

__all__ = ["app"]

FormatOption = Annotated[
    OutputFormat,
    Parameter(name=["--format", "-f"], help="Output format"),
]
BranchOption = Annotated[
    str | None,
    Parameter(name=["--branch", "-b"], help="Branch, ref or commit id (default branch if omitted)"),
]


@app.command(name="create")
def _create(name: str) -> None:
    """Create an empty bare repository."""
    ctx = CLIContext.get_current()
    try:
        path = ctx.storage().create_repository(name)
    except RepositoryError as e:
        exit_with_repository_error(e)
    Console().print(f"[green]Created[/green] {path.name} at {path}")


@app.command(name="list")
def _list(output_format: FormatOption = OutputFormat.TABLE) -> None:
    """List hosted repositories."""
    ctx = CLIContext.get_current()
    storage = ctx.storage()
    try:
        names = storage.list_repositories()
        sizes = {name: storage.repository_size(name) for name in names}
    except RepositoryError as e:
        exit_with_repository_error(e)

    if output_format is OutputFormat.JSON:
        print(format_json([{"name": n, "size": sizes[n]} for n in names]))  # noqa: T201
        return

    console = Console()
    if not names:
        console.print("[dim]No repositories[/dim]")
        return
    table = Table("Name", "Size")

    for name in names:
        table.add_row(name, format_bytes(sizes[name]))
    console.print(table)


@app.command(name="branches")
def _branches(name: str, output_format: FormatOption = OutputFormat.TABLE) -> None:
    """List branches, marking the default one."""
    ctx = CLIContext.get_current()
    try:
        path = ctx.storage().get_repository_path(name)
        branches = ctx.service().get_branches(path)
    except RepositoryError as e:
        exit_with_repository_error(e)

    if output_format is OutputFormat.JSON:
        print(  # noqa: T201
            format_json(
                [
                    {
                        "name": b.name,
                        "default": b.is_default,
                        "commit": b.last_commit_id,
                        "message": b.last_commit_message,
                        "date": b.last_commit_date.isoformat(),
                    }
                    for b in branches
                ]
            )
        )
        return

    console = Console()
    if not branches:
        console.print("[dim]No branches[/dim]")
        return
    table = Table("", "Branch", "Commit", "Message")
    for b in branches:
        marker = "*" if b.is_default else ""
        table.add_row(marker, b.short_name, b.last_commit_short_id, b.last_commit_message)
    console.print(table)


@app.command(name="log")
def _log(
    name: str,
    branch: BranchOption = None,
    max_count: Annotated[
        int, Parameter(name=["--max-count", "-n"], help="Maximum number of commits")
    ] = DEFAULT_LOG_LIMIT,
) -> None:
    """Show commit history, newest first."""
    ctx = CLIContext.get_current()
    try:
        path = ctx.storage().get_repository_path(name)
        commits = ctx.service().get_commit_log(path, branch, max_count)
    except RepositoryError as e:
        exit_with_repository_error(e)

    console = Console()
    for commit in commits:
        console.print(
            f"[yellow]{commit.short_id}[/yellow] {commit.short_message} "
            f"[dim]({commit.author_name}, {commit.authored_at:%Y-%m-%d %H:%M})[/dim]",
            highlight=False,
        )


@app.command(name="ls")
def _ls(name: str, path: str = "", branch: BranchOption = None) -> None:
    """List a directory of a branch."""
    ctx = CLIContext.get_current()
    try:
        repo_path = ctx.storage().get_repository_path(name)
        entries = ctx.service().get_file_list(repo_path, branch, path)
    except RepositoryError as e:
        exit_with_repository_error(e)

    table = Table("Name", "Size", box=None)
    for entry in entries:
        label = f"[bold blue]{entry.name}/[/bold blue]" if entry.is_directory else entry.name
        table.add_row(label, entry.size_formatted)
    Console().print(table)


@app.command(name="cat")
def _cat(name: str, path: str, branch: BranchOption = None) -> None:
    """Write a file's raw bytes to stdout."""
    ctx = CLIContext.get_current()
    try:
        repo_path = ctx.storage().get_repository_path(name)
        content = ctx.service().get_file_content(repo_path, branch, path)
    except RepositoryError as e:
        exit_with_repository_error(e)

    sys.stdout.buffer.write(content)
    sys.stdout.buffer.flush()


@app.command(name="branch")
def _branch(
    name: str,
    new_branch: str,
    from_branch: Annotated[
        str | None,
        Parameter(name=["--from-branch", "--from"], help="Source branch (default branch if omitted)"),
    ] = None,
) -> None:
    """Create a branch from another branch's head."""
    ctx = CLIContext.get_current()
    try:
        repo_path = ctx.storage().get_repository_path(name)
        ref = ctx.service().create_branch(repo_path, from_branch, new_branch)
    except RepositoryError as e:
        exit_with_repository_error(e)

    Console().print(
        f"[green]Created branch[/green] {ref.short_name} at {(ref.object_id or '')[:8]}",
        highlight=False,
    )
