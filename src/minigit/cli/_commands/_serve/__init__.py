# pyright: reportUnusedCallResult=false
"""minigit server command."""

import os
from typing import Annotated, Literal

from cyclopts import App, Parameter

from minigit.cli._commands._context import CLIContext

app = App(name="serve", help="Run the minigit HTTP server", help_on_error=True)

LogLevel = Literal["critical", "error", "warning", "info", "debug", "trace"]


@app.default
def serve(
    *,
    host: Annotated[
        str | None,
        Parameter(help="Bind socket to this host. Defaults to server.host."),
    ] = None,
    port: Annotated[
        int | None,
        Parameter(help="Bind socket to this port. Defaults to server.port."),
    ] = None,
    reload: Annotated[
        bool,
        Parameter(help="Enable auto-reload."),
    ] = False,
    log_level: Annotated[
        LogLevel,
        Parameter(help="Uvicorn log level."),
    ] = "info",
    proxy_headers: Annotated[
        bool,
        Parameter(help="Trust X-Forwarded-Proto and X-Forwarded-For."),
    ] = True,
    forwarded_allow_ips: Annotated[
        str | None,
        Parameter(help="Comma-separated list of IPs to trust with proxy headers."),
    ] = None,
) -> None:
    """Run the minigit server using uvicorn."""
    import uvicorn

    ctx = CLIContext.get_current()
    server = ctx.config.server
    effective_host = host if host is not None else server.host
    effective_port = port if port is not None else server.port

    config: dict[str, object] = {
        "host": effective_host,
        "port": effective_port,
        "log_level": log_level,
        "proxy_headers": proxy_headers,
    }
    if forwarded_allow_ips is not None:
        config["forwarded_allow_ips"] = forwarded_allow_ips

    if reload:
        # The reloader re-imports the app in a fresh process.
        if ctx.config_path is not None:
            os.environ["MINIGIT_CONFIG"] = str(ctx.config_path)
        config["app"] = "minigit.server:app"
        config["reload"] = True
    else:
        from minigit.server import create_app

        config["app"] = create_app(ctx.config)

    if ctx.logger is not None:
        ctx.logger.info("serve_started", host=effective_host, port=effective_port)
    print(f"Starting minigit server on {effective_host}:{effective_port}")  # noqa: T201
    uvicorn.run(**config)  # pyright: ignore[reportArgumentType]
