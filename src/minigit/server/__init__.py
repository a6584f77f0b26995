"""minigit HTTP server.

``minigit.server:app`` is the ASGI application served by ``minigit serve``;
it is built from ``load_config()`` on first access.
"""

from typing import TYPE_CHECKING

from ._app import create_app, status_for
from ._context import ServerContext

if TYPE_CHECKING:
    from fastapi import FastAPI

__all__ = ["ServerContext", "app", "create_app", "status_for"]


def __getattr__(name: str) -> "FastAPI":
    if name == "app":
        application = create_app()
        globals()["app"] = application
        return application
    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
