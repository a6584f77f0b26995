# pyright: reportAny=false
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from minigit.config import load_config
from minigit.exceptions import ConflictError, NotFoundError, RepositoryError, ValidationError

from ._api import api_router
from ._context import ServerContext
from ._git import create_git_router
from ._pages import router as pages_router
from ._schemas import ErrorResponse

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from minigit.config import Config

GENERIC_ERROR_MESSAGE = "Internal server error"


def status_for(exc: RepositoryError) -> int:
    """Map a repository error to its HTTP status."""
    if isinstance(exc, ValidationError):
        return 400
    if isinstance(exc, NotFoundError):
        return 404
    if isinstance(exc, ConflictError):
        return 409
    return 500


@asynccontextmanager
async def lifespan(app: FastAPI) -> "AsyncGenerator[None]":
    """Create the storage root and log startup and shutdown."""
    context: ServerContext = app.state.context
    context.storage.ensure_root()
    context.logger.info(
        "server_started",
        storage=str(context.storage.root),
        git_prefix=context.config.server.git_prefix,
    )
    yield
    context.logger.info("server_stopped")


async def handle_repository_error(request: Request, exc: Exception) -> JSONResponse:
    """Render a repository error as an ErrorResponse.

    Client errors carry their own message. IO and internal errors are logged
    with a traceback and reported generically.
    """
    context: ServerContext = request.app.state.context
    error = exc if isinstance(exc, RepositoryError) else RepositoryError(str(exc))
    status = status_for(error)

    if error.client_facing:
        context.logger.info(
            "request_rejected",
            path=request.url.path,
            error=error.code,
            message=str(error),
        )
        message = str(error)
    else:
        context.logger.error(
            "request_failed",
            path=request.url.path,
            error=error.code,
            exc_info=error,
        )
        message = GENERIC_ERROR_MESSAGE

    body = ErrorResponse(error=error.code, message=message)
    return JSONResponse(status_code=status, content=body.model_dump(mode="json"))


def create_app(config: "Config | None" = None, *, context: ServerContext | None = None) -> FastAPI:
    """Build the FastAPI application.

    Args:
        config: Configuration; loaded with ``load_config`` when omitted.
        context: Prebuilt collaborators, mainly for tests.

    Returns:
        The application.
    """
    if context is None:
        context = ServerContext.from_config(config if config is not None else load_config())

    app = FastAPI(docs_url=None, redoc_url="/api-docs", lifespan=lifespan)
    app.state.context = context
    app.add_exception_handler(RepositoryError, handle_repository_error)
    app.include_router(router=api_router)
    app.include_router(router=create_git_router(context.config.server.git_prefix))
    app.include_router(router=pages_router)
    return app
