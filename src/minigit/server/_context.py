"""Per-application collaborators shared by all request handlers."""

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Annotated

from fastapi import Depends, Request

from minigit.exceptions import RepositoryNotFoundError
from minigit.gateway import AccessAuditor, RepositoryResolver
from minigit.preview import ContentClassifier
from minigit.repository import GitRepositoryService, RepositoryStorage
from minigit.server._urls import build_base_url, build_clone_url
from minigit.utils import create_access_logger, create_server_logger

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger

    from minigit.config import Config


@dataclass(frozen=True, slots=True)
class ServerContext:
    """Everything a request handler needs, built once at startup.

    Attributes:
        config: The process configuration.
        storage: Repository storage under ``config.storage.dir``.
        service: Browsing and branch operations.
        classifier: Content classifier for previews and downloads.
        resolver: Repository resolver for the Git protocol endpoints.
        logger: Application logger.
    """

    config: "Config"
    storage: RepositoryStorage
    service: GitRepositoryService
    classifier: ContentClassifier
    resolver: RepositoryResolver
    logger: "FilteringBoundLogger"

    @classmethod
    def from_config(
        cls,
        config: "Config",
        *,
        logger: "FilteringBoundLogger | None" = None,
        access_logger: "FilteringBoundLogger | None" = None,
    ) -> "ServerContext":
        logger = logger if logger is not None else create_server_logger(config.logging)
        if access_logger is None:
            access_logger = create_access_logger(config.logging)

        storage = RepositoryStorage.from_config(config.storage, logger)
        return cls(
            config=config,
            storage=storage,
            service=GitRepositoryService.from_config(config.storage, logger),
            classifier=ContentClassifier(config.preview, logger=logger),
            resolver=RepositoryResolver(storage, AccessAuditor(access_logger), logger=logger),
            logger=logger,
        )

    def repository_path(self, name: str) -> Path:
        """Resolve an existing repository's directory from a URL name.

        Raises:
            ValidationError: If the name is invalid.
            RepositoryNotFoundError: If the repository does not exist.
        """
        path = self.storage.get_repository_path(name)
        if not path.is_dir():
            msg = f"Repository not found: {path.name}"
            raise RepositoryNotFoundError(msg, name=path.name)
        return path

    def clone_url(self, request: Request, canonical_name: str) -> str:
        headers = {k.lower(): v for k, v in request.headers.items()}
        base = build_base_url(
            headers,
            scheme=request.url.scheme,
            server_host=request.url.hostname or self.config.server.host,
            server_port=request.url.port,
        )
        return build_clone_url(base, self.config.server.git_prefix, canonical_name)


def get_context(request: Request) -> ServerContext:
    return request.app.state.context


Context = Annotated[ServerContext, Depends(get_context)]
