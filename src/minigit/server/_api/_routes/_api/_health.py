from fastapi import APIRouter

from minigit import __version__
from minigit.exceptions import RepositoryIOError
from minigit.server._context import Context
from minigit.server._schemas import HealthResponse

router = APIRouter(prefix="", tags=["health"])


@router.get("/health")
def get_health(context: Context) -> HealthResponse:
    storage = context.storage
    accessible = storage.root.is_dir()
    try:
        repositories = len(storage.list_repositories())
    except RepositoryIOError:
        accessible = False
        repositories = 0

    return HealthResponse(
        status="healthy" if accessible else "degraded",
        storage=str(storage.root),
        storage_accessible=accessible,
        repositories=repositories,
        version=__version__,
    )
