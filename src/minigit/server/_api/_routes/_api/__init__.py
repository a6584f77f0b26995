from fastapi import APIRouter

from ._browse import router as browse_router
from ._health import router as health_router
from ._repos import router as repos_router

router = APIRouter(prefix="/api")

router.include_router(health_router)
router.include_router(repos_router)
router.include_router(browse_router)
