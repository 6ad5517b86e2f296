"""Health check endpoint — no database access, always available."""

from fastapi import APIRouter

from app.config import get_settings
from app.domain.modules import MODULES

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check() -> dict:
    """Returns the application status and the record modules it serves."""
    settings = get_settings()
    return {
        "status": "healthy",
        "version": settings.app_version,
        "environment": settings.app_env,
        "modules": sorted(MODULES),
    }
