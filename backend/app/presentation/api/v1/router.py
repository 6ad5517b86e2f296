"""V1 API router — aggregates all v1 endpoint routers."""

from fastapi import APIRouter

from app.presentation.api.v1.endpoints.health import router as health_router
from app.presentation.api.v1.endpoints.plot_pricing import router as plot_pricing_router
from app.presentation.api.v1.endpoints.records import router as records_router

router = APIRouter(prefix="/v1")
router.include_router(health_router)
# Fixed paths first; the records router matches any "/{module}".
router.include_router(plot_pricing_router)
router.include_router(records_router)
