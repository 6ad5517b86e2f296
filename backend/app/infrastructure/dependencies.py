"""FastAPI dependency injection — wires infrastructure to application layer."""

from collections.abc import AsyncGenerator
from functools import lru_cache

from fastapi import Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import get_settings
from app.application.services import (
    FilterBuilder,
    Paginator,
    PlotPricingService,
    QueryEngine,
    RecordService,
)
from app.domain.exceptions import EntityNotFoundError
from app.domain.modules import PLOT_CATEGORIES, get_module
from app.domain.entities import ModuleConfig
from app.infrastructure.database.models import MODELS
from app.infrastructure.database.repositories import SQLAlchemyRecordStore
from app.infrastructure.database.session import get_db_session
from app.infrastructure.identifiers import UUIDIdValidator


@lru_cache
def get_id_validator() -> UUIDIdValidator:
    return UUIDIdValidator()


@lru_cache
def get_query_engine() -> QueryEngine:
    """One stateless engine shared by every module and request."""
    settings = get_settings()
    return QueryEngine(
        filter_builder=FilterBuilder(get_id_validator()),
        paginator=Paginator(max_limit=settings.max_page_limit),
    )


def build_record_service(config: ModuleConfig, session: AsyncSession) -> RecordService:
    store = SQLAlchemyRecordStore(session, MODELS[config.name])
    return RecordService(config, store, get_query_engine(), get_id_validator())


def get_module_config(module: str) -> ModuleConfig:
    """Resolves the ``{module}`` path segment; unknown modules are a 404."""
    try:
        return get_module(module)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


async def get_record_service(
    config: ModuleConfig = Depends(get_module_config),
    session: AsyncSession = Depends(get_db_session),
) -> AsyncGenerator[RecordService, None]:
    """Provides a RecordService for the requested module with its store wired up."""
    yield build_record_service(config, session)


async def get_plot_pricing_service(
    session: AsyncSession = Depends(get_db_session),
) -> AsyncGenerator[PlotPricingService, None]:
    """Provides a PlotPricingService over the plot category store."""
    yield PlotPricingService(build_record_service(PLOT_CATEGORIES, session))
