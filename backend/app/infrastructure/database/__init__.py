from .base import Base
from .session import (
    async_session_factory,
    build_engine,
    create_tables,
    engine,
    get_db_session,
)
from .models import MODELS

__all__ = [
    "Base",
    "engine",
    "async_session_factory",
    "get_db_session",
    "build_engine",
    "create_tables",
    "MODELS",
]
