"""FastAPI dependencies for common resources."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from cableindex.config import Settings, get_settings
from cableindex.core.database import get_session, get_session_factory
from cableindex.services import LifecycleService

# Type aliases for dependency injection
DbSession = Annotated[AsyncSession, Depends(get_session)]
AppSettings = Annotated[Settings, Depends(get_settings)]
SessionFactory = Annotated[async_sessionmaker[AsyncSession], Depends(get_session_factory)]


def get_lifecycle_service(factory: SessionFactory, settings: AppSettings) -> LifecycleService:
    """Get LifecycleService instance; it opens its own transactions."""
    return LifecycleService(factory, settings)


LifecycleDep = Annotated[LifecycleService, Depends(get_lifecycle_service)]
