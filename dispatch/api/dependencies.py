"""FastAPI dependency injection helpers."""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from dispatch.infrastructure.database import async_session_factory
from dispatch.services.dispatcher import DispatchService


async def get_db() -> AsyncSession:  # type: ignore[misc]
    """Yield an async DB session; commit on success, rollback on error."""
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


def get_dispatch_service(db: AsyncSession = Depends(get_db)) -> DispatchService:
    return DispatchService(db)
