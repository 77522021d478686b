from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession

from libs.common.logging import get_logger
from libs.db.config import AsyncSessionLocal

logger = get_logger(__name__)


async def get_async_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Request-scoped session. Services commit their own work; anything left
    uncommitted when the handler raises is rolled back here.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
        except Exception:
            if session.in_transaction():
                logger.warning("Rolling back uncommitted changes after an error")
                await session.rollback()
            raise
