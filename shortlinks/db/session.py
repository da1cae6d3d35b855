"""Session management for database operations.

This module provides a transaction context used by the SQL link store:
each store operation runs in its own session that commits on success and
rolls back on error or cancellation.
"""

from typing import AsyncGenerator
import logging
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

logger = logging.getLogger(__name__)


@asynccontextmanager
async def transaction_context(
    session_factory: async_sessionmaker,
) -> AsyncGenerator[AsyncSession, None]:
    """Context manager for a database session with transaction support.
    
    Automatically commits on successful completion or rolls back on error.
    Cancellation (for example a caller deadline expiring) is a
    ``BaseException`` and is rolled back too, so no partial write survives.
    
    Yields:
        AsyncSession: SQLAlchemy async session
    
    Example:
        ```python
        async with transaction_context(session_factory) as session:
            session.add(LinkRecord(code="abc", original_url="https://example.com"))
            # Commits automatically on context exit if no errors
        ```
    """
    async with session_factory() as session:
        try:
            yield session
            await session.commit()
        except BaseException:
            await session.rollback()
            raise
