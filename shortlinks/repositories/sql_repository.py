"""SQL link store for the link shortener service.

This module provides the SQLLinkStore class which persists LinkRecord rows
through SQLModel and an async SQLAlchemy engine. The unique constraint on
``links.code`` is the atomicity source for create-if-absent; no in-process
locking is involved.
"""

import logging
from typing import List, Optional

from sqlalchemy import select, text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine
from sqlmodel import SQLModel

from shortlinks.db.base import create_session_factory
from shortlinks.db.session import transaction_context
from shortlinks.models.link import LinkRecord, utcnow
from shortlinks.repositories.base import LinkStore, RepositoryError, StorageUnavailableError

logger = logging.getLogger(__name__)


def _is_unique_violation(error: IntegrityError) -> bool:
    message = str(error).lower()
    return "unique constraint" in message or "duplicate key" in message


class SQLLinkStore(LinkStore):
    """
    LinkStore backed by a relational database.
    
    Each operation runs in its own short transaction. Listing is a single
    ordered SELECT over the ``created_at`` index, which gives a consistent
    snapshot.
    """
    
    def __init__(self, engine: AsyncEngine):
        """
        Initialize the store.
        
        Args:
            engine: Async engine the store owns and disposes on close
        """
        self.engine = engine
        self.session_factory = create_session_factory(engine)
    
    async def initialize(self) -> None:
        """Create the ``links`` table and its indexes if missing."""
        try:
            async with self.engine.begin() as conn:
                await conn.run_sync(SQLModel.metadata.create_all)
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"Error creating link tables: {e}")
            raise StorageUnavailableError(f"Database error creating tables: {e}") from e
    
    async def close(self) -> None:
        await self.engine.dispose()
    
    async def ping(self) -> bool:
        try:
            async with self.engine.connect() as conn:
                result = await conn.execute(text("SELECT 1"))
                return result.scalar_one() == 1
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"Database health check failed: {e}")
            return False
    
    async def create_if_absent(self, record: LinkRecord) -> bool:
        """
        Insert ``record`` unless its code already exists.
        
        Args:
            record: The link to store
            
        Returns:
            True if inserted, False if the code is taken
            
        Raises:
            StorageUnavailableError: On database errors
            RepositoryError: On integrity errors unrelated to the code
        """
        try:
            async with transaction_context(self.session_factory) as db:
                record.created_at = utcnow()
                db.add(record)
            return True
        except IntegrityError as e:
            if _is_unique_violation(e):
                logger.debug(f"Code '{record.code}' already stored")
                return False
            raise RepositoryError(f"Database integrity error creating link: {e}") from e
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"Error creating link '{record.code}': {e}")
            raise StorageUnavailableError(f"Database error creating link: {e}") from e
    
    async def get_by_code(self, code: str) -> Optional[LinkRecord]:
        try:
            async with self.session_factory() as db:
                query = select(LinkRecord).where(LinkRecord.code == code)
                result = await db.execute(query)
                return result.scalar_one_or_none()
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"Error retrieving link by code: {e}")
            raise StorageUnavailableError(f"Database error retrieving link: {e}") from e
    
    async def list_all(self) -> List[LinkRecord]:
        try:
            async with self.session_factory() as db:
                query = select(LinkRecord).order_by(
                    LinkRecord.created_at.desc(), LinkRecord.id.desc()
                )
                result = await db.execute(query)
                return list(result.scalars().all())
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"Error listing links: {e}")
            raise StorageUnavailableError(f"Database error listing links: {e}") from e
