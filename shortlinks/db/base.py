"""Database base configuration for SQLAlchemy with SQLModel.

This module provides engine and session factory construction for the
SQL link store. Engines are created per store instance rather than at
import time so tests and alternative backends never touch a database.
"""

from typing import Any, Dict
import logging

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from shortlinks.core.config import EnvironmentType, Settings, settings as default_settings

logger = logging.getLogger(__name__)


def get_engine_config(database_url: str, settings: Settings = default_settings) -> Dict[str, Any]:
    """Get engine keyword arguments for the given database URL.
    
    SQLite engines use SQLAlchemy's default pool for the driver; server
    databases get the configured connection pool.
    
    Returns:
        Dict: Engine configuration parameters.
    """
    config: Dict[str, Any] = {"echo": settings.DB_ECHO}
    url = make_url(database_url)
    
    if url.get_backend_name() == "sqlite":
        config["connect_args"] = {"check_same_thread": False}
        return config
    
    config.update(
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_POOL_MAX_OVERFLOW,
        pool_timeout=settings.DB_POOL_TIMEOUT,
        pool_recycle=settings.DB_POOL_RECYCLE,
        pool_pre_ping=settings.ENVIRONMENT != EnvironmentType.TESTING,
    )
    return config


def create_engine_from_url(database_url: str, settings: Settings = default_settings) -> AsyncEngine:
    """Create and configure an async SQLAlchemy engine.
    
    Returns:
        AsyncEngine: Configured SQLAlchemy async engine instance.
    """
    engine_config = get_engine_config(database_url, settings)
    logger.info(f"Creating database engine for {make_url(database_url).render_as_string(hide_password=True)}")
    return create_async_engine(database_url, **engine_config)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker:
    """Async session factory bound to ``engine``."""
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )
