"""Database setup and connection management."""

import logging
from pathlib import Path
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from ..config import get_config

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


def get_database_url(db_path: Optional[str] = None) -> str:
    """Get the database URL from configuration."""
    if db_path is None:
        db_path = get_config().database.path

    # Ensure directory exists
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    return f"sqlite+aiosqlite:///{db_path}"


async def init_db(database_url: Optional[str] = None) -> AsyncEngine:
    """Create the engine and any missing tables.

    The caller owns the returned engine and disposes of it on shutdown.
    """
    if database_url is None:
        database_url = get_database_url()

    engine = create_async_engine(
        database_url,
        echo=get_config().logging.level.lower() == "debug",
    )

    # Import all models to register them
    from . import list_column, ticket  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    logger.debug(f"Database ready at {database_url}")
    return engine
