"""Create and drop the application tables through the async engine."""

import logging

from kompagnon.database.config.connection_engine import connection_engine, metadata
from kompagnon.database.entities.user import User  # noqa: F401  (registers the table on metadata)

logger = logging.getLogger(__name__)


async def create_schema() -> None:
    """Create every table registered on `metadata` that does not exist yet."""
    async with connection_engine.begin() as connection:
        await connection.run_sync(metadata.create_all)
    logger.info("Database tables created")


async def drop_schema() -> None:
    async with connection_engine.begin() as connection:
        await connection.run_sync(metadata.drop_all)
    logger.info("Database tables dropped")
