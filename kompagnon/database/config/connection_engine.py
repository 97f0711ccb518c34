"""
Connection Engine (SQLAlchemy asyncio)

Purpose
-------
Centralizes database initialization for the application:
- Builds the SQLAlchemy connection URL from environment-backed settings.
- Creates the async Engine (connection pool + SQL execution entry point).
- Defines shared MetaData for table and schema objects.
- Exposes a Declarative Base class for ORM models.

Notes
-----
- Uses `URL.create(...)` to avoid hardcoding credentials and to keep configuration
  environment-driven (e.g., via `.env`, container secrets, or deployment vars).
- All ORM models must inherit from `declarativeBase` so that their tables are
  registered on `metadata`.
"""

from sqlalchemy.engine import URL
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import declarative_base
from sqlalchemy.schema import MetaData

from kompagnon.database.config.config import settings

connection_url = URL.create(
    drivername=settings.DB_DRIVER_NAME,   # e.g., "postgresql+asyncpg", "sqlite+aiosqlite"
    username=settings.DB_USERNAME,
    password=settings.DB_PASSWORD,
    host=settings.DB_HOST,
    port=settings.DB_PORT,
    database=settings.DB_DATABASE_NAME,
)
"""Connection URL built from Settings."""

connection_engine = create_async_engine(connection_url, echo=settings.DB_ECHO)
"""Async engine object: core interface to the database.
Responsible for managing connections, executing SQL, and pooling.
"""

metadata = MetaData()
"""Stores schema-level information about tables, constraints and indexes. Shared across all models."""

declarativeBase = declarative_base(metadata=metadata)
"""Root class for ORM models."""
