"""
Test configuration and fixtures.

Tests run against a throw-away SQLite database (aiosqlite driver) so that the
transactional behaviour is exercised on a real engine.
"""

import os
import tempfile

import pytest
import pytest_asyncio

# Must be set BEFORE any import of kompagnon.database.config
_TEST_DB_DIR = tempfile.mkdtemp(prefix="kompagnon-tests-")
os.environ["DB_DRIVER_NAME"] = "sqlite+aiosqlite"
os.environ["DB_DATABASE_NAME"] = os.path.join(_TEST_DB_DIR, "test.db")
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["PASSWORD_HASH_ROUNDS"] = "4"
os.environ["MAIL_ENABLED"] = "false"
os.environ["BASE_URL"] = "http://localhost:5173/"
os.environ["INIT_MODE"] = ""


@pytest_asyncio.fixture
async def database():
    """
    Create the application tables before the test and drop them afterwards.

    The engine is disposed after each test so pooled connections never outlive
    the event loop they were opened on.
    """
    from kompagnon.database.config.connection_engine import connection_engine
    from kompagnon.database.core.schema import create_schema, drop_schema

    await create_schema()
    yield connection_engine
    await drop_schema()
    await connection_engine.dispose()


@pytest_asyncio.fixture
async def client(database):
    """HTTP client bound to the FastAPI app (no network, no lifespan)."""
    import httpx

    from kompagnon.main import app

    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
def password():
    return "Str0ng!Password"
