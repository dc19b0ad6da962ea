"""Root conftest — shared test configuration and fixtures.

Invariants:
    - Every test gets a fresh SQLite file database with the users table
    - The app under test receives the pool manager through app.state, the
      same injection point the lifespan uses in production
"""

import os

# Settings are read at import time of users_api.main; never reach a real server
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./test.db")
os.environ.setdefault("LOG_FORMAT", "text")

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from users_api.db.base import Base  # noqa: E402
from users_api.infrastructure.database import DatabaseSessionManager  # noqa: E402
from users_api.main import app  # noqa: E402
import users_api.models  # noqa: E402,F401


@pytest.fixture
def database_url(tmp_path):
    return f"sqlite+aiosqlite:///{tmp_path / 'users.db'}"


@pytest.fixture
async def db_manager(database_url):
    manager = DatabaseSessionManager(database_url, pool_size=5)
    async with manager.engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield manager
    if not manager.closing:
        await manager.close()


@pytest.fixture
async def client(db_manager):
    """FastAPI test client bound to the test pool manager."""
    app.state.db_manager = db_manager
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c
    app.state.db_manager = None
    app.dependency_overrides.clear()
