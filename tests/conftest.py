"""
Pytest fixtures: settings on a throwaway SQLite file, app client, store session, auth headers.
"""

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from core.config import Settings
from core.database import Database
from core.security import TokenCodec
from main import create_app

TEST_SECRET = "test-secret-key-that-is-long-enough-123"


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Isolated settings: fresh database per test, fixed signing secret, no .env."""
    return Settings(
        _env_file=None,
        DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        SECRET_KEY=TEST_SECRET,
        STORE_TIMEOUT_SECONDS=5.0,
    )


@pytest.fixture
def client(settings: Settings):
    """Test client with lifespan run, so tables exist."""
    with TestClient(create_app(settings)) as c:
        yield c


@pytest.fixture
def token_codec(settings: Settings) -> TokenCodec:
    return TokenCodec.from_settings(settings)


@pytest.fixture
def auth_headers(token_codec: TokenCodec) -> dict[str, str]:
    """Bearer header for a synthetic account. The gate does not look the account up."""
    token, _ = token_codec.issue("test-user-id", "tester")
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture
async def database(settings: Settings):
    db = Database.from_settings(settings)
    await db.create_all()
    yield db
    await db.dispose()


@pytest_asyncio.fixture
async def session(database: Database):
    async with database.session() as s:
        yield s
