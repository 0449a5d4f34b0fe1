"""API test fixtures — FastAPI app over the per-test SQLite database.

Invariants:
    - get_db is overridden with the test session factory
    - db_manager is patched so the readiness probe sees the test engine
    - Uploads go to a per-test directory
"""

import pytest
from httpx import ASGITransport, AsyncClient

from comic_site.config import Settings, get_settings
from comic_site.infrastructure import database as db_module
from comic_site.infrastructure.database import DatabaseSessionManager, get_db
from comic_site.main import app


@pytest.fixture
def test_settings(tmp_path):
    return Settings(
        database_url="sqlite+aiosqlite:///unused.db",
        upload_dir=str(tmp_path / "uploads"),
        comic_list_page_size=2,
    )


@pytest.fixture
async def client(test_engine, test_session_factory, test_settings):
    """FastAPI test client with DB and settings dependencies overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_settings] = lambda: test_settings

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


@pytest.fixture
async def seed_comic(store):
    comic_id = await store.add_comic("漢字", "Alice", "guest", "[b]bold[/b]")
    return await store.get_comic(comic_id)
