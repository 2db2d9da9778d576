"""
Test infrastructure for the comment service.

Strategy
--------
- Every test gets its own SQLite file under pytest's ``tmp_path``, opened
  through the real ``Store`` (aiosqlite engine, explicit BEGIN hooks, WAL).
  No shared state survives between tests, so no drop/truncate step is
  needed.
- The app's ``get_store`` dependency is overridden so every test-time
  request uses that store rather than the one the lifespan would open.
  httpx's ASGITransport does not run the lifespan, so nothing is created
  under ``data/``.
"""
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from ovo.dependencies import get_store
from ovo.main import app
from ovo.store import Store


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest_asyncio.fixture
async def store(tmp_path) -> Store:
    """Yield an open store backed by a fresh database file."""
    store = Store(f"sqlite+aiosqlite:///{tmp_path / 'ovo.db'}")
    await store.open()
    yield store
    await store.close()


@pytest_asyncio.fixture
async def async_client(store: Store) -> AsyncClient:
    """
    Yield an httpx.AsyncClient wired to the FastAPI app via ASGITransport,
    with ``get_store`` pointing at the per-test ``store`` fixture.
    """
    app.dependency_overrides[get_store] = lambda: store
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.pop(get_store, None)
