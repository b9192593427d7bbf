"""API test fixtures: FastAPI app wired to the in-memory test store.

Invariants:
    - app.state.db_manager points at the test engine for the duration of a test
    - dependency_overrides are cleared after every test
"""

import pytest
from httpx import ASGITransport, AsyncClient

from crud_api.main import app


@pytest.fixture
async def client(db_manager):
    """HTTP client against the app; lifespan is not run, the manager is injected."""
    original = getattr(app.state, "db_manager", None)
    app.state.db_manager = db_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    app.state.db_manager = original


@pytest.fixture
async def created_user(client):
    res = await client.post("/users", json={"name": "a", "email": "a@example.com"})
    assert res.status_code == 201
    return res.json()
