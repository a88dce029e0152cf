"""API test fixtures - FastAPI test client on an isolated store.

Invariants:
    - Every test gets a MachineStore rooted in its own tmp_path
    - get_machine_store dependency overridden, cleared after each test

Design Decisions:
    - httpx ASGITransport does not run the lifespan, so logging setup and the
      startup folder check are not exercised here
"""

import pytest
from httpx import ASGITransport, AsyncClient

from fieldar.api.dependencies import get_machine_store
from fieldar.main import app


@pytest.fixture
async def client(store):
    """FastAPI test client with the store dependency overridden."""
    app.dependency_overrides[get_machine_store] = lambda: store

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
