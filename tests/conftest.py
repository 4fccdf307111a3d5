"""
Pytest configuration and fixtures for Taskboard tests.
"""

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from taskboard.main import app
from taskboard.schemas import Task
from taskboard.storage import get_store


class MemoryTaskStore:
    """In-process stand-in for the SQL store."""

    def __init__(self, tasks: list[Task] | None = None):
        self.tasks: list[Task] = list(tasks or [])
        self.saves = 0

    async def load(self) -> list[Task]:
        return [t.model_copy(deep=True) for t in self.tasks]

    async def save(self, tasks: list[Task]) -> bool:
        self.tasks = [t.model_copy(deep=True) for t in tasks]
        self.saves += 1
        return True


@pytest.fixture
def store() -> MemoryTaskStore:
    return MemoryTaskStore()


@pytest_asyncio.fixture(scope="function")
async def client(store):
    """Async test client wired to the in-memory store."""
    app.dependency_overrides[get_store] = lambda: store

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
