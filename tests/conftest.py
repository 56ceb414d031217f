import sys
from pathlib import Path

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from typing import AsyncGenerator

import pytest
import pytest_asyncio
import httpx
from httpx import AsyncClient

from main import app
from store import FileStore, get_store
from config import settings

@pytest.fixture(scope="function")
def file_store() -> FileStore:
    return FileStore()

@pytest_asyncio.fixture(scope="function")
async def async_client(file_store: FileStore) -> AsyncGenerator[AsyncClient, None]:
    app.dependency_overrides[get_store] = lambda: file_store

    transport = httpx.ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testcdn") as client:
        yield client

    app.dependency_overrides.clear()

@pytest.fixture(scope="function")
def small_limits(monkeypatch):
    monkeypatch.setattr(settings, 'MAX_FILE_SIZE_BYTES', 64)
    monkeypatch.setattr(settings, 'MAX_REQUEST_SIZE_BYTES', 1024)
    return settings
