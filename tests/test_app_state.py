import importlib

import httpx
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from httpx import AsyncClient

import main
from config import settings
from models import FileRecord
from store import FileStore, get_app_store

@pytest.fixture(scope="function")
def app_store():
    store = get_app_store(main.app)
    store.clear()
    yield store
    store.clear()

@pytest.mark.asyncio
async def test_store_routes_work_without_lifespan(app_store: FileStore):
    transport = httpx.ASGITransport(app=main.app)
    async with AsyncClient(transport=transport, base_url="http://testcdn") as client:
        health = await client.get("/health")
        assert health.status_code == 200
        assert health.json()["filesCount"] == 0

        upload = await client.post("/upload", files={"file": ("a.txt", b"abc", "text/plain")})
        assert upload.status_code == 200

        files = await client.get("/files")
        assert files.status_code == 200
        assert files.json()["count"] == 1

    assert app_store.count() == 1

def test_lifespan_starts_empty_and_clears_on_shutdown(app_store: FileStore):
    app_store.put(FileRecord.create(b"stale"))

    with TestClient(main.app) as client:
        assert client.get("/files").json()["count"] == 0

        response = client.post("/upload", files={"file": ("a.txt", b"abc", "text/plain")})
        assert response.status_code == 200
        assert client.get("/files").json()["count"] == 1
        assert client.get("/health").json()["filesCount"] == 1

    assert get_app_store(main.app).count() == 0

def test_get_app_store_creates_store_once():
    app = FastAPI()

    store = get_app_store(app)

    assert isinstance(store, FileStore)
    assert get_app_store(app) is store
    assert app.state.file_store is store

@pytest.fixture(scope="function")
def prefixed_app(monkeypatch):
    monkeypatch.setattr(settings, "API_PREFIX", "/api")
    prefixed = importlib.reload(main)
    yield prefixed.app
    monkeypatch.undo()
    importlib.reload(main)

@pytest.mark.asyncio
async def test_root_is_served_at_bare_prefix(prefixed_app):
    transport = httpx.ASGITransport(app=prefixed_app)
    async with AsyncClient(transport=transport, base_url="http://testcdn") as client:
        response = await client.get("/api")
        assert response.status_code == 200
        assert response.json()["endpoints"]["upload"] == "POST /api/upload"

        upload = await client.post("/api/upload", files={"file": ("a.txt", b"abc", "text/plain")})
        assert upload.status_code == 200
        data = upload.json()["data"]
        assert data["url"] == f"http://testcdn/api/file/{data['id']}"
