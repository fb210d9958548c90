import os
import tempfile

# Settings are read at import time, so point them at a throwaway database first.
_TMP_DIR = tempfile.mkdtemp(prefix="taskcal-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TMP_DIR}/test.db"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["EMAIL_HOST"] = ""
os.environ["API_PREFIX"] = ""

import pytest
from httpx import ASGITransport, AsyncClient

from taskcal.database import AsyncSessionLocal, Base, engine
from taskcal.main import app
from taskcal.services.users import ensure_default_admin


@pytest.fixture
async def db_schema():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    yield


@pytest.fixture
async def db(db_schema):
    async with AsyncSessionLocal() as session:
        yield session


@pytest.fixture
async def client(db_schema):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


def auth(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def register(client):
    """Register a user and return (token, user_json)."""
    async def _register(username: str, email: str | None = None, password: str = "secret1"):
        response = await client.post("/auth/register", json={
            "username": username,
            "email": email or f"{username}@x.com",
            "password": password,
        })
        assert response.status_code == 200, response.text
        body = response.json()
        return body["token"], body["user"]
    return _register


@pytest.fixture
async def admin(client, db):
    """An admin account (created the way startup bootstraps it) logged in over the API."""
    await ensure_default_admin(db, "root", "root@x.com", "rootpass")
    response = await client.post("/auth/login", json={"username": "root", "password": "rootpass"})
    assert response.status_code == 200, response.text
    body = response.json()
    return body["token"], body["user"]


@pytest.fixture
def create_task(client):
    async def _create(token: str, **fields):
        payload = {"title": "T", "date": "2024-05-01", "priority": "low", "status": "pending"}
        payload.update(fields)
        response = await client.post("/tasks", json=payload, headers=auth(token))
        assert response.status_code == 201, response.text
        return response.json()["task"]
    return _create
