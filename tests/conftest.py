"""
Shared fixtures.

Beanie is initialised per test against an in-memory mongomock database, so
every test starts with empty users, products and carts collections. The
HTTP client talks to the ASGI app directly and skips the lifespan, which
would otherwise try to reach a real MongoDB.
"""
import os

os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-with-enough-bytes-for-hs256")
os.environ.setdefault("PASSWORD_HASH_ROUNDS", "4")

import pytest
import pytest_asyncio
from beanie import init_beanie
from httpx import ASGITransport, AsyncClient
from mongomock_motor import AsyncMongoMockClient

from src.config.database import DOCUMENT_MODELS
from src.crud.userService import auth_service as _auth_service
from src.main import app


@pytest_asyncio.fixture(autouse=True)
async def db():
    client = AsyncMongoMockClient()
    database = client["solestyle_test"]
    await init_beanie(database=database, document_models=DOCUMENT_MODELS)
    yield database


@pytest_asyncio.fixture
async def client():
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
def auth_service():
    return _auth_service


@pytest_asyncio.fixture
async def token(auth_service):
    """Token for a registered user alice@example.com"""
    await auth_service.register("Alice", "alice@example.com", "pw")
    return await auth_service.login("alice@example.com", "pw")


@pytest.fixture
def auth_headers(token):
    return {"Authorization": token}
