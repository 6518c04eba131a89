"""
Test Configuration and Fixtures
Provides shared test setup for all test cases
"""
import os

# Settings are read at import time; point the app at SQLite before importing it
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["FIREBASE_PROJECT_ID"] = "estatehub-test"
os.environ["ADMIN_EMAILS"] = "admin@example.com"
os.environ.pop("CLOUDINARY_CLOUD_NAME", None)
os.environ.pop("CLOUDINARY_API_KEY", None)
os.environ.pop("CLOUDINARY_API_SECRET", None)

import sys
import pytest
import pytest_asyncio
from unittest.mock import patch, AsyncMock
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from app.main import app
from app.database.connection import Base
from app import models  # noqa: F401


# Bearer tokens accepted by the mocked identity provider
IDENTITIES = {
    "alice-token": {
        "uid": "alice-uid",
        "email": "alice@example.com",
        "name": "Alice Owner",
        "picture": "https://example.com/alice.png",
    },
    "bob-token": {
        "uid": "bob-uid",
        "email": "bob@example.com",
        "name": "Bob Buyer",
        "picture": None,
    },
    "carol-token": {
        "uid": "carol-uid",
        "email": "carol@example.com",
        "name": "Carol",
        "picture": None,
    },
    "admin-token": {
        "uid": "admin-uid",
        "email": "admin@example.com",
        "name": "Site Admin",
        "picture": None,
    },
}


async def fake_verify_id_token(token: str) -> dict:
    if token not in IDENTITIES:
        raise ValueError("Token rejected by identity provider")
    return dict(IDENTITIES[token])


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def alice_headers():
    return bearer("alice-token")


@pytest.fixture
def bob_headers():
    return bearer("bob-token")


@pytest.fixture
def carol_headers():
    return bearer("carol-token")


@pytest.fixture
def admin_headers():
    return bearer("admin-token")


@pytest_asyncio.fixture(scope="function")
async def session_factory(tmp_path):
    """Fresh on-disk SQLite database per test, so concurrent sessions see the same data"""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)
    yield factory

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(session_factory):
    """Session for seeding and inspecting rows directly"""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture(scope="function")
async def client(session_factory):
    """Create test HTTP client"""
    # Patch every module that imported AsyncSessionLocal by name
    patches = []
    for module_name, module in list(sys.modules.items()):
        if not module_name.startswith("app."):
            continue
        if hasattr(module, "AsyncSessionLocal"):
            patches.append(patch.object(module, "AsyncSessionLocal", session_factory))

    patches.append(patch(
        "app.utils.dependencies.verify_id_token",
        new=AsyncMock(side_effect=fake_verify_id_token),
    ))

    for p in patches:
        p.start()

    try:
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            yield ac
    finally:
        for p in patches:
            p.stop()


@pytest.fixture
def property_payload():
    """Build a valid create-property body; keyword overrides use wire (camelCase) names"""
    def build(**overrides):
        payload = {
            "title": "Sunny Two Bedroom",
            "description": "Close to the park",
            "price": 250000,
            "location": "12 Elm Street",
            "city": "Springfield",
            "state": "Illinois",
            "zipCode": "62701",
            "propertyType": "apartment",
            "bedrooms": 2,
            "bathrooms": 1,
        }
        payload.update(overrides)
        return payload
    return build


@pytest_asyncio.fixture
async def create_listing(client, property_payload):
    """POST a property as the given caller and return the response body"""
    async def create(headers, **overrides):
        response = await client.post("/api/properties", json=property_payload(**overrides), headers=headers)
        assert response.status_code == 201, response.text
        return response.json()
    return create
