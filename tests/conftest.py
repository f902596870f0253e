"""Shared pytest fixtures for the store API tests."""

import pytest
from fastapi.testclient import TestClient

from catalog import CatalogService
from checkout import CheckoutService
from config import Settings
from database import RecordStore
from main import create_app
from seed import seed_store
from site_config import SiteConfigService

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "s3cret-pass"


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def settings(tmp_path):
    """Settings pointing at an empty temporary data directory."""
    return Settings(
        DATA_DIR=tmp_path / "data",
        ADMIN_EMAIL=ADMIN_EMAIL,
        ADMIN_PASSWORD=ADMIN_PASSWORD,
        SEED_DATA=True,
    )


@pytest.fixture
async def store(settings, anyio_backend):
    """A record store with the demo collections in place."""
    store = RecordStore(settings.DATA_DIR)
    await seed_store(store)
    return store


@pytest.fixture
def catalog(store):
    return CatalogService(store)


@pytest.fixture
def site(store):
    return SiteConfigService(store)


@pytest.fixture
def checkout_service(store, catalog):
    return CheckoutService(store, catalog)


@pytest.fixture
def client(settings):
    """Test client; entering it runs startup, which seeds the data dir."""
    with TestClient(create_app(settings)) as client:
        yield client


@pytest.fixture
def token(client):
    res = client.post("/api/auth/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
    assert res.status_code == 200
    return res.json()["token"]


@pytest.fixture
def auth_headers(token):
    return {"Authorization": f"Bearer {token}"}
