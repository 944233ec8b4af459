import pytest
from fastapi.testclient import TestClient

from app.config import get_settings
from app.database import JsonRecordStore
from app.main import app


@pytest.fixture(scope="function")
def data_file(tmp_path, monkeypatch):
    """Point the application at a fresh products file for each test."""
    path = tmp_path / "data" / "products.json"
    monkeypatch.setenv("DATA_FILE", str(path))
    get_settings.cache_clear()

    yield path

    get_settings.cache_clear()


@pytest.fixture(scope="function")
def store(data_file):
    """Record store on the test products file."""
    return JsonRecordStore(data_file)


@pytest.fixture(scope="function")
def client(data_file):
    """Create test client with an empty products file."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def product_payload():
    """Factory for valid product request bodies."""
    def make(**overrides):
        payload = {
            "name": "Cordless Drill",
            "category": "Tools",
            "price": 89.99,
            "stock": 15,
            "supplier": "Acme Supply",
        }
        payload.update(overrides)
        return payload
    return make
