"""
Pytest configuration for the Transactions API.

Provides fixtures for:
- Settings pointing at a temporary SQLite file
- A migrated (and optionally seeded) record store
- A mocked seed dataset transport
- A FastAPI test client built around the above
"""

from __future__ import annotations

import copy
import json
from typing import Any, Dict, Generator, List

import httpx
import pytest
from fastapi.testclient import TestClient

from transactions_api.app.core.config import Settings
from transactions_api.app.core.store import TransactionStore
from transactions_api.app.main import create_app


SEED_URL = "https://seed.example.test/product_transaction.json"

# Five March records (two sharing a title), two in April, one in November.
SAMPLE_RECORDS: List[Dict[str, Any]] = [
    {
        "id": 1,
        "title": "Blue Shirt",
        "description": "Cotton shirt with long sleeves",
        "price": 100,
        "category": "men's clothing",
        "image": "https://example.test/1.jpg",
        "sold": True,
        "dateOfSale": "2021-03-05T10:00:00+05:30",
    },
    {
        "id": 2,
        "title": "Blue Shirt",
        "description": "Cotton shirt with short sleeves",
        "price": 101,
        "category": "men's clothing",
        "image": "https://example.test/2.jpg",
        "sold": False,
        "dateOfSale": "2022-03-17T08:30:00+05:30",
    },
    {
        "id": 3,
        "title": "Laptop Bag",
        "description": "Fits 15 inch laptops",
        "price": 901,
        "category": "electronics",
        "image": "https://example.test/3.jpg",
        "sold": True,
        "dateOfSale": "2021-03-21T14:00:00+05:30",
    },
    {
        "id": 4,
        "title": "Smart Watch",
        "description": "Tracks steps and sleep",
        "price": 10000,
        "category": "electronics",
        "image": "https://example.test/4.jpg",
        "sold": False,
        "dateOfSale": "2022-03-02T09:15:00+05:30",
    },
    {
        "id": 5,
        "title": "Gold Ring",
        "description": "18 carat gold",
        "price": 549.5,
        "category": "jewelery",
        "image": "https://example.test/5.jpg",
        "sold": True,
        "dateOfSale": "2021-03-28T18:45:00+05:30",
    },
    {
        "id": 6,
        "title": "Blue Shirt",
        "description": "Linen shirt",
        "price": 250,
        "category": "men's clothing",
        "image": "https://example.test/6.jpg",
        "sold": True,
        "dateOfSale": "2022-04-10T11:00:00+05:30",
    },
    {
        "id": 7,
        "title": "Phone Case",
        "description": None,
        "price": 0,
        "category": "electronics",
        "image": "https://example.test/7.jpg",
        "sold": False,
        "dateOfSale": "2021-04-01T00:00:00+05:30",
    },
    {
        "id": 8,
        "title": "Backpack",
        "description": "Water resistant",
        "price": 899.99,
        "category": "bags",
        "image": "https://example.test/8.jpg",
        "sold": True,
        "dateOfSale": "2021-11-27T20:29:54+05:30",
    },
]


@pytest.fixture
def sample_records() -> List[Dict[str, Any]]:
    return copy.deepcopy(SAMPLE_RECORDS)


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    return Settings(
        database_url=str(tmp_path / "transactions.db"),
        seed_url=SEED_URL,
        log_level="DEBUG",
    )


@pytest.fixture
def store(test_settings: Settings) -> TransactionStore:
    """A migrated, empty store."""
    store = TransactionStore(test_settings.database_url)
    store.initialize()
    return store


@pytest.fixture
def seeded_store(store: TransactionStore, sample_records) -> TransactionStore:
    store.bulk_load(sample_records)
    return store


def _seed_transport(records: Any, status_code: int = 200) -> httpx.MockTransport:
    """Mock transport answering the seed URL with ``records`` as JSON."""

    def handler(request: httpx.Request) -> httpx.Response:
        if str(request.url) != SEED_URL:
            return httpx.Response(404, json={"error": "not found"})
        return httpx.Response(status_code, content=json.dumps(records).encode("utf-8"))

    return httpx.MockTransport(handler)


@pytest.fixture
def make_seed_transport():
    """Factory for mock transports serving an arbitrary seed payload."""
    return _seed_transport


@pytest.fixture
def seed_transport(sample_records) -> httpx.MockTransport:
    return _seed_transport(sample_records)


@pytest.fixture
def client(test_settings: Settings, seed_transport: httpx.MockTransport) -> Generator[TestClient, None, None]:
    """Test client for an app with an empty database."""
    app = create_app(test_settings, seed_transport=seed_transport)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def seeded_client(client: TestClient) -> TestClient:
    """Test client whose database was loaded through ``/initialize``."""
    response = client.get("/initialize")
    assert response.status_code == 201
    return client
