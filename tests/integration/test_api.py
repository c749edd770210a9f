"""
HTTP tests for the Transactions API.

Each test gets an application backed by a temporary SQLite file; the
seed dataset is served by an ``httpx.MockTransport`` so ``/initialize``
never touches the network.
"""

from __future__ import annotations

import dataclasses

import pytest
from fastapi.testclient import TestClient

from transactions_api.app.core.config import EMPTY_MONTH_LITERAL
from transactions_api.app.core.errors import StoreError
from transactions_api.app.core.filters import SQLITE_MAX_INTEGER
from transactions_api.app.core.store import TransactionStore
from transactions_api.app.main import create_app

MONTHS = [f"{m:02d}" for m in range(1, 13)]
MONTH_ENDPOINTS = ["/statistics", "/bar_chart", "/pie_chart", "/combined_data"]


class BrokenStore(TransactionStore):
    """Store whose every read fails like an unreachable database."""

    def count(self, flt):
        raise StoreError("database is locked")

    def count_grouped_by(self, flt, group_field):
        raise StoreError("database is locked")


class TestHealthAndSeed:
    def test_health(self, client):
        assert client.get("/health").json() == {"status": "ok"}

    def test_initialize(self, client):
        response = client.get("/initialize")
        assert response.status_code == 201
        assert response.json() == {"message": "Database initialized with seed data", "inserted": 8}

    def test_initialize_twice_duplicates_records(self, client):
        client.get("/initialize")
        client.get("/initialize")
        assert client.get("/transactions").json()["total"] == 16

    def test_initialize_failure(self, test_settings, make_seed_transport):
        app = create_app(test_settings, seed_transport=make_seed_transport([], status_code=500))
        with TestClient(app) as client:
            response = client.get("/initialize")
        assert response.status_code == 500
        assert response.json() == {"error": "Failed to initialize database"}


class TestTransactionsEndpoint:
    def test_response_shape(self, seeded_client):
        body = seeded_client.get("/transactions", params={"month": "11"}).json()
        assert body["total"] == 1
        assert body["page"] == 1
        assert body["perPage"] == 10
        record = body["transactions"][0]
        assert record == {
            "id": 8,
            "title": "Backpack",
            "description": "Water resistant",
            "price": 899.99,
            "dateOfSale": "2021-11-27T20:29:54+05:30",
            "sold": True,
            "category": "bags",
            "image": "https://example.test/8.jpg",
        }

    def test_pagination(self, seeded_client):
        seen = []
        for page, expected in ((1, 2), (2, 2), (3, 1)):
            body = seeded_client.get(
                "/transactions", params={"month": "03", "page": page, "perPage": 2}
            ).json()
            assert body["total"] == 5
            assert body["page"] == page
            assert body["perPage"] == 2
            assert len(body["transactions"]) == expected
            seen.extend(t["id"] for t in body["transactions"])
        assert len(seen) == len(set(seen)) == 5

    @pytest.mark.parametrize("search", ["shirt", "SHIRT"])
    def test_search_case_insensitive(self, seeded_client, search):
        body = seeded_client.get("/transactions", params={"search": search}).json()
        assert body["total"] == 3
        assert {t["title"] for t in body["transactions"]} == {"Blue Shirt"}

    def test_out_of_range_pagination_is_clamped(self, seeded_client):
        body = seeded_client.get("/transactions", params={"page": -2, "perPage": 0}).json()
        assert (body["page"], body["perPage"]) == (1, 10)
        assert len(body["transactions"]) == 8

    def test_huge_page_is_an_empty_page(self, seeded_client):
        response = seeded_client.get("/transactions", params={"page": 10**17, "perPage": 100})
        assert response.status_code == 200
        body = response.json()
        assert body["page"] == SQLITE_MAX_INTEGER // 100
        assert body["total"] == 8
        assert body["transactions"] == []

    def test_malformed_page_is_400(self, seeded_client):
        response = seeded_client.get("/transactions", params={"page": "abc"})
        assert response.status_code == 400
        assert "page" in response.json()["error"]

    def test_invalid_month_is_400(self, seeded_client):
        response = seeded_client.get("/transactions", params={"month": "13"})
        assert response.status_code == 400

    def test_literal_empty_month_mode(self, test_settings, seed_transport):
        settings = dataclasses.replace(test_settings, list_empty_month=EMPTY_MONTH_LITERAL)
        with TestClient(create_app(settings, seed_transport=seed_transport)) as client:
            client.get("/initialize")
            assert client.get("/transactions").json()["total"] == 0
            assert client.get("/transactions", params={"month": "03"}).json()["total"] == 5


class TestMonthlyEndpoints:
    def test_statistics(self, seeded_client):
        response = seeded_client.get("/statistics", params={"month": "03"})
        assert response.status_code == 200
        assert response.json() == {
            "total_sales_amount": 1550.5,
            "sold_items_count": 3,
            "not_sold_items_count": 2,
        }

    def test_bar_chart(self, seeded_client):
        body = seeded_client.get("/bar_chart", params={"month": "03"}).json()
        assert len(body) == 10
        assert body["0-100"] == 1
        assert body["101-200"] == 1
        assert body["901-above"] == 2

    def test_pie_chart(self, seeded_client):
        body = seeded_client.get("/pie_chart", params={"month": "03"}).json()
        assert body[0] == {"_id": "Blue Shirt", "count": 2}
        assert {item["_id"] for item in body} == {"Blue Shirt", "Gold Ring", "Laptop Bag", "Smart Watch"}

    @pytest.mark.parametrize("month", MONTHS)
    def test_combined_equals_individual_endpoints(self, seeded_client, month):
        params = {"month": month}
        combined = seeded_client.get("/combined_data", params=params).json()
        assert combined == {
            "statistics": seeded_client.get("/statistics", params=params).json(),
            "bar_chart": seeded_client.get("/bar_chart", params=params).json(),
            "pie_chart": seeded_client.get("/pie_chart", params=params).json(),
        }

    @pytest.mark.parametrize("month", MONTHS)
    def test_bar_chart_partitions_month(self, seeded_client, month):
        stats = seeded_client.get("/statistics", params={"month": month}).json()
        bars = seeded_client.get("/bar_chart", params={"month": month}).json()
        assert sum(bars.values()) == stats["sold_items_count"] + stats["not_sold_items_count"]

    @pytest.mark.parametrize("path", MONTH_ENDPOINTS)
    def test_missing_month_is_400(self, seeded_client, path):
        response = seeded_client.get(path)
        assert response.status_code == 400
        assert response.json() == {"error": "Month parameter is required"}

    @pytest.mark.parametrize("path", MONTH_ENDPOINTS)
    def test_invalid_month_is_400(self, seeded_client, path):
        assert seeded_client.get(path, params={"month": "7"}).status_code == 400


class TestStoreFailures:
    @pytest.fixture
    def broken_client(self, test_settings, seed_transport):
        app = create_app(test_settings, seed_transport=seed_transport)
        with TestClient(app) as client:
            app.state.store = BrokenStore(test_settings.database_url)
            yield client

    @pytest.mark.parametrize(
        "path, message",
        [
            ("/transactions", "Failed to fetch transactions"),
            ("/statistics", "Failed to fetch statistics"),
            ("/bar_chart", "Failed to fetch bar chart data"),
            ("/pie_chart", "Failed to fetch pie chart data"),
            ("/combined_data", "Failed to fetch combined data"),
        ],
    )
    def test_generic_500_without_details(self, broken_client, path, message):
        response = broken_client.get(path, params={"month": "03"})
        assert response.status_code == 500
        assert response.json() == {"error": message}
        assert "locked" not in response.text


class TestApiPrefix:
    def test_routes_mounted_under_prefix(self, test_settings, seed_transport):
        settings = dataclasses.replace(test_settings, api_prefix="/api/v1")
        with TestClient(create_app(settings, seed_transport=seed_transport)) as client:
            assert client.get("/api/v1/health").status_code == 200
            assert client.get("/health").status_code == 404


class TestCors:
    def test_cors_header_present(self, client):
        response = client.get("/health", headers={"Origin": "http://localhost:3000"})
        assert response.headers["access-control-allow-origin"] == "*"
