"""Tests for the HTTP API."""
import pytest
from fastapi.testclient import TestClient

from productlens import main
from productlens.adapters.catalog_store import CatalogStore
from productlens.layers.search import NO_PRODUCTS_SUMMARY
from tests.conftest import LISTING_URL


@pytest.fixture
def client(monkeypatch, page_loader, summarizer, catalog_path):
    monkeypatch.setattr(main.scraping_layer, "page_loader", page_loader)
    monkeypatch.setattr(main.search_layer, "summarizer", summarizer)
    monkeypatch.setattr(main.approval_layer, "store", CatalogStore(catalog_path))
    return TestClient(main.app)


def test_health(client):
    response = client.get("/api/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_search_products(client):
    response = client.post("/api/products", json={"url": LISTING_URL})

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert body["products"][0] == {
        "name": "Red Mug Deluxe",
        "price": "$9.99",
        "link": "https://shop.test/p/1",
    }
    assert body["summary"] == {"summary": "Kitchenware from $9.99 to $20.00."}
    assert body["trace_id"]


def test_search_navigation_failure_looks_like_no_products(client):
    response = client.post("/api/products", json={"url": "https://unreachable.test/"})

    assert response.status_code == 200
    body = response.json()
    assert body["products"] == []
    assert body["summary"] == {"summary": NO_PRODUCTS_SUMMARY}
    assert body["status"] == "navigation_failed"


def test_search_rejects_invalid_url(client):
    response = client.post("/api/products", json={"url": "not-a-url"})

    assert response.status_code == 400
    assert response.json()["detail"] == "Please enter a valid URL."


def test_approval_flow(client):
    fetched = client.post("/api/approval/products", json={"url": LISTING_URL}).json()
    product = fetched["products"][1]

    approved = client.post(
        "/api/approval/approve",
        json={**product, "source_url": LISTING_URL},
    )

    assert approved.status_code == 200
    assert approved.json()["success"] is True
    canonical_id = approved.json()["canonical_product_id"]

    listed = client.get("/api/canonical-products").json()["products"]
    assert len(listed) == 1
    assert listed[0]["id"] == canonical_id
    assert listed[0]["link"] == "https://shop.test/p/2#color=red"
    assert listed[0]["source_url"] == LISTING_URL
    assert listed[0]["approved_at"]


def test_approval_products_rejects_invalid_url(client):
    response = client.post("/api/approval/products", json={"url": ""})

    assert response.status_code == 400


def test_approve_reports_persistence_failure(client, monkeypatch, tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("x")
    monkeypatch.setattr(main.approval_layer, "store", CatalogStore(str(blocker / "catalog.db")))

    response = client.post("/api/approval/approve", json={
        "name": "Red Mug Deluxe",
        "price": "$9.99",
        "link": "https://shop.test/p/1",
        "source_url": LISTING_URL,
    })

    assert response.status_code == 200
    assert response.json()["success"] is False
    assert response.json()["error"] == "Failed to save approved product."
