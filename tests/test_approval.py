"""Tests for the catalog store and the approval workflow."""
import pytest

from productlens.adapters.catalog_store import CatalogStore, PersistenceError
from productlens.layers.approval import ApprovalLayer
from productlens.layers.extraction import ExtractionStatus
from productlens.layers.scraping import ScrapingLayer
from productlens.models.product import CanonicalProduct, ProductForApproval
from productlens.utils.validation import InvalidURLError
from tests.conftest import LISTING_URL


RED_MUG = ProductForApproval(
    name="Red Mug Deluxe",
    price="$9.99",
    link="https://shop.test/p/1",
    source_url=LISTING_URL,
)


class BrokenStore:
    async def add(self, product):
        raise PersistenceError("Failed to save approved product.")

    async def list_all(self):
        return []


@pytest.fixture
def approval(page_loader, catalog_path) -> ApprovalLayer:
    return ApprovalLayer(
        scraping_layer=ScrapingLayer(page_loader=page_loader),
        store=CatalogStore(catalog_path),
    )


async def test_store_assigns_id_and_timestamps(catalog_path):
    store = CatalogStore(catalog_path)

    doc_id = await store.add(CanonicalProduct(**RED_MUG.model_dump()))
    saved = await store.get(doc_id)

    assert saved.id == doc_id
    assert saved.name == "Red Mug Deluxe"
    assert saved.source_url == LISTING_URL
    assert saved.created_at
    assert saved.approved_at == saved.created_at


async def test_store_lists_newest_first(catalog_path):
    store = CatalogStore(catalog_path)

    first = await store.add(CanonicalProduct(name="First", price="$1", link="https://s.test/1", source_url=LISTING_URL))
    second = await store.add(CanonicalProduct(name="Second", price="$2", link="https://s.test/2", source_url=LISTING_URL))

    assert [p.id for p in await store.list_all()] == [second, first]


async def test_store_get_unknown_id(catalog_path):
    assert await CatalogStore(catalog_path).get("missing") is None


async def test_store_write_failure_raises_persistence_error(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")
    store = CatalogStore(str(blocker / "catalog.db"))

    with pytest.raises(PersistenceError, match="Failed to save approved product."):
        await store.add(CanonicalProduct(**RED_MUG.model_dump()))


async def test_fetch_products_for_review(approval):
    result = await approval.fetch_products(LISTING_URL)

    assert result.status == ExtractionStatus.OK
    assert len(result.products) == 2


async def test_fetch_products_validates_url(approval):
    with pytest.raises(InvalidURLError):
        await approval.fetch_products("javascript:alert(1)")


async def test_approve_persists_product(approval):
    result = await approval.approve(RED_MUG)

    assert result.success is True
    assert result.error is None
    approved = await approval.list_approved()
    assert [(p.id, p.link) for p in approved] == [(result.canonical_product_id, RED_MUG.link)]


async def test_approve_failure_is_reported_not_raised(page_loader):
    layer = ApprovalLayer(scraping_layer=ScrapingLayer(page_loader=page_loader), store=BrokenStore())

    result = await layer.approve(RED_MUG)

    assert result.success is False
    assert result.canonical_product_id is None
    assert result.error == "Failed to save approved product."
