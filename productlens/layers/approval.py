"""
Approval Layer for ProductLens.
Lets a reviewer fetch a page's products and promote individual ones into the
canonical catalog.
"""
from dataclasses import dataclass
from typing import List, Optional

from productlens.adapters.catalog_store import CatalogStore, PersistenceError
from productlens.config import config
from productlens.layers.extraction import ExtractionResult
from productlens.layers.scraping import ScrapingLayer
from productlens.models.product import CanonicalProduct, ProductForApproval
from productlens.utils.logger import LayerLogger
from productlens.utils.validation import validate_url


@dataclass
class ApprovalResult:
    """Outcome of one approval; no retry is attempted on failure."""
    success: bool
    canonical_product_id: Optional[str] = None
    error: Optional[str] = None


class ApprovalLayer:
    """Approval workflow over the scraping layer and the catalog store."""

    def __init__(
        self,
        scraping_layer: Optional[ScrapingLayer] = None,
        store: Optional[CatalogStore] = None,
    ):
        self.logger = LayerLogger("approval_layer")
        self.scraping = scraping_layer or ScrapingLayer()
        self.store = store or CatalogStore(config.CATALOG_DB_PATH)

    async def fetch_products(self, url: str) -> ExtractionResult:
        """
        Products on a page, for review.

        Raises:
            InvalidURLError: if `url` is not a valid http(s) URL
        """
        url = validate_url(url)
        return await self.scraping.scrape(url)

    async def approve(self, product: ProductForApproval) -> ApprovalResult:
        """Save a reviewed product to the canonical catalog."""
        self.logger.log_action(
            "approve_product",
            "started",
            link=product.link,
            source_url=product.source_url,
        )

        try:
            canonical_id = await self.store.add(CanonicalProduct(
                name=product.name,
                price=product.price,
                link=product.link,
                source_url=product.source_url,
            ))
        except PersistenceError as e:
            self.logger.log_action("approve_product", "failed", link=product.link, error=str(e))
            return ApprovalResult(success=False, error=str(e) or "Failed to approve product.")

        self.logger.log_action("approve_product", "completed", id=canonical_id)
        return ApprovalResult(success=True, canonical_product_id=canonical_id)

    async def list_approved(self) -> List[CanonicalProduct]:
        """Everything approved so far, newest first."""
        return await self.store.list_all()
