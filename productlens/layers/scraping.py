"""
Scraping Layer for ProductLens.
Loads a page and runs the product extractor against the rendered DOM.
"""
from typing import Optional

from productlens.adapters.page_loader import NavigationError, PageLoader, create_page_loader
from productlens.layers.extraction import ExtractionResult, ProductExtractor
from productlens.utils.logger import LayerLogger


class ScrapingLayer:
    """
    Scraping Layer - page load followed by extraction.

    Navigation failures never escape this layer: they come back as an
    ExtractionResult with status NAVIGATION_FAILED so callers can decide
    how to present them.
    """

    def __init__(
        self,
        page_loader: Optional[PageLoader] = None,
        extractor: Optional[ProductExtractor] = None,
    ):
        self.logger = LayerLogger("scraping_layer")
        self.page_loader = page_loader or create_page_loader()
        self.extractor = extractor or ProductExtractor()

    async def scrape(self, url: str) -> ExtractionResult:
        """
        Extract products from a URL.

        Args:
            url: A validated http(s) URL

        Returns:
            ExtractionResult (never raises for navigation failures)
        """
        self.logger.log_action("scrape", "started", url=url)

        try:
            snapshot = await self.page_loader.load(url)
        except NavigationError as e:
            self.logger.log_fallback(
                from_source="page_loader",
                to_source="empty_result",
                reason=e.reason,
                url=url,
            )
            return ExtractionResult.navigation_failed(url, e.reason)

        # The extractor is synchronous and runs only after the load resolved
        products = self.extractor.extract(snapshot)
        result = ExtractionResult.from_products(url, products)

        self.logger.log_action(
            "scrape",
            "completed",
            url=url,
            result_status=result.status.value,
            products_count=len(result.products),
        )
        return result
