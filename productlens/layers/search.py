"""
Product Search Layer for ProductLens.
Validates the URL, scrapes it and optionally summarizes what was found.
"""
from dataclasses import dataclass, field
from typing import List, Optional

from productlens.adapters.claude_client import ClaudeClient
from productlens.layers.extraction import ExtractionStatus
from productlens.layers.scraping import ScrapingLayer
from productlens.models.product import ExtractedProduct, format_product_details
from productlens.utils.logger import LayerLogger
from productlens.utils.validation import validate_url


NO_PRODUCTS_SUMMARY = (
    "No products found at the provided URL or the page structure is not recognized."
)


@dataclass
class SearchResult:
    """Products found on a page plus an optional summary."""
    url: str
    status: ExtractionStatus
    products: List[ExtractedProduct] = field(default_factory=list)
    summary: Optional[str] = None


class ProductSearchLayer:
    """
    Product Search Layer.

    Flow: validate -> scrape -> summarize. Summaries are best-effort; a
    failed or unconfigured summarizer still returns the products.
    """

    def __init__(
        self,
        scraping_layer: Optional[ScrapingLayer] = None,
        summarizer: Optional[ClaudeClient] = None,
    ):
        self.logger = LayerLogger("search_layer")
        self.scraping = scraping_layer or ScrapingLayer()
        self.summarizer = summarizer or ClaudeClient()

    async def search(self, url: str, search_term: Optional[str] = None) -> SearchResult:
        """
        Find products on a page and summarize them.

        Raises:
            InvalidURLError: if `url` is not a valid http(s) URL
        """
        url = validate_url(url)
        search_term = (search_term or "").strip() or None

        result = await self.scraping.scrape(url)

        if not result.products:
            self.logger.log_decision(
                decision="skip_summary",
                reason="no products found",
                url=url,
                status=result.status.value,
            )
            return SearchResult(
                url=url,
                status=result.status,
                products=[],
                summary=NO_PRODUCTS_SUMMARY,
            )

        summary = None
        if self.summarizer.is_available():
            summary = await self.summarizer.summarize(
                url=url,
                product_details=format_product_details(result.products),
                search_term=search_term,
            )
        else:
            self.logger.log_decision(
                decision="skip_summary",
                reason="summarizer not configured",
                url=url,
            )

        return SearchResult(
            url=url,
            status=result.status,
            products=result.products,
            summary=summary,
        )
