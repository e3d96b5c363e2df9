"""Tests for the scraping and product search layers."""
import pytest

from productlens.layers.extraction import ExtractionStatus
from productlens.layers.scraping import ScrapingLayer
from productlens.layers.search import NO_PRODUCTS_SUMMARY, ProductSearchLayer
from productlens.utils.validation import INVALID_URL_MESSAGE, InvalidURLError
from tests.conftest import LISTING_URL, FakePageLoader, FakeSummarizer


@pytest.fixture
def scraping(page_loader) -> ScrapingLayer:
    return ScrapingLayer(page_loader=page_loader)


async def test_scrape_returns_products(scraping):
    result = await scraping.scrape(LISTING_URL)

    assert result.status == ExtractionStatus.OK
    assert result.ok
    assert [p.name for p in result.products] == ["Red Mug Deluxe", "Canvas Tote"]


async def test_unreachable_page_yields_empty_result_not_error(scraping):
    result = await scraping.scrape("https://unreachable.test/")

    assert result.status == ExtractionStatus.NAVIGATION_FAILED
    assert result.products == []
    assert "ERR_CONNECTION_REFUSED" in result.reason


async def test_page_without_products_is_empty(page_loader):
    page_loader.pages["https://shop.test/about"] = "<body><h1>About us</h1></body>"
    result = await ScrapingLayer(page_loader=page_loader).scrape("https://shop.test/about")

    assert result.status == ExtractionStatus.EMPTY
    assert result.products == []


async def test_search_summarizes_one_line_per_product(scraping, summarizer):
    layer = ProductSearchLayer(scraping_layer=scraping, summarizer=summarizer)

    result = await layer.search(LISTING_URL, search_term="  mugs ")

    assert result.summary == summarizer.summary
    assert len(summarizer.calls) == 1
    call = summarizer.calls[0]
    assert call.url == LISTING_URL
    assert call.search_term == "mugs"
    assert call.product_details.split("\n") == [
        "Name: Red Mug Deluxe, Price: $9.99, Link: https://shop.test/p/1",
        "Name: Canvas Tote, Price: $20.00, Link: https://shop.test/p/2#color=red",
    ]


async def test_search_without_products_skips_summarizer(scraping, summarizer):
    layer = ProductSearchLayer(scraping_layer=scraping, summarizer=summarizer)

    result = await layer.search("https://unreachable.test/")

    assert result.status == ExtractionStatus.NAVIGATION_FAILED
    assert result.products == []
    assert result.summary == NO_PRODUCTS_SUMMARY
    assert summarizer.calls == []


async def test_search_returns_products_when_summary_unavailable(scraping):
    layer = ProductSearchLayer(scraping_layer=scraping, summarizer=FakeSummarizer(available=False))

    result = await layer.search(LISTING_URL)

    assert len(result.products) == 2
    assert result.summary is None


async def test_search_returns_products_when_summary_fails(scraping):
    layer = ProductSearchLayer(scraping_layer=scraping, summarizer=FakeSummarizer(summary=None))

    result = await layer.search(LISTING_URL)

    assert len(result.products) == 2
    assert result.summary is None


@pytest.mark.parametrize("url", ["", "not a url", "ftp://shop.test/file", "shop.test/c/kitchen"])
async def test_search_rejects_invalid_urls(url, summarizer):
    loader = FakePageLoader()
    layer = ProductSearchLayer(scraping_layer=ScrapingLayer(page_loader=loader), summarizer=summarizer)

    with pytest.raises(InvalidURLError) as excinfo:
        await layer.search(url)

    assert excinfo.value.message == INVALID_URL_MESSAGE
    assert loader.requested == []
