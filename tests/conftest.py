"""Shared fixtures and fakes for the ProductLens test suite."""
from types import SimpleNamespace
from typing import Dict, List, Optional

import pytest

from productlens.adapters.page_loader import NavigationError, PageLoader
from productlens.models.snapshot import DomSnapshot


LISTING_URL = "https://shop.test/c/kitchen"

LISTING_HTML = """
<html>
<head><title>Kitchen - Shop Test</title></head>
<body>
  <header class="site-header">
    <a href="/"><img src="/logo.svg" alt="Shop Test"></a>
    <nav><a href="/c/kitchen">Kitchen</a> <a href="/sale">Sale</a> <a href="/help">Help</a></nav>
  </header>
  <main>
    <ul class="results">
      <li class="product-tile">
        <a href="/p/1"><img src="/img/1.jpg" alt="Red Mug"></a>
        <h3>Red Mug Deluxe</h3>
        <span class="price">$9.99</span>
      </li>
      <li class="product-tile">
        <a href="/p/2#color=red"><img src="/img/2r.jpg" alt=""></a>
        <h3>Canvas Tote</h3>
        <span class="price">$20.00</span>
      </li>
      <li class="product-tile">
        <a href="/p/2#color=blue"><img src="/img/2b.jpg" alt=""></a>
        <h3>Canvas Tote</h3>
        <span class="price">$20.00</span>
      </li>
      <li class="product-tile">
        <a href="/p/1"><img src="/img/1b.jpg" alt="Red Mug again"></a>
        <h3>Red Mug Deluxe</h3>
        <span class="price">$9.99</span>
      </li>
      <li class="product-tile">
        <a href="/p/3"><img src="/img/3.jpg" alt="Teapot"></a>
        <h3>Cast Iron Teapot</h3>
        <span class="price">Sold out</span>
      </li>
      <li class="product-tile">
        <a href="javascript:void(0)"><img src="/img/4.jpg" alt="Teaspoon set"></a>
        <h3>Teaspoon Set</h3>
        <span class="price">$12.00</span>
      </li>
    </ul>
  </main>
</body>
</html>
"""


def make_snapshot(html: str, url: str = LISTING_URL, has_geometry: bool = False) -> DomSnapshot:
    return DomSnapshot.from_html(url, html, has_geometry=has_geometry)


class FakePageLoader(PageLoader):
    """Serves canned HTML per URL; unknown URLs fail like an unreachable host."""

    name = "fake_page_loader"

    def __init__(self, pages: Optional[Dict[str, str]] = None):
        super().__init__(timeout=1)
        self.pages = pages or {}
        self.requested: List[str] = []

    async def _load(self, url: str) -> DomSnapshot:
        self.requested.append(url)
        if url not in self.pages:
            raise NavigationError(url, "net::ERR_CONNECTION_REFUSED")
        return make_snapshot(self.pages[url], url=url)


class FakeSummarizer:
    """Records summarize() calls instead of calling Claude."""

    def __init__(self, summary: Optional[str] = "Kitchenware from $9.99 to $20.00.", available: bool = True):
        self.summary = summary
        self.available = available
        self.calls: List[SimpleNamespace] = []

    def is_available(self) -> bool:
        return self.available

    async def summarize(self, url: str, product_details: str, search_term: Optional[str] = None):
        self.calls.append(SimpleNamespace(url=url, product_details=product_details, search_term=search_term))
        return self.summary


@pytest.fixture
def listing_snapshot() -> DomSnapshot:
    return make_snapshot(LISTING_HTML)


@pytest.fixture
def page_loader() -> FakePageLoader:
    return FakePageLoader({LISTING_URL: LISTING_HTML})


@pytest.fixture
def summarizer() -> FakeSummarizer:
    return FakeSummarizer()


@pytest.fixture
def catalog_path(tmp_path) -> str:
    return str(tmp_path / "catalog" / "catalog.db")
