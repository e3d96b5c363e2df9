"""
Page Loader Adapters for ProductLens.
Turn a URL into a DomSnapshot the product extractor can query.

- BrowserPageLoader: headless Chromium via Playwright, waits for network idle
  and records each element's bounding-box area before serializing the DOM.
- HttpPageLoader: plain HTTP fetch via httpx (no JavaScript, no geometry).
"""
import asyncio
from typing import Optional

import httpx
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import async_playwright

from productlens.config import config
from productlens.models.snapshot import AREA_ATTRIBUTE, DomSnapshot
from productlens.utils.logger import LayerLogger


USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)

# Runs inside the page; stores width * height on every element under <body>
STAMP_AREAS_SCRIPT = """
(attr) => {
    for (const el of document.querySelectorAll('body *')) {
        const rect = el.getBoundingClientRect();
        el.setAttribute(attr, String(Math.round(rect.width * rect.height)));
    }
}
"""


class NavigationError(Exception):
    """The page could not be loaded (bad URL, timeout, refused connection...)."""

    def __init__(self, url: str, reason: str):
        super().__init__(f"Failed to load {url}: {reason}")
        self.url = url
        self.reason = reason


class PageLoader:
    """Base class for page loaders."""

    name = "page_loader"

    def __init__(self, timeout: int):
        self.timeout = timeout
        self.logger = LayerLogger(self.name)

    async def load(self, url: str) -> DomSnapshot:
        """
        Load a URL and return its DOM snapshot.

        Raises:
            NavigationError: if the page could not be loaded in time
        """
        self.logger.log_action("load_page", "started", url=url, timeout=self.timeout)
        try:
            # Outer bound on top of the loader's own timeouts
            snapshot = await asyncio.wait_for(self._load(url), timeout=self.timeout + 5)
        except asyncio.TimeoutError:
            self.logger.log_error(
                f"Timed out after {self.timeout}s",
                error_type="navigation_timeout",
                url=url,
            )
            raise NavigationError(url, f"timed out after {self.timeout}s")

        self.logger.log_action(
            "load_page",
            "completed",
            url=url,
            final_url=snapshot.url,
            content_length=len(snapshot.html),
            has_geometry=snapshot.has_geometry,
        )
        return snapshot

    async def _load(self, url: str) -> DomSnapshot:
        raise NotImplementedError


class BrowserPageLoader(PageLoader):
    """Renders pages in headless Chromium."""

    name = "browser_page_loader"

    def __init__(
        self,
        timeout: int = 45,
        headless: bool = True,
        wait_until: str = "networkidle",
    ):
        super().__init__(timeout)
        self.headless = headless
        self.wait_until = wait_until

    async def _load(self, url: str) -> DomSnapshot:
        try:
            async with async_playwright() as p:
                browser = await p.chromium.launch(headless=self.headless)
                try:
                    context = await browser.new_context(
                        viewport={"width": 1920, "height": 1080},
                        user_agent=USER_AGENT,
                    )
                    page = await context.new_page()
                    response = await page.goto(
                        url,
                        wait_until=self.wait_until,
                        timeout=self.timeout * 1000,
                    )
                    await page.evaluate(STAMP_AREAS_SCRIPT, AREA_ATTRIBUTE)
                    html = await page.content()
                    final_url = page.url
                finally:
                    await browser.close()
        except PlaywrightError as e:
            self.logger.log_error(
                f"Browser navigation failed: {str(e)}",
                error_type="navigation_error",
                url=url,
            )
            raise NavigationError(url, str(e).splitlines()[0] if str(e) else "navigation error")

        if response is not None and response.status >= 400:
            self.logger.log_decision(
                decision="extract_anyway",
                reason=f"HTTP {response.status} but the page rendered",
                url=url,
            )

        return DomSnapshot.from_html(final_url, html, has_geometry=True)


class HttpPageLoader(PageLoader):
    """Fetches raw HTML without running scripts."""

    name = "http_page_loader"

    def __init__(self, timeout: int = 30, transport: Optional[httpx.AsyncBaseTransport] = None):
        super().__init__(timeout)
        self.transport = transport

    def _get_headers(self) -> dict:
        """Get request headers mimicking a browser."""
        return {
            "User-Agent": USER_AGENT,
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
            "Accept-Language": "en-US,en;q=0.5",
        }

    async def _load(self, url: str) -> DomSnapshot:
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                follow_redirects=True,
                transport=self.transport,
            ) as client:
                response = await client.get(url, headers=self._get_headers())
                response.raise_for_status()
                html = response.text
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            self.logger.log_error(
                f"Failed to fetch URL: {str(e)}",
                error_type="http_error",
                url=url,
            )
            raise NavigationError(url, str(e) or e.__class__.__name__)

        return DomSnapshot.from_html(str(response.url), html)


def create_page_loader() -> PageLoader:
    """Build the page loader selected by configuration."""
    if config.use_browser():
        return BrowserPageLoader(
            timeout=config.PAGE_LOAD_TIMEOUT,
            headless=config.BROWSER_HEADLESS,
            wait_until=config.PAGE_WAIT_UNTIL,
        )
    return HttpPageLoader(timeout=config.REQUEST_TIMEOUT)
