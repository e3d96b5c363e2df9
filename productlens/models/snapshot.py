"""
DOM snapshot model - the page loader's output and the extractor's only input.
"""
from dataclasses import dataclass, field
from functools import cached_property
from typing import Optional
from urllib.parse import urljoin

from bs4 import BeautifulSoup, Tag

# Attribute the browser loader stamps on every element before serializing
AREA_ATTRIBUTE = "data-productlens-area"


@dataclass
class DomSnapshot:
    """
    A fully loaded page, frozen at the moment it was serialized.

    `has_geometry` is True when elements carry bounding-box areas
    (browser-rendered pages); plain HTTP snapshots have none.
    """
    url: str
    html: str
    has_geometry: bool = False
    soup: BeautifulSoup = field(init=False, repr=False)

    def __post_init__(self):
        self.soup = BeautifulSoup(self.html or "", "lxml")

    @classmethod
    def from_html(cls, url: str, html: str, has_geometry: bool = False) -> "DomSnapshot":
        return cls(url=url, html=html, has_geometry=has_geometry)

    @cached_property
    def base_url(self) -> str:
        """Base for resolving relative links, honouring <base href>."""
        base = self.soup.find("base", href=True)
        if base and base["href"].strip():
            try:
                return urljoin(self.url, base["href"].strip())
            except ValueError:
                # Unparseable <base href>, e.g. an unbalanced IPv6 bracket
                return self.url
        return self.url

    def resolve(self, href: Optional[str]) -> str:
        """
        Resolve an href the way a browser's anchor.href does.

        Returns "" when the href cannot be parsed as a URL.
        """
        if href is None:
            return ""
        try:
            return urljoin(self.base_url, href.strip())
        except ValueError:
            return ""

    def area_of(self, element: Tag) -> Optional[float]:
        """Bounding-box area in px², or None when unknown."""
        if not self.has_geometry:
            return None
        raw = element.get(AREA_ATTRIBUTE)
        if raw is None:
            return None
        try:
            return float(raw)
        except (TypeError, ValueError):
            return None
