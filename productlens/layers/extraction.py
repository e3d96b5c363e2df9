"""
Product Extraction Layer for ProductLens.

Finds product listings (name, price, link) on an arbitrary rendered page
without knowing the site's markup in advance:

1. Candidate discovery - anchors that wrap an image and lead somewhere
2. Card root resolution - the element that bounds one product listing
3. Name & price resolution - ordered rule cascades inside the card
4. Admission - drop anything without a usable name and price
5. Deduplication - by link, and by (name, link without fragment)

The extractor is synchronous and pure with respect to the snapshot it is
given. Malformed markup produces fewer products, never an exception.
"""
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence, Set, Tuple
from urllib.parse import urldefrag

from bs4 import BeautifulSoup, Tag

from productlens.layers.rules import CARD_RULES, NAME_RULES, PRICE_RULES, Rule, matches_any
from productlens.models.product import ExtractedProduct
from productlens.models.snapshot import DomSnapshot
from productlens.utils.logger import LayerLogger


# Card heuristics
CARD_MAX_LEVELS = 3
CARD_MIN_TEXT = 10
CARD_MAX_TEXT = 3000
CARD_MIN_AREA = 1_000
CARD_MAX_AREA = 4_000_000

# Field predicates
NAME_MIN_LENGTH = 3
NAME_MAX_LENGTH = 250
PRICE_MAX_LENGTH = 60

DIGIT_RE = re.compile(r"\d")
LETTER_RE = re.compile(r"[^\W\d_]")
CURRENCY_CODES = (
    "USD", "EUR", "GBP", "JPY", "CNY", "INR", "CAD", "AUD", "NZD", "CHF",
    "SEK", "NOK", "DKK", "PLN", "CZK", "HUF", "RUB", "BRL", "MXN", "ZAR",
    "SGD", "HKD", "KRW", "TRY", "AED", "SAR", "ILS", "THB", "IDR", "MYR",
    "PHP", "VND", "RON", "UAH",
)
_CURRENCY = r"(?:{}|[^\w\s]{{1,3}})".format("|".join(CURRENCY_CODES))
# A lone price-like token such as "$9.99", "9,99 €" or "USD 1,200.00"
PRICE_TOKEN_RE = re.compile(
    r"^(?:{c}\s*)?\d[\d\s.,'’]*(?:\s*{c})?$".format(c=_CURRENCY),
    re.IGNORECASE,
)
WHITESPACE_RE = re.compile(r"\s+")

BOUNDARY_TAGS = ("body", "html")


class ExtractionStatus(str, Enum):
    """Outcome of one extraction call."""
    OK = "ok"
    EMPTY = "empty"  # page loaded, nothing admitted
    NAVIGATION_FAILED = "navigation_failed"


@dataclass
class ExtractionResult:
    """Products found on a page, or why none could be looked for."""
    url: str
    status: ExtractionStatus
    products: List[ExtractedProduct] = field(default_factory=list)
    reason: Optional[str] = None

    @classmethod
    def from_products(cls, url: str, products: List[ExtractedProduct]) -> "ExtractionResult":
        status = ExtractionStatus.OK if products else ExtractionStatus.EMPTY
        return cls(url=url, status=status, products=products)

    @classmethod
    def navigation_failed(cls, url: str, reason: str) -> "ExtractionResult":
        return cls(url=url, status=ExtractionStatus.NAVIGATION_FAILED, reason=reason)

    @property
    def ok(self) -> bool:
        return self.status == ExtractionStatus.OK


@dataclass
class CandidateLink:
    """An image-bearing anchor with an absolute target."""
    anchor: Tag
    url: str


def clean_text(element: Optional[Tag]) -> str:
    """Trimmed text content with inner whitespace collapsed."""
    if element is None:
        return ""
    return WHITESPACE_RE.sub(" ", element.get_text()).strip()


def is_valid_name(text: str) -> bool:
    if not NAME_MIN_LENGTH <= len(text) < NAME_MAX_LENGTH:
        return False
    if not LETTER_RE.search(text):
        return False
    return not PRICE_TOKEN_RE.match(text)


def is_valid_price(text: str) -> bool:
    return bool(text) and len(text) < PRICE_MAX_LENGTH and bool(DIGIT_RE.search(text))


def strip_fragment(link: str) -> str:
    return urldefrag(link)[0]


def _is_document(node) -> bool:
    return node is None or isinstance(node, BeautifulSoup)


class ProductExtractor:
    """
    Heuristic product extractor.

    Holds no per-page state; one instance can serve any number of
    snapshots, concurrently if need be.
    """

    def __init__(self):
        self.logger = LayerLogger("product_extractor")

    def extract(self, snapshot: DomSnapshot) -> List[ExtractedProduct]:
        """
        Extract a deduplicated, ordered list of products from a snapshot.
        """
        anchors = snapshot.soup.find_all("a", href=True)
        candidates = self.discover_candidates(snapshot, anchors)

        admitted: List[ExtractedProduct] = []
        for candidate in candidates:
            card = self.resolve_card_root(candidate.anchor, snapshot)
            name, price = self.resolve_name_and_price(card, candidate.anchor)
            product = self.admit(name, price, candidate.url)
            if product is not None:
                admitted.append(product)

        products = self.deduplicate(admitted)

        self.logger.log_extraction(
            url=snapshot.url,
            anchors=len(anchors),
            candidates=len(candidates),
            admitted=len(admitted),
            kept=len(products),
        )
        return products

    # =========================================================================
    # Candidate discovery
    # =========================================================================

    def discover_candidates(
        self,
        snapshot: DomSnapshot,
        anchors: Optional[Sequence[Tag]] = None,
    ) -> List[CandidateLink]:
        """Image-bearing anchors with an absolute http(s) target, in document order."""
        if anchors is None:
            anchors = snapshot.soup.find_all("a", href=True)

        candidates = []
        for anchor in anchors:
            if anchor.find("img") is None:
                continue
            href = (anchor.get("href") or "").strip()
            if self._is_noop_href(href):
                continue
            url = snapshot.resolve(href)
            if not url or not url.lower().startswith("http"):
                continue
            candidates.append(CandidateLink(anchor=anchor, url=url))
        return candidates

    @staticmethod
    def _is_noop_href(href: str) -> bool:
        lowered = href.lower()
        return not href or href.startswith("#") or lowered.startswith("javascript:")

    # =========================================================================
    # Card root resolution
    # =========================================================================

    def resolve_card_root(self, link: Tag, snapshot: DomSnapshot) -> Tag:
        """The element bounding this link's product listing. Never None."""
        # Nearest card-like ancestor
        for ancestor in self._ancestors(link):
            if matches_any(ancestor, CARD_RULES):
                return ancestor

        # No card-like ancestor at all; bounded walk with the size/text heuristic
        for level, ancestor in enumerate(self._ancestors(link)):
            if level >= CARD_MAX_LEVELS:
                break
            if self._looks_like_card(ancestor, snapshot):
                return ancestor

        parent = link.parent
        grandparent = parent.parent if not _is_document(parent) else None
        if not _is_document(grandparent):
            return grandparent
        if not _is_document(parent):
            return parent
        return link

    @staticmethod
    def _ancestors(link: Tag):
        """Ancestors from the immediate parent up to, not including, <body>."""
        for ancestor in link.parents:
            if _is_document(ancestor) or ancestor.name in BOUNDARY_TAGS:
                return
            yield ancestor

    @staticmethod
    def _looks_like_card(element: Tag, snapshot: DomSnapshot) -> bool:
        if element.find("img") is None:
            return False
        text_length = len(element.get_text().strip())
        if not CARD_MIN_TEXT <= text_length <= CARD_MAX_TEXT:
            return False
        area = snapshot.area_of(element)
        if area is None:
            return True
        return CARD_MIN_AREA <= area <= CARD_MAX_AREA

    # =========================================================================
    # Name & price resolution
    # =========================================================================

    def resolve_name_and_price(self, card: Tag, link: Tag) -> Tuple[str, str]:
        """Best name and price text inside a card; empty strings when absent."""
        descendants = card.find_all(True)

        name = self._first_accepted(descendants, NAME_RULES, link, is_valid_name)
        if not name:
            name = self._image_alt_name(link)

        price = self._first_accepted(descendants, PRICE_RULES, link, is_valid_price)
        return name, price

    @staticmethod
    def _first_accepted(
        descendants: Sequence[Tag],
        rules: Sequence[Rule],
        link: Tag,
        accept,
    ) -> str:
        for rule in rules:
            matched = [el for el in descendants if rule(el)]
            for element in matched:
                if element is link and len(matched) > 1:
                    continue
                # Bounds apply to the trimmed text as rendered, not the collapsed one
                if accept(element.get_text().strip()):
                    return clean_text(element)
        return ""

    @staticmethod
    def _image_alt_name(link: Tag) -> str:
        image = link.find("img")
        if image is None:
            return ""
        alt = (image.get("alt") or "").strip()
        return WHITESPACE_RE.sub(" ", alt) if is_valid_name(alt) else ""

    # =========================================================================
    # Admission & deduplication
    # =========================================================================

    @staticmethod
    def admit(name: str, price: str, link: str) -> Optional[ExtractedProduct]:
        """A product when all fields pass, otherwise None."""
        if not name or not price or not link:
            return None
        if len(name) <= 1 or not DIGIT_RE.search(price):
            return None
        return ExtractedProduct(name=name, price=price, link=link)

    @staticmethod
    def deduplicate(products: Sequence[ExtractedProduct]) -> List[ExtractedProduct]:
        """First-seen order; drops repeated links and fragment-only variants."""
        seen_links: Set[str] = set()
        kept_keys: Set[Tuple[str, str]] = set()
        unique = []
        for product in products:
            if product.link in seen_links:
                continue
            seen_links.add(product.link)
            key = (product.name, strip_fragment(product.link))
            if key in kept_keys:
                continue
            kept_keys.add(key)
            unique.append(product)
        return unique
