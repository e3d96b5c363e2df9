"""
Ordered matcher rules for the product extractor.

Each list is evaluated top to bottom and the first rule that yields an
acceptable element wins, so list order is the relevance ranking. Class and
attribute comparisons are plain lower-cased substring checks on the raw
attribute text; no selector engine is involved.
"""
from dataclasses import dataclass
from typing import Callable, List, Sequence

from bs4 import Tag


@dataclass(frozen=True)
class Rule:
    """A named element predicate."""
    label: str
    matches: Callable[[Tag], bool]

    def __call__(self, element: Tag) -> bool:
        return self.matches(element)


def _attr_text(element: Tag, attr: str) -> str:
    value = element.get(attr)
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        value = " ".join(value)
    return str(value).lower()


def tag_in(*names: str) -> Callable[[Tag], bool]:
    wanted = frozenset(names)
    return lambda el: el.name in wanted


def class_contains(*fragments: str) -> Callable[[Tag], bool]:
    lowered = tuple(f.lower() for f in fragments)

    def check(el: Tag) -> bool:
        text = _attr_text(el, "class")
        return bool(text) and any(f in text for f in lowered)

    return check


def attr_equals(attr: str, value: str) -> Callable[[Tag], bool]:
    value = value.lower()
    return lambda el: _attr_text(el, attr).strip() == value


def attr_contains(attrs: Sequence[str], *fragments: str) -> Callable[[Tag], bool]:
    lowered = tuple(f.lower() for f in fragments)

    def check(el: Tag) -> bool:
        for attr in attrs:
            text = _attr_text(el, attr)
            if text and any(f in text for f in lowered):
                return True
        return False

    return check


def has_any_attr(*attrs: str) -> Callable[[Tag], bool]:
    return lambda el: any(el.has_attr(a) for a in attrs)


TEST_ID_ATTRS = ("data-testid", "data-test", "data-qa", "data-test-id")

CARD_CLASS_FRAGMENTS = (
    "product-card", "product_card", "productcard",
    "product-tile", "product_tile", "producttile",
    "product-item", "product_item", "productitem",
    "card", "tile", "item",
)

CARD_RULES: List[Rule] = [
    Rule("semantic_tag", tag_in("article", "li")),
    Rule("aria_listitem", attr_equals("role", "listitem")),
    Rule("product_data_attr", has_any_attr("data-product-id", "data-product", "data-sku")),
    Rule("card_class", class_contains(*CARD_CLASS_FRAGMENTS)),
]

NAME_RULES: List[Rule] = [
    Rule("itemprop_name", attr_equals("itemprop", "name")),
    Rule("test_id_name", attr_contains(TEST_ID_ATTRS, "name", "title")),
    Rule("product_name_class", class_contains(
        "product-name", "product_name", "productname",
        "product-title", "product_title", "producttitle",
    )),
    Rule("name_class", class_contains("name", "title")),
    Rule("heading", tag_in("h1", "h2", "h3", "h4", "h5", "h6")),
    Rule("anchor", tag_in("a")),
    Rule("emphasis", tag_in("strong", "b")),
    Rule("paragraph", tag_in("p")),
    Rule("span", tag_in("span")),
    Rule("div", tag_in("div")),
]

PRICE_RULES: List[Rule] = [
    Rule("itemprop_price", attr_equals("itemprop", "price")),
    Rule("price_data_attr", has_any_attr("data-price", "data-product-price")),
    Rule("test_id_price", attr_contains(TEST_ID_ATTRS, "price")),
    Rule("sale_price_class", class_contains(
        "sale-price", "sale_price", "price-sale", "price--sale",
        "special-price", "current-price", "price-current",
    )),
    Rule("price_class", class_contains("price")),
    Rule("amount_class", class_contains("amount", "cost")),
    Rule("span", tag_in("span")),
    Rule("div", tag_in("div")),
]


def matches_any(element: Tag, rules: Sequence[Rule]) -> bool:
    return any(rule(element) for rule in rules)
