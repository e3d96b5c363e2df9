"""
Product models for ProductLens.
Covers products found on a listing page and the canonical catalog records
created when a human approves one of them.
"""
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field


class ExtractedProduct(BaseModel):
    """
    A product listing detected on a rendered page.

    Produced only by the extractor's admission step, so `name` is longer
    than one character, `price` contains a digit and `link` is absolute.
    """
    model_config = ConfigDict(frozen=True)

    name: str
    price: str  # opaque display string, never normalized
    link: str

    def to_detail_line(self) -> str:
        """Render the product as one line of summarizer input."""
        return f"Name: {self.name}, Price: {self.price}, Link: {self.link}"


def format_product_details(products: List[ExtractedProduct]) -> str:
    """Newline-joined product lines, one product per line."""
    return "\n".join(p.to_detail_line() for p in products)


class ProductForApproval(BaseModel):
    """A product a reviewer wants to add to the canonical catalog."""
    name: str = Field(min_length=1)
    price: str = Field(min_length=1)
    link: str = Field(min_length=1)
    source_url: str = Field(min_length=1)


class CanonicalProduct(BaseModel):
    """
    An approved catalog record.

    `id`, `created_at` and `approved_at` are assigned by the store.
    """
    id: Optional[str] = None
    name: str
    price: str
    link: str
    source_url: str
    created_at: Optional[str] = None
    approved_at: Optional[str] = None
