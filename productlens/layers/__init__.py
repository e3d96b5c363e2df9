"""Layers package initialization."""
from productlens.layers.extraction import ProductExtractor, ExtractionResult, ExtractionStatus
from productlens.layers.scraping import ScrapingLayer
from productlens.layers.search import ProductSearchLayer, SearchResult
from productlens.layers.approval import ApprovalLayer, ApprovalResult

__all__ = [
    "ProductExtractor",
    "ExtractionResult",
    "ExtractionStatus",
    "ScrapingLayer",
    "ProductSearchLayer",
    "SearchResult",
    "ApprovalLayer",
    "ApprovalResult",
]
