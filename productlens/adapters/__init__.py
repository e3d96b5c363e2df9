"""Adapters package initialization."""
from productlens.adapters.page_loader import (
    BrowserPageLoader,
    HttpPageLoader,
    NavigationError,
    PageLoader,
    create_page_loader,
)
from productlens.adapters.claude_client import ClaudeClient
from productlens.adapters.catalog_store import CatalogStore, PersistenceError

__all__ = [
    "BrowserPageLoader",
    "HttpPageLoader",
    "NavigationError",
    "PageLoader",
    "create_page_loader",
    "ClaudeClient",
    "CatalogStore",
    "PersistenceError",
]
