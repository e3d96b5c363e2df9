"""
ProductLens - FastAPI Application
Main entry point with REST API endpoints.
"""
from typing import List, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from productlens.config import config
from productlens.utils.logger import get_logger, set_trace_id
from productlens.utils.validation import InvalidURLError
from productlens.adapters.catalog_store import PersistenceError
from productlens.layers.scraping import ScrapingLayer
from productlens.layers.search import ProductSearchLayer
from productlens.layers.approval import ApprovalLayer
from productlens.models.product import CanonicalProduct, ExtractedProduct, ProductForApproval


# Initialize FastAPI app
app = FastAPI(
    title="ProductLens",
    description="Finds product listings on any web page and curates them into a canonical catalog",
    version="1.0.0",
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Initialize layers
scraping_layer = ScrapingLayer()
search_layer = ProductSearchLayer(scraping_layer=scraping_layer)
approval_layer = ApprovalLayer(scraping_layer=scraping_layer)

logger = get_logger("main")


# Request/Response models
class SearchRequest(BaseModel):
    """Request model for product search."""
    url: str
    search_term: Optional[str] = None


class SummaryPayload(BaseModel):
    summary: str


class SearchResponse(BaseModel):
    """Response model for product search."""
    url: str
    status: str  # ok, empty or navigation_failed
    products: List[ExtractedProduct]
    summary: Optional[SummaryPayload] = None
    trace_id: str


class ApprovalProductsRequest(BaseModel):
    """Request model for fetching products to review."""
    url: str


class ApprovalProductsResponse(BaseModel):
    """Response model for products awaiting review."""
    url: str
    status: str
    products: List[ExtractedProduct]
    trace_id: str


class ApproveResponse(BaseModel):
    """Response model for a single approval."""
    success: bool
    canonical_product_id: Optional[str] = None
    error: Optional[str] = None
    trace_id: str


class CanonicalProductsResponse(BaseModel):
    products: List[CanonicalProduct]


# API Routes
@app.get("/api/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "version": "1.0.0"}


@app.post("/api/products")
async def search_products(request: SearchRequest):
    """
    Find products on a page and summarize them.

    A page that failed to load is reported like a page without products,
    with status "navigation_failed".
    """
    trace_id = set_trace_id()

    logger.info(
        "product_search_request",
        url=request.url,
        search_term=request.search_term,
        trace_id=trace_id
    )

    try:
        result = await search_layer.search(request.url, request.search_term)
    except InvalidURLError as e:
        logger.info("product_search_rejected", reason=e.message, url=request.url)
        raise HTTPException(status_code=400, detail=e.message)
    except Exception as e:
        logger.error("product_search_error", error=str(e), url=request.url)
        raise HTTPException(status_code=500, detail=str(e))

    logger.info(
        "product_search_completed",
        url=result.url,
        status=result.status.value,
        products_count=len(result.products),
        has_summary=result.summary is not None,
    )

    return SearchResponse(
        url=result.url,
        status=result.status.value,
        products=result.products,
        summary=SummaryPayload(summary=result.summary) if result.summary else None,
        trace_id=trace_id,
    )


@app.post("/api/approval/products")
async def get_products_for_approval(request: ApprovalProductsRequest):
    """Fetch a page's products for human review."""
    trace_id = set_trace_id()

    logger.info("approval_fetch_request", url=request.url, trace_id=trace_id)

    try:
        result = await approval_layer.fetch_products(request.url)
    except InvalidURLError as e:
        raise HTTPException(status_code=400, detail=e.message)
    except Exception as e:
        logger.error("approval_fetch_error", error=str(e), url=request.url)
        raise HTTPException(status_code=500, detail=str(e))

    return ApprovalProductsResponse(
        url=result.url,
        status=result.status.value,
        products=result.products,
        trace_id=trace_id,
    )


@app.post("/api/approval/approve")
async def approve_product(product: ProductForApproval):
    """
    Approve one product into the canonical catalog.

    Persistence failures come back as success=false with a message.
    """
    trace_id = set_trace_id()

    logger.info(
        "approval_request",
        name=product.name,
        link=product.link,
        source_url=product.source_url,
        trace_id=trace_id
    )

    result = await approval_layer.approve(product)

    return ApproveResponse(
        success=result.success,
        canonical_product_id=result.canonical_product_id,
        error=result.error,
        trace_id=trace_id,
    )


@app.get("/api/canonical-products")
async def list_canonical_products():
    """List approved products, newest first."""
    try:
        products = await approval_layer.list_approved()
    except PersistenceError as e:
        logger.error("canonical_products_error", error=str(e))
        raise HTTPException(status_code=500, detail=str(e))

    return CanonicalProductsResponse(products=products)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=config.HOST, port=config.PORT)
