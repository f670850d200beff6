"""
News CMS category service FastAPI application.

Exposes the category taxonomy, resolver and picker to the CMS front end.
Posts themselves are served by the hosted backend; this service only reads
their category values.
"""

import logging
from typing import Optional
from fastapi import FastAPI, Depends, Query, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.ext.asyncio import AsyncSession
from pydantic import BaseModel

from config import settings
from database.session import get_db, dispose_engine
from services.post_categories import PostCategoryService, PostCategoryServiceError
from taxonomy.picker import build_picker_options
from taxonomy.resolver import CategoryRef, CategoryResolver, StorageFormat, get_resolver


logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Build and validate the taxonomy before the app can serve anything;
# a broken taxonomy raises TaxonomyConfigurationError here.
resolver = get_resolver()


# Create FastAPI application
app = FastAPI(
    title="News CMS Category API",
    description="Category taxonomy, routing and picker data for the news CMS",
    version="0.1.0",
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # In production, restrict to specific origins
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_category_resolver() -> CategoryResolver:
    """FastAPI dependency returning the shared category resolver."""
    return resolver


# Startup and shutdown events
@app.on_event("startup")
async def startup_event():
    """Report the loaded taxonomy on application startup."""
    logger.info(
        "Category taxonomy loaded: %d categories, %d route aliases",
        len(resolver.taxonomy), len(resolver.taxonomy.aliases),
    )
    if settings.CATEGORY_DEBUG:
        resolver.log_mappings()


@app.on_event("shutdown")
async def shutdown_event():
    """Close database connections on application shutdown."""
    await dispose_engine()


# Pydantic models for category endpoints
class SerializeCategoryRequest(BaseModel):
    """Request model for converting a category to its stored value."""
    category_id: int
    format: Optional[StorageFormat] = None


@app.get("/health")
async def health_check():
    """
    Health check endpoint.

    Returns basic service status.
    """
    return {
        "status": "healthy",
        "service": "newsroom-categories",
        "version": "0.1.0"
    }


@app.get("/api/categories")
async def list_categories(cat_resolver: CategoryResolver = Depends(get_category_resolver)):
    """
    List all categories in declaration order.

    Returns:
        Categories with ids, levels, url paths and hierarchical names
    """
    nodes = cat_resolver.taxonomy.get_all_nodes()
    return {
        "categories": [n.to_dict() for n in nodes],
        "count": len(nodes),
    }


@app.get("/api/categories/picker")
async def list_picker_options(cat_resolver: CategoryResolver = Depends(get_category_resolver)):
    """
    Rows for the grouped category select in the post editor.

    Headers are never selectable; only leaves carry a node_id.
    """
    return {
        "options": [e.to_dict() for e in build_picker_options(cat_resolver.taxonomy)],
    }


@app.get("/api/categories/mappings")
async def list_url_mappings(cat_resolver: CategoryResolver = Depends(get_category_resolver)):
    """Full url fragment -> category id routing table, legacy aliases included."""
    return {"mappings": cat_resolver.get_url_mappings()}


@app.get("/api/categories/route")
async def resolve_route(
    category: Optional[str] = Query(None, description="First url segment"),
    subcategory: Optional[str] = Query(None, description="Second url segment"),
    subsubcategory: Optional[str] = Query(None, description="Third url segment"),
    cat_resolver: CategoryResolver = Depends(get_category_resolver),
):
    """
    Resolve /category/:category/:subcategory/:subsubcategory router params.

    Raises:
        HTTPException: 404 if the segments match no category
    """
    category_id = cat_resolver.build_url_from_params(category, subcategory, subsubcategory)
    if category_id is None:
        raise HTTPException(status_code=404, detail="Category not found")
    return cat_resolver.resolve_by_id(category_id).to_dict()


@app.get("/api/categories/resolve")
async def resolve_category(
    kind: StorageFormat = Query(..., description="Representation of value"),
    value: str = Query(..., description="Category id, url path, hierarchical or display name"),
    cat_resolver: CategoryResolver = Depends(get_category_resolver),
):
    """
    Resolve a category reference of an explicit kind to its breadcrumb.

    Raises:
        HTTPException: 400 for a non-numeric id, 404 if nothing matches
    """
    if kind is StorageFormat.ID:
        try:
            ref = CategoryRef.by_id(int(value))
        except ValueError:
            raise HTTPException(status_code=400, detail=f"Invalid category id: {value}")
    else:
        ref = CategoryRef(kind, value)

    breadcrumb = cat_resolver.resolve(ref)
    if breadcrumb is None:
        raise HTTPException(status_code=404, detail="Category not found")
    return breadcrumb.to_dict()


@app.post("/api/categories/serialize")
async def serialize_category(
    request: SerializeCategoryRequest,
    cat_resolver: CategoryResolver = Depends(get_category_resolver),
):
    """
    Convert a category id to the value written to posts.

    Uses CATEGORY_STORAGE_FORMAT (numeric id by default) unless the request
    asks for an older string format.
    """
    breadcrumb = cat_resolver.resolve_by_id(request.category_id)
    if breadcrumb is None:
        raise HTTPException(status_code=404, detail="Category not found")

    fmt = request.format or settings.CATEGORY_STORAGE_FORMAT
    return {
        "category_id": breadcrumb.id,
        "format": fmt.value,
        "value": cat_resolver.serialize_for_storage(breadcrumb, fmt),
    }


@app.get("/api/categories/in-use")
async def list_categories_in_use(
    db: AsyncSession = Depends(get_db),
    cat_resolver: CategoryResolver = Depends(get_category_resolver),
):
    """
    Categories currently stored on posts, for the post list filter.

    Values that no longer resolve are returned with null names so the UI
    can show them as "Uncategorized".
    """
    service = PostCategoryService(db, cat_resolver)
    try:
        categories = await service.describe_categories_in_use()
    except PostCategoryServiceError as e:
        logger.error("Failed to load categories in use: %s", e)
        raise HTTPException(status_code=500, detail="Failed to load categories")

    return {
        "categories": categories,
        "count": len(categories),
    }


@app.get("/api/categories/{category_id}")
async def get_category(
    category_id: int,
    cat_resolver: CategoryResolver = Depends(get_category_resolver),
):
    """
    Get a category with its breadcrumb.

    Raises:
        HTTPException: 404 if the id is unknown
    """
    breadcrumb = cat_resolver.resolve_by_id(category_id)
    if breadcrumb is None:
        raise HTTPException(status_code=404, detail="Category not found")
    return breadcrumb.to_dict()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host=settings.SERVICE_HOST,
        port=settings.SERVICE_PORT,
        reload=True,
    )
