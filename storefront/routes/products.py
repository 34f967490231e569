"""Product API routes for the storefront"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from ..core.errors import ApiError
from ..models.product import Product, ProductListResponse
from ..services.backend import BackendClient
from .deps import get_backend

router = APIRouter(prefix="/api/products", tags=["Products"])


@router.get("", response_model=ProductListResponse)
async def list_products(
    category: Optional[str] = Query(None, description="Only products in this category"),
    in_stock: Optional[bool] = Query(None, description="Only products with this stock state"),
    backend: BackendClient = Depends(get_backend),
):
    """List active products, newest first"""
    category = (category or "").strip() or None
    items = await backend.fetch_active_products(category=category, in_stock=in_stock)
    return ProductListResponse(items=items)


@router.get("/{slug}", response_model=Product)
async def get_product(slug: str, backend: BackendClient = Depends(get_backend)):
    """Get a product by slug"""
    slug = slug.strip()
    if not slug:
        raise ApiError(
            status_code=400,
            code="VALIDATION_ERROR",
            message="Request values are invalid.",
            field_errors={"slug": "slug is required."},
        )

    product = await backend.fetch_product_by_slug(slug)
    if not product:
        raise ApiError(
            status_code=404,
            code="NOT_FOUND",
            message="Product not found.",
            field_errors={"slug": "No product with this slug."},
        )
    return product
