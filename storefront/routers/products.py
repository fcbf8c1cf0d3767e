"""
Mock product API.

GET  /api/products         : filtered, sorted, paginated listing
GET  /api/products/{id}    : single product
POST /api/products         : create
PUT  /api/products         : bulk update
"""
from __future__ import annotations

import asyncio
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from storefront.core.config import Settings
from storefront.core.deps import get_catalog, get_settings
from storefront.schemas.product import (
    BulkUpdateData,
    BulkUpdateRequest,
    BulkUpdateResponse,
    Pagination,
    ProductCreate,
    ProductFilters,
    ProductListData,
    ProductListResponse,
    ProductOut,
    ProductResponse,
    UpdateFailure,
)
from storefront.services.catalog import ProductCatalog, ProductQuery

router = APIRouter(prefix="/api/products", tags=["products"])

_ERROR_RESPONSES = {
    400: {"description": "Validation error envelope"},
    500: {"description": "Unexpected error envelope"},
}


async def _simulate_latency(settings: Settings) -> None:
    if settings.API_DELAY_SECONDS > 0:
        await asyncio.sleep(settings.API_DELAY_SECONDS)


@router.get(
    "",
    response_model=ProductListResponse,
    summary="List products",
    responses=_ERROR_RESPONSES,
)
async def list_products(
    category: Optional[str] = Query(default=None, examples=["electronics"]),
    search: Optional[str] = Query(default=None, examples=["wireless"]),
    in_stock: Optional[str] = Query(default=None, alias="inStock", examples=["true"]),
    sort: str = Query(default="name", description="name | price-low | price-high"),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    catalog: ProductCatalog = Depends(get_catalog),
    settings: Settings = Depends(get_settings),
):
    """
    Filter by category (`all` disables the filter), free-text search over name
    and description, and stock status; then sort and paginate.
    """
    result = catalog.list_products(ProductQuery(
        category=category,
        search=search,
        in_stock=in_stock,
        sort=sort,
        page=page,
        limit=limit,
    ))
    await _simulate_latency(settings)

    return ProductListResponse(
        data=ProductListData(
            products=[ProductOut.model_validate(p) for p in result.products],
            pagination=Pagination(
                current_page=result.current_page,
                total_pages=result.total_pages,
                total_products=result.total_products,
                has_next_page=result.has_next_page,
                has_prev_page=result.has_prev_page,
            ),
            filters=ProductFilters(category=category, search=search, in_stock=in_stock),
        ),
    )


@router.get(
    "/{product_id}",
    response_model=ProductResponse,
    summary="Get one product",
    responses={404: {"description": "Product not found"}},
)
async def get_product(product_id: int, catalog: ProductCatalog = Depends(get_catalog)):
    product = catalog.get(product_id)
    return ProductResponse(
        data=ProductOut.model_validate(product),
        message="Product retrieved successfully",
    )


@router.post(
    "",
    response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a product",
    responses=_ERROR_RESPONSES,
)
async def create_product(
    payload: ProductCreate,
    catalog: ProductCatalog = Depends(get_catalog),
    settings: Settings = Depends(get_settings),
):
    """Requires name, price, description and category. The new id is max(id) + 1."""
    product = catalog.create(payload.model_dump())
    await _simulate_latency(settings)
    return ProductResponse(
        data=ProductOut.model_validate(product),
        message="Product created successfully",
    )


@router.put(
    "",
    response_model=BulkUpdateResponse,
    summary="Bulk update products",
    responses=_ERROR_RESPONSES,
)
async def bulk_update_products(
    payload: BulkUpdateRequest,
    catalog: ProductCatalog = Depends(get_catalog),
    settings: Settings = Depends(get_settings),
):
    """
    Apply each update independently. Unknown ids land in `data.errors`
    instead of failing the request.
    """
    result = catalog.bulk_update((u.id, u.changes()) for u in payload.updates)
    await _simulate_latency(settings)

    return BulkUpdateResponse(
        data=BulkUpdateData(
            updated=[ProductOut.model_validate(p) for p in result.updated],
            errors=[UpdateFailure(**e) for e in result.errors],
        ),
        message=f"{len(result.updated)} products updated successfully",
    )
