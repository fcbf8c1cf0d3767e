"""
Product API request / response schemas.

List:         GET  /api/products     → ProductListResponse
Create:       POST /api/products     → ProductCreate → ProductResponse
Bulk update:  PUT  /api/products     → BulkUpdateRequest → BulkUpdateResponse

Wire names are camelCase (`inStock`, `currentPage`, ...); Python attributes
stay snake_case.
"""
from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ProductOut(_CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: int
    name: str
    price: float
    image: str
    description: str
    category: str
    in_stock: bool
    stock: int


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------

class ProductCreate(_CamelModel):
    """A new product. Presence of name/price/description/category is checked by the catalog."""

    name: Optional[str] = Field(default=None, examples=["Mechanical Keyboard"])
    price: Optional[float] = Field(default=None, allow_inf_nan=False, examples=[149.99])
    description: Optional[str] = None
    category: Optional[str] = Field(default=None, examples=["Accessories"])
    image: Optional[str] = None
    in_stock: Optional[bool] = None
    stock: Optional[int] = None


class ProductUpdate(_CamelModel):
    """One entry of a bulk update; only the fields present are applied."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    id: int
    name: Optional[str] = None
    price: Optional[float] = Field(default=None, allow_inf_nan=False)
    image: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    in_stock: Optional[bool] = None
    stock: Optional[int] = None

    def changes(self) -> dict[str, Any]:
        return self.model_dump(exclude={"id"}, exclude_unset=True)


class BulkUpdateRequest(BaseModel):
    updates: list[ProductUpdate]


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------

class Pagination(_CamelModel):
    current_page: int
    total_pages: int
    total_products: int
    has_next_page: bool
    has_prev_page: bool


class ProductFilters(_CamelModel):
    category: Optional[str] = None
    search: Optional[str] = None
    in_stock: Optional[str] = None


class ProductListData(BaseModel):
    products: list[ProductOut]
    pagination: Pagination
    filters: ProductFilters


class ProductListResponse(BaseModel):
    success: Literal[True] = True
    data: ProductListData
    message: str = "Products retrieved successfully"


class ProductResponse(BaseModel):
    success: Literal[True] = True
    data: ProductOut
    message: str


class UpdateFailure(BaseModel):
    id: int
    error: str


class BulkUpdateData(BaseModel):
    updated: list[ProductOut]
    errors: list[UpdateFailure]


class BulkUpdateResponse(BaseModel):
    success: Literal[True] = True
    data: BulkUpdateData
    message: str
