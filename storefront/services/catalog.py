"""
In-memory product catalog backing the mock REST API.

Public API
----------
ProductCatalog.list_products(query)   → ProductPage
ProductCatalog.get(product_id)        → Product            (NotFoundError)
ProductCatalog.create(data)           → Product            (ValidationError)
ProductCatalog.bulk_update(updates)   → BulkUpdateResult

The product list lives for the lifetime of the process and is mutated in
place. Nothing here is synchronised: concurrent writers may interleave.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field, fields, replace
from typing import Any, Iterable, Optional

from storefront.core.errors import NotFoundError, ValidationError
from storefront.core.validation import validate_positive_number, validate_required

DEFAULT_IMAGE = "/next.svg"
DEFAULT_PAGE_SIZE = 10
REQUIRED_FIELDS = ("name", "price", "description", "category")


# ---------------------------------------------------------------------------
# Types
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Product:
    id: int
    name: str
    price: float
    image: str
    description: str
    category: str
    in_stock: bool
    stock: int


@dataclass
class ProductQuery:
    category: Optional[str] = None
    search: Optional[str] = None
    in_stock: Optional[str] = None  # "true" / "false"; anything else is ignored
    sort: str = "name"
    page: int = 1
    limit: int = DEFAULT_PAGE_SIZE


@dataclass
class ProductPage:
    products: list[Product]
    current_page: int
    total_pages: int
    total_products: int

    @property
    def has_next_page(self) -> bool:
        return self.current_page < self.total_pages

    @property
    def has_prev_page(self) -> bool:
        return self.current_page > 1


@dataclass
class BulkUpdateResult:
    updated: list[Product] = field(default_factory=list)
    errors: list[dict[str, Any]] = field(default_factory=list)


_EDITABLE = frozenset(f.name for f in fields(Product)) - {"id"}

SEED_PRODUCTS: tuple[Product, ...] = (
    Product(1, "Premium Headphones", 299.99, "/next.svg",
            "High-quality wireless headphones with noise cancellation", "Electronics", True, 15),
    Product(2, "Smart Watch", 199.99, "/vercel.svg",
            "Feature-rich smartwatch with health tracking", "Electronics", True, 8),
    Product(3, "Laptop Stand", 79.99, "/globe.svg",
            "Ergonomic aluminum laptop stand for better posture", "Accessories", True, 25),
    Product(4, "Wireless Mouse", 49.99, "/file.svg",
            "Precision wireless mouse with ergonomic design", "Accessories", False, 0),
    Product(5, "USB-C Hub", 89.99, "/window.svg",
            "Multi-port USB-C hub with 4K HDMI output", "Accessories", True, 12),
    Product(6, "Bluetooth Speaker", 129.99, "/next.svg",
            "Portable Bluetooth speaker with premium sound", "Electronics", True, 20),
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _sort_key(sort: str):
    if sort == "price-low":
        return (lambda p: p.price), False
    if sort == "price-high":
        return (lambda p: p.price), True
    return (lambda p: p.name.casefold()), False


def _matches(product: Product, query: ProductQuery) -> bool:
    if query.category and query.category.lower() != "all":
        if product.category.lower() != query.category.lower():
            return False

    if query.search:
        needle = query.search.lower()
        if needle not in product.name.lower() and needle not in product.description.lower():
            return False

    if query.in_stock == "true" and not product.in_stock:
        return False
    if query.in_stock == "false" and product.in_stock:
        return False
    return True


def _as_price(value: Any) -> float:
    validate_positive_number(value, "price")
    try:
        return float(value)
    except OverflowError:
        raise ValidationError("price is out of range") from None


def _check_changes(changes: dict[str, Any]) -> dict[str, Any]:
    """Validate a bulk-update entry and return it with price as a float."""
    for name in REQUIRED_FIELDS:
        if name in changes:
            validate_required(changes[name], name)
    if "stock" in changes:
        validate_positive_number(changes["stock"], "stock")
    if "price" in changes:
        return {**changes, "price": _as_price(changes["price"])}
    return changes


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------

class ProductCatalog:
    def __init__(self, products: Optional[Iterable[Product]] = None):
        self._products: list[Product] = list(SEED_PRODUCTS if products is None else products)

    def __len__(self) -> int:
        return len(self._products)

    def list_products(self, query: ProductQuery) -> ProductPage:
        """Filter, sort and paginate. Pages past the end come back empty."""
        filtered = [p for p in self._products if _matches(p, query)]
        key, reverse = _sort_key(query.sort)
        filtered.sort(key=key, reverse=reverse)

        start = (query.page - 1) * query.limit
        return ProductPage(
            products=filtered[start:start + query.limit],
            current_page=query.page,
            total_pages=math.ceil(len(filtered) / query.limit),
            total_products=len(filtered),
        )

    def get(self, product_id: int) -> Product:
        for product in self._products:
            if product.id == product_id:
                return product
        raise NotFoundError("Product")

    def create(self, data: dict[str, Any]) -> Product:
        for name in REQUIRED_FIELDS:
            validate_required(data.get(name), name)
        price = _as_price(data["price"])

        stock = data.get("stock") or 0
        validate_positive_number(stock, "stock")

        product = Product(
            id=max((p.id for p in self._products), default=0) + 1,
            name=data["name"],
            price=price,
            image=data.get("image") or DEFAULT_IMAGE,
            description=data["description"],
            category=data["category"],
            in_stock=data.get("in_stock") is not False,
            stock=stock,
        )
        self._products.append(product)
        return product

    def bulk_update(self, updates: Iterable[tuple[int, dict[str, Any]]]) -> BulkUpdateResult:
        """
        Apply `(id, changes)` pairs in order. Unknown ids and rejected values
        are reported per item and do not stop the remaining updates.
        """
        result = BulkUpdateResult()
        for product_id, changes in updates:
            index = self._index_of(product_id)
            if index is None:
                result.errors.append({"id": product_id, "error": "Product not found"})
                continue

            try:
                changes = _check_changes(changes)
            except ValidationError as exc:
                result.errors.append({"id": product_id, "error": exc.message})
                continue

            known = {k: v for k, v in changes.items() if k in _EDITABLE and v is not None}
            self._products[index] = replace(self._products[index], **known)
            result.updated.append(self._products[index])
        return result

    def _index_of(self, product_id: int) -> Optional[int]:
        for index, product in enumerate(self._products):
            if product.id == product_id:
                return index
        return None
