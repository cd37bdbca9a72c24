from storefront.schemas.category import (
    CategoryCreate, CategoryUpdate, CategoryResponse, CategoryListResponse,
)
from storefront.schemas.filters import FilterOption, PriceRange, FiltersResponse, SortOrder
from storefront.schemas.product import (
    ProductCreate, ProductUpdate, ProductResponse, ProductListResponse, Pagination,
)
from storefront.schemas.order import CheckoutRequest, OrderResponse, OrderListResponse

__all__ = [
    "CategoryCreate", "CategoryUpdate", "CategoryResponse", "CategoryListResponse",
    "FilterOption", "PriceRange", "FiltersResponse", "SortOrder",
    "ProductCreate", "ProductUpdate", "ProductResponse", "ProductListResponse", "Pagination",
    "CheckoutRequest", "OrderResponse", "OrderListResponse",
]
