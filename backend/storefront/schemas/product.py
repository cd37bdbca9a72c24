"""Product schemas: admin payloads and the catalog read contract."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from storefront.schemas.category import CategoryRef
from storefront.schemas.common import CamelModel


# ── Images & specifications ──
class ProductImageCreate(BaseModel):
    image_url: str = Field(..., min_length=1, max_length=500)
    is_main: bool = False


class ProductImageResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    image_url: str
    is_main: bool
    sort_order: int


class SpecificationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    slug: str


class ProductSpecificationSet(BaseModel):
    specification_id: int = Field(..., ge=1)
    value: str = Field(..., min_length=1, max_length=255)


class ProductSpecificationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    value: str
    specification: SpecificationResponse


# ── Product ──
class ProductBase(BaseModel):
    name: str = Field(..., min_length=2, max_length=255)
    slug: str = Field(..., min_length=2, max_length=255)
    sku: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=10)
    price: Decimal = Field(..., ge=0, decimal_places=2)
    category_id: int = Field(..., ge=1)
    is_hit: bool = False
    in_stock: bool = True
    stock_quantity: int = Field(default=0, ge=0)
    main_image: str | None = Field(None, max_length=500)


class ProductCreate(ProductBase):
    pass


class ProductUpdate(BaseModel):
    name: str | None = Field(None, min_length=2, max_length=255)
    slug: str | None = Field(None, min_length=2, max_length=255)
    sku: str | None = Field(None, min_length=1, max_length=100)
    description: str | None = Field(None, min_length=10)
    price: Decimal | None = Field(None, ge=0, decimal_places=2)
    category_id: int | None = Field(None, ge=1)
    is_hit: bool | None = None
    in_stock: bool | None = None
    stock_quantity: int | None = Field(None, ge=0)
    main_image: str | None = Field(None, max_length=500)

    @field_validator(
        "name", "slug", "sku", "description", "price",
        "category_id", "is_hit", "in_stock", "stock_quantity",
    )
    @classmethod
    def not_null(cls, value):
        # Omitted fields are left alone; an explicit null is rejected
        if value is None:
            raise ValueError("may be omitted but not null")
        return value


class ProductResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    slug: str
    sku: str
    description: str
    price: float
    category_id: int
    is_hit: bool
    in_stock: bool
    stock_quantity: int
    main_image: str
    created_at: datetime
    updated_at: datetime
    category: CategoryRef | None = None
    images: list[ProductImageResponse] = []
    specifications: list[ProductSpecificationResponse] = []


class ProductSummary(BaseModel):
    """Compact row for the quick-search dropdown."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    slug: str
    sku: str
    price: float
    main_image: str
    category: CategoryRef | None = None


# ── Catalog read contract ──
class Pagination(CamelModel):
    total: int
    page: int
    limit: int
    total_pages: int


class ProductListResponse(CamelModel):
    products: list[ProductResponse]
    pagination: Pagination
    error: str | None = None


class ProductDetailResponse(BaseModel):
    product: ProductResponse


class ProductSearchResponse(BaseModel):
    products: list[ProductSummary]
    error: str | None = None


class FeaturedProductsResponse(BaseModel):
    products: list[ProductResponse]


# ── Admin listing ──
class AdminProductListResponse(BaseModel):
    items: list[ProductResponse]
    total: int
    page: int
    page_size: int
