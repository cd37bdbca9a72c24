"""Public catalog endpoints: facets, product listing, search and categories."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.core.config import settings
from storefront.db.base import get_db
from storefront.models.product import Product
from storefront.schemas.category import PublicCategory, PublicCategoryListResponse
from storefront.schemas.filters import FiltersResponse, PriceRange, SortOrder
from storefront.schemas.product import (
    FeaturedProductsResponse,
    Pagination,
    ProductDetailResponse,
    ProductListResponse,
    ProductResponse,
    ProductSearchResponse,
    ProductSummary,
)
from storefront.services import catalog

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["catalog"])


def _error_response(model) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=model.model_dump(by_alias=True, mode="json"),
    )


@router.get("/filters", response_model=FiltersResponse)
async def get_filters(
    search: str | None = None,
    category: str | None = None,
    body_type: str | None = Query(None, alias="bodyType"),
    resolution: str | None = None,
    db: AsyncSession = Depends(get_db),
):
    """Facet options with counts for the current search."""
    try:
        return await catalog.get_product_filters(
            db,
            search=search,
            category=category,
            body_type=body_type,
            resolution=resolution,
        )
    except SQLAlchemyError:
        logger.exception("Error fetching filters")
        return _error_response(
            FiltersResponse(
                price_range=PriceRange(
                    min=settings.DEFAULT_PRICE_MIN, max=settings.DEFAULT_PRICE_MAX
                ),
                error="Internal Server Error",
            )
        )


@router.get("/products", response_model=ProductListResponse)
async def list_products(
    search: str | None = None,
    category: int | None = None,
    body_type: str | None = Query(None, alias="bodyType"),
    resolution: str | None = None,
    min_price: int | None = Query(None, alias="minPrice", ge=0),
    max_price: int | None = Query(None, alias="maxPrice", ge=0),
    sort: str | None = None,
    page: int = Query(1, ge=1),
    limit: int = Query(settings.CATALOG_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    db: AsyncSession = Depends(get_db),
):
    """Filtered, sorted, paginated product listing."""
    filters = catalog.ProductFilters(
        search=search,
        category_id=category,
        body_type=body_type,
        resolution=resolution,
        min_price=min_price,
        max_price=max_price,
    )
    try:
        products, total = await catalog.list_products(
            db, filters, sort=SortOrder.parse(sort), page=page, limit=limit
        )
    except SQLAlchemyError:
        logger.exception("Error fetching products")
        return _error_response(
            ProductListResponse(
                products=[],
                pagination=Pagination(total=0, page=page, limit=limit, total_pages=1),
                error="Internal Server Error",
            )
        )

    return ProductListResponse(
        products=[ProductResponse.model_validate(p) for p in products],
        pagination=Pagination(
            total=total,
            page=page,
            limit=limit,
            total_pages=catalog.page_count(total, limit),
        ),
    )


@router.get("/products/search", response_model=ProductSearchResponse)
async def search_products(
    q: str = "",
    limit: int = Query(settings.SEARCH_DEFAULT_LIMIT, ge=1, le=settings.MAX_PAGE_SIZE),
    db: AsyncSession = Depends(get_db),
):
    products = await catalog.search_products(db, q, limit)
    return ProductSearchResponse(products=[ProductSummary.model_validate(p) for p in products])


@router.get("/products/featured", response_model=FeaturedProductsResponse)
async def featured_products(
    limit: int = Query(settings.FEATURED_DEFAULT_LIMIT, ge=1, le=settings.MAX_PAGE_SIZE),
    db: AsyncSession = Depends(get_db),
):
    products = await catalog.featured_products(db, limit)
    return FeaturedProductsResponse(
        products=[ProductResponse.model_validate(p) for p in products]
    )


@router.get("/products/{slug}", response_model=ProductDetailResponse)
async def get_product(slug: str, db: AsyncSession = Depends(get_db)):
    product = await catalog.get_product(db, Product.slug == slug)
    if not product:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Product not found",
        )
    return ProductDetailResponse(product=ProductResponse.model_validate(product))


@router.get("/categories", response_model=PublicCategoryListResponse)
async def list_categories(db: AsyncSession = Depends(get_db)):
    """All categories with their product counts, ordered by name."""
    rows = await catalog.categories_with_counts(db)
    return PublicCategoryListResponse(
        categories=[
            PublicCategory(
                id=category.id,
                name=category.name,
                slug=category.slug,
                description=category.description,
                parent_id=category.parent_id,
                created_at=category.created_at,
                count=count,
            )
            for category, count in rows
        ]
    )
