"""Catalog queries: product filtering, sorting, paging and facet aggregation.

Product listings and facet counts share the same condition builders so a
search term narrows both the grid and the checkbox counts identically.
"""

import logging
import math
from dataclasses import dataclass

from sqlalchemy import and_, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from storefront.core.config import settings
from storefront.models.category import Category
from storefront.models.product import (
    BODY_TYPE_SLUG,
    RESOLUTION_SLUG,
    Product,
    ProductSpecification,
    Specification,
)
from storefront.schemas.filters import FilterOption, FiltersResponse, PriceRange, SortOrder
from storefront.utils.text import escape_like

logger = logging.getLogger(__name__)

SORT_COLUMNS = {
    SortOrder.NAME_ASC: (Product.name.asc(), Product.id.asc()),
    SortOrder.NAME_DESC: (Product.name.desc(), Product.id.asc()),
    SortOrder.PRICE_ASC: (Product.price.asc(), Product.id.asc()),
    SortOrder.PRICE_DESC: (Product.price.desc(), Product.id.asc()),
}


@dataclass
class ProductFilters:
    search: str | None = None
    category_id: int | None = None
    body_type: str | None = None
    resolution: str | None = None
    min_price: int | None = None
    max_price: int | None = None


def page_count(total: int, limit: int) -> int:
    """Number of pages for `total` rows, never less than one."""
    if limit <= 0:
        return 1
    return max(1, math.ceil(total / limit))


def search_conditions(search: str | None) -> list:
    if not search:
        return []
    like = f"%{escape_like(search)}%"
    return [
        or_(
            Product.name.ilike(like, escape="\\"),
            Product.description.ilike(like, escape="\\"),
        )
    ]


def specification_equals(slug: str, value: str):
    """Product has a value for the given specification, compared case-insensitively."""
    return Product.specifications.any(
        and_(
            ProductSpecification.specification.has(Specification.slug == slug),
            func.lower(ProductSpecification.value) == func.lower(value),
        )
    )


def filter_conditions(filters: ProductFilters) -> list:
    conditions = search_conditions(filters.search)
    if filters.category_id is not None:
        conditions.append(Product.category_id == filters.category_id)
    if filters.body_type:
        conditions.append(specification_equals(BODY_TYPE_SLUG, filters.body_type))
    if filters.resolution:
        conditions.append(specification_equals(RESOLUTION_SLUG, filters.resolution))
    if filters.min_price is not None:
        conditions.append(Product.price >= filters.min_price)
    if filters.max_price is not None:
        conditions.append(Product.price <= filters.max_price)
    return conditions


def product_load_options() -> list:
    """Eager-load everything ProductResponse serializes."""
    return [
        selectinload(Product.category),
        selectinload(Product.images),
        selectinload(Product.specifications).selectinload(ProductSpecification.specification),
    ]


async def list_products(
    db: AsyncSession,
    filters: ProductFilters,
    sort: SortOrder = SortOrder.NAME_ASC,
    page: int = 1,
    limit: int = settings.CATALOG_PAGE_SIZE,
) -> tuple[list[Product], int]:
    """Return one page of matching products and the total match count."""
    conditions = filter_conditions(filters)

    count_query = select(func.count(Product.id)).where(*conditions)
    total = (await db.execute(count_query)).scalar_one()

    query = (
        select(Product)
        .where(*conditions)
        .options(*product_load_options())
        .order_by(*SORT_COLUMNS[sort])
        .offset((page - 1) * limit)
        .limit(limit)
    )
    result = await db.execute(query)
    return list(result.scalars().all()), total


async def get_product(db: AsyncSession, *criteria) -> Product | None:
    result = await db.execute(
        select(Product).where(*criteria).options(*product_load_options())
    )
    return result.scalar_one_or_none()


async def category_facets(db: AsyncSession, search: str | None) -> list[FilterOption]:
    """Every category with the number of its products matching the search."""
    join_on = and_(Product.category_id == Category.id, *search_conditions(search))
    query = (
        select(Category.id, Category.name, func.count(Product.id).label("count"))
        .outerjoin(Product, join_on)
        .group_by(Category.id, Category.name)
        .order_by(Category.name)
    )
    result = await db.execute(query)
    return [FilterOption(id=row.id, name=row.name, count=row.count) for row in result.all()]


async def specification_facets(
    db: AsyncSession, slug: str, search: str | None
) -> list[FilterOption]:
    """Distinct values of one specification with per-value product counts.

    Values are grouped case-insensitively, matching how the filter compares them.
    """
    folded = func.lower(ProductSpecification.value)
    query = (
        select(
            func.min(ProductSpecification.value).label("value"),
            func.count(ProductSpecification.id).label("count"),
        )
        .join(Specification, ProductSpecification.specification_id == Specification.id)
        .join(Product, ProductSpecification.product_id == Product.id)
        .where(Specification.slug == slug, *search_conditions(search))
        .group_by(folded)
        .order_by(folded)
    )
    result = await db.execute(query)
    return [
        FilterOption(id=row.value, name=row.value, count=row.count) for row in result.all()
    ]


async def price_range(db: AsyncSession, search: str | None) -> PriceRange:
    query = select(func.min(Product.price), func.max(Product.price)).where(
        *search_conditions(search)
    )
    low, high = (await db.execute(query)).one()
    return PriceRange(
        min=float(low) if low is not None else settings.DEFAULT_PRICE_MIN,
        max=float(high) if high is not None else settings.DEFAULT_PRICE_MAX,
    )


def _mark_checked(options: list[FilterOption], selected: str | None) -> list[FilterOption]:
    if selected is None:
        return options
    return [option.model_copy(update={"checked": str(option.id) == selected}) for option in options]


async def get_product_filters(
    db: AsyncSession,
    search: str | None = None,
    category: str | None = None,
    body_type: str | None = None,
    resolution: str | None = None,
) -> FiltersResponse:
    """Facet options for the catalog sidebar.

    Counts only reflect the search term; the other selections are echoed
    back through `checked` so the caller can render its current state.
    """
    categories = await category_facets(db, search)
    body_types = await specification_facets(db, BODY_TYPE_SLUG, search)
    resolutions = await specification_facets(db, RESOLUTION_SLUG, search)
    prices = await price_range(db, search)

    logger.debug(
        "Facets for search=%r: %d categories, %d body types, %d resolutions",
        search, len(categories), len(body_types), len(resolutions),
    )
    return FiltersResponse(
        categories=_mark_checked(categories, category),
        body_types=_mark_checked(body_types, body_type),
        resolutions=_mark_checked(resolutions, resolution),
        price_range=prices,
    )


async def search_products(db: AsyncSession, q: str, limit: int) -> list[Product]:
    """Quick search by name, description or SKU for the header dropdown."""
    if len(q.strip()) < settings.SEARCH_MIN_LENGTH:
        return []
    like = f"%{escape_like(q.strip())}%"
    query = (
        select(Product)
        .where(
            or_(
                Product.name.ilike(like, escape="\\"),
                Product.description.ilike(like, escape="\\"),
                Product.sku.ilike(like, escape="\\"),
            )
        )
        .options(selectinload(Product.category))
        .order_by(Product.name, Product.id)
        .limit(limit)
    )
    result = await db.execute(query)
    return list(result.scalars().all())


async def featured_products(db: AsyncSession, limit: int) -> list[Product]:
    """Newest products flagged as hits."""
    query = (
        select(Product)
        .where(Product.is_hit.is_(True))
        .options(*product_load_options())
        .order_by(Product.created_at.desc(), Product.id.desc())
        .limit(limit)
    )
    result = await db.execute(query)
    return list(result.scalars().all())


async def categories_with_counts(db: AsyncSession) -> list[tuple[Category, int]]:
    query = (
        select(Category, func.count(Product.id).label("count"))
        .outerjoin(Product, Product.category_id == Category.id)
        .group_by(Category.id)
        .order_by(Category.name)
    )
    result = await db.execute(query)
    return [(row[0], row[1]) for row in result.all()]
