"""Admin product endpoints: CRUD, gallery images and specification values."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.core.config import settings
from storefront.db.base import get_db
from storefront.models.category import Category
from storefront.models.order import OrderItem
from storefront.models.product import (
    Product,
    ProductImage,
    ProductSpecification,
    Specification,
)
from storefront.schemas.product import (
    AdminProductListResponse,
    ProductCreate,
    ProductImageCreate,
    ProductResponse,
    ProductSpecificationSet,
    ProductUpdate,
    SpecificationResponse,
)
from storefront.services.catalog import get_product, product_load_options, search_conditions

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin/products", tags=["admin-products"])


async def _get_product_or_404(db: AsyncSession, product_id: int) -> Product:
    product = await get_product(db, Product.id == product_id)
    if not product:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Product not found",
        )
    return product


async def _reload(db: AsyncSession, product_id: int) -> ProductResponse:
    """Fresh copy with relationships populated after a write."""
    db.expire_all()
    product = await get_product(db, Product.id == product_id)
    return ProductResponse.model_validate(product)


async def _ensure_unique(
    db: AsyncSession, column, value: str, label: str, exclude_id: int | None = None
) -> None:
    query = select(Product.id).where(column == value)
    if exclude_id is not None:
        query = query.where(Product.id != exclude_id)
    existing = await db.execute(query)
    if existing.scalar_one_or_none():
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Product with {label} '{value}' already exists",
        )


async def _ensure_category_exists(db: AsyncSession, category_id: int) -> None:
    result = await db.execute(select(Category.id).where(Category.id == category_id))
    if result.scalar_one_or_none() is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Category not found",
        )


@router.get("/specifications", response_model=list[SpecificationResponse])
async def list_specifications(db: AsyncSession = Depends(get_db)):
    result = await db.execute(select(Specification).order_by(Specification.name))
    return [SpecificationResponse.model_validate(s) for s in result.scalars().all()]


@router.get("", response_model=AdminProductListResponse)
async def list_products(
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=settings.MAX_PAGE_SIZE),
    category_id: int | None = None,
    search: str | None = None,
    db: AsyncSession = Depends(get_db),
):
    """Newest first; search matches name or description."""
    conditions = search_conditions(search)
    if category_id is not None:
        conditions.append(Product.category_id == category_id)

    total = (
        await db.execute(select(func.count(Product.id)).where(*conditions))
    ).scalar() or 0

    query = (
        select(Product)
        .where(*conditions)
        .options(*product_load_options())
        .order_by(Product.created_at.desc(), Product.id.desc())
        .offset((page - 1) * page_size)
        .limit(page_size)
    )
    result = await db.execute(query)
    items = result.scalars().all()

    return AdminProductListResponse(
        items=[ProductResponse.model_validate(p) for p in items],
        total=total,
        page=page,
        page_size=page_size,
    )


@router.get("/{product_id}", response_model=ProductResponse)
async def get_product_by_id(product_id: int, db: AsyncSession = Depends(get_db)):
    product = await _get_product_or_404(db, product_id)
    return ProductResponse.model_validate(product)


@router.post("", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
async def create_product(data: ProductCreate, db: AsyncSession = Depends(get_db)):
    await _ensure_unique(db, Product.sku, data.sku, "SKU")
    await _ensure_unique(db, Product.slug, data.slug, "slug")
    await _ensure_category_exists(db, data.category_id)

    values = data.model_dump()
    values["main_image"] = values["main_image"] or settings.PLACEHOLDER_IMAGE
    product = Product(**values)
    db.add(product)
    await db.commit()

    logger.info("Created product %s (%s)", product.id, product.sku)
    return await _reload(db, product.id)


@router.put("/{product_id}", response_model=ProductResponse)
async def update_product(
    product_id: int,
    data: ProductUpdate,
    db: AsyncSession = Depends(get_db),
):
    product = await _get_product_or_404(db, product_id)
    update_data = data.model_dump(exclude_unset=True)

    if "sku" in update_data and update_data["sku"] != product.sku:
        await _ensure_unique(db, Product.sku, update_data["sku"], "SKU", exclude_id=product_id)
    if "slug" in update_data and update_data["slug"] != product.slug:
        await _ensure_unique(db, Product.slug, update_data["slug"], "slug", exclude_id=product_id)
    if "category_id" in update_data and update_data["category_id"] != product.category_id:
        await _ensure_category_exists(db, update_data["category_id"])
    if "main_image" in update_data and not update_data["main_image"]:
        update_data["main_image"] = settings.PLACEHOLDER_IMAGE

    for key, value in update_data.items():
        setattr(product, key, value)

    await db.commit()
    return await _reload(db, product_id)


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_product(product_id: int, db: AsyncSession = Depends(get_db)):
    product = await _get_product_or_404(db, product_id)

    ordered = await db.execute(
        select(func.count()).select_from(OrderItem).where(OrderItem.product_id == product_id)
    )
    if ordered.scalar_one() > 0:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Cannot delete product referenced by orders",
        )

    await db.delete(product)
    await db.commit()
    logger.info("Deleted product %s", product_id)


# ── Images ──
@router.post(
    "/{product_id}/images", response_model=ProductResponse, status_code=status.HTTP_201_CREATED
)
async def add_product_image(
    product_id: int,
    body: ProductImageCreate,
    db: AsyncSession = Depends(get_db),
):
    """Append an image to the gallery; a main image also replaces the cover."""
    product = await _get_product_or_404(db, product_id)

    max_order = (
        await db.execute(
            select(func.max(ProductImage.sort_order)).where(ProductImage.product_id == product_id)
        )
    ).scalar()
    sort_order = max_order + 1 if max_order is not None else 0

    db.add(
        ProductImage(
            product_id=product_id,
            image_url=body.image_url,
            is_main=body.is_main,
            sort_order=sort_order,
        )
    )
    if body.is_main:
        product.main_image = body.image_url
    await db.commit()

    return await _reload(db, product_id)


@router.delete("/{product_id}/images/{image_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_product_image(
    product_id: int,
    image_id: int,
    db: AsyncSession = Depends(get_db),
):
    result = await db.execute(
        select(ProductImage).where(
            ProductImage.id == image_id,
            ProductImage.product_id == product_id,
        )
    )
    image = result.scalar_one_or_none()
    if not image:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Image not found",
        )
    await db.delete(image)
    await db.commit()


# ── Specification values ──
@router.put("/{product_id}/specifications", response_model=ProductResponse)
async def set_product_specification(
    product_id: int,
    body: ProductSpecificationSet,
    db: AsyncSession = Depends(get_db),
):
    """Create or replace the product's value for one specification."""
    await _get_product_or_404(db, product_id)

    spec = await db.execute(
        select(Specification.id).where(Specification.id == body.specification_id)
    )
    if spec.scalar_one_or_none() is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Specification not found",
        )

    result = await db.execute(
        select(ProductSpecification).where(
            ProductSpecification.product_id == product_id,
            ProductSpecification.specification_id == body.specification_id,
        )
    )
    existing = result.scalar_one_or_none()
    if existing:
        existing.value = body.value
    else:
        db.add(
            ProductSpecification(
                product_id=product_id,
                specification_id=body.specification_id,
                value=body.value,
            )
        )
    await db.commit()

    return await _reload(db, product_id)


@router.delete(
    "/{product_id}/specifications/{specification_id}", status_code=status.HTTP_204_NO_CONTENT
)
async def remove_product_specification(
    product_id: int,
    specification_id: int,
    db: AsyncSession = Depends(get_db),
):
    result = await db.execute(
        select(ProductSpecification).where(
            ProductSpecification.product_id == product_id,
            ProductSpecification.specification_id == specification_id,
        )
    )
    value = result.scalar_one_or_none()
    if not value:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Specification value not found",
        )
    await db.delete(value)
    await db.commit()
