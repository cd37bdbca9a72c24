"""Admin category endpoints: tree maintenance and category images."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from storefront.db.base import get_db
from storefront.models.category import Category
from storefront.models.product import Product
from storefront.schemas.category import (
    CategoryCreate,
    CategoryImageUpdate,
    CategoryListItem,
    CategoryListResponse,
    CategoryOption,
    CategoryRef,
    CategoryResponse,
    CategoryUpdate,
)
from storefront.services.categories import category_slug, validate_parent
from storefront.services.errors import CatalogValidationError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin/categories", tags=["admin-categories"])


async def _get_category_or_404(db: AsyncSession, category_id: int) -> Category:
    result = await db.execute(select(Category).where(Category.id == category_id))
    category = result.scalar_one_or_none()
    if not category:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Category not found",
        )
    return category


async def _ensure_slug_free(db: AsyncSession, slug: str, exclude_id: int | None = None) -> None:
    query = select(Category.id).where(Category.slug == slug)
    if exclude_id is not None:
        query = query.where(Category.id != exclude_id)
    existing = await db.execute(query)
    if existing.scalar_one_or_none():
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Category with this slug already exists",
        )


@router.get("", response_model=CategoryListResponse)
async def list_categories(db: AsyncSession = Depends(get_db)):
    """All categories with parent, child ids and product counts."""
    result = await db.execute(
        select(Category)
        .options(selectinload(Category.parent), selectinload(Category.children))
        .order_by(Category.name)
    )
    categories = result.scalars().all()

    counts_result = await db.execute(
        select(Product.category_id, func.count(Product.id)).group_by(Product.category_id)
    )
    counts = dict(counts_result.all())

    items = [
        CategoryListItem(
            **CategoryResponse.model_validate(c).model_dump(),
            parent=CategoryRef.model_validate(c.parent) if c.parent else None,
            children_ids=[child.id for child in c.children],
            product_count=counts.get(c.id, 0),
        )
        for c in categories
    ]
    return CategoryListResponse(items=items, total=len(items))


@router.get("/parents", response_model=list[CategoryOption])
async def list_parent_options(
    exclude_id: int | None = None,
    db: AsyncSession = Depends(get_db),
):
    """Candidate parents for the category form, excluding the edited category."""
    query = select(Category).order_by(Category.name)
    if exclude_id is not None:
        query = query.where(Category.id != exclude_id)
    result = await db.execute(query)
    return [CategoryOption.model_validate(c) for c in result.scalars().all()]


@router.get("/{category_id}", response_model=CategoryResponse)
async def get_category(category_id: int, db: AsyncSession = Depends(get_db)):
    category = await _get_category_or_404(db, category_id)
    return CategoryResponse.model_validate(category)


@router.post("", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
async def create_category(body: CategoryCreate, db: AsyncSession = Depends(get_db)):
    """Create a category; the slug is derived from the name when omitted."""
    try:
        slug = category_slug(body.name, body.slug)
    except CatalogValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))

    await _ensure_slug_free(db, slug)

    try:
        await validate_parent(db, body.parent_id)
    except CatalogValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))

    category = Category(**body.model_dump(exclude={"slug"}), slug=slug)
    db.add(category)
    await db.commit()
    await db.refresh(category)

    logger.info("Created category %s (%s)", category.id, category.slug)
    return CategoryResponse.model_validate(category)


@router.patch("/{category_id}", response_model=CategoryResponse)
async def update_category(
    category_id: int,
    body: CategoryUpdate,
    db: AsyncSession = Depends(get_db),
):
    category = await _get_category_or_404(db, category_id)
    update_data = body.model_dump(exclude_unset=True)

    if "slug" in update_data or "name" in update_data:
        try:
            slug = category_slug(
                update_data.get("name") or category.name, update_data.get("slug")
            )
        except CatalogValidationError as exc:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
        if slug != category.slug:
            await _ensure_slug_free(db, slug, exclude_id=category_id)
        update_data["slug"] = slug

    if update_data.get("parent_id") is not None:
        try:
            await validate_parent(db, update_data["parent_id"], category_id=category_id)
        except CatalogValidationError as exc:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))

    for field, value in update_data.items():
        setattr(category, field, value)

    await db.commit()
    await db.refresh(category)

    return CategoryResponse.model_validate(category)


@router.put("/{category_id}/image", response_model=CategoryResponse)
async def set_category_image(
    category_id: int,
    body: CategoryImageUpdate,
    db: AsyncSession = Depends(get_db),
):
    category = await _get_category_or_404(db, category_id)
    category.image_url = body.image_url
    await db.commit()
    await db.refresh(category)
    return CategoryResponse.model_validate(category)


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_category(category_id: int, db: AsyncSession = Depends(get_db)):
    """Delete a category that has neither products nor subcategories."""
    category = await _get_category_or_404(db, category_id)

    products_count = await db.execute(
        select(func.count()).select_from(Product).where(Product.category_id == category_id)
    )
    if products_count.scalar_one() > 0:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Cannot delete category with existing products",
        )

    children_count = await db.execute(
        select(func.count()).select_from(Category).where(Category.parent_id == category_id)
    )
    if children_count.scalar_one() > 0:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Cannot delete category with subcategories",
        )

    await db.delete(category)
    await db.commit()
    logger.info("Deleted category %s", category_id)
