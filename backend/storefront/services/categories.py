"""Category tree rules: parent validation and slug derivation."""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.models.category import Category
from storefront.services.errors import CatalogValidationError, CategoryCycleError
from storefront.utils.text import slugify

logger = logging.getLogger(__name__)


def category_slug(name: str, slug: str | None = None) -> str:
    """Explicit slug if given, otherwise derived from the name."""
    value = slugify(slug) if slug else slugify(name)
    if not value:
        raise CatalogValidationError("Slug cannot be derived from the category name")
    return value


async def validate_parent(
    db: AsyncSession, parent_id: int | None, category_id: int | None = None
) -> None:
    """Check that `parent_id` exists and is not `category_id` or one of its descendants.

    Walks the ancestor chain of the proposed parent. If the category itself
    shows up in that chain, attaching it there would close a loop.
    """
    if parent_id is None:
        return
    if category_id is not None and parent_id == category_id:
        raise CategoryCycleError("A category cannot be its own parent")

    seen: set[int] = set()
    current: int | None = parent_id
    while current is not None:
        result = await db.execute(select(Category.parent_id).where(Category.id == current))
        row = result.one_or_none()
        if row is None:
            if current == parent_id:
                raise CatalogValidationError("Parent category not found")
            break
        seen.add(current)
        current = row[0]
        if current is not None and (current == category_id or current in seen):
            logger.warning(
                "Rejected parent %s for category %s: would create a cycle", parent_id, category_id
            )
            raise CategoryCycleError("A category cannot be nested inside its own subcategory")
