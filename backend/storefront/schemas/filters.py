"""Catalog facet schemas (the /api/filters contract)."""

import enum

from pydantic import BaseModel

from storefront.schemas.common import CamelModel


class FilterOption(BaseModel):
    # category ids are integers, specification facets use the value itself
    id: int | str
    name: str
    count: int
    checked: bool = False


class PriceRange(BaseModel):
    min: float
    max: float


class FiltersResponse(CamelModel):
    categories: list[FilterOption] = []
    body_types: list[FilterOption] = []
    resolutions: list[FilterOption] = []
    price_range: PriceRange
    error: str | None = None


class SortOrder(str, enum.Enum):
    NAME_ASC = "name-asc"
    NAME_DESC = "name-desc"
    PRICE_ASC = "price-asc"
    PRICE_DESC = "price-desc"

    @classmethod
    def parse(cls, value: str | None) -> "SortOrder":
        """Unknown or missing values fall back to name-asc."""
        try:
            return cls(value)
        except ValueError:
            return cls.NAME_ASC
