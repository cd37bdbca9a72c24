"""Category schemas for API request/response."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CategoryBase(BaseModel):
    name: str = Field(..., min_length=2, max_length=255)
    slug: str | None = Field(None, max_length=255)
    description: str | None = None
    parent_id: int | None = Field(None, ge=1)


class CategoryCreate(CategoryBase):
    pass


class CategoryUpdate(BaseModel):
    name: str | None = Field(None, min_length=2, max_length=255)
    slug: str | None = Field(None, max_length=255)
    description: str | None = None
    parent_id: int | None = Field(None, ge=1)

    @field_validator("name")
    @classmethod
    def name_not_null(cls, value):
        if value is None:
            raise ValueError("may be omitted but not null")
        return value


class CategoryImageUpdate(BaseModel):
    image_url: str = Field(..., min_length=1, max_length=500)


class CategoryRef(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    slug: str


class CategoryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    slug: str
    description: str | None
    image_url: str | None
    parent_id: int | None
    created_at: datetime


class CategoryListItem(CategoryResponse):
    parent: CategoryRef | None = None
    children_ids: list[int] = []
    product_count: int = 0


class CategoryListResponse(BaseModel):
    items: list[CategoryListItem]
    total: int


class CategoryOption(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str


class PublicCategory(BaseModel):
    id: int
    name: str
    slug: str
    description: str | None
    parent_id: int | None
    created_at: datetime
    count: int


class PublicCategoryListResponse(BaseModel):
    categories: list[PublicCategory]
