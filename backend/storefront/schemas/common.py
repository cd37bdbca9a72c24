"""Shapes shared across request/response schemas."""

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    """Wire models whose JSON keys are camelCase (bodyTypes, totalPages, ...)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ActionResult(BaseModel, Generic[T]):
    """Outcome of a client-side action: data on success, a message otherwise."""

    success: bool
    error: str | None = None
    data: T | None = None
