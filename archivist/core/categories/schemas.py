from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import Field

from archivist.core.categories.models import (
    CATEGORY_NAME_MAX_LENGTH,
    MAX_CUSTOM_CATEGORIES,
)
from archivist.core.schemas import CamelModel


class CustomCategoryPublic(CamelModel):
    id: UUID
    user_id: UUID
    name: str
    is_required: bool
    order: int
    created_at: datetime
    updated_at: datetime


class CustomCategoryCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=CATEGORY_NAME_MAX_LENGTH)
    is_required: bool = False
    order: int = Field(..., ge=1, le=MAX_CUSTOM_CATEGORIES)


class CustomCategoryUpdate(CamelModel):
    name: str | None = Field(
        default=None,
        min_length=1,
        max_length=CATEGORY_NAME_MAX_LENGTH,
    )
    is_required: bool | None = None


__all__ = [
    "CustomCategoryPublic",
    "CustomCategoryCreate",
    "CustomCategoryUpdate",
]
