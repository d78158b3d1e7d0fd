from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import Field, model_validator

from archivist.core.reviews.models import ReviewCategory
from archivist.core.schemas import CamelModel


class ReviewPublic(CamelModel):
    id: UUID
    day_entry_id: UUID
    category: ReviewCategory
    custom_category_id: UUID | None
    content: str
    created_at: datetime
    updated_at: datetime


class ReviewCreate(CamelModel):
    day_entry_id: UUID
    category: ReviewCategory
    custom_category_id: UUID | None = None
    content: str = Field(..., min_length=1)

    @model_validator(mode="after")
    def _custom_requires_category_id(self) -> "ReviewCreate":
        if self.category == ReviewCategory.CUSTOM and self.custom_category_id is None:
            raise ValueError(
                "Custom category ID is required when category is CUSTOM"
            )
        return self


class ReviewUpdate(CamelModel):
    content: str = Field(..., min_length=1)


__all__ = ["ReviewPublic", "ReviewCreate", "ReviewUpdate"]
