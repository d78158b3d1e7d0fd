from __future__ import annotations

import uuid
from enum import Enum as PyEnum

from sqlalchemy import (
    Column,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Text,
    func,
    text,
)
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from archivist.database.base import Base


class ReviewCategory(str, PyEnum):
    WORK = "WORK"
    PERSONAL = "PERSONAL"
    LEARNING = "LEARNING"
    CUSTOM = "CUSTOM"


ReviewCategoryType = Enum(
    *[category.value for category in ReviewCategory],
    name="review_category",
)


class Review(Base):
    __tablename__ = "reviews"

    id = Column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    day_entry_id = Column(
        UUID(as_uuid=True),
        ForeignKey("day_entries.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    category = Column(ReviewCategoryType, nullable=False)
    custom_category_id = Column(
        UUID(as_uuid=True),
        ForeignKey("custom_categories.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    content = Column(Text, nullable=False)

    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    day_entry = relationship("DayEntry", back_populates="reviews")
    custom_category = relationship("CustomCategory", back_populates="reviews")


# NULLs never collide in a plain unique constraint, so built-in and
# custom reviews each get their own partial index.
Index(
    "uq_reviews_entry_category",
    Review.day_entry_id,
    Review.category,
    unique=True,
    postgresql_where=text("custom_category_id IS NULL"),
    sqlite_where=text("custom_category_id IS NULL"),
)

Index(
    "uq_reviews_entry_custom_category",
    Review.day_entry_id,
    Review.custom_category_id,
    unique=True,
    postgresql_where=text("custom_category_id IS NOT NULL"),
    sqlite_where=text("custom_category_id IS NOT NULL"),
)


__all__ = ["Review", "ReviewCategory", "ReviewCategoryType"]
