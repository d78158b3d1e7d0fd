from __future__ import annotations

import uuid

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
    func,
)
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from archivist.database.base import Base


MAX_CUSTOM_CATEGORIES = 3
CATEGORY_NAME_MAX_LENGTH = 50


class CustomCategory(Base):
    __tablename__ = "custom_categories"
    __table_args__ = (
        UniqueConstraint(
            "user_id",
            "order",
            name="uq_custom_categories_user_order",
        ),
    )

    id = Column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    user_id = Column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name = Column(String(CATEGORY_NAME_MAX_LENGTH), nullable=False)
    is_required = Column(Boolean, nullable=False, default=False)
    # Slot 1..MAX_CUSTOM_CATEGORIES, fixed at creation.
    order = Column(Integer, nullable=False)

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

    reviews = relationship(
        "Review",
        back_populates="custom_category",
        cascade="all",
    )


__all__ = ["CustomCategory", "MAX_CUSTOM_CATEGORIES", "CATEGORY_NAME_MAX_LENGTH"]
