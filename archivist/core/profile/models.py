from __future__ import annotations

import uuid

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    String,
    func,
)
from sqlalchemy.dialects.postgresql import UUID

from archivist.database.base import Base


SLUG_MIN_LENGTH = 3
SLUG_MAX_LENGTH = 50
SLUG_PATTERN = r"^[a-z0-9-]+$"


class ProfileSettings(Base):
    __tablename__ = "profile_settings"

    id = Column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    user_id = Column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
        index=True,
    )

    is_public = Column(Boolean, nullable=False, default=False)
    show_moods = Column(Boolean, nullable=False, default=True)
    show_reviews = Column(Boolean, nullable=False, default=False)
    show_stats = Column(Boolean, nullable=False, default=True)
    public_slug = Column(String(SLUG_MAX_LENGTH), nullable=True, unique=True)

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


__all__ = [
    "ProfileSettings",
    "SLUG_MIN_LENGTH",
    "SLUG_MAX_LENGTH",
    "SLUG_PATTERN",
]
