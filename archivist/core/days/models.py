from __future__ import annotations

import uuid

from sqlalchemy import (
    Column,
    Date,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    UniqueConstraint,
    func,
)
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from archivist.core.calendar import Legend
from archivist.database.base import Base


LegendType = Enum(
    *[legend.value for legend in Legend],
    name="legend",
)


class DayEntry(Base):
    __tablename__ = "day_entries"
    __table_args__ = (
        UniqueConstraint("user_id", "date", name="uq_day_entries_user_date"),
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
    date = Column(Date, nullable=False)
    legend = Column(LegendType, nullable=False)

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
        back_populates="day_entry",
        cascade="all",
    )


Index("ix_day_entries_date", DayEntry.date)


__all__ = ["DayEntry", "LegendType"]
