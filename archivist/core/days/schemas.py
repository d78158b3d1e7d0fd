from __future__ import annotations

from datetime import date, datetime
from uuid import UUID

from archivist.core.calendar import Legend
from archivist.core.schemas import CamelModel


class DayEntryPublic(CamelModel):
    id: UUID
    user_id: UUID
    date: date
    legend: Legend
    created_at: datetime
    updated_at: datetime


class DayEntryCreate(CamelModel):
    date: date
    legend: Legend


class DayEntryUpdate(CamelModel):
    legend: Legend


__all__ = ["DayEntryPublic", "DayEntryCreate", "DayEntryUpdate"]
