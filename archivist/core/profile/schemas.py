from __future__ import annotations

import re
from datetime import date, datetime
from typing import Dict, List
from uuid import UUID

from pydantic import field_validator

from archivist.core.calendar import Legend
from archivist.core.profile.models import (
    SLUG_MAX_LENGTH,
    SLUG_MIN_LENGTH,
    SLUG_PATTERN,
)
from archivist.core.reviews.schemas import ReviewPublic
from archivist.core.schemas import CamelModel


_SLUG_RE = re.compile(SLUG_PATTERN)


class ProfileSettingsPublic(CamelModel):
    id: UUID
    user_id: UUID
    is_public: bool
    show_moods: bool
    show_reviews: bool
    show_stats: bool
    public_slug: str | None
    created_at: datetime
    updated_at: datetime


class ProfileSettingsUpdate(CamelModel):
    is_public: bool | None = None
    show_moods: bool | None = None
    show_reviews: bool | None = None
    show_stats: bool | None = None
    public_slug: str | None = None

    @field_validator("public_slug", mode="before")
    @classmethod
    def _normalize_slug(cls, value):
        if isinstance(value, str) and value.strip() == "":
            return None
        return value

    @field_validator("public_slug")
    @classmethod
    def _check_slug(cls, value: str | None) -> str | None:
        if value is None:
            return value
        if not _SLUG_RE.match(value):
            raise ValueError(
                "Public slug must contain only lowercase letters, numbers, and hyphens"
            )
        if len(value) < SLUG_MIN_LENGTH:
            raise ValueError(
                f"Public slug must be at least {SLUG_MIN_LENGTH} characters"
            )
        if len(value) > SLUG_MAX_LENGTH:
            raise ValueError(
                f"Public slug must be {SLUG_MAX_LENGTH} characters or less"
            )
        return value


class PublicUser(CamelModel):
    id: UUID
    name: str | None
    image: str | None


class PublicVisibility(CamelModel):
    show_moods: bool
    show_reviews: bool
    show_stats: bool


class PublicEntry(CamelModel):
    id: UUID
    date: date
    legend: Legend


class PublicStats(CamelModel):
    total_entries: int
    good_days_count: int


class PublicProfile(CamelModel):
    user: PublicUser
    settings: PublicVisibility
    entries: List[PublicEntry] | None = None
    reviews: Dict[str, List[ReviewPublic]] | None = None
    stats: PublicStats | None = None

    def to_json(self) -> dict:
        # Fields hidden by the owner's settings are never set.
        return self.model_dump(mode="json", by_alias=True, exclude_unset=True)


__all__ = [
    "ProfileSettingsPublic",
    "ProfileSettingsUpdate",
    "PublicUser",
    "PublicVisibility",
    "PublicEntry",
    "PublicStats",
    "PublicProfile",
]
