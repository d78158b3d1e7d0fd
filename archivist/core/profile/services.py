from __future__ import annotations

import logging
import re
import uuid
from typing import Any, Dict, Optional
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from archivist.core.auth.models import User
from archivist.core.calendar import is_good_day
from archivist.core.config import settings
from archivist.core.days.services import list_year_entries
from archivist.core.profile.models import ProfileSettings
from archivist.core.profile.schemas import (
    PublicEntry,
    PublicProfile,
    PublicStats,
    PublicUser,
    PublicVisibility,
)
from archivist.core.reviews.schemas import ReviewPublic
from archivist.core.reviews.services import (
    group_reviews_by_entry,
    list_reviews_for_entries,
)
from archivist.response.response import ConflictError, NotFoundError
from archivist.utils.cache import cache_delete, cache_get_json, cache_set_json


logger = logging.getLogger(__name__)

DEFAULT_SETTINGS: Dict[str, Any] = {
    "is_public": False,
    "show_moods": True,
    "show_reviews": False,
    "show_stats": True,
}

SETTINGS_FIELDS = (
    "is_public",
    "show_moods",
    "show_reviews",
    "show_stats",
    "public_slug",
)

_SLUG_INVALID_CHARS = re.compile(r"[^a-z0-9-]")


def default_slug(email: str | None) -> str | None:
    """
    Slug derived from the email's local part: lowercased, anything outside
    [a-z0-9-] turned into '-'. No collision handling.
    """
    if not email:
        return None
    local_part = email.split("@")[0]
    if not local_part:
        return "user"
    return _SLUG_INVALID_CHARS.sub("-", local_part.lower())


def _profile_not_found() -> NotFoundError:
    return NotFoundError(
        code="PROFILE_NOT_FOUND",
        message="Profile not found",
    )


def _slug_taken() -> ConflictError:
    return ConflictError(
        code="PROFILE_SLUG_TAKEN",
        message="This public slug is already taken",
        fields={"publicSlug": ["Already taken"]},
    )


def _find_settings(db: Session, user_id: UUID) -> ProfileSettings | None:
    return (
        db.query(ProfileSettings)
        .filter(ProfileSettings.user_id == user_id)
        .first()
    )


def _find_by_slug(db: Session, slug: str) -> ProfileSettings | None:
    return (
        db.query(ProfileSettings)
        .filter(ProfileSettings.public_slug == slug)
        .first()
    )


def _insert_settings(
    db: Session,
    user_id: UUID,
    values: Dict[str, Any],
) -> ProfileSettings:
    """
    Inserts the settings row; if another request created it first, the
    winner is returned instead.
    """
    row = ProfileSettings(user_id=user_id, **values)
    db.add(row)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        winner = _find_settings(db, user_id)
        if winner is not None:
            logger.info("profile settings created concurrently (user_id=%s)", user_id)
            return winner
        slug = values.get("public_slug")
        if slug and _find_by_slug(db, slug) is not None:
            raise _slug_taken()
        if db.query(User.id).filter(User.id == user_id).first() is None:
            raise NotFoundError(
                code="PROFILE_USER_NOT_FOUND",
                message="User not found",
            )
        raise ConflictError(
            code="PROFILE_SETTINGS_CONFLICT",
            message="Profile settings were modified concurrently, please retry",
        )
    db.refresh(row)
    return row


def get_or_create_settings(
    db: Session,
    user_id: UUID,
    email_hint: str | None = None,
) -> ProfileSettings:
    existing = _find_settings(db, user_id)
    if existing is not None:
        return existing

    values = dict(DEFAULT_SETTINGS)
    values["public_slug"] = default_slug(email_hint)
    return _insert_settings(db, user_id, values)


def update_settings(
    db: Session,
    user_id: UUID,
    patch: Dict[str, Any],
    email_hint: str | None = None,
) -> ProfileSettings:
    """
    Applies only the keys present in `patch`. A blank or null
    `public_slug` clears it.
    """
    patch = {k: v for k, v in patch.items() if k in SETTINGS_FIELDS}

    if "public_slug" in patch:
        slug = patch["public_slug"]
        if isinstance(slug, str):
            slug = slug.strip()
        patch["public_slug"] = slug or None

    slug = patch.get("public_slug")
    if slug:
        holder = _find_by_slug(db, slug)
        if holder is not None and holder.user_id != user_id:
            raise _slug_taken()

    current = _find_settings(db, user_id)
    if current is None:
        values = dict(DEFAULT_SETTINGS)
        values["public_slug"] = default_slug(email_hint)
        values.update(patch)
        return _insert_settings(db, user_id, values)

    for field, value in patch.items():
        setattr(current, field, value)
    current.updated_at = func.now()

    db.add(current)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise _slug_taken()
    db.refresh(current)
    return current


def resolve_slug(db: Session, slug: str) -> UUID:
    row = _find_by_slug(db, slug)
    if row is None:
        raise _profile_not_found()
    return row.user_id


def resolve_public_identity(db: Session, identifier: str) -> UUID:
    """
    The identifier may be a public slug or a raw user id; slugs win.
    """
    row = _find_by_slug(db, identifier)
    if row is not None:
        return row.user_id

    try:
        user_id = uuid.UUID(identifier)
    except ValueError:
        raise _profile_not_found()

    exists = db.query(User.id).filter(User.id == user_id).first()
    if exists is None:
        raise _profile_not_found()
    return user_id


def build_public_view(
    db: Session,
    target_user_id: UUID,
    year: int | None = None,
) -> PublicProfile:
    profile_settings = _find_settings(db, target_user_id)
    if profile_settings is None or not profile_settings.is_public:
        raise NotFoundError(
            code="PROFILE_NOT_FOUND",
            message="Profile is private or does not exist",
        )

    user = db.query(User).filter(User.id == target_user_id).first()
    if user is None:
        raise NotFoundError(
            code="PROFILE_NOT_FOUND",
            message="User not found",
        )

    view = PublicProfile(
        user=PublicUser.model_validate(user),
        settings=PublicVisibility.model_validate(profile_settings),
    )

    show_moods = profile_settings.show_moods
    show_reviews = profile_settings.show_reviews
    show_stats = profile_settings.show_stats
    if not (show_moods or show_reviews or show_stats):
        return view

    entries = list_year_entries(db, target_user_id, year)

    if show_moods:
        view.entries = [PublicEntry.model_validate(e) for e in entries]

    # No entries, no reviews key.
    if show_reviews and entries:
        reviews = list_reviews_for_entries(db, [e.id for e in entries])
        view.reviews = {
            entry_id: [ReviewPublic.model_validate(r) for r in items]
            for entry_id, items in group_reviews_by_entry(reviews).items()
        }

    if show_stats:
        view.stats = PublicStats(
            total_entries=len(entries),
            good_days_count=sum(1 for e in entries if is_good_day(e.legend)),
        )

    return view


def public_view_cache_key(user_id: UUID) -> str:
    return f"profile:public:{user_id}"


def get_public_view(
    db: Session,
    target_user_id: UUID,
    year: int | None = None,
) -> Dict[str, Any]:
    """
    JSON-ready public view, served from Redis when cached.
    """
    cache_key = public_view_cache_key(target_user_id)
    cached: Optional[Dict[str, Any]] = cache_get_json(cache_key)
    if cached is not None:
        return cached

    result = build_public_view(db, target_user_id, year).to_json()
    cache_set_json(cache_key, result, settings.public_profile_cache_ttl_seconds)
    return result


def invalidate_public_view(user_id: UUID) -> None:
    cache_delete(public_view_cache_key(user_id))


__all__ = [
    "DEFAULT_SETTINGS",
    "default_slug",
    "get_or_create_settings",
    "update_settings",
    "resolve_slug",
    "resolve_public_identity",
    "build_public_view",
    "get_public_view",
    "public_view_cache_key",
    "invalidate_public_view",
]
