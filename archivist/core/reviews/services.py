from __future__ import annotations

import logging
from collections import defaultdict
from typing import Dict, Iterable, List
from uuid import UUID

from sqlalchemy import asc, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from archivist.core.categories.models import CustomCategory
from archivist.core.days.models import DayEntry
from archivist.core.reviews.models import Review, ReviewCategory
from archivist.response.response import (
    ConflictError,
    NotFoundError,
    ValidationFailedError,
)


logger = logging.getLogger(__name__)


def _review_exists_error() -> ConflictError:
    return ConflictError(
        code="REVIEWS_ALREADY_EXISTS",
        message="A review for this category already exists for this day",
    )


def list_reviews_for_entries(
    db: Session,
    entry_ids: Iterable[UUID],
) -> List[Review]:
    """
    One IN (...) query for the whole id set, oldest first.
    """
    ids = list(entry_ids)
    if not ids:
        return []
    return (
        db.query(Review)
        .filter(Review.day_entry_id.in_(ids))
        .order_by(asc(Review.created_at), asc(Review.id))
        .all()
    )


def group_reviews_by_entry(reviews: Iterable[Review]) -> Dict[str, List[Review]]:
    grouped: Dict[str, List[Review]] = defaultdict(list)
    for review in reviews:
        grouped[str(review.day_entry_id)].append(review)
    return dict(grouped)


def _get_owned_entry(db: Session, user_id: UUID, day_entry_id: UUID) -> DayEntry:
    entry = (
        db.query(DayEntry)
        .filter(DayEntry.id == day_entry_id, DayEntry.user_id == user_id)
        .first()
    )
    if entry is None:
        raise NotFoundError(
            code="DAYS_ENTRY_NOT_FOUND",
            message="Day entry not found",
        )
    return entry


def _get_owned_custom_category(
    db: Session,
    user_id: UUID,
    custom_category_id: UUID,
) -> CustomCategory:
    category = (
        db.query(CustomCategory)
        .filter(
            CustomCategory.id == custom_category_id,
            CustomCategory.user_id == user_id,
        )
        .first()
    )
    if category is None:
        raise NotFoundError(
            code="CATEGORIES_NOT_FOUND",
            message="Custom category not found",
        )
    return category


def _get_owned_review(db: Session, user_id: UUID, review_id: UUID) -> Review:
    # Reviews carry no user id; ownership always goes through the day entry.
    review = (
        db.query(Review)
        .join(DayEntry, Review.day_entry_id == DayEntry.id)
        .filter(Review.id == review_id, DayEntry.user_id == user_id)
        .first()
    )
    if review is None:
        raise NotFoundError(
            code="REVIEWS_NOT_FOUND",
            message="Review not found",
        )
    return review


def _review_exists(
    db: Session,
    day_entry_id: UUID,
    category: ReviewCategory,
    custom_category_id: UUID | None,
) -> bool:
    query = db.query(Review.id).filter(
        Review.day_entry_id == day_entry_id,
        Review.category == category.value,
    )
    if custom_category_id is not None:
        query = query.filter(Review.custom_category_id == custom_category_id)
    return query.first() is not None


def create_review(
    db: Session,
    user_id: UUID,
    day_entry_id: UUID,
    category: ReviewCategory | str,
    content: str,
    custom_category_id: UUID | None = None,
) -> Review:
    category = ReviewCategory(category)
    entry = _get_owned_entry(db, user_id, day_entry_id)

    if category == ReviewCategory.CUSTOM:
        if custom_category_id is None:
            raise ValidationFailedError(
                code="REVIEWS_CUSTOM_CATEGORY_REQUIRED",
                message="Custom category ID is required when category is CUSTOM",
                fields={"customCategoryId": ["Required for CUSTOM reviews"]},
            )
        _get_owned_custom_category(db, user_id, custom_category_id)
    else:
        custom_category_id = None

    if _review_exists(db, entry.id, category, custom_category_id):
        raise _review_exists_error()

    review = Review(
        day_entry_id=entry.id,
        category=category.value,
        custom_category_id=custom_category_id,
        content=content,
    )
    db.add(review)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.info(
            "duplicate review rejected by constraint (entry_id=%s, category=%s)",
            entry.id,
            category.value,
        )
        raise _review_exists_error()
    db.refresh(review)
    return review


def update_review(
    db: Session,
    user_id: UUID,
    review_id: UUID,
    content: str,
) -> Review:
    review = _get_owned_review(db, user_id, review_id)
    review.content = content
    review.updated_at = func.now()
    db.add(review)
    db.commit()
    db.refresh(review)
    return review


def delete_review(db: Session, user_id: UUID, review_id: UUID) -> None:
    review = _get_owned_review(db, user_id, review_id)
    db.delete(review)
    db.commit()


__all__ = [
    "list_reviews_for_entries",
    "group_reviews_by_entry",
    "create_review",
    "update_review",
    "delete_review",
]
