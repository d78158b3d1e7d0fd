from __future__ import annotations

from typing import List
from uuid import UUID

from sqlalchemy import asc, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from archivist.core.categories.models import CustomCategory, MAX_CUSTOM_CATEGORIES
from archivist.response.response import (
    ConflictError,
    NotFoundError,
    ValidationFailedError,
)


def _category_not_found() -> NotFoundError:
    return NotFoundError(
        code="CATEGORIES_NOT_FOUND",
        message="Category not found",
    )


def _limit_reached() -> ConflictError:
    return ConflictError(
        code="CATEGORIES_LIMIT_REACHED",
        http_code=400,
        message=f"Maximum of {MAX_CUSTOM_CATEGORIES} custom categories allowed",
    )


def _order_taken(order: int) -> ConflictError:
    return ConflictError(
        code="CATEGORIES_ORDER_TAKEN",
        http_code=400,
        message="A category with this order already exists",
        fields={"order": [f"Slot {order} is already taken"]},
    )


def list_categories(db: Session, user_id: UUID) -> List[CustomCategory]:
    return (
        db.query(CustomCategory)
        .filter(CustomCategory.user_id == user_id)
        .order_by(asc(CustomCategory.order))
        .all()
    )


def _get_owned_category(
    db: Session,
    user_id: UUID,
    category_id: UUID,
) -> CustomCategory:
    category = (
        db.query(CustomCategory)
        .filter(
            CustomCategory.id == category_id,
            CustomCategory.user_id == user_id,
        )
        .first()
    )
    if category is None:
        raise _category_not_found()
    return category


def _slot_taken(db: Session, user_id: UUID, order: int) -> bool:
    return (
        db.query(CustomCategory.id)
        .filter(
            CustomCategory.user_id == user_id,
            CustomCategory.order == order,
        )
        .first()
        is not None
    )


def create_category(
    db: Session,
    user_id: UUID,
    name: str,
    is_required: bool,
    order: int,
) -> CustomCategory:
    owned = (
        db.query(func.count(CustomCategory.id))
        .filter(CustomCategory.user_id == user_id)
        .scalar()
    )
    if owned >= MAX_CUSTOM_CATEGORIES:
        raise _limit_reached()

    # Slots are bounded, so the (user_id, order) constraint also caps the count.
    if not 1 <= order <= MAX_CUSTOM_CATEGORIES:
        raise ValidationFailedError(
            code="CATEGORIES_INVALID_ORDER",
            message=f"Order must be between 1 and {MAX_CUSTOM_CATEGORIES}",
            fields={"order": [f"Must be between 1 and {MAX_CUSTOM_CATEGORIES}"]},
        )

    if _slot_taken(db, user_id, order):
        raise _order_taken(order)

    category = CustomCategory(
        user_id=user_id,
        name=name,
        is_required=is_required,
        order=order,
    )
    db.add(category)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise _order_taken(order)
    db.refresh(category)
    return category


def update_category(
    db: Session,
    user_id: UUID,
    category_id: UUID,
    *,
    name: str | None = None,
    is_required: bool | None = None,
) -> CustomCategory:
    category = _get_owned_category(db, user_id, category_id)

    if name is not None:
        category.name = name
    if is_required is not None:
        category.is_required = is_required
    category.updated_at = func.now()

    db.add(category)
    db.commit()
    db.refresh(category)
    return category


def delete_category(db: Session, user_id: UUID, category_id: UUID) -> None:
    category = _get_owned_category(db, user_id, category_id)
    # Reviews filed under this category are deleted with it.
    db.delete(category)
    db.commit()


__all__ = [
    "list_categories",
    "create_category",
    "update_category",
    "delete_category",
]
