from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from archivist.core.auth.models import User
from archivist.core.dependencies import get_current_user, get_db
from archivist.core.profile.services import invalidate_public_view
from archivist.core.reviews.schemas import ReviewCreate, ReviewPublic, ReviewUpdate
from archivist.core.reviews.services import create_review, delete_review, update_review
from archivist.response import StandardResponse, make_success_response


router = APIRouter(prefix="/reviews", tags=["reviews"])


@router.post(
    "",
    response_model=StandardResponse,
    status_code=201,
    summary="Attach a review to a day entry",
)
def create_review_view(
    payload: ReviewCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
) -> StandardResponse:
    review = create_review(
        db=db,
        user_id=user.id,
        day_entry_id=payload.day_entry_id,
        category=payload.category,
        content=payload.content,
        custom_category_id=payload.custom_category_id,
    )
    invalidate_public_view(user.id)
    return make_success_response(
        result={"review": ReviewPublic.model_validate(review).to_json()}
    )


@router.put(
    "/{review_id}",
    response_model=StandardResponse,
    summary="Edit a review's text",
)
def update_review_view(
    review_id: UUID,
    payload: ReviewUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
) -> StandardResponse:
    review = update_review(db, user.id, review_id, payload.content)
    invalidate_public_view(user.id)
    return make_success_response(
        result={"review": ReviewPublic.model_validate(review).to_json()}
    )


@router.delete(
    "/{review_id}",
    response_model=StandardResponse,
    summary="Delete a review",
)
def delete_review_view(
    review_id: UUID,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
) -> StandardResponse:
    delete_review(db, user.id, review_id)
    invalidate_public_view(user.id)
    return make_success_response(result={"success": True})


__all__ = ["router"]
