from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from archivist.core.auth.models import User
from archivist.core.categories.schemas import (
    CustomCategoryCreate,
    CustomCategoryPublic,
    CustomCategoryUpdate,
)
from archivist.core.categories.services import (
    create_category,
    delete_category,
    list_categories,
    update_category,
)
from archivist.core.dependencies import get_current_user, get_db
from archivist.core.profile.services import invalidate_public_view
from archivist.response import StandardResponse, make_success_response


router = APIRouter(prefix="/categories", tags=["categories"])


@router.get(
    "",
    response_model=StandardResponse,
    summary="Custom review categories of the current user",
)
def list_categories_view(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
) -> StandardResponse:
    categories = list_categories(db, user.id)
    result = {
        "categories": [
            CustomCategoryPublic.model_validate(c).to_json() for c in categories
        ]
    }
    return make_success_response(result=result)


@router.post(
    "",
    response_model=StandardResponse,
    status_code=201,
    summary="Create a custom category in a free slot",
)
def create_category_view(
    payload: CustomCategoryCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
) -> StandardResponse:
    category = create_category(
        db,
        user.id,
        name=payload.name,
        is_required=payload.is_required,
        order=payload.order,
    )
    return make_success_response(
        result={"category": CustomCategoryPublic.model_validate(category).to_json()}
    )


@router.put(
    "/{category_id}",
    response_model=StandardResponse,
    summary="Rename a category or toggle whether it is required",
)
def update_category_view(
    category_id: UUID,
    payload: CustomCategoryUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
) -> StandardResponse:
    category = update_category(
        db,
        user.id,
        category_id,
        name=payload.name,
        is_required=payload.is_required,
    )
    return make_success_response(
        result={"category": CustomCategoryPublic.model_validate(category).to_json()}
    )


@router.delete(
    "/{category_id}",
    response_model=StandardResponse,
    summary="Delete a category and every review filed under it",
)
def delete_category_view(
    category_id: UUID,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
) -> StandardResponse:
    delete_category(db, user.id, category_id)
    invalidate_public_view(user.id)
    return make_success_response(result={"success": True})


__all__ = ["router"]
