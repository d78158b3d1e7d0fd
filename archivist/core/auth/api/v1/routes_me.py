from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from archivist.core.auth.models import User
from archivist.core.auth.schemas import UserPublic, UserUpdate
from archivist.core.dependencies import get_current_user, get_db
from archivist.core.profile.services import invalidate_public_view
from archivist.response import StandardResponse, make_success_response


logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)
router = APIRouter(
    prefix="/me",
    tags=["auth"],
)


@router.get(
    "",
    response_model=StandardResponse,
    summary="Current user",
)
def get_me(
    user: User = Depends(get_current_user),
) -> StandardResponse:
    result_data: Dict[str, Any] = {
        "user": UserPublic.model_validate(user).model_dump(mode="json"),
    }
    return make_success_response(result=result_data)


@router.put(
    "",
    response_model=StandardResponse,
    summary="Update the current user's public fields",
)
def update_me(
    payload: UserUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
) -> StandardResponse:
    """
    Updates name/image and drops the cached public profile, which
    embeds both.
    """
    data = payload.model_dump(exclude_unset=True)

    for field, value in data.items():
        setattr(user, field, value)

    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("user profile updated (user_id=%s)", user.id)

    invalidate_public_view(user.id)

    result_data: Dict[str, Any] = {
        "user": UserPublic.model_validate(user).model_dump(mode="json"),
    }
    return make_success_response(result=result_data)


__all__ = ["router"]
