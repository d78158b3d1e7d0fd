from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from archivist.core.auth.models import User
from archivist.core.dependencies import get_current_user, get_db
from archivist.core.profile.schemas import (
    ProfileSettingsPublic,
    ProfileSettingsUpdate,
)
from archivist.core.profile.services import (
    get_or_create_settings,
    get_public_view,
    invalidate_public_view,
    resolve_public_identity,
    resolve_slug,
    update_settings,
)
from archivist.response import StandardResponse, make_success_response


logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)
router = APIRouter(prefix="/profile", tags=["profile"])


@router.get(
    "/settings",
    response_model=StandardResponse,
    summary="Visibility settings of the current user",
)
def get_settings_view(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
) -> StandardResponse:
    """
    Settings are created with defaults on first access.
    """
    profile_settings = get_or_create_settings(db, user.id, user.email)
    return make_success_response(
        result={
            "settings": ProfileSettingsPublic.model_validate(
                profile_settings
            ).to_json()
        }
    )


@router.put(
    "/settings",
    response_model=StandardResponse,
    summary="Partially update visibility settings",
)
def update_settings_view(
    payload: ProfileSettingsUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
) -> StandardResponse:
    patch = payload.model_dump(exclude_unset=True)
    profile_settings = update_settings(db, user.id, patch, email_hint=user.email)
    invalidate_public_view(user.id)
    logger.info(
        "profile settings updated (user_id=%s, fields=%s)",
        user.id,
        ",".join(sorted(patch)),
    )
    return make_success_response(
        result={
            "settings": ProfileSettingsPublic.model_validate(
                profile_settings
            ).to_json()
        }
    )


@router.get(
    "/slug/{slug}",
    response_model=StandardResponse,
    summary="Public profile by explicit slug",
)
def public_profile_by_slug_view(
    slug: str,
    db: Session = Depends(get_db),
) -> StandardResponse:
    target_user_id = resolve_slug(db, slug)
    return make_success_response(
        result={"profile": get_public_view(db, target_user_id)}
    )


@router.get(
    "/{identifier}",
    response_model=StandardResponse,
    summary="Public profile by slug or user id",
)
def public_profile_view(
    identifier: str,
    db: Session = Depends(get_db),
) -> StandardResponse:
    """
    No authentication. Private and missing profiles both answer 404.
    """
    target_user_id = resolve_public_identity(db, identifier)
    return make_success_response(
        result={"profile": get_public_view(db, target_user_id)}
    )


__all__ = ["router"]
