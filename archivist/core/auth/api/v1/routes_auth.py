from __future__ import annotations

from typing import Any, Dict, Tuple

from fastapi import APIRouter, Depends, Header
from sqlalchemy.orm import Session

from archivist.core.auth.models import User, UserSession
from archivist.core.auth.schemas import (
    LoginRequest,
    RefreshRequest,
    TokenPair,
    UserCreate,
    UserPublic,
)
from archivist.core.auth.services import (
    authenticate_user,
    create_session_and_tokens,
    create_user,
    logout_session,
    refresh_tokens,
)
from archivist.core.dependencies import get_current_session, get_db
from archivist.response import StandardResponse, make_success_response


router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/signup",
    response_model=StandardResponse,
    status_code=201,
    summary="Register a new user",
)
def register(
    payload: UserCreate,
    db: Session = Depends(get_db),
    user_agent: str | None = Header(default=None, alias="User-Agent"),
) -> StandardResponse:
    """
    Creates the user and opens a first session, returning `user` and `tokens`.
    """
    user = create_user(db, payload)
    tokens = create_session_and_tokens(db, user, user_agent=user_agent)
    db.commit()

    result: Dict[str, Any] = {
        "user": UserPublic.model_validate(user),
        "tokens": tokens,
    }
    return make_success_response(result=result)


@router.post(
    "/signin",
    response_model=StandardResponse,
    summary="Sign in with email and password",
)
def login(
    payload: LoginRequest,
    db: Session = Depends(get_db),
    user_agent: str | None = Header(default=None, alias="User-Agent"),
) -> StandardResponse:
    user = authenticate_user(db, payload)
    tokens = create_session_and_tokens(db, user, user_agent=user_agent)
    db.commit()

    result: Dict[str, Any] = {
        "user": UserPublic.model_validate(user),
        "tokens": tokens,
    }
    return make_success_response(result=result)


@router.post(
    "/refresh",
    response_model=StandardResponse,
    summary="Rotate access/refresh tokens",
)
def refresh(
    payload: RefreshRequest,
    db: Session = Depends(get_db),
) -> StandardResponse:
    tokens: TokenPair = refresh_tokens(db, payload.refresh_token)
    db.commit()
    return make_success_response(result=tokens)


@router.post(
    "/logout",
    response_model=StandardResponse,
    summary="Revoke the current session",
)
def logout(
    db: Session = Depends(get_db),
    current: Tuple[User, UserSession] = Depends(get_current_session),
) -> StandardResponse:
    user, session = current
    logout_session(db, session_id=session.id, user_id=user.id)
    db.commit()
    return make_success_response(result={"success": True})


__all__ = ["router"]
