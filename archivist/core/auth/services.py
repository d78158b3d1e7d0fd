from __future__ import annotations

import uuid
from datetime import timedelta
from typing import Any, Dict, Tuple

import jwt
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from archivist.core.auth.models import User, UserSession
from archivist.core.auth.schemas import LoginRequest, TokenPair, UserCreate
from archivist.core.config import settings
from archivist.core.security import (
    as_aware,
    create_access_token,
    create_refresh_token,
    decode_token,
    hash_password,
    utc_now,
    verify_password,
)
from archivist.response.response import (
    APIError,
    ConflictError,
    UnauthenticatedError,
    ValidationFailedError,
)


PASSWORD_MIN_LENGTH = 8


def validate_password_strength(password: str) -> None:
    if len(password) < PASSWORD_MIN_LENGTH:
        raise ValidationFailedError(
            code="AUTH_PASSWORD_TOO_SHORT",
            message=f"Password must be at least {PASSWORD_MIN_LENGTH} characters",
        )

    has_letter = any(c.isalpha() for c in password)
    has_digit = any(c.isdigit() for c in password)
    if not (has_letter and has_digit):
        raise ValidationFailedError(
            code="AUTH_PASSWORD_TOO_WEAK",
            message="Password must contain letters and digits",
        )


def create_user(
    db: Session,
    data: UserCreate,
) -> User:
    email = data.email.lower()
    existing = db.query(User).filter(User.email == email).first()
    if existing:
        raise ConflictError(
            code="AUTH_EMAIL_ALREADY_EXISTS",
            message="A user with this email already exists",
        )

    validate_password_strength(data.password)

    user = User(
        email=email,
        password_hash=hash_password(data.password),
        name=data.name,
        image=data.image,
        is_active=True,
    )
    db.add(user)
    try:
        db.flush()
    except IntegrityError:
        db.rollback()
        raise ConflictError(
            code="AUTH_EMAIL_ALREADY_EXISTS",
            message="A user with this email already exists",
        )
    db.refresh(user)
    return user


def authenticate_user(
    db: Session,
    data: LoginRequest,
) -> User:
    user = db.query(User).filter(User.email == data.email.lower()).first()
    if user is None or not verify_password(data.password, user.password_hash):
        raise UnauthenticatedError(
            code="AUTH_INVALID_CREDENTIALS",
            message="Invalid email or password",
        )

    if not user.is_active:
        raise APIError(
            code="AUTH_USER_INACTIVE",
            http_code=403,
            message="User is deactivated",
        )

    return user


def create_session_and_tokens(
    db: Session,
    user: User,
    *,
    user_agent: str | None = None,
) -> TokenPair:
    refresh_id = uuid.uuid4()
    session = UserSession(
        user_id=user.id,
        refresh_token_id=str(refresh_id),
        user_agent=user_agent,
        expires_at=utc_now() + timedelta(days=settings.refresh_token_expire_days),
    )
    db.add(session)
    db.flush()
    db.refresh(session)

    return TokenPair(
        access_token=create_access_token(user_id=user.id, session_id=session.id),
        refresh_token=create_refresh_token(
            user_id=user.id,
            session_id=session.id,
            jti=refresh_id,
        ),
    )


def _decode(token: str, expected_type: str) -> Dict[str, Any]:
    try:
        payload = decode_token(token)
    except jwt.PyJWTError:
        raise UnauthenticatedError(
            code="AUTH_INVALID_TOKEN",
            message="Invalid or expired token",
        )

    if payload.get("type") != expected_type:
        raise UnauthenticatedError(
            code="AUTH_INVALID_TOKEN_TYPE",
            message="Wrong token type",
        )
    return payload


def _payload_ids(payload: Dict[str, Any]) -> Tuple[uuid.UUID, uuid.UUID]:
    try:
        return uuid.UUID(payload.get("sub")), uuid.UUID(payload.get("session_id"))
    except (TypeError, ValueError):
        raise UnauthenticatedError(
            code="AUTH_INVALID_TOKEN_PAYLOAD",
            message="Malformed token payload",
        )


def _active_session(db: Session, session_id: uuid.UUID) -> UserSession:
    session = (
        db.query(UserSession)
        .filter(UserSession.id == session_id)
        .first()
    )
    if session is None:
        raise UnauthenticatedError(
            code="AUTH_SESSION_NOT_FOUND",
            message="Session not found",
        )

    if session.revoked_at is not None or as_aware(session.expires_at) <= utc_now():
        raise UnauthenticatedError(
            code="AUTH_SESSION_REVOKED",
            message="Session has ended",
        )
    return session


def _active_user(db: Session, user_id: uuid.UUID) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        raise UnauthenticatedError(
            code="AUTH_USER_NOT_FOUND",
            message="User not found",
        )

    if not user.is_active:
        raise APIError(
            code="AUTH_USER_INACTIVE",
            http_code=403,
            message="User is deactivated",
        )
    return user


def resolve_access_token(db: Session, token: str) -> Tuple[User, UserSession]:
    """
    Maps a bearer access token to its user and live session.
    """
    payload = _decode(token, "access")
    user_id, session_id = _payload_ids(payload)
    user = _active_user(db, user_id)
    session = _active_session(db, session_id)
    if session.user_id != user.id:
        raise UnauthenticatedError(
            code="AUTH_SESSION_NOT_FOUND",
            message="Session not found",
        )
    return user, session


def refresh_tokens(
    db: Session,
    refresh_token: str,
) -> TokenPair:
    payload = _decode(refresh_token, "refresh")
    user_id, session_id = _payload_ids(payload)
    session = _active_session(db, session_id)

    jti_str = payload.get("jti")
    if session.refresh_token_id != jti_str:
        raise UnauthenticatedError(
            code="AUTH_REFRESH_JTI_MISMATCH",
            message="Refresh token does not match the session",
        )

    user = _active_user(db, user_id)

    new_jti = uuid.uuid4()
    session.refresh_token_id = str(new_jti)
    db.add(session)

    return TokenPair(
        access_token=create_access_token(user_id=user.id, session_id=session.id),
        refresh_token=create_refresh_token(
            user_id=user.id,
            session_id=session.id,
            jti=new_jti,
        ),
    )


def logout_session(
    db: Session,
    *,
    session_id: uuid.UUID,
    user_id: uuid.UUID,
) -> None:
    session = (
        db.query(UserSession)
        .filter(UserSession.id == session_id, UserSession.user_id == user_id)
        .first()
    )
    if session is None:
        raise UnauthenticatedError(
            code="AUTH_SESSION_NOT_FOUND",
            message="Session not found",
        )

    session.revoked_at = utc_now()
    db.add(session)


__all__ = [
    "PASSWORD_MIN_LENGTH",
    "validate_password_strength",
    "create_user",
    "authenticate_user",
    "create_session_and_tokens",
    "resolve_access_token",
    "refresh_tokens",
    "logout_session",
]
