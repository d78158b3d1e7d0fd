from __future__ import annotations

from typing import Generator, Tuple

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from archivist.core.auth.models import User, UserSession
from archivist.core.auth.services import resolve_access_token
from archivist.database.session import SessionLocal
from archivist.response.response import UnauthenticatedError


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_current_session(
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db),
) -> Tuple[User, UserSession]:
    if not authorization:
        raise UnauthenticatedError(
            code="AUTH_NOT_AUTHENTICATED",
            message="Authentication required",
        )

    try:
        scheme, token = authorization.split(" ", 1)
    except ValueError:
        raise UnauthenticatedError(
            code="AUTH_INVALID_AUTH_HEADER",
            message="Malformed Authorization header",
        )

    if scheme.lower() != "bearer":
        raise UnauthenticatedError(
            code="AUTH_INVALID_AUTH_SCHEME",
            message="Bearer authorization scheme expected",
        )

    return resolve_access_token(db, token.strip())


def get_current_user(
    current: Tuple[User, UserSession] = Depends(get_current_session),
) -> User:
    user, _ = current
    return user


__all__ = ["get_db", "get_current_session", "get_current_user"]
