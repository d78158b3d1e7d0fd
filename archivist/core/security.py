from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Literal, Optional

import jwt
from passlib.context import CryptContext

from archivist.core.config import settings


TokenType = Literal["access", "refresh"]

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_aware(value: datetime) -> datetime:
    # SQLite hands back naive datetimes even for timezone=True columns.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _encode(
    token_type: TokenType,
    user_id: uuid.UUID,
    session_id: uuid.UUID,
    lifetime: timedelta,
    **claims: Any,
) -> str:
    issued = utc_now()
    payload: Dict[str, Any] = {
        "sub": str(user_id),
        "type": token_type,
        "session_id": str(session_id),
        "iat": int(issued.timestamp()),
        "exp": int((issued + lifetime).timestamp()),
    }
    payload.update(claims)
    return jwt.encode(
        payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm
    )


def create_access_token(
    *,
    user_id: uuid.UUID,
    session_id: uuid.UUID,
    expires_delta: Optional[timedelta] = None,
) -> str:
    lifetime = expires_delta or timedelta(
        minutes=settings.access_token_expire_minutes
    )
    return _encode("access", user_id, session_id, lifetime)


def create_refresh_token(
    *,
    user_id: uuid.UUID,
    session_id: uuid.UUID,
    jti: uuid.UUID,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """
    The jti is stored on the session row; rotating it invalidates every
    refresh token issued before.
    """
    lifetime = expires_delta or timedelta(days=settings.refresh_token_expire_days)
    return _encode("refresh", user_id, session_id, lifetime, jti=str(jti))


def decode_token(token: str) -> Dict[str, Any]:
    return jwt.decode(
        token,
        settings.jwt_secret_key,
        algorithms=[settings.jwt_algorithm],
    )


__all__ = [
    "TokenType",
    "hash_password",
    "verify_password",
    "utc_now",
    "as_aware",
    "create_access_token",
    "create_refresh_token",
    "decode_token",
]
