from __future__ import annotations

import uuid
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, EmailStr, Field
from pydantic.config import ConfigDict


class UserPublic(BaseModel):
    id: uuid.UUID
    email: EmailStr
    name: str | None
    image: str | None
    is_active: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class UserCreate(BaseModel):
    email: EmailStr
    password: str
    name: str | None = Field(default=None, max_length=100)
    image: str | None = None


class UserUpdate(BaseModel):
    name: str | None = Field(default=None, max_length=100)
    image: str | None = None


class TokenPair(BaseModel):
    access_token: str
    refresh_token: str
    token_type: Literal["bearer"] = "bearer"


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class RefreshRequest(BaseModel):
    refresh_token: str


__all__ = [
    "UserPublic",
    "UserCreate",
    "UserUpdate",
    "TokenPair",
    "LoginRequest",
    "RefreshRequest",
]
