"""
User Pydantic schemas.
Covers registration, login, profile reads and delegated-token responses.
"""
from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, EmailStr, Field, field_validator

from teamhub.core.security import validate_password_strength

OAuthScope = Literal["read", "write"]


# ── Create ────────────────────────────────────────────────────────────────────

class UserCreate(BaseModel):
    email: EmailStr
    username: str = Field(min_length=3, max_length=40, pattern=r"^[a-zA-Z0-9_\-]+$")
    password: str = Field(min_length=8, max_length=128)
    first_name: str | None = Field(default=None, max_length=100)
    last_name: str | None = Field(default=None, max_length=100)

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        return validate_password_strength(v)


# ── Read ──────────────────────────────────────────────────────────────────────

class UserRead(BaseModel):
    """Public profile, safe to embed in references."""

    id: int
    username: str
    first_name: str | None
    last_name: str | None
    name: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class AccountRead(UserRead):
    email: EmailStr


# ── Session / tokens ──────────────────────────────────────────────────────────

class LoginRequest(BaseModel):
    login: str = Field(min_length=1, description="Username or email")
    password: str
    remember_me: bool = False


class OAuthTokenCreate(BaseModel):
    scope: list[OAuthScope] = Field(default_factory=lambda: ["read"], min_length=1)


class OAuthTokenRead(BaseModel):
    id: int
    access_token: str
    token_type: str = "bearer"
    scope: list[str]
    expires_at: datetime
