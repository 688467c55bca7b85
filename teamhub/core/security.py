"""
Security utilities: password hashing, delegated-token JWTs and
persistent-cookie tokens.
Passwords are hashed with bcrypt via passlib. Tokens use python-jose.
"""
from __future__ import annotations

import hashlib
import secrets
from datetime import datetime, timedelta, timezone
from typing import Any

from jose import JWTError, jwt
from passlib.context import CryptContext

from teamhub.core.config import settings

# ── Password hashing ──────────────────────────────────────────────────────────
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_ROUNDS,
)


def hash_password(plain_password: str) -> str:
    """Return bcrypt hash of the given plain-text password."""
    return pwd_context.hash(plain_password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Return True if plain_password matches the stored hash."""
    return pwd_context.verify(plain_password, hashed_password)


# ── Delegated (OAuth-style) tokens ────────────────────────────────────────────

def create_oauth_token(
    user_id: int,
    token_id: int,
    scopes: list[str],
    expires_at: datetime,
) -> str:
    """
    Create the bearer string for an OAuthToken row.
    The jti claim is the row id, so the grant stays revocable server-side.
    """
    payload: dict[str, Any] = {
        "sub": str(user_id),
        "jti": str(token_id),
        "scope": " ".join(scopes),
        "type": "oauth",
        "iat": datetime.now(timezone.utc),
        "exp": expires_at,
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_oauth_token(token: str) -> dict[str, Any]:
    """
    Decode and validate a delegated token.
    Raises JWTError on failure.
    """
    payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    if payload.get("type") != "oauth":
        raise JWTError("Invalid token type")
    return payload


def oauth_token_expiry() -> datetime:
    return datetime.now(timezone.utc) + timedelta(days=settings.OAUTH_TOKEN_EXPIRE_DAYS)


# ── Persistent cookie tokens ──────────────────────────────────────────────────

def generate_remember_token() -> str:
    return secrets.token_urlsafe(32)


def remember_token_expiry() -> datetime:
    return datetime.now(timezone.utc) + timedelta(days=settings.REMEMBER_ME_DAYS)


def hash_token(token: str) -> str:
    """Return a SHA-256 hex digest of a token for safe DB storage."""
    return hashlib.sha256(token.encode()).hexdigest()


# ── Password policy ───────────────────────────────────────────────────────────

def validate_password_strength(password: str) -> str:
    """
    Enforce password policy:
    - Minimum 8 characters
    - At least one uppercase letter
    - At least one digit
    Returns the password unchanged if valid, raises ValueError otherwise.
    """
    if len(password) < 8:
        raise ValueError("Password must be at least 8 characters long")
    if not any(c.isupper() for c in password):
        raise ValueError("Password must contain at least one uppercase letter")
    if not any(c.isdigit() for c in password):
        raise ValueError("Password must contain at least one digit")
    return password
