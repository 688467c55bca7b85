"""
User ORM model.
Stores authentication credentials, profile data and the persistent
("remember me") cookie token.
"""
from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from teamhub.db.base import Base, TimestampMixin


def as_utc(value: datetime) -> datetime:
    """SQLite hands back naive datetimes; treat them as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class User(TimestampMixin, Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    username: Mapped[str] = mapped_column(String(40), unique=True, nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    first_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    last_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    hashed_password: Mapped[str] = mapped_column(String(255), nullable=False)
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default="1"
    )
    remember_token_hash: Mapped[str | None] = mapped_column(String(64), nullable=True)
    remember_token_expires_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    # ── Relationships ─────────────────────────────────────────────────────────
    people: Mapped[list["Person"]] = relationship(  # type: ignore[name-defined]  # noqa: F821
        "Person",
        back_populates="user",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        Index("ix_users_remember_token_hash", "remember_token_hash"),
    )

    # Set by the delegated-token strategy for the lifetime of a request.
    current_token = None

    @property
    def name(self) -> str:
        full = " ".join(part for part in (self.first_name, self.last_name) if part)
        return full or self.username

    def remember_token_valid(self, now: datetime | None = None) -> bool:
        if self.remember_token_hash is None or self.remember_token_expires_at is None:
            return False
        now = now or datetime.now(timezone.utc)
        return as_utc(self.remember_token_expires_at) > now

    def has_grant(self, scope: str) -> bool:
        """Requests not made through a delegated token carry every grant."""
        if self.current_token is None:
            return True
        return self.current_token.allows(scope)

    def __repr__(self) -> str:
        return f"<User id={self.id} username={self.username}>"
