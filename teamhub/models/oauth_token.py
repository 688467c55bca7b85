"""
OAuthToken ORM model.
A delegated grant issued to a user; the bearer string handed to clients
is a signed JWT whose jti is this row's id.
"""
from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from teamhub.db.base import Base
from teamhub.models.user import as_utc


class OAuthToken(Base):
    __tablename__ = "oauth_tokens"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    scope: Mapped[str] = mapped_column(String(255), nullable=False, default="read")
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    invalidated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    user: Mapped["User"] = relationship("User")  # type: ignore[name-defined]  # noqa: F821

    __table_args__ = (Index("ix_oauth_tokens_user_id", "user_id"),)

    @property
    def scopes(self) -> list[str]:
        return self.scope.split()

    def allows(self, scope: str) -> bool:
        return scope in self.scopes

    def is_valid(self, now: datetime | None = None) -> bool:
        now = now or datetime.now(timezone.utc)
        return self.invalidated_at is None and as_utc(self.expires_at) > now

    def __repr__(self) -> str:
        return f"<OAuthToken id={self.id} user_id={self.user_id} scope={self.scope!r}>"
