"""
Watcher ORM model and the comment-thread behaviour shared by tasks and
conversations.
"""
from __future__ import annotations

from sqlalchemy import ForeignKey, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from teamhub.db.base import Base, TimestampMixin, loaded

RECENT_COMMENTS = 2


class Watcher(TimestampMixin, Base):
    __tablename__ = "watchers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    watchable_type: Mapped[str] = mapped_column(String(50), nullable=False)
    watchable_id: Mapped[int] = mapped_column(Integer, nullable=False)

    __table_args__ = (
        UniqueConstraint(
            "user_id", "watchable_type", "watchable_id",
            name="uq_watchers_user_id_watchable",
        ),
        Index("ix_watchers_watchable", "watchable_type", "watchable_id"),
    )

    def __repr__(self) -> str:
        return f"<Watcher user_id={self.user_id} {self.watchable_type}#{self.watchable_id}>"


class ThreadMixin:
    """
    Requires `comments` (ordered by id) and `watchers` relationships.
    Both must be eager loaded; unloaded collections read as empty.
    """

    @property
    def loaded_comments(self) -> list:
        return list(self.comments) if loaded(self, "comments") else []

    @property
    def first_comment(self):
        comments = self.loaded_comments
        return comments[0] if comments else None

    @property
    def recent_comments(self) -> list:
        return list(reversed(self.loaded_comments[-RECENT_COMMENTS:]))

    @property
    def first_comment_id(self) -> int | None:
        first = self.first_comment
        return first.id if first is not None else None

    @property
    def recent_comment_ids(self) -> list[int]:
        return [comment.id for comment in self.recent_comments]

    @property
    def comments_count(self) -> int:
        return len(self.loaded_comments)

    @property
    def watcher_ids(self) -> list[int]:
        if not loaded(self, "watchers"):
            return []
        return [watcher.user_id for watcher in self.watchers]
