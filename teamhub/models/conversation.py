"""
Conversation ORM model.
A discussion thread in a project. Simple conversations have no name of
their own and are shown by their first comment.
"""
from __future__ import annotations

from sqlalchemy import Boolean, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from teamhub.db.base import Base, TimestampMixin, refs
from teamhub.models.watcher import ThreadMixin


class Conversation(ThreadMixin, TimestampMixin, Base):
    __tablename__ = "conversations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    simple: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default="0"
    )
    project_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )

    project: Mapped["Project"] = relationship("Project")  # type: ignore[name-defined]  # noqa: F821
    user: Mapped["User"] = relationship("User")  # type: ignore[name-defined]  # noqa: F821
    comments: Mapped[list["Comment"]] = relationship(  # type: ignore[name-defined]  # noqa: F821
        "Comment",
        primaryjoin="and_(Comment.target_type == 'Conversation', foreign(Comment.target_id) == Conversation.id)",
        order_by="Comment.id",
        viewonly=True,
    )
    watchers: Mapped[list["Watcher"]] = relationship(  # type: ignore[name-defined]  # noqa: F821
        "Watcher",
        primaryjoin="and_(Watcher.watchable_type == 'Conversation', foreign(Watcher.watchable_id) == Conversation.id)",
        order_by="Watcher.id",
        viewonly=True,
    )

    __table_args__ = (Index("ix_conversations_project_id", "project_id"),)

    def references(self) -> dict[str, list[int]]:
        return refs(users=self.user_id, projects=self.project_id)

    def __repr__(self) -> str:
        return f"<Conversation id={self.id} name={self.name!r}>"
