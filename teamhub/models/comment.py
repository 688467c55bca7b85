"""
Comment ORM model.
Comments belong to a polymorphic target (a Task or a Conversation) and
may carry uploads.
"""
from __future__ import annotations

from sqlalchemy import ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from teamhub.db.base import Base, TimestampMixin, refs

# target_type -> table name used in references
TARGET_TABLES: dict[str, str] = {
    "Task": "tasks",
    "Conversation": "conversations",
}


class Comment(TimestampMixin, Base):
    __tablename__ = "comments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    body: Mapped[str] = mapped_column(Text, nullable=False)
    project_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    target_type: Mapped[str] = mapped_column(String(50), nullable=False)
    target_id: Mapped[int] = mapped_column(Integer, nullable=False)

    # ── Relationships ─────────────────────────────────────────────────────────
    user: Mapped["User"] = relationship("User")  # type: ignore[name-defined]  # noqa: F821
    project: Mapped["Project"] = relationship("Project")  # type: ignore[name-defined]  # noqa: F821
    uploads: Mapped[list["Upload"]] = relationship(  # type: ignore[name-defined]  # noqa: F821
        "Upload",
        back_populates="comment",
        passive_deletes=True,
        order_by="Upload.id",
    )

    __table_args__ = (
        Index("ix_comments_target", "target_type", "target_id"),
        Index("ix_comments_project_id", "project_id"),
    )

    def references(self) -> dict[str, list[int]]:
        return refs(
            users=self.user_id,
            projects=self.project_id,
            **{TARGET_TABLES[self.target_type]: self.target_id},
        )

    def __repr__(self) -> str:
        return f"<Comment id={self.id} target={self.target_type}#{self.target_id}>"
