"""
TaskList ORM model.
"""
from __future__ import annotations

from sqlalchemy import Boolean, ForeignKey, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from teamhub.db.base import Base, TimestampMixin, refs


class TaskList(TimestampMixin, Base):
    __tablename__ = "task_lists"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    permalink: Mapped[str] = mapped_column(String(255), nullable=False)
    project_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    archived: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default="0"
    )

    project: Mapped["Project"] = relationship("Project")  # type: ignore[name-defined]  # noqa: F821
    tasks: Mapped[list["Task"]] = relationship(  # type: ignore[name-defined]  # noqa: F821
        "Task",
        back_populates="task_list",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        UniqueConstraint("project_id", "permalink", name="uq_task_lists_project_id_permalink"),
        Index("ix_task_lists_project_id", "project_id"),
    )

    def references(self) -> dict[str, list[int]]:
        return refs(users=self.user_id, projects=self.project_id)

    def __repr__(self) -> str:
        return f"<TaskList id={self.id} name={self.name!r}>"
