"""
Task ORM model.
Tasks live in a task list, may be assigned to a project member (Person)
and carry a comment thread plus watchers.
"""
from __future__ import annotations

from datetime import date

from sqlalchemy import Date, Enum, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from teamhub.db.base import Base, TimestampMixin, refs
from teamhub.models.watcher import ThreadMixin

TASK_STATUSES = ("new", "open", "hold", "resolved", "rejected")


class Task(ThreadMixin, TimestampMixin, Base):
    __tablename__ = "tasks"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    status: Mapped[str] = mapped_column(
        Enum(*TASK_STATUSES, name="task_status_enum"),
        nullable=False,
        default="new",
        server_default="new",
    )
    project_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False
    )
    task_list_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("task_lists.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    assigned_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("people.id", ondelete="SET NULL"), nullable=True
    )
    due_on: Mapped[date | None] = mapped_column(Date, nullable=True)

    # ── Relationships ─────────────────────────────────────────────────────────
    project: Mapped["Project"] = relationship("Project")  # type: ignore[name-defined]  # noqa: F821
    user: Mapped["User"] = relationship("User")  # type: ignore[name-defined]  # noqa: F821
    task_list: Mapped["TaskList"] = relationship(  # type: ignore[name-defined]  # noqa: F821
        "TaskList",
        back_populates="tasks",
    )
    assigned: Mapped["Person | None"] = relationship("Person")  # type: ignore[name-defined]  # noqa: F821
    comments: Mapped[list["Comment"]] = relationship(  # type: ignore[name-defined]  # noqa: F821
        "Comment",
        primaryjoin="and_(Comment.target_type == 'Task', foreign(Comment.target_id) == Task.id)",
        order_by="Comment.id",
        viewonly=True,
    )
    watchers: Mapped[list["Watcher"]] = relationship(  # type: ignore[name-defined]  # noqa: F821
        "Watcher",
        primaryjoin="and_(Watcher.watchable_type == 'Task', foreign(Watcher.watchable_id) == Task.id)",
        order_by="Watcher.id",
        viewonly=True,
    )

    __table_args__ = (
        Index("ix_tasks_project_id", "project_id"),
        Index("ix_tasks_task_list_id", "task_list_id"),
        Index("ix_tasks_assigned_id", "assigned_id"),
        Index("ix_tasks_status", "status"),
    )

    def references(self) -> dict[str, list[int]]:
        return refs(
            users=self.user_id,
            projects=self.project_id,
            task_lists=self.task_list_id,
            people=self.assigned_id,
        )

    def __repr__(self) -> str:
        return f"<Task id={self.id} name={self.name!r} status={self.status}>"
