"""
Project and Person ORM models.
A Person is the membership of a user in a project, with a role.
Role checks read the project's eagerly loaded people.
"""
from __future__ import annotations

import enum

from sqlalchemy import Boolean, ForeignKey, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from teamhub.db.base import Base, TimestampMixin, refs


class PersonRole(enum.IntEnum):
    OBSERVER = 0
    COMMENTER = 1
    PARTICIPANT = 2
    ADMIN = 3
    OWNER = 4


class Project(TimestampMixin, Base):
    __tablename__ = "projects"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    permalink: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    organization_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("organizations.id", ondelete="SET NULL"), nullable=True
    )
    archived: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default="0"
    )

    # ── Relationships ─────────────────────────────────────────────────────────
    user: Mapped["User"] = relationship("User")  # type: ignore[name-defined]  # noqa: F821
    organization: Mapped["Organization | None"] = relationship(  # type: ignore[name-defined]  # noqa: F821
        "Organization",
        back_populates="projects",
    )
    people: Mapped[list["Person"]] = relationship(
        "Person",
        back_populates="project",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        Index("ix_projects_user_id", "user_id"),
        Index("ix_projects_organization_id", "organization_id"),
    )

    def references(self) -> dict[str, list[int]]:
        return refs(users=self.user_id, organizations=self.organization_id)

    # ── Roles ─────────────────────────────────────────────────────────────────

    def get_person(self, user) -> "Person | None":
        for person in self.people:
            if person.user_id == user.id:
                return person
        return None

    def get_role(self, user) -> PersonRole | None:
        if user.id == self.user_id:
            return PersonRole.OWNER
        person = self.get_person(user)
        return PersonRole(person.role) if person is not None else None

    def check_role(self, user, minimum: PersonRole) -> bool:
        role = self.get_role(user)
        return role is not None and role >= minimum

    def observable(self, user) -> bool:
        return self.check_role(user, PersonRole.OBSERVER)

    def commentable(self, user) -> bool:
        return self.check_role(user, PersonRole.COMMENTER)

    def editable(self, user) -> bool:
        return self.check_role(user, PersonRole.PARTICIPANT)

    def admin(self, user) -> bool:
        return self.check_role(user, PersonRole.ADMIN)

    def __repr__(self) -> str:
        return f"<Project id={self.id} permalink={self.permalink}>"


class Person(TimestampMixin, Base):
    __tablename__ = "people"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    project_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False
    )
    role: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=int(PersonRole.PARTICIPANT),
        server_default=str(int(PersonRole.PARTICIPANT)),
    )

    # ── Relationships ─────────────────────────────────────────────────────────
    user: Mapped["User"] = relationship(  # type: ignore[name-defined]  # noqa: F821
        "User",
        back_populates="people",
    )
    project: Mapped["Project"] = relationship("Project", back_populates="people")

    __table_args__ = (
        UniqueConstraint("user_id", "project_id", name="uq_people_user_id_project_id"),
        Index("ix_people_project_id", "project_id"),
    )

    def references(self) -> dict[str, list[int]]:
        return refs(users=self.user_id, projects=self.project_id)

    def __repr__(self) -> str:
        return f"<Person id={self.id} user_id={self.user_id} project_id={self.project_id} role={self.role}>"
