"""
Organization ORM model.
Organizations group projects; they are addressed by id or permalink.
"""
from __future__ import annotations

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from teamhub.db.base import Base, TimestampMixin


class Organization(TimestampMixin, Base):
    __tablename__ = "organizations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    permalink: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)

    projects: Mapped[list["Project"]] = relationship(  # type: ignore[name-defined]  # noqa: F821
        "Project",
        back_populates="organization",
    )

    def __repr__(self) -> str:
        return f"<Organization id={self.id} permalink={self.permalink}>"
