"""
Page, PageSlot, Note and Upload ORM models.
A page orders its notes and uploads through page slots.
"""
from __future__ import annotations

from sqlalchemy import ForeignKey, Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from teamhub.db.base import Base, TimestampMixin, loaded, refs


class Page(TimestampMixin, Base):
    __tablename__ = "pages"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    permalink: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    project_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )

    project: Mapped["Project"] = relationship("Project")  # type: ignore[name-defined]  # noqa: F821
    slots: Mapped[list["PageSlot"]] = relationship(
        "PageSlot",
        back_populates="page",
        order_by="PageSlot.position",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        UniqueConstraint("project_id", "permalink", name="uq_pages_project_id_permalink"),
        Index("ix_pages_project_id", "project_id"),
    )

    def references(self) -> dict[str, list[int]]:
        return refs(users=self.user_id, projects=self.project_id)

    def __repr__(self) -> str:
        return f"<Page id={self.id} permalink={self.permalink}>"


class PageSlot(Base):
    __tablename__ = "page_slots"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    page_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("pages.id", ondelete="CASCADE"), nullable=False
    )
    rel_object_type: Mapped[str] = mapped_column(String(50), nullable=False)
    rel_object_id: Mapped[int] = mapped_column(Integer, nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    page: Mapped["Page"] = relationship("Page", back_populates="slots")

    __table_args__ = (
        Index("ix_page_slots_rel_object", "rel_object_type", "rel_object_id"),
    )

    def __repr__(self) -> str:
        return f"<PageSlot page_id={self.page_id} {self.rel_object_type}#{self.rel_object_id}>"


class SlottedMixin:
    """Position of the record on its page, when the slot was eager loaded."""

    @property
    def position(self) -> int | None:
        if not loaded(self, "page_slot") or self.page_slot is None:
            return None
        return self.page_slot.position


class Note(SlottedMixin, TimestampMixin, Base):
    __tablename__ = "notes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    body: Mapped[str | None] = mapped_column(Text, nullable=True)
    page_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("pages.id", ondelete="CASCADE"), nullable=False
    )
    project_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )

    page_slot: Mapped["PageSlot | None"] = relationship(
        "PageSlot",
        primaryjoin="and_(PageSlot.rel_object_type == 'Note', foreign(PageSlot.rel_object_id) == Note.id)",
        uselist=False,
        viewonly=True,
    )

    __table_args__ = (Index("ix_notes_page_id", "page_id"),)

    def references(self) -> dict[str, list[int]]:
        return refs(users=self.user_id, projects=self.project_id, pages=self.page_id)

    def __repr__(self) -> str:
        return f"<Note id={self.id} page_id={self.page_id}>"


class Upload(SlottedMixin, TimestampMixin, Base):
    __tablename__ = "uploads"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    asset_file_name: Mapped[str] = mapped_column(String(255), nullable=False)
    asset_content_type: Mapped[str | None] = mapped_column(String(100), nullable=True)
    asset_file_size: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    description: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    page_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("pages.id", ondelete="CASCADE"), nullable=True
    )
    comment_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("comments.id", ondelete="CASCADE"), nullable=True
    )
    project_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )

    comment: Mapped["Comment | None"] = relationship(  # type: ignore[name-defined]  # noqa: F821
        "Comment",
        back_populates="uploads",
    )
    page_slot: Mapped["PageSlot | None"] = relationship(
        "PageSlot",
        primaryjoin="and_(PageSlot.rel_object_type == 'Upload', foreign(PageSlot.rel_object_id) == Upload.id)",
        uselist=False,
        viewonly=True,
    )

    __table_args__ = (
        Index("ix_uploads_page_id", "page_id"),
        Index("ix_uploads_comment_id", "comment_id"),
    )

    def references(self) -> dict[str, list[int]]:
        return refs(
            users=self.user_id,
            projects=self.project_id,
            pages=self.page_id,
            comments=self.comment_id,
        )

    def __repr__(self) -> str:
        return f"<Upload id={self.id} file={self.asset_file_name!r}>"
