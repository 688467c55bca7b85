"""
SQLAlchemy declarative base and shared metadata.
All models must import and inherit from Base defined here.
"""
from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, MetaData, func, inspect
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

# Naming convention for Alembic autogenerate to produce deterministic constraint names
NAMING_CONVENTION: dict[str, str] = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    """Shared declarative base for all ORM models."""

    metadata = MetaData(naming_convention=NAMING_CONVENTION)

    def references(self) -> dict[str, list[int]]:
        """Table name -> ids of the records this one refers to in API responses."""
        return {}


class TimestampMixin:
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )


def refs(**tables: int | list[int] | None) -> dict[str, list[int]]:
    """Build a references mapping, dropping empty ids."""
    result: dict[str, list[int]] = {}
    for table, ids in tables.items():
        if ids is None:
            continue
        values = ids if isinstance(ids, list) else [ids]
        values = [v for v in values if v is not None]
        if values:
            result[table] = values
    return result


def loaded(obj: object, attribute: str) -> bool:
    """True when a relationship attribute is already loaded (no lazy load needed)."""
    return attribute not in inspect(obj).unloaded


# Integer primary keys are 32-bit on PostgreSQL.
MAX_ID = 2**31 - 1


def valid_id(value: int) -> bool:
    """True when value fits the id columns; anything else can match no row."""
    return 0 < value <= MAX_ID
