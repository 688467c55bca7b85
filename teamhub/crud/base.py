"""
Generic async CRUD base class.
All domain-specific CRUD classes extend CRUDBase and inherit these methods.
"""
from __future__ import annotations

import re
from typing import Any, Generic, TypeVar

from sqlalchemy import ColumnElement, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.interfaces import LoaderOption

from teamhub.db.base import Base, valid_id
from teamhub.schemas.pagination import ListParams

ModelType = TypeVar("ModelType", bound=Base)

_NON_SLUG_RE = re.compile(r"[^a-z0-9]+")


class CRUDBase(Generic[ModelType]):
    """
    Generic CRUD operations for SQLAlchemy async ORM models.

    Subclasses set `load_options` to the eager-load shape every read of the
    model should use; reads go through populate_existing so collections
    loaded earlier in the session are refreshed.
    """

    load_options: tuple[LoaderOption, ...] = ()

    def __init__(self, model: type[ModelType]) -> None:
        self.model = model

    def _select(self):
        return (
            select(self.model)
            .options(*self.load_options)
            .execution_options(populate_existing=True)
        )

    async def get(self, db: AsyncSession, id: int) -> ModelType | None:
        """Fetch a single record by primary key."""
        return await self.get_by_id(db, id)

    async def get_by_id(
        self, db: AsyncSession, id: int, *conditions: ColumnElement[bool]
    ) -> ModelType | None:
        """Ids outside the column range are a miss, not a database error."""
        if not valid_id(id):
            return None
        return await self.get_where(db, self.model.id == id, *conditions)  # type: ignore[attr-defined]

    async def get_where(
        self, db: AsyncSession, *conditions: ColumnElement[bool]
    ) -> ModelType | None:
        result = await db.execute(self._select().where(*conditions).limit(1))
        return result.scalars().first()

    async def get_by_id_or_permalink(
        self,
        db: AsyncSession,
        value: str | int,
        *conditions: ColumnElement[bool],
    ) -> ModelType | None:
        """
        Numeric values are looked up as ids, anything else as a permalink.
        Extra conditions scope the lookup (e.g. to a project).
        """
        text = str(value)
        if text.isascii() and text.isdigit():
            return await self.get_by_id(db, int(text), *conditions)
        return await self.get_where(db, self.model.permalink == text, *conditions)  # type: ignore[attr-defined]

    async def list_page(
        self,
        db: AsyncSession,
        *conditions: ColumnElement[bool],
        params: ListParams,
        extra_options: tuple[LoaderOption, ...] = (),
    ) -> list[ModelType]:
        """Newest first, bounded by since_id / max_id and clamped to the API limit."""
        result = await db.execute(
            self._select()
            .options(*extra_options)
            .where(*conditions, *params.range(self.model))
            .order_by(self.model.id.desc())  # type: ignore[attr-defined]
            .limit(params.limit)
        )
        return list(result.scalars().all())

    async def search_by_name(
        self,
        db: AsyncSession,
        *conditions: ColumnElement[bool],
        query: str,
        params: ListParams,
        extra_options: tuple[LoaderOption, ...] = (),
    ) -> list[ModelType]:
        """Case-insensitive substring match on the model's name column."""
        return await self.list_page(
            db,
            self.model.name.ilike(f"%{query}%"),  # type: ignore[attr-defined]
            *conditions,
            params=params,
            extra_options=extra_options,
        )

    async def create_from_dict(
        self, db: AsyncSession, *, obj_in: dict[str, Any]
    ) -> ModelType:
        """Create a new record from a plain dictionary."""
        db_obj = self.model(**obj_in)
        db.add(db_obj)
        await db.flush()
        return await self.get(db, db_obj.id)  # type: ignore[attr-defined, return-value]

    async def update(
        self,
        db: AsyncSession,
        *,
        db_obj: ModelType,
        obj_in: dict[str, Any],
    ) -> ModelType:
        """Update an existing record and reload it with its eager-load shape."""
        for field, value in obj_in.items():
            setattr(db_obj, field, value)

        db.add(db_obj)
        await db.flush()
        return await self.get(db, db_obj.id)  # type: ignore[attr-defined, return-value]

    async def remove(self, db: AsyncSession, *, db_obj: ModelType) -> ModelType:
        await db.delete(db_obj)
        await db.flush()
        return db_obj

    async def exists(self, db: AsyncSession, **filters: Any) -> bool:
        """Return True if any record matches the given keyword filters."""
        query = select(func.count()).select_from(self.model)
        for attr, value in filters.items():
            query = query.where(getattr(self.model, attr) == value)
        result = await db.execute(query)
        return (result.scalar_one() or 0) > 0

    async def unique_permalink(
        self, db: AsyncSession, name: str, *conditions: ColumnElement[bool]
    ) -> str:
        """Slug of name, suffixed with -2, -3... until unused within conditions."""
        base = to_permalink(name)
        candidate = base
        suffix = 2
        while await self.get_where(db, self.model.permalink == candidate, *conditions):  # type: ignore[attr-defined]
            candidate = f"{base}-{suffix}"
            suffix += 1
        return candidate


def to_permalink(name: str) -> str:
    slug = _NON_SLUG_RE.sub("-", name.lower()).strip("-")
    if not slug or slug.isdigit():
        # Purely numeric permalinks would be read back as ids.
        slug = f"p-{slug}" if slug else "untitled"
    return slug[:255]
