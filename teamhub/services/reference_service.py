"""
Reference expansion for API responses.

Given a mapping of table name -> ids, loads the records to embed under
`references`. Users and people are resolved last: people first, then every
user that was asked for explicitly or that owns (user_id) any record already
loaded. Each association name maps to a loader in REGISTRY that knows the
eager-load shape of its model and, for comment threads, which extra records
ride along.
"""
from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from sqlalchemy.orm.interfaces import LoaderOption

from teamhub.db.base import Base
from teamhub.models.comment import Comment
from teamhub.models.conversation import Conversation
from teamhub.models.page import Note, Upload
from teamhub.models.project import Person
from teamhub.models.task import Task
from teamhub.models.user import User

logger = logging.getLogger(__name__)

References = dict[str, list[int]]


def unique(records: Iterable[Any]) -> list[Any]:
    """Drop None and repeated records, keeping first-seen order."""
    seen: set[tuple[str, Any]] = set()
    result: list[Any] = []
    for record in records:
        if record is None:
            continue
        key = (type(record).__name__, record.id)
        if key not in seen:
            seen.add(key)
            result.append(record)
    return result


def thread_extras(threads: list[Any]) -> list[Any]:
    """First and recent comments of each thread, after all the threads."""
    firsts = [thread.first_comment for thread in threads]
    recents = [comment for thread in threads for comment in thread.recent_comments]
    return firsts + recents


@dataclass(frozen=True)
class AssociationLoader:
    model: type[Base]
    options: tuple[LoaderOption, ...] = ()
    extras: Callable[[list[Any]], list[Any]] | None = None

    async def fetch(self, db: AsyncSession, ids: list[int]) -> list[Any]:
        if not ids:
            return []
        result = await db.execute(
            select(self.model)
            .options(*self.options)
            .where(self.model.id.in_(ids))  # type: ignore[attr-defined]
            .order_by(self.model.id)  # type: ignore[attr-defined]
            .execution_options(populate_existing=True)
        )
        records = list(result.scalars().all())
        if self.extras is not None:
            return records + self.extras(records)
        return records


REGISTRY: dict[str, AssociationLoader] = {
    "comments": AssociationLoader(Comment, (selectinload(Comment.uploads),)),
    "uploads": AssociationLoader(Upload, (selectinload(Upload.page_slot),)),
    "notes": AssociationLoader(Note, (selectinload(Note.page_slot),)),
    "conversations": AssociationLoader(
        Conversation,
        (selectinload(Conversation.comments), selectinload(Conversation.watchers)),
        extras=thread_extras,
    ),
    "tasks": AssociationLoader(
        Task,
        (selectinload(Task.comments), selectinload(Task.watchers)),
        extras=thread_extras,
    ),
}


def generic_loader(table: str) -> AssociationLoader | None:
    """Plain id fetch for any other mapped table."""
    for mapper in Base.registry.mappers:
        if getattr(mapper.class_, "__tablename__", None) == table:
            return AssociationLoader(mapper.class_)
    return None


def merge_references(mappings: Iterable[Mapping[str, Iterable[int | None]]]) -> References:
    """Union of several reference mappings; ids unique, None dropped, order kept."""
    merged: References = {}
    for mapping in mappings:
        for table, ids in mapping.items():
            bucket = merged.setdefault(table, [])
            for value in ids:
                if value is not None and value not in bucket:
                    bucket.append(value)
    return merged


@dataclass
class ReferenceService:
    registry: dict[str, AssociationLoader] = field(default_factory=lambda: dict(REGISTRY))

    def loader_for(self, table: str) -> AssociationLoader | None:
        return self.registry.get(table) or generic_loader(table)

    async def load_references(self, db: AsyncSession, refs: Mapping[str, Iterable[int]]) -> list[Any]:
        """
        Resolve refs into records: elements, then users, then people.
        Each group is deduplicated on its own.
        """
        remaining = {table: list(ids) for table, ids in refs.items()}
        user_ids = list(remaining.pop("users", []))
        people_ids = list(remaining.pop("people", []))

        fetched: list[Any] = []
        for table, ids in remaining.items():
            loader = self.loader_for(table)
            if loader is None:
                logger.warning("Skipping references to unknown association %r", table)
                continue
            fetched.extend(await loader.fetch(db, sorted(set(ids))))
        elements = unique(fetched)

        people = await AssociationLoader(Person).fetch(db, sorted(set(people_ids)))

        owners = [
            record.user_id
            for record in [*people, *elements]
            if getattr(record, "user_id", None) is not None
        ]
        users = await AssociationLoader(User).fetch(db, sorted(set(user_ids + owners)))

        return elements + users + people


reference_service = ReferenceService()
