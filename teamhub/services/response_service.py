"""
API payload shaping.
Serialises records through their read schemas (always with a `type`
discriminator) and wraps single records or lists, optionally embedding
`references`.
"""
from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from teamhub.models import (
    Comment,
    Conversation,
    Note,
    Organization,
    Page,
    Person,
    Project,
    Task,
    TaskList,
    Upload,
    User,
)
from teamhub.schemas.comment import CommentRead, ConversationRead
from teamhub.schemas.page import NoteRead, PageRead, UploadRead
from teamhub.schemas.project import OrganizationRead, PersonRead, ProjectRead
from teamhub.schemas.task import TaskListRead, TaskRead
from teamhub.schemas.user import UserRead
from teamhub.services.reference_service import (
    ReferenceService,
    merge_references,
    reference_service,
    unique,
)

API_SCHEMAS: dict[type, type[BaseModel]] = {
    User: UserRead,
    Organization: OrganizationRead,
    Project: ProjectRead,
    Person: PersonRead,
    TaskList: TaskListRead,
    Task: TaskRead,
    Conversation: ConversationRead,
    Comment: CommentRead,
    Page: PageRead,
    Note: NoteRead,
    Upload: UploadRead,
}


def to_api(obj: Any, schema: type[BaseModel] | None = None) -> dict[str, Any]:
    """API representation of a record, with its type discriminator."""
    schema = schema or API_SCHEMAS[type(obj)]
    data = schema.model_validate(obj).model_dump(mode="json")
    data["type"] = type(obj).__name__
    return data


class ResponseService:

    def __init__(self, references: ReferenceService) -> None:
        self.references = references

    async def api_wrap(
        self,
        db: AsyncSession,
        obj: Any,
        *,
        references: bool | Sequence[str] | None = None,
        schema: type[BaseModel] | None = None,
    ) -> dict[str, Any]:
        """
        Wrap a record or a list of records.

        references=True expands each record's own declared references;
        a list of attribute names pulls those (eager-loaded) relationships
        straight off the records instead.
        """
        is_list = isinstance(obj, (list, tuple))
        records = list(obj) if is_list else [obj]

        response: dict[str, Any] = {}
        if is_list:
            response["type"] = "List"
            response["objects"] = [to_api(record, schema) for record in records]
        else:
            response.update(to_api(obj, schema))

        if references is True:
            refs = merge_references(record.references() for record in records)
            loaded = await self.references.load_references(db, refs)
            response["references"] = [to_api(record) for record in loaded]
        elif references:
            pulled: list[Any] = []
            for record in records:
                for name in references:
                    value = getattr(record, name)
                    pulled.extend(value if isinstance(value, (list, tuple)) else [value])
            response["references"] = [to_api(record) for record in unique(pulled)]

        return response


response_service = ResponseService(reference_service)
