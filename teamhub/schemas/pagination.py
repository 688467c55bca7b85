"""
List parameters shared by every index endpoint.
count is clamped to the API limit; since_id / max_id bound the ids
(both exclusive).
"""
from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field
from sqlalchemy import ColumnElement

from teamhub.core.config import settings
from teamhub.db.base import MAX_ID


def api_limit(count: int | None) -> int:
    if count is None:
        return settings.API_LIMIT
    return max(0, min(count, settings.API_LIMIT))


def api_range(model: Any, since_id: int | None, max_id: int | None) -> list[ColumnElement[bool]]:
    """WHERE fragments bounding model.id; empty when neither bound is given."""
    conditions: list[ColumnElement[bool]] = []
    if since_id is not None:
        conditions.append(model.id > since_id)
    if max_id is not None:
        conditions.append(model.id < max_id)
    return conditions


def api_truth(value: str | None) -> bool:
    """Query-string booleans: only "true" and "1" are true."""
    return value in ("true", "1")


class ListParams(BaseModel):
    count: int | None = None
    since_id: int | None = Field(default=None, ge=0, le=MAX_ID)
    max_id: int | None = Field(default=None, ge=0, le=MAX_ID)

    @property
    def limit(self) -> int:
        return api_limit(self.count)

    def range(self, model: Any) -> list[ColumnElement[bool]]:
        return api_range(model, self.since_id, self.max_id)
