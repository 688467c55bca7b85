"""
TaskList and Task Pydantic schemas.
"""
from __future__ import annotations

from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, Field

TaskStatus = Literal["new", "open", "hold", "resolved", "rejected"]


# ── Task list ─────────────────────────────────────────────────────────────────

class TaskListCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)


class TaskListRead(BaseModel):
    id: int
    name: str
    permalink: str
    project_id: int
    user_id: int
    archived: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


# ── Task ──────────────────────────────────────────────────────────────────────

class TaskCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    status: TaskStatus = "new"
    assigned_id: int | None = None
    due_on: date | None = None
    body: str | None = Field(default=None, max_length=10000)


class TaskUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    status: TaskStatus | None = None
    assigned_id: int | None = None
    due_on: date | None = None


class TaskRead(BaseModel):
    id: int
    name: str
    status: str
    project_id: int
    task_list_id: int
    user_id: int
    assigned_id: int | None
    due_on: date | None
    first_comment_id: int | None
    recent_comment_ids: list[int]
    comments_count: int
    watcher_ids: list[int]
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
