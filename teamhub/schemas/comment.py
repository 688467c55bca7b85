"""
Conversation and Comment Pydantic schemas.
"""
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class CommentCreate(BaseModel):
    body: str = Field(min_length=1, max_length=10000)


class CommentRead(BaseModel):
    id: int
    body: str
    project_id: int
    user_id: int
    target_type: str
    target_id: int
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class ConversationCreate(BaseModel):
    name: str | None = Field(default=None, max_length=255)
    body: str = Field(min_length=1, max_length=10000)


class ConversationRead(BaseModel):
    id: int
    name: str | None
    simple: bool
    project_id: int
    user_id: int
    first_comment_id: int | None
    recent_comment_ids: list[int]
    comments_count: int
    watcher_ids: list[int]
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
