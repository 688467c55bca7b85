"""
Page, Note and Upload Pydantic schemas.
"""
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class PageCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    description: str | None = Field(default=None, max_length=10000)


class PageRead(BaseModel):
    id: int
    name: str
    permalink: str
    description: str | None
    project_id: int
    user_id: int
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class NoteCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    body: str | None = Field(default=None, max_length=50000)


class NoteRead(BaseModel):
    id: int
    name: str
    body: str | None
    page_id: int
    project_id: int
    user_id: int
    position: int | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class UploadRead(BaseModel):
    id: int
    asset_file_name: str
    asset_content_type: str | None
    asset_file_size: int
    description: str | None
    page_id: int | None
    comment_id: int | None
    project_id: int
    user_id: int
    position: int | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
