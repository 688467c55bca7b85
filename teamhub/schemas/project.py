"""
Project, Person and Organization Pydantic schemas.
"""
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from teamhub.models.project import PersonRole


class OrganizationRead(BaseModel):
    id: int
    name: str
    permalink: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


# ── Project ───────────────────────────────────────────────────────────────────

class ProjectCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    permalink: str | None = Field(
        default=None, min_length=1, max_length=255, pattern=r"^[a-z0-9][a-z0-9\-_]*$"
    )
    organization_id: int | None = None


class ProjectUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    permalink: str | None = Field(
        default=None, min_length=1, max_length=255, pattern=r"^[a-z0-9][a-z0-9\-_]*$"
    )
    archived: bool | None = None


class ProjectRead(BaseModel):
    id: int
    name: str
    permalink: str
    user_id: int
    organization_id: int | None
    archived: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


# ── Person ────────────────────────────────────────────────────────────────────

class PersonCreate(BaseModel):
    user_id: int
    role: PersonRole = PersonRole.PARTICIPANT


class PersonUpdate(BaseModel):
    role: PersonRole


class PersonRead(BaseModel):
    id: int
    user_id: int
    project_id: int
    role: int
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
