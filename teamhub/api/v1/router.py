"""
Aggregates all v1 API routers into a single APIRouter.
"""
from __future__ import annotations

from fastapi import APIRouter

from teamhub.api.v1 import (
    auth,
    comments,
    conversations,
    organizations,
    pages,
    people,
    projects,
    search,
    task_lists,
    tasks,
    users,
)

api_router = APIRouter()

api_router.include_router(auth.router)
api_router.include_router(users.router)
api_router.include_router(organizations.router)
api_router.include_router(projects.router)
api_router.include_router(people.router)
api_router.include_router(task_lists.router)
api_router.include_router(tasks.router)
api_router.include_router(conversations.router)
api_router.include_router(comments.router)
api_router.include_router(pages.router)
api_router.include_router(search.router)
