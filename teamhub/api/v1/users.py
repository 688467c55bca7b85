"""
Account and user profile routes.
"""
from __future__ import annotations

from fastapi import APIRouter, Request, Response

from teamhub.core.dependencies import CurrentUser, DBSession
from teamhub.core.exceptions import ObjectNotFound
from teamhub.core.responses import api_respond
from teamhub.crud.user import crud_user
from teamhub.schemas.user import AccountRead
from teamhub.services.response_service import response_service

router = APIRouter(tags=["Users"])


@router.get("/account", summary="Get the authenticated user's account")
async def show_account(
    request: Request,
    current_user: CurrentUser,
    db: DBSession,
) -> Response:
    return api_respond(
        request, await response_service.api_wrap(db, current_user, schema=AccountRead)
    )


@router.get("/users/{user_id}", summary="Get a user's public profile")
async def show_user(
    request: Request,
    user_id: int,
    current_user: CurrentUser,
    db: DBSession,
) -> Response:
    user = await crud_user.get(db, user_id)
    if user is None:
        raise ObjectNotFound("User not found")
    return api_respond(request, await response_service.api_wrap(db, user))
