"""
Page, note and upload routes.
"""
from __future__ import annotations

from fastapi import APIRouter, Request, Response, status

from teamhub.core.dependencies import (
    CurrentPage,
    CurrentUser,
    DBSession,
    ListQuery,
    MemberProject,
    WriteUser,
)
from teamhub.core.responses import api_respond, handle_api_success
from teamhub.crud.page import crud_note, crud_page, crud_upload
from teamhub.crud.project import crud_project
from teamhub.schemas.page import NoteCreate, PageCreate
from teamhub.services.page_service import page_service
from teamhub.services.response_service import response_service

router = APIRouter(tags=["Pages"])


@router.get("/pages", summary="List pages across the user's projects")
async def list_all_pages(
    request: Request,
    current_user: CurrentUser,
    db: DBSession,
    params: ListQuery,
) -> Response:
    project_ids = await crud_project.project_ids_for_user(db, user_id=current_user.id)
    pages = await crud_page.list_in_projects(db, project_ids=project_ids, params=params)
    return api_respond(request, await response_service.api_wrap(db, pages, references=True))


@router.get("/projects/{project_id}/pages", summary="List a project's pages")
async def list_pages(
    request: Request,
    project: MemberProject,
    db: DBSession,
    params: ListQuery,
) -> Response:
    pages = await crud_page.list_in_projects(db, project_ids=[project.id], params=params)
    return api_respond(request, await response_service.api_wrap(db, pages, references=True))


@router.post(
    "/projects/{project_id}/pages",
    status_code=status.HTTP_201_CREATED,
    summary="Create a page (participants and above)",
)
async def create_page(
    request: Request,
    page_in: PageCreate,
    project: MemberProject,
    current_user: WriteUser,
    db: DBSession,
) -> Response:
    page = await page_service.create_page(
        db, project=project, page_in=page_in, current_user=current_user
    )
    payload = await response_service.api_wrap(db, page, references=True)
    return handle_api_success(request, payload, is_new=True)


@router.get("/projects/{project_id}/pages/{page_id}", summary="Get a page")
async def show_page(
    request: Request,
    page: CurrentPage,
    db: DBSession,
) -> Response:
    return api_respond(request, await response_service.api_wrap(db, page, references=True))


# ── Notes ─────────────────────────────────────────────────────────────────────

@router.get("/projects/{project_id}/pages/{page_id}/notes", summary="List a page's notes")
async def list_notes(
    request: Request,
    page: CurrentPage,
    db: DBSession,
    params: ListQuery,
) -> Response:
    notes = await crud_note.list_for_page(db, page_id=page.id, params=params)
    return api_respond(request, await response_service.api_wrap(db, notes, references=True))


@router.post(
    "/projects/{project_id}/pages/{page_id}/notes",
    status_code=status.HTTP_201_CREATED,
    summary="Add a note to a page (participants and above)",
)
async def create_note(
    request: Request,
    note_in: NoteCreate,
    project: MemberProject,
    page: CurrentPage,
    current_user: WriteUser,
    db: DBSession,
) -> Response:
    note = await page_service.create_note(
        db, project=project, page=page, note_in=note_in, current_user=current_user
    )
    payload = await response_service.api_wrap(db, note, references=True)
    return handle_api_success(request, payload, is_new=True)


# ── Uploads ───────────────────────────────────────────────────────────────────

@router.get("/projects/{project_id}/pages/{page_id}/uploads", summary="List a page's uploads")
async def list_uploads(
    request: Request,
    page: CurrentPage,
    db: DBSession,
    params: ListQuery,
) -> Response:
    uploads = await crud_upload.list_for_page(db, page_id=page.id, params=params)
    return api_respond(request, await response_service.api_wrap(db, uploads, references=True))


@router.get("/uploads/{upload_id}", summary="Get an upload")
async def show_upload(
    request: Request,
    upload_id: int,
    current_user: CurrentUser,
    db: DBSession,
) -> Response:
    upload = await page_service.get_visible_upload(
        db, upload_id=upload_id, current_user=current_user
    )
    return api_respond(request, await response_service.api_wrap(db, upload, references=True))
