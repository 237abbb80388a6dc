"""Content page endpoints."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from intranet.api import deps
from intranet.models.page import Page
from intranet.models.user import User
from intranet.schemas.page import (
    PageCreate,
    PageHtml,
    PageRead,
    PageRename,
    PageSummary,
    PageUpdate,
)
from intranet.services import page_service

router = APIRouter()


async def _get_page_or_404(session: AsyncSession, page_id: str) -> Page:
    page = await page_service.get_page(session, page_id=page_id)
    if page is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Page not found"
        )
    return page


@router.get("", response_model=list[PageSummary], summary="List pages")
async def list_pages(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    _: Annotated[User, Depends(deps.get_current_active_user)],
) -> list[PageSummary]:
    pages = await page_service.list_pages(session)
    return [PageSummary.model_validate(obj) for obj in pages]


@router.post(
    "",
    response_model=PageRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create page",
)
async def create_page(
    payload: PageCreate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    _: Annotated[User, Depends(deps.require_admin)],
) -> PageRead:
    """Create a page; the id is derived from the title unless given."""
    try:
        page = await page_service.create_page(
            session, title=payload.title, page_id=payload.id, content=payload.content
        )
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
        ) from exc
    return PageRead.model_validate(page)


@router.get("/{page_id}", response_model=PageRead, summary="Get page")
async def read_page(
    page_id: str,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    _: Annotated[User, Depends(deps.get_current_active_user)],
) -> PageRead:
    page = await _get_page_or_404(session, page_id)
    return PageRead.model_validate(page)


@router.get("/{page_id}/html", response_model=PageHtml, summary="Rendered page")
async def read_page_html(
    page_id: str,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    _: Annotated[User, Depends(deps.get_current_active_user)],
) -> PageHtml:
    page = await _get_page_or_404(session, page_id)
    return PageHtml(
        id=page.id,
        title=page_service.extract_title(page.content, page.id) or page.title,
        html=page_service.render_markdown(page.content),
    )


@router.patch("/{page_id}", response_model=PageRead, summary="Update page")
async def update_page(
    page_id: str,
    payload: PageUpdate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    _: Annotated[User, Depends(deps.require_admin)],
) -> PageRead:
    """Replace the markdown and/or move the page to a new id."""
    page = await _get_page_or_404(session, page_id)
    try:
        if payload.content is not None:
            page = await page_service.update_page_content(
                session, page=page, content=payload.content
            )
        if payload.id is not None:
            page = await page_service.change_page_id(session, page=page, new_id=payload.id)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
        ) from exc
    return PageRead.model_validate(page)


@router.post("/{page_id}/rename", response_model=PageRead, summary="Rename page")
async def rename_page(
    page_id: str,
    payload: PageRename,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    _: Annotated[User, Depends(deps.require_admin)],
) -> PageRead:
    page = await _get_page_or_404(session, page_id)
    try:
        renamed = await page_service.rename_page(session, page=page, title=payload.title)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
        ) from exc
    return PageRead.model_validate(renamed)


@router.delete(
    "/{page_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete page"
)
async def delete_page(
    page_id: str,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    _: Annotated[User, Depends(deps.require_admin)],
) -> None:
    """Delete a page; deleting a missing page succeeds."""
    await page_service.delete_page(session, page_id=page_id)
    return None
