"""
Bookmarks API — Bookmark Route Handlers
========================================

What:  HTTP surface of the bookmark resource.
How:   Parses the request, delegates to BookmarkService, sets status codes
       and headers. Errors are raised as exceptions and rendered by the
       global handlers in main.py.

    GET    /api/bookmarks        200  list of serialized bookmarks
    POST   /api/bookmarks        201  serialized bookmark + Location header
    GET    /api/bookmarks/{id}   200  serialized bookmark
    DELETE /api/bookmarks/{id}   204  empty body
    PATCH  /api/bookmarks/{id}   204  empty body
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Body, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from bookmarks_api.config import settings
from bookmarks_api.database import get_db_session
from bookmarks_api.schemas.bookmark import (
    BookmarkPayload,
    BookmarkResponse,
    ErrorResponse,
)
from bookmarks_api.services.bookmark_service import bookmark_service

logger = logging.getLogger(__name__)

# ── Router Configuration ──────────────────────────────────────────────────
router = APIRouter(prefix=settings.api_prefix, tags=["Bookmarks"])

NOT_FOUND_RESPONSE = {404: {"description": "Bookmark not found", "model": ErrorResponse}}


def bookmark_location(bookmark_id: int) -> str:
    """Relative URL of a bookmark, used for the Location header."""
    return f"{settings.api_prefix}/bookmarks/{bookmark_id}"


@router.get(
    "/bookmarks",
    response_model=List[BookmarkResponse],
    summary="List all bookmarks",
)
async def list_bookmarks(db: AsyncSession = Depends(get_db_session)):
    return await bookmark_service.list_bookmarks(db)


@router.post(
    "/bookmarks",
    response_model=BookmarkResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"description": "Invalid bookmark", "model": ErrorResponse}},
    summary="Create a bookmark",
)
async def create_bookmark(
    response: Response,
    payload: Optional[BookmarkPayload] = Body(default=None),
    db: AsyncSession = Depends(get_db_session),
):
    """
    Create a bookmark from {title, url, description, rating}.

    All four fields are required; rating must be an integer between 0 and 5
    and url a valid URI. The response carries the new id and a Location
    header pointing at the created resource.
    """
    fields = payload.to_fields() if payload is not None else {}
    bookmark = await bookmark_service.create_bookmark(db, fields)
    response.headers["Location"] = bookmark_location(bookmark["id"])
    return bookmark


@router.get(
    "/bookmarks/{bookmark_id}",
    response_model=BookmarkResponse,
    responses=NOT_FOUND_RESPONSE,
    summary="Get a single bookmark",
)
async def get_bookmark(
    bookmark_id: int,
    db: AsyncSession = Depends(get_db_session),
):
    return await bookmark_service.get_bookmark(db, bookmark_id)


@router.delete(
    "/bookmarks/{bookmark_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses=NOT_FOUND_RESPONSE,
    summary="Delete a bookmark",
)
async def delete_bookmark(
    bookmark_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    await bookmark_service.delete_bookmark(db, bookmark_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.patch(
    "/bookmarks/{bookmark_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={
        400: {"description": "No usable field supplied", "model": ErrorResponse},
        **NOT_FOUND_RESPONSE,
    },
    summary="Update some fields of a bookmark",
)
async def update_bookmark(
    bookmark_id: int,
    payload: Optional[BookmarkPayload] = Body(default=None),
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    """
    Replace any non-empty subset of title/url/description/rating.

    Fields left out keep their stored values; unknown keys are ignored.
    """
    fields = payload.to_fields() if payload is not None else None
    await bookmark_service.update_bookmark(db, bookmark_id, fields)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
