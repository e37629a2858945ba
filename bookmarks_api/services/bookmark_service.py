"""
Bookmarks API — Bookmark Service (Business Logic Orchestrator)
===============================================================

What:  Runs each bookmark operation through validate → store → sanitize.
How:   Composes services.validation, the BookmarkStore gateway and the
       BookmarkSerializer. Receives the database session per call.
Who:   Called by route handlers in routes/bookmarks.py.

Flow (POST /api/bookmarks):
    ┌──────────┐    ┌─────────────┐    ┌──────────────┐    ┌─────────────┐
    │  Route   │───▶│  Validate   │───▶│ Store.insert │───▶│  Serialize  │
    └──────────┘    └─────────────┘    └──────────────┘    └─────────────┘

    A ValidationError stops the request before any store call. A missing id
    becomes NotFoundError. Store failures arrive as StoreError.

NotFound checks come before body validation on PATCH: an unknown id is a
404 whatever the body holds.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from bookmarks_api.exceptions import NotFoundError, ValidationError
from bookmarks_api.services.bookmark_store import BookmarkStore, bookmark_store
from bookmarks_api.services.sanitizer import BookmarkSerializer, serializer
from bookmarks_api.services.validation import (
    BOOKMARK_FIELDS,
    is_present,
    validate_create,
    validate_update,
)

logger = logging.getLogger(__name__)


def merge_update(existing: Mapping[str, Any], payload: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Compute the new persisted field set for a partial update.

    For each of title/url/description/rating a non-null, non-empty value in
    `payload` replaces the existing one; otherwise the existing value stays.
    Keys outside those four are ignored. `id` is never taken from the payload.

        >>> merge_update(
        ...     {"id": 2, "title": "old", "url": "http://a.io", "description": "d", "rating": 3},
        ...     {"title": "new", "id": 99, "extra": "x"},
        ... )
        {'id': 2, 'title': 'new', 'url': 'http://a.io', 'description': 'd', 'rating': 3}
    """
    merged = {"id": existing.get("id")}
    for field in BOOKMARK_FIELDS:
        value = payload.get(field)
        merged[field] = value if is_present(value) else existing.get(field)
    return merged


class BookmarkService:
    """
    Business logic layer for bookmark operations.

    Stateless: store and serializer are injected (module singletons by
    default), the session arrives with every call.
    """

    def __init__(
        self,
        store: BookmarkStore = bookmark_store,
        bookmark_serializer: BookmarkSerializer = serializer,
    ):
        self.store = store
        self.serializer = bookmark_serializer

    async def list_bookmarks(self, db: AsyncSession) -> List[Dict[str, Any]]:
        bookmarks = await self.store.get_all(db)
        return [self.serializer.serialize(b) for b in bookmarks]

    async def get_bookmark(self, db: AsyncSession, bookmark_id: int) -> Dict[str, Any]:
        """
        Raises:
            NotFoundError: no bookmark with this id (→ 404)
        """
        bookmark = await self.store.get_by_id(db, bookmark_id)
        if bookmark is None:
            logger.error("Bookmark with id %s not found.", bookmark_id)
            raise NotFoundError(resource_id=bookmark_id)
        return self.serializer.serialize(bookmark)

    async def create_bookmark(
        self, db: AsyncSession, payload: Optional[Mapping[str, Any]]
    ) -> Dict[str, Any]:
        """
        Validate and insert a new bookmark.

        Returns:
            The serialized bookmark including its store-assigned id.

        Raises:
            ValidationError: first failing check of validate_create (→ 400)
            StoreError: insert failed (→ 500)
        """
        try:
            fields = validate_create(payload or {})
        except ValidationError as e:
            logger.error("Rejected bookmark: %s", e.message)
            raise

        bookmark = await self.store.insert(db, fields)
        logger.info("Bookmark with id %s was created.", bookmark.id)
        return self.serializer.serialize(bookmark)

    async def delete_bookmark(self, db: AsyncSession, bookmark_id: int) -> None:
        deleted = await self.store.delete(db, bookmark_id)
        if not deleted:
            logger.error("Bookmark with id %s not found.", bookmark_id)
            raise NotFoundError(resource_id=bookmark_id)
        logger.info("Bookmark with id %s was deleted.", bookmark_id)

    async def update_bookmark(
        self,
        db: AsyncSession,
        bookmark_id: int,
        payload: Optional[Mapping[str, Any]],
    ) -> None:
        """
        Apply a partial update.

        Steps:
            1. Load the current row (404 if absent)
            2. Validate the supplied fields (400 if nothing usable or a bad value)
            3. Merge onto the current values and write the row once
        """
        existing = await self.store.get_by_id(db, bookmark_id)
        if existing is None:
            logger.error("Bookmark with id %s not found.", bookmark_id)
            raise NotFoundError(resource_id=bookmark_id)

        try:
            changes = validate_update(payload)
        except ValidationError as e:
            logger.error("Rejected update of bookmark %s: %s", bookmark_id, e.message)
            raise

        merged = merge_update(existing.to_dict(), changes)
        updated = await self.store.update(db, bookmark_id, merged)
        if not updated:
            # Deleted between the read and the write
            logger.error("Bookmark with id %s not found.", bookmark_id)
            raise NotFoundError(resource_id=bookmark_id)

        logger.info("Bookmark with id %s was updated.", bookmark_id)


# ── Singleton Instance ────────────────────────────────────────────────────
bookmark_service = BookmarkService()
