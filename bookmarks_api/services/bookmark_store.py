"""
Bookmarks API — Bookmark Store Gateway
=======================================

What:  The data-access seam between the service layer and the `bookmarks` table.
How:   One SQL statement per operation against the session passed into each
       call. The gateway holds no state and never opens, caches or pools
       connections itself; the session's lifecycle (commit/rollback) belongs
       to database.get_db_session.
Who:   Called by BookmarkService.

Operations:
    get_all(db)                 → list of rows ordered by id
    get_by_id(db, id)           → row or None
    insert(db, fields)          → created row with its store-assigned id
    delete(db, id)              → rows affected (0 or 1)
    update(db, id, fields)      → rows affected (0 or 1)

Error Handling:
    Any SQLAlchemyError is logged and re-raised as StoreError. Nothing is retried.
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import delete, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from bookmarks_api.exceptions import StoreError
from bookmarks_api.models.bookmark import Bookmark
from bookmarks_api.services.validation import BOOKMARK_FIELDS

logger = logging.getLogger(__name__)


def _writable(fields: Dict[str, Any]) -> Dict[str, Any]:
    """Only the mutable bookmark columns; id and unknown keys are dropped."""
    return {name: fields[name] for name in BOOKMARK_FIELDS if name in fields}


class BookmarkStore:
    """Single-table gateway for Bookmark rows."""

    async def get_all(self, db: AsyncSession) -> List[Bookmark]:
        try:
            result = await db.execute(select(Bookmark).order_by(Bookmark.id))
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Database error listing bookmarks: %s", str(e), exc_info=True)
            raise StoreError(
                message="Could not retrieve bookmarks. Please try again.",
                context={"error_type": type(e).__name__},
            )

    async def get_by_id(self, db: AsyncSession, bookmark_id: int) -> Optional[Bookmark]:
        try:
            result = await db.execute(select(Bookmark).where(Bookmark.id == bookmark_id))
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error fetching bookmark %s: %s", bookmark_id, str(e))
            raise StoreError(
                message="Could not retrieve the bookmark. Please try again.",
                context={"bookmark_id": bookmark_id, "error_type": type(e).__name__},
            )

    async def insert(self, db: AsyncSession, fields: Dict[str, Any]) -> Bookmark:
        """
        Insert one row and return it with its generated id.

        flush() sends the INSERT so the id is assigned; the commit happens in
        the session dependency once the request succeeds.
        """
        bookmark = Bookmark(**_writable(fields))
        try:
            db.add(bookmark)
            await db.flush()
            return bookmark
        except SQLAlchemyError as e:
            logger.error("Database error inserting bookmark: %s", str(e), exc_info=True)
            raise StoreError(
                message="Could not save the bookmark. Please try again.",
                context={"error_type": type(e).__name__},
            )

    async def delete(self, db: AsyncSession, bookmark_id: int) -> int:
        try:
            result = await db.execute(delete(Bookmark).where(Bookmark.id == bookmark_id))
        except SQLAlchemyError as e:
            logger.error("Database error deleting bookmark %s: %s", bookmark_id, str(e))
            raise StoreError(
                message="Could not delete the bookmark. Please try again.",
                context={"bookmark_id": bookmark_id, "error_type": type(e).__name__},
            )
        return self._single_row(result.rowcount, "delete", bookmark_id)

    async def update(self, db: AsyncSession, bookmark_id: int, fields: Dict[str, Any]) -> int:
        """
        Write the given columns of one row in a single UPDATE statement.

        Concurrent updates to the same id are last-write-wins.
        """
        values = _writable(fields)
        if not values:
            return 0
        try:
            result = await db.execute(
                update(Bookmark)
                .where(Bookmark.id == bookmark_id)
                .values(**values)
            )
        except SQLAlchemyError as e:
            logger.error("Database error updating bookmark %s: %s", bookmark_id, str(e))
            raise StoreError(
                message="Could not update the bookmark. Please try again.",
                context={"bookmark_id": bookmark_id, "error_type": type(e).__name__},
            )
        return self._single_row(result.rowcount, "update", bookmark_id)

    @staticmethod
    def _single_row(rowcount: int, operation: str, bookmark_id: int) -> int:
        # id is the primary key: anything but 0 or 1 means the store is broken
        if rowcount not in (0, 1):
            logger.error(
                "%s on bookmark %s affected %s rows", operation, bookmark_id, rowcount
            )
            raise StoreError(
                context={"bookmark_id": bookmark_id, "operation": operation, "rowcount": rowcount}
            )
        return rowcount


# ── Singleton Instance ────────────────────────────────────────────────────
bookmark_store = BookmarkStore()
