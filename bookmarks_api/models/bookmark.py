"""
Bookmarks API — Bookmark SQLAlchemy Model
==========================================

What:  ORM model representing the `bookmarks` table.
How:   Inherits from the shared DeclarativeBase; Alembic reads this for migrations.
Who:   Used by the store gateway for CRUD operations.

Table Design:
    - Integer autoincrement primary key, assigned by the database on insert
    - title / url / description: TEXT, NOT NULL (non-empty enforced by the validator)
    - rating: INTEGER, NOT NULL, CHECK between 0 and 5

    Field constraints are enforced at write time by the validator; the CHECK
    constraint is a second guard for rows written outside the API.
"""

from sqlalchemy import CheckConstraint, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from bookmarks_api.database import Base


class Bookmark(Base):
    """
    A saved link with a short description and a 0-5 rating.

    Lifecycle:
        1. Created by a validated POST
        2. Any of title/url/description/rating replaced by PATCH
        3. Removed by DELETE (hard delete, no versioning)
    """

    __tablename__ = "bookmarks"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )

    title: Mapped[str] = mapped_column(Text, nullable=False)

    # Syntactically valid absolute URI (checked by services.validation.is_uri)
    url: Mapped[str] = mapped_column(Text, nullable=False)

    # May contain markup; sanitized on output, stored as supplied
    description: Mapped[str] = mapped_column(Text, nullable=False)

    rating: Mapped[int] = mapped_column(Integer, nullable=False)

    __table_args__ = (
        CheckConstraint("rating >= 0 AND rating <= 5", name="ck_bookmarks_rating_range"),
    )

    def to_dict(self) -> dict:
        """Plain mapping of the stored columns, in wire order."""
        return {
            "id": self.id,
            "title": self.title,
            "url": self.url,
            "description": self.description,
            "rating": self.rating,
        }

    def __repr__(self) -> str:
        return f"<Bookmark(id={self.id}, url='{self.url}', rating={self.rating})>"
