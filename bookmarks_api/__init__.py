"""
Bookmarks API — Application Package Initializer
================================================

What: Marks the `bookmarks_api` directory as a Python package.
Who:  Used by uvicorn (`bookmarks_api.main:app`), Alembic and pytest.

Architecture Note:
    The service is a straight request pipeline over one table:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │   Services (validate → store → sanitize)
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
