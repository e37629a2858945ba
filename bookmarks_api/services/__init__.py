# Services package init
"""
Bookmarks API — Services Layer
===============================

What:  Business logic between routes (HTTP) and the database.

Service Inventory:
    - validation:        create/update payload rules (pure functions)
    - sanitizer:         BookmarkSerializer, output escaping by policy
    - bookmark_store:    BookmarkStore, single-table gateway
    - bookmark_service:  BookmarkService, validate → store → sanitize per operation
"""
