# Routes package init
"""
Bookmarks API — Routes Package
===============================

Route Inventory:
    - bookmarks.py:  GET/POST   /api/bookmarks
                     GET/PATCH/DELETE /api/bookmarks/{id}
    - health.py:     GET /health

Routes are thin: extract request data, call BookmarkService, pick the
status code and headers.
"""
