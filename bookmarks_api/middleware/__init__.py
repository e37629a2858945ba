# Middleware package init
"""
Bookmarks API — Middleware Package
===================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (order matters):
    Request → [Rate Limit] → [Request ID] → [Logging] → [CORS] → Route Handler

    Responses travel back through the same chain in reverse, so the request
    ID header is set on every response and the access log sees the final
    status code and duration.
"""
