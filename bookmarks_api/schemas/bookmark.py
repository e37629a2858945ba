"""
Bookmarks API — Pydantic Request/Response Schemas
==================================================

What:  Pydantic models defining the API contract.
How:   FastAPI uses these models to parse request bodies, serialize responses,
       and generate OpenAPI documentation.

Request models are deliberately loose: every field is optional and untyped
so that presence, rating and URL checks happen in services.validation with
the exact messages and check order clients rely on. Unknown keys are
dropped at parse time and never reach the store.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


# ══════════════════════════════════════════════════════════════════════════
# Request Models — What the client sends
# ══════════════════════════════════════════════════════════════════════════


class BookmarkPayload(BaseModel):
    """
    Body of POST /api/bookmarks and PATCH /api/bookmarks/{id}.

    `rating` is Any because strings like "3" are accepted (loose numeric
    coercion) and non-numeric values must produce the rating message,
    not a schema error.
    """

    model_config = ConfigDict(extra="ignore")

    title: Optional[Any] = Field(default=None, description="Bookmark title")
    url: Optional[Any] = Field(default=None, description="Absolute URI")
    description: Optional[Any] = Field(default=None, description="Free-form description")
    rating: Optional[Any] = Field(default=None, description="Integer between 0 and 5")

    def to_fields(self) -> Dict[str, Any]:
        """The recognized fields as a plain mapping, absent ones as None."""
        return self.model_dump()


# ══════════════════════════════════════════════════════════════════════════
# Response Models — What the API returns
# ══════════════════════════════════════════════════════════════════════════


class BookmarkResponse(BaseModel):
    """Serialized bookmark: title and description are sanitized."""

    id: int = Field(description="Store-assigned identifier")
    title: str = Field(description="Title, HTML-escaped")
    url: str = Field(description="Absolute URI")
    description: str = Field(description="Description, sanitized to an allow-list of tags")
    rating: int = Field(ge=0, le=5, description="Rating between 0 and 5")


class ErrorDetail(BaseModel):
    message: str = Field(description="Human-readable error description")


class ErrorResponse(BaseModel):
    """
    Error body shared by every failing endpoint.

    Example:
        {"error": {"message": "Bookmark not found."}}
    """

    error: ErrorDetail

    @classmethod
    def of(cls, message: str) -> Dict[str, Any]:
        """JSON-ready error body for the given message."""
        return cls(error=ErrorDetail(message=message)).model_dump()


class HealthResponse(BaseModel):
    """Returned by GET /health for monitoring and load balancer probes."""

    status: str = Field(description="Overall service status: healthy or unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
