"""
Bloglist Backend: Pydantic Request/Response Schemas
====================================================

What:  Pydantic models defining the API contract for blog records.
How:   FastAPI decodes request bodies into BlogCreate, route handlers return
       BlogResponse, and the OpenAPI docs are generated from both.

Schemas are separate from the SQLAlchemy model so the public shape never
carries storage-internal columns (pk, created_at).
"""

from typing import Optional

from pydantic import BaseModel, Field

# Range of the BIGINT likes column (CHECK likes >= 0 in models/blog.py)
LIKES_MAX = 2**63 - 1


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class BlogCreate(BaseModel):
    """
    What:  Candidate blog record as sent by the client in POST /api/blogs.

    Every field is optional at this layer: required-field rules are applied
    by normalize_blog() so that missing and empty values both produce a 400
    ValidationError rather than FastAPI's 422. Unknown keys (including a
    client-supplied `id`) are ignored.

    `likes` is bounded to what the likes column can hold, so out-of-range
    counts fail request decoding (400) instead of failing at insert.
    """
    title: Optional[str] = Field(default=None, description="Blog title (required, non-empty)")
    author: Optional[str] = Field(default=None, description="Blog author")
    url: Optional[str] = Field(default=None, description="Blog URL (required, non-empty)")
    likes: Optional[int] = Field(
        default=None,
        ge=0,
        le=LIKES_MAX,
        description="Like count (defaults to 0)",
    )


class NewBlog(BaseModel):
    """
    What:  A validated, normalized blog record ready for persistence.
    Who:   Produced by normalize_blog(); consumed by BlogRepository.create_blog().
    """
    title: str = Field(min_length=1)
    author: Optional[str] = None
    url: str = Field(min_length=1)
    likes: int = Field(default=0, ge=0, le=LIKES_MAX)


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class BlogResponse(BaseModel):
    """
    What:  Public representation of a persisted blog.
    Who:   Returned by GET /api/blogs (as array items) and POST /api/blogs.

    `id` is the public identifier; `author` is omitted from JSON when absent
    (routes serialize with response_model_exclude_none).
    """
    id: str = Field(description="Unique blog identifier (UUID string)")
    title: str = Field(description="Blog title")
    author: Optional[str] = Field(default=None, description="Blog author, if any")
    url: str = Field(description="Blog URL")
    likes: int = Field(description="Like count")


class ErrorResponse(BaseModel):
    """
    What:  Standardized error response format for all API errors.

    Example:
        {
            "error": "malformatted_id",
            "message": "malformatted id",
            "details": {"id": "0555424424242422"},
            "request_id": "a1b2c3d4"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Health check response showing service and database status."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
