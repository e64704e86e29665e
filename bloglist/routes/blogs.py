"""
Bloglist Backend: Blog Route Handlers
======================================

What:  GET /api/blogs (list), POST /api/blogs (create), DELETE /api/blogs/{id}.
How:   Decodes the request, runs validation and the repository, returns JSON.
Who:   Called by the bloglist frontend and any HTTP client.

Routes stay thin: required-field rules live in services/validation.py and
all storage access in services/blog_repository.py. Errors propagate to the
global handlers in main.py.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from bloglist.database import get_db_session
from bloglist.schemas.blog import BlogCreate, BlogResponse, ErrorResponse
from bloglist.services.blog_repository import blog_repository
from bloglist.services.validation import normalize_blog

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Blogs"])


@router.get(
    "/blogs",
    response_model=List[BlogResponse],
    response_model_exclude_none=True,
    responses={
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="List all blogs",
)
async def list_blogs(
    db: AsyncSession = Depends(get_db_session),
) -> List[BlogResponse]:
    """Every stored blog, in insertion order. No pagination."""
    return await blog_repository.list_blogs(db)


@router.post(
    "/blogs",
    status_code=201,
    response_model=BlogResponse,
    response_model_exclude_none=True,
    responses={
        201: {"description": "Blog created", "model": BlogResponse},
        400: {"description": "Missing or empty title/url", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Create a blog",
    description=(
        "Creates a blog from a JSON body. `title` and `url` are required and must be "
        "non-empty; `likes` defaults to 0; `author` is optional."
    ),
)
async def create_blog(
    payload: BlogCreate,
    db: AsyncSession = Depends(get_db_session),
) -> BlogResponse:
    new_blog = normalize_blog(payload)
    return await blog_repository.create_blog(db, new_blog)


@router.delete(
    "/blogs/{blog_id}",
    status_code=204,
    response_class=Response,
    responses={
        204: {"description": "Blog deleted (or did not exist)"},
        400: {"description": "Malformed id", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Delete a blog",
)
async def delete_blog(
    blog_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    """
    Delete a blog by its public id.

    blog_id is taken as a plain string (not UUID) so a malformed value is
    reported as 400 malformatted_id by the repository, not as FastAPI's 422.
    """
    await blog_repository.delete_blog(db, blog_id)
    return Response(status_code=204)
