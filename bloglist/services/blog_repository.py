"""
Bloglist Backend: Blog Record Repository
=========================================

What:  Maps validated blog records to rows in the `blogs` table and back.
How:   Async SQLAlchemy queries against a session passed in on every call.
Who:   Called by the /api/blogs route handlers.
When:  Once per list, create or delete request.

Identifier Mapping:
    Rows carry an internal integer `pk` and a UUID `public_id`. Every value
    leaving this module goes through to_response(), which exposes only
    `id` (the public_id as a string). Incoming ids are parsed with
    parse_blog_id() before they reach a query.

Error Handling:
    Writes commit inside the repository. SQLAlchemy errors, commit
    failures included, are wrapped in PersistenceError (→ 500); nothing is
    retried. A malformed id raises MalformedIdentifierError (→ 400) before
    any query runs.
"""

import logging
import uuid
from typing import List

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from bloglist.exceptions import MalformedIdentifierError, PersistenceError
from bloglist.models.blog import Blog
from bloglist.schemas.blog import BlogResponse, NewBlog

logger = logging.getLogger(__name__)


def parse_blog_id(blog_id: str) -> uuid.UUID:
    """
    Convert a public identifier into the storage UUID.

    Raises:
        MalformedIdentifierError: blog_id is not a UUID string
    """
    try:
        return uuid.UUID(str(blog_id))
    except (ValueError, AttributeError, TypeError):
        raise MalformedIdentifierError(identifier=str(blog_id)) from None


def to_response(blog: Blog) -> BlogResponse:
    """Row → public shape. The internal pk never crosses this boundary."""
    return BlogResponse(
        id=str(blog.public_id),
        title=blog.title,
        author=blog.author,
        url=blog.url,
        likes=blog.likes,
    )


class BlogRepository:
    """
    Persistence operations for blogs.

    Stateless: the session is an argument of every method, so the same
    instance serves every request and tests can pass any session they like.
    """

    async def list_blogs(self, db: AsyncSession) -> List[BlogResponse]:
        """
        Return every stored blog in insertion order.

        Returns:
            List of BlogResponse (empty when the store is empty)

        Raises:
            PersistenceError: Query execution failed
        """
        try:
            result = await db.execute(select(Blog).order_by(Blog.pk))
            blogs = list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Database error listing blogs: %s", str(e), exc_info=True)
            raise PersistenceError(
                message="Could not retrieve blogs. Please try again.",
                context={"error_type": type(e).__name__},
            ) from e

        return [to_response(blog) for blog in blogs]

    async def create_blog(self, db: AsyncSession, new_blog: NewBlog) -> BlogResponse:
        """
        Insert a normalized blog and return it with its new public id.

        The insert is committed here, so the 201 is only sent for a stored
        row and a failed commit surfaces as PersistenceError.

        Raises:
            PersistenceError: Insert failed
        """
        blog = Blog(
            public_id=uuid.uuid4(),
            title=new_blog.title,
            author=new_blog.author,
            url=new_blog.url,
            likes=new_blog.likes,
        )
        try:
            db.add(blog)
            await db.flush()
            await db.commit()
        except SQLAlchemyError as e:
            logger.error("Database error creating blog: %s", str(e), exc_info=True)
            raise PersistenceError(
                message="Could not save the blog. Please try again.",
                context={"error_type": type(e).__name__},
            ) from e

        logger.info("Blog created: %s", blog.public_id)
        return to_response(blog)

    async def delete_blog(self, db: AsyncSession, blog_id: str) -> None:
        """
        Delete the blog with the given public id, if it exists.

        Deleting a well-formed id that matches nothing is a silent no-op.

        Raises:
            MalformedIdentifierError: blog_id is not a valid identifier
            PersistenceError: Delete failed
        """
        public_id = parse_blog_id(blog_id)

        try:
            result = await db.execute(delete(Blog).where(Blog.public_id == public_id))
            await db.commit()
        except SQLAlchemyError as e:
            logger.error("Database error deleting blog %s: %s", blog_id, str(e), exc_info=True)
            raise PersistenceError(
                message="Could not delete the blog. Please try again.",
                context={"id": blog_id, "error_type": type(e).__name__},
            ) from e

        if result.rowcount:
            logger.info("Blog deleted: %s", public_id)
        else:
            logger.debug("Delete of unknown blog %s absorbed", public_id)


# ── Singleton Instance ────────────────────────────────────────────────────
blog_repository = BlogRepository()
