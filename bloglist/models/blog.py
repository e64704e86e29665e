"""
Bloglist Backend: Blog SQLAlchemy Model
========================================

What:  ORM model representing the `blogs` table.
How:   Inherits from the shared DeclarativeBase; Alembic reads this for migrations.
Who:   Used by BlogRepository for list/create/delete and by Alembic.

Table Design:
    - pk:         Internal autoincrement key. Defines insertion order and is
                  never exposed outside the repository.
    - public_id:  UUID handed to clients as `id`. Unique, assigned on insert.
    - title, url: Required, non-empty (enforced before insert).
    - author:     Optional.
    - likes:      Always present; 0 when the client did not send one.
                  64-bit, non-negative (LIKES_MAX in schemas/blog.py mirrors it).
    - created_at: UTC insert timestamp (internal bookkeeping only).

Column types are the dialect-neutral SQLAlchemy ones (Uuid, DateTime) so the
same model runs on PostgreSQL in deployment and SQLite in tests.
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import BigInteger, CheckConstraint, DateTime, Integer, Text, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column

from bloglist.database import Base


class Blog(Base):
    """
    A persisted blog entry.

    Lifecycle:
        1. Inserted by BlogRepository.create_blog() with a fresh public_id
        2. Read through BlogRepository.list_blogs() (ordered by pk)
        3. Removed by BlogRepository.delete_blog(); never updated in between
    """

    __tablename__ = "blogs"

    # ── Keys ──────────────────────────────────────────────────────────────
    pk: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
        comment="Internal storage key (never exposed)",
    )

    public_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        nullable=False,
        unique=True,
        index=True,
        default=uuid.uuid4,
        comment="Public identifier returned to clients as `id`",
    )

    # ── Content ───────────────────────────────────────────────────────────
    title: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Blog title (non-empty)",
    )

    author: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        default=None,
        comment="Blog author, optional",
    )

    url: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Blog URL (non-empty)",
    )

    likes: Mapped[int] = mapped_column(
        BigInteger,
        nullable=False,
        default=0,
        server_default=text("0"),
        comment="Like count, 0 when not provided",
    )

    # ── Timestamps ────────────────────────────────────────────────────────
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
        comment="When this blog was created (UTC)",
    )

    __table_args__ = (
        CheckConstraint("likes >= 0", name="ck_blogs_likes_non_negative"),
    )

    def __repr__(self) -> str:
        return f"<Blog(pk={self.pk}, public_id={self.public_id}, title='{self.title}')>"
