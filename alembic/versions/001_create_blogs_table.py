"""Create blogs table

Revision ID: 001
Revises: None
Create Date: 2026-10-19 00:00:00.000000+00:00

What:  Creates the `blogs` table holding every blog entry.
How:   Internal integer key plus a unique UUID public identifier.

Rollback: downgrade() drops the table entirely (all data lost).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the blogs table. Column docs live in bloglist/models/blog.py."""
    op.create_table(
        "blogs",

        sa.Column(
            "pk",
            sa.Integer(),
            autoincrement=True,
            nullable=False,
            comment="Internal storage key (never exposed)",
        ),
        sa.Column(
            "public_id",
            sa.Uuid(as_uuid=True),
            nullable=False,
            comment="Public identifier returned to clients as `id`",
        ),
        sa.Column("title", sa.Text(), nullable=False, comment="Blog title (non-empty)"),
        sa.Column("author", sa.Text(), nullable=True, comment="Blog author, optional"),
        sa.Column("url", sa.Text(), nullable=False, comment="Blog URL (non-empty)"),
        sa.Column(
            "likes",
            sa.BigInteger(),
            nullable=False,
            server_default=sa.text("0"),
            comment="Like count, 0 when not provided",
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
            comment="When this blog was created (UTC)",
        ),

        sa.PrimaryKeyConstraint("pk"),
        sa.CheckConstraint("likes >= 0", name="ck_blogs_likes_non_negative"),
    )

    op.create_index("ix_blogs_public_id", "blogs", ["public_id"], unique=True)


def downgrade() -> None:
    op.drop_index("ix_blogs_public_id", table_name="blogs")
    op.drop_table("blogs")
