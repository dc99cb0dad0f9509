"""Create category and book tables."""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa


revision = "20260301_01"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "category",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("name", sa.String(length=128), nullable=False),
        sa.Column("slug", sa.String(length=128), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
    )
    op.create_index("ix_category_slug", "category", ["slug"], unique=True)

    op.create_table(
        "book",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("author", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text()),
        sa.Column(
            "category_id",
            sa.String(length=36),
            sa.ForeignKey("category.id"),
            nullable=False,
        ),
        sa.Column(
            "is_downloadable", sa.Boolean(), nullable=False, server_default=sa.text("FALSE")
        ),
        sa.Column("file_key", sa.String(length=255), nullable=False),
        sa.Column("cover_key", sa.String(length=255)),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
    )
    op.create_index("ix_book_title", "book", ["title"])
    op.create_index("ix_book_author", "book", ["author"])
    op.create_index("ix_book_category_id", "book", ["category_id"])


def downgrade() -> None:
    op.drop_index("ix_book_category_id", table_name="book")
    op.drop_index("ix_book_author", table_name="book")
    op.drop_index("ix_book_title", table_name="book")
    op.drop_table("book")
    op.drop_index("ix_category_slug", table_name="category")
    op.drop_table("category")
