"""Create site logo, media, case study and AI generation tables.

Revision ID: 001
Revises:
Create Date: 2026-10-19
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def upgrade() -> None:
    # Site logos. No uniqueness on "active": activation clears the others first.
    op.create_table(
        "site_logos",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("url", sa.String(1000), nullable=False),
        sa.Column("alt", sa.String(255), nullable=False),
        sa.Column("width", sa.Integer(), nullable=True),
        sa.Column("height", sa.Integer(), nullable=True),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
    )
    op.create_index("ix_site_logos_active", "site_logos", ["active"])
    op.create_index("ix_site_logos_created_at", "site_logos", ["created_at"])

    # Media library
    op.create_table(
        "media_assets",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("filename", sa.String(255), nullable=False),
        sa.Column("mime_type", sa.String(100), nullable=False),
        sa.Column("file_size", sa.BigInteger(), nullable=False),
        sa.Column("s3_key", sa.String(500), nullable=False),
        sa.Column("url", sa.String(1000), nullable=False),
        sa.Column("width", sa.Integer(), nullable=True),
        sa.Column("height", sa.Integer(), nullable=True),
        sa.Column("alt_text", sa.String(500), nullable=True),
        sa.Column("folder", sa.String(100), nullable=True),
        sa.Column("uploaded_by", sa.String(255), nullable=True),
        *_timestamps(),
        sa.CheckConstraint("file_size > 0", name="ck_media_assets_size_positive"),
    )
    op.create_index("ix_media_assets_s3_key", "media_assets", ["s3_key"], unique=True)
    op.create_index("ix_media_assets_folder", "media_assets", ["folder"])
    op.create_index("ix_media_assets_created_at", "media_assets", ["created_at"])

    # Case studies
    op.create_table(
        "case_studies",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("type", sa.String(20), nullable=False),
        sa.Column("confidential", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("slug", sa.String(255), nullable=False),
        sa.Column("problem", sa.Text(), nullable=False),
        sa.Column("strategy", sa.Text(), nullable=False),
        sa.Column("outcome", sa.Text(), nullable=False),
        sa.Column("categories", sa.JSON(), nullable=False, server_default=sa.text("'[]'")),
        sa.Column("practice_area", sa.String(255), nullable=True),
        sa.Column("year", sa.Integer(), nullable=True),
        sa.Column("jurisdiction", sa.String(255), nullable=True),
        sa.Column(
            "featured_image_id",
            sa.Uuid(),
            sa.ForeignKey("media_assets.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("author_id", sa.String(255), nullable=True),
        sa.Column("published", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("published_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.CheckConstraint(
            "type IN ('LITIGATION', 'ARBITRATION', 'ADVISORY', 'VENTURE')",
            name="ck_case_studies_type",
        ),
        sa.CheckConstraint(
            "year IS NULL OR (year >= 1900 AND year <= 2100)",
            name="ck_case_studies_year_range",
        ),
    )
    op.create_index("ix_case_studies_slug", "case_studies", ["slug"], unique=True)
    op.create_index("ix_case_studies_type", "case_studies", ["type"])
    op.create_index("ix_case_studies_published", "case_studies", ["published"])
    op.create_index("ix_case_studies_created_at", "case_studies", ["created_at"])

    # Content assistant call log
    op.create_table(
        "ai_generations",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("kind", sa.String(20), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="PROCESSING"),
        sa.Column("prompt", sa.Text(), nullable=False),
        sa.Column("output", sa.Text(), nullable=True),
        sa.Column("error", sa.Text(), nullable=True),
        sa.Column("duration_ms", sa.Integer(), nullable=True),
        sa.Column("tokens_used", sa.Integer(), nullable=True),
        sa.Column("requested_by", sa.String(255), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_ai_generations_kind", "ai_generations", ["kind"])
    op.create_index("ix_ai_generations_status", "ai_generations", ["status"])
    op.create_index("ix_ai_generations_created_at", "ai_generations", ["created_at"])


def downgrade() -> None:
    op.drop_table("ai_generations")
    op.drop_table("case_studies")
    op.drop_table("media_assets")
    op.drop_table("site_logos")
