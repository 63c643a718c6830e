"""Blog post database model."""

from datetime import datetime
from enum import Enum
from uuid import UUID

from sqlalchemy import DateTime, ForeignKey, Index, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from sitecms.core.base_model import Base, TimestampMixin, UUIDMixin


class PostStatus(str, Enum):
    DRAFT = "DRAFT"
    PUBLISHED = "PUBLISHED"


class Post(Base, UUIDMixin, TimestampMixin):
    """Article written in one locale; the slug is unique within it."""

    __tablename__ = "posts"

    locale: Mapped[str] = mapped_column(String(5), default="en", nullable=False)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    slug: Mapped[str] = mapped_column(String(100), nullable=False)
    excerpt: Mapped[str | None] = mapped_column(String(500), nullable=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)

    status: Mapped[str] = mapped_column(
        String(20), default=PostStatus.DRAFT.value, nullable=False, index=True
    )
    published_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    featured_image_id: Mapped[UUID | None] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("media_assets.id", ondelete="SET NULL"),
        nullable=True,
    )
    author_id: Mapped[str | None] = mapped_column(String(255), nullable=True)

    __table_args__ = (
        Index("ix_posts_locale_slug", "locale", "slug", unique=True),
    )

    @property
    def is_published(self) -> bool:
        return self.status == PostStatus.PUBLISHED.value

    def __repr__(self) -> str:
        return f"<Post {self.locale}/{self.slug}>"
