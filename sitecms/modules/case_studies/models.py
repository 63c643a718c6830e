"""Case study database model."""

from datetime import datetime
from enum import Enum
from uuid import UUID

from sqlalchemy import JSON, Boolean, DateTime, ForeignKey, Index, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from sitecms.core.base_model import Base, TimestampMixin, UUIDMixin


class CaseStudyType(str, Enum):
    """Kind of matter a case study describes."""

    LITIGATION = "LITIGATION"
    ARBITRATION = "ARBITRATION"
    ADVISORY = "ADVISORY"
    VENTURE = "VENTURE"


class CaseStudy(Base, UUIDMixin, TimestampMixin):
    """Portfolio entry shown on the public case studies pages."""

    __tablename__ = "case_studies"

    type: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    confidential: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(255), nullable=False)

    problem: Mapped[str] = mapped_column(Text, nullable=False)
    strategy: Mapped[str] = mapped_column(Text, nullable=False)
    outcome: Mapped[str] = mapped_column(Text, nullable=False)

    categories: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    practice_area: Mapped[str | None] = mapped_column(String(255), nullable=True)
    year: Mapped[int | None] = mapped_column(Integer, nullable=True)
    jurisdiction: Mapped[str | None] = mapped_column(String(255), nullable=True)

    featured_image_id: Mapped[UUID | None] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("media_assets.id", ondelete="SET NULL"),
        nullable=True,
    )
    # Subject of the identity-provider account that created the entry
    author_id: Mapped[str | None] = mapped_column(String(255), nullable=True)

    published: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False, index=True)
    published_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        Index("ix_case_studies_slug", "slug", unique=True),
    )

    def __repr__(self) -> str:
        return f"<CaseStudy {self.slug}>"
