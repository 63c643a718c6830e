"""Pydantic schemas for the case studies module."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from sitecms.modules.case_studies.models import CaseStudyType

SLUG_PATTERN = r"^[a-z0-9]+(?:-[a-z0-9]+)*$"


class CaseStudyCreate(BaseModel):
    """Schema for creating a case study. New entries start unpublished."""

    model_config = ConfigDict(use_enum_values=True)

    type: CaseStudyType
    title: str = Field(..., min_length=1, max_length=255)
    slug: str = Field(..., min_length=1, max_length=255, pattern=SLUG_PATTERN)
    problem: str = Field(..., min_length=1)
    strategy: str = Field(..., min_length=1)
    outcome: str = Field(..., min_length=1)
    confidential: bool = False
    categories: list[str] = Field(default_factory=list)
    practice_area: str | None = Field(default=None, max_length=255)
    year: int | None = Field(default=None, ge=1900, le=2100)
    jurisdiction: str | None = Field(default=None, max_length=255)
    featured_image_id: UUID | None = None


class CaseStudyUpdate(BaseModel):
    """Schema for updating a case study. Only provided fields change."""

    model_config = ConfigDict(use_enum_values=True)

    type: CaseStudyType | None = None
    title: str | None = Field(default=None, min_length=1, max_length=255)
    slug: str | None = Field(default=None, min_length=1, max_length=255, pattern=SLUG_PATTERN)
    problem: str | None = Field(default=None, min_length=1)
    strategy: str | None = Field(default=None, min_length=1)
    outcome: str | None = Field(default=None, min_length=1)
    confidential: bool | None = None
    categories: list[str] | None = None
    practice_area: str | None = Field(default=None, max_length=255)
    year: int | None = Field(default=None, ge=1900, le=2100)
    jurisdiction: str | None = Field(default=None, max_length=255)
    featured_image_id: UUID | None = None


class CaseStudyPublishRequest(BaseModel):
    """Publish (true) or unpublish (false) a case study."""

    publish: bool


class CaseStudyPublicResponse(BaseModel):
    """Case study as shown on the public site."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    type: str
    confidential: bool
    title: str
    slug: str
    problem: str
    strategy: str
    outcome: str
    categories: list[str]
    practice_area: str | None = None
    year: int | None = None
    jurisdiction: str | None = None
    featured_image_id: UUID | None = None
    published_at: datetime | None = None


class CaseStudyResponse(CaseStudyPublicResponse):
    """Schema for case study response (admin)."""

    author_id: str | None = None
    published: bool
    created_at: datetime
    updated_at: datetime


class CaseStudyPublishResponse(CaseStudyResponse):
    """Case study after a publish/unpublish action."""

    message: str


class CaseStudyListResponse(BaseModel):
    """Schema for admin case study list response."""

    items: list[CaseStudyResponse]
    total: int


class CaseStudyPublicListResponse(BaseModel):
    """Schema for public case study list response."""

    items: list[CaseStudyPublicResponse]
    total: int
