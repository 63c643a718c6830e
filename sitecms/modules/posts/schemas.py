"""Pydantic schemas for the posts module."""

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from sitecms.modules.case_studies.schemas import SLUG_PATTERN

Locale = Literal["en", "ar"]


class PostCreate(BaseModel):
    """New posts are always drafts."""

    locale: Locale = "en"
    title: str = Field(..., min_length=3, max_length=200)
    slug: str = Field(..., min_length=3, max_length=100, pattern=SLUG_PATTERN)
    excerpt: str | None = Field(default=None, max_length=500)
    content: str = Field(..., min_length=10)
    featured_image_id: UUID | None = None


class PostUpdate(BaseModel):
    locale: Locale | None = None
    title: str | None = Field(default=None, min_length=3, max_length=200)
    slug: str | None = Field(default=None, min_length=3, max_length=100, pattern=SLUG_PATTERN)
    excerpt: str | None = Field(default=None, max_length=500)
    content: str | None = Field(default=None, min_length=10)
    featured_image_id: UUID | None = None


class PostPublicResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    locale: str
    title: str
    slug: str
    excerpt: str | None = None
    content: str
    featured_image_id: UUID | None = None
    published_at: datetime | None = None


class PostResponse(PostPublicResponse):
    """Post as seen in the admin."""

    status: str
    author_id: str | None = None
    created_at: datetime
    updated_at: datetime


class PostPublishResponse(PostResponse):
    message: str


class PostDeleteResponse(BaseModel):
    success: bool = True
    message: str = "Post deleted successfully"


class PostListResponse(BaseModel):
    items: list[PostResponse]
    total: int


class PostPublicListResponse(BaseModel):
    items: list[PostPublicResponse]
    total: int


# ============================================================================
# SEO check
# ============================================================================


class PostCheckRequest(BaseModel):
    """Draft content to score; nothing is stored."""

    title: str
    excerpt: str | None = None
    content: str
    featured_image_id: UUID | None = None
    locale: Locale = "en"


class HeadingStructure(BaseModel):
    h1: int
    h2: int
    h3: int


class PostCheckDetails(BaseModel):
    word_count: int
    readability_score: float
    image_count: int
    link_count: int
    heading_structure: HeadingStructure


class PostCheckResponse(BaseModel):
    passed: bool
    errors: list[str]
    warnings: list[str]
    score: int = Field(..., ge=0, le=100)
    details: PostCheckDetails
