"""Pydantic schemas for the content assistant module."""

from datetime import datetime
from typing import Any, Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, HttpUrl

from sitecms.modules.assistant.adapter import AssistantKind

Language = Literal["en", "ar"]


class GenerateRequest(BaseModel):
    """Generic assistant call.

    ``params`` depends on ``kind``: tone/length/language/keywords/outline for
    DRAFT, source/target/preserve_formatting for TRANSLATE, target for
    EXTRACT and instructions for IMPROVE.
    """

    kind: AssistantKind
    input: str = Field(..., min_length=1)
    params: dict[str, Any] = Field(default_factory=dict)


class GenerateResponse(BaseModel):
    success: bool = True
    output: str
    generation_id: UUID
    duration_ms: int


class TranslateRequest(BaseModel):
    text: str = Field(..., min_length=1)
    source: Language = "en"
    target: Language = "ar"
    preserve_formatting: bool = True


class TranslateResponse(BaseModel):
    success: bool = True
    translated: str
    source: Language
    target: Language
    generation_id: UUID
    duration_ms: int


class ExtractUrlRequest(BaseModel):
    url: HttpUrl


class PageMetadata(BaseModel):
    """What the page declares about itself, read from its markup."""

    model_config = ConfigDict(from_attributes=True)

    title: str | None = None
    description: str | None = None
    language: str | None = None
    site_name: str | None = None
    image_url: str | None = None
    word_count: int = 0


class ExtractUrlResponse(BaseModel):
    success: bool = True
    url: str
    extracted: dict[str, Any]
    page: PageMetadata
    generation_id: UUID


class FactsRequest(BaseModel):
    content: str = Field(..., min_length=1)


class Fact(BaseModel):
    id: str
    statement: str
    verified: bool = False


class FactsResponse(BaseModel):
    success: bool = True
    facts: list[Fact]
    generation_id: UUID


class FactApproveResponse(BaseModel):
    approved: bool = True
    message: str = "Fact approved successfully"


class AIGenerationResponse(BaseModel):
    """Schema for a recorded generation."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    kind: str
    status: str
    prompt: str
    output: str | None = None
    error: str | None = None
    duration_ms: int | None = None
    tokens_used: int | None = None
    requested_by: str | None = None
    completed_at: datetime | None = None
    created_at: datetime


class AIGenerationListResponse(BaseModel):
    items: list[AIGenerationResponse]
    total: int
