"""Content assistant routes."""

from fastapi import APIRouter, Depends, Query

from sitecms.core.dependencies import Limit
from sitecms.core.exceptions import ValidationError
from sitecms.core.logging import get_logger
from sitecms.core.security import CurrentAdmin, require_admin
from sitecms.modules.assistant.adapter import (
    AssistantKind,
    AssistantTask,
    parse_facts,
    parse_metadata,
)
from sitecms.modules.assistant.schemas import (
    AIGenerationListResponse,
    AIGenerationResponse,
    ExtractUrlRequest,
    ExtractUrlResponse,
    Fact,
    FactApproveResponse,
    FactsRequest,
    FactsResponse,
    GenerateRequest,
    GenerateResponse,
    PageMetadata,
    TranslateRequest,
    TranslateResponse,
)
from sitecms.modules.assistant.service import Assistant, GenerationRepository, Generations

logger = get_logger(__name__)

router = APIRouter(prefix="/admin/ai", tags=["Admin - AI"])


@router.post(
    "/generate",
    response_model=GenerateResponse,
    summary="Run an assistant task",
    dependencies=[Depends(require_admin)],
)
async def generate(
    data: GenerateRequest,
    generations: Generations,
    admin: CurrentAdmin,
) -> GenerateResponse:
    task = AssistantTask(kind=data.kind, input=data.input, params=data.params)
    result = await generations.run(task, requested_by=admin.user_id)
    return GenerateResponse(
        output=result.output,
        generation_id=result.generation.id,
        duration_ms=result.duration_ms,
    )


@router.post(
    "/translate",
    response_model=TranslateResponse,
    summary="Translate between English and Arabic",
    dependencies=[Depends(require_admin)],
)
async def translate(
    data: TranslateRequest,
    generations: Generations,
    admin: CurrentAdmin,
) -> TranslateResponse:
    task = AssistantTask(
        kind=AssistantKind.TRANSLATE,
        input=data.text,
        params={
            "source": data.source,
            "target": data.target,
            "preserve_formatting": data.preserve_formatting,
        },
    )
    result = await generations.run(task, requested_by=admin.user_id)
    return TranslateResponse(
        translated=result.output,
        source=data.source,
        target=data.target,
        generation_id=result.generation.id,
        duration_ms=result.duration_ms,
    )


@router.post(
    "/extract-url",
    response_model=ExtractUrlResponse,
    summary="Extract metadata from a web page",
    dependencies=[Depends(require_admin)],
)
async def extract_url(
    data: ExtractUrlRequest,
    assistant: Assistant,
    generations: Generations,
    admin: CurrentAdmin,
) -> ExtractUrlResponse:
    """Fetch the page, then ask the assistant to describe it."""
    url = str(data.url)
    page = await assistant.fetch_page(url)
    if not page.text:
        raise ValidationError(
            "Page has no readable text",
            errors=[{"field": "url", "message": "Empty page"}],
        )

    task = AssistantTask(kind=AssistantKind.EXTRACT, input=page.text, params={"target": "metadata"})
    result = await generations.run(task, requested_by=admin.user_id, parse=parse_metadata)

    return ExtractUrlResponse(
        url=url,
        extracted=result.parsed,
        page=PageMetadata.model_validate(page),
        generation_id=result.generation.id,
    )


@router.post(
    "/facts",
    response_model=FactsResponse,
    summary="Extract factual statements for review",
    dependencies=[Depends(require_admin)],
)
async def extract_facts(
    data: FactsRequest,
    generations: Generations,
    admin: CurrentAdmin,
) -> FactsResponse:
    """Facts come back unverified; a reviewer approves them afterwards."""
    task = AssistantTask(kind=AssistantKind.EXTRACT, input=data.content, params={"target": "facts"})
    result = await generations.run(task, requested_by=admin.user_id, parse=parse_facts)

    return FactsResponse(
        facts=[
            Fact(id=f"fact-{index}", statement=statement)
            for index, statement in enumerate(result.parsed, start=1)
        ],
        generation_id=result.generation.id,
    )


@router.post(
    "/facts/approve",
    response_model=FactApproveResponse,
    summary="Approve a fact (stub)",
)
async def approve_fact() -> FactApproveResponse:
    """Placeholder for the fact review workflow.

    Accepts any body (or none), is not gated and performs no approval:
    every call answers ``approved: true``. Nothing is stored.
    """
    logger.info("fact_approve_stub_called")
    return FactApproveResponse()


@router.get(
    "/generations",
    response_model=AIGenerationListResponse,
    summary="List recorded generations",
    dependencies=[Depends(require_admin)],
)
async def list_generations(
    repo: GenerationRepository,
    limit: Limit,
    kind: AssistantKind | None = Query(default=None, description="Filter by kind"),
) -> AIGenerationListResponse:
    generations = await repo.search(kind=kind.value if kind else None, limit=limit.limit)
    return AIGenerationListResponse(
        items=[AIGenerationResponse.model_validate(g) for g in generations],
        total=len(generations),
    )
