"""Generation tracking around the content assistant."""

import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Annotated, Any

from fastapi import Depends

from sitecms.core.base_model import utcnow
from sitecms.core.dependencies import DBSession
from sitecms.core.exceptions import AppException
from sitecms.core.logging import get_logger
from sitecms.core.repository import ResourceRepository
from sitecms.modules.assistant.adapter import (
    AssistantKind,
    AssistantTask,
    ContentAssistant,
    build_prompt,
    get_content_assistant,
)
from sitecms.modules.assistant.models import AIGeneration, GenerationStatus

logger = get_logger(__name__)


class AIGenerationRepository(ResourceRepository[AIGeneration]):
    model = AIGeneration
    required_fields = frozenset({"kind", "status", "prompt"})
    writable_fields = frozenset({
        "kind",
        "status",
        "prompt",
        "output",
        "error",
        "duration_ms",
        "tokens_used",
        "requested_by",
        "completed_at",
    })

    def validate(self, fields: dict[str, Any], *, partial: bool) -> list[dict[str, Any]]:
        errors = []
        if "kind" in fields and fields["kind"] not in {k.value for k in AssistantKind}:
            errors.append({"field": "kind", "message": "Unknown generation kind"})
        if "status" in fields and fields["status"] not in {s.value for s in GenerationStatus}:
            errors.append({"field": "status", "message": "Unknown generation status"})
        return errors

    async def search(self, kind: str | None = None, limit: int | None = None) -> list[AIGeneration]:
        filters = [AIGeneration.kind == kind] if kind else []
        return await self.list(filters=filters, limit=limit)


def estimate_tokens(prompt: str, output: str) -> int:
    """Rough token count: four characters per token."""
    return (len(prompt) + len(output)) // 4


@dataclass
class GenerationResult:
    generation: AIGeneration
    output: str
    # Output as decoded by the run's parser, or the raw text
    parsed: Any = None

    @property
    def duration_ms(self) -> int:
        return self.generation.duration_ms or 0


class GenerationService:
    """Runs assistant tasks and records each one as an AIGeneration.

    The row is written as PROCESSING before the provider is called and is
    closed as COMPLETED or FAILED afterwards. An optional ``parse`` callable
    decodes the output before the row is closed, so output the caller cannot
    use is recorded as FAILED. Failures are re-raised.
    """

    def __init__(self, repo: AIGenerationRepository, assistant: ContentAssistant) -> None:
        self.repo = repo
        self.assistant = assistant

    async def run(
        self,
        task: AssistantTask,
        requested_by: str | None = None,
        parse: Callable[[str], Any] | None = None,
    ) -> GenerationResult:
        # Invalid parameters are rejected before anything is recorded
        prompt = build_prompt(task)

        generation = await self.repo.create({
            "kind": AssistantKind(task.kind).value,
            "status": GenerationStatus.PROCESSING.value,
            "prompt": prompt.text,
            "requested_by": requested_by,
        })

        started = time.perf_counter()
        output: str | None = None
        try:
            output = await self.assistant.generate(task)
            parsed = parse(output) if parse is not None else output
        except AppException as exc:
            duration_ms = int((time.perf_counter() - started) * 1000)
            await self.repo.update(generation.id, {
                "status": GenerationStatus.FAILED.value,
                "output": output,
                "error": exc.message,
                "duration_ms": duration_ms,
                "completed_at": utcnow(),
            })
            logger.warning(
                "generation_failed",
                generation_id=str(generation.id),
                kind=generation.kind,
                error=exc.message,
            )
            raise

        duration_ms = int((time.perf_counter() - started) * 1000)
        generation = await self.repo.update(generation.id, {
            "status": GenerationStatus.COMPLETED.value,
            "output": output,
            "duration_ms": duration_ms,
            "tokens_used": estimate_tokens(prompt.text, output),
            "completed_at": utcnow(),
        })
        logger.info(
            "generation_completed",
            generation_id=str(generation.id),
            kind=generation.kind,
            duration_ms=duration_ms,
        )
        return GenerationResult(generation=generation, output=output, parsed=parsed)


def get_generation_repository(db: DBSession) -> AIGenerationRepository:
    return AIGenerationRepository(db)


GenerationRepository = Annotated[AIGenerationRepository, Depends(get_generation_repository)]
Assistant = Annotated[ContentAssistant, Depends(get_content_assistant)]


def get_generation_service(
    repo: GenerationRepository,
    assistant: Assistant,
) -> GenerationService:
    return GenerationService(repo, assistant)


Generations = Annotated[GenerationService, Depends(get_generation_service)]
