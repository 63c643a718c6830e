"""Case study repository."""

import re
from typing import Annotated, Any
from uuid import UUID

from fastapi import Depends
from sqlalchemy import or_

from sitecms.core.base_model import utcnow
from sitecms.core.dependencies import DBSession
from sitecms.core.exceptions import AlreadyExistsError, NotFoundError, ValidationError
from sitecms.core.logging import get_logger
from sitecms.core.repository import ResourceRepository
from sitecms.modules.case_studies.models import CaseStudy, CaseStudyType
from sitecms.modules.media.models import MediaAsset

logger = get_logger(__name__)

SLUG_RE = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")

SORTABLE_FIELDS = frozenset({"created_at", "updated_at", "published_at", "title", "year"})


class CaseStudyRepository(ResourceRepository[CaseStudy]):
    """Case studies keyed by a unique slug."""

    model = CaseStudy
    required_fields = frozenset({"type", "title", "slug", "problem", "strategy", "outcome"})
    writable_fields = frozenset({
        "type",
        "confidential",
        "title",
        "slug",
        "problem",
        "strategy",
        "outcome",
        "categories",
        "practice_area",
        "year",
        "jurisdiction",
        "featured_image_id",
        "author_id",
        "published",
        "published_at",
    })
    references = {"featured_image_id": MediaAsset}

    def validate(self, fields: dict[str, Any], *, partial: bool) -> list[dict[str, Any]]:
        errors = []

        kind = fields.get("type")
        if kind is not None and kind not in {t.value for t in CaseStudyType}:
            errors.append({"field": "type", "message": f"Unknown case study type: {kind}"})

        slug = fields.get("slug")
        if slug is not None and not SLUG_RE.match(str(slug)):
            errors.append({
                "field": "slug",
                "message": "Slug must contain only lowercase letters, numbers and hyphens",
            })

        year = fields.get("year")
        if year is not None and (not isinstance(year, int) or not 1900 <= year <= 2100):
            errors.append({"field": "year", "message": "Year must be between 1900 and 2100"})

        categories = fields.get("categories")
        if categories is not None and (
            not isinstance(categories, list) or not all(isinstance(c, str) for c in categories)
        ):
            errors.append({"field": "categories", "message": "Must be a list of strings"})

        return errors

    async def _check_slug_available(self, slug: str, exclude_id: UUID | None = None) -> None:
        filters = [CaseStudy.slug == slug]
        if exclude_id is not None:
            filters.append(CaseStudy.id != exclude_id)
        if await self.first(filters=filters) is not None:
            raise AlreadyExistsError("CaseStudy", "slug", slug)

    async def create(self, fields: dict[str, Any]) -> CaseStudy:
        # Entries are published through the publish action only
        fields = {**fields, "published": False, "published_at": None}
        fields.setdefault("categories", [])

        self.check_fields(fields)
        await self._check_slug_available(fields["slug"])

        return await super().create(fields)

    async def update(self, entity_id: UUID, fields: dict[str, Any]) -> CaseStudy:
        case_study = await self.get(entity_id)
        self.check_fields(fields, partial=True)

        new_slug = fields.get("slug")
        if new_slug and new_slug != case_study.slug:
            await self._check_slug_available(new_slug, exclude_id=entity_id)

        return await super().update(entity_id, fields)

    async def set_published(self, entity_id: UUID, publish: bool) -> CaseStudy:
        """Publish or unpublish; ``published_at`` follows the flag."""
        case_study = await self.update(
            entity_id,
            {"published": publish, "published_at": utcnow() if publish else None},
        )
        logger.info(
            "case_study_published" if publish else "case_study_unpublished",
            id=str(entity_id),
            slug=case_study.slug,
        )
        return case_study

    async def search(
        self,
        type: str | None = None,
        published: bool | None = None,
        search: str | None = None,
        sort: str = "created_at",
        ascending: bool = False,
    ) -> list[CaseStudy]:
        """Admin list with filters and a single sort column."""
        if sort not in SORTABLE_FIELDS:
            raise ValidationError(
                f"Cannot sort by '{sort}'",
                errors=[{"field": "sort", "message": f"Allowed: {', '.join(sorted(SORTABLE_FIELDS))}"}],
            )

        filters: list[Any] = []
        if type:
            filters.append(CaseStudy.type == type)
        if published is not None:
            filters.append(CaseStudy.published.is_(published))
        if search:
            search_pattern = f"%{search}%"
            filters.append(
                or_(
                    CaseStudy.title.ilike(search_pattern),
                    CaseStudy.problem.ilike(search_pattern),
                    CaseStudy.strategy.ilike(search_pattern),
                    CaseStudy.outcome.ilike(search_pattern),
                )
            )

        column = getattr(CaseStudy, sort)
        order = column.asc() if ascending else column.desc()
        return await self.list(filters=filters, order_by=[order, CaseStudy.id])

    async def list_published(self, type: str | None = None) -> list[CaseStudy]:
        """Published case studies, newest publication first."""
        filters: list[Any] = [CaseStudy.published.is_(True)]
        if type:
            filters.append(CaseStudy.type == type)
        return await self.list(
            filters=filters,
            order_by=[CaseStudy.published_at.desc(), CaseStudy.created_at.desc()],
        )

    async def get_published_by_slug(self, slug: str) -> CaseStudy:
        """Raises NotFoundError unless a published entry has this slug."""
        case_study = await self.first(
            filters=[CaseStudy.slug == slug, CaseStudy.published.is_(True)],
        )
        if case_study is None:
            raise NotFoundError("CaseStudy", slug)
        return case_study


def get_case_study_repository(db: DBSession) -> CaseStudyRepository:
    return CaseStudyRepository(db)


CaseStudies = Annotated[CaseStudyRepository, Depends(get_case_study_repository)]
