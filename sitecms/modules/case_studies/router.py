"""Case study routes: admin CRUD and publishing, public published reads."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from sitecms.core.dependencies import Sorting
from sitecms.core.schemas import SuccessResponse
from sitecms.core.security import CurrentAdmin, require_admin
from sitecms.modules.case_studies.models import CaseStudyType
from sitecms.modules.case_studies.schemas import (
    CaseStudyCreate,
    CaseStudyListResponse,
    CaseStudyPublicListResponse,
    CaseStudyPublicResponse,
    CaseStudyPublishRequest,
    CaseStudyPublishResponse,
    CaseStudyResponse,
    CaseStudyUpdate,
)
from sitecms.modules.case_studies.service import CaseStudies

router = APIRouter()


# ============================================================================
# Public Routes
# ============================================================================


@router.get(
    "/public/case-studies",
    response_model=CaseStudyPublicListResponse,
    summary="List published case studies",
    tags=["Public - Case Studies"],
)
async def list_case_studies_public(
    repo: CaseStudies,
    type: CaseStudyType | None = Query(default=None, description="Filter by type"),
) -> CaseStudyPublicListResponse:
    case_studies = await repo.list_published(type=type.value if type else None)
    return CaseStudyPublicListResponse(
        items=[CaseStudyPublicResponse.model_validate(c) for c in case_studies],
        total=len(case_studies),
    )


@router.get(
    "/public/case-studies/{slug}",
    response_model=CaseStudyPublicResponse,
    summary="Get published case study by slug",
    tags=["Public - Case Studies"],
)
async def get_case_study_public(slug: str, repo: CaseStudies) -> CaseStudyPublicResponse:
    case_study = await repo.get_published_by_slug(slug)
    return CaseStudyPublicResponse.model_validate(case_study)


# ============================================================================
# Admin Routes
# ============================================================================


@router.get(
    "/admin/case-studies",
    response_model=CaseStudyListResponse,
    summary="List case studies",
    tags=["Admin - Case Studies"],
    dependencies=[Depends(require_admin)],
)
async def list_case_studies(
    repo: CaseStudies,
    sorting: Sorting,
    type: CaseStudyType | None = Query(default=None, description="Filter by type"),
    published: bool | None = Query(default=None, description="Filter by published flag"),
    search: str | None = Query(default=None, description="Search in title and body"),
) -> CaseStudyListResponse:
    """List all case studies with filters and sorting."""
    case_studies = await repo.search(
        type=type.value if type else None,
        published=published,
        search=search,
        sort=sorting.sort,
        ascending=sorting.is_ascending,
    )
    return CaseStudyListResponse(
        items=[CaseStudyResponse.model_validate(c) for c in case_studies],
        total=len(case_studies),
    )


@router.post(
    "/admin/case-studies",
    response_model=CaseStudyResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create case study",
    tags=["Admin - Case Studies"],
    dependencies=[Depends(require_admin)],
)
async def create_case_study(
    data: CaseStudyCreate,
    repo: CaseStudies,
    admin: CurrentAdmin,
) -> CaseStudyResponse:
    """Create an unpublished case study. The slug must be unique."""
    case_study = await repo.create({**data.model_dump(), "author_id": admin.user_id})
    return CaseStudyResponse.model_validate(case_study)


@router.get(
    "/admin/case-studies/{case_study_id}",
    response_model=CaseStudyResponse,
    summary="Get case study",
    tags=["Admin - Case Studies"],
    dependencies=[Depends(require_admin)],
)
async def get_case_study(case_study_id: UUID, repo: CaseStudies) -> CaseStudyResponse:
    return CaseStudyResponse.model_validate(await repo.get(case_study_id))


@router.put(
    "/admin/case-studies/{case_study_id}",
    response_model=CaseStudyResponse,
    summary="Update case study",
    tags=["Admin - Case Studies"],
    dependencies=[Depends(require_admin)],
)
async def update_case_study(
    case_study_id: UUID,
    data: CaseStudyUpdate,
    repo: CaseStudies,
) -> CaseStudyResponse:
    case_study = await repo.update(case_study_id, data.model_dump(exclude_unset=True))
    return CaseStudyResponse.model_validate(case_study)


@router.delete(
    "/admin/case-studies/{case_study_id}",
    response_model=SuccessResponse,
    summary="Delete case study",
    tags=["Admin - Case Studies"],
    dependencies=[Depends(require_admin)],
)
async def delete_case_study(case_study_id: UUID, repo: CaseStudies) -> SuccessResponse:
    await repo.delete(case_study_id)
    return SuccessResponse()


@router.post(
    "/admin/case-studies/{case_study_id}/publish",
    response_model=CaseStudyPublishResponse,
    summary="Publish or unpublish case study",
    tags=["Admin - Case Studies"],
    dependencies=[Depends(require_admin)],
)
async def publish_case_study(
    case_study_id: UUID,
    data: CaseStudyPublishRequest,
    repo: CaseStudies,
) -> CaseStudyPublishResponse:
    case_study = await repo.set_published(case_study_id, data.publish)
    message = "Case study published successfully" if data.publish else "Case study unpublished"
    return CaseStudyPublishResponse(
        **CaseStudyResponse.model_validate(case_study).model_dump(),
        message=message,
    )
