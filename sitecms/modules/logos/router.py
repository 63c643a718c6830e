"""Site logo routes: admin management and the public current-logo read."""

from uuid import UUID

from fastapi import APIRouter, Depends, status

from sitecms.core.exceptions import StoreError
from sitecms.core.logging import get_logger
from sitecms.core.schemas import SuccessResponse
from sitecms.core.security import require_admin
from sitecms.modules.logos.schemas import (
    SiteLogoCreate,
    SiteLogoEnvelope,
    SiteLogoListResponse,
    SiteLogoResponse,
    SiteLogoUpdate,
)
from sitecms.modules.logos.service import LogoRepository

logger = get_logger(__name__)

router = APIRouter()


def _envelope(logo) -> SiteLogoEnvelope:
    return SiteLogoEnvelope(logo=SiteLogoResponse.model_validate(logo) if logo else None)


# ============================================================================
# Public Routes
# ============================================================================


@router.get(
    "/site-logo",
    response_model=SiteLogoEnvelope,
    summary="Get current site logo",
    tags=["Public - Site"],
)
async def get_site_logo_public(repo: LogoRepository) -> SiteLogoEnvelope:
    """Current logo for the public header.

    Answers ``{"logo": null}`` instead of an error so pages can fall back
    to their default branding.
    """
    try:
        logo = await repo.get_current()
    except StoreError:
        logger.warning("public_site_logo_unavailable")
        return SiteLogoEnvelope(logo=None)

    return _envelope(logo)


# ============================================================================
# Admin Routes
# ============================================================================


@router.get(
    "/admin/site-logo",
    response_model=SiteLogoEnvelope,
    summary="Get current site logo (admin)",
    tags=["Admin - Site Logo"],
    dependencies=[Depends(require_admin)],
)
async def get_site_logo_admin(repo: LogoRepository) -> SiteLogoEnvelope:
    """Most recently created active logo."""
    return _envelope(await repo.get_current())


@router.get(
    "/admin/site-logo/all",
    response_model=SiteLogoListResponse,
    summary="List logos",
    tags=["Admin - Site Logo"],
    dependencies=[Depends(require_admin)],
)
async def list_site_logos(repo: LogoRepository) -> SiteLogoListResponse:
    """All logos, newest first."""
    logos = await repo.list()
    return SiteLogoListResponse(
        items=[SiteLogoResponse.model_validate(logo) for logo in logos],
        total=len(logos),
    )


@router.post(
    "/admin/site-logo",
    response_model=SiteLogoEnvelope,
    status_code=status.HTTP_201_CREATED,
    summary="Create logo",
    tags=["Admin - Site Logo"],
    dependencies=[Depends(require_admin)],
)
async def create_site_logo(data: SiteLogoCreate, repo: LogoRepository) -> SiteLogoEnvelope:
    """Register a new logo. Active by default, which retires the previous one."""
    logo = await repo.create(data.model_dump())
    return _envelope(logo)


@router.patch(
    "/admin/site-logo/{logo_id}",
    response_model=SiteLogoEnvelope,
    summary="Update logo",
    tags=["Admin - Site Logo"],
    dependencies=[Depends(require_admin)],
)
async def update_site_logo(
    logo_id: UUID,
    data: SiteLogoUpdate,
    repo: LogoRepository,
) -> SiteLogoEnvelope:
    """Update alt text, size, url or active flag."""
    logo = await repo.update(logo_id, data.model_dump(exclude_unset=True))
    return _envelope(logo)


@router.delete(
    "/admin/site-logo/{logo_id}",
    response_model=SuccessResponse,
    summary="Delete logo",
    tags=["Admin - Site Logo"],
    dependencies=[Depends(require_admin)],
)
async def delete_site_logo(logo_id: UUID, repo: LogoRepository) -> SuccessResponse:
    """Hard delete a logo."""
    await repo.delete(logo_id)
    return SuccessResponse()
