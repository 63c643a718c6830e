"""Post routes: admin drafting and publishing, SEO check, public reads."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from sitecms.core.dependencies import Limit, Sorting
from sitecms.core.security import CurrentAdmin, require_admin
from sitecms.modules.posts.models import PostStatus
from sitecms.modules.posts.schemas import (
    HeadingStructure,
    Locale,
    PostCheckDetails,
    PostCheckRequest,
    PostCheckResponse,
    PostCreate,
    PostDeleteResponse,
    PostListResponse,
    PostPublicListResponse,
    PostPublicResponse,
    PostPublishResponse,
    PostResponse,
    PostUpdate,
)
from sitecms.modules.posts.seo import check_post
from sitecms.modules.posts.service import Posts

router = APIRouter()


# ============================================================================
# Public Routes
# ============================================================================


@router.get(
    "/public/posts",
    response_model=PostPublicListResponse,
    summary="List latest published posts",
    tags=["Public - Posts"],
)
async def list_posts_public(
    repo: Posts,
    limit: Limit,
    locale: Locale = Query(default="en"),
) -> PostPublicListResponse:
    posts = await repo.list_published(locale=locale, limit=limit.limit)
    return PostPublicListResponse(
        items=[PostPublicResponse.model_validate(p) for p in posts],
        total=len(posts),
    )


@router.get(
    "/public/posts/{slug}",
    response_model=PostPublicResponse,
    summary="Get published post by slug",
    tags=["Public - Posts"],
)
async def get_post_public(
    slug: str,
    repo: Posts,
    locale: Locale = Query(default="en"),
) -> PostPublicResponse:
    return PostPublicResponse.model_validate(await repo.get_published_by_slug(slug, locale))


# ============================================================================
# Admin Routes
# ============================================================================


@router.post(
    "/admin/posts/validate",
    response_model=PostCheckResponse,
    summary="Score a draft for SEO and readability",
    tags=["Admin - Posts"],
    dependencies=[Depends(require_admin)],
)
async def validate_post(data: PostCheckRequest) -> PostCheckResponse:
    """Score draft content without saving it. Errors fail the check."""
    result = check_post(
        title=data.title,
        content=data.content,
        excerpt=data.excerpt,
        has_featured_image=data.featured_image_id is not None,
    )
    return PostCheckResponse(
        passed=result.passed,
        errors=result.errors,
        warnings=result.warnings,
        score=result.score,
        details=PostCheckDetails(
            word_count=result.word_count,
            readability_score=result.readability_score,
            image_count=result.image_count,
            link_count=result.link_count,
            heading_structure=HeadingStructure(**result.headings),
        ),
    )


@router.get(
    "/admin/posts",
    response_model=PostListResponse,
    summary="List posts",
    tags=["Admin - Posts"],
    dependencies=[Depends(require_admin)],
)
async def list_posts(
    repo: Posts,
    sorting: Sorting,
    post_status: PostStatus | None = Query(default=None, alias="status"),
    locale: Locale | None = Query(default=None),
    search: str | None = Query(default=None, description="Search in title and content"),
) -> PostListResponse:
    posts = await repo.search(
        status=post_status.value if post_status else None,
        locale=locale,
        search=search,
        sort=sorting.sort,
        ascending=sorting.is_ascending,
    )
    return PostListResponse(
        items=[PostResponse.model_validate(p) for p in posts],
        total=len(posts),
    )


@router.post(
    "/admin/posts",
    response_model=PostResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create post",
    tags=["Admin - Posts"],
    dependencies=[Depends(require_admin)],
)
async def create_post(data: PostCreate, repo: Posts, admin: CurrentAdmin) -> PostResponse:
    """Create a draft. The slug must be unique within its locale."""
    post = await repo.create({**data.model_dump(), "author_id": admin.user_id})
    return PostResponse.model_validate(post)


@router.get(
    "/admin/posts/{post_id}",
    response_model=PostResponse,
    summary="Get post",
    tags=["Admin - Posts"],
    dependencies=[Depends(require_admin)],
)
async def get_post(post_id: UUID, repo: Posts) -> PostResponse:
    return PostResponse.model_validate(await repo.get(post_id))


@router.put(
    "/admin/posts/{post_id}",
    response_model=PostResponse,
    summary="Update post",
    tags=["Admin - Posts"],
    dependencies=[Depends(require_admin)],
)
async def update_post(post_id: UUID, data: PostUpdate, repo: Posts) -> PostResponse:
    post = await repo.update(post_id, data.model_dump(exclude_unset=True))
    return PostResponse.model_validate(post)


@router.delete(
    "/admin/posts/{post_id}",
    response_model=PostDeleteResponse,
    summary="Delete post",
    tags=["Admin - Posts"],
    dependencies=[Depends(require_admin)],
)
async def delete_post(post_id: UUID, repo: Posts) -> PostDeleteResponse:
    await repo.delete(post_id)
    return PostDeleteResponse()


@router.post(
    "/admin/posts/{post_id}/publish",
    response_model=PostPublishResponse,
    summary="Publish post",
    tags=["Admin - Posts"],
    dependencies=[Depends(require_admin)],
)
async def publish_post(post_id: UUID, repo: Posts) -> PostPublishResponse:
    post = await repo.publish(post_id)
    return PostPublishResponse(
        **PostResponse.model_validate(post).model_dump(),
        message="Post published successfully",
    )
