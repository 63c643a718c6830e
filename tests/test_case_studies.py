"""Tests for case study endpoints."""

from uuid import uuid4

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from tests.fixtures import CaseStudyFactory, MediaAssetFactory, PublishedCaseStudyFactory
from tests.fixtures.gates import TEST_ADMIN


def case_study_payload(**overrides) -> dict:
    return {
        "type": "ARBITRATION",
        "title": "Construction dispute before the DIAC",
        "slug": "construction-dispute-diac",
        "problem": "A contractor faced liquidated damages claims.",
        "strategy": "Delay analysis and counterclaims.",
        "outcome": "Claims dismissed, costs awarded.",
        "categories": ["Construction", "Arbitration"],
        "year": 2023,
        "jurisdiction": "Dubai",
        **overrides,
    }


@pytest.mark.asyncio
async def test_create_case_study(admin_client: AsyncClient) -> None:
    response = await admin_client.post("/api/admin/case-studies", json=case_study_payload())

    assert response.status_code == 201
    data = response.json()
    assert data["slug"] == "construction-dispute-diac"
    assert data["published"] is False
    assert data["published_at"] is None
    assert data["author_id"] == TEST_ADMIN.user_id
    assert data["categories"] == ["Construction", "Arbitration"]


@pytest.mark.asyncio
async def test_duplicate_slug_returns_409(admin_client: AsyncClient) -> None:
    await admin_client.post("/api/admin/case-studies", json=case_study_payload())

    response = await admin_client.post(
        "/api/admin/case-studies",
        json=case_study_payload(title="Another title"),
    )

    assert response.status_code == 409
    assert response.json()["field"] == "slug"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "overrides",
    [
        {"slug": "Not A Slug"},
        {"type": "CRIMINAL"},
        {"year": 1850},
        {"problem": ""},
    ],
)
async def test_invalid_case_study_returns_400(admin_client: AsyncClient, overrides: dict) -> None:
    response = await admin_client.post(
        "/api/admin/case-studies",
        json=case_study_payload(**overrides),
    )

    assert response.status_code == 400
    assert response.json()["type"].endswith("validation_error")


@pytest.mark.asyncio
async def test_update_slug_conflict_returns_409(
    admin_client: AsyncClient, db_session: AsyncSession
) -> None:
    first = CaseStudyFactory(slug="first-case")
    second = CaseStudyFactory(slug="second-case")
    db_session.add_all([first, second])
    await db_session.commit()

    response = await admin_client.put(
        f"/api/admin/case-studies/{second.id}",
        json={"slug": "first-case"},
    )

    assert response.status_code == 409


@pytest.mark.asyncio
async def test_update_keeps_own_slug(admin_client: AsyncClient, db_session: AsyncSession) -> None:
    case_study = CaseStudyFactory(slug="own-slug")
    db_session.add(case_study)
    await db_session.commit()

    response = await admin_client.put(
        f"/api/admin/case-studies/{case_study.id}",
        json={"slug": "own-slug", "title": "Renamed"},
    )

    assert response.status_code == 200
    assert response.json()["title"] == "Renamed"


@pytest.mark.asyncio
@pytest.mark.parametrize("field", ["confidential", "categories"])
async def test_update_rejects_null_for_required_columns(
    admin_client: AsyncClient, db_session: AsyncSession, field: str
) -> None:
    case_study = CaseStudyFactory()
    db_session.add(case_study)
    await db_session.commit()

    response = await admin_client.put(
        f"/api/admin/case-studies/{case_study.id}",
        json={field: None},
    )

    assert response.status_code == 400
    assert {"field": field, "message": "Field cannot be null"} in response.json()["errors"]

    response = await admin_client.get("/api/admin/case-studies")
    assert response.status_code == 200
    assert response.json()["items"][0][field] == getattr(case_study, field)


@pytest.mark.asyncio
async def test_unknown_featured_image_returns_400(admin_client: AsyncClient) -> None:
    response = await admin_client.post(
        "/api/admin/case-studies",
        json=case_study_payload(featured_image_id=str(uuid4())),
    )

    assert response.status_code == 400
    assert response.json()["errors"] == [
        {"field": "featured_image_id", "message": "MediaAsset not found"}
    ]

    response = await admin_client.get("/api/admin/case-studies")
    assert response.json()["total"] == 0


@pytest.mark.asyncio
async def test_featured_image_must_exist_on_update(
    admin_client: AsyncClient, db_session: AsyncSession
) -> None:
    image = MediaAssetFactory()
    case_study = CaseStudyFactory()
    db_session.add_all([image, case_study])
    await db_session.commit()

    response = await admin_client.put(
        f"/api/admin/case-studies/{case_study.id}",
        json={"featured_image_id": str(uuid4())},
    )
    assert response.status_code == 400

    response = await admin_client.put(
        f"/api/admin/case-studies/{case_study.id}",
        json={"featured_image_id": str(image.id)},
    )
    assert response.status_code == 200
    assert response.json()["featured_image_id"] == str(image.id)


@pytest.mark.asyncio
async def test_publish_and_unpublish(admin_client: AsyncClient) -> None:
    created = (
        await admin_client.post("/api/admin/case-studies", json=case_study_payload())
    ).json()

    response = await admin_client.post(
        f"/api/admin/case-studies/{created['id']}/publish",
        json={"publish": True},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["published"] is True
    assert data["published_at"] is not None
    assert data["message"] == "Case study published successfully"

    response = await admin_client.post(
        f"/api/admin/case-studies/{created['id']}/publish",
        json={"publish": False},
    )
    data = response.json()
    assert data["published"] is False
    assert data["published_at"] is None
    assert data["message"] == "Case study unpublished"


@pytest.mark.asyncio
async def test_publish_missing_case_study_returns_404(admin_client: AsyncClient) -> None:
    response = await admin_client.post(
        f"/api/admin/case-studies/{uuid4()}/publish",
        json={"publish": True},
    )

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_admin_list_filters(admin_client: AsyncClient, db_session: AsyncSession) -> None:
    db_session.add_all([
        CaseStudyFactory(type="LITIGATION", title="Shareholder claim"),
        PublishedCaseStudyFactory(type="ARBITRATION", title="Port concession arbitration"),
        CaseStudyFactory(type="VENTURE", title="Seed round for a fintech"),
    ])
    await db_session.commit()

    response = await admin_client.get("/api/admin/case-studies")
    assert response.json()["total"] == 3

    response = await admin_client.get("/api/admin/case-studies", params={"type": "LITIGATION"})
    assert [c["title"] for c in response.json()["items"]] == ["Shareholder claim"]

    response = await admin_client.get("/api/admin/case-studies", params={"published": "true"})
    assert [c["title"] for c in response.json()["items"]] == ["Port concession arbitration"]

    response = await admin_client.get("/api/admin/case-studies", params={"search": "fintech"})
    assert [c["title"] for c in response.json()["items"]] == ["Seed round for a fintech"]


@pytest.mark.asyncio
async def test_admin_list_sorting(admin_client: AsyncClient, db_session: AsyncSession) -> None:
    db_session.add_all([
        CaseStudyFactory(title="Beta"),
        CaseStudyFactory(title="Alpha"),
        CaseStudyFactory(title="Gamma"),
    ])
    await db_session.commit()

    response = await admin_client.get(
        "/api/admin/case-studies", params={"sort": "title", "order": "asc"}
    )

    assert [c["title"] for c in response.json()["items"]] == ["Alpha", "Beta", "Gamma"]


@pytest.mark.asyncio
async def test_admin_list_rejects_unknown_sort(admin_client: AsyncClient) -> None:
    response = await admin_client.get("/api/admin/case-studies", params={"sort": "password"})

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_delete_case_study(admin_client: AsyncClient, db_session: AsyncSession) -> None:
    case_study = CaseStudyFactory()
    db_session.add(case_study)
    await db_session.commit()

    response = await admin_client.delete(f"/api/admin/case-studies/{case_study.id}")
    assert response.json() == {"success": True}

    response = await admin_client.get(f"/api/admin/case-studies/{case_study.id}")
    assert response.status_code == 404


# ============================================================================
# Public
# ============================================================================


@pytest.mark.asyncio
async def test_public_list_only_published(client: AsyncClient, db_session: AsyncSession) -> None:
    db_session.add_all([
        PublishedCaseStudyFactory(slug="public-one", type="ADVISORY"),
        PublishedCaseStudyFactory(slug="public-two", type="LITIGATION"),
        CaseStudyFactory(slug="draft-one"),
    ])
    await db_session.commit()

    response = await client.get("/api/public/case-studies")

    assert response.status_code == 200
    slugs = {c["slug"] for c in response.json()["items"]}
    assert slugs == {"public-one", "public-two"}
    assert "author_id" not in response.json()["items"][0]

    response = await client.get("/api/public/case-studies", params={"type": "ADVISORY"})
    assert [c["slug"] for c in response.json()["items"]] == ["public-one"]


@pytest.mark.asyncio
async def test_public_get_by_slug(client: AsyncClient, db_session: AsyncSession) -> None:
    db_session.add_all([
        PublishedCaseStudyFactory(slug="visible"),
        CaseStudyFactory(slug="hidden"),
    ])
    await db_session.commit()

    response = await client.get("/api/public/case-studies/visible")
    assert response.status_code == 200
    assert response.json()["slug"] == "visible"

    response = await client.get("/api/public/case-studies/hidden")
    assert response.status_code == 404
