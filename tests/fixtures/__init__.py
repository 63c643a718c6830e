"""Test fixtures and factories."""

from tests.fixtures.factories import (
    AIGenerationFactory,
    CaseStudyFactory,
    MediaAssetFactory,
    PostFactory,
    PublishedCaseStudyFactory,
    PublishedPostFactory,
    SiteLogoFactory,
)

__all__ = [
    "AIGenerationFactory",
    "CaseStudyFactory",
    "MediaAssetFactory",
    "PostFactory",
    "PublishedCaseStudyFactory",
    "PublishedPostFactory",
    "SiteLogoFactory",
]
