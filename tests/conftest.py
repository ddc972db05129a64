"""Shared fixtures for the face identity tests."""
import pytest

from face_identity.core.config import Settings
from face_identity.infrastructure.label_store import InMemoryLabelStore
from face_identity.services import (
    CosineSimilarityMetric,
    HierarchicalClusterer,
    IdentityResolver,
    PersonIdentityStore,
    PersonSearchService,
    SimilarityMatrixBuilder,
)


@pytest.fixture
def settings() -> Settings:
    """Settings with defaults only, independent of the environment."""
    return Settings(_env_file=None)


@pytest.fixture
def metric() -> CosineSimilarityMetric:
    return CosineSimilarityMetric()


@pytest.fixture
def clusterer(metric) -> HierarchicalClusterer:
    return HierarchicalClusterer(SimilarityMatrixBuilder(metric))


@pytest.fixture
def resolver(metric, clusterer, settings) -> IdentityResolver:
    return IdentityResolver(metric, clusterer, settings=settings)


@pytest.fixture
def label_store() -> InMemoryLabelStore:
    return InMemoryLabelStore()


@pytest.fixture
def identities(label_store, resolver) -> PersonIdentityStore:
    return PersonIdentityStore(label_store, resolver)


@pytest.fixture
def search(identities, metric, settings) -> PersonSearchService:
    return PersonSearchService(identities, metric, settings=settings)
