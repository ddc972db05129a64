"""Identity engine services."""
from .clustering import HierarchicalClusterer
from .identity_resolver import IdentityResolver
from .person_identity import PersonIdentityStore
from .person_search import PersonSearchService
from .similarity import CosineSimilarityMetric, SimilarityMatrixBuilder

__all__ = [
    "CosineSimilarityMetric",
    "HierarchicalClusterer",
    "IdentityResolver",
    "PersonIdentityStore",
    "PersonSearchService",
    "SimilarityMatrixBuilder",
]
