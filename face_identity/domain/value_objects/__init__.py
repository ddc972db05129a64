"""Value objects package."""
from .clustering import AddFaceResult, ClusteringOptions, ClusteringResult, Linkage
from .people import MergeCandidate, PersonSearchOptions, PersonStats, SortBy, SortOrder

__all__ = [
    "AddFaceResult",
    "ClusteringOptions",
    "ClusteringResult",
    "Linkage",
    "MergeCandidate",
    "PersonSearchOptions",
    "PersonStats",
    "SortBy",
    "SortOrder",
]
