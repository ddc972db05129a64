"""Service interfaces package."""
from .similarity import SimilarityMetric
from .storage import LabelStore

__all__ = ["LabelStore", "SimilarityMetric"]
