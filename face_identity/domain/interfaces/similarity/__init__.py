"""Similarity interfaces package."""
from .metric import SimilarityMetric

__all__ = ["SimilarityMetric"]
