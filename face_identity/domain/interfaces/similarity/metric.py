"""Similarity metric interface."""
from abc import ABC, abstractmethod

import numpy as np


class SimilarityMetric(ABC):
    """Interface for comparing two face embeddings."""

    @abstractmethod
    def compare(self, a: np.ndarray, b: np.ndarray) -> float:
        """
        Compare two embeddings.

        Args:
            a: First embedding vector
            b: Second embedding vector of the same length

        Returns:
            Similarity in the 0-1 range, 1 meaning identical direction

        Raises:
            EmbeddingDimensionError: If the embeddings differ in length
        """
        pass
