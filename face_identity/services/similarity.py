"""
Embedding similarity for face identity work.

Cosine similarity is remapped from [-1, 1] onto [0, 1] via ``(cos + 1) / 2`` so
that identical directions score 1, orthogonal vectors 0.5 and opposite
vectors 0. Faces without embeddings must be filtered out before anything in
this module is called.
"""
from typing import Optional, Sequence

import numpy as np

from face_identity.core.exceptions import EmbeddingDimensionError
from face_identity.core.logging import get_logger
from face_identity.domain.entities.face import Face
from face_identity.domain.interfaces.similarity import SimilarityMetric

logger = get_logger(__name__)


class CosineSimilarityMetric(SimilarityMetric):
    """Cosine similarity remapped to the 0-1 range.

    Mismatched lengths raise :class:`EmbeddingDimensionError`. A zero-norm
    vector (including an empty one) has no direction and scores 0.0 against
    anything.
    """

    def compare(self, a: np.ndarray, b: np.ndarray) -> float:
        a = np.asarray(a, dtype=np.float64)
        b = np.asarray(b, dtype=np.float64)
        if a.shape != b.shape:
            raise EmbeddingDimensionError(
                "Face embeddings must have the same length",
                details={"left_dim": int(a.size), "right_dim": int(b.size)},
            )

        magnitude = float(np.linalg.norm(a) * np.linalg.norm(b))
        if magnitude == 0.0:
            return 0.0
        # Rounding in the norm would otherwise leave identical vectors just below 1.0
        if np.array_equal(a, b):
            return 1.0

        cosine = float(np.dot(a, b)) / magnitude
        return float(min(1.0, max(0.0, (cosine + 1.0) / 2.0)))


def validate_embedding_dimensions(faces: Sequence[Face]) -> Optional[int]:
    """Check that all faces share one embedding length.

    Args:
        faces: Faces that all carry non-empty embeddings

    Returns:
        The shared dimension, or None for an empty sequence

    Raises:
        EmbeddingDimensionError: If two faces disagree on the dimension
    """
    dimension: Optional[int] = None
    for face in faces:
        size = int(face.embedding.size)
        if dimension is None:
            dimension = size
        elif size != dimension:
            raise EmbeddingDimensionError(
                "Faces carry embeddings of different lengths",
                details={"face_id": face.id, "expected_dim": dimension, "actual_dim": size},
            )
    return dimension


class SimilarityMatrixBuilder:
    """Builds the symmetric pairwise similarity table for a face set.

    Only the upper triangle is computed with the metric; the lower triangle is
    mirrored and the diagonal is fixed at 1.0.

    Example:
        ```python
        builder = SimilarityMatrixBuilder(CosineSimilarityMetric())
        matrix = builder.build(faces)
        matrix[0, 1] == matrix[1, 0]
        ```
    """

    def __init__(self, metric: SimilarityMetric) -> None:
        """Initialize the builder.

        Args:
            metric: Metric used for every pairwise comparison
        """
        self.metric = metric

    def build(self, faces: Sequence[Face]) -> np.ndarray:
        """Compute the similarity matrix for ``faces`` in the given order.

        Args:
            faces: Faces with non-empty embeddings of equal length

        Returns:
            ndarray of shape (n, n) with entries in [0, 1]

        Raises:
            EmbeddingDimensionError: If the embeddings differ in length
        """
        validate_embedding_dimensions(faces)

        n = len(faces)
        matrix = np.eye(n, dtype=np.float64)
        for i in range(n):
            for j in range(i + 1, n):
                similarity = self.metric.compare(faces[i].embedding, faces[j].embedding)
                matrix[i, j] = similarity
                matrix[j, i] = similarity

        logger.debug("Built similarity matrix", faces=n, comparisons=n * (n - 1) // 2)
        return matrix
