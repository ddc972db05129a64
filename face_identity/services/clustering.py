"""
Greedy agglomerative clustering of faces into person identities.

Every face starts as its own cluster. On each step the pair of clusters with
the highest linkage similarity is merged, as long as that similarity meets the
threshold; the first pair below the threshold stops the pass. The number of
resulting clusters therefore depends on the data and the threshold, not on a
requested k.

Inter-cluster similarities are kept in a table that is updated after each
merge instead of being recomputed from every face pair. Single linkage keeps
the row-wise maximum, complete linkage the minimum, and average linkage keeps
pair sums so the mean is exact for any cluster sizes.
"""
import time
import uuid
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from face_identity.core.logging import get_logger
from face_identity.domain.entities.face import Face
from face_identity.domain.entities.person import PersonCluster, utcnow
from face_identity.domain.value_objects.clustering import (
    ClusteringOptions,
    ClusteringResult,
    Linkage,
)
from face_identity.services.similarity import SimilarityMatrixBuilder

logger = get_logger(__name__)


def new_cluster_id() -> str:
    """Identifier for a freshly created person cluster."""
    return f"person_cluster_{uuid.uuid4().hex}"


class HierarchicalClusterer:
    """Threshold-gated agglomerative clusterer over a face similarity matrix.

    Example:
        ```python
        clusterer = HierarchicalClusterer(SimilarityMatrixBuilder(CosineSimilarityMetric()))
        result = clusterer.cluster_faces(
            faces,
            ClusteringOptions(similarity_threshold=0.6, linkage=Linkage.AVERAGE),
        )
        ```
    """

    def __init__(
        self,
        matrix_builder: SimilarityMatrixBuilder,
        default_options: Optional[ClusteringOptions] = None,
    ) -> None:
        """Initialize the clusterer.

        Args:
            matrix_builder: Builder for the pairwise face similarity matrix
            default_options: Options used when a call does not pass its own
        """
        self.matrix_builder = matrix_builder
        self.default_options = default_options or ClusteringOptions()

    def cluster_faces(
        self,
        faces: Sequence[Face],
        options: Optional[ClusteringOptions] = None,
    ) -> ClusteringResult:
        """Group faces into person clusters.

        Faces without embeddings never enter the similarity matrix and are
        always returned as unclustered. Clusters smaller than
        ``min_cluster_size`` are dissolved and their faces returned as
        unclustered too. Surviving clusters are ordered by face count, then by
        confidence, both descending (ties keep merge order) and truncated to
        ``max_clusters``; faces of truncated clusters are also unclustered.

        Args:
            faces: Faces to cluster
            options: Clustering parameters; the clusterer defaults when omitted

        Returns:
            ClusteringResult with clusters, unclustered faces and timing

        Raises:
            EmbeddingDimensionError: If embeddings differ in length
        """
        start = time.perf_counter()
        options = options or self.default_options

        qualifying = [face for face in faces if face.has_embedding]
        if len(qualifying) < options.min_cluster_size:
            logger.debug(
                "Not enough faces with embeddings to cluster",
                faces=len(faces),
                qualifying=len(qualifying),
                min_cluster_size=options.min_cluster_size,
            )
            return ClusteringResult(
                clusters=[],
                unclustered_faces=list(faces),
                processing_time=time.perf_counter() - start,
                parameters=options,
            )

        matrix = self.matrix_builder.build(qualifying)
        groups = self._agglomerate(matrix, options.similarity_threshold, options.linkage)

        valid = [group for group in groups if len(group[0]) >= options.min_cluster_size]
        ranked = sorted(valid, key=lambda group: (len(group[0]), group[1]), reverse=True)
        kept = ranked[:options.max_clusters]

        now = utcnow()
        clusters = [
            PersonCluster(
                id=new_cluster_id(),
                faces=[qualifying[index] for index in indices],
                photos=[],
                confidence=confidence,
                created_at=now,
                updated_at=now,
            )
            for indices, confidence in kept
        ]

        clustered_ids = {face.id for cluster in clusters for face in cluster.faces}
        unclustered = [face for face in faces if face.id not in clustered_ids]
        elapsed = time.perf_counter() - start

        logger.info(
            "Clustered faces",
            faces=len(faces),
            qualifying=len(qualifying),
            clusters=len(clusters),
            dropped_small=len(groups) - len(valid),
            truncated=len(valid) - len(kept),
            unclustered=len(unclustered),
            linkage=options.linkage.value,
            threshold=options.similarity_threshold,
            processing_time=round(elapsed, 4),
        )

        return ClusteringResult(
            clusters=clusters,
            unclustered_faces=unclustered,
            processing_time=elapsed,
            parameters=options,
        )

    def _agglomerate(
        self,
        matrix: np.ndarray,
        threshold: float,
        linkage: Linkage,
    ) -> List[Tuple[List[int], float]]:
        """Merge clusters greedily until the best pair falls below ``threshold``.

        Active clusters are kept in a list; a merge removes both members and
        appends the union at the end. The best pair is the first maximum in
        row-major order over that list, so ties go to the pair whose first
        member comes earliest, then whose second member comes earliest.

        Returns:
            (face indices, confidence) per cluster. Singletons have confidence
            1.0; merged clusters carry the similarity of their last merge.
        """
        n = matrix.shape[0]
        capacity = max(2 * n - 1, 1)

        # Linkage value per slot pair, or pair sums for average linkage
        table = np.full((capacity, capacity), -np.inf, dtype=np.float64)
        table[:n, :n] = matrix
        sizes = np.zeros(capacity, dtype=np.int64)
        sizes[:n] = 1

        members: Dict[int, List[int]] = {slot: [slot] for slot in range(n)}
        confidences: Dict[int, float] = {slot: 1.0 for slot in range(n)}
        order: List[int] = list(range(n))
        next_slot = n

        while len(order) > 1:
            active = np.asarray(order)
            scores = table[np.ix_(active, active)]
            if linkage is Linkage.AVERAGE:
                scores = scores / np.outer(sizes[active], sizes[active])
            scores[np.tril_indices(len(order))] = -np.inf

            i, j = divmod(int(np.argmax(scores)), len(order))
            best = float(scores[i, j])
            if best < threshold:
                break

            a, b = order[i], order[j]
            if linkage is Linkage.SINGLE:
                row = np.maximum(table[a], table[b])
            elif linkage is Linkage.COMPLETE:
                row = np.minimum(table[a], table[b])
            else:
                row = table[a] + table[b]

            merged = next_slot
            next_slot += 1
            table[merged, :] = row
            table[:, merged] = row
            sizes[merged] = sizes[a] + sizes[b]
            members[merged] = members.pop(a) + members.pop(b)
            confidences.pop(a)
            confidences.pop(b)
            confidences[merged] = best
            order = order[:i] + order[i + 1:j] + order[j + 1:] + [merged]

            logger.debug(
                "Merged clusters",
                similarity=round(best, 4),
                size=int(sizes[merged]),
                remaining=len(order),
            )

        return [(members[slot], confidences[slot]) for slot in order]
