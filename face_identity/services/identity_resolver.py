"""Incremental updates and user corrections for person clusters."""
from typing import List, Optional, Sequence

from face_identity.core.config import Settings, settings as default_settings
from face_identity.core.exceptions import InvalidClusterError
from face_identity.core.logging import get_logger
from face_identity.domain.entities.face import Face
from face_identity.domain.entities.person import PersonCluster, utcnow
from face_identity.domain.entities.photo import Photo
from face_identity.domain.interfaces.similarity import SimilarityMetric
from face_identity.domain.value_objects.clustering import AddFaceResult, ClusteringOptions
from face_identity.services.clustering import HierarchicalClusterer, new_cluster_id

logger = get_logger(__name__)


class IdentityResolver:
    """Service mutating the set of person identities.

    Every operation returns new cluster objects; input clusters are never
    modified, so readers holding the previous collection stay consistent.

    Example:
        ```python
        resolver = IdentityResolver(metric, clusterer)
        result = resolver.add_face_to_cluster(face, clusters)
        merged = resolver.merge_clusters(clusters[0], clusters[1])
        fragments = resolver.split_cluster(merged)
        ```
    """

    def __init__(
        self,
        metric: SimilarityMetric,
        clusterer: HierarchicalClusterer,
        settings: Optional[Settings] = None,
    ) -> None:
        """Initialize the resolver.

        Args:
            metric: Metric used to compare a new face against cluster members
            clusterer: Clusterer re-run over a cluster's faces when splitting
            settings: Source of split defaults; module settings when omitted
        """
        self.metric = metric
        self.clusterer = clusterer
        self.settings = settings or default_settings

    def add_face_to_cluster(
        self,
        face: Face,
        existing_clusters: Sequence[PersonCluster],
        threshold: Optional[float] = None,
    ) -> AddFaceResult:
        """Attach a newly detected face to the best matching cluster.

        The match score of a cluster is the mean similarity between the face
        and the cluster members that have embeddings. The highest score meeting
        ``threshold`` wins; on equal scores the earlier cluster is kept.

        Args:
            face: Newly detected face
            existing_clusters: Current clusters, not modified
            threshold: Minimum mean similarity for joining a cluster;
                ``SIMILARITY_THRESHOLD`` when omitted

        Returns:
            AddFaceResult holding the updated cluster, a new singleton cluster,
            or no cluster at all when the face has no embedding
        """
        if not face.has_embedding:
            return AddFaceResult(cluster=None, is_new_cluster=False)
        if threshold is None:
            threshold = self.settings.SIMILARITY_THRESHOLD

        best_cluster: Optional[PersonCluster] = None
        best_similarity = 0.0
        for cluster in existing_clusters:
            similarity = self._mean_similarity_to_cluster(face, cluster)
            if similarity is None or similarity < threshold:
                continue
            if best_cluster is None or similarity > best_similarity:
                best_cluster = cluster
                best_similarity = similarity

        if best_cluster is not None:
            updated = best_cluster.model_copy(update={
                "faces": [*best_cluster.faces, face],
                "confidence": (best_cluster.confidence + best_similarity) / 2,
                "updated_at": utcnow(),
            })
            logger.debug(
                "Added face to existing cluster",
                face_id=face.id,
                cluster_id=updated.id,
                similarity=round(best_similarity, 4),
            )
            return AddFaceResult(cluster=updated, is_new_cluster=False)

        now = utcnow()
        created = PersonCluster(
            id=new_cluster_id(),
            faces=[face],
            photos=[],
            confidence=face.confidence,
            created_at=now,
            updated_at=now,
        )
        logger.debug("Created singleton cluster for face", face_id=face.id, cluster_id=created.id)
        return AddFaceResult(cluster=created, is_new_cluster=True)

    def merge_clusters(self, cluster1: PersonCluster, cluster2: PersonCluster) -> PersonCluster:
        """Combine two clusters into a new one.

        The caller must make sure the face sets are disjoint. Photo lists are
        concatenated without deduplication.

        Raises:
            InvalidClusterError: If both arguments are the same cluster
        """
        if cluster1.id == cluster2.id:
            raise InvalidClusterError(
                "Cannot merge a cluster with itself",
                details={"cluster_id": cluster1.id},
            )

        merged = PersonCluster(
            id=f"merged_{cluster1.id}_{cluster2.id}",
            faces=[*cluster1.faces, *cluster2.faces],
            photos=[*cluster1.photos, *cluster2.photos],
            confidence=(cluster1.confidence + cluster2.confidence) / 2,
            created_at=min(cluster1.created_at, cluster2.created_at),
            updated_at=utcnow(),
        )
        logger.info(
            "Merged clusters",
            source_ids=[cluster1.id, cluster2.id],
            cluster_id=merged.id,
            faces=len(merged.faces),
        )
        return merged

    def split_cluster(
        self,
        cluster: PersonCluster,
        options: Optional[ClusteringOptions] = None,
    ) -> List[PersonCluster]:
        """Re-partition an over-merged cluster with a stricter threshold.

        Clusters with fewer than ``MIN_FACES_TO_SPLIT`` faces are returned
        unchanged. Otherwise the cluster's faces are clustered again with the
        threshold raised by ``SPLIT_THRESHOLD_DELTA`` (from ``options`` when
        given, else the default threshold) and a minimum cluster size of 2.
        Faces left over by that pass become singleton fragments, so no face is
        lost. If the pass forms no group at all the cluster is returned
        unchanged.

        A photo is attached to every fragment that holds at least one of its
        faces, so one photo may appear under several fragments.

        Args:
            cluster: Cluster to split
            options: Base clustering options; the threshold is tightened

        Returns:
            Fragment clusters, or ``[cluster]`` when no split is possible
        """
        if len(cluster.faces) < self.settings.MIN_FACES_TO_SPLIT:
            logger.debug("Cluster too small to split", cluster_id=cluster.id, faces=len(cluster.faces))
            return [cluster]

        base = options or ClusteringOptions.from_settings(self.settings)
        stricter = base.model_copy(update={
            "similarity_threshold": min(1.0, base.similarity_threshold + self.settings.SPLIT_THRESHOLD_DELTA),
            "min_cluster_size": 2,
        })

        result = self.clusterer.cluster_faces(cluster.faces, stricter)
        if not result.clusters:
            logger.info(
                "Split produced no sub-clusters, keeping cluster",
                cluster_id=cluster.id,
                threshold=stricter.similarity_threshold,
            )
            return [cluster]

        now = utcnow()
        leftovers = [
            PersonCluster(
                id=new_cluster_id(),
                faces=[face],
                confidence=face.confidence,
                created_at=now,
                updated_at=now,
            )
            for face in result.unclustered_faces
        ]

        fragments = []
        for sub_cluster in [*result.clusters, *leftovers]:
            face_ids = sub_cluster.face_ids
            fragments.append(sub_cluster.model_copy(update={
                "id": f"split_{cluster.id}_{sub_cluster.id}",
                "photos": [photo for photo in cluster.photos if photo.has_any_face(face_ids)],
            }))

        logger.info(
            "Split cluster",
            cluster_id=cluster.id,
            fragments=len(fragments),
            fragment_sizes=[len(fragment.faces) for fragment in fragments],
            threshold=stricter.similarity_threshold,
        )
        return fragments

    def link_clusters_to_photos(
        self,
        clusters: Sequence[PersonCluster],
        photos: Sequence[Photo],
    ) -> List[PersonCluster]:
        """Attach to each cluster the photos carrying at least one member face."""
        now = utcnow()
        linked = []
        for cluster in clusters:
            face_ids = cluster.face_ids
            linked.append(cluster.model_copy(update={
                "photos": [photo for photo in photos if photo.has_any_face(face_ids)],
                "updated_at": now,
            }))
        return linked

    def _mean_similarity_to_cluster(self, face: Face, cluster: PersonCluster) -> Optional[float]:
        """Mean similarity to members with embeddings, or None if there are none."""
        similarities = [
            self.metric.compare(face.embedding, member.embedding)
            for member in cluster.faces
            if member.has_embedding
        ]
        if not similarities:
            return None
        return sum(similarities) / len(similarities)
