"""Person search, statistics and correction suggestions."""
import math
from typing import List, Optional, Sequence

from face_identity.core.config import Settings, settings as default_settings
from face_identity.core.logging import get_logger
from face_identity.domain.entities.face import Face
from face_identity.domain.entities.person import PersonCluster
from face_identity.domain.entities.photo import Photo
from face_identity.domain.interfaces.similarity import SimilarityMetric
from face_identity.domain.value_objects.people import (
    MergeCandidate,
    PersonSearchOptions,
    PersonStats,
    SortBy,
    SortOrder,
)
from face_identity.services.person_identity import PersonIdentityStore

logger = get_logger(__name__)

UNNAMED = "Unnamed"


class PersonSearchService:
    """Read-only queries over person clusters and their labels.

    Example:
        ```python
        search = PersonSearchService(identities, metric)
        people = search.search_people(clusters, PersonSearchOptions(name="ali"))
        stats = search.get_person_stats(clusters)
        candidates = search.suggest_merge_candidates(clusters, threshold=0.7)
        ```
    """

    def __init__(
        self,
        identities: PersonIdentityStore,
        metric: SimilarityMetric,
        settings: Optional[Settings] = None,
    ) -> None:
        """Initialize the search service.

        Args:
            identities: Store used to resolve cluster labels
            metric: Metric used for cluster similarity suggestions
            settings: Source of suggestion defaults; module settings when omitted
        """
        self.identities = identities
        self.metric = metric
        self.settings = settings or default_settings

    def search_people(
        self,
        clusters: Sequence[PersonCluster],
        options: Optional[PersonSearchOptions] = None,
    ) -> List[PersonCluster]:
        """Filter and sort clusters.

        Clusters need at least ``min_photos`` linked photos. A non-empty
        ``name`` keeps only clusters whose label contains it, ignoring case;
        unlabeled clusters never match. The sort is stable in both
        directions, so ties keep their input order.

        Args:
            clusters: Clusters to search
            options: Filters and ordering

        Returns:
            Matching clusters in the requested order
        """
        options = options or PersonSearchOptions()
        needle = options.name.casefold() if options.name else None

        matches = []
        for cluster in clusters:
            if len(cluster.photos) < options.min_photos:
                continue
            if needle:
                label = self.identities.get_person_label(cluster.id)
                if label is None or needle not in label.name.casefold():
                    continue
            matches.append(cluster)

        if options.sort_by is SortBy.NAME:
            key = self._name_key
        elif options.sort_by is SortBy.PHOTO_COUNT:
            key = lambda cluster: len(cluster.photos)
        elif options.sort_by is SortBy.CONFIDENCE:
            key = lambda cluster: cluster.confidence
        else:
            key = self._last_seen_key

        return sorted(matches, key=key, reverse=options.sort_order is SortOrder.DESC)

    def get_person_stats(self, clusters: Sequence[PersonCluster]) -> PersonStats:
        """Aggregate counts over clusters.

        ``average_photos_per_person`` is NaN for an empty cluster list.
        """
        total_people = len(clusters)
        labeled_people = sum(
            1 for cluster in clusters if self.identities.get_person_label(cluster.id) is not None
        )
        total_faces = sum(len(cluster.faces) for cluster in clusters)
        total_photos = sum(len(cluster.photos) for cluster in clusters)

        return PersonStats(
            total_people=total_people,
            labeled_people=labeled_people,
            unlabeled_clusters=total_people - labeled_people,
            total_faces=total_faces,
            average_photos_per_person=total_photos / total_people if total_people else math.nan,
        )

    def suggest_merge_candidates(
        self,
        clusters: Sequence[PersonCluster],
        threshold: Optional[float] = None,
    ) -> List[MergeCandidate]:
        """Find cluster pairs that probably show the same person.

        A pair qualifies when the mean similarity over all cross-cluster face
        pairs meets ``threshold``. Pairs labeled with two different names are
        skipped. Results are sorted by similarity, highest first.
        """
        if threshold is None:
            threshold = self.settings.MERGE_SUGGESTION_THRESHOLD

        candidates = []
        for i, cluster1 in enumerate(clusters):
            for cluster2 in clusters[i + 1:]:
                label1 = self.identities.get_person_label(cluster1.id)
                label2 = self.identities.get_person_label(cluster2.id)
                if label1 is not None and label2 is not None and label1.name != label2.name:
                    continue

                similarity = self._cross_cluster_similarity(cluster1, cluster2)
                if similarity >= threshold:
                    candidates.append(MergeCandidate(cluster1=cluster1, cluster2=cluster2, similarity=similarity))

        candidates.sort(key=lambda candidate: candidate.similarity, reverse=True)
        logger.debug("Suggested merge candidates", clusters=len(clusters), candidates=len(candidates))
        return candidates

    def suggest_split_candidates(
        self,
        clusters: Sequence[PersonCluster],
        min_faces_for_split: Optional[int] = None,
        max_internal_similarity: Optional[float] = None,
    ) -> List[PersonCluster]:
        """Find large clusters whose members do not cohere.

        Clusters with at least ``min_faces_for_split`` faces and a mean
        internal pairwise similarity below ``max_internal_similarity`` are
        returned, lowest confidence first.
        """
        if min_faces_for_split is None:
            min_faces_for_split = self.settings.SPLIT_SUGGESTION_MIN_FACES
        if max_internal_similarity is None:
            max_internal_similarity = self.settings.SPLIT_SUGGESTION_MAX_INTERNAL_SIMILARITY

        candidates = [
            cluster
            for cluster in clusters
            if len(cluster.faces) >= min_faces_for_split
            and self._internal_similarity(cluster) < max_internal_similarity
        ]
        candidates.sort(key=lambda cluster: cluster.confidence)
        return candidates

    def get_best_representative_face(self, cluster: PersonCluster) -> Optional[Face]:
        """Pick the face best suited to represent the person.

        Faces are scored by detection confidence plus 0.1 each for a smile,
        open eyes and a large bounding box, capped at 1.0. The first face
        wins on equal scores.
        """
        if not cluster.faces:
            return None
        return max(cluster.faces, key=self._face_score)

    def find_photos_of_person(self, cluster: PersonCluster, all_photos: Sequence[Photo]) -> List[Photo]:
        """Photos from ``all_photos`` containing any face of ``cluster``."""
        face_ids = cluster.face_ids
        return [photo for photo in all_photos if photo.has_any_face(face_ids)]

    def _name_key(self, cluster: PersonCluster):
        label = self.identities.get_person_label(cluster.id)
        name = label.name if label is not None else UNNAMED
        return name.casefold(), name

    @staticmethod
    def _last_seen_key(cluster: PersonCluster) -> float:
        # Clusters without photos sort as the oldest
        if not cluster.photos:
            return -math.inf
        return max(photo.updated_at.timestamp() for photo in cluster.photos)

    def _cross_cluster_similarity(self, cluster1: PersonCluster, cluster2: PersonCluster) -> float:
        similarities = [
            self.metric.compare(face1.embedding, face2.embedding)
            for face1 in cluster1.faces
            if face1.has_embedding
            for face2 in cluster2.faces
            if face2.has_embedding
        ]
        if not similarities:
            return 0.0
        return sum(similarities) / len(similarities)

    def _internal_similarity(self, cluster: PersonCluster) -> float:
        faces = [face for face in cluster.faces if face.has_embedding]
        similarities = [
            self.metric.compare(faces[i].embedding, faces[j].embedding)
            for i in range(len(faces))
            for j in range(i + 1, len(faces))
        ]
        if not similarities:
            return 1.0
        return sum(similarities) / len(similarities)

    def _face_score(self, face: Face) -> float:
        score = face.confidence
        attributes = face.attributes
        if attributes.smile is not None and attributes.smile > 0.5:
            score += 0.1
        if attributes.eyes_open is not None and attributes.eyes_open > 0.8:
            score += 0.1
        if face.bounding_box.area > self.settings.LARGE_FACE_AREA_FRACTION:
            score += 0.1
        return min(1.0, score)
