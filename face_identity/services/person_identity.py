"""Ownership of human-assigned person labels."""
import threading
import uuid
from typing import List, Optional, Sequence

from face_identity.core.logging import get_logger
from face_identity.domain.entities.person import PersonCluster, PersonLabel, utcnow
from face_identity.domain.interfaces.storage import LabelStore
from face_identity.domain.value_objects.clustering import ClusteringOptions
from face_identity.services.identity_resolver import IdentityResolver

logger = get_logger(__name__)


class PersonIdentityStore:
    """Service owning the label collection for person clusters.

    Clusters never embed their label; the label is looked up by cluster id.
    Mutations are serialized with a re-entrant lock, so one instance may be
    shared between threads.

    Example:
        ```python
        identities = PersonIdentityStore(InMemoryLabelStore(), resolver)
        identities.label_person(cluster.id, "Alice")
        merged = identities.merge_person_clusters(cluster, other)
        identities.get_person_label(merged.id).name  # "Alice"
        ```
    """

    def __init__(self, label_store: LabelStore, resolver: IdentityResolver) -> None:
        """Initialize the identity store.

        Args:
            label_store: Backend holding labels keyed by cluster id
            resolver: Resolver performing the cluster side of merges and splits
        """
        self._labels = label_store
        self._resolver = resolver
        self._lock = threading.RLock()

    def label_person(self, cluster_id: str, name: str) -> PersonLabel:
        """Name a cluster, renaming its existing label if there is one.

        Args:
            cluster_id: Cluster to label
            name: Person name

        Returns:
            The created or updated label
        """
        with self._lock:
            existing = self._labels.get(cluster_id)
            now = utcnow()
            if existing is not None:
                label = existing.model_copy(update={"name": name, "updated_at": now})
            else:
                label = PersonLabel(
                    id=str(uuid.uuid4()),
                    name=name,
                    cluster_id=cluster_id,
                    created_at=now,
                    updated_at=now,
                )
            self._labels.put(cluster_id, label)

        logger.info(
            "Labeled person",
            cluster_id=cluster_id,
            label_id=label.id,
            renamed=existing is not None,
        )
        return label

    def unlabel_person(self, cluster_id: str) -> bool:
        """Remove a cluster's label; True if one existed."""
        with self._lock:
            removed = self._labels.delete(cluster_id)
        if removed:
            logger.info("Removed person label", cluster_id=cluster_id)
        return removed

    def get_person_label(self, cluster_id: str) -> Optional[PersonLabel]:
        return self._labels.get(cluster_id)

    def get_all_person_labels(self) -> List[PersonLabel]:
        return self._labels.values()

    def merge_person_clusters(
        self,
        cluster1: PersonCluster,
        cluster2: PersonCluster,
        new_name: Optional[str] = None,
    ) -> PersonCluster:
        """Merge two clusters and carry their labels over.

        Both source labels are removed. The merged cluster is labeled with
        ``new_name`` if given, else the first source's name, else the
        second's. It stays unlabeled if neither source had a label and no
        name was supplied.

        Args:
            cluster1: First cluster; its name wins over the second's
            cluster2: Second cluster
            new_name: Explicit name for the merged person

        Returns:
            The merged cluster
        """
        merged = self._resolver.merge_clusters(cluster1, cluster2)

        with self._lock:
            label1 = self._labels.get(cluster1.id)
            label2 = self._labels.get(cluster2.id)
            self._labels.delete(cluster1.id)
            self._labels.delete(cluster2.id)

            final_name = new_name or (label1.name if label1 else None) or (label2.name if label2 else None)
            if final_name:
                self.label_person(merged.id, final_name)

        logger.info(
            "Cascaded labels after merge",
            cluster_id=merged.id,
            name=final_name,
            source_labels=[label.name for label in (label1, label2) if label is not None],
        )
        return merged

    def split_person_cluster(
        self,
        cluster: PersonCluster,
        new_names: Optional[Sequence[str]] = None,
        options: Optional[ClusteringOptions] = None,
    ) -> List[PersonCluster]:
        """Split a cluster and redistribute its label.

        If the cluster comes back unsplit its label is kept (or renamed when a
        single name is given). Otherwise the original label is removed. When
        ``new_names`` holds exactly one name per fragment, fragments are
        labeled in order. Otherwise, if the original cluster was labeled, only
        the fragment with the most faces inherits the name (the first one on
        equal counts) and the rest start unlabeled.

        Args:
            cluster: Cluster to split
            new_names: Optional name per resulting fragment
            options: Base clustering options for the split

        Returns:
            The fragments; ``[cluster]`` when the cluster could not be split
        """
        fragments = self._resolver.split_cluster(cluster, options)

        if len(fragments) == 1 and fragments[0] is cluster:
            # Nothing was split: the existing label stays attached
            if new_names is not None and len(new_names) == 1:
                self.label_person(cluster.id, new_names[0])
            return fragments

        with self._lock:
            original = self._labels.get(cluster.id)
            self._labels.delete(cluster.id)

            if new_names is not None and len(new_names) == len(fragments):
                for fragment, name in zip(fragments, new_names):
                    self.label_person(fragment.id, name)
            elif original is not None and fragments:
                largest = fragments[0]
                for fragment in fragments[1:]:
                    if len(fragment.faces) > len(largest.faces):
                        largest = fragment
                self.label_person(largest.id, original.name)

        if new_names is not None and len(new_names) != len(fragments):
            logger.warning(
                "Ignoring split names that do not match fragment count",
                cluster_id=cluster.id,
                names=len(new_names),
                fragments=len(fragments),
            )
        return fragments
